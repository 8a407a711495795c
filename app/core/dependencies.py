"""依赖注入配置模块"""

from functools import lru_cache

from fastapi import Depends

# 数据库会话依赖
from app.db.session import SessionLocal
from sqlalchemy.orm import Session

from app.core.config import settings
from app.services.image_service import ImageService
from app.services.price_service import PriceService
from app.services.product_service import ProductService
from app.services.storage import LocalImageStorage


def get_db() -> Session:
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache()
def get_image_storage() -> LocalImageStorage:
    """获取本地图片存储（进程内单例）"""
    return LocalImageStorage(settings.UPLOADS_ROOT, settings.UPLOADS_URL_PREFIX)


def get_price_service() -> PriceService:
    """获取行情代理服务"""
    return PriceService(
        url=settings.PRICE_API_URL,
        api_key=settings.PRICE_API_KEY,
        timeout=settings.PRICE_API_TIMEOUT,
    )


def get_product_service(
    db: Session = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage)
) -> ProductService:
    """获取商品服务实例（依赖注入）"""
    return ProductService(db=db, storage=storage)


def get_image_service(
    db: Session = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage)
) -> ImageService:
    """获取图片服务实例（依赖注入）"""
    return ImageService(db=db, storage=storage)


# 常用的依赖注入别名
ProductServiceDep = Depends(get_product_service)
ImageServiceDep = Depends(get_image_service)
PriceServiceDep = Depends(get_price_service)
