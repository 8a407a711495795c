"""商品服务实现"""

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.core.exceptions import DuplicateKey, NotFound
from app.models.product import Product
from app.models.product_images import ProductImage
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.storage import LocalImageStorage

logger = logging.getLogger(__name__)


class ProductService:
    """商品增删改查服务类"""

    def __init__(self, db: Session, storage: Optional[LocalImageStorage] = None):
        self.db = db
        self.storage = storage

    def get_product(self, product_id: str) -> Product:
        """查询单个商品，不存在时抛出 NotFound"""
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    def list_products(self) -> List[Product]:
        """按创建时间倒序返回全部商品"""
        return list(
            self.db.execute(
                select(Product).order_by(Product.created_at.desc())
            ).scalars().all()
        )

    def create_product(self, payload: ProductCreate) -> Product:
        """创建商品（SKU 冲突时抛出 DuplicateKey）"""
        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            sku=payload.sku,
        )
        self.db.add(product)
        self._commit_unique_sku(payload.sku)
        logger.info(f"创建商品成功: id={product.id}, sku={product.sku}")
        return product

    def update_product(self, product_id: str, payload: ProductUpdate) -> Product:
        """更新商品的 name/description/price/sku，id 与创建时间保持不变"""
        product = self.get_product(product_id)

        product.name = payload.name
        product.description = payload.description
        product.price = payload.price
        product.sku = payload.sku

        self._commit_unique_sku(payload.sku)
        logger.info(f"更新商品成功: id={product.id}, sku={product.sku}")
        return product

    def delete_product(self, product_id: str) -> None:
        """删除商品及其全部图片

        先在同一事务内收集图片地址并删除图片行和商品行，
        提交成功后再尽力删除本地文件，文件删除失败只记日志。
        """
        product = self.get_product(product_id)

        image_urls = self.db.execute(
            select(ProductImage.url).where(ProductImage.product_id == product_id)
        ).scalars().all()

        try:
            self.db.execute(
                delete(ProductImage).where(ProductImage.product_id == product_id)
            )
            self.db.delete(product)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"删除商品失败: id={product_id}, error={str(e)}")
            raise

        removed = 0
        if self.storage:
            for url in image_urls:
                if self.storage.remove(url):
                    removed += 1

        logger.info(
            f"删除商品成功: id={product_id}, images={len(image_urls)}, files_removed={removed}"
        )

    def _commit_unique_sku(self, sku: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"SKU 冲突: sku={sku}, error={e.orig}")
            raise DuplicateKey("SKU already exists")
        except Exception as e:
            self.db.rollback()
            logger.error(f"保存商品失败: {str(e)}")
            raise
