"""商品管理 API 路由"""

from fastapi import APIRouter, HTTPException, Path, Response, status
from typing import List
import logging

from app.core.dependencies import ProductServiceDep
from app.core.exceptions import InternalFault
from app.services.product_service import ProductService
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductSchema,
    ProductResponse,
    ProductListResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/products",
    tags=["商品管理"],
    responses={
        400: {"description": "请求参数错误或SKU重复"},
        404: {"description": "商品不存在"},
        500: {"description": "服务器内部错误"}
    }
)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="创建商品",
    responses={
        201: {
            "description": "创建成功",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "data": {
                            "id": "4f9c2a4e-6a53-4a55-9d57-0c3b1b8f1f6a",
                            "name": "Mug",
                            "description": "Ceramic mug",
                            "price": 19.9,
                            "sku": "MUG-1",
                            "createdAt": "2024-01-01T00:00:00+00:00"
                        }
                    }
                }
            }
        },
        400: {
            "description": "SKU已存在",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": "Validation error",
                        "message": "SKU already exists"
                    }
                }
            }
        }
    }
)
def create_product(
    payload: ProductCreate,
    service: ProductService = ProductServiceDep
):
    """创建商品，SKU 必须唯一"""
    try:
        product = service.create_product(payload)
        return {"success": True, "data": ProductSchema.model_validate(product)}
    except HTTPException:
        # 透传 HTTPException
        raise
    except Exception as e:
        logger.error(f"创建商品失败: {str(e)}", exc_info=True)
        # 未知异常统一抛 500
        raise InternalFault(str(e))


@router.get(
    "",
    response_model=ProductListResponse,
    summary="商品列表",
    description="返回全部商品，按创建时间倒序。"
)
def list_products(service: ProductService = ProductServiceDep):
    try:
        products = service.list_products()
        data: List[ProductSchema] = [ProductSchema.model_validate(p) for p in products]
        return {"success": True, "data": data}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询商品列表失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="更新商品",
    description="更新商品的名称、描述、价格和SKU，ID与创建时间不可修改。"
)
def update_product(
    payload: ProductUpdate,
    product_id: str = Path(
        ...,
        description="商品ID"
    ),
    service: ProductService = ProductServiceDep
):
    try:
        product = service.update_product(product_id, payload)
        return {"success": True, "data": ProductSchema.model_validate(product)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"更新商品失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="删除商品",
    description="删除商品及其全部图片（记录和本地文件）。"
)
def delete_product(
    product_id: str = Path(
        ...,
        description="商品ID"
    ),
    service: ProductService = ProductServiceDep
):
    try:
        service.delete_product(product_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"删除商品失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))
