# app/schemas/product.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime

from app.schemas.base import BaseSchema, BaseResponse


class ProductPayload(BaseModel):
    """创建/更新商品的请求体"""
    name: str = Field(
        ...,
        min_length=1,
        description="商品名称",
        examples=["Mug"]
    )
    description: str = Field(
        ...,
        min_length=1,
        description="商品描述",
        examples=["Ceramic mug"]
    )
    price: float = Field(
        ...,
        gt=0,
        description="商品价格",
        examples=[19.9]
    )
    sku: str = Field(
        ...,
        min_length=1,
        description="商品唯一SKU",
        examples=["MUG-1"]
    )

    model_config = ConfigDict(str_strip_whitespace=True)


ProductCreate = ProductPayload
ProductUpdate = ProductPayload


class ProductSchema(BaseSchema):
    id: str
    name: str
    description: str
    price: float
    sku: str
    created_at: datetime


class ProductResponse(BaseResponse):
    data: ProductSchema


class ProductListResponse(BaseResponse):
    data: List[ProductSchema] = []
