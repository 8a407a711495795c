# app/schemas/product_image.py
from dataclasses import dataclass
from typing import List
from datetime import datetime

from app.schemas.base import BaseSchema, BaseResponse


@dataclass(frozen=True)
class ImageUpload:
    """解析后的单个上传文件"""
    content: bytes
    size: int
    content_type: str


class ProductImageSchema(BaseSchema):
    id: str
    product_id: str
    url: str
    position: int
    created_at: datetime


class ProductImageListResponse(BaseResponse):
    data: List[ProductImageSchema] = []
