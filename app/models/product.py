import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Text,
    Float,
    Index,
)
from app.db.base import Base
from app.db.types import UTCDateTime


def generate_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    __tablename__ = "products"

    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
    )

    name = Column(
        String(255),
        nullable=False,
        comment="商品名称",
    )

    description = Column(
        Text,
        nullable=False,
        comment="商品描述",
    )

    price = Column(
        Float,
        nullable=False,
        comment="商品价格",
    )

    sku = Column(
        String(64),
        nullable=False,
        unique=True,
        comment="商品唯一SKU",
    )

    # 创建后不可修改
    created_at = Column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
    )


# -----------------------------
# 列表按创建时间倒序
# -----------------------------
Index(
    "idx_products_created_at",
    Product.created_at.desc(),
)
