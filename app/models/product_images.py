from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    CheckConstraint,
    Index,
)
from app.db.base import Base
from app.db.types import UTCDateTime
from app.models.product import generate_id, utc_now


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
    )

    product_id = Column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        comment="商品ID",
    )

    url = Column(
        String(512),
        nullable=False,
        comment="图片地址（本地上传为 /uploads/products/ 前缀）",
    )

    # 按商品递增分配，删除后不重排
    position = Column(
        Integer,
        nullable=False,
        default=0,
        comment="展示顺序",
    )

    created_at = Column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
    )

    __table_args__ = (
        CheckConstraint(
            "position >= 0",
            name="ck_product_images_position_non_negative",
        ),
    )


Index(
    "idx_product_images_product_position",
    ProductImage.product_id,
    ProductImage.position,
)
