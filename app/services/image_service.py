"""商品图片服务实现"""

from sqlalchemy import select, func
from sqlalchemy.orm import Session
from typing import List, Sequence
import logging
import uuid

from app.core.exceptions import (
    NotFound,
    PayloadTooLarge,
    UnsupportedMediaType,
    ValidationError,
)
from app.models.product import Product
from app.models.product_images import ProductImage
from app.schemas.product_image import ImageUpload
from app.services.storage import LocalImageStorage

logger = logging.getLogger(__name__)

MAX_FILES_PER_REQUEST = 5
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

# 允许的图片类型及对应扩展名
MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}
ALLOWED_CONTENT_TYPES = frozenset(MIME_EXTENSIONS)


def validate_batch(uploads: Sequence[ImageUpload]) -> None:
    """校验整个上传批次，任一文件不合法则整批拒绝"""
    if not uploads:
        raise ValidationError("No images provided")

    if len(uploads) > MAX_FILES_PER_REQUEST:
        raise ValidationError(f"Maximum of {MAX_FILES_PER_REQUEST} files per request")

    for upload in uploads:
        if upload.size == 0:
            raise ValidationError("Empty file is not allowed")

        if upload.size > MAX_FILE_SIZE:
            raise PayloadTooLarge("Max size is 5MB per file")

        if upload.content_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedMediaType("Invalid image type")


class ImageService:
    """商品图片上传、查询、删除服务类"""

    def __init__(self, db: Session, storage: LocalImageStorage):
        self.db = db
        self.storage = storage

    def _ensure_product(self, product_id: str) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    def list_images(self, product_id: str) -> List[ProductImage]:
        """按 position、创建时间升序返回商品图片"""
        self._ensure_product(product_id)
        return list(
            self.db.execute(
                select(ProductImage)
                .where(ProductImage.product_id == product_id)
                .order_by(ProductImage.position.asc(), ProductImage.created_at.asc())
            ).scalars().all()
        )

    def next_position(self, product_id: str) -> int:
        """当前最大 position + 1，没有图片时为 0"""
        current_max = self.db.execute(
            select(func.max(ProductImage.position))
            .where(ProductImage.product_id == product_id)
        ).scalar_one_or_none()
        return 0 if current_max is None else current_max + 1

    def upload_images(self, product_id: str, uploads: Sequence[ImageUpload]) -> List[ProductImage]:
        """上传一批图片

        所有校验在写入任何文件之前完成。写入阶段逐个文件先落盘再插入记录，
        中途失败时已写入的文件和记录保留，剩余文件不再处理。
        """
        self._ensure_product(product_id)
        validate_batch(uploads)

        start = self.next_position(product_id)
        created: List[ProductImage] = []

        for index, upload in enumerate(uploads):
            extension = MIME_EXTENSIONS[upload.content_type]
            filename = f"{uuid.uuid4().hex}.{extension}"
            url = self.storage.save(filename, upload.content)

            image = ProductImage(
                product_id=product_id,
                url=url,
                position=start + index,
            )
            self.db.add(image)
            try:
                self.db.commit()
            except Exception as e:
                self.db.rollback()
                logger.error(
                    f"保存图片记录失败: product_id={product_id}, file={filename}, "
                    f"saved={len(created)}/{len(uploads)}, error={str(e)}"
                )
                raise
            created.append(image)

        logger.info(
            f"上传图片成功: product_id={product_id}, count={len(created)}, "
            f"positions={start}..{start + len(created) - 1}"
        )
        return created

    def delete_image(self, product_id: str, image_id: str) -> None:
        """删除单张图片，记录为准，文件尽力删除"""
        self._ensure_product(product_id)

        image = self.db.execute(
            select(ProductImage)
            .where(
                ProductImage.id == image_id,
                ProductImage.product_id == product_id
            )
        ).scalar_one_or_none()

        if image is None:
            raise NotFound("Image not found")

        url = image.url
        try:
            self.db.delete(image)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"删除图片失败: image_id={image_id}, error={str(e)}")
            raise

        removed = self.storage.remove(url)
        logger.info(f"删除图片成功: product_id={product_id}, image_id={image_id}, file_removed={removed}")
