"""商品图片 API 路由"""

from fastapi import APIRouter, File, HTTPException, Path, Response, UploadFile, status
from starlette.concurrency import run_in_threadpool
from typing import List, Optional
import logging

from app.core.dependencies import ImageServiceDep
from app.core.exceptions import InternalFault
from app.services.image_service import ImageService, MAX_FILE_SIZE, MAX_FILES_PER_REQUEST
from app.schemas.product_image import (
    ImageUpload,
    ProductImageSchema,
    ProductImageListResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/products/{product_id}/images",
    tags=["商品图片"],
    responses={
        404: {"description": "商品或图片不存在"},
        500: {"description": "服务器内部错误"}
    }
)


async def parse_uploads(files: Optional[List[UploadFile]]) -> List[ImageUpload]:
    """把 multipart 文件转换为 ImageUpload 列表

    超过大小上限的文件不会被完整读入内存，只记录大小，由服务层按顺序返回 413。
    """
    uploads = []
    for f in files or []:
        if f.size is not None and f.size > MAX_FILE_SIZE:
            content = b""
            size = f.size
        else:
            content = await f.read(MAX_FILE_SIZE + 1)
            size = max(len(content), f.size or 0)
        uploads.append(ImageUpload(
            content=content,
            size=size,
            content_type=f.content_type or "",
        ))
    return uploads


@router.get(
    "",
    response_model=ProductImageListResponse,
    summary="商品图片列表",
    description="按 position、创建时间升序返回商品图片。"
)
def list_images(
    product_id: str = Path(..., description="商品ID"),
    service: ImageService = ImageServiceDep
):
    try:
        images = service.list_images(product_id)
        return {"success": True, "data": [ProductImageSchema.model_validate(i) for i in images]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"查询商品图片失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))


@router.post(
    "",
    response_model=ProductImageListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="上传商品图片",
    description=f"""multipart 字段 `images`，每次 1~{MAX_FILES_PER_REQUEST} 个文件。

    **限制：**
    - 单个文件不超过 5MB（413）
    - 仅支持 image/jpeg、image/png、image/webp（415）
    - 任一文件校验失败，整批不保存
    """,
    responses={
        400: {"description": "未提供文件、文件过多或空文件"},
        413: {"description": "文件过大"},
        415: {"description": "不支持的图片类型"}
    }
)
async def upload_images(
    product_id: str = Path(..., description="商品ID"),
    images: Optional[List[UploadFile]] = File(None, description="图片文件"),
    service: ImageService = ImageServiceDep
):
    try:
        uploads = await parse_uploads(images)
        # 写文件和提交数据库是阻塞操作，放到线程池执行
        created = await run_in_threadpool(service.upload_images, product_id, uploads)
        return {"success": True, "data": [ProductImageSchema.model_validate(i) for i in created]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"上传商品图片失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))
    finally:
        for f in images or []:
            await f.close()


@router.delete(
    "/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="删除商品图片"
)
def delete_image(
    product_id: str = Path(..., description="商品ID"),
    image_id: str = Path(..., description="图片ID"),
    service: ImageService = ImageServiceDep
):
    try:
        service.delete_image(product_id, image_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"删除商品图片失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))
