"""业务异常定义

所有业务异常都继承自 HTTPException，由 app.main 中的全局处理器
统一转换为 {"success": false, "error": ..., "message": ...} 响应。
"""

from fastapi import HTTPException


class CatalogError(HTTPException):
    """业务异常基类"""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message


class ValidationError(CatalogError):
    """请求参数或上传批次不合法"""
    status_code = 400
    error = "Validation error"


class DuplicateKey(CatalogError):
    """SKU 重复"""
    status_code = 400
    error = "Validation error"


class NotFound(CatalogError):
    status_code = 404
    error = "Not found"


class PayloadTooLarge(CatalogError):
    status_code = 413
    error = "File too large"


class UnsupportedMediaType(CatalogError):
    status_code = 415
    error = "Unsupported media type"


class UpstreamFailure(CatalogError):
    """第三方 API 调用失败"""
    status_code = 502
    error = "Bad gateway"


class InternalFault(CatalogError):
    status_code = 500
    error = "Internal server error"


def error_label(exc: HTTPException) -> str:
    """获取异常对应的错误类别"""
    label = getattr(exc, "error", None)
    if label:
        return label
    if exc.status_code == 404:
        return "Not found"
    if exc.status_code < 500:
        return "Bad request"
    return "Internal server error"
