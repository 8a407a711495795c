"""比特币行情代理路由"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
import logging

from app.core.dependencies import PriceServiceDep
from app.core.exceptions import InternalFault
from app.services.price_service import PriceService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["行情"])


@router.get(
    "/bitcoin-info",
    summary="比特币行情",
    description="转发第三方行情 API 的响应，内容不做修改。",
    responses={502: {"description": "第三方 API 调用失败"}}
)
def bitcoin_info(service: PriceService = PriceServiceDep):
    try:
        return JSONResponse(content=service.fetch_bitcoin_info())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"获取比特币行情失败: {str(e)}", exc_info=True)
        raise InternalFault(str(e))
