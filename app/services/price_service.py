"""比特币行情代理服务"""

from typing import Any
import logging

import requests

from app.core.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)


class PriceService:
    """调用第三方行情 API，响应原样返回"""

    def __init__(self, url: str, api_key: str, timeout: float = 10.0):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def fetch_bitcoin_info(self) -> Any:
        """单次请求，不重试"""
        try:
            resp = requests.get(
                self.url,
                headers={"X-Api-Key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Price API request failed: {e}")
            raise UpstreamFailure("Failed to fetch bitcoin data")

        if not resp.ok:
            logger.warning(f"Price API returned {resp.status_code}")
            raise UpstreamFailure("Failed to fetch bitcoin data")

        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"Price API returned invalid JSON: {e}")
            raise UpstreamFailure("Failed to fetch bitcoin data")
