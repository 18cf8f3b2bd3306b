import asyncio
import aiohttp
from typing import Optional

from ghostroute.errors import UpstreamError


class GoogleClient:
    """Google API 基础客户端（API Key 通过 query 参数传递）"""

    def __init__(self, api_key: Optional[str] = None, timeout: int = 30):
        self.api_key = api_key or ""
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def headers(self):
        return {"Content-Type": "application/json"}

    def require_key(self):
        if not self.configured:
            raise UpstreamError("API key is not configured", detail="missing_key")

    async def post(self, url: str, payload: dict, timeout: Optional[int] = None) -> dict:
        """发送POST请求，网络错误与非 2xx 响应统一抛出 UpstreamError"""
        self.require_key()

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    url,
                    json=payload,
                    params={"key": self.api_key},
                    headers=self.headers,
                    timeout=aiohttp.ClientTimeout(total=timeout or self.timeout)
                ) as response:
                    if response.status in [200, 201]:
                        return await response.json()
                    body = await response.text()
                    raise UpstreamError(f"Google API {response.status}: {body[:500]}", status=response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamError(f"Google API request failed: {e}") from e
