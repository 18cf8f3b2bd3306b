from typing import Optional

from endpoints.google import GoogleClient
from ghostroute.errors import UpstreamError
from ghostroute.utils import async_retry

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class TextGenerator(GoogleClient):
    """Gemini 文本生成"""

    def __init__(self, api_key: Optional[str] = None, model: str = "gemini-1.5-flash-latest", timeout: int = 30):
        super().__init__(api_key, timeout)
        self.model = model

    @property
    def url(self) -> str:
        return f"{GEMINI_BASE_URL}/{self.model}:generateContent"

    @staticmethod
    def extract_text(data: dict) -> str:
        """拼接第一个候选的全部文本片段"""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts).strip()

    async def _generate(
        self,
        prompt: str,
        temperature: float = 0.4,
        max_output_tokens: Optional[int] = None
    ) -> str:
        generation_config = {"temperature": temperature}
        if max_output_tokens is not None:
            generation_config["maxOutputTokens"] = max_output_tokens

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        data = await self.post(self.url, payload)
        text = self.extract_text(data)
        if not text:
            raise UpstreamError("Gemini returned no text")
        return text

    @async_retry(max_attempts=2, delay=0.5, exceptions=(UpstreamError,))
    async def _generate_with_retry(self, prompt: str, temperature: float) -> str:
        return await self._generate(prompt, temperature)

    async def generate(self, prompt: str, temperature: float = 0.4) -> str:
        """文本生成

        Args:
            prompt: 提示词
            temperature: 采样温度

        Returns:
            str: 生成的文本

        Raises:
            UpstreamError: 未配置 Key 或调用失败
        """
        self.require_key()
        return await self._generate_with_retry(prompt, temperature)

    async def probe(self) -> None:
        """健康检查：最小请求，不重试"""
        await self._generate("ONE-WORD: OK", temperature=0, max_output_tokens=1)
