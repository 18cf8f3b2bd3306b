import base64
from typing import Optional

from endpoints.google import GoogleClient
from ghostroute.errors import UpstreamError
from ghostroute.utils import async_retry

TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

# 叙事音色 -> Google 音色
VOICE_MAP = {
    "Charon": "en-US-Wavenet-F",
}
DEFAULT_VOICE = "en-US-Wavenet-E"


class SpeechSynthesizer(GoogleClient):
    """Google 文本转语音"""

    def __init__(self, api_key: Optional[str] = None, language_code: str = "en-US", timeout: int = 30):
        super().__init__(api_key, timeout)
        self.language_code = language_code

    @staticmethod
    def voice_name(voice: Optional[str]) -> str:
        return VOICE_MAP.get(voice or "", DEFAULT_VOICE)

    async def _synthesize(self, text: str, voice: Optional[str], encoding: str) -> bytes:
        payload = {
            "input": {"text": text},
            "voice": {"languageCode": self.language_code, "name": self.voice_name(voice)},
            "audioConfig": {"audioEncoding": encoding},
        }
        data = await self.post(TTS_URL, payload)
        audio_content = data.get("audioContent")
        if not audio_content:
            raise UpstreamError("No audioContent in TTS response")
        return base64.b64decode(audio_content)

    @async_retry(max_attempts=2, delay=0.5, exceptions=(UpstreamError,))
    async def _synthesize_with_retry(self, text: str, voice: Optional[str]) -> bytes:
        return await self._synthesize(text, voice, "LINEAR16")

    async def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
        """文本转语音 - 返回 LINEAR16 WAV 原始字节

        Args:
            text: 要合成的文本
            voice: 叙事音色（如 Charon / Leda）

        Raises:
            UpstreamError: 未配置 Key 或调用失败
        """
        self.require_key()
        return await self._synthesize_with_retry(text, voice)

    async def probe(self) -> None:
        """健康检查：合成 OK，不重试"""
        await self._synthesize("OK", None, "MP3")
