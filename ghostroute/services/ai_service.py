"""
AI 服务

PEARL 分析员对话与外部 AI 服务健康检查；文本生成失败或未配置时
返回带明确标记的占位回复，不返回空内容
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from loguru import logger

from endpoints import SpeechSynthesizer, TextGenerator
from ghostroute.errors import GhostRouteError, MissingFieldError

PEARL_PRIMER = (
    "You are PEARL, an investigative relay. Be concise, analytical, and evidence-focused. "
    "Offer next actionable steps."
)


class PearlService:
    """PEARL 对话服务"""

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    @staticmethod
    def stub_response(prompt: str, reason: str) -> str:
        return f"STUB_PEARL: ({datetime.now(timezone.utc).isoformat()}) {prompt[:120]} ... [{reason}]"

    async def respond(self, prompt: str) -> Dict[str, Any]:
        """
        生成分析员风格的回复

        Returns:
            {ok, model, response, stub}
        """
        if not prompt or not prompt.strip():
            raise MissingFieldError("prompt")

        if not self.generator.configured:
            return {
                "ok": True,
                "model": "stub",
                "stub": True,
                "response": self.stub_response(prompt, "Gemini key missing"),
            }

        try:
            text = await self.generator.generate(f"{PEARL_PRIMER}\nUser Query: {prompt}", temperature=0.4)
        except GhostRouteError as e:
            logger.error(f"❌ PEARL generation failed: {e}")
            return {
                "ok": True,
                "model": "stub",
                "stub": True,
                "response": self.stub_response(prompt, f"generation failed: {e.message}"),
            }

        return {"ok": True, "model": self.generator.model, "stub": False, "response": text}


class AIHealthService:
    """外部 AI 服务健康检查"""

    def __init__(self, generator: TextGenerator, synthesizer: SpeechSynthesizer):
        self.generator = generator
        self.synthesizer = synthesizer

    @staticmethod
    async def _probe(client) -> Dict[str, Any]:
        if not client.configured:
            return {"ok": False, "detail": "missing_key"}
        start = time.monotonic()
        try:
            await client.probe()
        except GhostRouteError as e:
            return {"ok": False, "ms": int((time.monotonic() - start) * 1000), "detail": e.message}
        return {"ok": True, "ms": int((time.monotonic() - start) * 1000)}

    async def check(self) -> Dict[str, Any]:
        """
        Returns:
            {gemini: {ok, ms?, detail?}, tts: {ok, ms?, detail?}}
        """
        return {
            "gemini": await self._probe(self.generator),
            "tts": await self._probe(self.synthesizer),
        }
