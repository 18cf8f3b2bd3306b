"""
音频服务

处理音频上传、文本转语音和批量音频日志；语音合成失败或未配置时
写入固定时长的静音 WAV 占位，保证下游拿到的始终是合法文件
"""

import base64
import binascii
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
from loguru import logger

from endpoints import SpeechSynthesizer
from ghostroute.errors import FieldTypeError, GhostRouteError, MissingFieldError, PartialFailureError
from ghostroute.models import AudioLogResult
from ghostroute.services.ingest_service import IngestService
from ghostroute.utils import safe_file_name, silent_wav

AUDIO_LOG_DELAY = 500


class AudioService:
    """音频服务"""

    def __init__(
        self,
        server_path: str,
        public_path: str,
        synthesizer: SpeechSynthesizer,
        ingest_service: Optional[IngestService] = None,
        max_batch: int = 10,
    ):
        self.server_path = Path(server_path)
        self.public_path = public_path.rstrip("/")
        self.synthesizer = synthesizer
        self.ingest_service = ingest_service
        self.max_batch = max_batch

    def _url(self, name: str) -> str:
        return f"{self.public_path}/{name}"

    async def _write(self, name: str, data: bytes) -> Path:
        self.server_path.mkdir(parents=True, exist_ok=True)
        path = self.server_path / name
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        return path

    async def save_upload(self, file_name: str, payload: str) -> Dict[str, Any]:
        """
        保存 base64 音频

        Raises:
            FieldTypeError: 文件名或 base64 内容不合法
        """
        try:
            name = safe_file_name(file_name)
        except ValueError:
            raise FieldTypeError("fileName", expected="file name")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise FieldTypeError("base64", expected="base64 encoded audio")

        await self._write(name, data)
        return {"ok": True, "url": self._url(name)}

    async def synthesize(
        self,
        text: str,
        voice: str = "Charon",
        file_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        文本转语音，失败时写静音占位

        Returns:
            {ok, url, voice, stub, note?}
        """
        if not text or not text.strip():
            raise MissingFieldError("text")

        try:
            name = safe_file_name(file_name or f"tts_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}.wav")
        except ValueError:
            raise FieldTypeError("fileName", expected="file name")

        result: Dict[str, Any] = {"ok": True, "voice": voice, "stub": False}
        try:
            audio = await self.synthesizer.synthesize(text, voice)
        except GhostRouteError as e:
            logger.warning(f"⚠️  TTS unavailable, writing silent placeholder: {e}")
            audio = silent_wav()
            result["stub"] = True
            result["note"] = (
                "GEMINI_API_KEY missing; generated silent placeholder."
                if not self.synthesizer.configured
                else f"TTS failed; generated silent placeholder. ({e.message})"
            )

        await self._write(name, audio)
        result["url"] = self._url(name)
        return result

    async def synthesize_batch(
        self,
        logs: List[Dict[str, Any]],
        include_events: bool = False,
        chapter: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        批量生成音频日志，逐条返回结果，不吞掉任何失败

        Args:
            logs: [{text, voice?, fileName?, actor?}]
            include_events: 是否为每条成功的日志追加 audioLog 事件
            chapter: 事件写入的章节

        Returns:
            {ok, count, results, dbInserts, error?}
        """
        if not isinstance(logs, list) or not logs:
            raise MissingFieldError("logs")
        if len(logs) > self.max_batch:
            raise FieldTypeError("logs", expected=f"at most {self.max_batch} logs per batch")

        results: List[AudioLogResult] = []
        db_inserts = False

        for index, entry in enumerate(logs):
            entry = entry or {}
            text = entry.get("text") or ""
            voice = entry.get("voice") or "Charon"
            item = AudioLogResult(index=index, ok=False, text_preview=text[:80], voice=voice)
            try:
                synthesized = await self.synthesize(text, voice, entry.get("fileName"))
                item.url = synthesized["url"]
                item.stub = synthesized["stub"]

                if include_events and self.ingest_service is not None:
                    outcome = await self.ingest_service.append([{
                        "delay": AUDIO_LOG_DELAY,
                        "action": "audioLog",
                        "actor": entry.get("actor"),
                        "static_text": text,
                        "voice": entry.get("voice"),
                        "api_prompt": None,
                        "misc_data": None,
                    }], chapter=chapter)
                    if not outcome.ok:
                        item.error = outcome.error
                        results.append(item)
                        continue
                    item.event_order = outcome.orders[0]
                    db_inserts = True

                item.ok = True
            except GhostRouteError as e:
                logger.warning(f"⚠️  Audio log {index} failed: {e}")
                item.error = e.to_dict()
            results.append(item)

        payload = [r.model_dump(by_alias=True) for r in results]
        response: Dict[str, Any] = {
            "ok": all(r.ok for r in results),
            "count": len(results),
            "results": payload,
            "dbInserts": db_inserts,
        }
        if not response["ok"]:
            response["error"] = PartialFailureError(payload).to_dict()
        return response
