"""
API 依赖注入 - 数据库句柄、服务实例等

进程级资源（数据库句柄、AI 客户端）在应用启动时挂到 app.state 上，
这里按请求组装服务
"""

from typing import Optional

from fastapi import Depends, Request

from endpoints import SpeechSynthesizer, TextGenerator
from ghostroute.config import settings
from ghostroute.db.base import Database
from ghostroute.services import (
    AIHealthService, AudioService, FallbackWriter, IngestService, PearlService, RedactionService
)


def get_database(request: Request) -> Optional[Database]:
    """数据库句柄，未配置或启动失败时为 None"""
    return getattr(request.app.state, "db", None)


def get_text_generator(request: Request) -> TextGenerator:
    generator = getattr(request.app.state, "text_generator", None)
    if generator is None:
        generator = TextGenerator(settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.AI_REQUEST_TIMEOUT)
    return generator


def get_speech_synthesizer(request: Request) -> SpeechSynthesizer:
    synthesizer = getattr(request.app.state, "speech_synthesizer", None)
    if synthesizer is None:
        synthesizer = SpeechSynthesizer(settings.GEMINI_API_KEY, settings.TTS_LANGUAGE, settings.AI_REQUEST_TIMEOUT)
    return synthesizer


def get_ingest_service(db: Optional[Database] = Depends(get_database)) -> IngestService:
    return IngestService(db, fallback_writer=FallbackWriter(settings.FALLBACK_DIR))


def get_audio_service(
    synthesizer: SpeechSynthesizer = Depends(get_speech_synthesizer),
    ingest_service: IngestService = Depends(get_ingest_service)
) -> AudioService:
    return AudioService(
        settings.AUDIO_SERVER_PATH,
        settings.AUDIO_PUBLIC_PATH,
        synthesizer,
        ingest_service=ingest_service,
        max_batch=settings.AUDIO_MAX_BATCH,
    )


def get_pearl_service(generator: TextGenerator = Depends(get_text_generator)) -> PearlService:
    return PearlService(generator)


def get_health_service(
    generator: TextGenerator = Depends(get_text_generator),
    synthesizer: SpeechSynthesizer = Depends(get_speech_synthesizer)
) -> AIHealthService:
    return AIHealthService(generator, synthesizer)


def get_redaction_service(db: Optional[Database] = Depends(get_database)) -> RedactionService:
    return RedactionService(db)
