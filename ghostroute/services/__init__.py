"""
业务服务层
"""

from .validator import EventValidator, ValidationReport, validate_events
from .order_allocator import OrderAllocator
from .fallback_writer import FallbackWriter
from .ingest_service import IngestService
from .migration_runner import MigrationRunner
from .seed_service import SeedService
from .audio_service import AudioService
from .ai_service import PearlService, AIHealthService
from .redaction_service import RedactionService

__all__ = [
    # 导入流程
    "EventValidator",
    "ValidationReport",
    "validate_events",
    "OrderAllocator",
    "FallbackWriter",
    "IngestService",
    "MigrationRunner",
    "SeedService",
    # 音频与AI
    "AudioService",
    "PearlService",
    "AIHealthService",
    # 涂黑文档
    "RedactionService",
]
