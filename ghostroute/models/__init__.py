"""
数据模型模块

导出所有 Pydantic 数据模型，用于 API 请求/响应验证
"""

# 通用响应
from .response import ErrorResponse

# 事件模块
from .event import EventRecord, EventAppendRequest, EventIngestRequest

# 导入流程
from .ingest import IngestOutcome, AppendOutcome, MigrationResult

# 音频与AI
from .audio import (
    AudioUpload, TtsRequest, AudioLogBatchRequest, AudioLogResult,
    PearlRequest, RedactionCreate
)

__all__ = [
    # Response
    "ErrorResponse",

    # Event
    "EventRecord",
    "EventAppendRequest",
    "EventIngestRequest",

    # Ingest
    "IngestOutcome",
    "AppendOutcome",
    "MigrationResult",

    # Audio / AI
    "AudioUpload",
    "TtsRequest",
    "AudioLogBatchRequest",
    "AudioLogResult",
    "PearlRequest",
    "RedactionCreate",
]
