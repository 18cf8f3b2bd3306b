"""
测试公共夹具：基于 aiosqlite 的临时数据库、伪造的 AI 客户端
"""

from typing import Any, Dict, List, Optional

import pytest

from ghostroute.db.base import Database
from ghostroute.errors import UpstreamError
from ghostroute.services import FallbackWriter, IngestService


def make_event(order: Optional[int], action: str = "comms", **overrides: Any) -> Dict[str, Any]:
    """构造一条字段齐全的事件"""
    event = {
        "event_order": order,
        "delay": 500,
        "action": action,
        "actor": "KNOX",
        "static_text": f"beat {order}",
        "voice": None,
        "api_prompt": None,
        "misc_data": None,
    }
    event.update(overrides)
    return event


@pytest.fixture
async def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'events.db'}", operation_timeout=10)
    await database.open()
    await database.ensure_schema()
    yield database
    await database.close()


@pytest.fixture
def fallback_dir(tmp_path):
    return tmp_path / "fallback"


@pytest.fixture
def ingest_service(db, fallback_dir):
    return IngestService(db, fallback_writer=FallbackWriter(str(fallback_dir)))


class FakeGenerator:
    """伪造的文本生成客户端"""

    def __init__(self, reply: str = "Trace the conduit.", configured: bool = True, fail: bool = False):
        self.reply = reply
        self.configured = configured
        self.fail = fail
        self.model = "fake-model"
        self.prompts: List[str] = []

    async def generate(self, prompt: str, temperature: float = 0.4) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise UpstreamError("Gemini API 500: boom", status=500)
        return self.reply

    async def probe(self) -> None:
        if self.fail:
            raise UpstreamError("Gemini API 500: boom", status=500)


class FakeSynthesizer:
    """伪造的语音合成客户端，可以指定哪些文本合成失败"""

    def __init__(self, configured: bool = True, fail_on: Optional[set] = None):
        self.configured = configured
        self.fail_on = fail_on or set()
        self.calls: List[tuple] = []

    async def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
        self.calls.append((text, voice))
        if not self.configured:
            raise UpstreamError("API key is not configured", detail="missing_key")
        if text in self.fail_on:
            raise UpstreamError("TTS 500")
        return b"RIFF-fake-audio"

    async def probe(self) -> None:
        if self.fail_on:
            raise UpstreamError("TTS 500")
