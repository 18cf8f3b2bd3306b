"""
PEARL 对话与健康检查测试
"""

import pytest

from endpoints import TextGenerator
from ghostroute.errors import MissingFieldError, UpstreamError
from ghostroute.services import AIHealthService, PearlService
from tests.conftest import FakeGenerator, FakeSynthesizer


class TestPearl:

    async def test_reply_uses_primer(self):
        generator = FakeGenerator(reply="Check the handhole logs.")
        result = await PearlService(generator).respond("What now?")

        assert result == {"ok": True, "model": "fake-model", "stub": False, "response": "Check the handhole logs."}
        assert generator.prompts[0].startswith("You are PEARL")
        assert generator.prompts[0].endswith("User Query: What now?")

    async def test_missing_key_returns_labeled_stub(self):
        result = await PearlService(FakeGenerator(configured=False)).respond("status?")

        assert result["stub"] is True
        assert result["response"].startswith("STUB_PEARL:")
        assert "Gemini key missing" in result["response"]

    async def test_failure_returns_labeled_stub(self):
        result = await PearlService(FakeGenerator(fail=True)).respond("status?")

        assert result["stub"] is True
        assert result["response"].startswith("STUB_PEARL:")

    async def test_empty_prompt(self):
        with pytest.raises(MissingFieldError):
            await PearlService(FakeGenerator()).respond("")


class TestHealth:

    async def test_reports_both_collaborators(self):
        result = await AIHealthService(FakeGenerator(), FakeSynthesizer(fail_on={"x"})).check()

        assert result["gemini"]["ok"] is True
        assert "ms" in result["gemini"]
        assert result["tts"]["ok"] is False
        assert result["tts"]["detail"] == "TTS 500"

    async def test_missing_keys(self):
        result = await AIHealthService(
            FakeGenerator(configured=False), FakeSynthesizer(configured=False)
        ).check()

        assert result == {
            "gemini": {"ok": False, "detail": "missing_key"},
            "tts": {"ok": False, "detail": "missing_key"},
        }


class TestTextGenerator:

    def test_extract_text_joins_parts(self):
        data = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "there"}]}}]}
        assert TextGenerator.extract_text(data) == "Hello there"
        assert TextGenerator.extract_text({}) == ""

    async def test_generate_without_key(self):
        with pytest.raises(UpstreamError):
            await TextGenerator("").generate("hi")
