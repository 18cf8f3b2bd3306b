"""
音频服务测试（语音合成使用伪造客户端）
"""

import base64
import io
import wave

import pytest

from ghostroute.db.dao import EventDAO
from ghostroute.errors import FieldTypeError, MissingFieldError
from ghostroute.services import AudioService
from ghostroute.utils import safe_file_name, silent_wav
from tests.conftest import FakeSynthesizer


@pytest.fixture
def audio_dir(tmp_path):
    return tmp_path / "audio"


def make_service(audio_dir, synthesizer=None, ingest_service=None, max_batch=10):
    return AudioService(
        str(audio_dir), "/audio/", synthesizer or FakeSynthesizer(),
        ingest_service=ingest_service, max_batch=max_batch,
    )


class TestAudioUtils:

    def test_silent_wav_format(self):
        with wave.open(io.BytesIO(silent_wav()), "rb") as wav:
            assert wav.getnchannels() == 1
            assert wav.getsampwidth() == 2
            assert wav.getframerate() == 16000
            assert wav.getnframes() == 8000
            assert set(wav.readframes(wav.getnframes())) == {0}

    def test_safe_file_name(self):
        assert safe_file_name("../../etc/pass wd.wav") == "pass_wd.wav"
        assert safe_file_name("C:\\temp\\log 1.wav") == "log_1.wav"
        with pytest.raises(ValueError):
            safe_file_name("..")


class TestUpload:

    async def test_save_upload(self, audio_dir):
        payload = base64.b64encode(b"fake-bytes").decode()
        result = await make_service(audio_dir).save_upload("my log.wav", payload)

        assert result == {"ok": True, "url": "/audio/my_log.wav"}
        assert (audio_dir / "my_log.wav").read_bytes() == b"fake-bytes"

    async def test_invalid_base64(self, audio_dir):
        with pytest.raises(FieldTypeError):
            await make_service(audio_dir).save_upload("x.wav", "not base64!!")


class TestSynthesize:

    async def test_synthesized_audio_is_written(self, audio_dir):
        synthesizer = FakeSynthesizer()
        result = await make_service(audio_dir, synthesizer).synthesize("hello", "Charon", "hello.wav")

        assert result == {"ok": True, "voice": "Charon", "stub": False, "url": "/audio/hello.wav"}
        assert (audio_dir / "hello.wav").read_bytes() == b"RIFF-fake-audio"
        assert synthesizer.calls == [("hello", "Charon")]

    async def test_missing_key_writes_silent_stub(self, audio_dir):
        result = await make_service(audio_dir, FakeSynthesizer(configured=False)).synthesize("hello", file_name="s.wav")

        assert result["stub"] is True
        assert "GEMINI_API_KEY missing" in result["note"]
        assert (audio_dir / "s.wav").read_bytes() == silent_wav()

    async def test_upstream_failure_writes_silent_stub(self, audio_dir):
        result = await make_service(audio_dir, FakeSynthesizer(fail_on={"boom"})).synthesize("boom", file_name="b.wav")

        assert result["stub"] is True
        assert result["note"].startswith("TTS failed")

    async def test_empty_text(self, audio_dir):
        with pytest.raises(MissingFieldError):
            await make_service(audio_dir).synthesize("   ")


class TestBatch:

    async def test_all_ok_with_event_inserts(self, audio_dir, ingest_service, db):
        service = make_service(audio_dir, ingest_service=ingest_service)
        await ingest_service.ingest([{
            "event_order": 3, "delay": 0, "action": "comms", "actor": None,
            "static_text": None, "voice": None, "api_prompt": None, "misc_data": None,
        }], chapter=1)

        result = await service.synthesize_batch(
            [{"text": "log one", "fileName": "one.wav"}, {"text": "log two", "voice": "Leda", "actor": "PEARL"}],
            include_events=True, chapter=1,
        )

        assert result["ok"] is True
        assert result["count"] == 2
        assert result["dbInserts"] is True
        assert "error" not in result
        assert [r["insertedEventOrder"] for r in result["results"]] == [4, 5]

        async with db.session() as session:
            events = await EventDAO.list_ordered(session, 1)
        assert [(e.action, e.delay, e.static_text) for e in events[1:]] == [
            ("audioLog", 500, "log one"), ("audioLog", 500, "log two"),
        ]
        assert events[2].actor == "PEARL"

    async def test_partial_failure_is_reported_per_item(self, audio_dir):
        result = await make_service(audio_dir).synthesize_batch(
            [{"text": "fine"}, {"text": ""}, {"text": "also fine"}]
        )

        assert result["ok"] is False
        assert [r["ok"] for r in result["results"]] == [True, False, True]
        assert result["results"][1]["error"]["kind"] == "MissingFieldError"
        assert result["error"]["kind"] == "PartialFailureError"
        assert result["error"]["failed"] == [{"index": 1, "error": result["results"][1]["error"]}]

    async def test_batch_limit(self, audio_dir):
        with pytest.raises(FieldTypeError):
            await make_service(audio_dir, max_batch=2).synthesize_batch([{"text": "a"}] * 3)

    async def test_empty_batch(self, audio_dir):
        with pytest.raises(MissingFieldError):
            await make_service(audio_dir).synthesize_batch([])
