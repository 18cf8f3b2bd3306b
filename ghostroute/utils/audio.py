"""
音频工具
"""

import io
import re
import wave
from pathlib import Path

SILENT_SAMPLE_RATE = 16000
SILENT_DURATION = 0.5

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def silent_wav(duration: float = SILENT_DURATION, sample_rate: int = SILENT_SAMPLE_RATE) -> bytes:
    """
    生成静音 WAV（单声道、16-bit PCM）

    语音合成不可用时作为占位，保证前端拿到的始终是合法的音频文件
    """
    frames = int(sample_rate * duration)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(b"\x00\x00" * frames)
    return buffer.getvalue()


def safe_file_name(file_name: str) -> str:
    """只保留文件名部分，非法字符替换为下划线"""
    name = Path(file_name.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name)
    if name in ("", ".", ".."):
        raise ValueError(f"Invalid file name: {file_name!r}")
    return name
