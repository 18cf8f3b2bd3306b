"""
应用全局配置

从 config.yaml 加载配置，支持环境变量覆盖（.env 会被自动加载）
"""

import os
from pathlib import Path
from typing import Any, List, Optional

import dotenv
import yaml

dotenv.load_dotenv()

CONFIG_PATH = Path(__file__).parent.parent.parent / "config.yaml"


def _as_bool(value: Any) -> bool:
    return str(value).lower() in ("true", "1", "yes")


class Settings:
    """应用全局配置（从 config.yaml 加载）"""

    def __init__(self, config_path: Optional[Path] = None):
        # 加载 config.yaml，缺失时全部使用默认值
        path = Path(os.getenv("GHOSTROUTE_CONFIG", config_path or CONFIG_PATH))
        if path.exists():
            with open(path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

    def _get(self, section: str, key: str, default: Any = None) -> Any:
        return (self._config.get(section) or {}).get(key, default)

    # ==================== 应用基础配置 ====================
    @property
    def APP_NAME(self) -> str:
        return os.getenv("APP_NAME", self._get("app", "name", "Ghost Route OS"))

    @property
    def APP_VERSION(self) -> str:
        return os.getenv("APP_VERSION", self._get("app", "version", "1.0.0"))

    @property
    def API_V1_PREFIX(self) -> str:
        return os.getenv("API_V1_PREFIX", self._get("app", "api_prefix", "/api"))

    @property
    def DEBUG(self) -> bool:
        return _as_bool(os.getenv("DEBUG", self._get("app", "debug", False)))

    # ==================== 数据库配置 ====================
    @property
    def DATABASE_ENABLED(self) -> bool:
        return _as_bool(os.getenv("DATABASE_ENABLED", self._get("database", "enabled", False)))

    @property
    def DATABASE_URL(self) -> Optional[str]:
        if not self.DATABASE_ENABLED:
            return None
        return os.getenv("DATABASE_URL", self._get("database", "url"))

    @property
    def DATABASE_POOL_SIZE(self) -> int:
        return int(os.getenv("DATABASE_POOL_SIZE", self._get("database", "pool_size", 5)))

    @property
    def DATABASE_MAX_OVERFLOW(self) -> int:
        return int(os.getenv("DATABASE_MAX_OVERFLOW", self._get("database", "max_overflow", 5)))

    @property
    def DATABASE_POOL_TIMEOUT(self) -> float:
        return float(os.getenv("DATABASE_POOL_TIMEOUT", self._get("database", "pool_timeout", 10)))

    @property
    def DATABASE_CONNECT_TIMEOUT(self) -> float:
        return float(os.getenv("DATABASE_CONNECT_TIMEOUT", self._get("database", "connect_timeout", 10)))

    @property
    def DATABASE_OPERATION_TIMEOUT(self) -> float:
        return float(os.getenv("DATABASE_OPERATION_TIMEOUT", self._get("database", "operation_timeout", 30)))

    # ==================== CORS 配置 ====================
    @property
    def CORS_ORIGINS(self) -> List[str]:
        env_origins = os.getenv("CORS_ORIGINS")
        if env_origins:
            return [origin.strip() for origin in env_origins.split(",")]
        return self._get("cors", "origins", ["*"])

    # ==================== 音频配置 ====================
    @property
    def AUDIO_PUBLIC_PATH(self) -> str:
        return os.getenv("AUDIO_PUBLIC_PATH", self._get("audio", "public_path", "/audio"))

    @property
    def AUDIO_SERVER_PATH(self) -> str:
        return os.getenv("AUDIO_SERVER_PATH", self._get("audio", "server_path", "public_html/audio"))

    @property
    def AUDIO_MAX_BATCH(self) -> int:
        return int(os.getenv("AUDIO_MAX_BATCH", self._get("audio", "max_batch", 10)))

    # ==================== AI 服务配置 ====================
    @property
    def GEMINI_API_KEY(self) -> str:
        return os.getenv("GEMINI_API_KEY", self._get("ai", "gemini_api_key", "")) or ""

    @property
    def GEMINI_MODEL(self) -> str:
        return os.getenv("GEMINI_MODEL", self._get("ai", "gemini_model", "gemini-1.5-flash-latest"))

    @property
    def TTS_LANGUAGE(self) -> str:
        return os.getenv("TTS_LANGUAGE", self._get("ai", "tts_language", "en-US"))

    @property
    def AI_REQUEST_TIMEOUT(self) -> int:
        return int(os.getenv("AI_REQUEST_TIMEOUT", self._get("ai", "request_timeout", 30)))

    # ==================== 事件导入配置 ====================
    @property
    def FALLBACK_DIR(self) -> str:
        return os.getenv("FALLBACK_DIR", self._get("ingest", "fallback_dir", "fallback"))

    @property
    def MIGRATIONS_DIR(self) -> str:
        return os.getenv("MIGRATIONS_DIR", self._get("ingest", "migrations_dir", "migrations"))

    @property
    def SEED_ON_STARTUP(self) -> bool:
        return _as_bool(os.getenv("SEED_ON_STARTUP", self._get("ingest", "seed_on_startup", True)))


# 全局配置实例
settings = Settings()
