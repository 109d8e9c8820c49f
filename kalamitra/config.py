import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Set

from dotenv import load_dotenv

from .constants import ALLOWED_MIME_TYPES, MAX_IMAGE_BYTES

BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env before the Settings defaults below are evaluated.
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    gemini_api_key: str = field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    gemini_base_url: str = field(
        default_factory=lambda: os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    image_model: str = field(
        default_factory=lambda: os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image-preview")
    )
    text_model: str = field(default_factory=lambda: os.getenv("TEXT_MODEL", "gemini-2.5-flash"))
    request_timeout: int = field(default_factory=lambda: _env_int("REQUEST_TIMEOUT", 120))
    max_image_bytes: int = field(default_factory=lambda: _env_int("MAX_IMAGE_BYTES", MAX_IMAGE_BYTES))
    allowed_mime_types: Set[str] = field(default_factory=lambda: set(ALLOWED_MIME_TYPES))
    onboarding_state_path: str = field(
        default_factory=lambda: os.getenv(
            "ONBOARDING_STATE_PATH", str(BASE_DIR / "data" / "onboarding.json")
        )
    )
    publish_delay_scale: float = field(default_factory=lambda: _env_float("PUBLISH_DELAY_SCALE", 1.0))
    instagram_failure_rate: float = field(
        default_factory=lambda: _env_float("INSTAGRAM_FAILURE_RATE", 0.1)
    )
    ondc_failure_rate: float = field(default_factory=lambda: _env_float("ONDC_FAILURE_RATE", 0.15))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_llm_raw: bool = field(default_factory=lambda: _env_bool("LOG_LLM_RAW", False))
    log_requests: bool = field(default_factory=lambda: _env_bool("LOG_REQUESTS", True))
    log_requests_retention_days: int = field(
        default_factory=lambda: _env_int("LOG_REQUESTS_RETENTION_DAYS", 7)
    )
    log_requests_max_files: int = field(
        default_factory=lambda: _env_int("LOG_REQUESTS_MAX_FILES", 1000)
    )
    workspace_ttl_minutes: int = field(
        default_factory=lambda: _env_int("WORKSPACE_TTL_MINUTES", 120)
    )
    workspace_max_count: int = field(
        default_factory=lambda: _env_int("WORKSPACE_MAX_COUNT", 500)
    )

    def __post_init__(self) -> None:
        self.gemini_base_url = self.gemini_base_url.rstrip("/")
        self.publish_delay_scale = max(0.0, self.publish_delay_scale)
        self.instagram_failure_rate = min(1.0, max(0.0, self.instagram_failure_rate))
        self.ondc_failure_rate = min(1.0, max(0.0, self.ondc_failure_rate))
        self.workspace_ttl_minutes = max(0, self.workspace_ttl_minutes)
        self.workspace_max_count = max(0, self.workspace_max_count)


def load_settings() -> Settings:
    return Settings()
