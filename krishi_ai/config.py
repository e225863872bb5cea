"""
Configuration for the Krishi AI service.

Values come from the environment (a local .env file is loaded first).
Retry budgets per flow default to the values tuned for the Gemini free tier.
"""
import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Checked in order; the first one set wins
API_KEY_ENV_VARS = ("GOOGLE_GENAI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")

DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class RetrySettings:
    max_attempts: int
    base_delay: float  # seconds


# Keep retries short so users aren't stuck waiting on free-tier throttling
DEFAULT_RETRY_SETTINGS: Dict[str, RetrySettings] = {
    "chat": RetrySettings(max_attempts=3, base_delay=2.0),
    "diagnosis": RetrySettings(max_attempts=1, base_delay=2.0),
    "recommendations": RetrySettings(max_attempts=3, base_delay=1.5),
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default


def get_api_key() -> Optional[str]:
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


@dataclass
class Settings:
    api_key: Optional[str] = None
    model_override: Optional[str] = None  # pins one model instead of rotating
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_format: str = "text"
    log_level: str = "INFO"
    retry: Dict[str, RetrySettings] = field(
        default_factory=lambda: dict(DEFAULT_RETRY_SETTINGS)
    )

    def retry_for(self, flow: str) -> RetrySettings:
        return self.retry.get(flow, DEFAULT_RETRY_SETTINGS[flow])

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        retry = {}
        for flow, defaults in DEFAULT_RETRY_SETTINGS.items():
            prefix = flow.upper()
            max_attempts = _env_int(f"{prefix}_MAX_ATTEMPTS", defaults.max_attempts)
            if max_attempts < 1:
                logger.warning(
                    f"{prefix}_MAX_ATTEMPTS must be >= 1; using {defaults.max_attempts}"
                )
                max_attempts = defaults.max_attempts
            base_delay = _env_float(f"{prefix}_BASE_DELAY", defaults.base_delay)
            if base_delay < 0:
                logger.warning(
                    f"{prefix}_BASE_DELAY must be >= 0; using {defaults.base_delay}"
                )
                base_delay = defaults.base_delay
            retry[flow] = RetrySettings(max_attempts=max_attempts, base_delay=base_delay)

        return cls(
            api_key=get_api_key(),
            model_override=os.getenv("GEMINI_MODEL") or None,
            timeout_seconds=_env_float("GEMINI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            retry=retry,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
