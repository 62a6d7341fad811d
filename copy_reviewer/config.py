import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


BASEDIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))

DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_OPENROUTER_MODEL = "anthropic/claude-sonnet-4-5:beta"


def load_environment(path: Optional[str] = None) -> bool:
    """Load a .env file (project root by default) without overriding real env vars."""
    return load_dotenv(path or os.path.join(BASEDIR, ".env"))


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    provider: str = "claude"
    anthropic_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    openrouter_url: str = DEFAULT_OPENROUTER_URL
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    request_timeout: float = 60.0
    max_tokens: int = 3000
    session_log_dir: Optional[str] = None
    app_referer: str = "https://github.com/copy-reviewer/copy-reviewer"
    app_title: str = "Copy Reviewer"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            provider=(os.getenv("AI_PROVIDER") or "claude").strip().lower(),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
            openrouter_url=os.getenv("OPENROUTER_URL") or DEFAULT_OPENROUTER_URL,
            anthropic_model=os.getenv("ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
            openrouter_model=os.getenv("OPENROUTER_MODEL") or DEFAULT_OPENROUTER_MODEL,
            request_timeout=_float_env("REQUEST_TIMEOUT", 60.0),
            max_tokens=int(_float_env("MAX_TOKENS", 3000)),
            session_log_dir=os.getenv("SESSION_LOG_DIR") or None,
            app_referer=os.getenv("APP_REFERER") or cls.app_referer,
            app_title=os.getenv("APP_TITLE") or cls.app_title,
        )


__all__ = ["Settings", "load_environment"]
