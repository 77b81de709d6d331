import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv(override=False)

DEFAULT_TONE = "friendly but concise"
DEFAULT_RELAY_URL = "http://localhost:3000/api/rewrite"


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _as_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _as_list(raw: str | None, default: list[str]) -> list[str]:
    if raw is None:
        return list(default)
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or list(default)


@dataclass(frozen=True)
class Settings:
    llm_api_key: str | None
    llm_provider: str
    llm_model: str
    llm_api_base_url: str | None
    llm_timeout_seconds: int
    max_tokens: int
    temperature: float
    length_tolerance_percent: int
    default_tone: str
    allowed_origins: list[str]
    relay_url: str
    host: str
    port: int
    log_level: str


def load_settings() -> Settings:
    api_key = os.getenv("REWRITER_LLM_API_KEY") or os.getenv("OPENAI_API_KEY") or None
    return Settings(
        llm_api_key=(api_key or "").strip() or None,
        llm_provider=os.getenv("REWRITER_LLM_PROVIDER", "openai").strip().lower(),
        llm_model=os.getenv("REWRITER_LLM_MODEL") or "gpt-4o-mini",
        llm_api_base_url=(os.getenv("REWRITER_LLM_API_BASE_URL") or None),
        llm_timeout_seconds=_as_int(os.getenv("REWRITER_LLM_TIMEOUT_SECONDS"), 30),
        max_tokens=max(64, min(4096, _as_int(os.getenv("REWRITER_MAX_TOKENS"), 800))),
        temperature=max(
            0.0, min(2.0, _as_float(os.getenv("REWRITER_TEMPERATURE"), 0.4))
        ),
        length_tolerance_percent=max(
            5,
            min(100, _as_int(os.getenv("REWRITER_LENGTH_TOLERANCE_PERCENT"), 25)),
        ),
        default_tone=(os.getenv("REWRITER_DEFAULT_TONE") or "").strip() or DEFAULT_TONE,
        allowed_origins=_as_list(os.getenv("REWRITER_ALLOWED_ORIGINS"), ["*"]),
        relay_url=os.getenv("REWRITER_RELAY_URL") or DEFAULT_RELAY_URL,
        host=os.getenv("HOST", "127.0.0.1"),
        port=_as_int(os.getenv("PORT"), 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


settings = load_settings()
