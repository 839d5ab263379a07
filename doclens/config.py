"""Centralised settings for the doclens service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The pipeline and the app factory accept an explicit :class:`Settings`
instance, so tests can build one with keyword arguments instead of touching
the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_int_tuple(name: str, default: str) -> tuple[int, ...]:
    raw = os.environ.get(name, default)
    return tuple(int(part) for part in raw.split(",") if part.strip())


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetch client
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "15.0"))
    )
    fetch_max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_MAX_REDIRECTS", "5"))
    )
    fetch_user_agent: str = field(
        default_factory=lambda: os.environ.get("FETCH_USER_AGENT", _BROWSER_UA)
    )
    fetch_referer: str = field(
        default_factory=lambda: os.environ.get("FETCH_REFERER", "https://www.google.com/")
    )
    # 4xx codes that still count as a usable page (bot-gated docs sites).
    fetch_tolerated_statuses: tuple[int, ...] = field(
        default_factory=lambda: _env_int_tuple("FETCH_TOLERATED_STATUSES", "401,403")
    )

    # ------------------------------------------------------------------
    # Extraction / normalization
    # ------------------------------------------------------------------
    min_region_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_REGION_LENGTH", "100"))
    )
    max_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_LENGTH", "8000"))
    )
    min_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTENT_LENGTH", "50"))
    )

    # ------------------------------------------------------------------
    # Summarization model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "ollama")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    summary_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SUMMARY_TIMEOUT", "45.0"))
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TEMPERATURE", "0.6"))
    )
    llm_top_p: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TOP_P", "0.85"))
    )
    llm_top_k: int = field(
        default_factory=lambda: int(os.environ.get("LLM_TOP_K", "40"))
    )
    llm_max_output_tokens: int = field(
        default_factory=lambda: int(os.environ.get("LLM_MAX_OUTPUT_TOKENS", "8192"))
    )

    # ------------------------------------------------------------------
    # HTTP surface
    # ------------------------------------------------------------------
    api_token: str = field(
        default_factory=lambda: os.environ.get("DOCLENS_API_TOKEN", "")
    )
    require_auth: bool = field(
        default_factory=lambda: _env_bool("DOCLENS_REQUIRE_AUTH", "true")
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    @property
    def fetch_headers(self) -> dict[str, str]:
        """Browser-like request headers sent with every page fetch."""
        return {
            "User-Agent": self.fetch_user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Referer": self.fetch_referer,
        }


# Module-level singleton — import this everywhere:
#   from doclens.config import settings
settings = Settings()
