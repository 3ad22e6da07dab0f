"""Centralised settings for the Home Access Center API.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The selector and offset tables used by the extraction engine are *not*
settings; they live in :mod:`hacapi.scraper.selectors`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Upstream portal
    # ------------------------------------------------------------------
    default_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "HAC_BASE_URL", "https://homeaccess.katyisd.org"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("HAC_REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Cache lifetimes (seconds)
    # ------------------------------------------------------------------
    client_ttl: float = field(
        default_factory=lambda: float(os.environ.get("HAC_CLIENT_TTL", "300"))
    )
    page_ttl: float = field(
        default_factory=lambda: float(os.environ.get("HAC_PAGE_TTL", "60"))
    )

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HAC_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("HAC_PORT", "3000")))

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("HAC_LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from hacapi.config import settings
settings = Settings()
