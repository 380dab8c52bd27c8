"""Centralised settings for the Section CSS service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    public_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("SECTIONCSS_PUBLIC_DIR", Path.cwd() / "public")
        )
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SECTIONCSS_USER_AGENT",
            "Mozilla/5.0 (compatible; SectionCSS/1.0)",
        )
    )

    # ------------------------------------------------------------------
    # Reduction
    # ------------------------------------------------------------------
    max_concurrent_reductions: int = field(
        default_factory=lambda: int(
            os.environ.get("SECTIONCSS_MAX_CONCURRENT_REDUCTIONS", "4")
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("SECTIONCSS_LOG_LEVEL", "INFO")
    )


# Module-level singleton — import this everywhere:
#   from sectioncss.config import settings
settings = Settings()
