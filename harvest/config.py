"""Centralised settings for the question harvester.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Target site
    # ------------------------------------------------------------------
    site_origin: str = field(
        default_factory=lambda: os.environ.get("SITE_ORIGIN", "https://www.examtopics.com")
    )

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("USER_AGENT", _DEFAULT_USER_AGENT)
    )
    accept_language: str = field(
        default_factory=lambda: os.environ.get("ACCEPT_LANGUAGE", "en-US,en;q=0.5")
    )
    rate_limit_delay: float = field(
        default_factory=lambda: float(os.environ.get("RATE_LIMIT_DELAY", "1.5"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    images_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("IMAGES_DIR", "images"))
    )
    output_path: Path = field(
        default_factory=lambda: Path(os.environ.get("OUTPUT_PATH", "results.json"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def ensure_images_dir(self, images_dir: Path | None = None) -> Path:
        """Create the image directory if it does not exist and return it."""
        path = images_dir or self.images_dir
        path.mkdir(parents=True, exist_ok=True)
        return path


# Module-level singleton — import this everywhere:
#   from harvest.config import settings
settings = Settings()
