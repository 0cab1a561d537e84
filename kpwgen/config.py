"""Configuration constants for kpwgen."""

import logging
import os
from datetime import timedelta
from pathlib import Path

# ── Generation defaults ───────────────────────────────────────────────────

DEFAULT_VERSION = 1
DEFAULT_LENGTH = 18
DEFAULT_PREFIX = "Qx9"
DEFAULT_SUFFIX = "K7"
DEFAULT_RAW_MODE = False

MIN_SECRET_LENGTH = 8
MAX_LENGTH = 128

COMMON_PLATFORMS = ("Google", "Facebook", "Instagram", "Dribbble")

# ── Persisted settings ────────────────────────────────────────────────────

STORAGE_KEY = "kpwgen:advanced:v1"
SCHEMA_VERSION = 1

TTL_OPTIONS: dict[str, timedelta | None] = {
    "3h": timedelta(hours=3),
    "24h": timedelta(hours=24),
    "48h": timedelta(hours=48),
    "none": None,
}
TTL_LABELS = {
    "3h": "3 hours",
    "24h": "24 hours",
    "48h": "48 hours",
    "none": "No expiry",
}
DEFAULT_TTL = "24h"


def storage_file() -> Path:
    """Settings file under $KPWGEN_HOME (default ~/.kpwgen), read at call time."""
    home = os.environ.get("KPWGEN_HOME") or Path.home() / ".kpwgen"
    return Path(home) / "storage.json"

# ── Clipboard ─────────────────────────────────────────────────────────────

COPIED_INDICATOR_SECONDS = 2.0

# ── Logging ───────────────────────────────────────────────────────────────

LOG_LEVEL = os.environ.get("KPWGEN_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ttl_for(choice: str) -> timedelta | None:
    """Map a TTL menu choice to a duration, falling back to 24 hours."""
    if choice in TTL_OPTIONS:
        return TTL_OPTIONS[choice]
    return TTL_OPTIONS[DEFAULT_TTL]


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
