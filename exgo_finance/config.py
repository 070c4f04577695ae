"""Configuration management for the finance engine.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ValidationError

# Base project root - assumes this file is in exgo_finance/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("EXGO_DATA_DIR", _PROJECT_ROOT / "data"))
REPORTS_DIR = Path(os.getenv("EXGO_REPORTS_DIR", DATA_DIR / "reports"))

# Collection files
SETTINGS_FILE = DATA_DIR / "settings.json"
TRANSACTIONS_FILE = DATA_DIR / "transactions.json"
GOALS_FILE = DATA_DIR / "goals.json"
RECURRING_FILE = DATA_DIR / "recurring_transactions.json"
GAMIFICATION_FILE = DATA_DIR / "gamification.json"

# Settings defaults
DEFAULT_CURRENCY = "USD"
DEFAULT_MONTHLY_INCOME = 0.0
DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "uk")

# Upcoming recurring transactions are surfaced this many days ahead
UPCOMING_HORIZON_DAYS = 3
TOP_CATEGORY_LIMIT = 5

# Storage reads are retried this many times before giving up
STORAGE_READ_ATTEMPTS = 3

# Gamification: total XP to leave level n is n * XP_PER_LEVEL
XP_PER_LEVEL = 100
# A logging streak earns a skip token every this many days
SKIP_TOKEN_INTERVAL = 14


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, REPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_timezone(name: Optional[str] = None) -> Optional[ZoneInfo]:
    """Return the configured local timezone.

    ``None`` means the system local time is used for day bucketing.
    """
    name = name if name is not None else os.getenv("EXGO_TIMEZONE")
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone '{name}'") from exc
