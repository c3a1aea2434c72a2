"""Configuration management for the budget planner.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

# Base project root - assumes this file is in budget_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_PLANNER_DATA_DIR", _PROJECT_ROOT / "data"))
STORAGE_DIR = DATA_DIR / "storage"

# Storage keys
EXPENSES_KEY = "expenses"
BUDGETS_KEY = "budgets"

CATEGORIES: List[str] = [
    "food",
    "housing",
    "transportation",
    "utilities",
    "entertainment",
    "healthcare",
    "shopping",
    "other",
]

KINDS: List[str] = ["income", "expense"]

DEFAULT_BUDGETS: Dict[str, float] = {
    "food": 300.0,
    "housing": 800.0,
    "transportation": 150.0,
    "utilities": 200.0,
    "entertainment": 100.0,
    "healthcare": 150.0,
    "shopping": 200.0,
    "other": 100.0,
}

CATEGORY_ICONS: Dict[str, str] = {
    "food": "🍽️",
    "housing": "🏠",
    "transportation": "🚗",
    "utilities": "💡",
    "entertainment": "🎬",
    "healthcare": "🩺",
    "shopping": "🛍️",
    "other": "🏷️",
}

# Percent-of-limit thresholds (exclusive) for budget status
OVER_BUDGET_THRESHOLD = 100.0
WARNING_THRESHOLD = 75.0

MONTH_NAMES: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Cosmetic delay before the first load, in seconds
LOAD_DELAY_SECONDS = float(os.getenv("BUDGET_PLANNER_LOAD_DELAY", "0.8"))

CURRENCY_SYMBOL = os.getenv("BUDGET_PLANNER_CURRENCY", "₹")

# "indian" groups as 1,00,000.00; "western" as 100,000.00
CURRENCY_GROUPING = os.getenv("BUDGET_PLANNER_GROUPING", "indian")

LOG_LEVEL = os.getenv("BUDGET_PLANNER_LOG_LEVEL", "INFO")


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORAGE_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def default_budgets() -> Dict[str, float]:
    """Return a fresh copy of the default category limits."""
    return dict(DEFAULT_BUDGETS)
