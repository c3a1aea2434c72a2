"""Selected month navigation.

Months are 0-based (0 = January, 11 = December). Stepping past either end
of the year wraps into the neighbouring year; there are no other bounds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from . import config


@dataclass(frozen=True)
class MonthSelection:
    month: int
    year: int

    def __post_init__(self) -> None:
        if not 0 <= self.month <= 11:
            raise ValueError(f"month must be between 0 and 11, got {self.month}")

    @classmethod
    def current(cls, now: Optional[datetime] = None) -> 'MonthSelection':
        now = now or datetime.now()
        return cls(now.month - 1, now.year)

    def previous(self) -> 'MonthSelection':
        if self.month == 0:
            return MonthSelection(11, self.year - 1)
        return MonthSelection(self.month - 1, self.year)

    def next(self) -> 'MonthSelection':
        if self.month == 11:
            return MonthSelection(0, self.year + 1)
        return MonthSelection(self.month + 1, self.year)

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``'March 2024'``."""
        return f"{config.MONTH_NAMES[self.month]} {self.year}"

    def contains(self, moment: datetime) -> bool:
        return moment.month == self.month + 1 and moment.year == self.year
