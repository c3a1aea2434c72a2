"""Per-category monthly budget limits."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional

from . import config
from .ledger import parse_amount
from .persistent_store import LocalStorage

logger = logging.getLogger(__name__)


def normalize_budgets(data: Any) -> Dict[str, float]:
    """Coerce stored budget data into a complete category → limit mapping.

    Unknown categories are dropped; missing or invalid limits take their
    default value. Anything other than a mapping yields the defaults.

    Example:
        >>> normalize_budgets({'food': '250', 'pets': 40})['food']
        250.0
        >>> normalize_budgets('garbage') == config.DEFAULT_BUDGETS
        True
    """
    limits = config.default_budgets()
    if not isinstance(data, dict):
        return limits
    for category in config.CATEGORIES:
        if category not in data:
            continue
        value = parse_amount(data[category])
        if value is None:
            logger.warning("Invalid stored limit for '%s': %r", category, data[category])
            continue
        limits[category] = value
    return limits


class BudgetTable:
    """Mapping of each category to its monthly limit.

    The key set is fixed to ``config.CATEGORIES``; only values change.
    """

    def __init__(
        self,
        limits: Optional[Mapping[str, Any]] = None,
        storage: Optional[LocalStorage] = None,
        key: str = config.BUDGETS_KEY,
    ):
        self._limits = normalize_budgets(dict(limits) if limits is not None else None)
        self.storage = storage
        self.key = key

    @classmethod
    def load(cls, storage: LocalStorage, key: str = config.BUDGETS_KEY) -> 'BudgetTable':
        """Load limits from storage, falling back to the defaults."""
        data = storage.load(key, config.default_budgets())
        if not isinstance(data, dict):
            logger.warning("Ignoring '%s' blob: expected a mapping, got %s", key, type(data).__name__)
        return cls(data if isinstance(data, dict) else None, storage=storage, key=key)

    def __len__(self) -> int:
        return len(self._limits)

    def __iter__(self) -> Iterator[str]:
        return iter(config.CATEGORIES)

    def limit(self, category: str) -> float:
        return self._limits[category]

    def as_dict(self) -> Dict[str, float]:
        return dict(self._limits)

    def total(self) -> float:
        return float(sum(self._limits.values()))

    def set_limit(self, category: str, value: Any) -> bool:
        """Set the monthly limit for ``category``.

        Args:
            category: One of ``config.CATEGORIES``
            value: Number or numeric string; must be non-negative

        Returns:
            True if the limit was stored, False if the input was rejected
        """
        if category not in self._limits:
            logger.debug("Rejected limit for unknown category %r", category)
            return False
        parsed = parse_amount(value)
        if parsed is None:
            logger.debug("Rejected limit %r for %s", value, category)
            return False
        self._limits[category] = parsed
        self._persist()
        return True

    def _persist(self) -> None:
        if self.storage is None:
            return
        self.storage.save(self.key, self.as_dict())
