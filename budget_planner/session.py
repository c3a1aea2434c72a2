"""The budget session: single owner of the ledger, budgets and month selection.

The presentation layer reads from and dispatches intents to one
:class:`BudgetSession`. Until :meth:`BudgetSession.load` has run, every
intent is ignored so the empty defaults can never overwrite what is
already in storage.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from . import config
from .aggregation import AggregationView, aggregate
from .budgets import BudgetTable
from .ledger import LedgerStore, Transaction
from .month_selector import MonthSelection
from .persistent_store import LocalStorage

logger = logging.getLogger(__name__)


class BudgetSession:
    """Process-wide owner of the budget planner state."""

    def __init__(self, storage: Optional[LocalStorage] = None, now: Optional[datetime] = None):
        """Initialize an unloaded session.

        Args:
            storage: Key-value storage; defaults to ``LocalStorage()``
            now: Clock reading used for the initial month selection
        """
        self.storage = storage or LocalStorage()
        self.ledger = LedgerStore()
        self.budget_table = BudgetTable()
        self.selection = MonthSelection.current(now)
        self.loaded = False

    def load(self) -> 'BudgetSession':
        """Read persisted state and enable intents."""
        self.ledger = LedgerStore.load(self.storage, config.EXPENSES_KEY)
        self.budget_table = BudgetTable.load(self.storage, config.BUDGETS_KEY)
        self.loaded = True
        logger.info(
            "Loaded %d transactions from %s", len(self.ledger), self.storage.storage_dir
        )
        return self

    def _ready(self, intent: str) -> bool:
        if not self.loaded:
            logger.warning("Ignoring %s before state has loaded", intent)
        return self.loaded

    # Reads

    @property
    def transactions(self) -> List[Transaction]:
        return self.ledger.records()

    @property
    def budgets(self) -> Dict[str, float]:
        return self.budget_table.as_dict()

    def view(self) -> AggregationView:
        """Aggregation for the selected month."""
        return aggregate(
            self.ledger.records(), self.budgets, self.selection.month, self.selection.year
        )

    def recent_transactions(self) -> List[Transaction]:
        """Transactions of the selected month, newest first."""
        scoped = self.ledger.for_month(self.selection.month, self.selection.year)
        return sorted(scoped, key=lambda r: r.date, reverse=True)

    # Intents

    def add_transaction(
        self,
        description: Any,
        amount: Any,
        category: str = 'food',
        kind: str = 'expense',
        date: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        if not self._ready('add_transaction'):
            return None
        return self.ledger.add(description, amount, category, kind, date)

    def update_transaction(self, record_id: int, **fields: Any) -> Optional[Transaction]:
        if not self._ready('update_transaction'):
            return None
        return self.ledger.update(record_id, fields)

    def delete_transaction(self, record_id: int) -> bool:
        if not self._ready('delete_transaction'):
            return False
        return self.ledger.remove(record_id)

    def set_budget(self, category: str, value: Any) -> bool:
        if not self._ready('set_budget'):
            return False
        return self.budget_table.set_limit(category, value)

    def select_month(self, month: int, year: int) -> MonthSelection:
        """Select ``month`` (0-based) of ``year``.

        Raises:
            ValueError: If ``month`` is outside 0-11
        """
        self.selection = MonthSelection(month, year)
        return self.selection

    def previous_month(self) -> MonthSelection:
        self.selection = self.selection.previous()
        return self.selection

    def next_month(self) -> MonthSelection:
        self.selection = self.selection.next()
        return self.selection
