"""Top‑level package for the Budget Planner.

The primary modules are:

* ``ledger`` – transaction records and the ledger store
* ``budgets`` – per-category monthly limits
* ``aggregation`` – monthly totals and budget status
* ``session`` – the single owner of ledger, budgets and month selection
* ``app`` – a Streamlit app that ties everything together

To run the app from the command line you can execute:

```bash
streamlit run budget_planner/app.py
```
"""

from .aggregation import AggregationView, CategorySummary, aggregate, classify_status
from .budgets import BudgetTable
from .ledger import LedgerStore, Transaction
from .month_selector import MonthSelection
from .persistent_store import LocalStorage
from .session import BudgetSession

__all__ = [
    "AggregationView",
    "BudgetSession",
    "BudgetTable",
    "CategorySummary",
    "LedgerStore",
    "LocalStorage",
    "MonthSelection",
    "Transaction",
    "aggregate",
    "classify_status",
]
