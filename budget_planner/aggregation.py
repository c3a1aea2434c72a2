"""Monthly aggregation of the ledger against the budget table.

:func:`aggregate` is a pure function of its inputs: it builds its own
DataFrame from the transactions and never touches the ledger, the budget
table or storage. It is recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Tuple

import pandas as pd

from . import config
from .ledger import Transaction, transactions_to_dataframe

STATUS_OVER = 'over'
STATUS_WARNING = 'warning'
STATUS_NORMAL = 'normal'


def classify_status(percentage: float) -> str:
    """Classify percent-of-limit spending.

    Both thresholds are exclusive, so exactly 100% is still a warning and
    exactly 75% is still normal.

    Example:
        >>> classify_status(100.0)
        'warning'
        >>> classify_status(100.01)
        'over'
        >>> classify_status(75.0)
        'normal'
    """
    if percentage > config.OVER_BUDGET_THRESHOLD:
        return STATUS_OVER
    if percentage > config.WARNING_THRESHOLD:
        return STATUS_WARNING
    return STATUS_NORMAL


def percent_of_limit(spent: float, limit: float) -> float:
    """Return ``spent`` as a percentage of ``limit``; 0 when there is no limit."""
    if limit > 0:
        return spent / limit * 100.0
    return 0.0


def progress_width(percentage: float) -> float:
    """Clamp a percentage to the 0-100 range used by progress bars."""
    return max(0.0, min(percentage, 100.0))


@dataclass(frozen=True)
class CategorySummary:
    category: str
    spent: float
    limit: float
    percentage: float
    status: str

    @property
    def remaining(self) -> float:
        return self.limit - self.spent

    @property
    def progress(self) -> float:
        return progress_width(self.percentage)


@dataclass(frozen=True)
class AggregationView:
    """Read-only summary of one month."""
    month: int
    year: int
    total_income: float
    total_expense: float
    balance: float
    transaction_count: int
    categories: Tuple[CategorySummary, ...]

    def category(self, name: str) -> CategorySummary:
        for summary in self.categories:
            if summary.category == name:
                return summary
        raise KeyError(name)

    @property
    def total_limit(self) -> float:
        return float(sum(c.limit for c in self.categories))

    def to_dataframe(self) -> pd.DataFrame:
        """Per-category rows with columns Category, Spent, Limit, Percent, Status."""
        return pd.DataFrame(
            [
                {
                    'Category': c.category,
                    'Spent': c.spent,
                    'Limit': c.limit,
                    'Percent': c.percentage,
                    'Status': c.status,
                }
                for c in self.categories
            ],
            columns=['Category', 'Spent', 'Limit', 'Percent', 'Status'],
        )


def _month_rows(df: pd.DataFrame, month: int, year: int) -> pd.DataFrame:
    if df.empty:
        return df
    mask = (df['date'].dt.month == month + 1) & (df['date'].dt.year == year)
    return df[mask]


def aggregate(
    transactions: Iterable[Transaction],
    budgets: Mapping[str, float],
    month: int,
    year: int,
) -> AggregationView:
    """Summarize ``transactions`` for ``month`` (0-based) of ``year``.

    Args:
        transactions: Ledger records
        budgets: Mapping of category to monthly limit
        month: Month index, 0 = January
        year: Calendar year

    Returns:
        AggregationView with totals, balance and one summary per budget category
    """
    df = transactions_to_dataframe(list(transactions))
    scoped = _month_rows(df, month, year)

    by_kind = scoped.groupby('kind')['amount'].sum()
    total_income = float(by_kind.get('income', 0.0))
    total_expense = float(by_kind.get('expense', 0.0))

    expense = scoped[scoped['kind'] == 'expense']
    spent_by_category = expense.groupby('category')['amount'].sum()

    summaries = []
    for category, limit in budgets.items():
        spent = float(spent_by_category.get(category, 0.0))
        limit = float(limit)
        percentage = percent_of_limit(spent, limit)
        summaries.append(CategorySummary(
            category=category,
            spent=spent,
            limit=limit,
            percentage=percentage,
            status=classify_status(percentage),
        ))

    return AggregationView(
        month=month,
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        transaction_count=int(len(scoped)),
        categories=tuple(summaries),
    )
