from datetime import datetime

from budget_planner import config
from budget_planner.aggregation import aggregate
from budget_planner.ledger import LedgerStore
from budget_planner.visualization import (
    STATUS_COLORS,
    create_budget_bar_chart,
    create_income_expense_chart,
)


def _view():
    ledger = LedgerStore()
    ledger.add("Salary", 2000, "other", "income", date=datetime(2024, 3, 1))
    ledger.add("Electricity", 300, "utilities", "expense", date=datetime(2024, 3, 2))
    return aggregate(ledger.records(), config.default_budgets(), 2, 2024)


def test_budget_bar_chart_has_limit_markers():
    fig = create_budget_bar_chart(_view())
    names = [trace.name for trace in fig.data]
    assert 'Limit' in names
    assert fig.layout.title.text == "Spending vs budget"
    over = [trace for trace in fig.data if trace.name == 'over']
    assert over and over[0].marker.color == STATUS_COLORS['over']


def test_income_expense_chart_values():
    fig = create_income_expense_chart(_view())
    assert list(fig.data[0].values) == [2000.0, 300.0]


def test_income_expense_chart_empty_month():
    view = aggregate([], config.default_budgets(), 0, 2000)
    fig = create_income_expense_chart(view)
    assert len(fig.data) == 0
    assert fig.layout.title.text == "No transactions this month"
