"""Streamlit components for the budget planner page.

The UI holds no authoritative state. It keeps a single
:class:`~budget_planner.session.BudgetSession` in ``st.session_state`` and
only renders what the session exposes, dispatching user intents back to it.
Form visibility and the record being edited are the only UI-local state.
"""

from __future__ import annotations

import time
from typing import Any, Dict, MutableMapping, Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException

from . import config
from .aggregation import STATUS_OVER, STATUS_WARNING, AggregationView
from .formatting import category_label, escape_dollar_for_markdown, format_currency, format_date
from .ledger import Transaction
from .persistent_store import LocalStorage
from .session import BudgetSession
from .visualization import create_budget_bar_chart, create_income_expense_chart

SESSION_KEY = 'budget_session'

# UI-local form state and its reset values
FORM_DEFAULTS: Dict[str, Any] = {
    'show_form': False,
    'editing_id': None,
    'form_description': '',
    'form_amount': '',
    'form_category': 'food',
    'form_kind': 'expense',
}

STATUS_COLOR = {STATUS_OVER: 'red', STATUS_WARNING: 'orange'}


def _rerun() -> None:
    """Trigger a Streamlit rerun across API versions."""
    rerun = getattr(st, 'rerun', None)
    if callable(rerun):
        rerun()
        return
    experimental = getattr(st, 'experimental_rerun', None)
    if callable(experimental):
        experimental()


def _money(amount: float) -> str:
    return escape_dollar_for_markdown(format_currency(amount))


def get_session(storage: Optional[LocalStorage] = None) -> BudgetSession:
    """Return the session stored in ``st.session_state``, loading it on first use.

    The first call shows a spinner for ``config.LOAD_DELAY_SECONDS`` before
    reading storage; intents are only accepted once the load has finished.
    """
    state = st.session_state
    session = state.get(SESSION_KEY)
    if isinstance(session, BudgetSession) and session.loaded:
        return session
    session = BudgetSession(storage)
    with st.spinner("Loading your budget..."):
        if config.LOAD_DELAY_SECONDS > 0:
            time.sleep(config.LOAD_DELAY_SECONDS)
        session.load()
    state[SESSION_KEY] = session
    return session


def ensure_form_state(state: MutableMapping[str, Any]) -> None:
    for key, value in FORM_DEFAULTS.items():
        state.setdefault(key, value)


def reset_form(state: MutableMapping[str, Any]) -> None:
    state.update(FORM_DEFAULTS)


def start_edit(state: MutableMapping[str, Any], record: Transaction) -> None:
    """Open the form prefilled with ``record`` for editing."""
    state.update({
        'show_form': True,
        'editing_id': record.id,
        'form_description': record.description,
        'form_amount': f"{record.amount:g}",
        'form_category': record.category,
        'form_kind': record.kind,
    })


def submit_transaction(
    session: BudgetSession,
    state: MutableMapping[str, Any],
    description: str,
    amount: str,
    category: str,
    kind: str,
) -> bool:
    """Add a new transaction, or update the one being edited.

    Returns:
        True if the ledger changed. On success the form is closed and
        cleared; on rejection it is left open with the user's input.
    """
    editing_id = state.get('editing_id')
    if editing_id is not None and session.ledger.get(editing_id) is None:
        # Record was deleted while its form was open; submit as a new entry
        editing_id = None
        state['editing_id'] = None
    if editing_id is not None:
        result = session.update_transaction(
            editing_id,
            description=description,
            amount=amount,
            category=category,
            kind=kind,
        )
    else:
        result = session.add_transaction(description, amount, category, kind)
    if result is None:
        state.update({
            'form_description': description,
            'form_amount': amount,
            'form_category': category,
            'form_kind': kind,
        })
        return False
    reset_form(state)
    return True


def apply_budget_edits(session: BudgetSession, edits: Dict[str, Any]) -> int:
    """Apply edited limits; returns how many categories actually changed."""
    changed = 0
    current = session.budgets
    for category, value in edits.items():
        if category in current and value == current[category]:
            continue
        if session.set_budget(category, value):
            changed += 1
    return changed


class BudgetPlannerUI:
    """Page sections for the budget planner."""
    _PAGE_CONFIGURED = False

    def __init__(self, session: BudgetSession):
        self.session = session

    @staticmethod
    def setup_page_config() -> None:
        """Configure Streamlit page settings once per process."""
        if BudgetPlannerUI._PAGE_CONFIGURED:
            return
        try:
            st.set_page_config(
                page_title="Budget Tracker",
                page_icon="💰",
                layout="centered",
            )
        except StreamlitAPIException:
            # Already configured upstream; avoid raising to keep reruns smooth.
            pass
        finally:
            BudgetPlannerUI._PAGE_CONFIGURED = True

    def render_header(self) -> None:
        st.title("💰 Budget Tracker")
        st.caption("Manage your finances with ease")

    def render_month_navigator(self) -> None:
        col1, col2, col3 = st.columns([1, 4, 1])
        with col1:
            st.button("◀", key="prev_month", help="Previous month", on_click=self.session.previous_month)
        with col2:
            st.subheader(self.session.selection.label)
        with col3:
            st.button("▶", key="next_month", help="Next month", on_click=self.session.next_month)

    def render_summary(self, view: AggregationView) -> None:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Income", format_currency(view.total_income))
        with col2:
            st.metric("Expenses", format_currency(view.total_expense))
        with col3:
            st.metric("Balance", format_currency(view.balance))

    def render_transaction_form(self) -> None:
        state = st.session_state
        ensure_form_state(state)

        label = "✖ Close" if state['show_form'] else "➕ Add Transaction"
        if st.button(label, key="toggle_form"):
            if state['show_form']:
                reset_form(state)
            else:
                state['show_form'] = True
            _rerun()

        if not state['show_form']:
            return

        editing = state['editing_id'] is not None
        with st.form("transaction_form", clear_on_submit=False):
            st.markdown("**Edit Transaction**" if editing else "**New Transaction**")
            description = st.text_input("Description", value=state['form_description'], placeholder="Description")
            amount = st.text_input("Amount", value=state['form_amount'], placeholder="0.00")
            col1, col2 = st.columns(2)
            with col1:
                category = st.selectbox(
                    "Category",
                    config.CATEGORIES,
                    index=config.CATEGORIES.index(state['form_category']),
                    format_func=category_label,
                )
            with col2:
                kind = st.radio(
                    "Type",
                    config.KINDS[::-1],
                    index=config.KINDS[::-1].index(state['form_kind']),
                    format_func=str.capitalize,
                    horizontal=True,
                )
            submitted = st.form_submit_button("Update Transaction" if editing else "Add Transaction")

        if submitted:
            if submit_transaction(self.session, state, description, amount, category, kind):
                _rerun()
            else:
                st.error("Enter a description and a non-negative amount.")

    def render_budget_overview(self, view: AggregationView) -> None:
        state = st.session_state
        col1, col2 = st.columns([4, 1])
        with col1:
            st.subheader("Budget Overview")
        with col2:
            editing = state.get('show_edit_budget', False)
            if st.button("Done" if editing else "Edit Budgets", key="toggle_budget_edit"):
                state['show_edit_budget'] = not editing
                _rerun()

        if state.get('show_edit_budget', False):
            self._render_budget_editor()
            return

        for summary in view.categories:
            color = STATUS_COLOR.get(summary.status)
            amounts = f"{_money(summary.spent)} / {_money(summary.limit)}"
            if color:
                amounts = f":{color}[{amounts}]"
            st.markdown(f"{category_label(summary.category)}: {amounts}")
            st.progress(summary.progress / 100.0)

    def _render_budget_editor(self) -> None:
        budgets = self.session.budgets
        with st.form("budget_form"):
            edits: Dict[str, Any] = {}
            for category in config.CATEGORIES:
                edits[category] = st.number_input(
                    category_label(category),
                    min_value=0.0,
                    value=float(budgets[category]),
                    step=10.0,
                    key=f"budget_{category}",
                )
            if st.form_submit_button("Save budgets"):
                changed = apply_budget_edits(self.session, edits)
                st.success(f"Updated {changed} budget(s)")

    def render_charts(self, view: AggregationView) -> None:
        col1, col2 = st.columns([3, 2])
        with col1:
            st.plotly_chart(create_budget_bar_chart(view), use_container_width=True)
        with col2:
            st.plotly_chart(create_income_expense_chart(view), use_container_width=True)

    def render_recent_transactions(self) -> None:
        st.subheader("Recent Transactions")
        records = self.session.recent_transactions()
        if not records:
            st.info("No transactions yet. Add your first transaction!")
            return

        for record in records:
            col1, col2, col3, col4 = st.columns([5, 3, 1, 1])
            with col1:
                st.markdown(f"**{record.description}**")
                st.caption(f"{category_label(record.category)} · {format_date(record.date)}")
            with col2:
                sign = "+" if record.kind == 'income' else "-"
                color = 'green' if record.kind == 'income' else 'red'
                st.markdown(f":{color}[{sign}{_money(record.amount)}]")
            with col3:
                st.button(
                    "✏️", key=f"edit_{record.id}", help="Edit",
                    on_click=start_edit, args=(st.session_state, record),
                )
            with col4:
                st.button(
                    "🗑️", key=f"delete_{record.id}", help="Delete",
                    on_click=self.session.delete_transaction, args=(record.id,),
                )
