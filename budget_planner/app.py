"""Streamlit app for the budget planner.

To run the app from the command line::

    streamlit run budget_planner/app.py

or use ``run_budget_planner.py`` in the project root.
"""

from __future__ import annotations

import logging
import os
import sys

import streamlit as st

# Conditional imports to support execution both as part of a package
# and directly as a script via ``streamlit run budget_planner/app.py``.
if __package__:
    from . import config
    from .ui import BudgetPlannerUI, get_session
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from budget_planner import config  # type: ignore
    from budget_planner.ui import BudgetPlannerUI, get_session  # type: ignore


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    BudgetPlannerUI.setup_page_config()
    config.ensure_data_directories()

    session = get_session()
    ui = BudgetPlannerUI(session)

    ui.render_header()
    ui.render_month_navigator()
    view = session.view()
    ui.render_summary(view)
    ui.render_transaction_form()
    st.divider()
    ui.render_budget_overview(view)
    ui.render_charts(view)
    st.divider()
    ui.render_recent_transactions()


if __name__ == "__main__":
    main()
