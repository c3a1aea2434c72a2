"""Plotly visualisation helpers for the budget planner.

Each function accepts an :class:`~budget_planner.aggregation.AggregationView`
and returns a ``plotly.graph_objects.Figure`` that Streamlit renders via
``st.plotly_chart``.
"""

from __future__ import annotations

from typing import Dict

import plotly.express as px
import plotly.graph_objects as go

from .aggregation import STATUS_NORMAL, STATUS_OVER, STATUS_WARNING, AggregationView
from .formatting import category_label

STATUS_COLORS: Dict[str, str] = {
    STATUS_OVER: "#ef4444",
    STATUS_WARNING: "#f97316",
    STATUS_NORMAL: "#22c55e",
}


def _empty_figure(title: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_budget_bar_chart(view: AggregationView, title: str | None = None) -> go.Figure:
    """Bar chart of spending per category with each limit as a marker.

    Parameters
    ----------
    view : AggregationView
        Summary for the selected month.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bars coloured by budget status, overlaid with limit markers.
    """
    df = view.to_dataframe()
    if df.empty:
        return _empty_figure("No data to display")
    df['Label'] = df['Category'].map(category_label)
    fig = px.bar(
        df,
        x='Label',
        y='Spent',
        color='Status',
        color_discrete_map=STATUS_COLORS,
        category_orders={'Status': [STATUS_NORMAL, STATUS_WARNING, STATUS_OVER]},
    )
    fig.add_trace(go.Scatter(
        x=df['Label'],
        y=df['Limit'],
        mode='markers',
        name='Limit',
        marker=dict(symbol='line-ew-open', size=28, color='#374151', line=dict(width=3)),
    ))
    fig.update_layout(
        title=title or "Spending vs budget",
        xaxis_title="Category",
        yaxis_title="Amount",
        legend_title_text="",
    )
    return fig


def create_income_expense_chart(view: AggregationView, title: str | None = None) -> go.Figure:
    """Donut chart comparing income and expense for the month."""
    if view.total_income == 0 and view.total_expense == 0:
        return _empty_figure("No transactions this month")
    fig = go.Figure(go.Pie(
        labels=['Income', 'Expenses'],
        values=[view.total_income, view.total_expense],
        hole=0.5,
        marker=dict(colors=["#22c55e", "#ef4444"]),
        sort=False,
    ))
    fig.update_layout(title=title or "Income vs expenses")
    return fig
