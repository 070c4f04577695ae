"""Plotly figures for the monthly budget views.

Each function takes the output of the matching :mod:`aggregation`
function and returns a ``plotly.graph_objects.Figure`` that a
presentation layer can embed.  Empty inputs produce an empty figure
titled "No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Dict

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .charts import EXPENSES_COLOR, REMAINING_COLOR, SAVED_COLOR
from .models import CategoryShare, MonthlyTotals


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_budget_donut(totals: MonthlyTotals, title: str | None = None) -> go.Figure:
    """Donut of expenses, saved and remaining for one month.

    Parameters
    ----------
    totals : MonthlyTotals
        Output of :func:`exgo_finance.aggregation.compute_totals`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Donut chart.  The remaining slice uses the value clamped at zero
        while the centre annotation shows the true remaining amount.
    """
    values = [totals.expenses, totals.saved, totals.chart_remaining]
    if sum(values) <= 0:
        return _empty_figure()
    fig = go.Figure(go.Pie(
        labels=["Expenses", "Saved", "Remaining"],
        values=values,
        hole=0.6,
        sort=False,
        direction="clockwise",
        marker=dict(colors=[EXPENSES_COLOR, SAVED_COLOR, REMAINING_COLOR]),
    ))
    fig.update_layout(
        title=title or "Budget overview",
        annotations=[dict(
            text=f"{totals.remaining:,.2f}",
            showarrow=False,
            font=dict(size=18, color=EXPENSES_COLOR if totals.remaining < 0 else "#111827"),
        )],
    )
    return fig


def create_daily_spending_chart(daily: pd.Series, title: str | None = None) -> go.Figure:
    """Bar chart of expense totals per day.

    Parameters
    ----------
    daily : pandas.Series
        Series indexed by ``YYYY-MM-DD`` day keys, as returned by
        :func:`exgo_finance.aggregation.daily_expenses`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Daily spending bars.
    """
    if daily.empty:
        return _empty_figure()
    df = daily.reset_index()
    df.columns = ["Day", "Amount"]
    fig = px.bar(df, x="Day", y="Amount")
    fig.update_traces(marker_color=REMAINING_COLOR)
    fig.update_layout(
        title=title or "Daily spending",
        xaxis_title="Day",
        yaxis_title="Amount",
    )
    return fig


def create_category_bar_chart(breakdown: Dict[str, CategoryShare], title: str | None = None) -> go.Figure:
    """Horizontal bars of expense amount per category, largest first.

    Parameters
    ----------
    breakdown : dict
        Mapping of category to :class:`CategoryShare`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with the percentage of total expenses as hover text.
    """
    if not breakdown:
        return _empty_figure()
    df = pd.DataFrame(
        [(category, share.amount, share.percent) for category, share in breakdown.items()],
        columns=["Category", "Amount", "Percent"],
    ).sort_values("Amount", ascending=True, kind="stable")
    fig = px.bar(df, x="Amount", y="Category", orientation="h", hover_data={"Percent": ":.1f"})
    fig.update_traces(marker_color=EXPENSES_COLOR)
    fig.update_layout(
        title=title or "Expenses by category",
        xaxis_title="Amount",
        yaxis_title="Category",
    )
    return fig
