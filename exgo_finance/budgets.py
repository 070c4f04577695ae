"""Mini budgets: spending limits over a group of expense categories."""

from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Iterable, List, Optional, Sequence, Tuple

from .aggregation import expense_frame, transactions_frame
from .models import MiniBudget, MiniBudgetState, Transaction
from .periods import days_in_month, filter_by_month, parse_month_key

logger = logging.getLogger(__name__)

# Forecast thresholds relative to the limit
OVER_FORECAST_RATIO = 1.05
WARNING_FORECAST_RATIO = 0.95
# Spending ahead of the time-proportional expectation by this factor is a warning
WARNING_PACE_RATIO = 1.2


def month_progress(month_key: str, today: date) -> Tuple[int, int]:
    """Return ``(days_elapsed, days_in_month)`` for a month as seen from ``today``.

    The current month counts today's day of month, past months count in
    full and future months have no elapsed days.
    """
    first = parse_month_key(month_key)
    total = days_in_month(first.year, first.month)
    if (today.year, today.month) == (first.year, first.month):
        return today.day, total
    if (today.year, today.month) > (first.year, first.month):
        return total, total
    return 0, total


def budget_spent(budget: MiniBudget, transactions: Sequence[Transaction]) -> float:
    """Expense total over the budget's linked categories."""
    if not budget.linked_categories:
        return 0.0
    expenses = expense_frame(transactions_frame(transactions))
    if expenses.empty:
        return 0.0
    linked = expenses[expenses['Category'].isin(budget.linked_categories)]
    return float(linked['Amount'].sum())


def classify(spent: float, limit: float, forecast: float, days_elapsed: int, total_days: int) -> str:
    if spent >= limit or forecast > limit * OVER_FORECAST_RATIO:
        return 'over'
    expected = limit * days_elapsed / total_days if total_days else 0.0
    if expected > 0 and spent / expected > WARNING_PACE_RATIO:
        return 'warning'
    if forecast > limit * WARNING_FORECAST_RATIO:
        return 'warning'
    return 'ok'


def budget_state(
    budget: MiniBudget,
    transactions: Sequence[Transaction],
    month_key: str,
    today: date,
    tz: Optional[tzinfo] = None,
) -> MiniBudgetState:
    """Spending, pace and forecast of one budget for one month.

    Args:
        budget: The budget to evaluate.
        transactions: Any transaction history; only ``month_key`` is used.
        month_key: ``YYYY-MM`` month to evaluate.
        today: Local date used to decide how much of the month has passed.
        tz: Time zone used to place transactions in months.

    Returns:
        MiniBudgetState with ``pace`` as spend per elapsed day and
        ``forecast`` as that pace over the whole month.  Before the month
        starts pace and forecast are zero.
    """
    spent = budget_spent(budget, filter_by_month(transactions, month_key, tz))
    days_elapsed, total_days = month_progress(month_key, today)
    pace = spent / days_elapsed if days_elapsed else 0.0
    forecast = pace * total_days if days_elapsed else spent
    state = classify(spent, budget.limit_amount, forecast, days_elapsed, total_days)
    return MiniBudgetState(
        budget_id=budget.id,
        month=month_key,
        spent=spent,
        remaining=budget.limit_amount - spent,
        pace=pace,
        forecast=forecast,
        state=state,
        days_elapsed=days_elapsed,
        days_in_month=total_days,
    )


def all_budget_states(
    budgets: Iterable[MiniBudget],
    transactions: Sequence[Transaction],
    month_key: str,
    today: date,
    tz: Optional[tzinfo] = None,
) -> List[MiniBudgetState]:
    month = filter_by_month(transactions, month_key, tz)
    states = [budget_state(budget, month, month_key, today, tz) for budget in budgets]
    flagged = sum(1 for state in states if state.state != 'ok')
    logger.debug("Evaluated %d budget(s) for %s; %d flagged", len(states), month_key, flagged)
    return states
