"""Monthly aggregation over transaction lists.

Every function here is a pure computation over the list it is given:
callers pass the latest in-memory collection (usually already narrowed
to one month with :func:`exgo_finance.periods.filter_by_month`) and
get fresh totals back.  Inputs are never reordered or mutated.

Type-based sums ignore ``createdAt`` entirely, so a record with an
unparseable timestamp still counts towards totals; date-keyed groupings
(daily spending, monthly history) skip such records.
"""

from __future__ import annotations

import logging
import numbers
from datetime import tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .errors import ValidationError
from .models import UNCATEGORIZED, CategoryShare, MonthlyTotals, Transaction
from .periods import filter_by_month, to_local

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    'id',
    'Type',
    'Amount',
    'Category',
    'Created At',
    'Local Time',
    'Day',
    'Month',
    'Goal Id',
    'Credit Product Id',
    'Paid By Credit Product Id',
]


def transactions_frame(transactions: Iterable[Transaction], tz: Optional[tzinfo] = None) -> pd.DataFrame:
    """One row per transaction, with local ``Day``/``Month`` keys.

    ``Day`` and ``Month`` are ``None`` when ``createdAt`` cannot be parsed.
    """
    rows = []
    for tx in transactions:
        local = to_local(tx.created_at, tz)
        rows.append({
            'id': tx.id,
            'Type': tx.type,
            'Amount': float(tx.amount),
            'Category': tx.category,
            'Created At': tx.created_at,
            'Local Time': local,
            'Day': local.date().isoformat() if local is not None else None,
            'Month': f"{local.year:04d}-{local.month:02d}" if local is not None else None,
            'Goal Id': tx.goal_id,
            'Credit Product Id': tx.credit_product_id,
            'Paid By Credit Product Id': tx.paid_by_credit_product_id,
        })
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame['Amount'] = frame['Amount'].astype(float)
    return frame


def _check_income(monthly_income: float) -> float:
    if isinstance(monthly_income, bool) or not isinstance(monthly_income, numbers.Real):
        raise ValidationError(f"Monthly income must be a number, got {monthly_income!r}")
    return float(monthly_income)


def _sum_by_type(frame: pd.DataFrame) -> pd.Series:
    if frame.empty:
        return pd.Series(dtype=float)
    return frame.groupby('Type', sort=False)['Amount'].sum()


def compute_totals(transactions: Sequence[Transaction], monthly_income: float) -> MonthlyTotals:
    """Income, expenses, saved and remaining for one scope.

    ``income`` is the configured baseline plus income transactions.
    Credit-type transactions are debt drawdown and stay out of
    ``expenses``.  ``remaining`` is not clamped and goes negative when
    the month is over budget.
    """
    baseline = _check_income(monthly_income)
    by_type = _sum_by_type(transactions_frame(transactions))

    income = baseline + float(by_type.get('income', 0.0))
    expenses = float(by_type.get('expense', 0.0))
    saved = float(by_type.get('saved', 0.0))
    remaining = income - expenses - saved
    return MonthlyTotals(income=income, expenses=expenses, saved=saved, remaining=remaining)


def expense_frame(frame: pd.DataFrame) -> pd.DataFrame:
    expenses = frame[frame['Type'] == 'expense'].copy()
    if expenses.empty:
        return expenses
    category = expenses['Category'].fillna('').astype(str)
    expenses['Category'] = category.where(category.str.strip() != '', UNCATEGORIZED)
    return expenses


def category_breakdown(transactions: Sequence[Transaction]) -> Dict[str, CategoryShare]:
    """Per-category expense amount and share of total expenses.

    Keys keep first-encountered order.  Missing or blank categories are
    grouped under :data:`~exgo_finance.models.UNCATEGORIZED`.  When total
    expenses are zero every percentage is zero.
    """
    expenses = expense_frame(transactions_frame(transactions))
    if expenses.empty:
        return {}
    totals = expenses.groupby('Category', sort=False)['Amount'].sum()
    total_expenses = float(expenses['Amount'].sum())

    breakdown: Dict[str, CategoryShare] = {}
    for category, amount in totals.items():
        amount = float(amount)
        percent = amount / total_expenses * 100 if total_expenses > 0 else 0.0
        breakdown[str(category)] = CategoryShare(amount=amount, percent=percent)
    return breakdown


def top_categories(
    breakdown: Dict[str, CategoryShare],
    limit: Optional[int] = None,
) -> List[Tuple[str, CategoryShare]]:
    """Categories by descending amount; ties keep breakdown order."""
    ranked = sorted(breakdown.items(), key=lambda item: -item[1].amount)
    return ranked if limit is None else ranked[:limit]


def daily_expenses(transactions: Sequence[Transaction], tz: Optional[tzinfo] = None) -> pd.Series:
    """Expense sums per local calendar day, ascending by day key."""
    frame = transactions_frame(transactions, tz)
    expenses = frame[(frame['Type'] == 'expense') & frame['Day'].notna()]
    skipped = int(((frame['Type'] == 'expense') & frame['Day'].isna()).sum())
    if skipped:
        logger.warning("Skipped %d expense(s) with unparseable createdAt from daily grouping", skipped)
    if expenses.empty:
        return pd.Series(dtype=float, name='Amount').rename_axis('Day')
    daily = expenses.groupby('Day')['Amount'].sum().sort_index()
    daily.name = 'Amount'
    return daily


def saved_by_goal(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Total saved per goal id in one grouped pass over the history."""
    frame = transactions_frame(transactions)
    linked = frame[(frame['Type'] == 'saved') & frame['Goal Id'].notna()]
    if linked.empty:
        return {}
    return {str(goal_id): float(amount) for goal_id, amount in linked.groupby('Goal Id')['Amount'].sum().items()}


def credit_usage_by_product(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Card charges and credit drawdowns per credit product.

    ``Card Charges`` sums expenses paid with a product
    (``paidByCreditProductId``); ``Credit`` sums credit-type
    transactions that reference it (``creditProductId``).
    """
    frame = transactions_frame(transactions)
    charges = (
        frame[(frame['Type'] == 'expense') & frame['Paid By Credit Product Id'].notna()]
        .groupby('Paid By Credit Product Id')['Amount'].sum()
    )
    credit = (
        frame[(frame['Type'] == 'credit') & frame['Credit Product Id'].notna()]
        .groupby('Credit Product Id')['Amount'].sum()
    )
    usage = pd.DataFrame({'Card Charges': charges, 'Credit': credit}).fillna(0.0)
    usage.index.name = 'Product'
    return usage.sort_index()


def monthly_summary(
    transactions: Sequence[Transaction],
    monthly_income: float,
    month: str,
    tz: Optional[tzinfo] = None,
) -> MonthlyTotals:
    """Totals for one month key taken from the full history."""
    return compute_totals(filter_by_month(transactions, month, tz), monthly_income)


def monthly_history(
    transactions: Sequence[Transaction],
    monthly_income: float,
    tz: Optional[tzinfo] = None,
) -> pd.DataFrame:
    """Month-by-month totals for every month that has transactions."""
    baseline = _check_income(monthly_income)
    frame = transactions_frame(transactions, tz)
    dated = frame[frame['Month'].notna()]
    columns = ['Month', 'Income', 'Expenses', 'Saved', 'Remaining', 'Transaction_Count']
    if dated.empty:
        return pd.DataFrame(columns=columns)

    pivot = dated.pivot_table(index='Month', columns='Type', values='Amount', aggfunc='sum', fill_value=0.0)
    counts = dated.groupby('Month').size()
    history = pd.DataFrame(index=pivot.index)
    history['Income'] = baseline + pivot.get('income', 0.0)
    history['Expenses'] = pivot.get('expense', 0.0)
    history['Saved'] = pivot.get('saved', 0.0)
    history['Remaining'] = history['Income'] - history['Expenses'] - history['Saved']
    history['Transaction_Count'] = counts
    history = history.sort_index().reset_index()
    return history[columns]

