"""Helpers for projecting recurring transactions like subscriptions or rent."""

from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields, replace
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .config import UPCOMING_HORIZON_DAYS
from .errors import ValidationError
from .models import (
    RecurringTransaction,
    Transaction,
    UpcomingTransaction,
    new_id,
    new_recurring_transaction,
)
from .periods import add_months, to_local
from .storage import PersistedCollection

logger = logging.getLogger(__name__)

# Fixed-length cadences, in days
DAY_STEPS = {'daily': 1, 'weekly': 7}
# Calendar cadences, in months; the start day-of-month is kept and clamped
MONTH_STEPS = {'monthly': 1, 'yearly': 12}

MONTHLY_MULTIPLIERS = {
    'daily': 365 / 12,
    'weekly': 52 / 12,
    'monthly': 1.0,
    'yearly': 1 / 12,
}

# Transaction types that take money out of the monthly budget
OUTFLOW_TYPES = {'expense', 'credit', 'saved'}


def _as_day(value: Any) -> date:
    if isinstance(value, datetime):
        return to_local(value).date()
    if isinstance(value, date):
        return value
    local = to_local(value)
    if local is None:
        raise ValidationError(f"Not a valid date: {value!r}")
    return local.date()


def occurrence_at(definition: RecurringTransaction, index: int) -> date:
    """Date of the ``index``-th occurrence, counted from ``start_date``.

    Calendar cadences are computed from the start date rather than the
    previous occurrence, so a schedule on the 31st returns to the 31st
    after a short month instead of drifting.
    """
    start = definition.start_date
    if definition.frequency in DAY_STEPS:
        return start + timedelta(days=index * DAY_STEPS[definition.frequency])
    return add_months(start, index * MONTH_STEPS[definition.frequency], day=start.day)


def _first_index_on_or_after(definition: RecurringTransaction, day: date) -> int:
    start = definition.start_date
    if day <= start:
        return 0
    if definition.frequency in DAY_STEPS:
        step = DAY_STEPS[definition.frequency]
        return -(-(day - start).days // step)
    months = (day.year - start.year) * 12 + (day.month - start.month)
    index = max(months // MONTH_STEPS[definition.frequency], 0)
    while occurrence_at(definition, index) < day:
        index += 1
    return index


def next_occurrence(definition: RecurringTransaction, on_or_after: Any) -> Optional[date]:
    """First occurrence on or after the given day, or ``None`` past ``end_date``."""
    day = _as_day(on_or_after)
    occurrence = occurrence_at(definition, _first_index_on_or_after(definition, day))
    if definition.end_date is not None and occurrence > definition.end_date:
        return None
    return occurrence


def occurrences(definition: RecurringTransaction, start: Any, end: Any) -> List[date]:
    """All occurrences in the inclusive range ``[start, end]``."""
    first, last = _as_day(start), _as_day(end)
    if definition.end_date is not None:
        last = min(last, definition.end_date)
    found: List[date] = []
    index = _first_index_on_or_after(definition, first)
    occurrence = occurrence_at(definition, index)
    while occurrence <= last:
        found.append(occurrence)
        index += 1
        occurrence = occurrence_at(definition, index)
    return found


def project_upcoming(
    definitions: Iterable[RecurringTransaction],
    as_of: Any,
    horizon_days: int,
    limit: Optional[int] = None,
) -> List[UpcomingTransaction]:
    """Occurrences of active definitions from ``as_of`` through ``as_of + horizon_days``.

    Nothing before ``as_of`` is ever returned, so ``days_until`` is
    never negative.  Results are ordered by scheduled date; definitions
    due on the same day keep their input order.
    """
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int) or horizon_days < 0:
        raise ValidationError(f"horizon_days must be a non-negative integer, got {horizon_days!r}")
    today = _as_day(as_of)
    window_end = today + timedelta(days=horizon_days)

    upcoming: List[UpcomingTransaction] = []
    for definition in definitions:
        if not definition.is_active:
            continue
        for scheduled in occurrences(definition, today, window_end):
            upcoming.append(UpcomingTransaction(
                recurring_id=definition.id,
                name=definition.name,
                type=definition.type,
                amount=definition.amount,
                category=definition.category,
                scheduled_date=scheduled,
                days_until=(scheduled - today).days,
            ))
    upcoming.sort(key=lambda item: item.scheduled_date)
    return upcoming if limit is None else upcoming[:limit]


def _occurrence_transaction(definition: RecurringTransaction, scheduled: date) -> Transaction:
    return Transaction(
        id=new_id(),
        type=definition.type,
        amount=definition.amount,
        created_at=f"{scheduled.isoformat()}T00:00:00.000",
        category=definition.category,
        goal_id=definition.goal_id,
        credit_product_id=definition.credit_product_id,
        paid_by_credit_product_id=definition.paid_by_credit_product_id,
        recurring_transaction_id=definition.id,
        note=definition.note,
    )


def materialize_due(
    definitions: Sequence[RecurringTransaction],
    as_of: Any,
) -> Tuple[List[Transaction], List[RecurringTransaction]]:
    """Create the transactions that have come due up to ``as_of``.

    Each active definition produces one transaction per occurrence after
    its ``last_generated_on`` (or from its start), dated at the
    occurrence.  Returns the new transactions and the updated definition
    list; a definition with no occurrences left is marked completed.
    """
    today = _as_day(as_of)
    created: List[Transaction] = []
    updated: List[RecurringTransaction] = []
    for definition in definitions:
        if not definition.is_active:
            updated.append(definition)
            continue
        since = (
            definition.last_generated_on + timedelta(days=1)
            if definition.last_generated_on is not None
            else definition.start_date
        )
        due = occurrences(definition, since, today) if since <= today else []
        created.extend(_occurrence_transaction(definition, scheduled) for scheduled in due)

        last_generated = due[-1] if due else definition.last_generated_on
        status = definition.status
        if definition.end_date is not None:
            resume_from = last_generated + timedelta(days=1) if last_generated else definition.start_date
            if next_occurrence(definition, resume_from) is None:
                status = 'completed'
        if last_generated != definition.last_generated_on or status != definition.status:
            definition = replace(definition, last_generated_on=last_generated, status=status)
        updated.append(definition)
    logger.debug("Materialized %d recurring transaction(s) up to %s", len(created), today)
    return created, updated


def monthly_commitments(definitions: Iterable[RecurringTransaction]) -> pd.DataFrame:
    """Monthly cost estimate for each active outgoing definition."""
    rows = [
        {
            'Name': definition.name,
            'Recurring Type': definition.recurring_type,
            'Frequency': definition.frequency,
            'Amount': definition.amount,
            'Monthly Estimate': round(definition.amount * MONTHLY_MULTIPLIERS[definition.frequency], 2),
        }
        for definition in definitions
        if definition.is_active and definition.type in OUTFLOW_TYPES
    ]
    columns = ['Name', 'Recurring Type', 'Frequency', 'Amount', 'Monthly Estimate']
    if not rows:
        return pd.DataFrame(columns=columns)
    commitments = pd.DataFrame(rows, columns=columns)
    return commitments.sort_values('Monthly Estimate', ascending=False, kind='stable').reset_index(drop=True)


def monthly_commitment(definitions: Iterable[RecurringTransaction]) -> float:
    commitments = monthly_commitments(definitions)
    return float(commitments['Monthly Estimate'].sum()) if not commitments.empty else 0.0


class RecurringBook(PersistedCollection[RecurringTransaction]):
    """Recurring definitions over a store, with the same rollback contract as goals."""

    kind = 'Recurring transaction'

    def active_definitions(self) -> List[RecurringTransaction]:
        return [definition for definition in self._items if definition.is_active]

    def create_recurring(self, name: str, type: str, amount: float, frequency: str, start_date: Any, **fields: Any) -> RecurringTransaction:
        definition = new_recurring_transaction(name, type, amount, frequency, start_date, **fields)
        self._commit(self._items + [definition])
        return definition

    def update_recurring(self, definition_id: str, **changes: Any) -> RecurringTransaction:
        current = self.get(definition_id)
        editable = {field.name for field in dataclass_fields(RecurringTransaction)} - {'id'}
        unknown = sorted(set(changes) - editable)
        if unknown:
            raise ValidationError(f"Cannot update recurring transaction field(s): {', '.join(unknown)}")
        if 'amount' in changes and not (isinstance(changes['amount'], (int, float)) and changes['amount'] > 0):
            raise ValidationError("'amount' must be > 0")
        edited = replace(current, **changes)
        self._commit(self._replaced(edited))
        return edited

    def delete_recurring(self, definition_id: str) -> RecurringTransaction:
        definition = self.get(definition_id)
        self._commit(self._without(definition_id))
        return definition

    def pause(self, definition_id: str) -> RecurringTransaction:
        return self._set_status(definition_id, 'paused')

    def resume(self, definition_id: str) -> RecurringTransaction:
        if self.get(definition_id).status == 'completed':
            raise ValidationError(f"Recurring transaction {definition_id} has already completed")
        return self._set_status(definition_id, 'active')

    def _set_status(self, definition_id: str, status: str) -> RecurringTransaction:
        edited = replace(self.get(definition_id), status=status)
        self._commit(self._replaced(edited))
        return edited

    def upcoming(self, as_of: Any, horizon_days: int = UPCOMING_HORIZON_DAYS, limit: Optional[int] = None) -> List[UpcomingTransaction]:
        return project_upcoming(self._items, as_of, horizon_days, limit)

    def process_due(self, ledger: Any, as_of: Any) -> List[Transaction]:
        """Add due occurrences to ``ledger`` and record progress on the definitions.

        The ledger write happens first.  If saving the definitions then
        fails, the raised error's ``retry`` persists them without creating
        the transactions a second time.  When the ledger saves the
        transactions but one of its listeners fails, the definitions are
        still saved before the listener's error is raised.
        """
        created, updated = materialize_due(self._items, as_of)
        try:
            if created:
                ledger.add_transactions(created)
        except Exception:
            if created[-1].id not in ledger:
                raise
            self._record_progress(updated)
            raise
        self._record_progress(updated)
        return created

    def _record_progress(self, updated: List[RecurringTransaction]) -> None:
        if updated != self._items:
            self._commit(updated)
