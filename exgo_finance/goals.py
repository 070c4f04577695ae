"""Goal progress reconciliation.

A goal's ``current_amount`` is never edited directly: it is the sum of
every ``saved`` transaction linked to the goal across the whole history,
and its ``status`` follows from that sum.  The pure functions below do
the recompute; :class:`GoalBook` adds the persistence step and writes
only when a goal actually changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence

from .aggregation import saved_by_goal
from .errors import NotFoundError, ValidationError
from .models import Goal, Transaction, isoformat, new_goal, utc_now
from .storage import PersistedCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalRecalculation:
    goals: List[Goal]
    changed: bool


def _differs(before: Goal, after: Goal) -> bool:
    return before.current_amount != after.current_amount or before.status != after.status


def apply_goal_progress(goal: Goal, current_amount: float, now: Optional[datetime] = None) -> Goal:
    """Return ``goal`` with ``current_amount`` set and its status reconciled.

    An active goal that reaches its target is completed and stamped with
    ``completed_at`` (kept if already set).  A completed goal that drops
    below its target goes back to active and loses ``completed_at``.
    Anything else leaves status and ``completed_at`` alone, so repeated
    recomputes are idempotent.
    """
    current_amount = max(float(current_amount), 0.0)
    reached = current_amount >= goal.target_amount
    status = goal.status
    completed_at = goal.completed_at

    if reached and goal.status == 'active':
        status = 'completed'
        completed_at = goal.completed_at or isoformat(now or utc_now())
    elif not reached and goal.status == 'completed':
        status = 'active'
        completed_at = None

    if current_amount == goal.current_amount and status == goal.status and completed_at == goal.completed_at:
        return replace(goal)
    return replace(
        goal,
        current_amount=current_amount,
        status=status,
        completed_at=completed_at,
        updated_at=isoformat(now or utc_now()),
    )


def recalculate_goal(goal: Goal, transactions: Iterable[Transaction], now: Optional[datetime] = None) -> Goal:
    """Recompute one goal from the entire transaction history."""
    linked = [tx for tx in transactions if tx.goal_id == goal.id]
    return apply_goal_progress(goal, saved_by_goal(linked).get(goal.id, 0.0), now)


def recalculate_all_goals(
    goals: Sequence[Goal],
    transactions: Iterable[Transaction],
    now: Optional[datetime] = None,
) -> GoalRecalculation:
    """Recompute every goal from one grouped pass over the history."""
    totals = saved_by_goal(transactions)
    updated = [apply_goal_progress(goal, totals.get(goal.id, 0.0), now) for goal in goals]
    changed = any(_differs(before, after) for before, after in zip(goals, updated))
    logger.debug("Recalculated %d goal(s); changed=%s", len(updated), changed)
    return GoalRecalculation(goals=updated, changed=changed)


def find_goal(goals: Iterable[Goal], goal_id: str) -> Goal:
    for goal in goals:
        if goal.id == goal_id:
            return goal
    raise NotFoundError(f"Goal {goal_id} not found")


class GoalBook(PersistedCollection[Goal]):
    """Goals held in memory over a store, kept in sync with the ledger."""

    kind = 'Goal'

    def get_goal(self, goal_id: str) -> Goal:
        return self.get(goal_id)

    def active_goals(self) -> List[Goal]:
        return [goal for goal in self._items if goal.status == 'active']

    def create_goal(
        self,
        name: str,
        target_amount: float,
        currency: str,
        *,
        emoji: Optional[str] = None,
        note: Optional[str] = None,
        transactions: Iterable[Transaction] = (),
        now: Optional[datetime] = None,
    ) -> Goal:
        goal = new_goal(name, target_amount, currency, emoji=emoji, note=note, now=now)
        goal = recalculate_goal(goal, transactions, now)
        self._commit(self._items + [goal])
        return goal

    def update_goal(
        self,
        goal_id: str,
        *,
        name: Optional[str] = None,
        target_amount: Optional[float] = None,
        emoji: Optional[str] = None,
        note: Optional[str] = None,
        transactions: Iterable[Transaction] = (),
        now: Optional[datetime] = None,
    ) -> Goal:
        """Edit a goal's own fields, then reconcile it against ``transactions``."""
        goal = self.get(goal_id)
        changes = {key: value for key, value in {
            'name': name,
            'target_amount': target_amount,
            'emoji': emoji,
            'note': note,
        }.items() if value is not None}
        edited = replace(goal, updated_at=isoformat(now or utc_now()), **changes)
        if edited.target_amount <= 0:
            raise ValidationError("'targetAmount' must be > 0")
        edited = recalculate_goal(edited, transactions, now)
        self._commit(self._replaced(edited))
        return edited

    def delete_goal(self, goal_id: str) -> Goal:
        goal = self.get(goal_id)
        self._commit(self._without(goal_id))
        return goal

    def recalculate_goal(self, goal_id: str, transactions: Iterable[Transaction], now: Optional[datetime] = None) -> Goal:
        """Local recompute of one goal; persists only if it changed."""
        goal = self.get(goal_id)
        updated = recalculate_goal(goal, transactions, now)
        if _differs(goal, updated):
            self._commit(self._replaced(updated))
            return updated
        return goal

    def recalculate_all(self, transactions: Iterable[Transaction], now: Optional[datetime] = None) -> List[Goal]:
        """Full recompute; persists only if at least one goal changed."""
        result = recalculate_all_goals(self._items, transactions, now)
        if result.changed:
            self._commit(result.goals)
        return self.items

    def attach(self, ledger: Any) -> Callable[[], None]:
        """Recompute all goals after every persisted ledger change."""

        def on_change(event: str, changed: List[Transaction]) -> None:
            self.recalculate_all(ledger.get_all_transactions())

        return ledger.subscribe(on_change)
