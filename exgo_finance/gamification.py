"""XP, levels, logging streaks, badges and challenges.

Everything here is derived from the transaction history and the goals,
and every function returns a new :class:`GamificationState` instead of
changing one in place.  Functions that stamp a time take ``now``; none
of them read the clock on their own except through ``utc_now`` when
``now`` is omitted.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from .config import GAMIFICATION_FILE, SKIP_TOKEN_INTERVAL, XP_PER_LEVEL
from .errors import NotFoundError, ValidationError
from .models import (
    Badge,
    Challenge,
    GamificationState,
    Goal,
    StreakState,
    Transaction,
    isoformat,
    new_id,
    utc_now,
)
from .periods import to_local
from .storage import JsonStore

logger = logging.getLogger(__name__)

XP_VALUES = {
    'transaction_logged': 10,
    'goal_checkpoint_50': 50,
    'goal_checkpoint_80': 75,
    'goal_completed': 100,
    'budget_under_limit': 25,
    'debt_on_time': 30,
    'challenge_completed': 150,
}
BADGE_UNLOCK_XP = 50

DEFAULT_BADGES: Tuple[Badge, ...] = (
    Badge('logging_7', 'Week Warrior', 'bronze', 'logging', 7, 'Log transactions for 7 consecutive days'),
    Badge('logging_30', 'Monthly Logger', 'silver', 'logging', 30, 'Log transactions for 30 days'),
    Badge('logging_100', 'Centurion', 'gold', 'logging', 100, 'Log transactions for 100 days'),
    Badge('goal_50', 'Halfway Hero', 'bronze', 'goals', 50, 'Reach 50% of any goal'),
    Badge('goal_80', 'Almost There', 'silver', 'goals', 80, 'Reach 80% of any goal'),
    Badge('goal_100', 'Goal Master', 'gold', 'goals', 100, 'Complete any goal'),
    Badge('budget_1', 'Budget Keeper', 'bronze', 'budgets', 1, 'Stay under budget for 1 month'),
    Badge('budget_3', 'Budget Master', 'silver', 'budgets', 3, 'Stay under budget for 3 months'),
    Badge('budget_6', 'Budget Legend', 'gold', 'budgets', 6, 'Stay under budget for 6 months'),
    Badge('debt_3', 'On-Time Payer', 'bronze', 'debts', 3, 'Make on-time payments for 3 months'),
    Badge('debt_6', 'Reliable Payer', 'silver', 'debts', 6, 'Make on-time payments for 6 months'),
    Badge('debt_12', 'Debt Free Champion', 'gold', 'debts', 12, 'Make on-time payments for 12 months'),
    Badge('consistency_1', 'Steady Saver', 'bronze', 'consistency', 1, 'No overspending for 1 month'),
    Badge('consistency_3', 'Consistent Saver', 'silver', 'consistency', 3, 'No overspending for 3 months'),
    Badge('consistency_6', 'Financial Discipline', 'gold', 'consistency', 6, 'No overspending for 6 months'),
)


def initial_state() -> GamificationState:
    return GamificationState(badges=DEFAULT_BADGES)


# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------


def xp_for_level(level: int) -> int:
    """Total XP needed to move past ``level``."""
    return level * XP_PER_LEVEL


def level_for_xp(xp: int) -> int:
    return 1 + max(xp, 0) // XP_PER_LEVEL


def add_xp(state: GamificationState, amount: int, now: Optional[datetime] = None) -> GamificationState:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise ValidationError(f"XP amount must be a non-negative integer, got {amount!r}")
    if amount == 0:
        return state
    return replace(state, xp=state.xp + amount, last_updated=isoformat(now or utc_now()))


def goal_milestone_xp(goal: Goal) -> int:
    """XP for a goal that just changed, by the milestone it has reached."""
    percent = _goal_percent(goal)
    if percent >= 100:
        return XP_VALUES['goal_completed']
    if percent >= 80:
        return XP_VALUES['goal_checkpoint_80']
    if percent >= 50:
        return XP_VALUES['goal_checkpoint_50']
    return 0


# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------


def update_streak(streak: StreakState, day: date) -> StreakState:
    """Count ``day`` as a logging day.

    The next calendar day extends the streak.  A gap of exactly one
    missed day spends a skip token when one is available; any longer
    gap starts over at 1.  Days on or before ``last_date`` change
    nothing.  Every ``SKIP_TOKEN_INTERVAL`` consecutive days earn a
    token.
    """
    if streak.last_date is not None and day <= streak.last_date:
        return streak

    current = streak.current
    tokens = streak.skip_tokens
    if streak.last_date is None:
        current = 1
    else:
        gap = (day - streak.last_date).days
        if gap == 1:
            current += 1
        elif gap == 2 and tokens > 0:
            tokens -= 1
            current += 1
        else:
            current = 1

    if current > streak.current and current % SKIP_TOKEN_INTERVAL == 0:
        tokens += 1
    return StreakState(current=current, best=max(streak.best, current), skip_tokens=tokens, last_date=day)


def logging_days(transactions: Iterable[Transaction], tz: Optional[tzinfo] = None) -> List[date]:
    """Distinct local calendar days with at least one transaction, oldest first."""
    days = set()
    for tx in transactions:
        local = to_local(tx.created_at, tz)
        if local is not None:
            days.add(local.date())
    return sorted(days)


def streak_from_transactions(transactions: Iterable[Transaction], tz: Optional[tzinfo] = None) -> StreakState:
    streak = StreakState()
    for day in logging_days(transactions, tz):
        streak = update_streak(streak, day)
    return streak


def record_logging_day(state: GamificationState, day: date, now: Optional[datetime] = None) -> GamificationState:
    """Extend the streak for ``day`` and award the logging XP once per day."""
    streak = update_streak(state.streak, day)
    if streak == state.streak:
        return state
    state = replace(state, streak=streak)
    return add_xp(state, XP_VALUES['transaction_logged'], now)


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


def _goal_percent(goal: Goal) -> int:
    if goal.target_amount <= 0:
        return 100
    return math.floor(goal.current_amount / goal.target_amount * 100)


def refresh_badges(
    state: GamificationState,
    goals: Iterable[Goal] = (),
    now: Optional[datetime] = None,
) -> GamificationState:
    """Update badge progress and unlock every badge that reached its target.

    Logging badges follow the current streak and goal badges follow the
    best goal percentage.  Budget, debt and consistency badges keep the
    progress they already have.  Each unlock awards ``BADGE_UNLOCK_XP``.
    """
    best_goal = max((_goal_percent(goal) for goal in goals), default=0)
    stamp = isoformat(now or utc_now())
    badges: List[Badge] = []
    unlocked = 0
    for badge in state.badges:
        if badge.unlocked:
            badges.append(badge)
            continue
        progress = badge.progress
        if badge.category == 'logging':
            progress = state.streak.current
        elif badge.category == 'goals':
            progress = best_goal
        progress = min(progress, badge.target)
        if progress >= badge.target:
            badges.append(replace(badge, progress=badge.target, unlocked_at=stamp))
            unlocked += 1
        else:
            badges.append(replace(badge, progress=progress))

    if tuple(badges) == state.badges:
        return state
    if unlocked:
        logger.info("Unlocked %d badge(s)", unlocked)
    state = replace(state, badges=tuple(badges), last_updated=stamp)
    return add_xp(state, unlocked * BADGE_UNLOCK_XP, now)


def set_badge_progress(
    state: GamificationState,
    badge_id: str,
    progress: int,
    now: Optional[datetime] = None,
) -> GamificationState:
    """Record progress for a badge whose source lives outside this module."""
    _find(state.badges, badge_id, 'Badge')
    badges = tuple(
        replace(badge, progress=min(progress, badge.target)) if badge.id == badge_id and not badge.unlocked else badge
        for badge in state.badges
    )
    return refresh_badges(replace(state, badges=badges), now=now)


# ---------------------------------------------------------------------------
# Challenges
# ---------------------------------------------------------------------------


def _find(items: Iterable[Any], item_id: str, kind: str) -> Any:
    for item in items:
        if item.id == item_id:
            return item
    raise NotFoundError(f"{kind} {item_id} not found")


def create_challenge(
    state: GamificationState,
    title: str,
    type: str,
    target: float,
    start: Any,
    end: Any,
    now: Optional[datetime] = None,
) -> Tuple[GamificationState, Challenge]:
    """Start a new challenge; any challenge still active is expired first."""
    challenge = Challenge(id=new_id(), title=title, type=type, target=target, start=start, end=end)
    challenges = tuple(
        replace(existing, status='expired') if existing.status == 'active' else existing
        for existing in state.challenges
    ) + (challenge,)
    return replace(state, challenges=challenges, last_updated=isoformat(now or utc_now())), challenge


def update_challenge_progress(
    state: GamificationState,
    challenge_id: str,
    progress: float,
    now: Optional[datetime] = None,
) -> GamificationState:
    challenge = _find(state.challenges, challenge_id, 'Challenge')
    if challenge.status != 'active':
        return state
    updated = replace(challenge, progress=min(progress, challenge.target))
    return _with_challenge(state, updated, now)


def complete_challenge(state: GamificationState, challenge_id: str, now: Optional[datetime] = None) -> GamificationState:
    challenge = _find(state.challenges, challenge_id, 'Challenge')
    if challenge.status != 'active':
        return state
    state = _with_challenge(state, replace(challenge, status='completed', progress=challenge.target), now)
    return add_xp(state, XP_VALUES['challenge_completed'], now)


def settle_challenges(state: GamificationState, today: date, now: Optional[datetime] = None) -> GamificationState:
    """Close active challenges whose end date has passed.

    A challenge that met its target is completed (with its XP); the rest
    expire.
    """
    for challenge in state.challenges:
        if challenge.status != 'active' or challenge.end >= today:
            continue
        if challenge.progress >= challenge.target:
            state = complete_challenge(state, challenge.id, now)
        else:
            state = _with_challenge(state, replace(challenge, status='expired'), now)
    return state


def _with_challenge(state: GamificationState, updated: Challenge, now: Optional[datetime]) -> GamificationState:
    challenges = tuple(updated if item.id == updated.id else item for item in state.challenges)
    return replace(state, challenges=challenges, last_updated=isoformat(now or utc_now()))


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def load_gamification(path: Optional[Path] = None) -> GamificationState:
    """Load the stored state; missing or invalid documents give a fresh one."""
    data = JsonStore(path or GAMIFICATION_FILE, {}).load()
    if not data:
        return initial_state()
    try:
        state = GamificationState.from_dict(data)
    except ValidationError as exc:
        logger.warning("Invalid gamification state (%s); starting fresh", exc)
        return initial_state()
    known = {badge.id for badge in state.badges}
    missing = tuple(badge for badge in DEFAULT_BADGES if badge.id not in known)
    return replace(state, badges=state.badges + missing) if missing else state


def save_gamification(state: GamificationState, path: Optional[Path] = None) -> None:
    JsonStore(path or GAMIFICATION_FILE, {}).save(state.to_dict())
