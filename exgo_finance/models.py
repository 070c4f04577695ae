"""Record types shared by the engine.

Persisted records (transactions, goals, recurring definitions, credit
products, mini budgets, settings) round-trip through ``from_dict`` and
``to_dict`` using the camelCase keys of the stored JSON documents.
Derived values (totals, category shares, upcoming occurrences) are
plain frozen dataclasses that are never stored.
"""

from __future__ import annotations

import math
import numbers
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import DEFAULT_CURRENCY, DEFAULT_LANGUAGE, DEFAULT_MONTHLY_INCOME, XP_PER_LEVEL
from .errors import ValidationError
from .i18n import normalize_language
from .periods import to_local

TRANSACTION_TYPES = ('expense', 'income', 'saved', 'credit')
GOAL_STATUSES = ('active', 'completed')
RECURRING_TYPES = ('subscription', 'rent', 'salary', 'bill', 'other')
FREQUENCIES = ('daily', 'weekly', 'monthly', 'yearly')
RECURRING_STATUSES = ('active', 'paused', 'completed')
CREDIT_TYPES = ('credit_card', 'loan', 'installment')
CREDIT_STATUSES = ('active', 'paid_off')
BUDGET_STATES = ('ok', 'warning', 'over')
BADGE_TIERS = ('bronze', 'silver', 'gold')
BADGE_CATEGORIES = ('logging', 'goals', 'budgets', 'debts', 'consistency')
CHALLENGE_STATUSES = ('active', 'completed', 'expired')

# Reserved bucket for expenses without a category
UNCATEGORIZED = 'uncategorized'


# ---------------------------------------------------------------------------
# Field validation helpers
# ---------------------------------------------------------------------------


def _number(value: Any, name: str, *, allow_zero: bool = True) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"'{name}' must be a number, got {value!r}")
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"'{name}' must be finite")
    if number < 0 or (not allow_zero and number == 0):
        bound = '>= 0' if allow_zero else '> 0'
        raise ValidationError(f"'{name}' must be {bound}, got {value!r}")
    return number


def _choice(value: Any, choices: Sequence[str], name: str) -> str:
    if value not in choices:
        raise ValidationError(f"'{name}' must be one of {', '.join(choices)}; got {value!r}")
    return value


def _text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{name}' is required")
    return value


def _optional_text(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be text, got {value!r}")
    return value


def _to_date(value: Any, name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
        local = to_local(text)
        if local is not None:
            return local.date()
    raise ValidationError(f"'{name}' is not a valid date: {value!r}")


def _optional_date(value: Any, name: str) -> Optional[date]:
    if value is None or value == '':
        return None
    return _to_date(value, name)


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise ValidationError(f"Missing required field '{key}'")
    return data[key]


def _compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(moment: datetime) -> str:
    """ISO-8601 text with millisecond precision, as stored on disk."""
    return moment.isoformat(timespec='milliseconds')


def new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transaction:
    """A single money movement. Direction comes from ``type``; ``amount`` is a magnitude."""

    id: str
    type: str
    amount: float
    created_at: str
    category: Optional[str] = None
    goal_id: Optional[str] = None
    credit_product_id: Optional[str] = None
    paid_by_credit_product_id: Optional[str] = None
    recurring_transaction_id: Optional[str] = None
    note: Optional[str] = None

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _choice(self.type, TRANSACTION_TYPES, 'type')
        object.__setattr__(self, 'amount', _number(self.amount, 'amount'))
        _text(self.created_at, 'createdAt')
        _optional_text(self.category, 'category')
        _optional_text(self.note, 'note')
        if self.goal_id is not None and self.type != 'saved':
            raise ValidationError("'goalId' is only allowed on saved transactions")
        if self.credit_product_id is not None and self.type != 'credit':
            raise ValidationError("'creditProductId' is only allowed on credit transactions")
        if self.paid_by_credit_product_id is not None and self.type != 'expense':
            raise ValidationError("'paidByCreditProductId' is only allowed on expense transactions")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Transaction':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Transaction record must be an object, got {type(data).__name__}")
        return cls(
            id=_require(data, 'id'),
            type=_require(data, 'type'),
            amount=_require(data, 'amount'),
            created_at=_require(data, 'createdAt'),
            category=data.get('category') or None,
            goal_id=data.get('goalId'),
            credit_product_id=data.get('creditProductId'),
            paid_by_credit_product_id=data.get('paidByCreditProductId'),
            recurring_transaction_id=data.get('recurringTransactionId'),
            note=data.get('note'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'id': self.id,
            'type': self.type,
            'amount': self.amount,
            'category': self.category,
            'createdAt': self.created_at,
            'goalId': self.goal_id,
            'creditProductId': self.credit_product_id,
            'paidByCreditProductId': self.paid_by_credit_product_id,
            'recurringTransactionId': self.recurring_transaction_id,
            'note': self.note,
        })


def new_transaction(
    type: str,
    amount: float,
    category: Optional[str] = None,
    *,
    created_at: Optional[str] = None,
    goal_id: Optional[str] = None,
    credit_product_id: Optional[str] = None,
    paid_by_credit_product_id: Optional[str] = None,
    recurring_transaction_id: Optional[str] = None,
    note: Optional[str] = None,
) -> Transaction:
    """Create a transaction with a fresh id; the amount must be strictly positive."""
    _number(amount, 'amount', allow_zero=False)
    return Transaction(
        id=new_id(),
        type=type,
        amount=amount,
        created_at=created_at or isoformat(utc_now()),
        category=category or None,
        goal_id=goal_id,
        credit_product_id=credit_product_id,
        paid_by_credit_product_id=paid_by_credit_product_id,
        recurring_transaction_id=recurring_transaction_id,
        note=note,
    )


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Goal:
    """A savings target fed by ``saved`` transactions linked through ``goal_id``."""

    id: str
    name: str
    target_amount: float
    currency: str
    created_at: str
    updated_at: str
    current_amount: float = 0.0
    status: str = 'active'
    completed_at: Optional[str] = None
    emoji: str = '🎯'
    note: Optional[str] = None

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _text(self.name, 'name')
        object.__setattr__(self, 'target_amount', _number(self.target_amount, 'targetAmount'))
        object.__setattr__(self, 'current_amount', _number(self.current_amount, 'currentAmount'))
        _text(self.currency, 'currency')
        _choice(self.status, GOAL_STATUSES, 'status')
        _optional_text(self.note, 'note')

    @property
    def progress(self) -> float:
        """Share of the target reached, clamped to [0, 1]."""
        if self.target_amount <= 0:
            return 1.0
        return min(max(self.current_amount / self.target_amount, 0.0), 1.0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Goal':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Goal record must be an object, got {type(data).__name__}")
        return cls(
            id=_require(data, 'id'),
            name=_require(data, 'name'),
            target_amount=_require(data, 'targetAmount'),
            currency=_require(data, 'currency'),
            created_at=_require(data, 'createdAt'),
            updated_at=data.get('updatedAt') or data['createdAt'],
            current_amount=data.get('currentAmount', 0.0),
            status=data.get('status', 'active'),
            completed_at=data.get('completedAt'),
            emoji=data.get('emoji') or '🎯',
            note=data.get('note'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'id': self.id,
            'name': self.name,
            'targetAmount': self.target_amount,
            'currentAmount': self.current_amount,
            'currency': self.currency,
            'status': self.status,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
            'completedAt': self.completed_at,
            'emoji': self.emoji,
            'note': self.note,
        })


def new_goal(
    name: str,
    target_amount: float,
    currency: str,
    *,
    emoji: Optional[str] = None,
    note: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Goal:
    _number(target_amount, 'targetAmount', allow_zero=False)
    stamp = isoformat(now or utc_now())
    return Goal(
        id=new_id(),
        name=name,
        target_amount=target_amount,
        currency=currency,
        created_at=stamp,
        updated_at=stamp,
        emoji=emoji or '🎯',
        note=note,
    )


# ---------------------------------------------------------------------------
# Recurring definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecurringTransaction:
    """Template for a transaction repeating on a fixed cadence."""

    id: str
    name: str
    type: str
    amount: float
    recurring_type: str
    frequency: str
    start_date: date
    category: Optional[str] = None
    end_date: Optional[date] = None
    note: Optional[str] = None
    status: str = 'active'
    goal_id: Optional[str] = None
    credit_product_id: Optional[str] = None
    paid_by_credit_product_id: Optional[str] = None
    last_generated_on: Optional[date] = None

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _text(self.name, 'name')
        _choice(self.type, TRANSACTION_TYPES, 'type')
        object.__setattr__(self, 'amount', _number(self.amount, 'amount'))
        _choice(self.recurring_type, RECURRING_TYPES, 'recurringType')
        _choice(self.frequency, FREQUENCIES, 'frequency')
        _choice(self.status, RECURRING_STATUSES, 'status')
        object.__setattr__(self, 'start_date', _to_date(self.start_date, 'startDate'))
        object.__setattr__(self, 'end_date', _optional_date(self.end_date, 'endDate'))
        object.__setattr__(self, 'last_generated_on', _optional_date(self.last_generated_on, 'lastGeneratedOn'))
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValidationError("'endDate' must not be before 'startDate'")
        if self.goal_id is not None and self.type != 'saved':
            raise ValidationError("'goalId' is only allowed on saved transactions")
        if self.credit_product_id is not None and self.type != 'credit':
            raise ValidationError("'creditProductId' is only allowed on credit transactions")
        if self.paid_by_credit_product_id is not None and self.type != 'expense':
            raise ValidationError("'paidByCreditProductId' is only allowed on expense transactions")

    @property
    def is_active(self) -> bool:
        return self.status == 'active'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RecurringTransaction':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Recurring record must be an object, got {type(data).__name__}")
        return cls(
            id=_require(data, 'id'),
            name=_require(data, 'name'),
            type=_require(data, 'type'),
            amount=_require(data, 'amount'),
            recurring_type=data.get('recurringType', 'other'),
            frequency=_require(data, 'frequency'),
            start_date=_require(data, 'startDate'),
            category=data.get('category') or None,
            end_date=data.get('endDate'),
            note=data.get('note'),
            status=data.get('status', 'active'),
            goal_id=data.get('goalId'),
            credit_product_id=data.get('creditProductId'),
            paid_by_credit_product_id=data.get('paidByCreditProductId'),
            last_generated_on=data.get('lastGeneratedOn'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'amount': self.amount,
            'recurringType': self.recurring_type,
            'frequency': self.frequency,
            'startDate': self.start_date.isoformat(),
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'category': self.category,
            'note': self.note,
            'status': self.status,
            'goalId': self.goal_id,
            'creditProductId': self.credit_product_id,
            'paidByCreditProductId': self.paid_by_credit_product_id,
            'lastGeneratedOn': self.last_generated_on.isoformat() if self.last_generated_on else None,
        })


def new_recurring_transaction(
    name: str,
    type: str,
    amount: float,
    frequency: str,
    start_date: Any,
    *,
    recurring_type: str = 'other',
    category: Optional[str] = None,
    end_date: Any = None,
    note: Optional[str] = None,
    goal_id: Optional[str] = None,
    credit_product_id: Optional[str] = None,
    paid_by_credit_product_id: Optional[str] = None,
) -> RecurringTransaction:
    _number(amount, 'amount', allow_zero=False)
    return RecurringTransaction(
        id=new_id(),
        name=name,
        type=type,
        amount=amount,
        recurring_type=recurring_type,
        frequency=frequency,
        start_date=start_date,
        category=category or None,
        end_date=end_date,
        note=note,
        goal_id=goal_id,
        credit_product_id=credit_product_id,
        paid_by_credit_product_id=paid_by_credit_product_id,
    )


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UpcomingTransaction:
    recurring_id: str
    name: str
    type: str
    amount: float
    category: Optional[str]
    scheduled_date: date
    days_until: int


@dataclass(frozen=True)
class MonthlyTotals:
    income: float
    expenses: float
    saved: float
    remaining: float

    @property
    def chart_remaining(self) -> float:
        """Remaining clamped at zero for proportional chart segments."""
        return max(self.remaining, 0.0)


@dataclass(frozen=True)
class CategoryShare:
    amount: float
    percent: float


# ---------------------------------------------------------------------------
# Credit products and mini budgets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreditProduct:
    id: str
    name: str
    credit_type: str
    principal: float
    apr: float
    remaining_balance: float
    accrued_interest: float = 0.0
    total_paid: float = 0.0
    status: str = 'active'
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _text(self.name, 'name')
        _choice(self.credit_type, CREDIT_TYPES, 'creditType')
        _choice(self.status, CREDIT_STATUSES, 'status')
        for attr, key in (
            ('principal', 'principal'),
            ('apr', 'apr'),
            ('remaining_balance', 'remainingBalance'),
            ('accrued_interest', 'accruedInterest'),
            ('total_paid', 'totalPaid'),
        ):
            object.__setattr__(self, attr, _number(getattr(self, attr), key))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CreditProduct':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Credit product must be an object, got {type(data).__name__}")
        principal = _require(data, 'principal')
        return cls(
            id=_require(data, 'id'),
            name=_require(data, 'name'),
            credit_type=_require(data, 'creditType'),
            principal=principal,
            apr=data.get('apr', 0.0),
            remaining_balance=data.get('remainingBalance', principal),
            accrued_interest=data.get('accruedInterest', 0.0),
            total_paid=data.get('totalPaid', 0.0),
            status=data.get('status', 'active'),
            updated_at=data.get('updatedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'id': self.id,
            'name': self.name,
            'creditType': self.credit_type,
            'principal': self.principal,
            'apr': self.apr,
            'remainingBalance': self.remaining_balance,
            'accruedInterest': self.accrued_interest,
            'totalPaid': self.total_paid,
            'status': self.status,
            'updatedAt': self.updated_at,
        })


@dataclass(frozen=True)
class MiniBudget:
    """Spending limit over a set of expense categories, evaluated per month."""

    id: str
    name: str
    limit_amount: float
    linked_categories: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _text(self.name, 'name')
        object.__setattr__(self, 'limit_amount', _number(self.limit_amount, 'limitAmount', allow_zero=False))
        object.__setattr__(self, 'linked_categories', list(self.linked_categories or []))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MiniBudget':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Mini budget must be an object, got {type(data).__name__}")
        return cls(
            id=_require(data, 'id'),
            name=_require(data, 'name'),
            limit_amount=_require(data, 'limitAmount'),
            linked_categories=data.get('linkedCategoryIds') or [],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'limitAmount': self.limit_amount,
            'linkedCategoryIds': list(self.linked_categories),
        }


@dataclass(frozen=True)
class MiniBudgetState:
    budget_id: str
    month: str
    spent: float
    remaining: float
    pace: float
    forecast: float
    state: str
    days_elapsed: int
    days_in_month: int


# ---------------------------------------------------------------------------
# Gamification
# ---------------------------------------------------------------------------


def _count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise ValidationError(f"'{name}' must be a non-negative integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class StreakState:
    """Consecutive logging days; a skip token bridges one missed day."""

    current: int = 0
    best: int = 0
    skip_tokens: int = 0
    last_date: Optional[date] = None

    def __post_init__(self) -> None:
        for attr, key in (('current', 'current'), ('best', 'best'), ('skip_tokens', 'skipTokens')):
            object.__setattr__(self, attr, _count(getattr(self, attr), key))
        object.__setattr__(self, 'last_date', _optional_date(self.last_date, 'lastDate'))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'StreakState':
        return cls(
            current=data.get('current', 0),
            best=data.get('best', 0),
            skip_tokens=data.get('skipTokens', 0),
            last_date=data.get('lastDate'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current': self.current,
            'best': self.best,
            'skipTokens': self.skip_tokens,
            'lastDate': self.last_date.isoformat() if self.last_date else None,
        }


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    tier: str
    category: str
    target: int
    description: str = ''
    progress: int = 0
    unlocked_at: Optional[str] = None

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _choice(self.tier, BADGE_TIERS, 'tier')
        _choice(self.category, BADGE_CATEGORIES, 'category')
        object.__setattr__(self, 'target', _count(self.target, 'target'))
        object.__setattr__(self, 'progress', _count(self.progress, 'progress'))

    @property
    def unlocked(self) -> bool:
        return self.unlocked_at is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Badge':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Badge must be an object, got {type(data).__name__}")
        return cls(
            id=_require(data, 'id'),
            name=_require(data, 'name'),
            tier=_require(data, 'tier'),
            category=_require(data, 'category'),
            target=_require(data, 'target'),
            description=data.get('description') or '',
            progress=data.get('progress', 0),
            unlocked_at=data.get('unlockedAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'tier': self.tier,
            'category': self.category,
            'target': self.target,
            'description': self.description,
            'progress': self.progress,
            'unlockedAt': self.unlocked_at,
        }


@dataclass(frozen=True)
class Challenge:
    """A time-boxed target such as "log 20 days this month"."""

    id: str
    title: str
    type: str
    target: float
    start: date
    end: date
    status: str = 'active'
    progress: float = 0.0

    def __post_init__(self) -> None:
        _text(self.id, 'id')
        _text(self.title, 'title')
        _text(self.type, 'type')
        object.__setattr__(self, 'target', _number(self.target, 'target', allow_zero=False))
        object.__setattr__(self, 'progress', _number(self.progress, 'progress'))
        object.__setattr__(self, 'start', _to_date(self.start, 'start'))
        object.__setattr__(self, 'end', _to_date(self.end, 'end'))
        _choice(self.status, CHALLENGE_STATUSES, 'status')
        if self.end < self.start:
            raise ValidationError("'end' must not be before 'start'")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Challenge':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Challenge must be an object, got {type(data).__name__}")
        return cls(
            id=_require(data, 'id'),
            title=_require(data, 'title'),
            type=_require(data, 'type'),
            target=_require(data, 'target'),
            start=_require(data, 'start'),
            end=_require(data, 'end'),
            status=data.get('status', 'active'),
            progress=data.get('progress', 0.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type,
            'target': self.target,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'status': self.status,
            'progress': self.progress,
        }


@dataclass(frozen=True)
class GamificationState:
    """Streak, badges, challenges and XP, stored as one document."""

    streak: StreakState = field(default_factory=StreakState)
    badges: Tuple[Badge, ...] = ()
    challenges: Tuple[Challenge, ...] = ()
    xp: int = 0
    last_updated: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'badges', tuple(self.badges))
        object.__setattr__(self, 'challenges', tuple(self.challenges))
        object.__setattr__(self, 'xp', _count(self.xp, 'xp'))

    @property
    def level(self) -> int:
        return 1 + self.xp // XP_PER_LEVEL

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'GamificationState':
        if not isinstance(data, Mapping):
            raise ValidationError(f"Gamification state must be an object, got {type(data).__name__}")
        return cls(
            streak=StreakState.from_dict(data.get('streak') or {}),
            badges=[Badge.from_dict(raw) for raw in data.get('badges') or []],
            challenges=[Challenge.from_dict(raw) for raw in data.get('challenges') or []],
            xp=(data.get('level') or {}).get('xp', 0),
            last_updated=data.get('lastUpdated'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            'streak': self.streak.to_dict(),
            'badges': [badge.to_dict() for badge in self.badges],
            'challenges': [challenge.to_dict() for challenge in self.challenges],
            'level': {'xp': self.xp, 'level': self.level},
            'lastUpdated': self.last_updated,
        })


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserSettings:
    currency: str = DEFAULT_CURRENCY
    monthly_income: float = DEFAULT_MONTHLY_INCOME
    language: str = DEFAULT_LANGUAGE
    is_onboarded: bool = False

    def __post_init__(self) -> None:
        _text(self.currency, 'currency')
        object.__setattr__(self, 'monthly_income', _number(self.monthly_income, 'monthlyIncome'))
        object.__setattr__(self, 'language', normalize_language(self.language))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'UserSettings':
        defaults = cls()
        return cls(
            currency=data.get('currency') or defaults.currency,
            monthly_income=data.get('monthlyIncome', defaults.monthly_income),
            language=data.get('language') or defaults.language,
            is_onboarded=bool(data.get('isOnboarded', defaults.is_onboarded)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'currency': self.currency,
            'monthlyIncome': self.monthly_income,
            'language': self.language,
            'isOnboarded': self.is_onboarded,
        }
