"""Month and day keys derived from transaction timestamps.

Timestamps are ISO-8601 strings.  Values carrying an offset (or a
trailing ``Z``) are converted to the requested timezone, or to the
system local time when no timezone is given; values without an offset
are taken as local wall-clock time already.  Everything returned here is
naive local time so records from both kinds of input sort together.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, tzinfo
from typing import Any, Iterable, List, Optional

from .errors import ValidationError
from . import i18n

_MONTH_KEY_RE = re.compile(r'^(\d{4})-(\d{2})$')


def to_local(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse ``value`` into naive local time, or ``None`` when unparseable."""
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in 'Zz':
            text = text[:-1] + '+00:00'
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz).replace(tzinfo=None)


def day_key(value: Any, tz: Optional[tzinfo] = None) -> Optional[str]:
    """``YYYY-MM-DD`` of the local calendar day, or ``None``."""
    local = to_local(value, tz)
    return local.date().isoformat() if local is not None else None


def month_key(value: Optional[date] = None) -> str:
    """``YYYY-MM`` for a date or datetime (today when omitted)."""
    value = value or date.today()
    return f"{value.year:04d}-{value.month:02d}"


def month_key_of(timestamp: Any, tz: Optional[tzinfo] = None) -> Optional[str]:
    local = to_local(timestamp, tz)
    return month_key(local) if local is not None else None


def parse_month_key(key: str) -> date:
    """Return the first day of the month named by ``key``."""
    match = _MONTH_KEY_RE.match(key or '') if isinstance(key, str) else None
    if not match:
        raise ValidationError(f"Invalid month key {key!r}; expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month in key {key!r}")
    return date(year, month, 1)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(value: date, months: int, day: Optional[int] = None) -> date:
    """Shift ``value`` by whole months, clamping to the last valid day.

    ``day`` pins the wanted day-of-month (e.g. the 31st of a schedule)
    so repeated shifts do not drift after a short month.
    """
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    wanted = day if day is not None else value.day
    return date(year, month, min(wanted, days_in_month(year, month)))


def previous_month_key(key: str) -> str:
    return month_key(add_months(parse_month_key(key), -1))


def next_month_key(key: str) -> str:
    return month_key(add_months(parse_month_key(key), 1))


def filter_by_month(transactions: Iterable[Any], key: str, tz: Optional[tzinfo] = None) -> List[Any]:
    """Transactions whose local ``created_at`` falls in month ``key``.

    Records with an unparseable timestamp cannot be placed in a month
    and are left out.
    """
    parse_month_key(key)
    return [tx for tx in transactions if month_key_of(tx.created_at, tz) == key]


# ---------------------------------------------------------------------------
# Localised labels
# ---------------------------------------------------------------------------


def month_label(key: str, language: str = 'en') -> str:
    """Long month label, e.g. ``March 2024`` / ``Березень 2024``."""
    first = parse_month_key(key)
    name = i18n.month_names(language)[first.month - 1]
    return f"{name[:1].upper()}{name[1:]} {first.year}"


def short_month_name(month: int, language: str = 'en') -> str:
    return i18n.short_month_names(language)[month - 1]


def weekday_name(value: date, language: str = 'en') -> str:
    return i18n.weekday_names(language)[value.weekday()]


def day_label(value: date, language: str = 'en') -> str:
    """Day heading such as ``Mar 5, Tuesday``."""
    return f"{short_month_name(value.month, language)} {value.day}, {weekday_name(value, language)}"
