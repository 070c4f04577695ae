"""Exception types raised by the finance engine."""

from __future__ import annotations

from typing import Callable, Optional


class FinanceError(Exception):
    """Base class for all engine errors."""


class ValidationError(FinanceError, ValueError):
    """Input record has the wrong shape or an out-of-range value."""


class NotFoundError(FinanceError, LookupError):
    """An id does not exist in the current collection."""


class StorageError(FinanceError, OSError):
    """A persistence read or write failed.

    ``retry`` is set by the collection that attempted the write and
    re-runs exactly the failed step when called.
    """

    def __init__(self, message: str, retry: Optional[Callable[[], object]] = None):
        super().__init__(message)
        self.retry = retry
