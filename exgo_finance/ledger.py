"""The transaction store: single source of truth for all derived views."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Callable, Iterable, List, Optional

from .models import Transaction, new_transaction
from .periods import filter_by_month
from .storage import PersistedCollection

logger = logging.getLogger(__name__)

Listener = Callable[[str, List[Transaction]], None]


class Ledger(PersistedCollection[Transaction]):
    """Transactions plus change notifications.

    Listeners receive ``(event, transactions)`` where ``event`` is
    ``'added'`` or ``'deleted'``.  They are called only after the new
    collection has been persisted and swapped in, so anything they
    recompute from :meth:`get_all_transactions` sees the change.  A
    failing listener does not stop the others; its error is raised
    afterwards, with the ledger change already in place.
    """

    kind = 'Transaction'

    def __init__(self, store: Optional[Any] = None, items: Optional[List[Transaction]] = None):
        super().__init__(store, items)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, transactions: List[Transaction]) -> None:
        """Call every listener; the first failure is re-raised once all have run."""
        first_error: Optional[Exception] = None
        for listener in list(self._listeners):
            try:
                listener(event, list(transactions))
            except Exception as exc:
                logger.error("Listener failed on %r transactions: %s", event, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def get_all_transactions(self) -> List[Transaction]:
        return self.items

    def get_transactions_for_month(self, month: str, tz: Optional[tzinfo] = None) -> List[Transaction]:
        return filter_by_month(self._items, month, tz)

    def add_transaction(self, type: str, amount: float, category: Optional[str] = None, **fields: Any) -> Transaction:
        """Validate, persist and announce a new transaction."""
        transaction = new_transaction(type, amount, category, **fields)
        self.add_transactions([transaction])
        return transaction

    def add_transactions(self, transactions: Iterable[Transaction]) -> None:
        added = list(transactions)
        if not added:
            return
        self._commit(self._items + added, after=lambda: self._notify('added', added))
        logger.debug("Added %d transaction(s)", len(added))

    def delete_transaction(self, transaction_id: str) -> Transaction:
        removed = self.get(transaction_id)
        self._commit(self._without(transaction_id), after=lambda: self._notify('deleted', [removed]))
        return removed
