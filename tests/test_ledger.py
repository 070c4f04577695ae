import pytest

from exgo_finance.errors import NotFoundError, StorageError, ValidationError
from exgo_finance.ledger import Ledger
from exgo_finance.models import Transaction
from exgo_finance.storage import MemoryStore, RecordStore


class BrokenStore(MemoryStore):
    def save(self, records):
        raise StorageError('read-only')


def test_add_and_filter_by_month():
    ledger = Ledger()
    ledger.add_transaction('expense', 12.5, 'Fuel', created_at='2024-03-05T10:00:00')
    ledger.add_transaction('income', 100, created_at='2024-04-01T10:00:00')

    assert len(ledger.get_all_transactions()) == 2
    assert [tx.type for tx in ledger.get_transactions_for_month('2024-03')] == ['expense']


def test_add_transaction_validates_input():
    ledger = Ledger()

    with pytest.raises(ValidationError):
        ledger.add_transaction('expense', 0)
    with pytest.raises(ValidationError):
        ledger.add_transaction('gift', 10)
    with pytest.raises(ValidationError):
        ledger.add_transaction('expense', 10, goal_id='g1')
    assert len(ledger) == 0


def test_listeners_run_after_persisting():
    store = MemoryStore()
    ledger = Ledger(store)
    seen = []

    def listener(event, transactions):
        seen.append((event, len(ledger.get_all_transactions()), store.saves))

    unsubscribe = ledger.subscribe(listener)
    added = ledger.add_transaction('expense', 5)
    ledger.delete_transaction(added.id)
    unsubscribe()
    ledger.add_transaction('expense', 5)

    assert seen == [('added', 1, 1), ('deleted', 0, 2)]


def test_failed_write_keeps_state_and_skips_listeners():
    ledger = Ledger(BrokenStore())
    seen = []
    ledger.subscribe(lambda event, transactions: seen.append(event))

    with pytest.raises(StorageError) as excinfo:
        ledger.add_transaction('income', 10)

    assert len(ledger) == 0
    assert seen == []
    assert callable(excinfo.value.retry)


def test_delete_unknown_transaction():
    with pytest.raises(NotFoundError):
        Ledger().delete_transaction('nope')


def test_ledger_persists_to_json(tmp_path):
    path = tmp_path / 'transactions.json'
    ledger = Ledger(RecordStore(path, Transaction))
    ledger.add_transaction('saved', 40, goal_id='g1', created_at='2024-03-01T10:00:00.000Z')

    reloaded = Ledger(RecordStore(path, Transaction))
    reloaded.load()

    assert reloaded.get_all_transactions() == ledger.get_all_transactions()
    assert '"goalId": "g1"' in path.read_text(encoding='utf-8')


def test_failing_listener_does_not_skip_the_others():
    ledger = Ledger()
    seen = []

    def broken(event, transactions):
        raise StorageError('goal file locked')

    ledger.subscribe(broken)
    ledger.subscribe(lambda event, transactions: seen.append(event))

    with pytest.raises(StorageError):
        ledger.add_transaction('expense', 5)

    assert len(ledger) == 1
    assert seen == ['added']
