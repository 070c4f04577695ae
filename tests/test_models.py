import dataclasses
from datetime import date, datetime, timezone

import pytest

from exgo_finance import config
from exgo_finance.errors import ValidationError
from exgo_finance.models import (
    Goal,
    MiniBudget,
    RecurringTransaction,
    Transaction,
    new_goal,
    new_recurring_transaction,
    new_transaction,
)


def test_transaction_round_trips_camel_case():
    data = {
        'id': 't1',
        'type': 'expense',
        'amount': 42.5,
        'category': 'Fuel',
        'createdAt': '2024-03-05T10:00:00.000Z',
        'paidByCreditProductId': 'card',
    }

    tx = Transaction.from_dict(data)

    assert tx.paid_by_credit_product_id == 'card'
    assert tx.to_dict() == data


@pytest.mark.parametrize('amount', ['12', None, float('nan'), -1, True])
def test_transaction_rejects_bad_amounts(amount):
    with pytest.raises(ValidationError):
        Transaction(id='t1', type='expense', amount=amount, created_at='2024-03-05')


def test_transaction_links_must_match_type():
    with pytest.raises(ValidationError):
        Transaction(id='t1', type='income', amount=1, created_at='2024-03-05', credit_product_id='card')


def test_missing_required_field():
    with pytest.raises(ValidationError):
        Transaction.from_dict({'id': 't1', 'type': 'expense', 'amount': 1})


def test_factories_generate_ids_and_require_positive_amounts():
    now = datetime(2024, 3, 1, tzinfo=timezone.utc)

    first = new_transaction('income', 10)
    second = new_transaction('income', 10)
    goal = new_goal('Bike', 300, 'USD', now=now)

    assert first.id != second.id
    assert goal.created_at == goal.updated_at == '2024-03-01T00:00:00.000+00:00'
    with pytest.raises(ValidationError):
        new_goal('Bike', 0, 'USD')
    with pytest.raises(ValidationError):
        new_recurring_transaction('Gym', 'expense', 0, 'weekly', '2024-03-01')


def test_goal_from_dict_defaults():
    goal = Goal.from_dict({'id': 'g', 'name': 'Car', 'targetAmount': 5000, 'currency': 'EUR',
                           'createdAt': '2024-01-01T00:00:00.000Z'})

    assert goal.current_amount == 0
    assert goal.status == 'active'
    assert goal.updated_at == goal.created_at
    assert goal.progress == 0


def test_recurring_definition_round_trip():
    definition = new_recurring_transaction('Rent', 'expense', 900, 'monthly', '2024-01-05',
                                           recurring_type='rent', end_date='2024-12-05')

    restored = RecurringTransaction.from_dict(definition.to_dict())

    assert restored == definition
    assert restored.start_date == date(2024, 1, 5)
    with pytest.raises(ValidationError):
        new_recurring_transaction('Rent', 'expense', 900, 'fortnightly', '2024-01-05')


def test_mini_budget_uses_linked_category_ids_key():
    budget = MiniBudget.from_dict({'id': 'b', 'name': 'Fun', 'limitAmount': 100, 'linkedCategoryIds': ['Entertainment']})

    assert budget.to_dict()['linkedCategoryIds'] == ['Entertainment']


def test_get_timezone(monkeypatch):
    monkeypatch.delenv('EXGO_TIMEZONE', raising=False)
    assert config.get_timezone() is None

    monkeypatch.setenv('EXGO_TIMEZONE', 'Europe/Kyiv')
    assert config.get_timezone().key == 'Europe/Kyiv'

    with pytest.raises(ValidationError):
        config.get_timezone('Mars/Olympus')


def test_goal_is_immutable():
    goal = Goal(id='g', name='Car', target_amount=5000, currency='EUR',
                created_at='2024-01-01T00:00:00.000Z', updated_at='2024-01-01T00:00:00.000Z')

    with pytest.raises(dataclasses.FrozenInstanceError):
        goal.current_amount = 999
    assert goal.current_amount == 0
