import pandas as pd
import pytest

from exgo_finance.aggregation import (
    category_breakdown,
    compute_totals,
    credit_usage_by_product,
    daily_expenses,
    monthly_history,
    monthly_summary,
    saved_by_goal,
    top_categories,
    transactions_frame,
)
from exgo_finance.errors import ValidationError
from exgo_finance.models import Transaction


def _tx(tx_id, type, amount, category=None, created_at='2024-03-05T10:00:00', **fields):
    return Transaction(id=tx_id, type=type, amount=amount, created_at=created_at, category=category, **fields)


def _march():
    return [
        _tx('1', 'expense', 120, 'Groceries', '2024-03-02T09:00:00'),
        _tx('2', 'expense', 80, 'Fuel', '2024-03-03T18:30:00'),
        _tx('3', 'saved', 100, goal_id='g1'),
        _tx('4', 'income', 500, created_at='2024-03-10T08:00:00'),
    ]


def test_compute_totals_matches_budget_scenario():
    totals = compute_totals(_march(), 2000)

    assert totals.income == pytest.approx(2500)
    assert totals.expenses == pytest.approx(200)
    assert totals.saved == pytest.approx(100)
    assert totals.remaining == pytest.approx(2200)


def test_compute_totals_on_empty_month():
    totals = compute_totals([], 0)

    assert (totals.income, totals.expenses, totals.saved, totals.remaining) == (0, 0, 0, 0)


def test_remaining_goes_negative_but_chart_value_is_clamped():
    totals = compute_totals([_tx('1', 'expense', 700, 'Rent')], 500)

    assert totals.remaining == pytest.approx(-200)
    assert totals.chart_remaining == 0


def test_credit_transactions_are_not_expenses():
    transactions = _march() + [_tx('5', 'credit', 1000, 'Credits', credit_product_id='loan-1')]

    totals = compute_totals(transactions, 2000)
    breakdown = category_breakdown(transactions)

    assert totals.expenses == pytest.approx(200)
    assert 'Credits' not in breakdown


def test_card_paid_expense_still_counts():
    transactions = [_tx('1', 'expense', 50, 'Shopping', paid_by_credit_product_id='card-1')]

    assert compute_totals(transactions, 100).remaining == pytest.approx(50)


def test_income_must_be_numeric():
    with pytest.raises(ValidationError):
        compute_totals([], '2000')


def test_category_breakdown_shares_and_order():
    breakdown = category_breakdown(_march())

    assert list(breakdown) == ['Groceries', 'Fuel']
    assert breakdown['Groceries'].amount == pytest.approx(120)
    assert breakdown['Groceries'].percent == pytest.approx(60)
    assert breakdown['Fuel'].percent == pytest.approx(40)
    assert sum(share.percent for share in breakdown.values()) == pytest.approx(100)


def test_missing_category_is_grouped_as_uncategorized():
    breakdown = category_breakdown([
        _tx('1', 'expense', 10),
        _tx('2', 'expense', 30, '   '),
        _tx('3', 'expense', 60, 'Health'),
    ])

    assert breakdown['uncategorized'].amount == pytest.approx(40)
    assert breakdown['Health'].percent == pytest.approx(60)


def test_zero_expenses_give_zero_percent():
    breakdown = category_breakdown([Transaction(id='1', type='expense', amount=0, created_at='2024-03-01', category='Fuel')])

    assert breakdown['Fuel'].percent == 0


def test_top_categories_is_stable_on_ties():
    breakdown = category_breakdown([
        _tx('1', 'expense', 20, 'A'),
        _tx('2', 'expense', 50, 'B'),
        _tx('3', 'expense', 20, 'C'),
    ])

    ranked = top_categories(breakdown, limit=2)

    assert [category for category, _ in ranked] == ['B', 'A']
    assert list(breakdown) == ['A', 'B', 'C']


def test_malformed_date_is_summed_but_not_grouped_by_day():
    transactions = _march() + [_tx('bad', 'expense', 25, 'Fuel', created_at='not-a-date')]

    totals = compute_totals(transactions, 2000)
    daily = daily_expenses(transactions)

    assert totals.expenses == pytest.approx(225)
    assert list(daily.index) == ['2024-03-02', '2024-03-03']
    assert daily.sum() == pytest.approx(200)


def test_daily_expenses_use_local_day():
    from zoneinfo import ZoneInfo

    transactions = [_tx('1', 'expense', 15, 'Fuel', '2024-03-04T23:30:00Z')]

    daily = daily_expenses(transactions, ZoneInfo('Europe/Kyiv'))

    assert list(daily.index) == ['2024-03-05']


def test_inputs_are_not_reordered():
    transactions = list(reversed(_march()))
    before = list(transactions)

    daily_expenses(transactions)
    top_categories(category_breakdown(transactions))

    assert transactions == before


def test_saved_by_goal_groups_in_one_pass():
    transactions = [
        _tx('1', 'saved', 100, goal_id='g1'),
        _tx('2', 'saved', 50, goal_id='g2'),
        _tx('3', 'saved', 25, goal_id='g1'),
        _tx('4', 'saved', 10),
    ]

    assert saved_by_goal(transactions) == {'g1': pytest.approx(125), 'g2': pytest.approx(50)}


def test_credit_usage_by_product():
    usage = credit_usage_by_product([
        _tx('1', 'expense', 40, 'Shopping', paid_by_credit_product_id='card'),
        _tx('2', 'credit', 300, 'Credits', credit_product_id='loan'),
        _tx('3', 'expense', 10, 'Fuel', paid_by_credit_product_id='card'),
    ])

    assert usage.loc['card', 'Card Charges'] == pytest.approx(50)
    assert usage.loc['loan', 'Credit'] == pytest.approx(300)
    assert usage.loc['loan', 'Card Charges'] == 0


def test_monthly_summary_and_history():
    transactions = _march() + [_tx('5', 'expense', 40, 'Fuel', '2024-04-01T12:00:00')]

    april = monthly_summary(transactions, 1000, '2024-04')
    history = monthly_history(transactions, 1000)

    assert april.expenses == pytest.approx(40)
    assert list(history['Month']) == ['2024-03', '2024-04']
    march = history.iloc[0]
    assert march['Income'] == pytest.approx(1500)
    assert march['Remaining'] == pytest.approx(1200)
    assert march['Transaction_Count'] == 4


def test_frame_marks_unparseable_days():
    frame = transactions_frame([_tx('1', 'expense', 5, created_at='garbage')])

    assert pd.isna(frame.loc[0, 'Day'])
