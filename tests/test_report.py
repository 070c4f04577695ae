from datetime import date

import pytest

from exgo_finance.errors import StorageError
from exgo_finance.models import Transaction
from exgo_finance.report import render_monthly_report, write_report


def _transactions():
    return [
        Transaction(id='1', type='expense', amount=120, created_at='2024-03-02T09:15:00', category='Groceries'),
        Transaction(id='2', type='expense', amount=80, created_at='2024-03-02T18:40:00', category='Fuel'),
        Transaction(id='3', type='saved', amount=100, created_at='2024-03-05T10:00:00'),
        Transaction(id='4', type='income', amount=500, created_at='2024-03-10T08:00:00'),
    ]


def _render(transactions=None, language='en', **kwargs):
    return render_monthly_report('2024-03', _transactions() if transactions is None else transactions,
                                 2000, 'USD', language, **kwargs)


def test_report_is_byte_identical_for_same_input():
    assert _render() == _render()


def test_report_contains_totals_and_categories():
    document = _render()

    assert 'March 2024' in document
    assert '$2,500.00' in document
    assert '$2,200.00' in document
    assert '60.0% of total expenses' in document
    assert '40.0% of total expenses' in document
    assert 'Daily Spending' in document


def test_history_is_newest_first():
    document = _render()

    assert document.index('Mar 10, Sunday') < document.index('Mar 5, Tuesday') < document.index('Mar 2, Saturday')
    assert document.index('18:40') < document.index('09:15')
    assert '-$80.00' in document
    assert '+$500.00' in document


def test_user_text_is_escaped():
    transactions = [Transaction(id='1', type='expense', amount=5, created_at='2024-03-02T09:00:00',
                                category='<script>alert(1)</script>')]

    document = _render(transactions)

    assert '<script>' not in document
    assert '&lt;script&gt;' in document


def test_empty_month_renders_without_daily_section():
    document = _render([])

    assert 'No transactions this month' in document
    assert 'Daily Spending' not in document
    assert 'Top Expense Categories' not in document


def test_other_months_are_left_out_of_history():
    transactions = _transactions() + [
        Transaction(id='5', type='expense', amount=33, created_at='2024-02-28T10:00:00', category='Fuel'),
    ]

    document = _render(transactions)

    assert 'Feb 28' not in document


def test_ukrainian_report_and_footer_date():
    document = _render(language='uk', generated_on=date(2024, 4, 1))

    assert '<html lang="uk">' in document
    assert 'Щомісячний фінансовий звіт' in document
    assert 'Продукти' in document
    assert '2\u202f500,00 $' in document


def test_footer_has_no_date_by_default():
    assert 'Generated on' not in _render()


def test_write_report(tmp_path):
    target = write_report(tmp_path / 'reports' / 'report-2024-03.html', _render())

    assert target.read_text(encoding='utf-8').startswith('<!DOCTYPE html>')


def test_write_report_wraps_os_errors(tmp_path):
    blocker = tmp_path / 'file'
    blocker.write_text('x')

    with pytest.raises(StorageError):
        write_report(blocker / 'report.html', 'doc')


def test_configured_timezone_places_days(monkeypatch):
    transactions = [Transaction(id='1', type='expense', amount=5, created_at='2024-03-31T20:00:00Z', category='Fuel')]

    monkeypatch.setenv('EXGO_TIMEZONE', 'UTC')
    assert 'Mar 31, Sunday' in _render(transactions)

    monkeypatch.setenv('EXGO_TIMEZONE', 'Asia/Tokyo')
    assert 'Mar 31' not in _render(transactions)
