import pytest

from exgo_finance.formatting import currency_symbol, format_amount, format_currency
from exgo_finance.i18n import category_label, normalize_language, translate, type_label


@pytest.mark.parametrize('amount, currency, language, expected', [
    (-1234.5, 'USD', 'en', '-$1,234.50'),
    (1234.5, 'UAH', 'uk', '1 234,50 ₴'),
    (-1234.5, 'UAH', 'uk', '-1 234,50 ₴'),
    (0, 'EUR', 'en', '€0.00'),
    (-0.001, 'USD', 'en', '$0.00'),
    (12, 'XYZ', 'en', 'XYZ12.00'),
])
def test_format_currency(amount, currency, language, expected):
    assert format_currency(amount, currency, language) == expected


def test_format_amount_and_symbols():
    assert format_amount(1234567.891) == '1,234,567.89'
    assert currency_symbol('uah') == '₴'


def test_language_normalisation():
    assert normalize_language('uk-UA') == 'uk'
    assert normalize_language('en_US') == 'en'
    assert normalize_language('de') == 'en'
    assert normalize_language(None) == 'en'


def test_translations_fall_back():
    assert translate('uk', 'report.remaining') == 'Залишок'
    assert translate('de', 'report.remaining') == 'Remaining'
    assert translate('en', 'report.unknown', 'fallback') == 'fallback'
    assert translate('en', 'report.unknown') == 'report.unknown'


def test_category_and_type_labels():
    assert category_label('Groceries', 'uk') == 'Продукти'
    assert category_label('uncategorized', 'en') == 'Uncategorized'
    assert category_label('My custom', 'uk') == 'My custom'
    assert type_label('saved', 'uk') == 'заощадження'
