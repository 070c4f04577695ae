"""English and Ukrainian strings used by the report and label helpers."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = 'en'

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    'en': {
        'report.title': 'Monthly Financial Report',
        'report.totalIncome': 'Total Income',
        'report.totalExpenses': 'Total Expenses',
        'report.totalSaved': 'Total Saved',
        'report.remaining': 'Remaining',
        'report.budgetOverview': 'Budget Overview',
        'report.expenses': 'Expenses',
        'report.saved': 'Saved',
        'report.dailySpending': 'Daily Spending',
        'report.topExpenseCategories': 'Top Expense Categories',
        'report.transactionHistory': 'Transaction History',
        'report.date': 'Date',
        'report.type': 'Type',
        'report.category': 'Category',
        'report.amount': 'Amount',
        'report.ofTotalExpenses': 'of total expenses',
        'report.generatedOn': 'Generated on',
        'report.noTransactions': 'No transactions this month',
        'report.appName': 'ExGo Budgeting App',
        'type.expense': 'expense',
        'type.income': 'income',
        'type.saved': 'saved',
        'type.credit': 'credit',
        'categories.uncategorized': 'Uncategorized',
        'categories.Groceries': 'Groceries',
        'categories.Fuel': 'Fuel',
        'categories.Transport': 'Transport',
        'categories.Restaurants': 'Restaurants',
        'categories.Entertainment': 'Entertainment',
        'categories.Health': 'Health',
        'categories.Shopping': 'Shopping',
        'categories.Utilities': 'Utilities',
        'categories.Rent': 'Rent',
        'categories.Subscriptions': 'Subscriptions',
        'categories.Credits': 'Credits',
        'categories.Other': 'Other',
    },
    'uk': {
        'report.title': 'Щомісячний фінансовий звіт',
        'report.totalIncome': 'Загальний дохід',
        'report.totalExpenses': 'Загальні витрати',
        'report.totalSaved': 'Всього заощаджено',
        'report.remaining': 'Залишок',
        'report.budgetOverview': 'Огляд бюджету',
        'report.expenses': 'Витрати',
        'report.saved': 'Заощаджено',
        'report.dailySpending': 'Щоденні витрати',
        'report.topExpenseCategories': 'Основні категорії витрат',
        'report.transactionHistory': 'Історія транзакцій',
        'report.date': 'Дата',
        'report.type': 'Тип',
        'report.category': 'Категорія',
        'report.amount': 'Сума',
        'report.ofTotalExpenses': 'від загальних витрат',
        'report.generatedOn': 'Створено',
        'report.noTransactions': 'Цього місяця транзакцій немає',
        'report.appName': 'ExGo: застосунок для бюджету',
        'type.expense': 'витрата',
        'type.income': 'дохід',
        'type.saved': 'заощадження',
        'type.credit': 'кредит',
        'categories.uncategorized': 'Без категорії',
        'categories.Groceries': 'Продукти',
        'categories.Fuel': 'Пальне',
        'categories.Transport': 'Транспорт',
        'categories.Restaurants': 'Ресторани',
        'categories.Entertainment': 'Розваги',
        'categories.Health': "Здоров'я",
        'categories.Shopping': 'Покупки',
        'categories.Utilities': 'Комунальні послуги',
        'categories.Rent': 'Оренда',
        'categories.Subscriptions': 'Підписки',
        'categories.Credits': 'Кредити',
        'categories.Other': 'Інше',
    },
}

_MONTHS = {
    'en': ['January', 'February', 'March', 'April', 'May', 'June',
           'July', 'August', 'September', 'October', 'November', 'December'],
    'uk': ['січень', 'лютий', 'березень', 'квітень', 'травень', 'червень',
           'липень', 'серпень', 'вересень', 'жовтень', 'листопад', 'грудень'],
}
_MONTHS_SHORT = {
    'en': ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec'],
    'uk': ['січ.', 'лют.', 'бер.', 'квіт.', 'трав.', 'черв.',
           'лип.', 'серп.', 'вер.', 'жовт.', 'лист.', 'груд.'],
}
# Monday first, matching date.weekday()
_WEEKDAYS = {
    'en': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'],
    'uk': ['понеділок', 'вівторок', 'середа', 'четвер', "п'ятниця", 'субота', 'неділя'],
}


def normalize_language(language: Optional[str]) -> str:
    """Map a language or locale code (``uk-UA``, ``en_US``) onto a supported language."""
    text = str(language or '').strip().lower()
    for code in TRANSLATIONS:
        if text == code or text.startswith(code + '-') or text.startswith(code + '_'):
            return code
    return DEFAULT_LANGUAGE


def translate(language: str, key: str, default: Optional[str] = None) -> str:
    table = TRANSLATIONS[normalize_language(language)]
    if key in table:
        return table[key]
    logger.debug("Missing translation %s for %s", key, language)
    return default if default is not None else key


def category_label(category: str, language: str) -> str:
    """Localised name for built-in categories; custom names pass through."""
    return translate(language, f'categories.{category}', category)


def type_label(transaction_type: str, language: str) -> str:
    return translate(language, f'type.{transaction_type}', transaction_type)


def month_names(language: str) -> List[str]:
    return list(_MONTHS[normalize_language(language)])


def short_month_names(language: str) -> List[str]:
    return list(_MONTHS_SHORT[normalize_language(language)])


def weekday_names(language: str) -> List[str]:
    return list(_WEEKDAYS[normalize_language(language)])
