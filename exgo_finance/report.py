"""Self-contained HTML monthly report.

:func:`render_monthly_report` never reads the clock, the file system or
the network, so the same input always renders byte-identical markup.
Charts are inline SVG from :mod:`exgo_finance.charts`.
"""

from __future__ import annotations

import html
import logging
from datetime import date, tzinfo
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .aggregation import category_breakdown, compute_totals, daily_expenses, top_categories
from .charts import EXPENSES_COLOR, REMAINING_COLOR, SAVED_COLOR, bar_chart_svg, donut_svg
from .config import TOP_CATEGORY_LIMIT, get_timezone
from .errors import StorageError
from .formatting import format_currency
from .i18n import category_label, normalize_language, translate, type_label
from .models import UNCATEGORIZED, Transaction
from .periods import day_label, month_label, parse_month_key, to_local

logger = logging.getLogger(__name__)

_STYLE = """
body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; color: #111827; margin: 32px; }
h1 { margin: 0; font-size: 24px; }
h2 { font-size: 18px; margin: 28px 0 12px; }
.subtitle { color: #6b7280; margin-top: 4px; }
.cards { display: flex; gap: 12px; margin-top: 24px; }
.card { flex: 1; border: 1px solid #e5e7eb; border-radius: 8px; padding: 12px; }
.card .label { color: #6b7280; font-size: 12px; }
.card .value { font-size: 18px; font-weight: bold; margin-top: 4px; }
.negative { color: #ef4444; }
.overview { display: flex; align-items: center; gap: 24px; }
.legend div { margin: 6px 0; }
.swatch { display: inline-block; width: 12px; height: 12px; border-radius: 2px; margin-right: 8px; }
.category { display: flex; justify-content: space-between; padding: 6px 0; border-bottom: 1px solid #f3f4f6; }
.percent { color: #6b7280; font-size: 12px; }
.day { margin-top: 16px; font-weight: bold; }
table { width: 100%; border-collapse: collapse; }
th, td { text-align: left; padding: 6px; border-bottom: 1px solid #f3f4f6; font-size: 13px; }
.badge { border-radius: 4px; padding: 2px 6px; font-size: 11px; background: #f3f4f6; }
.badge.expense { background: #fee2e2; }
.badge.income { background: #dbeafe; }
.badge.saved { background: #d1fae5; }
.badge.credit { background: #fef3c7; }
footer { margin-top: 32px; color: #9ca3af; font-size: 12px; text-align: center; }
""".strip()


def _esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def _group_by_day(
    transactions: Sequence[Transaction],
    month_key: str,
    tz: Optional[tzinfo],
) -> List[Tuple[date, List[Tuple[str, Transaction]]]]:
    """Transactions of ``month_key`` grouped by local day, newest day and newest entry first."""
    first = parse_month_key(month_key)
    dated = []
    for tx in transactions:
        local = to_local(tx.created_at, tz)
        if local is None or (local.year, local.month) != (first.year, first.month):
            continue
        dated.append((local, tx))
    dated = sorted(dated, key=lambda item: item[0], reverse=True)

    groups: Dict[date, List[Tuple[str, Transaction]]] = {}
    for local, tx in dated:
        groups.setdefault(local.date(), []).append((local.strftime('%H:%M'), tx))
    return list(groups.items())


def _signed_amount(tx: Transaction, currency: str, language: str) -> str:
    sign = '-' if tx.type == 'expense' else '+'
    return f"{sign}{format_currency(tx.amount, currency, language)}"


def _card(label: str, value: float, currency: str, language: str, negative_alert: bool = False) -> str:
    css = 'value negative' if negative_alert and value < 0 else 'value'
    return (
        f'<div class="card"><div class="label">{_esc(label)}</div>'
        f'<div class="{css}">{_esc(format_currency(value, currency, language))}</div></div>'
    )


def render_monthly_report(
    month_key: str,
    transactions: Sequence[Transaction],
    monthly_income: float,
    currency: str,
    language: str,
    *,
    tz: Optional[tzinfo] = None,
    generated_on: Optional[date] = None,
) -> str:
    """Render the monthly report as one HTML document.

    Args:
        month_key: ``YYYY-MM`` month the report covers.
        transactions: The month's transactions.  Totals and categories
            use every record given; the daily chart and the history only
            show records dated inside ``month_key``.
        monthly_income: Configured baseline income.
        currency: ISO 4217 code for amounts.
        language: ``en`` or ``uk``; anything else falls back to English.
        tz: Time zone used to place transactions on calendar days.
            Defaults to the configured ``EXGO_TIMEZONE``.
        generated_on: Date for the footer; omitted when ``None``.

    Returns:
        The HTML document as a string.
    """
    language = normalize_language(language)
    tz = tz if tz is not None else get_timezone()

    def t(key: str) -> str:
        return _esc(translate(language, key))

    def money(amount: float) -> str:
        return format_currency(amount, currency, language)

    totals = compute_totals(transactions, monthly_income)
    breakdown = category_breakdown(transactions)
    in_month = _group_by_day(transactions, month_key, tz)
    month_transactions = [tx for _, entries in in_month for _, tx in entries]
    daily = daily_expenses(month_transactions, tz)

    parts = [
        '<!DOCTYPE html>',
        f'<html lang="{language}">',
        '<head>',
        '<meta charset="utf-8">',
        f'<title>{t("report.title")}: {_esc(month_label(month_key, language))}</title>',
        f'<style>\n{_STYLE}\n</style>',
        '</head>',
        '<body>',
        '<header>',
        f'<h1>{t("report.title")}</h1>',
        f'<div class="subtitle">{_esc(month_label(month_key, language))}</div>',
        '</header>',
        '<section class="cards">',
        _card(translate(language, 'report.totalIncome'), totals.income, currency, language),
        _card(translate(language, 'report.totalExpenses'), totals.expenses, currency, language),
        _card(translate(language, 'report.totalSaved'), totals.saved, currency, language),
        _card(translate(language, 'report.remaining'), totals.remaining, currency, language, negative_alert=True),
        '</section>',
        '<section>',
        f'<h2>{t("report.budgetOverview")}</h2>',
        '<div class="overview">',
        donut_svg(totals, _esc(money(totals.remaining))),
        '<div class="legend">',
    ]
    for color, key, value in (
        (EXPENSES_COLOR, 'report.expenses', totals.expenses),
        (SAVED_COLOR, 'report.saved', totals.saved),
        (REMAINING_COLOR, 'report.remaining', totals.remaining),
    ):
        parts.append(
            f'<div><span class="swatch" style="background:{color}"></span>'
            f'{t(key)}: {_esc(money(value))}</div>'
        )
    parts += ['</div>', '</div>', '</section>']

    if not daily.empty:
        parts += [
            '<section>',
            f'<h2>{t("report.dailySpending")}</h2>',
            bar_chart_svg(list(zip(daily.index, daily.values))),
            '</section>',
        ]

    ranked = top_categories(breakdown, TOP_CATEGORY_LIMIT)
    if ranked:
        parts += ['<section>', f'<h2>{t("report.topExpenseCategories")}</h2>']
        for category, share in ranked:
            parts.append(
                f'<div class="category"><span>{_esc(category_label(category, language))}</span>'
                f'<span>{_esc(money(share.amount))} '
                f'<span class="percent">{share.percent:.1f}% {t("report.ofTotalExpenses")}</span></span></div>'
            )
        parts.append('</section>')

    parts += ['<section>', f'<h2>{t("report.transactionHistory")}</h2>']
    if not in_month:
        parts.append(f'<p>{t("report.noTransactions")}</p>')
    for day, entries in in_month:
        parts += [
            f'<div class="day">{_esc(day_label(day, language))}</div>',
            '<table>',
            f'<tr><th>{t("report.date")}</th><th>{t("report.type")}</th>'
            f'<th>{t("report.category")}</th><th>{t("report.amount")}</th></tr>',
        ]
        for time_text, tx in entries:
            category = (tx.category or '').strip() or UNCATEGORIZED
            parts.append(
                f'<tr><td>{time_text}</td>'
                f'<td><span class="badge {_esc(tx.type)}">{_esc(type_label(tx.type, language))}</span></td>'
                f'<td>{_esc(category_label(category, language))}</td>'
                f'<td>{_esc(_signed_amount(tx, currency, language))}</td></tr>'
            )
        parts.append('</table>')
    parts.append('</section>')

    footer = t('report.appName')
    if generated_on is not None:
        footer = f'{t("report.generatedOn")} {_esc(generated_on.isoformat())} · {footer}'
    parts += [f'<footer>{footer}</footer>', '</body>', '</html>']

    logger.debug("Rendered report for %s with %d transaction(s)", month_key, len(transactions))
    return '\n'.join(parts) + '\n'


def write_report(path: Path, document: str) -> Path:
    """Write a rendered report as UTF-8, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding='utf-8')
    except OSError as exc:
        raise StorageError(f"Could not write report {path}: {exc}") from exc
    logger.info("Wrote report to %s", path)
    return path
