#!/usr/bin/env python3
"""Export the monthly HTML report from the stored transactions."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from exgo_finance import config
from exgo_finance.errors import FinanceError
from exgo_finance.ledger import Ledger
from exgo_finance.models import Transaction
from exgo_finance.periods import month_key, parse_month_key
from exgo_finance.report import render_monthly_report, write_report
from exgo_finance.storage import RecordStore, load_settings


def main(month: Optional[str] = None, output_dir: Optional[Path] = None, language: Optional[str] = None) -> int:
    month = month or month_key()
    try:
        parse_month_key(month)
        config.ensure_data_directories()
        tz = config.get_timezone()
        settings = load_settings(config.SETTINGS_FILE)
        ledger = Ledger(RecordStore(config.TRANSACTIONS_FILE, Transaction))
        ledger.load()
        transactions = ledger.get_transactions_for_month(month, tz)
        document = render_monthly_report(
            month,
            transactions,
            settings.monthly_income,
            settings.currency,
            language or settings.language,
            tz=tz,
            generated_on=date.today(),
        )
        target = write_report((output_dir or config.REPORTS_DIR) / f"report-{month}.html", document)
    except FinanceError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1

    print(f"Transactions in {month}: {len(transactions)}")
    print(f"✅ Report written to {target}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Export the monthly financial report as HTML.')
    parser.add_argument('--month', help='Month to export as YYYY-MM (default: current month)')
    parser.add_argument('--output-dir', type=Path, help='Directory for the report (default: EXGO_REPORTS_DIR)')
    parser.add_argument('--language', choices=config.SUPPORTED_LANGUAGES, help='Report language (default: from settings)')
    args = parser.parse_args()
    sys.exit(main(month=args.month, output_dir=args.output_dir, language=args.language))
