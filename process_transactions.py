"""
process_transactions.py
-----------------------
Read a transaction CSV export (Monarch-style ``Date, Merchant, Category,
Amount, Account``), validate it into :class:`models.Transaction` records and
print the dashboard datasets as JSON.

Usage:

    flofi export.csv [--rules rules.json] [--balance 6900] [--apr 20]
                     [--min-payment 300] [--extra-payment 300]

Columns are found by header patterns, so exports that say "Description"
instead of "Merchant" or split "Debit"/"Credit" columns still load.
"""

from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal, InvalidOperation
from typing import IO, List, Optional, Union

import pandas as pd

from classification import load_rule_table
from config import DashboardConfig, load_settings
from dashboard import build_dashboard
from loans import PayoffInputs, estimate_payoff_for
from logging_setup import configure_logging, get_logger
from models import Transaction

logger = get_logger("flofi.process_transactions")

# Patterns used to identify columns.
DATE_PATTERNS = ["date", "posted", "value date"]
MERCHANT_PATTERNS = ["merchant", "payee", "description", "details", "name"]
CATEGORY_PATTERNS = ["category"]
AMOUNT_PATTERNS = ["amount", "amt"]
ACCOUNT_PATTERNS = ["account"]


def infer_column(df: pd.DataFrame, patterns: list[str]) -> Optional[str]:
    for pattern in patterns:
        for col in df.columns:
            if pattern in col.lower():
                return col
    return None


def _to_decimal(raw: str) -> Optional[Decimal]:
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _clean_amounts(series: pd.Series) -> pd.Series:
    """Strip ``$`` and thousands separators; ``(12.50)`` means ``-12.50``."""
    cleaned = series.astype(str).str.strip()
    cleaned = cleaned.str.replace(r"[\$,\s]", "", regex=True)
    cleaned = cleaned.str.replace(r"^\((.*?)\)$", r"-\1", regex=True)
    return cleaned.map(_to_decimal)


def records_from_frame(df: pd.DataFrame) -> List[Transaction]:
    """Validate a raw export frame into transaction records, in file order."""
    date_col = infer_column(df, DATE_PATTERNS)
    amount_col = infer_column(df, AMOUNT_PATTERNS)

    debit_col = None
    credit_col = None
    for c in df.columns:
        lc = c.lower()
        if "debit" in lc or "withdrawal" in lc:
            debit_col = c
        if "credit" in lc or "deposit" in lc:
            credit_col = c

    if not date_col:
        raise ValueError(f"Export has no date column (columns: {', '.join(map(str, df.columns))})")

    if debit_col is not None and credit_col is not None:
        debit = _clean_amounts(df[debit_col].replace("", "0"))
        credit = _clean_amounts(df[credit_col].replace("", "0"))
        amounts = pd.Series(
            [c - d if pd.notna(c) and pd.notna(d) else None for c, d in zip(credit, debit)],
            index=df.index,
            dtype=object,
        )
    elif amount_col is not None:
        amounts = _clean_amounts(df[amount_col])
    else:
        raise ValueError(f"Export has no amount column (columns: {', '.join(map(str, df.columns))})")

    def text(patterns: list[str]) -> pd.Series:
        col = infer_column(df, patterns)
        if col is None:
            return pd.Series("", index=df.index)
        return df[col].fillna("").astype(str).str.strip()

    merchants = text(MERCHANT_PATTERNS)
    categories = text(CATEGORY_PATTERNS)
    accounts = text(ACCOUNT_PATTERNS)
    dates = pd.to_datetime(df[date_col], errors="coerce", format="mixed")

    bad = amounts.isna()
    if bad.any():
        logger.warning("Dropping %d row(s) with an unreadable amount", int(bad.sum()))
    missing_dates = int(dates[~bad].isna().sum())
    if missing_dates:
        logger.warning("%d row(s) have no usable date and will be left out of dated charts", missing_dates)

    records = []
    for idx in df.index[~bad]:
        ts = dates[idx]
        records.append(
            Transaction(
                date=None if pd.isna(ts) else ts.date(),
                merchant=merchants[idx],
                category=categories[idx],
                amount=amounts[idx],
                account=accounts[idx],
            )
        )
    return records


def read_export(source: Union[str, IO[str]]) -> List[Transaction]:
    """Load a CSV export from a path or an open text file."""
    df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    records = records_from_frame(df)
    logger.info("Loaded %d transactions", len(records))
    return records


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Build dashboard datasets from a transaction CSV export")
    parser.add_argument("export", help="Path to the CSV export")
    parser.add_argument("--rules", default=None, help="JSON file with card-bucket classification rules")
    parser.add_argument("--balance", type=float, default=PayoffInputs.balance, help="Debt balance for the payoff estimate")
    parser.add_argument("--apr", type=float, default=PayoffInputs.apr_percent, help="Annual rate in percent, e.g. 20")
    parser.add_argument("--min-payment", type=float, default=PayoffInputs.min_payment)
    parser.add_argument("--extra-payment", type=float, default=PayoffInputs.extra_payment)
    parser.add_argument("--log-level", default=None, help="Overrides FLOFI_LOG_LEVEL")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    configure_logging(args.log_level or settings.log_level)

    try:
        if args.rules:
            config = DashboardConfig(rules=load_rule_table(args.rules))
        else:
            config = settings.dashboard_config()
        transactions = read_export(args.export)
    except FileNotFoundError as exc:
        print(f"Error: File not found: {exc.filename or args.export}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: Could not read {exc.filename or args.export}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        # pandas parser and empty-file errors are ValueErrors too
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    result = build_dashboard(transactions, config)
    payoff = PayoffInputs(args.balance, args.apr, args.min_payment, args.extra_payment)
    result["payoff"] = estimate_payoff_for(payoff)
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
