"""Transaction records and money helpers shared by the dashboard engine.

A :class:`Transaction` is what the CSV validator hands to the engine. The
engine works on a pandas frame built from these records (see
:func:`transactions_to_df`) and keeps every sum in integer cents, so totals
never drift the way repeated float additions do.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

import pandas as pd

from logging_setup import get_logger

logger = get_logger("flofi.models")

Amount = Union[Decimal, float, int]

COLUMNS = ["Date", "Merchant", "Category", "Amount", "Account"]

_CENT = Decimal("0.01")
_ONE = Decimal("1")

# Largest amount the engine will sum, in cents (ten trillion dollars).
MAX_ABS_CENTS = 10**15


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single validated transaction.

    ``amount`` is signed: positive is income or a credit, negative is spend.
    ``date`` is ``None`` when the export carried a date that could not be
    parsed; such rows are left out of every month- or day-keyed dataset.
    """

    date: date | None
    merchant: str
    category: str
    amount: Amount
    account: str = ""


def to_cents(value) -> int:
    """Convert a money amount to integer cents, rounding half away from zero."""

    if value is None or (not isinstance(value, Decimal) and pd.isna(value)):
        return 0
    d = value if isinstance(value, Decimal) else Decimal(str(value))
    return int((d * 100).quantize(_ONE, rounding=ROUND_HALF_UP))


def _bounded_cents(value) -> int | None:
    """``to_cents`` for the reducers: ``None`` for text, infinities and absurd sizes."""
    try:
        cents = to_cents(value)
    except (InvalidOperation, ValueError, OverflowError):
        return None
    return cents if abs(cents) <= MAX_ABS_CENTS else None


def cents_to_dollars(cents: int) -> float:
    return int(cents) / 100


def round_money(value: float) -> float:
    """Round to 2 decimals, half away from zero (``2.675`` -> ``2.68``)."""

    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def transactions_to_df(transactions: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "Date": t.date,
            "Merchant": t.merchant,
            "Category": t.category,
            "Amount": t.amount,
            "Account": t.account,
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def prep_transactions(data: Iterable[Transaction] | pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``data`` ready for the reducers.

    Accepts a list of :class:`Transaction` or a frame with the ``COLUMNS``
    headers. Adds ``Month`` (``YYYY-MM``, empty for missing dates) and
    ``Cents`` (signed integer cents). The caller's data is never modified.
    """

    if isinstance(data, pd.DataFrame):
        df = data.copy()
        for col in COLUMNS:
            if col not in df.columns:
                df[col] = None
    else:
        df = transactions_to_df(data)

    if not pd.api.types.is_datetime64_any_dtype(df["Date"]):
        # Exports mix formats row to row; parse each value on its own.
        df["Date"] = pd.to_datetime(df["Date"], errors="coerce", format="mixed")
    for col in ["Merchant", "Category", "Account"]:
        df[col] = df[col].fillna("").astype(str)

    cents = df["Amount"].map(_bounded_cents)
    unusable = cents.isna()
    if unusable.any():
        logger.warning("Ignoring %d unreadable or out-of-range amount(s)", int(unusable.sum()))
    df["Cents"] = cents.fillna(0).astype("int64")
    df["Month"] = df["Date"].dt.to_period("M").astype(str).where(df["Date"].notna(), "")
    return df
