from typing import Iterable, List, Optional, Union

import pandas as pd

from config import LargeTransactionConfig, RecurringCostConfig
from logging_setup import get_logger
from models import Transaction, cents_to_dollars, prep_transactions, to_cents

logger = get_logger("flofi.insights")

TransactionsLike = Union[Iterable[Transaction], pd.DataFrame]


def recurring_cost_estimate(data: TransactionsLike, config: Optional[RecurringCostConfig] = None) -> dict:
    """
    Estimate a recurring habit's cost from category, size and merchant.

    A row counts when its category contains ``config.category_substring``, its
    amount is at or below ``config.threshold`` and its merchant matches none of
    the denylist entries. This is a heuristic guess, not a measurement.
    """
    return _recurring_cost(prep_transactions(data), config or RecurringCostConfig())


def _recurring_cost(df: pd.DataFrame, config: RecurringCostConfig) -> dict:
    needle = config.category_substring.lower()
    denylist = [d.lower() for d in config.denylist]
    denied = df["Merchant"].str.lower().map(lambda m: any(d in m for d in denylist)).astype(bool)

    mask = (
        df["Date"].notna()
        & df["Category"].str.lower().str.contains(needle, regex=False).astype(bool)
        & (df["Cents"] <= to_cents(config.threshold))
        & ~denied
    )
    filtered = df[mask]

    per_month = (-filtered["Cents"]).groupby(filtered["Month"]).sum().sort_index()
    series = [{"month": month, "total": cents_to_dollars(cents)} for month, cents in per_month.items()]

    return {
        "series": series,
        "total": cents_to_dollars(per_month.sum()),
        "count": int(len(filtered)),
    }


def _large_outflows(df: pd.DataFrame, threshold, excluded) -> pd.DataFrame:
    """Dated rows at or below ``threshold`` whose category is not excluded."""
    excluded = {c.lower() for c in excluded}
    mask = (
        df["Date"].notna()
        & (df["Cents"] <= to_cents(threshold))
        & ~df["Category"].str.lower().isin(excluded)
    )
    return df[mask]


def spending_spikes(data: TransactionsLike, config: Optional[LargeTransactionConfig] = None) -> List[dict]:
    """Count of large purchases per month. Months without any are omitted."""
    return _spikes(prep_transactions(data), config or LargeTransactionConfig())


def _spikes(df: pd.DataFrame, config: LargeTransactionConfig) -> List[dict]:
    spikes = _large_outflows(df, config.spike_threshold, config.excluded_categories)
    by_month = spikes.groupby("Month").size().sort_index()

    logger.debug("spending_spikes: %d large transactions across %d months", len(spikes), len(by_month))
    return [{"month": month, "count": int(count)} for month, count in by_month.items()]


def day_of_month_pattern(data: TransactionsLike, config: Optional[LargeTransactionConfig] = None) -> List[dict]:
    """
    Count of large purchases by calendar day, across every month.

    Always returns days 1 through 31, zero-filled, so the chart reads as a
    full-month cycle.
    """
    return _day_pattern(prep_transactions(data), config or LargeTransactionConfig())


def _day_pattern(df: pd.DataFrame, config: LargeTransactionConfig) -> List[dict]:
    large = _large_outflows(df, config.day_pattern_threshold, config.excluded_categories)
    by_day = large["Date"].dt.day.value_counts()

    return [{"day": day, "count": int(by_day.get(day, 0))} for day in range(1, 32)]
