# dashboard.py: chart-ready datasets for the dashboard cards

from __future__ import annotations

from typing import Iterable, List, Optional, Union

import pandas as pd

from classification import DEFAULT_RULES, RuleTable
from config import DashboardConfig
from insights import _day_pattern, _recurring_cost, _spikes
from logging_setup import get_logger
from models import Transaction, cents_to_dollars, prep_transactions

logger = get_logger("flofi.dashboard")

TransactionsLike = Union[Iterable[Transaction], pd.DataFrame]


def monthly_income_vs_spend(data: TransactionsLike) -> List[dict]:
    """
    Income and spend per ``YYYY-MM`` month, oldest first.

    Positive amounts are income; zero and negative amounts count as spend.
    Rows without a usable date are skipped.
    """
    return _monthly(prep_transactions(data))


def _monthly(df: pd.DataFrame) -> List[dict]:
    df = df[df["Date"].notna()]

    df = df.assign(
        IncomeCents=df["Cents"].where(df["Cents"] > 0, 0),
        SpendCents=(-df["Cents"]).where(df["Cents"] <= 0, 0),
    )
    monthly = df.groupby("Month")[["IncomeCents", "SpendCents"]].sum().sort_index()

    out = [
        {"month": month, "income": cents_to_dollars(row.IncomeCents), "spend": cents_to_dollars(row.SpendCents)}
        for month, row in monthly.iterrows()
    ]
    logger.debug("monthly_income_vs_spend: %d months", len(out))
    return out


def category_totals(data: TransactionsLike, rules: RuleTable = DEFAULT_RULES) -> List[dict]:
    """
    Spend per card bucket in rule-table order, with the fallback bucket last.

    Every bucket is reported, including empty ones. Only negative amounts add
    spend; income and zero rows still get classified but contribute nothing.
    """
    return _category_totals(prep_transactions(data), rules)


def _category_totals(df: pd.DataFrame, rules: RuleTable) -> List[dict]:
    buckets = pd.Series(
        [rules.classify(m, c) for m, c in zip(df["Merchant"], df["Category"])],
        index=df.index,
        dtype=object,
    )
    spend = (-df["Cents"]).where(df["Cents"] < 0, 0)
    by_bucket = spend.groupby(buckets).sum()

    out = [
        {"bucket": name, "total_spend": cents_to_dollars(by_bucket.get(name, 0))}
        for name in rules.bucket_names()
    ]
    logger.debug("category_totals: %d rows over %d buckets", len(df), len(out))
    return out


def build_dashboard(data: TransactionsLike, config: Optional[DashboardConfig] = None) -> dict:
    """Run every dashboard reducer over one prepared frame."""
    config = config or DashboardConfig()
    df = prep_transactions(data)
    return {
        "monthly": _monthly(df),
        "categories": _category_totals(df, config.rules),
        "recurring_cost": _recurring_cost(df, config.recurring_cost),
        "spikes": _spikes(df, config.large_transactions),
        "day_pattern": _day_pattern(df, config.large_transactions),
    }
