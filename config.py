"""
Configuration for the Flo-Fi dashboard engine.

Thresholds and rule tables are plain frozen dataclasses passed into the
reducers, so different setups can be compared side by side. Process-level
settings (log level, rules file, server address) come from the environment,
optionally via a local ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal
from typing import FrozenSet, Optional, Tuple

from dotenv import load_dotenv

from classification import DEFAULT_RULES, RuleTable, load_rule_table
from models import Amount

# Gas stations where >= $100 is fuel, not the habit being estimated.
DEFAULT_DENYLIST: Tuple[str, ...] = ("chevron", "shell")

# Large outflows that only move money between accounts.
DEFAULT_EXCLUDED_CATEGORIES: FrozenSet[str] = frozenset({"transfer", "loan repayment", "credit card payment"})

# Debt payoff defaults shown when a session starts.
DEFAULT_BALANCE = 6900.0
DEFAULT_APR_PERCENT = 20.0
DEFAULT_MIN_PAYMENT = 300.0
DEFAULT_EXTRA_PAYMENT = 300.0


@dataclass(frozen=True)
class RecurringCostConfig:
    """Which transactions count toward the recurring-cost estimate."""

    category_substring: str = "gas"
    threshold: Amount = Decimal("-100")
    denylist: Tuple[str, ...] = DEFAULT_DENYLIST


@dataclass(frozen=True)
class LargeTransactionConfig:
    spike_threshold: Amount = Decimal("-1000")
    day_pattern_threshold: Amount = Decimal("-500")
    excluded_categories: FrozenSet[str] = DEFAULT_EXCLUDED_CATEGORIES


@dataclass(frozen=True)
class DashboardConfig:
    rules: RuleTable = DEFAULT_RULES
    recurring_cost: RecurringCostConfig = field(default_factory=RecurringCostConfig)
    large_transactions: LargeTransactionConfig = field(default_factory=LargeTransactionConfig)


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    rules_path: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8001

    def dashboard_config(self) -> DashboardConfig:
        if self.rules_path:
            return DashboardConfig(rules=load_rule_table(self.rules_path))
        return DashboardConfig()


def load_settings() -> Settings:
    """Read settings from the environment (and ``.env`` when present)."""
    load_dotenv()

    port = os.getenv("FLOFI_PORT", "8001")
    try:
        port_num = int(port)
    except ValueError as exc:
        raise ValueError(f"FLOFI_PORT must be an integer, got {port!r}") from exc

    return Settings(
        log_level=os.getenv("FLOFI_LOG_LEVEL", "INFO"),
        rules_path=os.getenv("FLOFI_RULES_PATH") or None,
        host=os.getenv("FLOFI_HOST", "0.0.0.0"),
        port=port_num,
    )
