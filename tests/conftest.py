"""Shared fixtures for the dashboard engine tests.

Settings are read from ``FLOFI_*`` environment variables, so every test starts
from a clean environment to keep a developer's local setup from leaking in.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from models import Transaction


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FLOFI_LOG_LEVEL", "FLOFI_RULES_PATH", "FLOFI_HOST", "FLOFI_PORT"):
        monkeypatch.delenv(name, raising=False)


def tx(when, merchant="", category="", amount="0", account="Checking") -> Transaction:
    """Build a transaction from an ISO date string (or ``None``) and a decimal string."""
    return Transaction(
        date=date.fromisoformat(when) if when else None,
        merchant=merchant,
        category=category,
        amount=Decimal(amount),
        account=account,
    )


@pytest.fixture
def make_tx():
    return tx
