from __future__ import annotations
import pandas as pd
from dataclasses import dataclass
from typing import Iterator

from config import DEFAULT_APR_PERCENT, DEFAULT_BALANCE, DEFAULT_EXTRA_PAYMENT, DEFAULT_MIN_PAYMENT
from logging_setup import get_logger
from models import round_money

logger = get_logger("flofi.loans")

# Hard stop for payments too small to ever cover the interest.
PAYOFF_MONTH_CAP = 240


@dataclass(frozen=True)
class PayoffInputs:
    balance: float = DEFAULT_BALANCE
    apr_percent: float = DEFAULT_APR_PERCENT
    min_payment: float = DEFAULT_MIN_PAYMENT
    extra_payment: float = DEFAULT_EXTRA_PAYMENT


def _amortize(balance: float, apr_percent: float, monthly_payment: float, month_cap: int) -> Iterator[dict]:
    monthly_rate = (apr_percent / 100.0) / 12.0
    month = 0
    while balance > 0 and month < month_cap:
        interest = balance * monthly_rate
        # Never pay more than is owed.
        payment = min(balance + interest, monthly_payment)
        balance = balance + interest - payment
        month += 1
        yield {
            "Month": month,
            "Interest": interest,
            "Payment": payment,
            "Principal": payment - interest,
            "Balance": balance,
        }


def estimate_payoff(
    balance: float,
    apr_percent: float,
    min_payment: float,
    extra_payment: float = 0,
    month_cap: int = PAYOFF_MONTH_CAP,
) -> dict:
    """
    Months until the balance is cleared and the total interest paid on the way.

    Stops at ``month_cap`` when the payment can't outrun the interest, so a
    hopeless payment plan reports the cap instead of looping forever.
    """
    months = 0
    total_interest = 0.0
    remaining = balance
    for row in _amortize(balance, apr_percent, min_payment + extra_payment, month_cap):
        months = row["Month"]
        total_interest += row["Interest"]
        remaining = row["Balance"]

    if remaining > 0 and months >= month_cap:
        logger.info("Payoff hit the %d month cap (balance=%s, apr=%s%%)", month_cap, balance, apr_percent)
    return {"months": months, "total_interest": round_money(total_interest)}


def estimate_payoff_for(inputs: PayoffInputs, month_cap: int = PAYOFF_MONTH_CAP) -> dict:
    return estimate_payoff(inputs.balance, inputs.apr_percent, inputs.min_payment, inputs.extra_payment, month_cap)


def simulate_payoff(
    balance: float,
    rate_apr: float,
    monthly_payment: float,
    extra_payment: float = 0,
    month_cap: int = PAYOFF_MONTH_CAP,
) -> pd.DataFrame:
    """
    Simulates the amortization schedule of a loan.
    Returns a DataFrame with Month, Interest, Payment, Principal, Balance.
    """
    schedule = list(_amortize(balance, rate_apr, monthly_payment + extra_payment, month_cap))
    return pd.DataFrame(schedule, columns=["Month", "Interest", "Payment", "Principal", "Balance"])
