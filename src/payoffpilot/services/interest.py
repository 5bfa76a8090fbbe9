"""Monetary primitives shared by the payoff simulator."""

from __future__ import annotations

from ..constants import MONTHS_PER_YEAR, PERCENT_TO_DECIMAL_DIVISOR


def monthly_interest(balance: float, annual_rate_percent: float) -> float:
    """Return one month of simple interest on ``balance`` at an annual percentage rate."""

    if balance <= 0.0 or annual_rate_percent < 0.0:
        return 0.0
    return balance * (annual_rate_percent / PERCENT_TO_DECIMAL_DIVISOR / MONTHS_PER_YEAR)


def apply_payment_with_interest(
    balance: float, annual_rate_percent: float, payment: float
) -> float:
    """Accrue a month of interest, then apply ``payment``; never returns a negative balance."""

    interest = monthly_interest(balance, annual_rate_percent)
    return max(balance + interest - payment, 0.0)


def total_interest(initial_balance: float, final_balance: float, total_payments: float) -> float:
    """Return the share of ``total_payments`` that went to interest rather than principal."""

    if total_payments <= 0.0:
        return 0.0
    principal_paid = initial_balance - final_balance
    if total_payments > principal_paid:
        return total_payments - principal_paid
    return 0.0


def effective_annual_rate(monthly_rate_percent: float) -> float:
    """Compound a monthly percentage rate into an effective annual percentage."""

    return ((1.0 + monthly_rate_percent / PERCENT_TO_DECIMAL_DIVISOR) ** 12 - 1.0) * 100.0


__all__ = [
    "apply_payment_with_interest",
    "effective_annual_rate",
    "monthly_interest",
    "total_interest",
]
