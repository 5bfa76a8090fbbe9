"""Upcoming minimum-payment schedules for open debts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from ..constants import DEFAULT_DUE_DAY
from .debts import DebtInput


@dataclass(slots=True)
class ScheduledPayment:
    """A minimum payment expected on a due date."""

    debt_id: int
    debt_name: str
    amount: float
    due_date: date


@dataclass(slots=True)
class PaymentSchedule:
    """All minimum payments falling in one calendar month."""

    month: str  # YYYY-MM
    total_amount: float
    payments: list[ScheduledPayment] = field(default_factory=list)


def _month_start(today: date, offset: int) -> date:
    """Return the first day of the month ``offset`` months after *today*."""

    month = today.month + offset
    year = today.year + (month - 1) // 12
    month = ((month - 1) % 12) + 1
    return date(year, month, 1)


def _due_date(year: int, month: int, due_day: int = DEFAULT_DUE_DAY) -> date:
    # Due days are capped at 28 so every month is valid.
    return date(year, month, min(due_day, 28))


def _minimum_payments(debts: Iterable[Any], due_date: date) -> list[ScheduledPayment]:
    payments: list[ScheduledPayment] = []
    for record in debts:
        debt = record if isinstance(record, DebtInput) else DebtInput.from_record(record)
        if debt.balance <= 0:
            continue
        payments.append(
            ScheduledPayment(
                debt_id=debt.id,
                debt_name=debt.name,
                amount=debt.min_payment,
                due_date=due_date,
            )
        )
    return payments


def generate_monthly_schedule(
    debts: Iterable[Any], *, today: date | None = None
) -> list[ScheduledPayment]:
    """Return this month's minimum payments for every debt with a balance."""

    current = today or date.today()
    return _minimum_payments(debts, _due_date(current.year, current.month))


def generate_future_schedules(
    debts: Iterable[Any], months_ahead: int, *, today: date | None = None
) -> list[PaymentSchedule]:
    """Return ``months_ahead`` monthly buckets of minimum payments starting this month."""

    current = today or date.today()
    debt_list = list(debts)
    schedules: list[PaymentSchedule] = []
    for offset in range(max(months_ahead, 0)):
        month_start = _month_start(current, offset)
        payments = _minimum_payments(debt_list, _due_date(month_start.year, month_start.month))
        schedules.append(
            PaymentSchedule(
                month=month_start.strftime("%Y-%m"),
                total_amount=sum(p.amount for p in payments),
                payments=payments,
            )
        )
    return schedules


def next_due_date(*, today: date | None = None, due_day: int = DEFAULT_DUE_DAY) -> date:
    """Return the next due date on or after *today*."""

    current = today or date.today()
    if current.day > due_day:
        following = _month_start(current, 1)
        return _due_date(following.year, following.month, due_day)
    return _due_date(current.year, current.month, due_day)


__all__ = [
    "PaymentSchedule",
    "ScheduledPayment",
    "generate_future_schedules",
    "generate_monthly_schedule",
    "next_due_date",
]
