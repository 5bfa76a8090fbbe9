"""Command surface for debt tracking and payoff planning.

Plans are stored as metadata only (strategy + monthly amount). Reading a plan
re-runs the planner against the debts as they are *now*, so the same plan id
can show different numbers after payments are recorded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..constants import MAX_DEBT_NAME_LENGTH, MAX_INTEREST_RATE, MIN_INTEREST_RATE
from ..domain.repositories.debt import DebtRepository
from ..errors import (
    DebtNotFoundError,
    InvalidBalanceError,
    InvalidBudgetError,
    InvalidDebtNameError,
    InvalidInterestRateError,
    InvalidMinPaymentError,
    InvalidPaymentAmountError,
    InvalidStrategyError,
    NoDebtsError,
    PlanNotFoundError,
    sanitize_db_error,
)
from ..logging_config import get_logger
from ..models.debt import Debt, DebtPayment
from . import debts as planner
from .debts import DebtInput, PayoffPlan, PayoffStrategy, StrategyComparisonResult

logger = get_logger(__name__)


@dataclass(slots=True)
class BalancePoint:
    paid_on: date
    balance: float


@dataclass(slots=True)
class DebtProgress:
    """Payment history for one debt."""

    debt: Debt
    payments: list[DebtPayment] = field(default_factory=list)
    total_paid: float = 0.0
    balance_history: list[BalancePoint] = field(default_factory=list)


def _validate_balance(balance: float) -> None:
    if not (balance >= 0 and math.isfinite(balance)):
        raise InvalidBalanceError(balance)


def _validate_min_payment(min_payment: float) -> None:
    if not (min_payment >= 0 and math.isfinite(min_payment)):
        raise InvalidMinPaymentError(min_payment)


def _validate_interest_rate(rate: float) -> None:
    if not MIN_INTEREST_RATE <= rate <= MAX_INTEREST_RATE:
        raise InvalidInterestRateError(MIN_INTEREST_RATE, MAX_INTEREST_RATE, rate)


def _validate_budget(monthly_amount: float) -> None:
    if not (monthly_amount > 0 and math.isfinite(monthly_amount)):
        raise InvalidBudgetError(monthly_amount)


def create_debt(
    repo: DebtRepository,
    *,
    name: str,
    balance: float,
    interest_rate: float,
    min_payment: float,
) -> Debt:
    """Validate and persist a new debt; ``original_balance`` starts equal to ``balance``."""

    clean_name = (name or "").strip()
    if not clean_name:
        raise InvalidDebtNameError()
    if len(clean_name) > MAX_DEBT_NAME_LENGTH:
        raise InvalidDebtNameError(max_length=MAX_DEBT_NAME_LENGTH)
    _validate_balance(balance)
    _validate_min_payment(min_payment)
    _validate_interest_rate(interest_rate)

    debt = Debt(
        name=clean_name,
        balance=balance,
        original_balance=balance,
        interest_rate=interest_rate,
        min_payment=min_payment,
    )
    try:
        created = repo.create(debt)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "create debt") from exc
    logger.info(f"Debt created: {created.name}", extra={"debt_id": created.id})
    return created


def update_debt(
    repo: DebtRepository,
    debt_id: int,
    *,
    balance: Optional[float] = None,
    interest_rate: Optional[float] = None,
    min_payment: Optional[float] = None,
) -> Debt:
    """Apply partial updates to a debt after validating each supplied field."""

    if balance is not None:
        _validate_balance(balance)
    if interest_rate is not None:
        _validate_interest_rate(interest_rate)
    if min_payment is not None:
        _validate_min_payment(min_payment)

    try:
        debt = repo.get_by_id(debt_id)
        if debt is None:
            raise DebtNotFoundError(debt_id)
        if balance is not None:
            debt.balance = balance
        if interest_rate is not None:
            debt.interest_rate = interest_rate
        if min_payment is not None:
            debt.min_payment = min_payment
        return repo.update(debt)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "update debt") from exc


def list_debts(repo: DebtRepository) -> list[Debt]:
    try:
        return repo.list_all()
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "load debts") from exc


def delete_debt(repo: DebtRepository, debt_id: int) -> None:
    try:
        if repo.get_by_id(debt_id) is None:
            raise DebtNotFoundError(debt_id)
        repo.delete(debt_id)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "delete debt") from exc
    logger.info("Debt deleted", extra={"debt_id": debt_id})


def _load_planner_inputs(repo: DebtRepository) -> list[DebtInput]:
    try:
        active = repo.list_active()
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "load debts") from exc
    if not active:
        raise NoDebtsError()
    return [DebtInput.from_record(debt) for debt in active]


def create_payoff_plan(
    repo: DebtRepository,
    strategy: str,
    monthly_amount: float,
    *,
    today: date | None = None,
) -> tuple[int, PayoffPlan]:
    """Compute a plan for the current debts and save its metadata.

    Returns ``(plan_id, plan)``. Nothing is saved if the planner rejects the input.
    """

    chosen = PayoffStrategy.parse(strategy)
    _validate_budget(monthly_amount)
    plan = planner.calculate_payoff_plan(
        _load_planner_inputs(repo), chosen, monthly_amount, today=today
    )
    try:
        saved = repo.create_plan(chosen.value, monthly_amount)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "save payoff plan") from exc

    logger.info(
        f"Payoff plan saved: {chosen.value}",
        extra={"plan_id": saved.id, "months": plan.months, "monthly_amount": monthly_amount},
    )
    return int(saved.id), plan


def get_payoff_plan(
    repo: DebtRepository, plan_id: int, *, today: date | None = None
) -> PayoffPlan:
    """Recompute a saved plan against the debts currently on file."""

    try:
        saved = repo.get_plan(plan_id)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "load payoff plan") from exc
    if saved is None:
        raise PlanNotFoundError(plan_id)

    try:
        strategy = PayoffStrategy.parse(saved.strategy)
    except InvalidStrategyError:
        logger.error("Stored plan has an unknown strategy", extra={"plan_id": plan_id})
        raise
    return planner.calculate_payoff_plan(
        _load_planner_inputs(repo), strategy, saved.monthly_amount, today=today
    )


def record_payment(
    repo: DebtRepository,
    debt_id: int,
    amount: float,
    paid_on: date,
    plan_id: Optional[int] = None,
) -> tuple[int, float]:
    """Record a real payment; returns ``(payment_id, updated_balance)``."""

    if not (amount > 0 and math.isfinite(amount)):
        raise InvalidPaymentAmountError(amount)
    try:
        payment, debt = repo.apply_payment(debt_id, amount, paid_on, plan_id)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "record payment") from exc

    logger.info(
        "Debt payment recorded",
        extra={"debt_id": debt_id, "amount": amount, "balance": debt.balance},
    )
    return int(payment.id), debt.balance


def get_debt_progress(
    repo: DebtRepository,
    debt_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> DebtProgress:
    """Return payments (newest first) and a chronological balance history.

    The history starts from ``original_balance`` and subtracts payments oldest
    first, floored at zero.
    """

    try:
        debt = repo.get_by_id(debt_id)
        if debt is None:
            raise DebtNotFoundError(debt_id)
        payments = repo.list_payments(debt_id, start, end)
    except SQLAlchemyError as exc:
        raise sanitize_db_error(exc, "load debt progress") from exc

    history: list[BalancePoint] = []
    running = debt.original_balance
    for payment in reversed(payments):
        running -= payment.amount
        history.append(BalancePoint(paid_on=payment.paid_on, balance=max(running, 0.0)))

    return DebtProgress(
        debt=debt,
        payments=payments,
        total_paid=sum(p.amount for p in payments),
        balance_history=history,
    )


def compare_strategies(
    repo: DebtRepository, monthly_amount: float, *, today: date | None = None
) -> StrategyComparisonResult:
    """Compare avalanche and snowball for the debts currently on file."""

    _validate_budget(monthly_amount)
    return planner.compare_strategies(_load_planner_inputs(repo), monthly_amount, today=today)


__all__ = [
    "BalancePoint",
    "DebtProgress",
    "compare_strategies",
    "create_debt",
    "create_payoff_plan",
    "delete_debt",
    "get_debt_progress",
    "get_payoff_plan",
    "list_debts",
    "record_payment",
    "update_debt",
]
