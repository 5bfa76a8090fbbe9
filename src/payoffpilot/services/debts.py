"""Debt payoff planning (avalanche and snowball).

The planner is a pure function of its inputs: a list of debts, a strategy and
a monthly budget go in, and a complete :class:`PayoffPlan` comes out. Each
call builds its own working set, so concurrent calls need no coordination and
identical inputs always produce identical plans.

Each simulated month:

1. interest accrues on every open balance,
2. every open debt receives ``min(minimum_payment, balance)``,
3. whatever budget is left goes to the *first* open debt in the strategy
   ordering, capped at that debt's balance. Surplus beyond that balance is
   not carried to the next debt in the same month.

Avalanche orders debts once by descending APR before the first month.
Snowball re-orders every month by ascending remaining balance, with paid-off
debts last.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence

from ..constants import (
    DAYS_PER_SIMULATED_MONTH,
    MAX_PAYOFF_MONTHS,
    MAX_PAYOFF_YEARS,
    STRATEGY_AVALANCHE,
    STRATEGY_SNOWBALL,
    ZERO_BALANCE_THRESHOLD,
)
from ..errors import (
    InsufficientFundsError,
    InvalidStrategyError,
    NoDebtsError,
    PayoffExceededError,
)
from ..logging_config import get_logger
from .interest import monthly_interest

logger = get_logger(__name__)


class PayoffStrategy(str, Enum):
    """Closed set of allocation strategies."""

    AVALANCHE = STRATEGY_AVALANCHE
    SNOWBALL = STRATEGY_SNOWBALL

    @classmethod
    def parse(cls, value: "PayoffStrategy | str") -> "PayoffStrategy":
        """Convert a user-supplied name into a strategy or raise ``InvalidStrategyError``."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidStrategyError(str(value)) from None


@dataclass(frozen=True, slots=True)
class DebtInput:
    """Read-only snapshot of a tracked debt handed to the planner."""

    id: int
    name: str
    balance: float
    interest_rate: float  # annual percentage, e.g. 18.0
    min_payment: float

    @classmethod
    def from_record(cls, record: Any) -> "DebtInput":
        """Build from any object exposing the debt columns (e.g. the ``Debt`` table)."""

        return cls(
            id=int(record.id),
            name=str(record.name),
            balance=float(record.balance),
            interest_rate=float(record.interest_rate),
            min_payment=float(record.min_payment),
        )


@dataclass(slots=True)
class DebtState:
    """Mutable per-call simulation state for one debt."""

    id: int
    name: str
    balance: float
    interest_rate: float
    min_payment: float
    total_interest_paid: float = 0.0
    payoff_month: Optional[int] = None

    @classmethod
    def from_input(cls, debt: DebtInput) -> "DebtState":
        return cls(
            id=debt.id,
            name=debt.name,
            balance=debt.balance,
            interest_rate=debt.interest_rate,
            min_payment=debt.min_payment,
        )

    @property
    def is_open(self) -> bool:
        return self.balance >= ZERO_BALANCE_THRESHOLD

    def accrue_interest(self) -> None:
        interest = monthly_interest(self.balance, self.interest_rate)
        self.balance += interest
        self.total_interest_paid += interest

    def pay(self, amount: float, month: int) -> float:
        """Reduce the balance and stamp the payoff month the first time it closes."""

        self.balance -= amount
        if not self.is_open and self.payoff_month is None:
            self.payoff_month = month
        return amount


@dataclass(slots=True)
class DebtPaymentDetail:
    debt_id: int
    debt_name: str
    amount: float


@dataclass(slots=True)
class MonthlyPayment:
    """One simulated month of payments."""

    month: int
    date: date
    payments: list[DebtPaymentDetail]
    total_paid: float
    remaining_balance: float


@dataclass(slots=True)
class DebtSummary:
    debt_id: int
    debt_name: str
    payoff_month: int
    total_interest_paid: float


@dataclass(slots=True)
class PayoffPlan:
    """Complete payoff projection for one strategy."""

    strategy: PayoffStrategy
    payoff_date: date
    total_interest: float
    monthly_breakdown: list[MonthlyPayment] = field(default_factory=list)
    # In the strategy ordering of the final simulated month.
    debt_summaries: list[DebtSummary] = field(default_factory=list)

    @property
    def months(self) -> int:
        return len(self.monthly_breakdown)

    @property
    def total_paid(self) -> float:
        return sum(entry.total_paid for entry in self.monthly_breakdown)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation (dates as ISO strings)."""

        data = asdict(self)
        data["strategy"] = self.strategy.value
        data["payoff_date"] = self.payoff_date.isoformat()
        for row in data["monthly_breakdown"]:
            row["date"] = row["date"].isoformat()
        return data


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    strategy: PayoffStrategy
    payoff_date: date
    total_interest: float
    payoff_months: int

    @classmethod
    def from_plan(cls, plan: PayoffPlan) -> "StrategyComparison":
        return cls(
            strategy=plan.strategy,
            payoff_date=plan.payoff_date,
            total_interest=plan.total_interest,
            payoff_months=plan.months,
        )


@dataclass(frozen=True, slots=True)
class ComparisonSavings:
    """What avalanche saves over snowball; never negative."""

    interest_saved: float
    months_saved: int


@dataclass(frozen=True, slots=True)
class StrategyComparisonResult:
    avalanche: StrategyComparison
    snowball: StrategyComparison
    savings: ComparisonSavings

    @property
    def interest_saved(self) -> float:
        return self.savings.interest_saved

    @property
    def months_saved(self) -> int:
        return self.savings.months_saved

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("avalanche", "snowball"):
            data[key]["strategy"] = data[key]["strategy"].value
            data[key]["payoff_date"] = data[key]["payoff_date"].isoformat()
        return data


# ---------------------------------------------------------------------------
# Strategy orderings
# ---------------------------------------------------------------------------


def _by_rate_descending(states: Sequence[DebtState]) -> list[DebtState]:
    # sorted() is stable with reverse=True, so equal rates keep input order.
    return sorted(states, key=lambda s: s.interest_rate, reverse=True)


def _by_balance_ascending(states: Sequence[DebtState]) -> list[DebtState]:
    # Closed debts always sort last and keep their relative order.
    return sorted(states, key=lambda s: (not s.is_open, s.balance if s.is_open else 0.0))


@dataclass(frozen=True, slots=True)
class _Ordering:
    sort: Callable[[Sequence[DebtState]], list[DebtState]]
    every_month: bool


_ORDERINGS: dict[PayoffStrategy, _Ordering] = {
    PayoffStrategy.AVALANCHE: _Ordering(sort=_by_rate_descending, every_month=False),
    PayoffStrategy.SNOWBALL: _Ordering(sort=_by_balance_ascending, every_month=True),
}


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------


def _validate(debts: Sequence[DebtInput], monthly_budget: float) -> None:
    if not debts:
        raise NoDebtsError()
    minimum_required = sum(d.min_payment for d in debts)
    if monthly_budget < minimum_required:
        raise InsufficientFundsError(budget=monthly_budget, minimum_required=minimum_required)


def _simulate_month(
    ordered: Sequence[DebtState], *, month: int, monthly_budget: float, start_date: date
) -> MonthlyPayment:
    for state in ordered:
        if state.is_open:
            state.accrue_interest()

    remaining_budget = monthly_budget
    # Keyed by position in this month's ordering so duplicate ids never merge.
    payments: dict[int, DebtPaymentDetail] = {}

    for index, state in enumerate(ordered):
        if not state.is_open:
            continue
        paid = state.pay(min(state.min_payment, state.balance), month)
        remaining_budget -= paid
        payments[index] = DebtPaymentDetail(debt_id=state.id, debt_name=state.name, amount=paid)

    if remaining_budget > ZERO_BALANCE_THRESHOLD:
        target = next(((i, s) for i, s in enumerate(ordered) if s.is_open), None)
        if target is not None:
            index, state = target
            extra = state.pay(min(remaining_budget, state.balance), month)
            if index in payments:
                payments[index].amount += extra
            else:
                payments[index] = DebtPaymentDetail(
                    debt_id=state.id, debt_name=state.name, amount=extra
                )

    details = list(payments.values())
    return MonthlyPayment(
        month=month,
        date=start_date + timedelta(days=DAYS_PER_SIMULATED_MONTH * (month - 1)),
        payments=details,
        total_paid=sum(p.amount for p in details),
        remaining_balance=sum(s.balance for s in ordered),
    )


def _run_simulation(
    working_set: list[DebtState],
    ordering: _Ordering,
    *,
    monthly_budget: float,
    start_date: date,
) -> tuple[list[MonthlyPayment], list[DebtState]]:
    """Run months until every debt is closed; also return the final ordering."""

    ordered = ordering.sort(working_set)
    schedule: list[MonthlyPayment] = []
    month = 1

    while any(state.is_open for state in ordered):
        if month > MAX_PAYOFF_MONTHS:
            logger.warning(
                "Payoff simulation hit the safety bound",
                extra={
                    "months": MAX_PAYOFF_MONTHS,
                    "remaining_balance": sum(s.balance for s in ordered),
                },
            )
            raise PayoffExceededError(MAX_PAYOFF_YEARS)
        if ordering.every_month and month > 1:
            ordered = ordering.sort(ordered)
        schedule.append(
            _simulate_month(
                ordered, month=month, monthly_budget=monthly_budget, start_date=start_date
            )
        )
        month += 1

    return schedule, ordered


def _assemble_plan(
    strategy: PayoffStrategy,
    ordered: Sequence[DebtState],
    schedule: list[MonthlyPayment],
    start_date: date,
) -> PayoffPlan:
    summaries = [
        DebtSummary(
            debt_id=state.id,
            debt_name=state.name,
            payoff_month=state.payoff_month or 0,
            total_interest_paid=state.total_interest_paid,
        )
        for state in ordered
    ]
    return PayoffPlan(
        strategy=strategy,
        payoff_date=schedule[-1].date if schedule else start_date,
        total_interest=sum(s.total_interest_paid for s in summaries),
        monthly_breakdown=schedule,
        debt_summaries=summaries,
    )


def calculate_payoff_plan(
    debts: Iterable[DebtInput],
    strategy: PayoffStrategy | str,
    monthly_budget: float,
    *,
    today: date | None = None,
) -> PayoffPlan:
    """Simulate paying off ``debts`` with ``monthly_budget`` per month.

    Args:
        debts: Debts to plan for.
        strategy: ``"avalanche"``/``"snowball"`` or a :class:`PayoffStrategy`.
        monthly_budget: Total amount available each month.
        today: Anchor date for month 1; month ``n`` is dated ``today + 30 * (n - 1)`` days.

    Raises:
        InvalidStrategyError: unknown strategy name.
        NoDebtsError: ``debts`` is empty.
        InsufficientFundsError: budget below the sum of minimum payments.
        PayoffExceededError: balances still open after the safety bound.
    """

    chosen = PayoffStrategy.parse(strategy)
    debt_list = list(debts)
    _validate(debt_list, monthly_budget)

    start_date = today or date.today()
    working_set = [DebtState.from_input(debt) for debt in debt_list]
    schedule, ordered = _run_simulation(
        working_set,
        _ORDERINGS[chosen],
        monthly_budget=monthly_budget,
        start_date=start_date,
    )
    plan = _assemble_plan(chosen, ordered, schedule, start_date)

    logger.debug(
        "Payoff plan calculated",
        extra={
            "strategy": chosen.value,
            "debts": len(debt_list),
            "months": plan.months,
            "total_interest": round(plan.total_interest, 2),
        },
    )
    return plan


def compare_strategies(
    debts: Iterable[DebtInput], monthly_budget: float, *, today: date | None = None
) -> StrategyComparisonResult:
    """Run both strategies on the same inputs and report what avalanche saves."""

    debt_list = list(debts)
    anchor = today or date.today()
    avalanche = calculate_payoff_plan(
        debt_list, PayoffStrategy.AVALANCHE, monthly_budget, today=anchor
    )
    snowball = calculate_payoff_plan(
        debt_list, PayoffStrategy.SNOWBALL, monthly_budget, today=anchor
    )
    return StrategyComparisonResult(
        avalanche=StrategyComparison.from_plan(avalanche),
        snowball=StrategyComparison.from_plan(snowball),
        savings=ComparisonSavings(
            interest_saved=max(snowball.total_interest - avalanche.total_interest, 0.0),
            months_saved=max(snowball.months - avalanche.months, 0),
        ),
    )


def avalanche_plan(
    debts: Iterable[DebtInput], monthly_budget: float, *, today: date | None = None
) -> PayoffPlan:
    """Return a plan that sends surplus to the highest-APR debt first."""
    return calculate_payoff_plan(debts, PayoffStrategy.AVALANCHE, monthly_budget, today=today)


def snowball_plan(
    debts: Iterable[DebtInput], monthly_budget: float, *, today: date | None = None
) -> PayoffPlan:
    """Return a plan that sends surplus to the smallest balance first."""
    return calculate_payoff_plan(debts, PayoffStrategy.SNOWBALL, monthly_budget, today=today)


__all__ = [
    "ComparisonSavings",
    "DebtInput",
    "DebtPaymentDetail",
    "DebtState",
    "DebtSummary",
    "MonthlyPayment",
    "PayoffPlan",
    "PayoffStrategy",
    "StrategyComparison",
    "StrategyComparisonResult",
    "avalanche_plan",
    "calculate_payoff_plan",
    "compare_strategies",
    "snowball_plan",
]
