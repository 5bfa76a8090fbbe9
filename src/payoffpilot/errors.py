"""Error taxonomy for debt tracking and payoff planning."""

from __future__ import annotations

from .logging_config import get_logger

logger = get_logger(__name__)


class DebtError(ValueError):
    """Base class for debt-domain failures that are safe to show to users."""

    def user_message(self) -> str:
        return str(self)


class NoDebtsError(DebtError):
    def __init__(self) -> None:
        super().__init__("No debts found. Add at least one debt to create a payoff plan.")


class InsufficientFundsError(DebtError):
    """Monthly budget does not cover the sum of minimum payments."""

    def __init__(self, budget: float, minimum_required: float) -> None:
        self.budget = budget
        self.minimum_required = minimum_required
        super().__init__(
            f"Insufficient funds: monthly budget ${budget:,.2f} is less than "
            f"total minimum payments ${minimum_required:,.2f}"
        )


class InvalidStrategyError(DebtError):
    def __init__(self, given: str) -> None:
        self.given = given
        super().__init__(f"Invalid payoff strategy '{given}'. Use 'avalanche' or 'snowball'.")


class PayoffExceededError(DebtError):
    """Simulation hit the iteration cap without paying every debt off."""

    def __init__(self, years_cap: int) -> None:
        self.years_cap = years_cap
        super().__init__(
            f"Debts cannot be paid off within {years_cap} years with the given budget"
        )


class InvalidBudgetError(DebtError):
    def __init__(self, budget: float) -> None:
        self.budget = budget
        super().__init__(f"Monthly budget must be a finite amount greater than zero (got {budget})")


class InvalidBalanceError(DebtError):
    def __init__(self, balance: float) -> None:
        self.balance = balance
        super().__init__(f"Balance must be a finite, non-negative amount (got {balance})")


class InvalidMinPaymentError(DebtError):
    def __init__(self, min_payment: float) -> None:
        self.min_payment = min_payment
        super().__init__(f"Minimum payment must be a finite, non-negative amount (got {min_payment})")


class InvalidInterestRateError(DebtError):
    def __init__(self, minimum: float, maximum: float, actual: float) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.actual = actual
        super().__init__(
            f"Interest rate must be between {minimum:g}% and {maximum:g}% (got {actual})"
        )


class InvalidDebtNameError(DebtError):
    def __init__(self, max_length: int | None = None) -> None:
        self.max_length = max_length
        if max_length is None:
            super().__init__("Debt name is required")
        else:
            super().__init__(f"Debt name must be at most {max_length} characters")


class InvalidPaymentAmountError(DebtError):
    def __init__(self, amount: float) -> None:
        self.amount = amount
        super().__init__(f"Payment amount must be a finite amount greater than zero (got {amount})")


class PaymentExceedsBalanceError(DebtError):
    def __init__(self, payment: float, balance: float) -> None:
        self.payment = payment
        self.balance = balance
        super().__init__(
            f"Payment ${payment:,.2f} exceeds remaining balance ${balance:,.2f}"
        )


class DebtNotFoundError(DebtError):
    def __init__(self, debt_id: int) -> None:
        self.debt_id = debt_id
        super().__init__(f"Debt {debt_id} not found")


class PlanNotFoundError(DebtError):
    def __init__(self, plan_id: int) -> None:
        self.plan_id = plan_id
        super().__init__(f"Payoff plan {plan_id} not found")


class DatabaseError(DebtError):
    """Storage failure; the message is generic and the detail goes to the log."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Failed to {operation}")


def sanitize_db_error(error: Exception, operation: str) -> DatabaseError:
    """Log the underlying storage error and return a user-safe replacement."""

    logger.error(
        "Database error during %s: %s",
        operation,
        error,
        extra={"operation": operation, "error_type": type(error).__name__},
    )
    return DatabaseError(operation)


__all__ = [
    "DatabaseError",
    "DebtError",
    "DebtNotFoundError",
    "InsufficientFundsError",
    "InvalidBalanceError",
    "InvalidBudgetError",
    "InvalidDebtNameError",
    "InvalidInterestRateError",
    "InvalidMinPaymentError",
    "InvalidPaymentAmountError",
    "InvalidStrategyError",
    "NoDebtsError",
    "PaymentExceedsBalanceError",
    "PayoffExceededError",
    "PlanNotFoundError",
    "sanitize_db_error",
]
