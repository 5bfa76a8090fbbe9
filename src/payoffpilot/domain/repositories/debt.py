"""Debt repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.debt import Debt, DebtPayment, DebtPlan


class DebtRepository(Protocol):
    """Repository for debts, saved plan metadata and recorded payments."""

    def get_by_id(self, debt_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        ...

    def list_all(self) -> list[Debt]:
        """List all debts, largest balance first."""
        ...

    def list_active(self) -> list[Debt]:
        """List debts with a positive balance, largest balance first."""
        ...

    def create(self, debt: Debt) -> Debt:
        """Create a new debt."""
        ...

    def update(self, debt: Debt) -> Debt:
        """Update an existing debt."""
        ...

    def delete(self, debt_id: int) -> None:
        """Delete a debt and its payment history."""
        ...

    def get_total_debt(self) -> float:
        """Sum of all outstanding balances."""
        ...

    def create_plan(self, strategy: str, monthly_amount: float) -> DebtPlan:
        """Persist plan metadata."""
        ...

    def get_plan(self, plan_id: int) -> Optional[DebtPlan]:
        """Retrieve plan metadata by ID."""
        ...

    def list_plans(self) -> list[DebtPlan]:
        """List saved plans, newest first."""
        ...

    def apply_payment(
        self, debt_id: int, amount: float, paid_on: date, plan_id: Optional[int] = None
    ) -> tuple[DebtPayment, Debt]:
        """Record a payment and lower the debt balance in one transaction."""
        ...

    def list_payments(
        self, debt_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[DebtPayment]:
        """List payments for a debt, newest first, optionally within a date range."""
        ...
