"""SQLModel implementation of the debt repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...errors import DebtNotFoundError, PaymentExceedsBalanceError
from ...models.debt import Debt, DebtPayment, DebtPlan


class SQLModelDebtRepository:
    """SQLModel-based debt repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, debt_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        with self.session_factory() as session:
            return session.get(Debt, debt_id)

    def list_all(self) -> list[Debt]:
        """List all debts, largest balance first."""
        with self.session_factory() as session:
            statement = select(Debt).order_by(Debt.balance.desc(), Debt.id)  # type: ignore
            return list(session.exec(statement).all())

    def list_active(self) -> list[Debt]:
        """List debts with a positive balance, largest balance first."""
        with self.session_factory() as session:
            statement = (
                select(Debt)
                .where(Debt.balance > 0)
                .order_by(Debt.balance.desc(), Debt.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, debt: Debt) -> Debt:
        """Create a new debt."""
        with self.session_factory() as session:
            session.add(debt)
            session.commit()
            session.refresh(debt)
            return debt

    def update(self, debt: Debt) -> Debt:
        """Update an existing debt."""
        with self.session_factory() as session:
            debt.updated_at = datetime.now(timezone.utc)
            session.add(debt)
            session.commit()
            session.refresh(debt)
            return debt

    def delete(self, debt_id: int) -> None:
        """Delete a debt and its payment history."""
        with self.session_factory() as session:
            debt = session.get(Debt, debt_id)
            if debt:
                session.delete(debt)
                session.commit()

    def get_total_debt(self) -> float:
        """Sum of all outstanding balances."""
        with self.session_factory() as session:
            debts = session.exec(select(Debt)).all()
            return sum(debt.balance for debt in debts)

    def create_plan(self, strategy: str, monthly_amount: float) -> DebtPlan:
        """Persist plan metadata (strategy and budget only)."""
        with self.session_factory() as session:
            plan = DebtPlan(strategy=strategy, monthly_amount=monthly_amount)
            session.add(plan)
            session.commit()
            session.refresh(plan)
            return plan

    def get_plan(self, plan_id: int) -> Optional[DebtPlan]:
        """Retrieve plan metadata by ID."""
        with self.session_factory() as session:
            return session.get(DebtPlan, plan_id)

    def list_plans(self) -> list[DebtPlan]:
        """List saved plans, newest first."""
        with self.session_factory() as session:
            statement = select(DebtPlan).order_by(
                DebtPlan.created_at.desc(), DebtPlan.id.desc()  # type: ignore
            )
            return list(session.exec(statement).all())

    def apply_payment(
        self, debt_id: int, amount: float, paid_on: date, plan_id: Optional[int] = None
    ) -> tuple[DebtPayment, Debt]:
        """Record a payment and lower the debt balance in one transaction."""
        with self.session_factory() as session:
            debt = session.get(Debt, debt_id)
            if debt is None:
                raise DebtNotFoundError(debt_id)
            if amount > debt.balance:
                raise PaymentExceedsBalanceError(payment=amount, balance=debt.balance)

            payment = DebtPayment(debt_id=debt_id, amount=amount, paid_on=paid_on, plan_id=plan_id)
            debt.balance = debt.balance - amount
            debt.updated_at = datetime.now(timezone.utc)
            session.add(payment)
            session.add(debt)
            session.commit()
            session.refresh(payment)
            session.refresh(debt)
            return payment, debt

    def list_payments(
        self, debt_id: int, start: Optional[date] = None, end: Optional[date] = None
    ) -> list[DebtPayment]:
        """List payments for a debt, newest first, optionally within a date range."""
        with self.session_factory() as session:
            statement = select(DebtPayment).where(DebtPayment.debt_id == debt_id)
            if start is not None and end is not None:
                statement = statement.where(DebtPayment.paid_on >= start).where(
                    DebtPayment.paid_on <= end
                )
            statement = statement.order_by(
                DebtPayment.paid_on.desc(), DebtPayment.id.desc()  # type: ignore
            )
            return list(session.exec(statement).all())
