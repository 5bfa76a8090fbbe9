"""Debt, payoff-plan and payment tables."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Debt(SQLModel, table=True):
    """Installment or revolving debt tracked by the user."""

    __tablename__: ClassVar[str] = "debt"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_debt_balance_non_negative"),
        CheckConstraint("original_balance >= 0", name="ck_debt_original_balance_non_negative"),
        CheckConstraint(
            "interest_rate >= 0 AND interest_rate <= 100", name="ck_debt_interest_rate_range"
        ),
        CheckConstraint("min_payment >= 0", name="ck_debt_min_payment_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    balance: float = Field(nullable=False, index=True)
    original_balance: float = Field(nullable=False)
    interest_rate: float = Field(default=0.0, nullable=False, description="Annual percentage")
    min_payment: float = Field(default=0.0, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    payments: list["DebtPayment"] = Relationship(
        back_populates="debt",
        sa_relationship=relationship(
            "DebtPayment", back_populates="debt", cascade="all, delete-orphan"
        ),
    )


class DebtPlan(SQLModel, table=True):
    """Saved plan metadata; the schedule itself is recomputed on every read."""

    __tablename__: ClassVar[str] = "debt_plan"
    __table_args__ = (
        CheckConstraint("strategy IN ('avalanche', 'snowball')", name="ck_debt_plan_strategy"),
        CheckConstraint("monthly_amount > 0", name="ck_debt_plan_monthly_amount_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    strategy: str = Field(nullable=False, max_length=32)
    monthly_amount: float = Field(nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)


class DebtPayment(SQLModel, table=True):
    """A payment actually made toward a debt."""

    __tablename__: ClassVar[str] = "debt_payment"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_debt_payment_amount_positive"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    debt_id: int = Field(foreign_key="debt.id", nullable=False, index=True)
    amount: float = Field(nullable=False)
    paid_on: date = Field(nullable=False, index=True)
    plan_id: Optional[int] = Field(default=None, foreign_key="debt_plan.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)

    debt: "Debt" = Relationship(
        back_populates="payments",
        sa_relationship=relationship("Debt", back_populates="payments"),
    )
