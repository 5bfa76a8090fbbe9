"""Service module exports."""

from . import debt_service, debts, interest, payment_scheduler

__all__ = ["debt_service", "debts", "interest", "payment_scheduler"]
