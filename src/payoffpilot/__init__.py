"""PayoffPilot: debt tracking and payoff planning."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestingConfig
from .services.debts import PayoffPlan, PayoffStrategy, calculate_payoff_plan

__all__ = [
    "BaseConfig",
    "DevConfig",
    "PayoffPlan",
    "PayoffStrategy",
    "TestingConfig",
    "calculate_payoff_plan",
]
