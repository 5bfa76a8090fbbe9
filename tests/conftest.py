"""Pytest configuration and shared fixtures for PayoffPilot tests.

Provides an isolated SQLite database per test, a debt repository bound to it,
and factories for planner inputs and persisted debts.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from payoffpilot import models  # noqa: F401  # register tables with SQLModel metadata
from payoffpilot.infra.database import create_session_factory
from payoffpilot.infra.repositories import SQLModelDebtRepository
from payoffpilot.logging_config import ROOT_LOGGER_NAME
from payoffpilot.models import Debt
from payoffpilot.services.debts import DebtInput

ANCHOR_DATE = date(2025, 1, 1)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one used by the application."""
    return create_session_factory(db_engine)


@pytest.fixture
def debt_repo(session_factory) -> SQLModelDebtRepository:
    return SQLModelDebtRepository(session_factory)


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch):
    """Keep config-created directories (data dir, logs) inside tmp_path."""
    monkeypatch.setenv("PAYOFFPILOT_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.delenv("PAYOFFPILOT_DATABASE_URL", raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by setup_logging so they never outlive a test."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def today() -> date:
    """Fixed anchor date so schedules are reproducible."""
    return ANCHOR_DATE


@pytest.fixture
def debt_input():
    """Factory for planner inputs.

    Returns:
        Callable: Function that builds DebtInput instances
    """

    def _create(
        id: int = 1,
        name: str | None = None,
        balance: float = 1000.0,
        interest_rate: float = 18.0,
        min_payment: float = 25.0,
    ) -> DebtInput:
        return DebtInput(
            id=id,
            name=name or f"Debt {id}",
            balance=balance,
            interest_rate=interest_rate,
            min_payment=min_payment,
        )

    return _create


@pytest.fixture
def debt_factory(debt_repo):
    """Factory for persisted debts.

    Returns:
        Callable: Function that creates and persists Debt rows
    """

    def _create_debt(
        name: str = "Test Debt",
        balance: float = 1000.00,
        interest_rate: float = 18.0,
        min_payment: float = 25.00,
    ) -> Debt:
        """Create a test debt with sensible defaults.

        Args:
            name: Debt name/description
            balance: Current outstanding balance
            interest_rate: Annual percentage rate (e.g., 18.0 for 18%)
            min_payment: Minimum monthly payment
        """
        return debt_repo.create(
            Debt(
                name=name,
                balance=balance,
                original_balance=balance,
                interest_rate=interest_rate,
                min_payment=min_payment,
            )
        )

    return _create_debt
