"""Strategy comparison tests."""

from __future__ import annotations

import pytest

from payoffpilot.errors import InsufficientFundsError, NoDebtsError
from payoffpilot.services.debts import (
    DebtInput,
    PayoffStrategy,
    calculate_payoff_plan,
    compare_strategies,
)


def test_strategy_parse_accepts_known_names():
    assert PayoffStrategy.parse("avalanche") is PayoffStrategy.AVALANCHE
    assert PayoffStrategy.parse("snowball") is PayoffStrategy.SNOWBALL
    assert PayoffStrategy.parse(PayoffStrategy.SNOWBALL) is PayoffStrategy.SNOWBALL


def test_compare_strategies_reports_avalanche_savings(debt_input, today):
    """High-rate large debt vs low-rate small debt: avalanche should save interest."""
    debts = [
        debt_input(id=1, name="Card", balance=5000.0, interest_rate=25.0, min_payment=100.0),
        debt_input(id=2, name="Loan", balance=1000.0, interest_rate=5.0, min_payment=50.0),
    ]

    result = compare_strategies(debts, 400.0, today=today)

    assert result.avalanche.strategy is PayoffStrategy.AVALANCHE
    assert result.snowball.strategy is PayoffStrategy.SNOWBALL
    assert result.interest_saved > 0
    assert result.interest_saved == pytest.approx(
        result.snowball.total_interest - result.avalanche.total_interest
    )
    assert result.months_saved >= 0


def test_compare_strategies_matches_individual_plans(debt_input, today):
    debts = [
        debt_input(id=1, balance=2500.0, interest_rate=19.0, min_payment=75.0),
        debt_input(id=2, balance=900.0, interest_rate=11.0, min_payment=40.0),
    ]

    result = compare_strategies(debts, 300.0, today=today)
    avalanche = calculate_payoff_plan(debts, "avalanche", 300.0, today=today)
    snowball = calculate_payoff_plan(debts, "snowball", 300.0, today=today)

    assert result.avalanche.total_interest == avalanche.total_interest
    assert result.avalanche.payoff_months == avalanche.months
    assert result.snowball.payoff_date == snowball.payoff_date
    assert result.snowball.payoff_months == snowball.months


def test_compare_strategies_never_reports_negative_savings(debt_input, today):
    # Smallest balance is also the highest rate, so both strategies agree.
    debts = [
        debt_input(id=1, balance=500.0, interest_rate=24.0, min_payment=25.0),
        debt_input(id=2, balance=4000.0, interest_rate=7.0, min_payment=80.0),
    ]

    result = compare_strategies(debts, 250.0, today=today)

    assert result.interest_saved == pytest.approx(0.0)
    assert result.months_saved == 0


def test_compare_strategies_to_dict(debt_input, today):
    result = compare_strategies([debt_input()], 100.0, today=today)
    data = result.to_dict()

    assert data["avalanche"]["strategy"] == "avalanche"
    assert data["snowball"]["payoff_date"] == result.snowball.payoff_date.isoformat()
    assert set(data) == {"avalanche", "snowball", "savings"}
    assert data["savings"] == {
        "interest_saved": result.interest_saved,
        "months_saved": result.months_saved,
    }


def test_compare_strategies_propagates_errors(debt_input, today):
    with pytest.raises(NoDebtsError):
        compare_strategies([], 100.0, today=today)
    with pytest.raises(InsufficientFundsError):
        compare_strategies([debt_input(min_payment=80.0)], 50.0, today=today)


def test_debt_input_from_record():
    class Row:
        id = 9
        name = "Student Loan"
        balance = 12000
        interest_rate = 4
        min_payment = 130

    debt = DebtInput.from_record(Row())

    assert debt == DebtInput(
        id=9, name="Student Loan", balance=12000.0, interest_rate=4.0, min_payment=130.0
    )
    assert isinstance(debt.balance, float)
