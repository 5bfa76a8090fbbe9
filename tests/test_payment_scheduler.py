"""Upcoming minimum-payment schedule tests."""

from __future__ import annotations

from datetime import date

from payoffpilot.services.payment_scheduler import (
    generate_future_schedules,
    generate_monthly_schedule,
    next_due_date,
)


def test_generate_monthly_schedule(debt_input):
    debts = [
        debt_input(id=1, name="Credit Card A", balance=1000.0, min_payment=50.0),
        debt_input(id=2, name="Credit Card B", balance=2000.0, min_payment=75.0),
    ]

    schedule = generate_monthly_schedule(debts, today=date(2025, 3, 3))

    assert [p.debt_id for p in schedule] == [1, 2]
    assert [p.amount for p in schedule] == [50.0, 75.0]
    assert all(p.due_date == date(2025, 3, 15) for p in schedule)


def test_excludes_zero_balance_debts(debt_input):
    debts = [
        debt_input(id=1, name="Active Card", balance=1000.0),
        debt_input(id=2, name="Paid Off Card", balance=0.0, min_payment=0.0),
    ]

    schedule = generate_monthly_schedule(debts, today=date(2025, 3, 3))

    assert [p.debt_id for p in schedule] == [1]


def test_generate_future_schedules_crosses_year_end(debt_input):
    schedules = generate_future_schedules(
        [debt_input(balance=1000.0, min_payment=50.0)], 3, today=date(2025, 11, 20)
    )

    assert [s.month for s in schedules] == ["2025-11", "2025-12", "2026-01"]
    assert schedules[0].total_amount == 50.0
    assert schedules[2].payments[0].due_date == date(2026, 1, 15)


def test_generate_future_schedules_accepts_orm_rows(debt_factory, debt_repo):
    debt_factory(name="Visa", balance=800.0, min_payment=40.0)
    debt_factory(name="Closed", balance=0.0, min_payment=0.0)

    schedules = generate_future_schedules(debt_repo.list_all(), 2, today=date(2025, 1, 1))

    assert [p.debt_name for p in schedules[0].payments] == ["Visa"]
    assert schedules[1].total_amount == 40.0


def test_zero_months_ahead_returns_nothing(debt_input):
    assert generate_future_schedules([debt_input()], 0, today=date(2025, 1, 1)) == []


def test_next_due_date_this_month():
    assert next_due_date(today=date(2025, 6, 10)) == date(2025, 6, 15)
    assert next_due_date(today=date(2025, 6, 15)) == date(2025, 6, 15)


def test_next_due_date_rolls_to_next_month():
    assert next_due_date(today=date(2025, 6, 16)) == date(2025, 7, 15)
    assert next_due_date(today=date(2025, 12, 31)) == date(2026, 1, 15)
