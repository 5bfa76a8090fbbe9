"""Financial constants and validation limits."""

from __future__ import annotations

MONTHS_PER_YEAR = 12.0
PERCENT_TO_DECIMAL_DIVISOR = 100.0

# Balances below this are treated as paid off to absorb float drift.
ZERO_BALANCE_THRESHOLD = 0.01

MAX_PAYOFF_YEARS = 100
MAX_PAYOFF_MONTHS = MAX_PAYOFF_YEARS * int(MONTHS_PER_YEAR)

# Simulated months are displayed 30 days apart from the anchor date.
DAYS_PER_SIMULATED_MONTH = 30

MIN_INTEREST_RATE = 0.0
MAX_INTEREST_RATE = 100.0

DEFAULT_DUE_DAY = 15
MAX_DEBT_NAME_LENGTH = 80

STRATEGY_AVALANCHE = "avalanche"
STRATEGY_SNOWBALL = "snowball"
