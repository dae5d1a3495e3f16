"""Value records for the wealth projection.

A projection is an ordered tuple of `YearSnapshot`, one per simulated year
including year 0 (the starting position). Milestones and summaries are
derived from that tuple without re-running the simulation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProjectionInput:
    current_cash_savings: float = 0.0
    current_investments: float = 0.0
    current_debt: float = 0.0
    monthly_expenses: float = 0.0  # informational only
    monthly_investment_contribution: float = 0.0
    monthly_debt_payment: float = 0.0
    expected_annual_return_pct: float = 7.0
    annual_inflation_pct: float = 2.5
    projection_years: int = 30
    starting_age: int = 30


@dataclass(frozen=True)
class YearSnapshot:
    year: int
    age: int
    nominal_net_worth: float
    real_net_worth: float
    investments_balance: float
    remaining_debt: float
    cumulative_contributions: float
    cumulative_growth: float


@dataclass(frozen=True)
class Milestone:
    target: float
    label: str
    year: Optional[int] = None
    age: Optional[int] = None

    @property
    def reached(self) -> bool:
        return self.year is not None


@dataclass(frozen=True)
class ProjectionSummary:
    years: int
    final_nominal_net_worth: float
    final_real_net_worth: float
    total_contributions: float
    total_growth: float
    debt_free_year: Optional[int]


@dataclass(frozen=True)
class DebtPayoff:
    """Outcome of amortizing a debt with a fixed monthly payment.

    `never` is set when the payment does not cover the monthly interest;
    `months` and `total_interest` are None in that case.
    """
    months: Optional[float]
    never: bool
    total_paid: Optional[float]
    total_interest: Optional[float]


@dataclass(frozen=True)
class FireTarget:
    variant: str
    annual_expenses: float
    target: float
    years_to_reach: Optional[int]
