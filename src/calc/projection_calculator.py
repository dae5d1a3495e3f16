"""Wealth projection calculator.

Simulates net worth year by year from a starting position, monthly
investment contributions and debt payments, and derives milestones and
summary figures from the resulting time series.
"""

import math
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from calc.assumptions import PlanningAssumptions
from model.errors import CalculationError
from model.ProjectionData import Milestone, ProjectionInput, ProjectionSummary, YearSnapshot

MONEY_FIELDS = (
    'current_cash_savings',
    'current_investments',
    'current_debt',
    'monthly_expenses',
    'monthly_investment_contribution',
    'monthly_debt_payment',
)

MilestoneTarget = Union[float, Tuple[float, str]]


def milestone_label(target: float) -> str:
    """Short label for a net-worth target, e.g. 250K or 1M."""
    if target >= 1_000_000:
        return f"{target / 1_000_000:g}M"
    if target >= 1_000:
        return f"{target / 1_000:g}K"
    return f"{target:g}"


class WealthProjectionCalculator:
    """Calculator for net worth over a 1-50 year horizon.

    Each simulated year:
    1. Growth is earned on the investments held at the start of the year
    2. The year's contributions are added (they do not grow in the year they are made)
    3. The debt is reduced by the annual payment, never below zero
    4. Net worth = cash savings (held constant) + investments - debt

    Growth and contribution are stepped once per year. The same input always
    produces the same sequence.
    """

    def __init__(self, assumptions: Optional[PlanningAssumptions] = None):
        self.assumptions = assumptions or PlanningAssumptions()

    def _validate(self, projection_input: ProjectionInput) -> None:
        for name in MONEY_FIELDS:
            value = getattr(projection_input, name)
            if value is None or not math.isfinite(value):
                raise CalculationError(f"{name} must be a finite number, got {value}")
            if value < 0:
                raise CalculationError(f"{name} must not be negative, got {value}")

        years = projection_input.projection_years
        max_years = self.assumptions.max_projection_years
        if not isinstance(years, int) or years < 1 or years > max_years:
            raise CalculationError(f"projection_years must be an integer between 1 and {max_years}, got {years}")

        for name in ('expected_annual_return_pct', 'annual_inflation_pct'):
            if not math.isfinite(getattr(projection_input, name)):
                raise CalculationError(f"{name} must be a finite number")
        if projection_input.annual_inflation_pct <= -100:
            raise CalculationError("annual_inflation_pct must be greater than -100")

    def project(self, projection_input: ProjectionInput) -> Tuple[YearSnapshot, ...]:
        """Run the simulation.

        Returns:
            One snapshot per year from 0 (the starting position) to
            projection_years inclusive.
        """
        self._validate(projection_input)

        r = projection_input.expected_annual_return_pct / 100
        inflation = projection_input.annual_inflation_pct / 100
        annual_contribution = projection_input.monthly_investment_contribution * 12
        annual_debt_payment = projection_input.monthly_debt_payment * 12
        cash = projection_input.current_cash_savings
        age = projection_input.starting_age

        investments = projection_input.current_investments
        debt = projection_input.current_debt
        total_contributed = 0.0
        total_growth = 0.0

        net_worth = cash + investments - debt
        snapshots = [YearSnapshot(
            year=0,
            age=age,
            nominal_net_worth=net_worth,
            real_net_worth=net_worth,
            investments_balance=investments,
            remaining_debt=debt,
            cumulative_contributions=0.0,
            cumulative_growth=0.0
        )]

        for year in range(1, projection_input.projection_years + 1):
            growth = investments * r
            investments = investments + growth + annual_contribution
            total_growth += growth
            total_contributed += annual_contribution

            debt = max(0.0, debt - min(debt, annual_debt_payment))

            net_worth = cash + investments - debt
            snapshots.append(YearSnapshot(
                year=year,
                age=age + year,
                nominal_net_worth=net_worth,
                real_net_worth=net_worth / (1 + inflation) ** year,
                investments_balance=investments,
                remaining_debt=debt,
                cumulative_contributions=total_contributed,
                cumulative_growth=total_growth
            ))

        return tuple(snapshots)

    def resolve_milestones(self, snapshots: Sequence[YearSnapshot],
                           targets: Optional[Iterable[MilestoneTarget]] = None) -> List[Milestone]:
        """Find the first year each net-worth target is reached.

        Args:
            snapshots: A projection as returned by `project`
            targets: Numbers or (target, label) pairs; defaults to the
                     configured milestone targets

        Returns:
            One Milestone per target in the given order; `year` and `age` are
            None when the horizon ends before the target is reached
        """
        if targets is None:
            targets = self.assumptions.milestone_targets

        milestones = []
        for target in targets:
            if isinstance(target, (tuple, list)):
                value, label = target
            else:
                value, label = target, milestone_label(target)

            milestone = Milestone(target=value, label=label)
            for snapshot in snapshots:
                if snapshot.nominal_net_worth >= value:
                    milestone = replace(milestone, year=snapshot.year, age=snapshot.age)
                    break
            milestones.append(milestone)
        return milestones

    def summarize(self, snapshots: Sequence[YearSnapshot]) -> ProjectionSummary:
        if not snapshots:
            raise CalculationError("Cannot summarize an empty projection")
        final = snapshots[-1]
        debt_free_year = next((s.year for s in snapshots if s.remaining_debt == 0), None)
        return ProjectionSummary(
            years=final.year,
            final_nominal_net_worth=final.nominal_net_worth,
            final_real_net_worth=final.real_net_worth,
            total_contributions=final.cumulative_contributions,
            total_growth=final.cumulative_growth,
            debt_free_year=debt_free_year
        )

    def project_scenarios(self, projection_input: ProjectionInput,
                          spread_pct: Optional[float] = None) -> Dict[str, Tuple[YearSnapshot, ...]]:
        """Project bear, base and bull cases by shifting the expected return.

        Args:
            projection_input: The base case
            spread_pct: Percentage points subtracted (bear) and added (bull);
                        defaults to the configured scenario spread
        """
        if spread_pct is None:
            spread_pct = self.assumptions.scenario_spread_pct
        base_return = projection_input.expected_annual_return_pct
        return {
            name: self.project(replace(projection_input, expected_annual_return_pct=base_return + shift))
            for name, shift in (('bear', -spread_pct), ('base', 0.0), ('bull', spread_pct))
        }



def project(projection_input: ProjectionInput) -> Tuple[YearSnapshot, ...]:
    return WealthProjectionCalculator().project(projection_input)


def resolve_milestones(snapshots: Sequence[YearSnapshot],
                       targets: Optional[Iterable[MilestoneTarget]] = None) -> List[Milestone]:
    return WealthProjectionCalculator().resolve_milestones(snapshots, targets)
