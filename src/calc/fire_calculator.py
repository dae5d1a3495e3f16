"""
FIRE (financial independence, retire early) targets.

Every variant scales annual expenses and divides by the safe withdrawal rate;
the resulting target is then compared with current savings and contributions.
"""

from typing import List, Optional

from calc.assumptions import PlanningAssumptions
from calc.closed_form import savings_rate, years_to_financial_independence, years_to_target
from model.errors import CalculationError
from model.ProjectionData import FireTarget

MONTHS_PER_YEAR = 12


class FireCalculator:
    """Calculator for FIRE numbers, variants and progress."""

    def __init__(self, assumptions: Optional[PlanningAssumptions] = None):
        self.assumptions = assumptions or PlanningAssumptions()

    def fire_number(self, annual_expenses: float, factor: float = 1.0) -> float:
        """Savings needed to live off `annual_expenses * factor` at the safe withdrawal rate."""
        if annual_expenses < 0:
            raise CalculationError("annual_expenses must not be negative")
        return annual_expenses * factor / (self.assumptions.safe_withdrawal_rate_pct / 100)

    def fire_targets(self, monthly_expenses: float, current_savings: float = 0.0,
                     monthly_contribution: float = 0.0, current_age: int = 30,
                     part_time_monthly_income: float = 0.0,
                     expected_return_pct: Optional[float] = None) -> List[FireTarget]:
        """
        Targets for the configured variants plus barista and coast FIRE.

        Barista FIRE covers only the expenses not paid by part-time income.
        Coast FIRE is the standard target discounted back from the traditional
        retirement age, i.e. the amount that grows into the standard target
        without further contributions.
        """
        if monthly_expenses < 0 or current_savings < 0 or monthly_contribution < 0 or part_time_monthly_income < 0:
            raise CalculationError("FIRE inputs must not be negative")
        if expected_return_pct is None:
            expected_return_pct = self.assumptions.assumed_return_pct

        annual_expenses = monthly_expenses * MONTHS_PER_YEAR
        variants = [
            (name, annual_expenses * factor, self.fire_number(annual_expenses, factor))
            for name, factor in self.assumptions.fire_variants.items()
        ]

        barista_expenses = max(0.0, annual_expenses - part_time_monthly_income * MONTHS_PER_YEAR)
        variants.append(('barista', barista_expenses, self.fire_number(barista_expenses)))

        years_to_retirement = max(0, self.assumptions.coast_retirement_age - current_age)
        coast_target = self.fire_number(annual_expenses) / (1 + expected_return_pct / 100) ** years_to_retirement
        variants.append(('coast', annual_expenses, coast_target))

        return [
            FireTarget(
                variant=name,
                annual_expenses=expenses,
                target=target,
                years_to_reach=years_to_target(target, current_savings, monthly_contribution, expected_return_pct)
            )
            for name, expenses, target in variants
        ]

    def fire_progress(self, net_worth: float, monthly_expenses: float) -> float:
        """Percentage of the standard FIRE number already saved, capped at 100."""
        if monthly_expenses <= 0:
            raise CalculationError("fire_progress requires positive monthly expenses")
        target = self.fire_number(monthly_expenses * MONTHS_PER_YEAR)
        return min(100.0, max(0.0, net_worth) / target * 100)

    def years_to_independence(self, annual_income: float, annual_expenses: float) -> float:
        rate = savings_rate(annual_income, annual_expenses)
        return years_to_financial_independence(rate, self.assumptions.assumed_return_pct)
