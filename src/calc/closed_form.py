"""Closed-form savings, growth and debt formulas.

All rates are whole percentages (7 means 7%) and are converted to fractions
once per function. Contributions are monthly amounts paid in annually at the
end of each year, which matches the year-by-year projection.
"""

import math
from typing import Mapping, Optional

from calc.assumptions import PlanningAssumptions
from model.errors import CalculationError
from model.ProjectionData import DebtPayoff

MONTHS_PER_YEAR = 12


def _require_finite(**values) -> None:
    for name, value in values.items():
        if value is None or not math.isfinite(value):
            raise CalculationError(f"{name} must be a finite number, got {value}")


def _rate(annual_rate_pct: float) -> float:
    r = annual_rate_pct / 100
    if r <= -1:
        raise CalculationError(f"annual_rate_pct must be greater than -100, got {annual_rate_pct}")
    return r


def future_value(principal: float, monthly_contribution: float, annual_rate_pct: float, years: float) -> float:
    """
    Value after `years` of a principal plus a steady monthly contribution.

    principal*(1+r)^n + monthly*12*((1+r)^n - 1)/r, or principal + monthly*12*n at a zero rate.
    """
    _require_finite(principal=principal, monthly_contribution=monthly_contribution,
                    annual_rate_pct=annual_rate_pct, years=years)
    if years < 0:
        raise CalculationError(f"years must not be negative, got {years}")

    r = _rate(annual_rate_pct)
    annual_contribution = monthly_contribution * MONTHS_PER_YEAR
    if r == 0:
        return principal + annual_contribution * years

    growth = (1 + r) ** years
    return principal * growth + annual_contribution * (growth - 1) / r


def required_monthly_contribution(target: float, principal: float, annual_rate_pct: float, years: float) -> float:
    """
    Monthly contribution needed to grow `principal` to `target` in `years`.

    Returns 0 when the principal alone already gets there.
    """
    _require_finite(target=target, principal=principal, annual_rate_pct=annual_rate_pct, years=years)
    if years <= 0:
        raise CalculationError(f"years must be positive, got {years}")

    r = _rate(annual_rate_pct)
    if r == 0:
        annual = (target - principal) / years
    else:
        growth = (1 + r) ** years
        annual = (target - principal * growth) * r / (growth - 1)

    return max(0.0, annual / MONTHS_PER_YEAR)


def years_to_double(annual_rate_pct: float) -> float:
    """Rule of 72."""
    _require_finite(annual_rate_pct=annual_rate_pct)
    if annual_rate_pct <= 0:
        raise CalculationError("years_to_double requires a positive rate")
    return 72 / annual_rate_pct


def savings_rate(annual_income: float, annual_expenses: float) -> float:
    """Share of income not spent, in percent. Negative when spending exceeds income."""
    _require_finite(annual_income=annual_income, annual_expenses=annual_expenses)
    if annual_income <= 0:
        raise CalculationError("savings_rate requires a positive income")
    return (annual_income - annual_expenses) / annual_income * 100


def years_to_financial_independence(savings_rate_pct: float, assumed_return_pct: float) -> float:
    """
    Years until savings reach 25x annual expenses when starting from zero.

    log(1/(1-s)) / log(1+r)
    """
    _require_finite(savings_rate_pct=savings_rate_pct, assumed_return_pct=assumed_return_pct)
    if savings_rate_pct <= 0 or savings_rate_pct >= 100:
        raise CalculationError(f"savings rate must be in (0, 100), got {savings_rate_pct}")
    if assumed_return_pct <= 0:
        raise CalculationError("years_to_financial_independence requires a positive return")

    s = savings_rate_pct / 100
    r = assumed_return_pct / 100
    return math.log(1 / (1 - s)) / math.log(1 + r)


def debt_payoff(debt: float, annual_rate_pct: float, monthly_payment: float) -> DebtPayoff:
    """
    Months needed to amortize `debt` with a fixed monthly payment.

    The result is flagged `never` when the payment does not exceed the
    monthly interest on the starting balance.
    """
    _require_finite(debt=debt, annual_rate_pct=annual_rate_pct, monthly_payment=monthly_payment)
    if debt < 0 or monthly_payment < 0:
        raise CalculationError("debt and monthly_payment must not be negative")
    if annual_rate_pct < 0:
        raise CalculationError("annual_rate_pct must not be negative")

    if debt == 0:
        return DebtPayoff(months=0.0, never=False, total_paid=0.0, total_interest=0.0)

    monthly_rate = annual_rate_pct / 100 / MONTHS_PER_YEAR
    if monthly_payment <= debt * monthly_rate or monthly_payment == 0:
        return DebtPayoff(months=None, never=True, total_paid=None, total_interest=None)

    if monthly_rate == 0:
        months = debt / monthly_payment
    else:
        months = math.log(monthly_payment / (monthly_payment - debt * monthly_rate)) / math.log(1 + monthly_rate)

    total_paid = monthly_payment * months
    return DebtPayoff(months=months, never=False, total_paid=total_paid, total_interest=total_paid - debt)


def years_to_target(target: float, principal: float, monthly_contribution: float,
                    annual_rate_pct: float) -> Optional[int]:
    """
    Whole years until `future_value` first reaches `target`.

    Returns 0 when the principal already covers the target and None when the
    target is never reached.
    """
    _require_finite(target=target, principal=principal, monthly_contribution=monthly_contribution,
                    annual_rate_pct=annual_rate_pct)
    if principal >= target:
        return 0

    r = _rate(annual_rate_pct)
    annual_contribution = monthly_contribution * MONTHS_PER_YEAR
    if r == 0:
        if annual_contribution <= 0:
            return None
        years = (target - principal) / annual_contribution
    else:
        # (1+r)^n * (principal + c/r) = target + c/r
        steady = annual_contribution / r
        start, end = principal + steady, target + steady
        if start == 0 or end / start <= 0:
            return None
        years = math.log(end / start) / math.log(1 + r)

    if not math.isfinite(years) or years < 0:
        return None
    return math.ceil(years - 1e-9)


def blended_return(allocation: Mapping[str, float], asset_returns: Optional[Mapping[str, float]] = None) -> float:
    """
    Weighted annual return of a portfolio, in percent.

    Args:
        allocation: Asset class -> share of the portfolio (fractions or percentages)
        asset_returns: Asset class -> annual return as a fraction
    """
    if asset_returns is None:
        asset_returns = PlanningAssumptions().asset_returns

    total_weight = sum(allocation.values())
    if total_weight <= 0:
        raise CalculationError("allocation must contain a positive weight")

    blended = 0.0
    for asset, weight in allocation.items():
        if weight < 0:
            raise CalculationError(f"allocation for {asset} must not be negative")
        if asset not in asset_returns:
            raise CalculationError(f"No return configured for asset class '{asset}'")
        blended += weight / total_weight * asset_returns[asset]
    return blended * 100



def future_cost(current_cost: float, annual_inflation_pct: float, years: float) -> float:
    """Price of something costing `current_cost` today after `years` of inflation."""
    _require_finite(current_cost=current_cost, annual_inflation_pct=annual_inflation_pct, years=years)
    if current_cost < 0:
        raise CalculationError(f"current_cost must not be negative, got {current_cost}")
    if years <= 0:
        raise CalculationError(f"years must be positive, got {years}")
    return current_cost * (1 + _rate(annual_inflation_pct)) ** years


def monthly_savings_for_goal(current_cost: float, annual_inflation_pct: float, years: float) -> float:
    """
    Monthly amount to put aside to cover the price increase of a goal.

    (future_cost - current_cost) / (years * 12); the current cost itself is
    assumed to be saved already. Never negative.
    """
    increase = future_cost(current_cost, annual_inflation_pct, years) - current_cost
    return max(0.0, increase / (years * MONTHS_PER_YEAR))
