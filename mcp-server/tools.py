"""Finance Engine Tools for MCP Server.

This module provides the tool implementations that wrap the tax, projection
and closed-form calculators and expose their results through MCP.
"""

import os
import sys
import json
from dataclasses import asdict
from functools import wraps
from typing import Any, Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from model.errors import EngineError
from model.inputs import parse_filing_status, projection_input_from_spec, tax_input_from_spec
from model.ProjectionData import ProjectionInput
from model.TaxResult import TaxInput
from calc.assumptions import load_assumptions
from calc.take_home import TakeHomeCalculator, monthly_breakdown
from calc.projection_calculator import WealthProjectionCalculator
from calc.fire_calculator import FireCalculator
from calc import closed_form


def _rounded(value: Any) -> Any:
    """Round every float in a nested result to cents."""
    if isinstance(value, float):
        return round(value, 2)
    if isinstance(value, dict):
        return {k: _rounded(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_rounded(v) for v in value]
    return value


def engine_tool(method):
    """Turn engine errors into an error payload and round the result."""
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return _rounded(method(*args, **kwargs))
        except EngineError as e:
            return {"error": str(e)}
    return wrapper


class FinanceEngineTools:
    """Tools that wrap the finance engine calculators for MCP access.

    Programs under input-parameters/ supply default inputs; explicit tool
    arguments override the program's values.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None):
        """Initialize calculators and discover programs.

        Args:
            base_path: Path to the repository root
            default_program: Program used when a tool call names none
        """
        self.base_path = base_path
        self.default_program = default_program
        reference_dir = os.path.join(base_path, 'reference')
        self.tax_calculator = TakeHomeCalculator.from_reference(
            os.path.join(reference_dir, 'german-tax-details.json')
        )
        self.assumptions = load_assumptions(os.path.join(reference_dir, 'planning-assumptions.json'))
        self.projection_calculator = WealthProjectionCalculator(self.assumptions)
        self.fire_calculator = FireCalculator(self.assumptions)
        self.programs: Dict[str, dict] = {}
        self._discover_programs()

    def _discover_programs(self):
        """Load every input-parameters/<name>/spec.json."""
        self.programs = {}
        input_params_path = os.path.join(self.base_path, 'input-parameters')
        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            spec_path = os.path.join(input_params_path, name, 'spec.json')
            if not os.path.exists(spec_path):
                continue
            try:
                with open(spec_path, 'r') as f:
                    self.programs[name] = json.load(f)
            except json.JSONDecodeError as e:
                print(f"Warning: Failed to load program '{name}': {e}", file=sys.stderr)

        if self.default_program is None and self.programs:
            self.default_program = next(iter(self.programs))

    def _get_program(self, program: Optional[str]) -> Optional[dict]:
        program_name = program or self.default_program
        if program_name is None:
            return None
        if program_name not in self.programs:
            raise EngineError(
                f"Program '{program_name}' not found. Available programs: {list(self.programs.keys())}"
            )
        return self.programs[program_name]

    def list_programs(self) -> dict:
        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "tax_years": self.tax_calculator.income_tax.years,
        }

    def reload_programs(self) -> dict:
        old_programs = set(self.programs.keys())
        self._discover_programs()
        new_programs = set(self.programs.keys())
        return {
            "status": "reloaded",
            "programs": sorted(new_programs),
            "added": sorted(new_programs - old_programs),
            "removed": sorted(old_programs - new_programs),
        }

    def _tax_input(self, arguments: dict, program: Optional[str]) -> TaxInput:
        """Program tax section overlaid with the explicit arguments."""
        overrides = {k: v for k, v in arguments.items() if v is not None}
        spec = self._get_program(program)
        if spec is not None and 'tax' in spec:
            return tax_input_from_spec(spec, **overrides)
        if 'gross_annual_income' not in overrides:
            raise EngineError("gross_annual_income is required when no program is loaded")
        if 'filing_status' in overrides:
            overrides['filing_status'] = parse_filing_status(overrides['filing_status'])
        return TaxInput(**overrides)

    def _projection_input(self, arguments: dict, program: Optional[str]) -> ProjectionInput:
        overrides = {k: v for k, v in arguments.items() if v is not None}
        spec = self._get_program(program)
        if spec is not None and 'projection' in spec:
            return projection_input_from_spec(spec, **overrides)
        return ProjectionInput(**overrides)

    @engine_tool
    def calculate_tax(self, program: Optional[str] = None, monthly: bool = False, **arguments) -> dict:
        """Annual (or monthly) tax and take-home breakdown."""
        result = self.tax_calculator.calculate(self._tax_input(arguments, program))
        if monthly:
            result = monthly_breakdown(result)
        return asdict(result)

    @engine_tool
    def capital_gains_tax(self, gains: float, filing_status: str = 'single',
                          tax_year: Optional[int] = None) -> dict:
        return asdict(self.tax_calculator.capital_gains_tax(gains, filing_status, tax_year))

    @engine_tool
    def project_wealth(self, program: Optional[str] = None, include_snapshots: bool = True, **arguments) -> dict:
        """Year-by-year projection with summary."""
        snapshots = self.projection_calculator.project(self._projection_input(arguments, program))
        result = {"summary": asdict(self.projection_calculator.summarize(snapshots))}
        if include_snapshots:
            result["snapshots"] = [asdict(s) for s in snapshots]
        return result

    @engine_tool
    def resolve_milestones(self, program: Optional[str] = None,
                           targets: Optional[List[float]] = None, **arguments) -> dict:
        snapshots = self.projection_calculator.project(self._projection_input(arguments, program))
        milestones = self.projection_calculator.resolve_milestones(snapshots, targets)
        return {
            "milestones": [
                {"target": m.target, "label": m.label, "year": m.year, "age": m.age, "reached": m.reached}
                for m in milestones
            ]
        }

    @engine_tool
    def project_scenarios(self, program: Optional[str] = None,
                          spread_pct: Optional[float] = None, **arguments) -> dict:
        scenarios = self.projection_calculator.project_scenarios(
            self._projection_input(arguments, program), spread_pct
        )
        return {
            name: asdict(self.projection_calculator.summarize(snapshots))
            for name, snapshots in scenarios.items()
        }

    @engine_tool
    def future_value(self, principal: float, monthly_contribution: float,
                     annual_rate_pct: float, years: float) -> dict:
        value = closed_form.future_value(principal, monthly_contribution, annual_rate_pct, years)
        contributed = principal + monthly_contribution * 12 * years
        return {
            "future_value": value,
            "total_contributed": contributed,
            "total_growth": value - contributed,
        }

    @engine_tool
    def required_monthly_contribution(self, target: float, principal: float,
                                      annual_rate_pct: float, years: float) -> dict:
        return {
            "monthly_contribution": closed_form.required_monthly_contribution(
                target, principal, annual_rate_pct, years
            )
        }

    @engine_tool
    def years_to_double(self, annual_rate_pct: float) -> dict:
        return {"years": closed_form.years_to_double(annual_rate_pct)}

    @engine_tool
    def savings_rate(self, annual_income: float, annual_expenses: float) -> dict:
        rate = closed_form.savings_rate(annual_income, annual_expenses)
        result = {"savings_rate_pct": rate}
        if 0 < rate < 100:
            result["years_to_financial_independence"] = closed_form.years_to_financial_independence(
                rate, self.assumptions.assumed_return_pct
            )
        return result

    @engine_tool
    def debt_payoff(self, debt: float, annual_rate_pct: float, monthly_payment: float) -> dict:
        return asdict(closed_form.debt_payoff(debt, annual_rate_pct, monthly_payment))

    @engine_tool
    def years_to_target(self, target: float, principal: float, monthly_contribution: float,
                        annual_rate_pct: Optional[float] = None) -> dict:
        if annual_rate_pct is None:
            annual_rate_pct = self.assumptions.assumed_return_pct
        return {
            "years": closed_form.years_to_target(target, principal, monthly_contribution, annual_rate_pct)
        }

    @engine_tool
    def blended_return(self, allocation: Dict[str, float]) -> dict:
        return {"annual_return_pct": closed_form.blended_return(allocation, self.assumptions.asset_returns)}

    @engine_tool
    def lifestyle_goal(self, current_cost: float, years: float, category: Optional[str] = None,
                       inflation_rate_pct: Optional[float] = None) -> dict:
        """Future price of a goal and the monthly saving that covers its increase."""
        categories = self.assumptions.lifestyle_inflation
        if inflation_rate_pct is None:
            if category is None:
                raise EngineError("Either category or inflation_rate_pct is required")
            if category not in categories:
                raise EngineError(f"Unknown category '{category}'. Available categories: {sorted(categories)}")
            inflation_rate_pct = categories[category] * 100
        return {
            "inflation_rate_pct": inflation_rate_pct,
            "future_cost": closed_form.future_cost(current_cost, inflation_rate_pct, years),
            "monthly_savings": closed_form.monthly_savings_for_goal(current_cost, inflation_rate_pct, years),
        }

    @engine_tool
    def fire_targets(self, monthly_expenses: float, current_savings: float = 0.0,
                     monthly_contribution: float = 0.0, current_age: int = 30,
                     part_time_monthly_income: float = 0.0,
                     expected_return_pct: Optional[float] = None) -> dict:
        targets = self.fire_calculator.fire_targets(
            monthly_expenses,
            current_savings=current_savings,
            monthly_contribution=monthly_contribution,
            current_age=current_age,
            part_time_monthly_income=part_time_monthly_income,
            expected_return_pct=expected_return_pct
        )
        return {
            "targets": [asdict(t) for t in targets],
            "progress_pct": self.fire_calculator.fire_progress(current_savings, monthly_expenses)
            if monthly_expenses > 0 else 0.0
        }
