"""Builds engine input records from program spec.json sections.

Program files use camelCase keys; unknown keys are ignored so a spec can
carry notes or settings for other modes.
"""

from model.errors import CalculationError
from model.ProjectionData import ProjectionInput
from model.TaxResult import FilingStatus, TaxInput

TAX_KEYS = {
    'grossAnnualIncome': 'gross_annual_income',
    'filingStatus': 'filing_status',
    'numberOfChildren': 'number_of_children',
    'includeChurchTax': 'include_church_tax',
    'age': 'age',
    'residentRegion': 'resident_region',
    'taxClass': 'tax_class',
    'taxYear': 'tax_year',
}

PROJECTION_KEYS = {
    'currentCashSavings': 'current_cash_savings',
    'currentInvestments': 'current_investments',
    'currentDebt': 'current_debt',
    'monthlyExpenses': 'monthly_expenses',
    'monthlyInvestmentContribution': 'monthly_investment_contribution',
    'monthlyDebtPayment': 'monthly_debt_payment',
    'expectedAnnualReturnPct': 'expected_annual_return_pct',
    'annualInflationPct': 'annual_inflation_pct',
    'projectionYears': 'projection_years',
    'startingAge': 'starting_age',
}


def _section(spec: dict, name: str, keys: dict) -> dict:
    section = spec.get(name)
    if section is None:
        raise CalculationError(f"Program spec has no '{name}' section")
    return {keys[k]: v for k, v in section.items() if k in keys}


def parse_filing_status(value) -> FilingStatus:
    try:
        return FilingStatus(value)
    except ValueError:
        raise CalculationError(f"Unknown filing status '{value}'; expected 'single' or 'married'")


def tax_input_from_spec(spec: dict, **overrides) -> TaxInput:
    fields = _section(spec, 'tax', TAX_KEYS)
    fields.update(overrides)
    if 'filing_status' in fields:
        fields['filing_status'] = parse_filing_status(fields['filing_status'])
    if 'gross_annual_income' not in fields:
        raise CalculationError("Program spec has no grossAnnualIncome")
    return TaxInput(**fields)


def projection_input_from_spec(spec: dict, **overrides) -> ProjectionInput:
    fields = _section(spec, 'projection', PROJECTION_KEYS)
    fields.update(overrides)
    return ProjectionInput(**fields)
