import math
from dataclasses import replace
from typing import Optional

from model.errors import CalculationError
from model.inputs import parse_filing_status
from model.TaxResult import (
    CapitalGainsTaxResult,
    FilingStatus,
    SocialContributions,
    TaxInput,
    TaxResult,
    TaxZoneAmount,
)
from tax.CapitalGainsDetails import CapitalGainsDetails
from tax.IncomeTaxDetails import IncomeTaxDetails
from tax.SocialContributionDetails import SocialContributionDetails
from tax.SurchargeDetails import SurchargeDetails
from tax.reference import load_reference

MONTHS_PER_YEAR = 12


class TakeHomeCalculator:
    """Calculator that computes the yearly tax and take-home breakdown using injected detail providers.

    Pass hydrated instances of `IncomeTaxDetails`, `SurchargeDetails` and
    `SocialContributionDetails` into the constructor. This keeps file I/O in
    the caller (see `from_reference`) and makes the calculation logic easy to
    unit test.

    `child_benefit_in_net_income` is the single switch deciding whether child
    benefit is added to `net_income`. Child benefit is always reported in
    `child_benefit_annual` and never netted into `total_tax`.
    """

    def __init__(self, income_tax: IncomeTaxDetails, surcharges: SurchargeDetails,
                 social: SocialContributionDetails,
                 capital_gains: Optional[CapitalGainsDetails] = None,
                 child_benefit_in_net_income: bool = False):
        self.income_tax = income_tax
        self.surcharges = surcharges
        self.social = social
        self.capital_gains = capital_gains
        self.child_benefit_in_net_income = child_benefit_in_net_income

    @classmethod
    def from_reference(cls, ref_path: Optional[str] = None,
                       child_benefit_in_net_income: Optional[bool] = None) -> 'TakeHomeCalculator':
        """Build a calculator from a fiscal-year reference file.

        When `child_benefit_in_net_income` is None the file's
        `policy.childBenefitInNetIncome` value is used.
        """
        if child_benefit_in_net_income is None:
            policy = load_reference(ref_path).get("policy", {})
            child_benefit_in_net_income = bool(policy.get("childBenefitInNetIncome", False))
        return cls(
            IncomeTaxDetails(ref_path),
            SurchargeDetails(ref_path),
            SocialContributionDetails(ref_path),
            CapitalGainsDetails(ref_path),
            child_benefit_in_net_income=child_benefit_in_net_income
        )

    def _validate(self, tax_input: TaxInput) -> None:
        income = tax_input.gross_annual_income
        if income is None or not math.isfinite(income):
            raise CalculationError(f"Gross annual income must be a finite number, got {income}")
        if income < 0:
            raise CalculationError(f"Gross annual income must not be negative, got {income}")
        children = tax_input.number_of_children
        if isinstance(children, bool) or not isinstance(children, int):
            raise CalculationError(f"Number of children must be a whole number, got {children}")
        if children < 0:
            raise CalculationError(f"Number of children must not be negative, got {children}")

    def calculate(self, tax_input: TaxInput) -> TaxResult:
        self._validate(tax_input)
        filing_status = parse_filing_status(tax_input.filing_status)
        tax_year = tax_input.tax_year if tax_input.tax_year is not None else self.income_tax.latest_year
        gross_income = float(tax_input.gross_annual_income)

        # Married couples are taxed by splitting: half the income through the
        # zones, then the tax doubled
        splitting = 2 if filing_status == FilingStatus.MARRIED else 1
        zone_result = self.income_tax.taxBurden(gross_income / splitting, tax_year)
        factor = self.income_tax.tax_class_factor(tax_input.tax_class, tax_year)

        # The tax-class factor applies to the zone output; both surcharges are
        # computed on the adjusted figure
        income_tax = zone_result.total_income_tax * splitting * factor
        zone_breakdown = tuple(
            replace(z, tax_amount_in_zone=z.tax_amount_in_zone * splitting * factor)
            for z in zone_result.zone_amounts
        )

        solidarity_tax = self.surcharges.solidarity(income_tax, filing_status, tax_year)
        if tax_input.include_church_tax:
            church_tax = self.surcharges.church_tax(income_tax, tax_input.resident_region, tax_year)
        else:
            church_tax = 0.0
        total_tax = income_tax + solidarity_tax + church_tax

        social = self.social.contributions(gross_income, tax_input.number_of_children, tax_input.age, tax_year)
        child_benefit = self.social.child_benefit(tax_input.number_of_children, tax_year)

        net_income = gross_income - total_tax - social.total
        if self.child_benefit_in_net_income:
            net_income += child_benefit

        effective_tax_rate = total_tax / gross_income * 100 if gross_income > 0 else 0.0

        return TaxResult(
            tax_year=tax_year,
            gross_income=gross_income,
            income_tax=income_tax,
            solidarity_tax=solidarity_tax,
            church_tax=church_tax,
            total_tax=total_tax,
            net_income=net_income,
            effective_tax_rate=effective_tax_rate,
            marginal_tax_rate=zone_result.marginal_rate * 100,
            tax_free_allowance=self.income_tax.allowance(tax_year) * splitting,
            child_benefit_annual=child_benefit,
            social_contributions=social,
            tax_zone_breakdown=zone_breakdown,
            child_benefit_in_net_income=self.child_benefit_in_net_income
        )

    def capital_gains_tax(self, gains: float, filing_status=FilingStatus.SINGLE,
                          tax_year: Optional[int] = None) -> CapitalGainsTaxResult:
        if self.capital_gains is None:
            raise CalculationError("No capital gains details configured for this calculator")
        tax_year = tax_year if tax_year is not None else self.income_tax.latest_year
        return self.capital_gains.tax(gains, parse_filing_status(filing_status), tax_year)


def monthly_breakdown(annual: TaxResult) -> TaxResult:
    """Return the monthly view of an annual result.

    Every monetary field is divided by 12; rates are unchanged. The zones are
    not re-evaluated on a monthly income.
    """
    def per_month(value: float) -> float:
        return value / MONTHS_PER_YEAR

    social = annual.social_contributions
    return replace(
        annual,
        gross_income=per_month(annual.gross_income),
        income_tax=per_month(annual.income_tax),
        solidarity_tax=per_month(annual.solidarity_tax),
        church_tax=per_month(annual.church_tax),
        total_tax=per_month(annual.total_tax),
        net_income=per_month(annual.net_income),
        tax_free_allowance=per_month(annual.tax_free_allowance),
        child_benefit_annual=per_month(annual.child_benefit_annual),
        social_contributions=SocialContributions(
            pension=per_month(social.pension),
            health=per_month(social.health),
            unemployment=per_month(social.unemployment),
            long_term_care=per_month(social.long_term_care),
            total=per_month(social.total)
        ),
        tax_zone_breakdown=tuple(
            TaxZoneAmount(z.zone_name, z.range_label, z.rate_label, per_month(z.tax_amount_in_zone))
            for z in annual.tax_zone_breakdown
        )
    )


def calculate_tax(tax_input: TaxInput, ref_path: Optional[str] = None) -> TaxResult:
    """Convenience wrapper: build a calculator from reference data and run it once."""
    return TakeHomeCalculator.from_reference(ref_path).calculate(tax_input)
