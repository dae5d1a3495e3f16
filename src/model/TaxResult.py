"""Value records for the income tax calculation.

A `TaxResult` is built fresh on every call to
`TakeHomeCalculator.calculate` and is never mutated afterwards; the
monthly view is a new record produced by `monthly_breakdown`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"


@dataclass(frozen=True)
class TaxInput:
    gross_annual_income: float
    filing_status: FilingStatus = FilingStatus.SINGLE
    number_of_children: int = 0
    include_church_tax: bool = False
    age: int = 30
    resident_region: Optional[str] = None  # two-letter state code, e.g. "BY"
    tax_class: Optional[int] = None  # Steuerklasse 1-6
    tax_year: Optional[int] = None  # None = latest configured fiscal year


@dataclass(frozen=True)
class SocialContributions:
    pension: float = 0.0
    health: float = 0.0
    unemployment: float = 0.0
    long_term_care: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class TaxZoneAmount:
    """Income tax raised inside a single zone of the progressive curve."""
    zone_name: str
    range_label: str
    rate_label: str
    tax_amount_in_zone: float


@dataclass(frozen=True)
class TaxResult:
    tax_year: int
    gross_income: float
    income_tax: float
    solidarity_tax: float
    church_tax: float
    total_tax: float
    net_income: float
    effective_tax_rate: float  # percent
    marginal_tax_rate: float  # percent
    tax_free_allowance: float
    child_benefit_annual: float
    social_contributions: SocialContributions
    tax_zone_breakdown: Tuple[TaxZoneAmount, ...]
    child_benefit_in_net_income: bool = False


@dataclass(frozen=True)
class CapitalGainsTaxResult:
    gains: float
    allowance: float
    taxable_gains: float
    capital_gains_tax: float
    solidarity_tax: float
    total_tax: float
    net_gains: float


@dataclass(frozen=True)
class IncomeTaxResult:
    """Raw output of the zone evaluation, before any tax-class adjustment."""
    total_income_tax: float
    marginal_rate: float  # fraction, e.g. 0.42
    zone_amounts: Tuple[TaxZoneAmount, ...] = ()
