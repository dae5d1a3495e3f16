from typing import Dict, Optional

from model.errors import CalculationError
from model.TaxResult import CapitalGainsTaxResult, FilingStatus
from tax.reference import load_tax_years, year_data


class CapitalGainsDetails:
    """Flat capital gains tax (Abgeltungsteuer) with the saver's allowance.

    The flat rate, its solidarity surcharge and the allowance come from one
    configuration block per year so every caller uses the same figures.
    """

    def __init__(self, ref_path: Optional[str] = None):
        self.data_by_year: Dict[int, dict] = {
            year: data.get("capitalGains", {})
            for year, data in load_tax_years(ref_path).items()
        }

    def allowance(self, filing_status: FilingStatus, year: int) -> float:
        data = year_data(self.data_by_year, year, "capital gains data")
        if filing_status == FilingStatus.MARRIED:
            return data.get("allowanceMarried", 0)
        return data.get("allowanceSingle", 0)

    def combined_rate(self, year: int) -> float:
        """Flat rate including its solidarity surcharge (26.375% for 25% + 5.5%)."""
        data = year_data(self.data_by_year, year, "capital gains data")
        flat_rate = data.get("flatRate", 0)
        return flat_rate * (1 + data.get("solidarityRate", 0))

    def tax(self, gains: float, filing_status: FilingStatus, year: int) -> CapitalGainsTaxResult:
        """Calculate the flat tax on realized capital gains.

        Args:
            gains: Realized gains for the year (must not be negative).
            filing_status: Selects the single or joint allowance.
            year: The fiscal year.

        Returns:
            CapitalGainsTaxResult with the allowance used and the tax owed.
        """
        if gains < 0:
            raise CalculationError(f"Capital gains must not be negative, got {gains}")
        data = year_data(self.data_by_year, year, "capital gains data")
        allowance = self.allowance(filing_status, year)
        taxable = max(0.0, gains - allowance)
        base_tax = taxable * data.get("flatRate", 0)
        solidarity = base_tax * data.get("solidarityRate", 0)
        total = base_tax + solidarity
        return CapitalGainsTaxResult(
            gains=gains,
            allowance=allowance,
            taxable_gains=taxable,
            capital_gains_tax=base_tax,
            solidarity_tax=solidarity,
            total_tax=total,
            net_gains=gains - total
        )
