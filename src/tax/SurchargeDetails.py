from typing import Dict, Optional

from model.TaxResult import FilingStatus
from tax.reference import load_tax_years, year_data


class SurchargeDetails:
    """Holds solidarity surcharge and church tax details and computes both.

    Both surcharges are levied on the (tax-class adjusted) income tax, never on
    gross income.
    """

    def __init__(self, ref_path: Optional[str] = None):
        """Initialize by loading the per-year surcharge settings.

        Args:
            ref_path: Optional path to the fiscal-year reference file.
        """
        self.solidarity_by_year: Dict[int, dict] = {}
        self.church_by_year: Dict[int, dict] = {}
        for year, data in load_tax_years(ref_path).items():
            self.solidarity_by_year[year] = data.get("solidarity", {})
            self.church_by_year[year] = data.get("churchTax", {})

    def solidarity(self, income_tax: float, filing_status: FilingStatus, year: int) -> float:
        """Calculate the solidarity surcharge.

        Only the part of the income tax above the filing-status threshold is
        surcharged; income tax at or below the threshold yields zero.

        Args:
            income_tax: The adjusted income tax.
            filing_status: Single or married (selects the threshold).
            year: The fiscal year.

        Returns:
            The surcharge amount.
        """
        data = year_data(self.solidarity_by_year, year, "solidarity surcharge data")
        if filing_status == FilingStatus.MARRIED:
            threshold = data.get("thresholdMarried", 0)
        else:
            threshold = data.get("thresholdSingle", 0)
        if income_tax > threshold:
            return (income_tax - threshold) * data.get("rate", 0)
        return 0.0

    def church_rate(self, region: Optional[str], year: int) -> float:
        """Return the church tax rate for a region (standard rate when unknown)."""
        data = year_data(self.church_by_year, year, "church tax data")
        if region is not None and region.upper() in data.get("reducedRegions", []):
            return data.get("reducedRate", 0)
        return data.get("standardRate", 0)

    def church_tax(self, income_tax: float, region: Optional[str], year: int) -> float:
        """Calculate church tax as a flat share of the adjusted income tax."""
        return max(0.0, income_tax) * self.church_rate(region, year)
