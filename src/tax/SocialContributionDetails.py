from typing import Dict, Optional

from model.TaxResult import SocialContributions
from tax.reference import load_tax_years, year_data


class SocialContributionDetails:
    """Holds statutory social insurance rates and computes employee contributions.

    Pension and unemployment insurance are capped at the pension contribution
    ceiling, health and long-term care at the health ceiling. Contributions are
    always computed from gross income, independently of the income tax.

    Child benefit is also kept here since it is a transfer paid regardless of
    the tax result.
    """

    def __init__(self, ref_path: Optional[str] = None):
        """Initialize by loading the per-year contribution rates.

        Args:
            ref_path: Optional path to the fiscal-year reference file.
        """
        self.data_by_year: Dict[int, dict] = {}
        self.child_benefit_by_year: Dict[int, float] = {}
        for year, data in load_tax_years(ref_path).items():
            self.data_by_year[year] = data.get("socialContributions", {})
            self.child_benefit_by_year[year] = data.get("childBenefitMonthly", 0)

    def get_data_for_year(self, year: int) -> dict:
        """Get the contribution settings for a specific year.

        Args:
            year: The fiscal year to get data for.

        Returns:
            Dictionary with rates, ceilings and the childless care settings.
        """
        return year_data(self.data_by_year, year, "social contribution data")

    def long_term_care_rate(self, number_of_children: int, age: int, year: int) -> float:
        """Return the long-term care rate, raised for childless filers at or above the minimum age."""
        data = self.get_data_for_year(year)
        if number_of_children == 0 and age >= data.get("childlessMinimumAge", 23):
            return data.get("longTermCareChildlessRate", 0)
        return data.get("longTermCareRate", 0)

    def contributions(self, gross_income: float, number_of_children: int, age: int,
                      year: int) -> SocialContributions:
        """Calculate all employee social contributions for a year.

        Args:
            gross_income: The employee's gross annual income.
            number_of_children: Used for the childless long-term care surcharge.
            age: Used for the childless long-term care surcharge.
            year: The fiscal year to calculate for.

        Returns:
            SocialContributions with each category and the total.
        """
        data = self.get_data_for_year(year)
        pension_base = min(gross_income, data.get("pensionCeiling", gross_income))
        health_base = min(gross_income, data.get("healthCeiling", gross_income))

        pension = pension_base * data.get("pensionRate", 0)
        health = health_base * data.get("healthRate", 0)
        unemployment = pension_base * data.get("unemploymentRate", 0)
        long_term_care = health_base * self.long_term_care_rate(number_of_children, age, year)

        return SocialContributions(
            pension=pension,
            health=health,
            unemployment=unemployment,
            long_term_care=long_term_care,
            total=pension + health + unemployment + long_term_care
        )

    def child_benefit(self, number_of_children: int, year: int) -> float:
        """Annual child benefit: children x monthly rate x 12."""
        monthly = year_data(self.child_benefit_by_year, year, "child benefit data")
        return number_of_children * monthly * 12
