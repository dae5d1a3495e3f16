from dataclasses import dataclass
from typing import Dict, List, Optional

from model.errors import CalculationError, ConfigurationError
from model.TaxResult import IncomeTaxResult, TaxZoneAmount
from tax.reference import load_tax_years, year_data

FORMULA_TYPES = ("zero", "quadratic", "linear")


@dataclass(frozen=True)
class TaxZone:
	name: str
	lower: float
	upper: Optional[float]  # None = open-ended top zone
	range_label: str
	rate_label: str
	marginal_rate: float
	formula: dict

	def tax(self, income: float) -> float:
		kind = self.formula["type"]
		if kind == "zero":
			return 0.0
		if kind == "quadratic":
			y = (income - self.lower) / self.formula["scale"]
			return (self.formula["a"] * y + self.formula["b"]) * y + self.formula["c"]
		return self.formula["rate"] * income - self.formula["offset"]


class IncomeTaxDetails:
	def __init__(self, ref_path: Optional[str] = None):
		"""
		ref_path: optional path to a fiscal-year reference file; defaults to
		reference/german-tax-details.json
		"""
		self.zones_by_year: Dict[int, List[TaxZone]] = {}
		self.tax_class_factors_by_year: Dict[int, Dict[int, float]] = {}
		self._load_and_build_zones(ref_path)

	def _load_and_build_zones(self, ref_path: Optional[str]):
		for year, data in load_tax_years(ref_path).items():
			raw_zones = data.get("incomeTax", {}).get("zones", [])
			if not raw_zones:
				raise ConfigurationError(f"No income tax zones configured for year {year}")

			zones = []
			for z in raw_zones:
				formula = z["formula"]
				if formula.get("type") not in FORMULA_TYPES:
					raise ConfigurationError(f"Unknown zone formula type '{formula.get('type')}' in {year} zone '{z['name']}'")
				zones.append(TaxZone(
					name=z["name"],
					lower=z["lower"],
					upper=z["upper"],
					range_label=z.get("rangeLabel", ""),
					rate_label=z.get("rateLabel", ""),
					marginal_rate=z["marginalRate"],
					formula=formula
				))

			# Zones must tile [0, inf) without gaps or overlaps
			if zones[0].lower != 0:
				raise ConfigurationError(f"First income tax zone for {year} must start at 0")
			for i in range(1, len(zones)):
				if zones[i-1].upper is None or zones[i].lower != zones[i-1].upper:
					raise ConfigurationError(f"Income tax zones for {year} are not contiguous at '{zones[i].name}'")
			if zones[-1].upper is not None:
				raise ConfigurationError(f"Last income tax zone for {year} must be open-ended")

			self.zones_by_year[year] = zones
			self.tax_class_factors_by_year[year] = {
				int(k): v for k, v in data.get("taxClassFactors", {}).items()
			}

	@property
	def years(self) -> List[int]:
		return sorted(self.zones_by_year)

	@property
	def latest_year(self) -> int:
		return self.years[-1]

	def zones(self, year: int) -> List[TaxZone]:
		return year_data(self.zones_by_year, year, "income tax zones")

	def allowance(self, year: int) -> float:
		"""Upper bound of the leading zero-rate zone (Grundfreibetrag) for one filer."""
		allowance = 0.0
		for zone in self.zones(year):
			if zone.formula["type"] != "zero":
				break
			allowance = zone.upper
		return allowance

	def tax_class_factor(self, tax_class: Optional[int], year: int) -> float:
		if tax_class is None:
			return 1.0
		factors = year_data(self.tax_class_factors_by_year, year, "tax class factors")
		if tax_class not in factors:
			raise CalculationError(f"Unknown tax class {tax_class}; configured classes for {year}: {sorted(factors)}")
		return factors[tax_class]

	def _zone_for(self, zones: List[TaxZone], income: float) -> TaxZone:
		for zone in zones:
			if zone.upper is None or income <= zone.upper:
				return zone
		raise ConfigurationError("Income exceeds all zone definitions.")

	def _tax_at(self, zones: List[TaxZone], income: float) -> float:
		return self._zone_for(zones, income).tax(income)

	def taxBurden(self, income: float, year: int) -> IncomeTaxResult:
		"""
		Returns the income tax for one filer's income together with the marginal
		rate of the zone holding the last euro and the tax raised inside each zone
		the income passes through.

		The zone amounts are incremental: for every zone reached the amount is
		T(min(income, upper)) - T(lower), so they sum to the total.
		"""
		if income < 0:
			raise CalculationError(f"Income must not be negative, got {income}")
		zones = self.zones(year)

		zone_amounts = []
		cumulative = 0.0
		for index, zone in enumerate(zones):
			if index > 0 and income <= zone.lower:
				break
			end = income if zone.upper is None else min(income, zone.upper)
			tax_to_end = self._tax_at(zones, end)
			zone_amounts.append(TaxZoneAmount(
				zone_name=zone.name,
				range_label=zone.range_label,
				rate_label=zone.rate_label,
				tax_amount_in_zone=tax_to_end - cumulative
			))
			cumulative = tax_to_end

		return IncomeTaxResult(
			total_income_tax=cumulative,
			marginal_rate=self._zone_for(zones, income).marginal_rate,
			zone_amounts=tuple(zone_amounts)
		)
