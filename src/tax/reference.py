import json
import os
from typing import Dict, Optional

from model.errors import ConfigurationError

REFERENCE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference'))
TAX_DETAILS_PATH = os.path.join(REFERENCE_DIR, 'german-tax-details.json')


def load_reference(ref_path: Optional[str] = None) -> dict:
	"""Read the fiscal-year reference file (defaults to reference/german-tax-details.json)."""
	path = ref_path or TAX_DETAILS_PATH
	try:
		with open(path, 'r') as f:
			return json.load(f)
	except FileNotFoundError:
		raise ConfigurationError(f"Reference file not found: {path}")


def load_tax_years(ref_path: Optional[str] = None) -> Dict[int, dict]:
	"""Return the configured fiscal years keyed by year.

	Years must be present and consecutive; nothing is inflated or
	extrapolated beyond the last configured year.
	"""
	data = load_reference(ref_path)
	tax_years = data.get("taxYears", [])
	if not tax_years:
		raise ConfigurationError("Reference file must contain a 'taxYears' array with at least one entry")

	tax_years = sorted(tax_years, key=lambda x: x["year"])

	for i in range(1, len(tax_years)):
		if tax_years[i]["year"] != tax_years[i-1]["year"] + 1:
			raise ConfigurationError(f"Tax years must be sequential. Gap found between {tax_years[i-1]['year']} and {tax_years[i]['year']}")

	return {year_data["year"]: year_data for year_data in tax_years}


def year_data(data_by_year: Dict[int, dict], year: int, what: str) -> dict:
	if year not in data_by_year:
		raise ConfigurationError(f"No {what} available for year {year}")
	return data_by_year[year]
