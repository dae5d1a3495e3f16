"""Planning assumptions shared by the projection and FIRE calculators.

Loaded from reference/planning-assumptions.json so the withdrawal rate, the
assumed market return and the FIRE factors live in exactly one place.
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from model.errors import ConfigurationError

ASSUMPTIONS_PATH = os.path.normpath(
    os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'planning-assumptions.json')
)

# Hard bound on the projection horizon; configuration may only lower it
HORIZON_LIMIT_YEARS = 50


@dataclass(frozen=True)
class PlanningAssumptions:
    safe_withdrawal_rate_pct: float = 4.0
    assumed_return_pct: float = 7.0
    fire_variants: Dict[str, float] = field(default_factory=lambda: {"lean": 0.7, "standard": 1.0, "fat": 2.0})
    coast_retirement_age: int = 65
    scenario_spread_pct: float = 2.0
    max_projection_years: int = HORIZON_LIMIT_YEARS
    milestone_targets: List[float] = field(
        default_factory=lambda: [100000, 250000, 500000, 1000000, 2000000, 5000000]
    )
    asset_returns: Dict[str, float] = field(default_factory=lambda: {"etf": 0.07, "cash": 0.01, "realEstate": 0.04})
    # Annual price inflation per lifestyle category, as fractions
    lifestyle_inflation: Dict[str, float] = field(default_factory=dict)


def validate_assumptions(assumptions: PlanningAssumptions) -> PlanningAssumptions:
    if assumptions.safe_withdrawal_rate_pct <= 0:
        raise ConfigurationError("safeWithdrawalRatePct must be positive")
    if not 1 <= assumptions.max_projection_years <= HORIZON_LIMIT_YEARS:
        raise ConfigurationError(
            f"maxProjectionYears must be between 1 and {HORIZON_LIMIT_YEARS}, got {assumptions.max_projection_years}"
        )
    return assumptions


def load_assumptions(ref_path: Optional[str] = None) -> PlanningAssumptions:
    """Load planning assumptions; keys missing from the file keep their defaults."""
    path = ref_path or ASSUMPTIONS_PATH
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Planning assumptions file not found: {path}")

    defaults = PlanningAssumptions()
    return validate_assumptions(PlanningAssumptions(
        safe_withdrawal_rate_pct=data.get("safeWithdrawalRatePct", defaults.safe_withdrawal_rate_pct),
        assumed_return_pct=data.get("assumedReturnPct", defaults.assumed_return_pct),
        fire_variants=data.get("fireVariants", defaults.fire_variants),
        coast_retirement_age=data.get("coastRetirementAge", defaults.coast_retirement_age),
        scenario_spread_pct=data.get("scenarioSpreadPct", defaults.scenario_spread_pct),
        max_projection_years=data.get("maxProjectionYears", defaults.max_projection_years),
        milestone_targets=data.get("milestoneTargets", defaults.milestone_targets),
        asset_returns=data.get("assetReturns", defaults.asset_returns),
        lifestyle_inflation=data.get("lifestyleInflation", defaults.lifestyle_inflation),
    ))
