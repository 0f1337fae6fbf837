"""
FuelEU Maritime (EU 2023/1805) reference values and compliance balance.

Compliance balance (CB) for a ship-year:

    energy_in_scope (MJ) = fuel_consumption (t) * 41 000 MJ/t
    CB (t CO2eq)         = (target - actual) * energy_in_scope / 1e6

Positive CB is a surplus, negative CB a deficit.

Reference: EU Regulation 2023/1805 (FuelEU Maritime)
Baseline: 91.16 gCO2eq/MJ (2020 EU MRV reference)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# Regulation constants
# =============================================================================

# GHG intensity reference and reduction targets
REFERENCE_GHG = 91.16  # gCO2eq/MJ (2020 baseline)

REDUCTION_TARGETS = {
    2025: 2.0,
    2030: 6.0,
    2035: 14.5,
    2040: 31.0,
    2045: 62.0,
    2050: 80.0,
}

# 91.16 * (1 - 0.02)
TARGET_INTENSITY_2025 = 89.3368  # gCO2eq/MJ

# Energy in scope per tonne of fuel (MJ/t)
ENERGY_CONVERSION_FACTOR = 41_000


# =============================================================================
# Result Dataclasses
# =============================================================================

@dataclass
class ComplianceBalanceResult:
    """Result of a compliance balance calculation."""
    target_intensity: float  # gCO2eq/MJ
    ghg_intensity: float  # gCO2eq/MJ
    energy_in_scope_mj: float
    cb_gco2eq: float  # tonnes CO2eq, positive=surplus
    status: str  # "surplus" | "deficit" | "balanced"


# =============================================================================
# Calculator
# =============================================================================

def compute_compliance_balance(
    target_intensity: float, actual_intensity: float, fuel_consumption_t: float
) -> float:
    """
    Compliance balance in tonnes CO2eq.

    Args:
        target_intensity: Target GHG intensity (gCO2eq/MJ)
        actual_intensity: Attained GHG intensity (gCO2eq/MJ)
        fuel_consumption_t: Fuel consumed in tonnes

    Returns:
        Signed balance, positive when the ship beats the target
    """
    energy_in_scope = fuel_consumption_t * ENERGY_CONVERSION_FACTOR
    return (target_intensity - actual_intensity) * energy_in_scope / 1_000_000


class FuelEUCalculator:
    """Compliance balance calculator against a fixed target intensity."""

    def __init__(self, target_intensity: float = TARGET_INTENSITY_2025):
        if target_intensity <= 0:
            raise ValueError(f"Target intensity must be positive, got {target_intensity}")
        self.target_intensity = target_intensity

    def calculate(
        self, ghg_intensity: float, fuel_consumption_t: float
    ) -> ComplianceBalanceResult:
        """
        Calculate the compliance balance of a route.

        Args:
            ghg_intensity: Attained GHG intensity (gCO2eq/MJ)
            fuel_consumption_t: Fuel consumption in tonnes

        Returns:
            ComplianceBalanceResult with signed balance
        """
        if fuel_consumption_t < 0:
            raise ValueError(f"Fuel consumption cannot be negative, got {fuel_consumption_t}")

        cb = compute_compliance_balance(
            self.target_intensity, ghg_intensity, fuel_consumption_t
        )
        if cb > 0:
            status = "surplus"
        elif cb < 0:
            status = "deficit"
        else:
            status = "balanced"

        logger.debug(
            "CB %.4f t at %.4f gCO2eq/MJ vs target %.4f",
            cb, ghg_intensity, self.target_intensity,
        )

        return ComplianceBalanceResult(
            target_intensity=self.target_intensity,
            ghg_intensity=ghg_intensity,
            energy_in_scope_mj=fuel_consumption_t * ENERGY_CONVERSION_FACTOR,
            cb_gco2eq=cb,
            status=status,
        )


def ghg_limit(year: int) -> float:
    """GHG intensity limit (gCO2eq/MJ) applicable in ``year``."""
    return round(REFERENCE_GHG * (1 - get_reduction_target(year) / 100), 4)


def get_limits_by_year() -> List[Dict]:
    """Return GHG intensity limits for all target years."""
    return [
        {"year": year, "reduction_pct": pct, "ghg_limit": ghg_limit(year)}
        for year, pct in sorted(REDUCTION_TARGETS.items())
    ]


def get_reduction_target(year: int) -> float:
    """Get the applicable reduction target (%) for a given year."""
    if year < 2025:
        return 0.0

    if year in REDUCTION_TARGETS:
        return REDUCTION_TARGETS[year]

    # Interpolate between defined target years
    target_years = sorted(REDUCTION_TARGETS.keys())

    if year > target_years[-1]:
        return REDUCTION_TARGETS[target_years[-1]]

    prev_year: Optional[int] = None
    for ty in target_years:
        if ty > year:
            prev_pct = REDUCTION_TARGETS[prev_year]
            next_pct = REDUCTION_TARGETS[ty]
            ratio = (year - prev_year) / (ty - prev_year)
            return round(prev_pct + ratio * (next_pct - prev_pct), 2)
        prev_year = ty

    return REDUCTION_TARGETS[target_years[-1]]
