"""Tests for FuelEU Maritime compliance balance calculations."""

import pytest

from src.compliance.fueleu import (
    ENERGY_CONVERSION_FACTOR,
    FuelEUCalculator,
    REDUCTION_TARGETS,
    REFERENCE_GHG,
    TARGET_INTENSITY_2025,
    compute_compliance_balance,
    get_limits_by_year,
    get_reduction_target,
    ghg_limit,
)


@pytest.fixture
def calc():
    return FuelEUCalculator()


# =============================================================================
# Compliance Balance
# =============================================================================

class TestComplianceBalance:
    def test_target_2025(self):
        """2% below the 91.16 reference."""
        assert TARGET_INTENSITY_2025 == pytest.approx(REFERENCE_GHG * 0.98)

    def test_energy_in_scope(self, calc):
        result = calc.calculate(90.0, 5000)
        assert result.energy_in_scope_mj == 5000 * ENERGY_CONVERSION_FACTOR

    def test_hfo_route_deficit(self, calc):
        """91.0 gCO2eq/MJ over 5000 t: (89.3368 - 91) * 205e6 / 1e6."""
        result = calc.calculate(91.0, 5000)
        assert result.cb_gco2eq == pytest.approx(-340.956, abs=1e-6)
        assert result.status == "deficit"

    def test_lng_route_surplus(self, calc):
        result = calc.calculate(88.0, 4800)
        assert result.cb_gco2eq == pytest.approx(263.08224, abs=1e-6)
        assert result.status == "surplus"

    def test_on_target_balanced(self, calc):
        result = calc.calculate(TARGET_INTENSITY_2025, 1000)
        assert result.cb_gco2eq == 0
        assert result.status == "balanced"

    def test_zero_fuel(self, calc):
        assert calc.calculate(95.0, 0).cb_gco2eq == 0

    def test_negative_fuel_rejected(self, calc):
        with pytest.raises(ValueError):
            calc.calculate(90.0, -1)

    def test_custom_target(self):
        result = FuelEUCalculator(target_intensity=85.0).calculate(88.0, 1000)
        assert result.target_intensity == 85.0
        assert result.cb_gco2eq == pytest.approx(-123.0)

    def test_non_positive_target_rejected(self):
        with pytest.raises(ValueError):
            FuelEUCalculator(target_intensity=0)

    def test_function_matches_calculator(self, calc):
        assert compute_compliance_balance(TARGET_INTENSITY_2025, 93.5, 5100) == pytest.approx(
            calc.calculate(93.5, 5100).cb_gco2eq
        )


# =============================================================================
# Limits
# =============================================================================

class TestLimits:
    def test_limits_count(self):
        assert len(get_limits_by_year()) == len(REDUCTION_TARGETS)

    def test_limits_2025(self):
        lim = get_limits_by_year()[0]
        assert lim["year"] == 2025
        assert lim["reduction_pct"] == 2.0
        assert lim["ghg_limit"] == pytest.approx(89.3368)

    def test_limits_2050(self):
        lim = get_limits_by_year()[-1]
        assert lim["year"] == 2050
        assert lim["ghg_limit"] == pytest.approx(REFERENCE_GHG * 0.2, abs=1e-4)

    def test_limits_monotonically_decreasing(self):
        limits = [lim["ghg_limit"] for lim in get_limits_by_year()]
        assert limits == sorted(limits, reverse=True)

    def test_reduction_target_interpolation(self):
        assert get_reduction_target(2027) == pytest.approx(3.6)

    def test_exact_target_year(self):
        assert get_reduction_target(2030) == 6.0

    def test_before_2025(self):
        assert get_reduction_target(2024) == 0.0
        assert ghg_limit(2024) == REFERENCE_GHG

    def test_after_2050(self):
        assert get_reduction_target(2060) == 80.0
