"""
Unit tests for plant components
Validates cooling load lines, ice storage schedule and condensate recovery
"""

import pytest

from solrix.components import (
    CondensateParams, CondensateRecovery,
    CoolingPlant, CoolingPlantParams,
    IceStorage, IceStorageParams,
)
from solrix.control import OperatingMode
from solrix.models import EnvironmentModel, TEMP_TABLE

AI = OperatingMode.AI_OPTIMIZED
MANUAL = OperatingMode.MANUAL


class TestCoolingLoadManual:
    """Traditional load line"""

    @pytest.mark.parametrize("temp", [20.0, 26.0, 33.0, 45.0])
    def test_traditional_formula(self, temp):
        plant = CoolingPlant()
        expected = 20 + (temp - 20) * 2.5
        assert plant.cooling_load_kw(temp, False, True, MANUAL) == pytest.approx(expected)

    def test_manual_ignores_peak_and_daylight(self):
        plant = CoolingPlant()
        loads = {plant.cooling_load_kw(40.0, peak, day, MANUAL)
                 for peak in (True, False) for day in (True, False)}
        assert len(loads) == 1

    def test_manual_at_45c(self):
        assert CoolingPlant().cooling_load_kw(45.0, True, True, MANUAL) == pytest.approx(82.5)


class TestCoolingLoadOptimized:
    """AI load line with tinting and ice discharge"""

    def test_no_tint_at_threshold(self):
        """Tinting engages strictly above 32 °C"""
        plant = CoolingPlant()
        assert plant.tint_factor(32.0) == 1.0
        assert plant.tint_factor(32.5) == 0.6

    def test_off_peak_cool_hour(self):
        """28 °C, off peak: 20 + 8 * 1.2 = 29.6"""
        assert CoolingPlant().cooling_load_kw(28.0, False, False, AI) == pytest.approx(29.6)

    def test_tinted_off_peak(self):
        """38 °C, off peak: 20 + 18 * 1.2 * 0.6 = 32.96"""
        assert CoolingPlant().cooling_load_kw(38.0, False, True, AI) == pytest.approx(32.96)

    def test_tinted_peak_with_ice(self):
        """45 °C, peak: 20 + 25 * 1.2 * 0.6 - 15 = 23.0"""
        assert CoolingPlant().cooling_load_kw(45.0, True, True, AI) == pytest.approx(23.0)

    @pytest.mark.parametrize("temp", [32.5, 36.0, 40.0, 45.0])
    def test_ai_below_manual_when_hot_at_peak(self, temp):
        """Tinting plus ice discharge always beats traditional cooling"""
        plant = CoolingPlant()
        ai = plant.cooling_load_kw(temp, True, True, AI)
        manual = plant.cooling_load_kw(temp, True, True, MANUAL)
        assert ai < manual, f"AI load {ai:.1f} kW not below manual {manual:.1f} kW at {temp} °C"

    def test_positive_across_fixed_table(self):
        """The fixed day never drives the AI load negative"""
        plant = CoolingPlant()
        for s in EnvironmentModel().daily_profile():
            assert plant.cooling_load_kw(s.temperature_c, s.is_peak, s.is_daylight, AI) > 0

    def test_negative_load_not_clamped(self):
        """Extreme discharge relative to baseline is passed through"""
        plant = CoolingPlant(params=CoolingPlantParams(ice_discharge=100.0))
        assert plant.cooling_load_kw(21.0, True, True, AI) < 0

    def test_update_reports_savings(self):
        plant = CoolingPlant()
        out = plant.update({'temperature_c': 45.0, 'is_peak': True,
                            'is_daylight': True, 'mode': AI})

        assert out['cooling_load_kw'] == pytest.approx(23.0)
        assert out['traditional_load_kw'] == pytest.approx(82.5)
        assert out['savings_kw'] == pytest.approx(59.5)
        assert out['tint_active'] is True
        assert out['ice_discharge_kw'] == 15.0
        assert plant.get_state() == out

    def test_update_manual_has_no_mitigation(self):
        out = CoolingPlant().update({'temperature_c': 45.0, 'is_peak': True, 'mode': MANUAL})

        assert out['savings_kw'] == 0.0
        assert out['tint_active'] is False
        assert out['ice_discharge_kw'] == 0.0


class TestIceStorage:
    """Charge / hold / discharge schedule"""

    @pytest.mark.parametrize("hour", range(24))
    @pytest.mark.parametrize("mode", list(OperatingMode))
    def test_level_within_bounds(self, hour, mode):
        is_peak = 11 <= hour <= 17
        level = IceStorage().ice_level_pct(hour, is_peak, mode)
        assert 0.0 <= level <= 100.0, f"ice level {level}% out of bounds at hour {hour}"

    @pytest.mark.parametrize("hour", range(24))
    def test_manual_always_empty(self, hour):
        assert IceStorage().ice_level_pct(hour, 11 <= hour <= 17, MANUAL) == 0.0

    @pytest.mark.parametrize("hour", range(6))
    def test_night_charging_ramp(self, hour):
        assert IceStorage().ice_level_pct(hour, False, AI) == hour * 15

    @pytest.mark.parametrize("hour", range(11, 18))
    def test_peak_drawdown(self, hour):
        assert IceStorage().ice_level_pct(hour, True, AI) == 90 - (hour - 11) * 15

    @pytest.mark.parametrize("hour", [6, 7, 8, 9, 10, 18, 19, 20, 21, 22, 23])
    def test_holds_full_outside_windows(self, hour):
        assert IceStorage().ice_level_pct(hour, False, AI) == 90.0

    def test_clamped_when_arithmetic_overshoots(self):
        """Aggressive rates are clipped to 0-100 %"""
        storage = IceStorage(params=IceStorageParams(charge_rate=40.0, discharge_rate=40.0))

        assert storage.ice_level_pct(5, False, AI) == 100.0
        assert storage.ice_level_pct(17, True, AI) == 0.0

    def test_update_reports_phase(self):
        storage = IceStorage()
        assert storage.update({'hour': 2, 'mode': AI})['phase'] == 'charging'
        assert storage.update({'hour': 8, 'mode': AI})['phase'] == 'holding'
        assert storage.update({'hour': 13, 'is_peak': True, 'mode': AI})['phase'] == 'discharging'
        assert storage.update({'hour': 13, 'is_peak': True, 'mode': MANUAL})['phase'] == 'idle'

    def test_reset_clears_state(self):
        storage = IceStorage()
        storage.update({'hour': 3, 'mode': AI})
        storage.reset()
        assert storage.get_state() == {}


class TestCondensateRecovery:
    """Water recovered is proportional to cooling work"""

    @pytest.mark.parametrize("load", [0.0, 23.0, 29.6, 82.5, 61.37, -4.2, -0.05])
    def test_matches_rounded_formula(self, load):
        assert CondensateRecovery().water_recovered_lph(load) == round(load * 0.4, 1)

    def test_one_decimal(self):
        water = CondensateRecovery().water_recovered_lph(33.33)
        assert water == round(water, 1)

    def test_negative_load_passes_through(self):
        assert CondensateRecovery().water_recovered_lph(-10.0) == pytest.approx(-4.0)

    def test_custom_yield(self):
        recovery = CondensateRecovery(params=CondensateParams(yield_per_kw=0.5))
        assert recovery.update({'cooling_load_kw': 80.0})['water_recovered_lph'] == 40.0

    def test_recovery_higher_in_manual(self):
        """Manual runs more cooling, so more condensate at the hottest hour"""
        plant, recovery = CoolingPlant(), CondensateRecovery()
        t = TEMP_TABLE[12]
        manual = recovery.water_recovered_lph(plant.cooling_load_kw(t, True, True, MANUAL))
        ai = recovery.water_recovered_lph(plant.cooling_load_kw(t, True, True, AI))
        assert manual > ai
