"""
Integration tests - full snapshots across the day in both modes
"""

import math

import pytest

from solrix.config import SimulationConfig
from solrix.control import (
    MANUAL_MESSAGE, NIGHT_MESSAGE, PEAK_HEAT_MESSAGE, SOLAR_MESSAGE, OperatingMode,
)
from solrix.models import EnvironmentModel
from solrix.simulation import SimulationController, compute_snapshot

AI = OperatingMode.AI_OPTIMIZED
MANUAL = OperatingMode.MANUAL


class TestScenarios:
    """Reference hours checked end to end"""

    def test_noon_ai_optimized(self):
        """12:00 AI: inside the peak window, ice drawn down one step, peak-heat narrative"""
        env = EnvironmentModel().resolve(12)
        snap = compute_snapshot(12, AI)

        assert env.is_peak and env.is_daylight
        assert snap.temperature_c == 44
        assert snap.ice_level_pct == 75.0
        assert snap.analysis_text == PEAK_HEAT_MESSAGE
        assert snap.cooling_load_kw == pytest.approx(22.3)
        assert snap.solar_kw == pytest.approx(50.0)
        assert snap.water_recovered_lph == pytest.approx(8.9)
        assert snap.windows_tinted

    def test_night_ai_optimized(self):
        """02:00 AI: coolest hour, ice charging, no solar"""
        env = EnvironmentModel().resolve(2)
        snap = compute_snapshot(2, AI)

        assert not env.is_daylight and not env.is_peak
        assert snap.temperature_c == 26
        assert snap.ice_level_pct == 30.0
        assert snap.solar_kw == 0.0
        assert snap.analysis_text == NIGHT_MESSAGE
        assert not snap.windows_tinted

    def test_noon_manual(self):
        """12:00 manual: no ice, traditional load, wasteful narrative"""
        snap = compute_snapshot(12, MANUAL)

        assert snap.ice_level_pct == 0.0
        assert snap.cooling_load_kw == pytest.approx(80.0)
        assert snap.water_recovered_lph == pytest.approx(32.0)
        assert snap.analysis_text == MANUAL_MESSAGE
        assert not snap.windows_tinted

    def test_hottest_hour_ai_optimized(self):
        """11:00 AI: table maximum, first peak hour, ice still full before drawdown"""
        snap = compute_snapshot(11, AI)

        assert snap.temperature_c == 45
        assert snap.temperature_c == max(EnvironmentModel().temp_table)
        assert snap.ice_level_pct == 90.0
        assert snap.cooling_load_kw == pytest.approx(23.0)
        assert snap.water_recovered_lph == pytest.approx(9.2)
        assert snap.analysis_text == SOLAR_MESSAGE
        assert snap.windows_tinted

    def test_hottest_hour_manual(self):
        """11:00 manual: traditional load at the table maximum"""
        snap = compute_snapshot(11, MANUAL)

        assert snap.temperature_c == 45
        assert snap.cooling_load_kw == pytest.approx(82.5)
        assert snap.water_recovered_lph == pytest.approx(33.0)
        assert snap.ice_level_pct == 0.0

    @pytest.mark.parametrize("hour", range(24))
    def test_manual_message_regardless_of_hour(self, hour):
        assert compute_snapshot(hour, MANUAL).analysis_text == MANUAL_MESSAGE


class TestSnapshotInvariants:

    @pytest.mark.parametrize("hour", range(24))
    @pytest.mark.parametrize("mode", list(OperatingMode))
    def test_fields_finite_and_bounded(self, hour, mode):
        snap = compute_snapshot(hour, mode)

        for name in ('temperature_c', 'cooling_load_kw', 'ice_level_pct',
                     'solar_kw', 'water_recovered_lph'):
            value = getattr(snap, name)
            assert math.isfinite(value), f"{name}={value} not finite at hour {hour}"
        assert 0.0 <= snap.ice_level_pct <= 100.0
        assert snap.solar_kw >= 0.0

    @pytest.mark.parametrize("hour", range(24))
    def test_ai_never_uses_more_cooling(self, hour):
        assert compute_snapshot(hour, AI).cooling_load_kw <= compute_snapshot(hour, MANUAL).cooling_load_kw

    def test_snapshot_is_frozen(self):
        snap = compute_snapshot(0, AI)
        with pytest.raises(AttributeError):
            snap.cooling_load_kw = 0.0

    def test_recompute_is_fresh(self):
        """Same inputs give equal but independent snapshots"""
        a = compute_snapshot(9, AI)
        b = compute_snapshot(9, AI)
        assert a == b and a is not b

    def test_as_dict(self):
        d = compute_snapshot(12, MANUAL).as_dict()
        assert d['mode'] == "MANUAL"
        assert d['hour'] == 12
        assert set(d) >= {'temperature_c', 'cooling_load_kw', 'ice_level_pct',
                          'solar_kw', 'water_recovered_lph', 'analysis_text'}

    def test_values_reported_to_one_decimal(self):
        for hour in range(24):
            snap = compute_snapshot(hour, AI)
            assert snap.cooling_load_kw == round(snap.cooling_load_kw, 1)
            assert snap.solar_kw == round(snap.solar_kw, 1)


class TestFullDayRun:
    """Controller driven through whole days"""

    def test_one_day_history(self):
        ctrl = SimulationController()
        for _ in range(24):
            ctrl.tick()

        labels = [s.time_label for s in ctrl.history]
        assert labels == [f"{h}:00" for h in list(range(9, 24)) + [0]]
        assert ctrl.hour == 0

    def test_history_matches_snapshots(self):
        ctrl = SimulationController()
        snaps = [ctrl.tick() for _ in range(20)]

        samples = ctrl.history.samples()
        assert len(samples) == 16
        for sample, snap in zip(samples, snaps[4:]):
            assert sample.time_label == snap.time_label
            assert sample.load_kw == snap.cooling_load_kw
            assert sample.solar_kw == snap.solar_kw

    def test_mode_toggle_mid_run(self):
        """Toggle at a fixed hour changes load and ice on the next read, before any tick"""
        ctrl = SimulationController(SimulationConfig(start_hour=10))
        ctrl.tick()
        ai = ctrl.snapshot
        samples_before = ctrl.history.samples()

        manual = ctrl.set_mode(MANUAL)

        assert ctrl.hour == ai.hour == 11
        assert manual.cooling_load_kw != ai.cooling_load_kw
        assert manual.ice_level_pct != ai.ice_level_pct
        assert ctrl.history.samples() == samples_before

        next_snap = ctrl.tick()
        assert next_snap.mode is MANUAL
        assert ctrl.history.latest.load_kw == next_snap.cooling_load_kw

    def test_ai_daily_cooling_lower(self):
        totals = {}
        for mode in OperatingMode:
            ctrl = SimulationController(SimulationConfig(start_mode=mode))
            totals[mode] = sum(ctrl.tick().cooling_load_kw for _ in range(24))
        assert totals[AI] < totals[MANUAL]

    def test_custom_parameters_flow_through(self):
        cfg = SimulationConfig.from_dict({'solar.peak_output': 80.0, 'start_hour': 11})
        ctrl = SimulationController(cfg)
        assert ctrl.tick().solar_kw == pytest.approx(80.0)
