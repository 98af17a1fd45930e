"""
Environment and generation models driven by the simulated hour:
- Fixed hot-climate (Dubai) daily temperature cycle
- Daylight and peak-demand window classification
- Half-sine solar park output
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from solrix.errors import InvalidHourError


HOURS_PER_DAY = 24

# Ambient dry-bulb temperature (°C) for hours 0-23
TEMP_TABLE: Tuple[int, ...] = (
    28, 27, 26, 26, 27, 30, 34, 38, 41, 43, 44, 45,
    44, 42, 40, 38, 36, 33, 31, 30, 29, 29, 28, 28,
)


def validate_hour(hour) -> int:
    """Return hour as int, raising InvalidHourError outside 0-23."""
    if isinstance(hour, bool) or not isinstance(hour, (int, np.integer)):
        raise InvalidHourError(hour)
    if not 0 <= hour < HOURS_PER_DAY:
        raise InvalidHourError(hour)
    return int(hour)


# ============================================================================
# ENVIRONMENT MODEL
# ============================================================================

@dataclass(frozen=True)
class EnvironmentSample:
    """Ambient conditions for one simulated hour"""
    hour: int
    temperature_c: float
    is_daylight: bool
    is_peak: bool


@dataclass
class EnvironmentParams:
    """Time-of-day windows (inclusive hour bounds)"""
    daylight_start: int = 6
    daylight_end: int = 18
    peak_start: int = 11
    peak_end: int = 17


class EnvironmentModel:
    """
    Synthetic single-site environment.
    Temperature comes from the fixed 24-entry table; daylight and peak
    windows are inclusive hour ranges. Wrapping the hour is the clock's job,
    so an out-of-range hour is rejected rather than wrapped here.
    """

    def __init__(self, params: EnvironmentParams = None,
                 temp_table: Tuple[float, ...] = TEMP_TABLE):
        self.params = params or EnvironmentParams()
        if len(temp_table) != HOURS_PER_DAY:
            raise ValueError(
                f"temperature table needs {HOURS_PER_DAY} entries, got {len(temp_table)}"
            )
        self.temp_table = tuple(temp_table)

    def temperature(self, hour: int) -> float:
        return self.temp_table[validate_hour(hour)]

    def is_daylight(self, hour: int) -> bool:
        return self.params.daylight_start <= hour <= self.params.daylight_end

    def is_peak(self, hour: int) -> bool:
        return self.params.peak_start <= hour <= self.params.peak_end

    def resolve(self, hour: int) -> EnvironmentSample:
        """Resolve ambient conditions for the given hour."""
        hour = validate_hour(hour)
        return EnvironmentSample(
            hour=hour,
            temperature_c=self.temperature(hour),
            is_daylight=self.is_daylight(hour),
            is_peak=self.is_peak(hour),
        )

    def daily_profile(self) -> List[EnvironmentSample]:
        """All 24 hourly samples, midnight first."""
        return [self.resolve(h) for h in range(HOURS_PER_DAY)]


# ============================================================================
# SOLAR PARK GENERATION MODEL
# ============================================================================

@dataclass
class SolarParkParams:
    """Parameters for the building's solar park allocation"""
    peak_output: float = 50.0      # kW at solar noon
    sunrise_hour: float = 6.0      # hour the generation curve starts
    half_period: float = 12.0      # hours from sunrise to sunset


class SolarParkModel:
    """
    Half-sine generation curve: zero at sunrise and sunset, peak_output
    at solar noon. No irradiance or weather input.
    """

    def __init__(self, params: SolarParkParams = None):
        self.params = params or SolarParkParams()

    def solar_kw(self, hour: int, is_daylight: bool) -> float:
        """Solar output (kW) for the hour; never negative."""
        if not is_daylight:
            return 0.0
        phase = (hour - self.params.sunrise_hour) * np.pi / self.params.half_period
        # sin() can land a hair below zero at the boundary hours
        return max(0.0, float(self.params.peak_output * np.sin(phase)))

    def daily_profile(self, environment: EnvironmentModel) -> np.ndarray:
        """Solar output for hours 0-23 under the given environment."""
        return np.array([
            self.solar_kw(s.hour, s.is_daylight) for s in environment.daily_profile()
        ])
