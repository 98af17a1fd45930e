"""
Component library for the building cooling plant.
Each component computes its output from the current hour's inputs only;
the last result is kept for monitoring via get_state().

Plant architecture:
  Cooling:  [Ambient] → [Chiller + smart tinting] ← [Ice storage discharge]
  Water:    [Chiller condensate] → [Recovery tank] → irrigation
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Any

import numpy as np

from solrix.control import OperatingMode


# ============================================================================
# BASE CLASS
# ============================================================================

class Component(ABC):
    """Base class for all plant components"""

    def __init__(self, name: str):
        self.name = name
        self._state: Dict[str, Any] = {}

    @abstractmethod
    def update(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Compute component outputs for the current tick.

        Args:
            inputs: Dictionary of environment values and the operating mode

        Returns:
            Dictionary of output values for other components
        """
        pass

    def get_state(self) -> Dict[str, Any]:
        """Return the outputs of the last update for monitoring"""
        return dict(self._state)

    def reset(self):
        """Reset component to initial state"""
        self._state = {}


# ============================================================================
# COOLING PLANT (LOAD MODEL)
# ============================================================================

@dataclass
class CoolingPlantParams:
    """
    Parameters for the building cooling load.
    Load rises linearly with ambient temperature above the balance point.
    The AI strategy uses a flatter slope (better setpoint scheduling), tints
    the glazing above a threshold and offsets peak load with ice.
    """
    base_load: float = 20.0             # kW at or below the balance point
    balance_temp: float = 20.0          # °C
    traditional_slope: float = 2.5      # kW/°C, manual operation
    optimized_slope: float = 1.2        # kW/°C, AI operation
    tint_threshold: float = 32.0        # °C, smart tinting engages above
    tint_factor: float = 0.6            # fraction of solar-driven gain kept when tinted
    ice_discharge: float = 15.0         # kW offset during the peak window


class CoolingPlant(Component):
    """
    Building chiller plant.
    Manual mode runs the traditional load line; AI mode applies tinting and
    ice discharge. The AI load is not clamped at zero.
    """

    def __init__(self, name: str = "CoolingPlant", params: CoolingPlantParams = None):
        super().__init__(name)
        self.params = params or CoolingPlantParams()

    def traditional_load_kw(self, temperature_c: float) -> float:
        p = self.params
        return p.base_load + (temperature_c - p.balance_temp) * p.traditional_slope

    def tint_factor(self, temperature_c: float) -> float:
        if temperature_c > self.params.tint_threshold:
            return self.params.tint_factor
        return 1.0

    def ice_discharge_kw(self, is_peak: bool) -> float:
        return self.params.ice_discharge if is_peak else 0.0

    def optimized_load_kw(self, temperature_c: float, is_peak: bool) -> float:
        p = self.params
        return (p.base_load
                + (temperature_c - p.balance_temp) * p.optimized_slope
                * self.tint_factor(temperature_c)
                - self.ice_discharge_kw(is_peak))

    def cooling_load_kw(self, temperature_c: float, is_peak: bool,
                        is_daylight: bool, mode: OperatingMode) -> float:
        """
        Instantaneous cooling load (kW) under the given operating mode.
        is_daylight is accepted for interface symmetry with the other
        models; neither load line depends on it.
        """
        if mode is OperatingMode.AI_OPTIMIZED:
            return self.optimized_load_kw(temperature_c, is_peak)
        return self.traditional_load_kw(temperature_c)

    def update(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Inputs expected:
            - temperature_c: Ambient temperature (°C)
            - is_peak: Peak demand window flag
            - is_daylight: Daylight window flag
            - mode: OperatingMode
        """
        temperature_c = inputs['temperature_c']
        is_peak = inputs.get('is_peak', False)
        is_daylight = inputs.get('is_daylight', False)
        mode = inputs.get('mode', OperatingMode.AI_OPTIMIZED)

        traditional = self.traditional_load_kw(temperature_c)
        load = self.cooling_load_kw(temperature_c, is_peak, is_daylight, mode)
        tinted = mode is OperatingMode.AI_OPTIMIZED and self.tint_factor(temperature_c) < 1.0
        ice = self.ice_discharge_kw(is_peak) if mode is OperatingMode.AI_OPTIMIZED else 0.0

        self._state = {
            'cooling_load_kw': load,
            'traditional_load_kw': traditional,
            'savings_kw': traditional - load,
            'tint_active': tinted,
            'ice_discharge_kw': ice,
        }
        return dict(self._state)


# ============================================================================
# ICE THERMAL STORAGE
# ============================================================================

@dataclass
class IceStorageParams:
    """
    Parameters for the ice thermal storage schedule.
    Charged overnight on cheap electricity, held through the morning,
    drawn down across the peak window.
    """
    charge_end_hour: int = 6            # charging runs for hours < this
    charge_rate: float = 15.0           # %/h while charging
    full_level: float = 90.0            # % held outside charge/discharge windows
    discharge_start_hour: int = 11      # first peak hour
    discharge_rate: float = 15.0        # %/h during the peak window


class IceStorage(Component):
    """
    Ice thermal storage level (% of capacity).
    Only used under the AI strategy; manual operation leaves it empty.
    Output is always clipped to 0-100 %.
    """

    def __init__(self, name: str = "IceStorage", params: IceStorageParams = None):
        super().__init__(name)
        self.params = params or IceStorageParams()

    def ice_level_pct(self, hour: int, is_peak: bool, mode: OperatingMode) -> float:
        """Charge level (%) for the hour, clamped to [0, 100]."""
        p = self.params
        if mode is not OperatingMode.AI_OPTIMIZED:
            return 0.0
        if hour < p.charge_end_hour:
            level = hour * p.charge_rate
        elif is_peak:
            level = p.full_level - (hour - p.discharge_start_hour) * p.discharge_rate
        else:
            level = p.full_level
        return float(np.clip(level, 0.0, 100.0))

    def update(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Inputs expected:
            - hour: Simulated hour (0-23)
            - is_peak: Peak demand window flag
            - mode: OperatingMode
        """
        hour = inputs['hour']
        is_peak = inputs.get('is_peak', False)
        mode = inputs.get('mode', OperatingMode.AI_OPTIMIZED)

        level = self.ice_level_pct(hour, is_peak, mode)
        if mode is not OperatingMode.AI_OPTIMIZED:
            phase = 'idle'
        elif hour < self.params.charge_end_hour:
            phase = 'charging'
        elif is_peak:
            phase = 'discharging'
        else:
            phase = 'holding'

        self._state = {'ice_level_pct': level, 'phase': phase}
        return dict(self._state)


# ============================================================================
# CONDENSATE RECOVERY
# ============================================================================

@dataclass
class CondensateParams:
    """Condensate yield of the cooling coils"""
    yield_per_kw: float = 0.4           # L/h recovered per kW of cooling
    decimals: int = 1


class CondensateRecovery(Component):
    """
    Water recovered from the AC coils for irrigation.
    Directly proportional to cooling work; a negative load yields a
    negative figure rather than being clipped.
    """

    def __init__(self, name: str = "CondensateRecovery", params: CondensateParams = None):
        super().__init__(name)
        self.params = params or CondensateParams()

    def water_recovered_lph(self, cooling_load_kw: float) -> float:
        return round(cooling_load_kw * self.params.yield_per_kw, self.params.decimals)

    def update(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Inputs expected:
            - cooling_load_kw: Current cooling load (kW)
        """
        water = self.water_recovered_lph(inputs['cooling_load_kw'])
        self._state = {'water_recovered_lph': water}
        return dict(self._state)
