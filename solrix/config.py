"""Configuration for the building simulation."""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

from solrix.components import CondensateParams, CoolingPlantParams, IceStorageParams
from solrix.control import OperatingMode
from solrix.errors import ConfigError, InvalidHourError
from solrix.models import EnvironmentParams, SolarParkParams, validate_hour


@dataclass
class SimulationConfig:
    tick_period_ms: float = 2000.0   # wall-clock time per simulated hour
    history_capacity: int = 16       # samples kept for charting
    start_hour: int = 0
    start_mode: OperatingMode = OperatingMode.AI_OPTIMIZED

    environment: EnvironmentParams = field(default_factory=EnvironmentParams)
    solar: SolarParkParams = field(default_factory=SolarParkParams)
    cooling: CoolingPlantParams = field(default_factory=CoolingPlantParams)
    ice: IceStorageParams = field(default_factory=IceStorageParams)
    condensate: CondensateParams = field(default_factory=CondensateParams)

    def __post_init__(self):
        self.start_mode = OperatingMode.parse(self.start_mode)
        if self.tick_period_ms <= 0:
            raise ConfigError(f"tick_period_ms must be positive, got {self.tick_period_ms}")
        if self.history_capacity < 1:
            raise ConfigError(f"history_capacity must be >= 1, got {self.history_capacity}")
        try:
            validate_hour(self.start_hour)
        except InvalidHourError as exc:
            raise ConfigError(f"bad start_hour: {exc}") from exc

    @property
    def tick_period_s(self) -> float:
        return self.tick_period_ms / 1000.0

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "SimulationConfig":
        """
        Build a config from a flat mapping.
        Top-level keys set SimulationConfig fields; nested parameter blocks
        are addressed with a prefix, e.g. "cooling.tint_threshold".
        """
        top: Dict[str, Any] = {}
        nested: Dict[str, Dict[str, Any]] = {}
        blocks = {f.name: f for f in fields(cls) if f.name in _PARAM_BLOCKS}
        for key, value in values.items():
            block, _, name = key.partition(".")
            if name:
                if block not in blocks:
                    raise ConfigError(f"unknown parameter block {block!r}")
                nested.setdefault(block, {})[name] = value
            elif key in {f.name for f in fields(cls)}:
                top[key] = value
            else:
                raise ConfigError(f"unknown config key {key!r}")

        for block, params in nested.items():
            try:
                top[block] = _PARAM_BLOCKS[block](**params)
            except TypeError as exc:
                raise ConfigError(f"bad parameters for {block!r}: {exc}") from exc
        return cls(**top)


_PARAM_BLOCKS = {
    "environment": EnvironmentParams,
    "solar": SolarParkParams,
    "cooling": CoolingPlantParams,
    "ice": IceStorageParams,
    "condensate": CondensateParams,
}
