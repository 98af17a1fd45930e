"""
Hour-driven simulation loop for the building plant.

The controller owns the only mutable state (hour, mode, history). Every
mutation recomputes a fresh, immutable Snapshot with compute_snapshot();
each tick also appends one HistorySample to a fixed-capacity FIFO window.
"""

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union

import numpy as np

from solrix.components import CondensateRecovery, CoolingPlant, IceStorage
from solrix.config import SimulationConfig
from solrix.control import Narrator, OperatingMode, StatusNarrator
from solrix.models import EnvironmentModel, HOURS_PER_DAY, SolarParkModel, validate_hour

logger = logging.getLogger(__name__)

# Visual tint indicator threshold on the dashboard glazing (°C)
TINT_DISPLAY_TEMP = 35.0


# ============================================================================
# CLOCK
# ============================================================================

class SimulationClock:
    """Discrete hour-of-day counter, wraps 23 → 0."""

    def __init__(self, start_hour: int = 0):
        self._hour = validate_hour(start_hour)

    @property
    def hour(self) -> int:
        return self._hour

    def advance(self) -> int:
        self._hour = (self._hour + 1) % HOURS_PER_DAY
        return self._hour

    def set_hour(self, hour: int) -> int:
        self._hour = validate_hour(hour)
        return self._hour


# ============================================================================
# SNAPSHOT
# ============================================================================

@dataclass(frozen=True)
class Snapshot:
    """Per-tick plant outputs read by the dashboard"""
    hour: int
    mode: OperatingMode
    temperature_c: float
    cooling_load_kw: float        # kW, one decimal
    ice_level_pct: float          # %, 0-100
    solar_kw: float               # kW, one decimal
    water_recovered_lph: float    # L/h, one decimal
    analysis_text: str
    windows_tinted: bool = False

    @property
    def time_label(self) -> str:
        return f"{self.hour}:00"

    def as_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['mode'] = self.mode.label
        return d


@dataclass(frozen=True)
class HistorySample:
    time_label: str
    load_kw: float
    solar_kw: float

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "HistorySample":
        return cls(snapshot.time_label, snapshot.cooling_load_kw, snapshot.solar_kw)


@dataclass
class PlantModels:
    """The set of models a snapshot is computed from"""
    environment: EnvironmentModel
    solar: SolarParkModel
    cooling: CoolingPlant
    ice: IceStorage
    condensate: CondensateRecovery
    narrator: Narrator

    @classmethod
    def from_config(cls, config: SimulationConfig = None) -> "PlantModels":
        config = config or SimulationConfig()
        return cls(
            environment=EnvironmentModel(config.environment),
            solar=SolarParkModel(config.solar),
            cooling=CoolingPlant(params=config.cooling),
            ice=IceStorage(params=config.ice),
            condensate=CondensateRecovery(params=config.condensate),
            narrator=StatusNarrator(),
        )


def compute_snapshot(hour: int, mode: OperatingMode,
                     models: Optional[PlantModels] = None) -> Snapshot:
    """
    Derive every plant output for one hour and mode.

    Args:
        hour: Simulated hour (0-23)
        mode: Operating mode
        models: Model set to use; defaults to the stock parameters

    Returns:
        A new Snapshot; nothing is cached between calls and no model
        state is touched.
    """
    models = models or PlantModels.from_config()
    mode = OperatingMode.parse(mode)
    env = models.environment.resolve(hour)

    solar = models.solar.solar_kw(env.hour, env.is_daylight)
    load = models.cooling.cooling_load_kw(env.temperature_c, env.is_peak,
                                          env.is_daylight, mode)
    ice = models.ice.ice_level_pct(env.hour, env.is_peak, mode)
    water = models.condensate.water_recovered_lph(load)

    return Snapshot(
        hour=env.hour,
        mode=mode,
        temperature_c=env.temperature_c,
        cooling_load_kw=round(load, 1),
        ice_level_pct=ice,
        solar_kw=round(solar, 1),
        water_recovered_lph=water,
        analysis_text=models.narrator.analyze(env.hour, env.is_daylight, mode),
        windows_tinted=mode.is_optimized and env.temperature_c > TINT_DISPLAY_TEMP,
    )


# ============================================================================
# HISTORY BUFFER
# ============================================================================

class HistoryBuffer:
    """
    Sliding window of the most recent samples, oldest first.
    Appending beyond capacity evicts from the front. There is no other way
    to remove or modify entries.
    """

    def __init__(self, capacity: int = 16):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._samples = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def append(self, sample: HistorySample):
        if len(self._samples) == self.capacity:
            logger.debug("History full, evicting %s", self._samples[0].time_label)
        self._samples.append(sample)

    def samples(self) -> Tuple[HistorySample, ...]:
        return tuple(self._samples)

    @property
    def latest(self) -> Optional[HistorySample]:
        return self._samples[-1] if self._samples else None

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Column arrays for charting."""
        return {
            'time': np.array([s.time_label for s in self._samples], dtype=object),
            'load': np.array([s.load_kw for s in self._samples], dtype=float),
            'solar': np.array([s.solar_kw for s in self._samples], dtype=float),
        }

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[HistorySample]:
        return iter(tuple(self._samples))


# ============================================================================
# CONTROLLER
# ============================================================================

class SimulationController:
    """
    Owns clock, operating mode and history.
    All reads and writes of simulation state go through this object; the
    snapshot is recomputed after every mutation.
    """

    def __init__(self, config: SimulationConfig = None, models: PlantModels = None):
        self._config = config or SimulationConfig()
        self._models = models or PlantModels.from_config(self._config)
        self.reset()

    def reset(self):
        """Back to the configured start hour and mode with empty history."""
        self._clock = SimulationClock(self._config.start_hour)
        self._mode = self._config.start_mode
        self._history = HistoryBuffer(self._config.history_capacity)
        self._snapshot = self._recompute()

    def reconfigure(self, config: SimulationConfig) -> Snapshot:
        """
        Swap in new model parameters, keeping hour, mode and history.
        A smaller history capacity keeps only the newest samples.
        """
        self._config = config
        self._models = PlantModels.from_config(config)
        if config.history_capacity != self._history.capacity:
            history = HistoryBuffer(config.history_capacity)
            for sample in self._history:
                history.append(sample)
            self._history = history
        logger.info("Reconfigured at hour %d (history capacity %d)",
                    self._clock.hour, config.history_capacity)
        self._snapshot = self._recompute()
        return self._snapshot

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def models(self) -> PlantModels:
        return self._models

    @property
    def hour(self) -> int:
        return self._clock.hour

    @property
    def mode(self) -> OperatingMode:
        return self._mode

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def history(self) -> HistoryBuffer:
        return self._history

    def _recompute(self) -> Snapshot:
        snapshot = compute_snapshot(self._clock.hour, self._mode, self._models)
        self._update_components()
        return snapshot

    def _update_components(self):
        """Refresh the monitoring state of this controller's own components."""
        env = self._models.environment.resolve(self._clock.hour)
        cooling = self._models.cooling.update({
            'temperature_c': env.temperature_c,
            'is_peak': env.is_peak,
            'is_daylight': env.is_daylight,
            'mode': self._mode,
        })
        self._models.ice.update({'hour': env.hour, 'is_peak': env.is_peak, 'mode': self._mode})
        self._models.condensate.update({'cooling_load_kw': cooling['cooling_load_kw']})

    def tick(self) -> Snapshot:
        """Advance one hour, recompute and record the new sample."""
        self._clock.advance()
        self._snapshot = self._recompute()
        self._history.append(HistorySample.from_snapshot(self._snapshot))
        logger.debug("Tick %s load=%.1f kW solar=%.1f kW ice=%.0f%%",
                     self._snapshot.time_label, self._snapshot.cooling_load_kw,
                     self._snapshot.solar_kw, self._snapshot.ice_level_pct)
        return self._snapshot

    def set_mode(self, mode: Union[OperatingMode, str]) -> Snapshot:
        """Switch operating mode; the snapshot reflects it immediately."""
        mode = OperatingMode.parse(mode)
        if mode is not self._mode:
            logger.info("Operating mode %s -> %s", self._mode.label, mode.label)
        self._mode = mode
        self._snapshot = self._recompute()
        return self._snapshot

    def toggle_mode(self) -> Snapshot:
        return self.set_mode(self._mode.toggled())

    def set_hour(self, hour: int) -> Snapshot:
        """Jump the clock without recording history."""
        self._clock.set_hour(hour)
        self._snapshot = self._recompute()
        return self._snapshot

    def get_state(self) -> Dict[str, Any]:
        return {
            'hour': self.hour,
            'mode': self._mode.label,
            'snapshot': self._snapshot.as_dict(),
            'history_length': len(self._history),
            'components': {
                c.name: c.get_state()
                for c in (self._models.cooling, self._models.ice, self._models.condensate)
            },
        }


# ============================================================================
# TICK DRIVER
# ============================================================================

class TickDriver:
    """
    Advances a controller on a fixed wall-clock period.

    run() blocks in the calling thread; start() runs the same loop on a
    daemon thread. stop() halts future ticks: a tick in progress always
    completes, and the wait for the next one returns early.
    """

    def __init__(self, controller: SimulationController,
                 tick_period_ms: Optional[float] = None,
                 on_tick: Optional[Callable[[Snapshot], None]] = None):
        self.controller = controller
        self.tick_period_ms = (tick_period_ms if tick_period_ms is not None
                               else controller.config.tick_period_ms)
        if self.tick_period_ms <= 0:
            raise ValueError(f"tick_period_ms must be positive, got {self.tick_period_ms}")
        self.on_tick = on_tick
        self.ticks = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def tick(self) -> Snapshot:
        with self._lock:
            snapshot = self.controller.tick()
            self.ticks += 1
        if self.on_tick is not None:
            try:
                self.on_tick(snapshot)
            except Exception:
                logger.exception("on_tick callback failed at %s", snapshot.time_label)
                self._stop.set()
                raise
        return snapshot

    def set_mode(self, mode: Union[OperatingMode, str]) -> Snapshot:
        with self._lock:
            return self.controller.set_mode(mode)

    def run(self, max_ticks: Optional[int] = None):
        """Tick every period until stop() is called or max_ticks is reached."""
        period_s = self.tick_period_ms / 1000.0
        logger.info("Tick driver started (%.0f ms period)", self.tick_period_ms)
        done = 0
        while max_ticks is None or done < max_ticks:
            if self._stop.wait(period_s):
                break
            self.tick()
            done += 1
        logger.info("Tick driver stopped after %d ticks", done)

    def start(self, max_ticks: Optional[int] = None) -> threading.Thread:
        if self.running:
            raise RuntimeError("tick driver already running")
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run, kwargs={'max_ticks': max_ticks},
            name="solrix-tick-driver", daemon=True,
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
