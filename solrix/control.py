"""
Operating-mode control and status narration for the building plant.
The operating mode is the only control input: the AI-optimized strategy
engages window tinting, ice storage and solar, the manual strategy runs
traditional cooling only.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Union

from solrix.errors import InvalidModeError


class OperatingMode(Enum):
    """Building control strategy"""
    AI_OPTIMIZED = "ai_optimized"
    MANUAL = "manual"

    @property
    def label(self) -> str:
        """Display label shown on the dashboard toggle."""
        return "AI OPTIMIZED" if self is OperatingMode.AI_OPTIMIZED else "MANUAL"

    @property
    def is_optimized(self) -> bool:
        return self is OperatingMode.AI_OPTIMIZED

    def toggled(self) -> "OperatingMode":
        if self is OperatingMode.AI_OPTIMIZED:
            return OperatingMode.MANUAL
        return OperatingMode.AI_OPTIMIZED

    @classmethod
    def parse(cls, value: Union["OperatingMode", str]) -> "OperatingMode":
        """
        Accept an OperatingMode, its name, value or display label.

        Raises:
            InvalidModeError: if the value names no mode
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace(" ", "_").replace("-", "_")
            if key == "AI":
                key = "AI_OPTIMIZED"
            if key in cls.__members__:
                return cls[key]
        raise InvalidModeError(value)


# ============================================================================
# STATUS NARRATION
# ============================================================================

MANUAL_MESSAGE = (
    "MANUAL MODE: Traditional cooling is running. "
    "We are wasting solar energy and AC water."
)
PEAK_HEAT_MESSAGE = (
    "PEAK HEAT: Using stored ice and solar power to keep the building cool "
    "without stressing the city grid."
)
SOLAR_MESSAGE = (
    "SUNNY: Using clean energy from MBR Solar Park. "
    "AC water is being saved to water our local parks."
)
NIGHT_MESSAGE = (
    "NIGHT TIME: Making ice now while electricity is cheaper, "
    "saving it for the hot day ahead."
)


class Narrator(ABC):
    """Base class for status narration strategies"""

    @abstractmethod
    def analyze(self, hour: int, is_daylight: bool, mode: OperatingMode) -> str:
        """Return the single status message active for these inputs."""
        pass


class StatusNarrator(Narrator):
    """
    Rule-based narrator for the dashboard info panel.

    Checks run in order and the first match wins, so the afternoon
    peak-heat window (12:00-15:00) takes priority over the general
    daylight message even though it lies inside daylight.
    """

    def __init__(self, peak_heat_start: int = 12, peak_heat_end: int = 15):
        self.peak_heat_start = peak_heat_start
        self.peak_heat_end = peak_heat_end

    def analyze(self, hour: int, is_daylight: bool, mode: OperatingMode) -> str:
        if mode is OperatingMode.MANUAL:
            return MANUAL_MESSAGE
        if self.peak_heat_start <= hour <= self.peak_heat_end:
            return PEAK_HEAT_MESSAGE
        if is_daylight:
            return SOLAR_MESSAGE
        return NIGHT_MESSAGE
