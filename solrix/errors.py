"""
Exception types raised at the simulation boundary.
Model functions themselves are total over valid input; these are raised
where external input (hours, modes, configuration) enters the engine.
"""


class SimulationError(Exception):
    """Base class for all simulation errors"""


class InvalidHourError(SimulationError, ValueError):
    """Hour index outside the 0-23 day"""

    def __init__(self, hour):
        super().__init__(f"hour must be an integer in [0, 23], got {hour!r}")
        self.hour = hour


class InvalidModeError(SimulationError, ValueError):
    """Unknown operating mode"""

    def __init__(self, mode):
        super().__init__(f"unknown operating mode {mode!r}")
        self.mode = mode


class ConfigError(SimulationError, ValueError):
    """Invalid simulation configuration value"""
