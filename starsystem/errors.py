"""
Exceptions raised by the simulation core.
"""


class SimulationError(Exception):
    """Base class for every error raised by starsystem."""


class ConfigurationError(SimulationError, ValueError):
    """Invalid body, system or request configuration."""


class SingularGeometryError(SimulationError, ArithmeticError):
    """Two distinct bodies share a position, so their attraction is undefined."""


class UnitMismatchError(SimulationError, TypeError):
    """Quantities of incompatible physical dimension were combined."""


class NonFiniteStateError(SimulationError, ArithmeticError):
    """Integration overflowed, leaving a velocity or position that is not finite."""
