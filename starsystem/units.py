"""
Unit-tagged scalar and vector quantities.

Every quantity keeps its magnitude in SI base units inside a read-only numpy
array of shape ``()`` or ``(3,)``. Arithmetic is defined between quantities of
the same type and between a quantity and a plain number, so combining e.g. a
Length with a Mass raises UnitMismatchError at the point where it happens
instead of leaking a meaningless number into body state.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, TypeVar, Union

import numpy as np

from .errors import ConfigurationError, UnitMismatchError

Q = TypeVar("Q", bound="Quantity")

SCALAR: Tuple[int, ...] = ()
VECTOR: Tuple[int, ...] = (3,)

AU = 1.495978707e11  # metres


class Quantity:
    """
    Base class for a value tagged with a physical dimension.

    Subclasses declare the unit names they accept (with the factor that
    converts to the base unit) and which shapes are meaningful for them.
    """

    units: ClassVar[Dict[str, float]] = {}
    base_unit: ClassVar[str] = ""
    shapes: ClassVar[Tuple[Tuple[int, ...], ...]] = (SCALAR, VECTOR)

    # Keep numpy from broadcasting over us; ndarray * Quantity goes to __rmul__.
    __array_ufunc__ = None

    __slots__ = ("_value",)

    def __init__(self, value: Any, unit: Optional[str] = None) -> None:
        if isinstance(value, Quantity):
            raise UnitMismatchError(
                f"{type(self).__name__} cannot be built from a {type(value).__name__}"
            )
        array = np.array(value, dtype=float) * self._scale(unit)
        if array.shape not in self.shapes:
            raise ConfigurationError(
                f"{type(self).__name__} must have shape in {self.shapes}, got {array.shape}"
            )
        if not np.all(np.isfinite(array)):
            raise ConfigurationError(f"{type(self).__name__} must be finite, got {array}")
        array.setflags(write=False)
        self._value = array

    @classmethod
    def _scale(cls, unit: Optional[str]) -> float:
        if unit is None or unit == cls.base_unit:
            return 1.0
        try:
            return cls.units[unit]
        except KeyError:
            raise UnitMismatchError(
                f"{unit!r} is not a unit of {cls.__name__}; expected one of {sorted(cls.units)}"
            ) from None

    @classmethod
    def zeros(cls: Type[Q]) -> Q:
        return cls(np.zeros(3))

    @property
    def value(self) -> Union[float, np.ndarray]:
        """Magnitude in base units: a float for scalars, a read-only array for vectors."""
        if self._value.shape == SCALAR:
            return float(self._value)
        return self._value

    @property
    def is_vector(self) -> bool:
        return self._value.shape == VECTOR

    def to(self, unit: str) -> Union[float, np.ndarray]:
        converted = self._value / self._scale(unit)
        if converted.shape == SCALAR:
            return float(converted)
        return converted

    def norm(self):
        """
        Euclidean length, as a scalar of the same quantity type where that
        type allows scalars, otherwise a plain float in base units.
        """
        magnitude = float(np.linalg.norm(self._value))
        if SCALAR not in self.shapes:
            return magnitude
        return type(self)(magnitude)

    def tolist(self):
        return self._value.tolist()

    def _same_kind(self, other: Any, op: str) -> "Quantity":
        if type(other) is not type(self):
            raise UnitMismatchError(
                f"cannot {op} {type(other).__name__} and {type(self).__name__}"
            )
        return other

    def __add__(self: Q, other: Any) -> Q:
        other = self._same_kind(other, "add")
        return type(self)(self._value + other._value)

    def __sub__(self: Q, other: Any) -> Q:
        other = self._same_kind(other, "subtract")
        return type(self)(self._value - other._value)

    def __neg__(self: Q) -> Q:
        return type(self)(-self._value)

    def __mul__(self: Q, other: Any) -> Q:
        if isinstance(other, Quantity):
            raise UnitMismatchError(
                f"product of {type(self).__name__} and {type(other).__name__} is not supported"
            )
        if isinstance(other, np.ndarray) and other.shape == SCALAR:
            other = float(other)
        if not isinstance(other, Real):
            raise UnitMismatchError(f"cannot scale {type(self).__name__} by {other!r}")
        return type(self)(self._value * float(other))

    __rmul__ = __mul__

    def __truediv__(self, other: Any):
        # Same-kind division is dimensionless; dividing a vector by its own
        # norm yields the plain unit direction.
        if isinstance(other, Quantity):
            other = self._same_kind(other, "divide")
            if other._value.shape != SCALAR:
                raise UnitMismatchError("cannot divide by a vector quantity")
            result = self._value / other._value
            return float(result) if result.shape == SCALAR else result
        if isinstance(other, np.ndarray) and other.shape == SCALAR:
            other = float(other)
        if not isinstance(other, Real):
            raise UnitMismatchError(f"cannot divide {type(self).__name__} by {other!r}")
        return type(self)(self._value / float(other))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value.tolist()!r} {self.base_unit})"


class Length(Quantity):
    units = {"m": 1.0, "km": 1.0e3, "au": AU}
    base_unit = "m"
    shapes = (SCALAR, VECTOR)


class Mass(Quantity):
    units = {"kg": 1.0, "t": 1.0e3}
    base_unit = "kg"
    shapes = (SCALAR,)


class Velocity(Quantity):
    units = {"m/s": 1.0, "km/s": 1.0e3}
    base_unit = "m/s"
    shapes = (VECTOR,)


class Acceleration(Quantity):
    units = {"m/s^2": 1.0}
    base_unit = "m/s^2"
    shapes = (VECTOR,)


class GravitationalConstant(Quantity):
    units = {"m^3/(kg*s^2)": 1.0}
    base_unit = "m^3/(kg*s^2)"
    shapes = (SCALAR,)


def require(value: Any, kind: Type[Q], name: str, vector: Optional[bool] = None) -> Q:
    """Return ``value`` if it is a ``kind`` of the expected shape, else raise."""
    if not isinstance(value, kind):
        raise UnitMismatchError(
            f"{name} must be a {kind.__name__}, got {type(value).__name__}"
        )
    if vector is not None and value.is_vector != vector:
        shape = "3-vector" if vector else "scalar"
        raise ConfigurationError(f"{name} must be a {shape} {kind.__name__}")
    return value
