"""
Mutable representation of a body that belongs to a System.

Stored velocity is pre-multiplied by the body's step size. The ``velocity``
property pair is the only way in or out of that state: values passed to the
setter are physical and get scaled, and a step size change rescales the
stored value so the physical velocity is kept.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Iterable, NamedTuple, Optional

import numpy as np

from .errors import ConfigurationError, NonFiniteStateError, SingularGeometryError
from .units import (
    Acceleration,
    GravitationalConstant,
    Length,
    Mass,
    Velocity,
    require,
)

if TYPE_CHECKING:  # Avoid circular import during runtime
    from .system import System

logger = logging.getLogger(__name__)


class Category(enum.Enum):
    """Classification used by consumers to pick a representation."""

    STAR = "star"
    SUN = "sun"
    PLANET = "planet"
    EARTH = "earth"
    MERCURY = "mercury"
    VENUS = "venus"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"
    SATELLITE = "satellite"
    MOON = "moon"


class BodyState(NamedTuple):
    position: Length
    velocity: Velocity  # stored, step-scaled
    acceleration: Acceleration
    step_size: float


def _positive_step(step_size: float) -> float:
    step_size = float(step_size)
    if not np.isfinite(step_size) or step_size <= 0:
        raise ConfigurationError(f"step_size must be positive, got {step_size}")
    return step_size


class Body:
    """
    A point mass with a category label.

    ``velocity`` and ``acceleration`` are in step-scaled units: one factor of
    ``step_size`` for velocity, two for acceleration. ``physical_velocity``
    undoes the scaling.
    """

    def __init__(
        self,
        category: Category,
        name: str,
        radius: Length,
        mass: Mass,
        position: Length,
        velocity: Velocity,
        step_size: float = 1.0,
    ) -> None:
        self.category = category
        self.name = name
        self.radius = radius
        self.mass = mass
        self.position = position
        self._step_size = _positive_step(step_size)
        self.velocity = velocity
        self._acceleration = Acceleration.zeros()
        self.system: Optional[System] = None

    @property
    def category(self) -> Category:
        return self._category

    @category.setter
    def category(self, category: Category) -> None:
        if not isinstance(category, Category):
            raise ConfigurationError(f"category must be a Category, got {category!r}")
        self._category = category

    @property
    def radius(self) -> Length:
        return self._radius

    @radius.setter
    def radius(self, radius: Length) -> None:
        radius = require(radius, Length, "radius", vector=False)
        if radius.value <= 0:
            raise ConfigurationError(f"radius of {self.name!r} must be positive, got {radius}")
        self._radius = radius

    @property
    def mass(self) -> Mass:
        return self._mass

    @mass.setter
    def mass(self, mass: Mass) -> None:
        mass = require(mass, Mass, "mass")
        if mass.value <= 0:
            raise ConfigurationError(f"mass of {self.name!r} must be positive, got {mass}")
        self._mass = mass

    @property
    def position(self) -> Length:
        return self._position

    @position.setter
    def position(self, position: Length) -> None:
        self._position = require(position, Length, "position", vector=True)

    @property
    def velocity(self) -> Velocity:
        """Stored velocity, i.e. physical velocity times ``step_size``."""
        return self._velocity

    @velocity.setter
    def velocity(self, velocity: Velocity) -> None:
        """Store a physical velocity, scaling it by the current step size."""
        velocity = require(velocity, Velocity, "velocity")
        self._velocity = velocity * self._step_size

    @property
    def physical_velocity(self) -> Velocity:
        return self._velocity / self._step_size

    @property
    def acceleration(self) -> Acceleration:
        return self._acceleration

    @acceleration.setter
    def acceleration(self, acceleration: Acceleration) -> None:
        self._acceleration = require(acceleration, Acceleration, "acceleration")

    @property
    def step_size(self) -> float:
        return self._step_size

    @step_size.setter
    def step_size(self, step_size: float) -> None:
        step_size = _positive_step(step_size)
        physical = self.physical_velocity
        self._step_size = step_size
        self.velocity = physical

    def acceleration_due_to(
        self, other: Body, gravitational_constant: GravitationalConstant
    ) -> Acceleration:
        """
        Acceleration this body feels from ``other`` alone, scaled by
        ``step_size ** 2``.
        """
        if other is self:
            raise ConfigurationError(f"{self.name!r} cannot attract itself")
        require(gravitational_constant, GravitationalConstant, "gravitational_constant")
        offset = other.position - self.position
        distance = offset.norm()
        if distance.value == 0:
            logger.error(
                "Bodies %r and %r share position %s", self.name, other.name, self.position
            )
            raise SingularGeometryError(
                f"{self.name!r} and {other.name!r} occupy the same position"
            )
        direction = offset / distance
        magnitude = (
            gravitational_constant.value
            * self._step_size**2
            * other.mass.value
            / distance.value**2
        )
        if not np.isfinite(magnitude):
            raise SingularGeometryError(
                f"acceleration of {self.name!r} due to {other.name!r} is not finite"
            )
        return Acceleration(direction * magnitude)

    def net_acceleration(
        self, bodies: Iterable[Body], gravitational_constant: GravitationalConstant
    ) -> Acceleration:
        """Sum of ``acceleration_due_to`` over ``bodies``, skipping self, in order."""
        total = Acceleration.zeros()
        for other in bodies:
            if other is self:
                continue
            total = total + self.acceleration_due_to(other, gravitational_constant)
        return total

    def sum_acceleration(
        self, bodies: Iterable[Body], gravitational_constant: GravitationalConstant
    ) -> Acceleration:
        """Compute, store and return the net acceleration due to ``bodies``."""
        self._acceleration = self.net_acceleration(bodies, gravitational_constant)
        return self._acceleration

    def _finite_sum(self, a: np.ndarray, b: np.ndarray, what: str) -> np.ndarray:
        with np.errstate(over="ignore", invalid="ignore"):
            total = a + b
        if not np.all(np.isfinite(total)):
            logger.error("%s of %r overflowed to %s", what, self.name, total)
            raise NonFiniteStateError(f"{what} of {self.name!r} is not finite: {total}")
        return total

    def integrate_velocity(self) -> Velocity:
        # Both terms already carry the step scaling.
        total = self._finite_sum(self._velocity.value, self._acceleration.value, "velocity")
        self._velocity = Velocity(total)
        return self._velocity

    def integrate_position(self) -> None:
        total = self._finite_sum(self._position.value, self._velocity.value, "position")
        self._position = Length(total)

    def distance_to(self, other: Body) -> Length:
        """Return Euclidean distance to another body."""
        return (other.position - self.position).norm()

    def snapshot(self) -> BodyState:
        """Capture the dynamic state so it can be put back with ``restore``."""
        return BodyState(self._position, self._velocity, self._acceleration, self._step_size)

    def restore(self, state: BodyState) -> None:
        """
        Put back a state taken by ``snapshot``. Stored velocity and step size
        travel together, so the velocity scaling stays consistent.
        """
        if not isinstance(state, BodyState):
            raise ConfigurationError(f"expected a BodyState, got {type(state).__name__}")
        self._position, self._velocity, self._acceleration, self._step_size = state

    def __repr__(self) -> str:
        return (
            f"Body({self.category.name}, {self.name!r}, mass={self.mass}, "
            f"position={self.position}, velocity={self.physical_velocity})"
        )
