"""
Named body presets with representative masses, radii and orbits.

Each preset orbits its parent in the xy plane: placed on the +x axis at its
orbital distance from the parent and moving along +y at its preset speed
(the circular speed when none is given), on top of the parent's own
position and velocity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

import numpy as np

from .body import Body, Category
from .config import DEFAULT_STEP_SIZE, G_DEFAULT
from .errors import ConfigurationError
from .system import System
from .units import GravitationalConstant, Length, Mass, Velocity

EARTH_MASS = 5.97237e24


@dataclass(frozen=True)
class BodyPreset:
    category: Category
    mass: float  # kg
    radius: float  # m
    distance: float = 0.0  # m from parent
    parent: Optional[str] = None
    speed: Optional[float] = None  # m/s relative to parent; circular when unset


PRESETS: Dict[str, BodyPreset] = {
    "sun": BodyPreset(Category.SUN, 1.98847e30, 6.957e8),
    "mercury": BodyPreset(Category.MERCURY, 3.3011e23, 2.4397e6, 5.7909e10, "sun"),
    "venus": BodyPreset(Category.VENUS, 4.8675e24, 6.0518e6, 1.08209e11, "sun"),
    "earth": BodyPreset(Category.EARTH, EARTH_MASS, 6.371e6, 1.49598e11, "sun"),
    "moon": BodyPreset(Category.MOON, 7.342e22, 1.7374e6, 3.844e8, "earth"),
    "mars": BodyPreset(Category.MARS, 6.4171e23, 3.3895e6, 2.27939e11, "sun"),
    "jupiter": BodyPreset(Category.JUPITER, 1.8982e27, 6.9911e7, 7.78479e11, "sun"),
    "saturn": BodyPreset(Category.SATURN, 5.6834e26, 5.8232e7, 1.432041e12, "sun"),
    "uranus": BodyPreset(Category.URANUS, 8.681e25, 2.5362e7, 2.867043e12, "sun"),
    "neptune": BodyPreset(Category.NEPTUNE, 1.02413e26, 2.4622e7, 4.514953e12, "sun"),
    "pluto": BodyPreset(Category.PLUTO, 1.303e22, 1.1883e6, 5.90638e12, "sun"),
    # Earth-sized but ten times heavier, further out than Earth.
    "bigger_earth": BodyPreset(Category.EARTH, 10 * EARTH_MASS, 6.371e6, 1.8e11, "sun"),
}

DEFAULT_SYSTEM = tuple(name for name in PRESETS if name != "bigger_earth")


def get_preset(name: str) -> BodyPreset:
    try:
        return PRESETS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown preset {name!r}; expected one of {sorted(PRESETS)}"
        ) from None


def circular_speed(mass: float, distance: float, gravitational_constant: float = G_DEFAULT) -> float:
    """Speed of a circular orbit of radius ``distance`` around ``mass``."""
    if distance <= 0:
        return 0.0
    return math.sqrt(gravitational_constant * mass / distance)


def _constant_value(gravitational_constant: Union[GravitationalConstant, float]) -> float:
    if isinstance(gravitational_constant, GravitationalConstant):
        value = gravitational_constant.value
    else:
        value = float(gravitational_constant)
    if value < 0:
        raise ConfigurationError(f"gravitational constant must not be negative, got {value}")
    return value


def initial_state(
    name: str, gravitational_constant: Union[GravitationalConstant, float] = G_DEFAULT
) -> Tuple[np.ndarray, np.ndarray]:
    """Position (m) and physical velocity (m/s) of a preset, parent included."""
    preset = get_preset(name)
    if preset.parent is None:
        return np.zeros(3), np.zeros(3)
    parent_position, parent_velocity = initial_state(preset.parent, gravitational_constant)
    speed = preset.speed
    if speed is None:
        speed = circular_speed(
            get_preset(preset.parent).mass,
            preset.distance,
            _constant_value(gravitational_constant),
        )
    position = parent_position + np.array([preset.distance, 0.0, 0.0])
    velocity = parent_velocity + np.array([0.0, speed, 0.0])
    return position, velocity


def create(
    name: str,
    position: Optional[Length] = None,
    velocity: Optional[Velocity] = None,
    step_size: float = DEFAULT_STEP_SIZE,
    gravitational_constant: Union[GravitationalConstant, float] = G_DEFAULT,
) -> Body:
    """
    Build a new Body from a preset, optionally overriding its initial state.
    Default orbits are circular under ``gravitational_constant``.
    """
    preset = get_preset(name)
    default_position, default_velocity = initial_state(name, gravitational_constant)
    return Body(
        category=preset.category,
        name=name,
        radius=Length(preset.radius),
        mass=Mass(preset.mass),
        position=Length(default_position) if position is None else position,
        velocity=Velocity(default_velocity) if velocity is None else velocity,
        step_size=step_size,
    )


def solar_system(
    names: Optional[Iterable[str]] = None,
    gravitational_constant: Union[GravitationalConstant, float] = G_DEFAULT,
    step_size: float = DEFAULT_STEP_SIZE,
    workers: Optional[int] = None,
) -> System:
    names = DEFAULT_SYSTEM if names is None else tuple(names)
    return System(
        name="Solar system",
        gravitational_constant=gravitational_constant,
        bodies=[
            create(name, step_size=step_size, gravitational_constant=gravitational_constant)
            for name in names
        ],
        workers=workers,
    )
