"""
Utilities for constructing a System from a request payload and sampling
per-tick frames for consumers (renderers, the HTTP API). Frames carry only
what a consumer needs to place and label a body: category, name, radius and
position. Display scaling is left to the consumer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from . import presets
from .body import Body, Category
from .config import DEFAULT_STEP_SIZE, G_DEFAULT
from .errors import ConfigurationError
from .system import System
from .units import Length, Mass, Velocity

logger = logging.getLogger(__name__)

STAR_CATEGORIES = frozenset({Category.STAR, Category.SUN})
SATELLITE_CATEGORIES = frozenset({Category.SATELLITE, Category.MOON})


def render_kind(category: Category) -> str:
    if category in STAR_CATEGORIES:
        return "star"
    if category in SATELLITE_CATEGORIES:
        return "satellite"
    return "planet"


def _vector3(values: Any) -> List[float]:
    vec = list(values)
    if len(vec) < 3:
        vec.extend([0.0] * (3 - len(vec)))
    return [float(v) for v in vec[:3]]


def _parse_category(value: Any) -> Category:
    if isinstance(value, Category):
        return value
    try:
        return Category[str(value).upper()]
    except KeyError:
        raise ConfigurationError(f"unknown category {value!r}") from None


def _build_body(cfg: Dict[str, Any], step_size: float) -> Body:
    return Body(
        category=_parse_category(cfg.get("category", "planet")),
        name=cfg["name"],
        radius=Length(cfg["radius"]),
        mass=Mass(cfg["mass"]),
        position=Length(_vector3(cfg.get("position") or [])),
        velocity=Velocity(_vector3(cfg.get("velocity") or [])),
        step_size=step_size,
    )


def build_system(config: Dict[str, Any], workers: Optional[int] = None) -> System:
    """
    Build a System from a request-shaped dict: ``presets`` (names) first,
    then custom ``bodies``, all sharing ``stepSize`` and
    ``gravitationalConstant``.
    """
    gravitational_constant = config.get("gravitationalConstant")
    if gravitational_constant is None:
        gravitational_constant = G_DEFAULT
    step_size = config.get("stepSize")
    if step_size is None:
        step_size = DEFAULT_STEP_SIZE

    bodies = [
        presets.create(name, step_size=step_size, gravitational_constant=gravitational_constant)
        for name in config.get("presets") or []
    ]
    bodies.extend(_build_body(cfg, step_size) for cfg in config.get("bodies") or [])
    if not bodies:
        raise ConfigurationError("a system needs at least one body")

    system = System(
        name=config.get("name") or "User system",
        gravitational_constant=gravitational_constant,
        bodies=bodies,
        workers=workers,
    )
    logger.debug("Built %r with %d bodies", system.name, len(bodies))
    return system


def body_metadata(system: System) -> List[Dict[str, Any]]:
    """Static per-body data, in body order, so frames can be zipped back."""
    return [
        {
            "name": body.name,
            "category": body.category.name,
            "kind": render_kind(body.category),
            "radius": body.radius.value,
            "mass": body.mass.value,
        }
        for body in system.bodies
    ]


def frame(system: System) -> Dict[str, Any]:
    return {
        "step": system.step_count,
        "positions": [body.position.tolist() for body in system.bodies],
    }


def sample_frames(
    system: System,
    steps: int,
    every: int = 1,
    preserve_state: bool = False,
) -> Dict[str, Any]:
    """
    Step ``system`` ``steps`` times, recording the initial frame and every
    ``every``-th frame after it. With ``preserve_state`` the bodies and the
    step counter are put back afterwards, whether or not stepping raised.
    """
    if steps < 0:
        raise ConfigurationError("steps must not be negative")
    if every < 1:
        raise ConfigurationError("every must be at least 1")

    preserved = system.snapshot()

    samples = [frame(system)]
    try:
        for idx in range(1, steps + 1):
            system.step()
            if idx % every == 0:
                samples.append(frame(system))
    finally:
        if preserve_state:
            system.restore(preserved)
    return {"bodyMetadata": body_metadata(system), "samples": samples}
