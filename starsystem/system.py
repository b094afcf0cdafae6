"""
Main class for handling a star system.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple, Union

from .body import Body, BodyState
from .config import G_DEFAULT
from .errors import ConfigurationError, SimulationError
from .units import Acceleration, GravitationalConstant, Mass

logger = logging.getLogger(__name__)


def _as_constant(value: Union[GravitationalConstant, float]) -> GravitationalConstant:
    if not isinstance(value, GravitationalConstant):
        value = GravitationalConstant(value)
    if value.value < 0:
        raise ConfigurationError(f"gravitational constant must not be negative, got {value}")
    return value


class System:
    """
    Container that owns Body instances and advances them one tick at a time.

    The gravitational constant may be replaced at any point; the new value is
    used from the next ``step()`` on.
    """

    def __init__(
        self,
        name: str = "Unnamed system",
        gravitational_constant: Union[GravitationalConstant, float] = G_DEFAULT,
        bodies: Optional[Iterable[Body]] = None,
        workers: Optional[int] = None,
    ):
        if workers is not None and workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {workers}")
        self.name = name
        self.gravitational_constant = gravitational_constant
        self.workers = workers
        self.step_count = 0
        self._bodies: List[Body] = []
        self._step_lock = threading.Lock()
        if bodies:
            self.add_bodies(bodies)

    @property
    def bodies(self) -> Tuple[Body, ...]:
        return tuple(self._bodies)

    @property
    def gravitational_constant(self) -> GravitationalConstant:
        return self._gravitational_constant

    @gravitational_constant.setter
    def gravitational_constant(self, value: Union[GravitationalConstant, float]) -> None:
        self._gravitational_constant = _as_constant(value)
        logger.debug("%s: gravitational constant set to %s", self.name, self._gravitational_constant)

    def add_body(self, body: Body) -> Body:
        if not isinstance(body, Body):
            raise ConfigurationError(f"expected a Body, got {type(body).__name__}")
        if body.system is self:
            raise ConfigurationError(f"{body.name!r} is already part of {self.name!r}")
        if body.system is not None:
            raise ConfigurationError(
                f"{body.name!r} already belongs to system {body.system.name!r}"
            )
        body.system = self
        self._bodies.append(body)
        logger.debug("%s: added %r (%d bodies)", self.name, body.name, len(self._bodies))
        return body

    def add_bodies(self, bodies: Iterable[Body]) -> List[Body]:
        return [self.add_body(body) for body in bodies]

    def get_body(self, name: str) -> Optional[Body]:
        return next((b for b in self._bodies if b.name == name), None)

    def total_mass(self) -> Mass:
        return Mass(sum(body.mass.value for body in self._bodies))

    def step(self) -> None:
        """
        Advance every body by one tick.

        All accelerations are computed from the start-of-tick positions before
        any body is touched, then every velocity is integrated, then every
        position. If any phase raises, every body is put back to its
        start-of-tick state before the error propagates. Overlapping calls,
        nested or from another thread, raise SimulationError.
        """
        if not self._step_lock.acquire(blocking=False):
            raise SimulationError(f"{self.name!r} is already stepping")
        try:
            accelerations = self._compute_accelerations()
            saved = self.snapshot()
            try:
                for body, acceleration in zip(self._bodies, accelerations):
                    body.acceleration = acceleration
                for body in self._bodies:
                    body.integrate_velocity()
                for body in self._bodies:
                    body.integrate_position()
            except BaseException:
                self.restore(saved)
                raise
            self.step_count += 1
        finally:
            self._step_lock.release()

    def snapshot(self) -> Tuple[int, List[BodyState]]:
        """Step count plus every body's dynamic state, in body order."""
        return self.step_count, [body.snapshot() for body in self._bodies]

    def restore(self, saved: Tuple[int, List[BodyState]]) -> None:
        step_count, states = saved
        if len(states) != len(self._bodies):
            raise ConfigurationError(
                f"snapshot holds {len(states)} bodies, {self.name!r} has {len(self._bodies)}"
            )
        for body, state in zip(self._bodies, states):
            body.restore(state)
        self.step_count = step_count

    def run(self, steps: int) -> None:
        """Call ``step()`` ``steps`` times."""
        if steps < 0:
            raise ConfigurationError(f"steps must not be negative, got {steps}")
        for _ in range(steps):
            self.step()

    def _compute_accelerations(self) -> List[Acceleration]:
        snapshot = tuple(self._bodies)
        constant = self._gravitational_constant

        def net(body: Body) -> Acceleration:
            return body.net_acceleration(snapshot, constant)

        if self.workers is None or self.workers == 1 or len(snapshot) < 2:
            return [net(body) for body in snapshot]
        # map() yields in submission order and the with-block waits for every
        # task, so nothing is committed until all accelerations exist.
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(net, snapshot))
