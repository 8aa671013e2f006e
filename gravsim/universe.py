"""The set of bodies and the gravity step that moves them."""

from __future__ import annotations

import math
import threading

from .body import Body
from .ticker import Ticker
from .values import G, G2OC2

_MIN_DISTANCE = 1e-18


class SimulationError(ValueError):
    """Raised when a universe operation or setting is invalid."""


def gravitational_acceleration(
    mass: float, distance_squared: float, c_scaling: float
) -> float:
    """Acceleration towards ``mass`` with a relativistic correction.

    The speed of light is scaled by ``c_scaling``. Inside the scaled
    event horizon the result is ``nan``; exactly on it, ``inf``.
    """
    distance = math.sqrt(distance_squared)
    scaled = G2OC2 / (c_scaling * c_scaling)
    factor = 1.0 - scaled * mass / distance
    if factor > 0:
        relativity = 1.0 / math.sqrt(factor)
    elif factor == 0:
        relativity = math.inf
    else:
        relativity = math.nan
    return (G * mass / distance_squared) * relativity


def accelerate(
    body: Body,
    other: Body,
    tickspeed_factor: float,
    gravity_scaling: float,
    c_scaling: float,
) -> None:
    """Change ``body``'s velocity by ``other``'s pull over one tick."""
    dx = other.x - body.x
    dy = other.y - body.y
    dz = other.z - body.z
    distance_squared = dx * dx + dy * dy + dz * dz
    distance = math.sqrt(distance_squared)
    if distance <= _MIN_DISTANCE:
        return
    acceleration = (
        gravitational_acceleration(other.mass, distance_squared, c_scaling)
        * gravity_scaling
    )
    fraction = tickspeed_factor * acceleration / distance
    body.x_vel += fraction * dx
    body.y_vel += fraction * dy
    body.z_vel += fraction * dz


def check_collision(first: Body, second: Body) -> bool:
    """Whether two spheres touch or overlap."""
    distance = math.dist((first.x, first.y, first.z), (second.x, second.y, second.z))
    return first.radius + second.radius >= distance


class Universe:
    """Named bodies moved under mutual gravity, one tick at a time."""

    def __init__(self) -> None:
        self._bodies: dict[str, Body] = {}
        self._lock = threading.RLock()
        self._tick_speed = 60.0
        self._time_scaling = 1.0
        self._gravity_scaling = 1.0
        self._c_scaling = 1.0
        self._paused = False
        self.ticker = Ticker()

    @property
    def bodies(self) -> dict[str, Body]:
        """Bodies ordered by name; the Body objects are live and mutable."""
        with self._lock:
            return {name: self._bodies[name] for name in sorted(self._bodies)}

    @property
    def tick_speed(self) -> float:
        """Physics ticks per second."""
        return self._tick_speed

    @tick_speed.setter
    def tick_speed(self, value: float) -> None:
        if value <= 0:
            raise SimulationError(f"tick speed must be positive, got {value}")
        with self._lock:
            self.ticker.tick_speed = value
            self._tick_speed = float(value)

    @property
    def time_scaling(self) -> float:
        """Simulated seconds per real second."""
        return self._time_scaling

    @time_scaling.setter
    def time_scaling(self, value: float) -> None:
        if value <= 0:
            raise SimulationError(f"time scaling must be positive, got {value}")
        with self._lock:
            self._time_scaling = float(value)

    @property
    def gravity_scaling(self) -> float:
        """Multiplier applied to every gravitational acceleration."""
        return self._gravity_scaling

    @gravity_scaling.setter
    def gravity_scaling(self, value: float) -> None:
        with self._lock:
            self._gravity_scaling = float(value)

    @property
    def c_scaling(self) -> float:
        """Scale applied to the speed of causality."""
        return self._c_scaling

    @c_scaling.setter
    def c_scaling(self, value: float) -> None:
        if value <= 0:
            raise SimulationError(f"c scaling must be positive, got {value}")
        with self._lock:
            self._c_scaling = float(value)

    @property
    def paused(self) -> bool:
        """Whether ticking is suspended."""
        return self._paused

    def add_body(self, body: Body) -> bool:
        """Add ``body`` under its name; an existing body of that name is kept.

        Returns True if the body was added.
        """
        if body.name == "":
            raise SimulationError("Name must not be empty")
        with self._lock:
            if body.name in self._bodies:
                return False
            self._bodies[body.name] = body
            return True

    def remove_body(self, name: str) -> None:
        """Remove the named body."""
        with self._lock:
            if name not in self._bodies:
                raise SimulationError(f"no body named {name!r}")
            del self._bodies[name]

    def clear_bodies(self) -> None:
        """Remove every body."""
        with self._lock:
            self._bodies.clear()

    def pause(self) -> bool:
        """Pause; returns False if already paused."""
        with self._lock:
            if self._paused:
                return False
            self._paused = True
            return True

    def unpause(self) -> bool:
        """Resume; returns False if already running."""
        with self._lock:
            if not self._paused:
                return False
            self._paused = False
            return True

    def calculate_tick(self) -> None:
        """Advance positions and angles, then apply mutual gravity."""
        with self._lock:
            factor = self._time_scaling / self._tick_speed
            ordered = [self._bodies[name] for name in sorted(self._bodies)]
            for body in ordered:
                body.x += body.x_vel * factor
                body.y += body.y_vel * factor
                body.z += body.z_vel * factor
                body.theta = math.fmod(body.theta + body.theta_vel * factor, 360.0)
                body.phi = math.fmod(body.phi + body.phi_vel * factor, 360.0)
                body.psi = math.fmod(body.psi + body.psi_vel * factor, 360.0)
            for body in ordered:
                for other in ordered:
                    if other is body:
                        continue
                    accelerate(
                        body,
                        other,
                        factor,
                        self._gravity_scaling,
                        self._c_scaling,
                    )