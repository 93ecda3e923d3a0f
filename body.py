# body.py

import math
import logging
import numba
import numpy as np
import constants
from vector import Vector2

logger = logging.getLogger("simple_space")


@numba.jit(nopython=True)
def _circle_contains_jit(cx, cy, radius, px, py):
    """Inclusive point-in-circle test."""
    dx = px - cx
    dy = py - cy
    return dx * dx + dy * dy <= radius * radius


@numba.jit(nopython=True)
def _circles_overlap_jit(c1x, c1y, r1, c2x, c2y, r2):
    """
    Strict circle-circle test. Circles that only touch share no area, so they
    do not overlap.
    """
    dx = c2x - c1x
    dy = c2y - c1y
    reach = r1 + r2
    return dx * dx + dy * dy < reach * reach


@numba.jit(nopython=True)
def _elastic_component_jit(v_self, m_self, v_other, m_other):
    """
    One axis of a one-dimensional elastic collision:

        v' = (v_self * (m_self - m_other) + 2 * m_other * v_other) / (m_self + m_other)
    """
    return (v_self * (m_self - m_other) + 2 * m_other * v_other) / (m_self + m_other)


@numba.jit(nopython=True)
def _absorb_growth_jit(other_diameter):
    """Diameter gained by absorbing a body: a quarter of its diameter, rounded up."""
    return (other_diameter + 3) // 4


def density_color(mass: float, diameter: float):
    """
    Maps mass per unit area to a display color band. Higher density gives a
    higher light frequency (bluer). Purely cosmetic.
    """
    radius = diameter / 2
    density = mass / (math.pi * radius ** 2)
    for bound, color in constants.DENSITY_BANDS:
        if density <= bound:
            return color
    return constants.DENSEST_COLOR


class Body:
    """
    Represents a single circular particle in the simulation.

    The position is the origin of the body's bounding box (where it is drawn),
    not its center of mass. The velocity is a unit-clamped Vector2 applied once
    per tick.

    Data Contract:
    - Inputs:
        - position (array-like) - Bounding-box origin (x, y).
        - mass (float) - Must be > 0.
        - diameter (int) - Must be >= 1.
    - Invariants: Density and color are derived from mass and diameter on demand,
      never stored.
    """
    def __init__(self, position, mass: float, diameter: int):
        assert mass > 0, f"Body mass must be positive, got {mass}"
        assert diameter >= 1, f"Body diameter must be at least 1, got {diameter}"
        self.position = np.array(position, dtype=float)
        self.mass = float(mass)
        self.diameter = int(diameter)
        self.velocity = Vector2(0.0, 0.0)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    @property
    def radius(self) -> float:
        return self.diameter / 2

    @property
    def density(self) -> float:
        return self.mass / (math.pi * self.radius ** 2)

    @property
    def color(self):
        return density_color(self.mass, self.diameter)

    def center(self) -> np.ndarray:
        """The body's center: its position offset by the radius on both axes."""
        return self.position + self.radius

    def integrate(self):
        """
        Moves the body by its current velocity. Called once per tick before any
        force is accumulated, so forces computed this tick move the body next tick.
        """
        self.position[0] += self.velocity.x
        self.position[1] += self.velocity.y

    def move_to(self, x: float, y: float):
        self.position[0] = x
        self.position[1] = y

    def apply_velocity(self, v: Vector2):
        """Adds v to the current velocity (plain superposition)."""
        self.velocity.add(v)

    def apply_elastic_velocity(self, v: Vector2, other_mass: float):
        """
        Applies the outcome of a collision with a body of mass other_mass moving
        at v, using the one-dimensional elastic collision formula on each axis.
        The result is superimposed onto the current velocity.
        """
        new_x = _elastic_component_jit(self.velocity.x, self.mass, v.x, other_mass)
        new_y = _elastic_component_jit(self.velocity.y, self.mass, v.y, other_mass)
        self.apply_velocity(Vector2(new_x, new_y))

    def absorb(self, other: "Body"):
        """
        Takes all of other's mass and a quarter of its diameter (rounded up).
        Removing other from the world is the caller's job.
        """
        self.mass += other.mass
        self.diameter += _absorb_growth_jit(other.diameter)
        logger.debug(f"Body absorbed mass {other.mass}; now mass={self.mass}, diameter={self.diameter}")

    def contains_point(self, point) -> bool:
        cx, cy = self.center()
        return _circle_contains_jit(cx, cy, self.radius, float(point[0]), float(point[1]))

    def overlaps(self, other: "Body") -> bool:
        c1x, c1y = self.center()
        c2x, c2y = other.center()
        return _circles_overlap_jit(c1x, c1y, self.radius, c2x, c2y, other.radius)

    def __repr__(self) -> str:
        return (f"Body(position=({self.x}, {self.y}), mass={self.mass}, "
                f"diameter={self.diameter}, velocity={self.velocity})")
