# vector.py

import numba
import numpy as np

# A velocity component may never move a body more than one pixel per tick.
COMPONENT_LIMIT = 1.0


@numba.jit(nopython=True)
def _clamp_unit_jit(value):
    """Clamps one component to [-COMPONENT_LIMIT, COMPONENT_LIMIT]."""
    if value > COMPONENT_LIMIT:
        return COMPONENT_LIMIT
    if value < -COMPONENT_LIMIT:
        return -COMPONENT_LIMIT
    return value


class Vector2:
    """
    A per-tick displacement with both components held in [-1, 1].

    This is not a true velocity: it carries no time reference. The owner applies
    it to its position once per tick, which is why the unit bound guarantees a
    body never skips a pixel along its path (no tunnelling through walls or other
    bodies between ticks).

    Data Contract:
    - Inputs: x, y (float) - Requested components, clamped on storage.
    - Invariants: -1 <= x <= 1 and -1 <= y <= 1 after every mutation.
    """
    __slots__ = ('x', 'y')

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.set(x, y)

    def set(self, x: float, y: float):
        """Stores x and y, each clamped to the unit range independently."""
        self.x = _clamp_unit_jit(float(x))
        self.y = _clamp_unit_jit(float(y))

    def add(self, other: "Vector2"):
        """Superimposes other onto this vector, saturating at the unit bound."""
        self.set(self.x + other.x, self.y + other.y)

    def negate(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def duplicate(self) -> "Vector2":
        return Vector2(self.x, self.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def __eq__(self, other):
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __repr__(self) -> str:
        return f"Vector2(x={self.x}, y={self.y})"
