# world.py

import math
import logging
import threading
from collections import namedtuple
import numba
import numpy as np
import constants
from body import Body, _absorb_growth_jit, _circles_overlap_jit, _elastic_component_jit
from vector import Vector2, _clamp_unit_jit

logger = logging.getLogger("simple_space")

# Immutable per-body state handed to the renderer.
BodyView = namedtuple('BodyView', ['x', 'y', 'diameter', 'mass', 'color'])


class CapacityExceeded(Exception):
    """Raised when a spawn is attempted while the world holds its maximum body count."""
    def __init__(self, capacity: int):
        super().__init__(f"World is full ({capacity} bodies)")
        self.capacity = capacity


@numba.jit(nopython=True)
def _pair_attraction_jit(c1x, c1y, m1, c2x, c2y, m2, g_const):
    """
    Newtonian attraction between two point masses, returned as the per-tick
    velocity change of each body. Body 1 is pulled along the angle towards
    body 2 and body 2 along the opposite angle.
    Centers must not coincide.
    """
    dx = c2x - c1x
    dy = c2y - c1y
    raw_force = (g_const * m1 * m2) / (dx * dx + dy * dy)
    angle = math.atan2(dy, dx)
    return (
        (raw_force * math.cos(angle)) / m1,
        (raw_force * math.sin(angle)) / m1,
        (raw_force * math.cos(angle + math.pi)) / m2,
        (raw_force * math.sin(angle + math.pi)) / m2,
    )


@numba.jit(nopython=True)
def _add_velocity_jit(velocities, i, dx, dy):
    """Superimposes a clamped (dx, dy) onto body i's velocity, clamping the sum."""
    velocities[i, 0] = _clamp_unit_jit(velocities[i, 0] + _clamp_unit_jit(dx))
    velocities[i, 1] = _clamp_unit_jit(velocities[i, 1] + _clamp_unit_jit(dy))


@numba.jit(nopython=True)
def _gravity_pass_jit(positions, velocities, masses, diameters, absorbed, g_const):
    """
    Accumulates pairwise attraction over every pair i < j, in order.

    Bodies whose centers coincide exactly are merged instead, since their
    distance would be zero: the strictly heavier body absorbs, and on equal mass
    the later body absorbs the earlier. A body absorbed earlier in the pass
    still attracts and is attracted, but it cannot merge again; a coincident
    pair involving it is skipped.
    Returns the number of merges.
    """
    n = positions.shape[0]
    merges = 0
    for i in range(n):
        for j in range(i + 1, n):
            c1x = positions[i, 0] + diameters[i] / 2
            c1y = positions[i, 1] + diameters[i] / 2
            c2x = positions[j, 0] + diameters[j] / 2
            c2y = positions[j, 1] + diameters[j] / 2

            if c1x == c2x and c1y == c2y:
                if absorbed[i] or absorbed[j]:
                    continue
                if masses[i] > masses[j]:
                    keep, gone = i, j
                else:
                    keep, gone = j, i
                masses[keep] += masses[gone]
                diameters[keep] += _absorb_growth_jit(diameters[gone])
                absorbed[gone] = True
                merges += 1
                continue

            ax1, ay1, ax2, ay2 = _pair_attraction_jit(c1x, c1y, masses[i], c2x, c2y, masses[j], g_const)
            _add_velocity_jit(velocities, i, ax1, ay1)
            _add_velocity_jit(velocities, j, ax2, ay2)
    return merges


@numba.jit(nopython=True)
def _wall_pass_jit(positions, velocities, diameters, width, height):
    """
    Reflects bodies off the viewport edges. Only one axis is handled per tick:
    X first, Y only if X did not collide. A body found past an edge is first
    snapped back inside, one pixel clear of it.
    """
    for i in range(positions.shape[0]):
        x = positions[i, 0]
        y = positions[i, 1]
        d = diameters[i]
        vx = velocities[i, 0]
        vy = velocities[i, 1]
        change_x = vx
        change_y = vy
        hit = False

        if x <= 0 or x + d >= width:
            if x < 0:
                positions[i, 0] = 1.0
            elif x + d > width:
                positions[i, 0] = width - d - 1
            change_x = -vx
            hit = True
        elif y <= 0 or y + d >= height:
            if y < 0:
                positions[i, 1] = 1.0
            elif y + d > height:
                positions[i, 1] = height - d - 1
            change_y = -vy
            hit = True

        if hit:
            _add_velocity_jit(velocities, i, -vx, -vy)
            _add_velocity_jit(velocities, i, change_x, change_y)


@numba.jit(nopython=True)
def _collision_pass_jit(positions, velocities, masses, diameters):
    """
    Approximate elastic collision for every overlapping pair. Both pre-collision
    velocities are captured first so the order within a pair does not matter.
    Each body cancels its own velocity, then takes the elastic response to the
    other's.
    """
    n = positions.shape[0]
    for i in range(n):
        r1 = diameters[i] / 2
        for j in range(i + 1, n):
            r2 = diameters[j] / 2
            if not _circles_overlap_jit(positions[i, 0] + r1, positions[i, 1] + r1, r1,
                                        positions[j, 0] + r2, positions[j, 1] + r2, r2):
                continue
            v1x = velocities[i, 0]
            v1y = velocities[i, 1]
            v2x = velocities[j, 0]
            v2y = velocities[j, 1]

            _add_velocity_jit(velocities, i, -v1x, -v1y)
            _add_velocity_jit(
                velocities, i,
                _elastic_component_jit(velocities[i, 0], masses[i], v2x, masses[j]),
                _elastic_component_jit(velocities[i, 1], masses[i], v2y, masses[j]),
            )

            _add_velocity_jit(velocities, j, -v2x, -v2y)
            _add_velocity_jit(
                velocities, j,
                _elastic_component_jit(velocities[j, 0], masses[j], v1x, masses[i]),
                _elastic_component_jit(velocities[j, 1], masses[j], v1y, masses[i]),
            )


class World:
    """
    Owns the live bodies and advances them one tick at a time.

    Every public operation holds a single world-wide lock, so a tick never
    interleaves with a spawn, a point query or a render snapshot.

    Data Contract:
    - Inputs: config (dict) - The 'simulation' section of the config file. Missing
      keys fall back to the defaults in constants.
    - Side Effects: tick() mutates body positions, velocities and membership, and
      notifies registered listeners afterwards.
    - Invariants: The number of live bodies never exceeds max_bodies. Bodies
      absorbed during a tick are gone from the world once the tick returns.
    """
    def __init__(self, config: dict = None):
        config = config or {}
        self.gravity_constant = config.get('gravity_constant', constants.DEFAULT_GRAVITY_CONSTANT)
        self.max_bodies = config.get('max_bodies', constants.DEFAULT_MAX_BODIES)
        self._gravity_enabled = True
        self._bodies = []
        self._listeners = []
        self._lock = threading.Lock()

        logger.info(f"World created: capacity={self.max_bodies}, G={self.gravity_constant}")

    # --- Accessors and mutators driven by the host ---

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._bodies)

    def is_full(self) -> bool:
        with self._lock:
            return len(self._bodies) >= self.max_bodies

    def spawn(self, position, mass: float, diameter: int, launch: Vector2 = None) -> Body:
        """
        Creates a body at rest and adds it to the world. If launch is given it is
        applied to the new body as its initial kick.

        Raises CapacityExceeded, without changing anything, if the world is full.
        """
        with self._lock:
            if len(self._bodies) >= self.max_bodies:
                raise CapacityExceeded(self.max_bodies)
            body = Body(position, mass, diameter)
            if launch is not None:
                body.apply_velocity(launch)
            self._bodies.append(body)
            count = len(self._bodies)

        logger.info(f"Spawned body at ({body.x:.1f}, {body.y:.1f}) with mass={body.mass}, diameter={body.diameter}. Count: {count}.")
        logger.debug(f"Initial velocity: {body.velocity}")
        return body

    def contains_point(self, point) -> bool:
        with self._lock:
            return any(body.contains_point(point) for body in self._bodies)

    def set_gravity_enabled(self, enabled: bool):
        with self._lock:
            self._gravity_enabled = bool(enabled)
        logger.info(f"Gravity {'enabled' if enabled else 'disabled'}.")

    def is_gravity_enabled(self) -> bool:
        with self._lock:
            return self._gravity_enabled

    def toggle_gravity(self) -> bool:
        with self._lock:
            self._gravity_enabled = not self._gravity_enabled
            enabled = self._gravity_enabled
        logger.info(f"Gravity {'enabled' if enabled else 'disabled'}.")
        return enabled

    def bodies(self):
        """Returns an immutable snapshot of every live body for rendering."""
        with self._lock:
            return [BodyView(b.x, b.y, b.diameter, b.mass, b.color) for b in self._bodies]

    def add_listener(self, listener):
        """Registers a zero-argument callable invoked after every tick."""
        with self._lock:
            self._listeners.append(listener)

    # --- Physics ---

    def tick(self, width: float, height: float):
        """
        Runs one full physics step against a viewport of the given size:
        momentum, gravity (with absorption), wall collisions, body-body
        collisions, then removal of absorbed bodies.

        Body state is copied into arrays for the JIT-compiled passes and written
        back once they finish, so the passes see exactly the pairwise order of
        the body list.
        """
        with self._lock:
            bodies = self._bodies
            if bodies:
                positions, velocities, masses, diameters = self._gather(bodies)
                absorbed = np.zeros(len(bodies), dtype=np.bool_)

                positions += velocities

                if self._gravity_enabled:
                    _gravity_pass_jit(positions, velocities, masses, diameters, absorbed, self.gravity_constant)

                _wall_pass_jit(positions, velocities, diameters, float(width), float(height))
                _collision_pass_jit(positions, velocities, masses, diameters)

                self._scatter(bodies, positions, velocities, masses, diameters)

                if absorbed.any():
                    self._bodies = [b for b, gone in zip(bodies, absorbed) if not gone]
                    logger.info(f"{int(absorbed.sum())} body(ies) absorbed. New count: {len(self._bodies)}.")

            listeners = list(self._listeners)

        for listener in listeners:
            listener()

    @staticmethod
    def _gather(bodies):
        positions = np.array([b.position for b in bodies], dtype=np.float64)
        velocities = np.array([(b.velocity.x, b.velocity.y) for b in bodies], dtype=np.float64)
        masses = np.array([b.mass for b in bodies], dtype=np.float64)
        diameters = np.array([b.diameter for b in bodies], dtype=np.int64)
        return positions, velocities, masses, diameters

    @staticmethod
    def _scatter(bodies, positions, velocities, masses, diameters):
        for i, body in enumerate(bodies):
            body.position[:] = positions[i]
            body.velocity.set(velocities[i, 0], velocities[i, 1])
            body.mass = float(masses[i])
            body.diameter = int(diameters[i])
