import math
import threading
import time
import pytest
from body import Body
from vector import Vector2
from world import World, CapacityExceeded, BodyView, _wall_pass_jit

WIDTH, HEIGHT = 800, 600


def resolve_walls(body, width, height):
    """Runs the wall pass on a single body and writes the result back to it."""
    positions, velocities, masses, diameters = World._gather([body])
    _wall_pass_jit(positions, velocities, diameters, float(width), float(height))
    World._scatter([body], positions, velocities, masses, diameters)


@pytest.fixture
def world():
    return World({'gravity_constant': 5e-3, 'max_bodies': 10})


def test_defaults_without_config():
    w = World()
    assert w.max_bodies == 10
    assert w.gravity_constant == 5e-3
    assert w.is_gravity_enabled()


def test_spawn_adds_resting_body(world):
    body = world.spawn((100, 100), mass=20, diameter=10)
    assert world.count == 1
    assert body.velocity == Vector2(0, 0)


def test_spawn_with_launch_kick(world):
    body = world.spawn((100, 100), mass=20, diameter=10, launch=Vector2(0.2, -3))
    assert body.velocity == Vector2(0.2, -1.0)


def test_capacity_exceeded_leaves_world_unchanged(world):
    for i in range(10):
        world.spawn((i * 50, 100), mass=1, diameter=4)
    assert world.is_full()
    with pytest.raises(CapacityExceeded) as excinfo:
        world.spawn((700, 500), mass=1, diameter=4)
    assert excinfo.value.capacity == 10
    assert world.count == 10


def test_absorption_frees_capacity(world):
    small = World({'max_bodies': 2})
    small.spawn((50, 50), mass=5, diameter=10)
    small.spawn((52, 52), mass=3, diameter=6)
    assert small.is_full()
    small.tick(WIDTH, HEIGHT)
    assert not small.is_full()
    small.spawn((300, 300), mass=1, diameter=2)
    assert small.count == 2


def test_contains_point(world):
    world.spawn((100, 100), mass=1, diameter=20)
    assert world.contains_point((110, 110))
    assert not world.contains_point((300, 300))


def test_gravity_toggle(world):
    world.set_gravity_enabled(False)
    assert not world.is_gravity_enabled()
    assert world.toggle_gravity() is True
    assert world.is_gravity_enabled()


def test_bodies_snapshot(world):
    world.spawn((100, 120), mass=2, diameter=10)
    views = world.bodies()
    assert len(views) == 1
    view = views[0]
    assert isinstance(view, BodyView)
    assert (view.x, view.y, view.diameter, view.mass) == (100.0, 120.0, 10, 2.0)
    with pytest.raises(AttributeError):
        view.x = 5


def test_tick_integrates_momentum(world):
    world.set_gravity_enabled(False)
    body = world.spawn((10, 10), mass=1, diameter=4, launch=Vector2(0.5, -0.5))
    world.tick(WIDTH, HEIGHT)
    assert body.x == pytest.approx(10.5)
    assert body.y == pytest.approx(9.5)


def test_gravity_off_is_idempotent(world):
    world.set_gravity_enabled(False)
    a = world.spawn((100, 100), mass=10, diameter=10)
    b = world.spawn((300, 300), mass=10, diameter=10)
    world.tick(WIDTH, HEIGHT)
    world.tick(WIDTH, HEIGHT)
    assert (a.x, a.y) == (100.0, 100.0)
    assert (b.x, b.y) == (300.0, 300.0)
    assert a.velocity == Vector2(0, 0)


def test_gravity_is_symmetric_for_equal_masses(world):
    a = world.spawn((100, 100), mass=10, diameter=10)
    b = world.spawn((130, 140), mass=10, diameter=10)
    world.tick(WIDTH, HEIGHT)

    va, vb = a.velocity, b.velocity
    assert math.hypot(va.x, va.y) == pytest.approx(math.hypot(vb.x, vb.y))
    assert va.x == pytest.approx(-vb.x)
    assert va.y == pytest.approx(-vb.y)
    # a is pulled towards b
    assert va.x > 0 and va.y > 0
    # F = G * m * m / d^2 = 5e-3 * 100 / 2500, spread along a 3-4-5 direction
    accel = 5e-3 * 100 / 2500 / 10
    assert va.x == pytest.approx(accel * 0.6)
    assert va.y == pytest.approx(accel * 0.8)


def test_gravity_scales_with_inverse_mass(world):
    heavy = world.spawn((100, 100), mass=40, diameter=10)
    light = world.spawn((200, 100), mass=10, diameter=10)
    world.tick(WIDTH, HEIGHT)
    assert light.velocity.x == pytest.approx(-4 * heavy.velocity.x)
    assert heavy.velocity.y == pytest.approx(0.0, abs=1e-12)


def test_coincident_bodies_merge(world):
    world.spawn((50, 50), mass=5, diameter=10)
    world.spawn((52, 52), mass=3, diameter=6)
    world.tick(WIDTH, HEIGHT)

    assert world.count == 1
    survivor = world.bodies()[0]
    assert survivor.mass == 8
    assert survivor.diameter == 10 + math.ceil(6 / 4)


def test_heavier_later_body_absorbs_earlier(world):
    world.spawn((52, 52), mass=3, diameter=6)
    world.spawn((50, 50), mass=5, diameter=10)
    world.tick(WIDTH, HEIGHT)
    survivor = world.bodies()[0]
    assert (survivor.x, survivor.y, survivor.mass) == (50.0, 50.0, 8.0)


def test_equal_mass_merge_keeps_later_body(world):
    world.spawn((50, 50), mass=4, diameter=10)
    world.spawn((53, 53), mass=4, diameter=4)
    world.tick(WIDTH, HEIGHT)
    survivor = world.bodies()[0]
    assert (survivor.x, survivor.y) == (53.0, 53.0)
    assert survivor.mass == 8
    assert survivor.diameter == 4 + math.ceil(10 / 4)


def test_absorbed_body_does_not_merge_again(world):
    # The first body is absorbed by the second; it must not go on to absorb the
    # third, which shares its center, or its mass would be counted twice.
    world.spawn((52, 52), mass=3, diameter=6)
    world.spawn((50, 50), mass=5, diameter=10)
    world.spawn((54, 54), mass=1, diameter=2)
    world.tick(WIDTH, HEIGHT)
    views = world.bodies()
    assert len(views) == 2
    assert sorted(v.mass for v in views) == [1.0, 8.0]


def test_absorbed_body_still_attracts_for_rest_of_tick(world):
    world.spawn((50, 50), mass=5, diameter=10)
    world.spawn((52, 52), mass=3, diameter=6)
    far = world.spawn((300, 51), mass=1, diameter=10)
    world.tick(WIDTH, HEIGHT)

    # The survivor (mass 8, now centered at (56, 56)) and the absorbed body
    # (mass 3, still centered at (55, 55)) both pull on the far body this tick.
    g = 5e-3
    survivor_pull = g * 8 / 249 ** 2
    dist_sq = 250 ** 2 + 1
    absorbed_pull = g * 3 / dist_sq
    dist = math.sqrt(dist_sq)
    assert far.velocity.x == pytest.approx(-survivor_pull - absorbed_pull * 250 / dist, rel=1e-9)
    assert far.velocity.y == pytest.approx(-absorbed_pull * 1 / dist, rel=1e-6)
    assert world.count == 2


def test_no_merge_without_gravity(world):
    world.set_gravity_enabled(False)
    world.spawn((50, 50), mass=5, diameter=10)
    world.spawn((52, 52), mass=3, diameter=6)
    world.tick(WIDTH, HEIGHT)
    assert world.count == 2


def test_wall_reflection_left_edge():
    body = Body((-1, 50), mass=1, diameter=10)
    body.apply_velocity(Vector2(-0.3, 0.1))
    resolve_walls(body, 100, 100)
    assert body.x == 1
    assert body.y == 50
    assert body.velocity.x == pytest.approx(0.3)
    assert body.velocity.y == pytest.approx(0.1)


def test_wall_reflection_right_edge():
    body = Body((95, 50), mass=1, diameter=10)
    body.apply_velocity(Vector2(0.4, 0.0))
    resolve_walls(body, 100, 100)
    assert body.x == 100 - 10 - 1
    assert body.velocity.x == pytest.approx(-0.4)


def test_wall_reflection_bottom_edge():
    body = Body((50, 92), mass=1, diameter=10)
    body.apply_velocity(Vector2(0.2, 0.6))
    resolve_walls(body, 100, 100)
    assert body.y == 100 - 10 - 1
    assert body.velocity.x == pytest.approx(0.2)
    assert body.velocity.y == pytest.approx(-0.6)


def test_wall_reflection_top_edge():
    body = Body((50, -2), mass=1, diameter=10)
    body.apply_velocity(Vector2(0.2, -0.6))
    resolve_walls(body, 100, 100)
    assert (body.x, body.y) == (50, 1)
    assert body.velocity.x == pytest.approx(0.2)
    assert body.velocity.y == pytest.approx(0.6)


def test_wall_touching_edge_reflects_without_moving():
    body = Body((0, 50), mass=1, diameter=10)
    body.apply_velocity(Vector2(-0.5, 0.0))
    resolve_walls(body, 100, 100)
    assert body.x == 0
    assert body.velocity.x == pytest.approx(0.5)


def test_corner_resolves_only_x_axis():
    body = Body((-1, -1), mass=1, diameter=10)
    body.apply_velocity(Vector2(-0.3, -0.2))
    resolve_walls(body, 100, 100)
    assert (body.x, body.y) == (1, -1)
    assert body.velocity.x == pytest.approx(0.3)
    assert body.velocity.y == pytest.approx(-0.2)


def test_inside_body_is_untouched_by_walls():
    body = Body((40, 40), mass=1, diameter=10)
    body.apply_velocity(Vector2(-0.3, 0.2))
    resolve_walls(body, 100, 100)
    assert (body.x, body.y) == (40, 40)
    assert body.velocity == Vector2(-0.3, 0.2)


def test_tick_reflects_off_wall(world):
    world.set_gravity_enabled(False)
    body = world.spawn((0.5, 300), mass=1, diameter=10, launch=Vector2(-1, 0))
    world.tick(WIDTH, HEIGHT)
    assert body.x == 1
    assert body.velocity.x == pytest.approx(1.0)


def test_head_on_equal_masses_exchange_velocity(world):
    world.set_gravity_enabled(False)
    a = world.spawn((100, 100), mass=5, diameter=10, launch=Vector2(0.5, 0))
    b = world.spawn((108, 100), mass=5, diameter=10, launch=Vector2(-0.5, 0))
    world.tick(WIDTH, HEIGHT)
    assert a.velocity.x == pytest.approx(-0.5)
    assert b.velocity.x == pytest.approx(0.5)
    assert a.velocity.y == 0.0
    assert b.velocity.y == 0.0


def test_collision_with_resting_heavier_body(world):
    world.set_gravity_enabled(False)
    light = world.spawn((100, 100), mass=1, diameter=10, launch=Vector2(0.6, 0))
    heavy = world.spawn((108, 100), mass=3, diameter=10)
    world.tick(WIDTH, HEIGHT)
    # each body starts from rest and takes 2 * m_other * v_other / (m + m_other)
    assert light.velocity.x == pytest.approx(0.0)
    assert heavy.velocity.x == pytest.approx(2 * 1 * 0.6 / 4)


def test_listeners_run_after_tick_without_lock(world):
    seen = []
    world.add_listener(lambda: seen.append(world.count))
    world.spawn((100, 100), mass=1, diameter=4)
    world.tick(WIDTH, HEIGHT)
    assert seen == [1]


def test_concurrent_spawns_and_ticks_respect_capacity():
    w = World({'max_bodies': 10})
    w.set_gravity_enabled(False)
    rejected = []

    def spawner(offset):
        for i in range(10):
            try:
                w.spawn((offset + i * 15, 50 + offset), mass=1, diameter=4)
            except CapacityExceeded:
                rejected.append(offset)
            w.tick(WIDTH, HEIGHT)

    threads = [threading.Thread(target=spawner, args=(k * 100,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert w.count == 10
    assert len(rejected) == 30


def test_listener_added_during_tick_waits_for_next_tick(world):
    calls = []

    def late():
        calls.append('late')

    def first():
        calls.append('first')
        world.add_listener(late)

    world.add_listener(first)
    world.tick(WIDTH, HEIGHT)
    assert calls == ['first']
    world.tick(WIDTH, HEIGHT)
    assert calls == ['first', 'first', 'late']


def test_full_world_tick_fits_in_tick_interval():
    config = {'max_bodies': 10, 'tick_interval_ms': 1}
    w = World(config)
    for i in range(10):
        w.spawn((40 + 70 * i, 100 + 40 * (i % 4)), mass=20, diameter=10)
    for _ in range(100):
        w.tick(WIDTH, HEIGHT)

    ticks = 1000
    start = time.perf_counter()
    for _ in range(ticks):
        w.tick(WIDTH, HEIGHT)
    per_tick = (time.perf_counter() - start) / ticks

    assert w.count == 10
    assert per_tick < config['tick_interval_ms'] / 1000
