from __future__ import annotations

import pytest

from skyflap.engine.actor import MAX_ROTATION, MIN_ROTATION, Actor
from skyflap.engine.background import BackgroundTile
from skyflap.engine.entity import SessionContext
from skyflap.engine.obstacles import ObstaclePair
from skyflap.engine.physics import PhysicsEngine

from conftest import FakeSound, FakeSession


def _actor(context: SessionContext, y: float = 100.0, gravitation: float = 1500.0, **kwargs) -> Actor:
    return Actor(
        context,
        x=80.0,
        y=y,
        width=51.0,
        height=36.0,
        physics_engine=PhysicsEngine(gravitation),
        flap_speed=480.0,
        rotation_speed=0.12,
        **kwargs,
    )


def test_physics_step_adds_gravity_then_moves(context: SessionContext) -> None:
    actor = _actor(context, y=100.0)
    actor.fall_velocity = 50.0

    PhysicsEngine(1500.0).update(actor, 0.1)

    assert actor.fall_velocity == pytest.approx(50.0 + 150.0)
    assert actor.y == pytest.approx(100.0 + 200.0 * 0.1)


def test_physics_ignores_entities_that_do_not_fall(context: SessionContext) -> None:
    pair = ObstaclePair(context, x=100.0, gap_y=100.0, gap=150.0, width=78.0, speed=0.0)
    PhysicsEngine(1500.0).update(pair, 0.5)
    assert pair.y == 0.0


def test_actor_is_clamped_to_top(context: SessionContext) -> None:
    actor = _actor(context, y=5.0)
    actor.fall_velocity = -1000.0

    actor.update(0.1)

    assert actor.y == 0


def test_flap_sets_upward_velocity_and_plays(context: SessionContext) -> None:
    flap = FakeSound()
    actor = _actor(context, flap_sound=flap)
    actor.fall_velocity = 300.0

    actor.flap()

    assert actor.fall_velocity == -480.0
    assert flap.plays == 1


def test_floor_ends_game_exactly_once(context: SessionContext, session: FakeSession) -> None:
    die = FakeSound()
    actor = _actor(context, y=context.scene.height - 36.0 - 1.0, die_sound=die)

    for _ in range(5):
        actor.update(0.05)

    assert session.game_overs == 1
    assert die.plays == 1


def test_obstacle_hit_ends_game(context: SessionContext, session: FakeSession) -> None:
    hit = FakeSound()
    actor = _actor(context, hit_sound=hit)
    pair = ObstaclePair(context, x=80.0, gap_y=300.0, gap=150.0, width=78.0, speed=0.0)

    actor.collide(pair)

    assert session.game_overs == 1
    assert hit.plays == 1


def test_background_contact_is_harmless(context: SessionContext, session: FakeSession) -> None:
    actor = _actor(context)
    tile = BackgroundTile(context, x=0.0, y=0.0, width=300.0, height=640.0, speed=10.0)

    actor.collide(tile)

    assert session.game_overs == 0


def test_no_crash_reported_outside_playing(context: SessionContext, session: FakeSession) -> None:
    session.playing = False
    actor = _actor(context, y=context.scene.height)

    actor.update(0.016)

    assert session.game_overs == 0


@pytest.mark.parametrize(
    "velocity, expected",
    [(0.0, 0.0), (100.0, 12.0), (10_000.0, MAX_ROTATION), (-10_000.0, MIN_ROTATION)],
)
def test_rotation_follows_velocity_within_limits(context: SessionContext, velocity: float, expected: float) -> None:
    actor = _actor(context)
    actor.fall_velocity = velocity
    assert actor.rotation == pytest.approx(expected)
