from __future__ import annotations

import asyncio
from typing import Callable

import numpy as np
import pytest

from skyflap.core.events import EventType
from skyflap.core.state import Action, GameState
from skyflap.errors import ResourceLoadError
from skyflap.game import GameStateMachine
from skyflap.resources.persistence import MemoryStorage
from skyflap.resources.storage import ResourceStorage, ResourceType

from conftest import FakeLoader


def test_manifest_lists_sheet_and_sounds(make_game: Callable[..., GameStateMachine]) -> None:
    manifest = make_game().manifest()

    assert manifest["spriteSheet"].type is ResourceType.IMAGE
    assert (manifest["spriteSheet"].width, manifest["spriteSheet"].height) == (288, 600)
    assert {name for name, spec in manifest.items() if spec.type is ResourceType.AUDIO} == {
        "dieSound", "flapSound", "hitSound", "pointSound", "swooshingSound",
    }


def test_prepare_loads_and_goes_idle(game: GameStateMachine) -> None:
    assert game.state is GameState.IDLE
    assert game.score == 0 and game.level == 0
    assert game.actor is not None and game.driver is not None
    assert game.resources.get("tubePattern").shape == (64, 52, 4)
    assert game.actor.y == pytest.approx(game.height / 2 - game.actor.height / 2)

    transitions = [e.data for e in game.event_bus.get_history(EventType.STATE_CHANGED)]
    assert transitions == [{"from": GameState.LOADING, "to": GameState.IDLE}]


def test_prepare_reads_stored_high_score(make_game: Callable[..., GameStateMachine]) -> None:
    game = make_game(storage=MemoryStorage({"highScore": 30}))
    asyncio.run(game.prepare())
    assert game.high_score == 30


@pytest.mark.parametrize("stored", [None, "junk", -5])
def test_unusable_high_score_reads_as_zero(make_game: Callable[..., GameStateMachine], stored) -> None:
    game = make_game(storage=MemoryStorage({"highScore": stored}))
    asyncio.run(game.prepare())
    assert game.high_score == 0


def test_failed_load_is_fatal(make_game: Callable[..., GameStateMachine]) -> None:
    game = make_game(resources=ResourceStorage(FakeLoader(fail_on={"hit.wav"})))

    with pytest.raises(ResourceLoadError) as excinfo:
        asyncio.run(game.prepare())

    assert excinfo.value.name == "hitSound"
    assert isinstance(excinfo.value.cause, OSError)
    assert game.state is GameState.LOADING
    assert game.actor is None


def test_action_is_ignored_while_loading(make_game: Callable[..., GameStateMachine], scheduler) -> None:
    game = make_game()
    game.handle_action(Action.PRIMARY)
    assert game.state is GameState.LOADING
    assert not scheduler.pending


def test_action_in_idle_starts_playing(game: GameStateMachine, scheduler) -> None:
    game.handle_action(Action.PRIMARY)

    assert game.state is GameState.PLAYING
    assert scheduler.pending
    assert scheduler.last_interval_ms == pytest.approx(1000.0 / 60)
    assert game.resources.get("swooshingSound").plays == 1


def test_action_while_playing_flaps(game: GameStateMachine) -> None:
    game.handle_action(Action.PRIMARY)
    game.actor.fall_velocity = 200.0

    game.handle_action(Action.PRIMARY)

    assert game.state is GameState.PLAYING
    assert game.actor.fall_velocity == -game.settings.actor.flap_speed
    assert game.resources.get("flapSound").plays == 1


def test_action_after_game_over_restarts(game: GameStateMachine, scheduler) -> None:
    game.handle_action(Action.PRIMARY)
    old_actor = game.actor
    game.score = 5
    game.game_over()
    assert game.state is GameState.GAME_OVER

    game.handle_action(Action.PRIMARY)

    assert game.state is GameState.PLAYING
    assert game.score == 0
    assert game.actor is not old_actor
    assert scheduler.pending


def test_falling_actor_ends_game_and_stops_loop(game: GameStateMachine, scheduler, tick: Callable[..., int]) -> None:
    game.handle_action(Action.PRIMARY)

    ran = tick(500)

    assert ran < 500
    assert game.state is GameState.GAME_OVER
    assert not scheduler.pending
    assert game.resources.get("dieSound").plays == 1
    assert len(game.event_bus.get_history(EventType.GAME_OVER)) == 1


def test_game_over_is_idempotent(game: GameStateMachine) -> None:
    game.handle_action(Action.PRIMARY)

    game.game_over()
    game.game_over()

    assert game.state is GameState.GAME_OVER
    assert len(game.event_bus.get_history(EventType.GAME_OVER)) == 1


def test_game_over_outside_playing_is_ignored(game: GameStateMachine) -> None:
    game.game_over()
    assert game.state is GameState.IDLE
    assert game.event_bus.get_history(EventType.GAME_OVER) == []


def test_loop_uses_elapsed_time(game: GameStateMachine, tick: Callable[..., int]) -> None:
    game.handle_action(Action.PRIMARY)
    y0 = game.actor.y

    tick(1, step_ms=100.0)

    # One 0.1s step of gravity from rest
    g = game.settings.gravitation
    assert game.actor.fall_velocity == pytest.approx(g * 0.1)
    assert game.actor.y == pytest.approx(y0 + g * 0.1 * 0.1)


def test_high_score_survives_restart(
    make_game: Callable[..., GameStateMachine], scheduler, tick: Callable[..., int]
) -> None:
    storage = MemoryStorage({"highScore": 30})
    game = make_game(storage=storage)
    asyncio.run(game.prepare())
    game.handle_action(Action.PRIMARY)
    game.score = 42
    tick(1)
    game.game_over()

    restarted = make_game(storage=storage)
    asyncio.run(restarted.prepare())

    assert storage.load("highScore") == 42
    assert restarted.high_score == 42


def test_lower_score_keeps_high_score(make_game: Callable[..., GameStateMachine], tick: Callable[..., int]) -> None:
    storage = MemoryStorage({"highScore": 30})
    game = make_game(storage=storage)
    asyncio.run(game.prepare())
    game.handle_action(Action.PRIMARY)
    game.score = 12
    tick(1)

    assert game.high_score == 30
    assert storage.load("highScore") == 30


def test_overlay_is_drawn_in_idle(game: GameStateMachine) -> None:
    buffer = game.draw_engine.buffer
    # Overlay text is white
    assert np.any(np.all(buffer == 255, axis=2))


def test_resize_keeps_progress_and_state(game: GameStateMachine) -> None:
    game.score = 3

    game.resize(800, 600)

    assert game.state is GameState.IDLE
    assert game.score == 3
    assert (game.draw_engine.width, game.draw_engine.height) == (800, 600)
    assert (game.scene.width, game.scene.height) == (800, 600)
    tiles = game.backgrounds
    assert tiles[-1].initial_x >= 800
    assert all(tile.height == 600 for tile in tiles)
    assert game.driver.pairs[-1].x >= 800 + game.driver.lookahead
    assert game.event_bus.get_history(EventType.RESIZED)[-1].data == {"width": 800, "height": 600}


def test_resize_while_playing_does_not_start_another_loop(game: GameStateMachine, scheduler) -> None:
    game.handle_action(Action.PRIMARY)
    scheduled = scheduler.scheduled_count

    game.resize(600, 700)

    assert game.state is GameState.PLAYING
    assert scheduler.scheduled_count == scheduled
    assert scheduler.pending


def test_resize_to_shorter_window_keeps_gaps_on_screen(game: GameStateMachine) -> None:
    first = game.driver.pairs[0]
    first.gap_y = 400.0
    first.gap = 150.0

    game.resize(480, 300)

    border = game.driver.border_offset
    for pair in game.driver.pairs:
        assert pair.gap_y >= border
        if border + pair.gap <= 300 - border:
            assert pair.gap_y + pair.gap <= 300 - border
        else:
            assert pair.gap_y == border


def test_resize_keeps_leveled_background_speed(game: GameStateMachine) -> None:
    for tile in game.backgrounds:
        tile.increase_speed(40.0)

    game.resize(700, 640)

    base = game.settings.background.speed
    assert all(tile.speed == pytest.approx(base + 40.0) for tile in game.backgrounds)


def test_reset_restores_base_background_speed(game: GameStateMachine) -> None:
    for tile in game.backgrounds:
        tile.increase_speed(40.0)

    game.reset()

    base = game.settings.background.speed
    assert all(tile.speed == pytest.approx(base) for tile in game.backgrounds)
