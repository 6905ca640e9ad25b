from __future__ import annotations

import asyncio

import pytest

from skyflap.core.events import Event, EventBus, EventType
from skyflap.core.scheduler import AsyncioFrameScheduler, Debouncer
from skyflap.core.state import Action, GameState, StateMachine, action_keys, require_exhaustive
from skyflap.game import GameStateMachine

from conftest import ManualFrameScheduler


# State machine

def test_valid_transitions_notify_listeners() -> None:
    sm = StateMachine()
    seen: list[tuple[GameState, GameState]] = []
    sm.add_listener(lambda old, new: seen.append((old, new)))

    assert sm.transition(GameState.IDLE)
    assert sm.transition(GameState.PLAYING)
    assert sm.transition(GameState.GAME_OVER)

    assert seen == [
        (GameState.LOADING, GameState.IDLE),
        (GameState.IDLE, GameState.PLAYING),
        (GameState.PLAYING, GameState.GAME_OVER),
    ]


def test_invalid_transition_is_refused() -> None:
    sm = StateMachine()
    assert not sm.transition(GameState.PLAYING)
    assert sm.state is GameState.LOADING
    assert not sm.can_transition(GameState.GAME_OVER)


def test_removed_listener_is_not_called() -> None:
    sm = StateMachine()
    seen: list = []
    listener = lambda old, new: seen.append(new)  # noqa: E731
    sm.add_listener(listener)
    sm.remove_listener(listener)

    sm.transition(GameState.IDLE)

    assert seen == []


def test_require_exhaustive_names_missing_keys() -> None:
    with pytest.raises(RuntimeError, match="GAME_OVER"):
        require_exhaustive({GameState.LOADING: 1}, [GameState.LOADING, GameState.GAME_OVER], "test")


def test_game_dispatch_tables_cover_every_state() -> None:
    assert set(GameStateMachine._ACTIONS) == set(action_keys())
    assert set(GameStateMachine._ENTRIES) == set(GameState)
    assert (GameState.PLAYING, Action.PRIMARY) in GameStateMachine._ACTIONS


# Events

def test_subscribe_emit_unsubscribe() -> None:
    bus = EventBus()
    received: list[Event] = []
    unsubscribe = bus.subscribe(EventType.SCORE_CHANGED, received.append)

    bus.emit(Event(EventType.SCORE_CHANGED, data={"score": 1}))
    bus.emit(Event(EventType.LEVEL_UP, data={"level": 1}))
    unsubscribe()
    bus.emit(Event(EventType.SCORE_CHANGED, data={"score": 2}))

    assert [e.data for e in received] == [{"score": 1}]


def test_history_is_filtered_and_bounded() -> None:
    bus = EventBus(history_limit=3)

    bus.emit(Event(EventType.SCORE_CHANGED, data={"score": 1}))
    bus.emit(Event(EventType.GAME_OVER))
    for score in (2, 3):
        bus.emit(Event(EventType.SCORE_CHANGED, data={"score": score}))

    assert len(bus.get_history(EventType.GAME_OVER)) == 1
    assert [e.data["score"] for e in bus.get_history(EventType.SCORE_CHANGED)] == [2, 3]
    assert len(bus.get_history()) == 3


# Schedulers

def test_manual_scheduler_replaces_pending() -> None:
    scheduler = ManualFrameScheduler()
    calls: list[str] = []
    scheduler.schedule_next(10, lambda: calls.append("a"))
    scheduler.schedule_next(20, lambda: calls.append("b"))

    assert scheduler.run_pending()
    assert not scheduler.run_pending()
    assert calls == ["b"]
    assert scheduler.last_interval_ms == 20


def test_manual_scheduler_cancel() -> None:
    scheduler = ManualFrameScheduler()
    scheduler.schedule_next(10, lambda: None)
    scheduler.cancel()
    assert not scheduler.pending


def test_asyncio_scheduler_runs_and_cancels() -> None:
    calls: list[str] = []

    async def scenario() -> None:
        scheduler = AsyncioFrameScheduler()
        scheduler.schedule_next(5, lambda: calls.append("ran"))
        assert scheduler.pending
        await asyncio.sleep(0.05)
        assert not scheduler.pending

        scheduler.schedule_next(5, lambda: calls.append("cancelled"))
        scheduler.cancel()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert calls == ["ran"]


def test_debouncer_keeps_only_the_last_call() -> None:
    scheduler = ManualFrameScheduler()
    debouncer = Debouncer(150, scheduler)
    sizes: list[int] = []

    for size in (100, 200, 300):
        debouncer.trigger(lambda size=size: sizes.append(size))

    assert scheduler.last_interval_ms == 150
    scheduler.run_pending()
    assert sizes == [300]


def test_debouncer_flush_and_cancel() -> None:
    scheduler = ManualFrameScheduler()
    debouncer = Debouncer(150, scheduler)
    calls: list[str] = []

    debouncer.trigger(lambda: calls.append("flushed"))
    debouncer.flush()
    debouncer.trigger(lambda: calls.append("dropped"))
    debouncer.cancel()

    assert not scheduler.run_pending()
    assert calls == ["flushed"]
