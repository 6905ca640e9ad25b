from __future__ import annotations

import asyncio
import random
from pathlib import Path
from typing import Any, Callable

import numpy as np
import pytest

from skyflap.config.settings import Settings
from skyflap.core.events import EventBus
from skyflap.core.scheduler import Callback, FrameScheduler
from skyflap.engine.collision import RectCollisionEngine
from skyflap.engine.entity import SessionContext
from skyflap.engine.scene import Scene
from skyflap.game import GameStateMachine
from skyflap.graphics.draw_engine import BufferDrawEngine
from skyflap.resources.persistence import MemoryStorage
from skyflap.resources.storage import ResourceLoader, ResourceSpec, ResourceStorage, ResourceType


class FakeSound:
    """Sound that counts how often it was played."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.plays = 0

    def play(self) -> None:
        self.plays += 1


class FakeLoader(ResourceLoader):
    """Blank images of the requested size, recording sounds."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()

    def load(self, spec: ResourceSpec) -> Any:
        if Path(spec.src).name in self.fail_on:
            raise OSError(f"cannot open {spec.src}")
        if spec.type is ResourceType.IMAGE:
            return np.zeros((spec.height or 16, spec.width or 16, 4), dtype=np.uint8)
        return FakeSound(Path(spec.src).stem)


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class ManualFrameScheduler(FrameScheduler):
    """Frame scheduler that holds the pending callback until run_pending() is called.

    Used to step the loop deterministically.
    """

    def __init__(self) -> None:
        self._callback: Callback | None = None
        self.last_interval_ms: float | None = None
        self.scheduled_count = 0

    def schedule_next(self, interval_ms: float, callback: Callback) -> None:
        self._callback = callback
        self.last_interval_ms = interval_ms
        self.scheduled_count += 1

    def cancel(self) -> None:
        self._callback = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def run_pending(self) -> bool:
        """Run the pending callback.

        Returns:
            True if a callback ran
        """
        callback = self._callback
        if callback is None:
            return False
        self._callback = None
        callback()
        return True


class FakeSession:
    """Stands in for the game behind a SessionContext."""

    def __init__(self) -> None:
        self.playing = True
        self.game_overs = 0

    def notify_game_over(self) -> None:
        self.game_overs += 1
        self.playing = False

    def is_playing(self) -> bool:
        return self.playing


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(_env_file=None, storage_path=tmp_path / "storage.json")


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def resources() -> ResourceStorage:
    return ResourceStorage(FakeLoader())


@pytest.fixture()
def draw_engine(settings: Settings) -> BufferDrawEngine:
    return BufferDrawEngine(settings.canvas.width, settings.canvas.height)


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def context(settings: Settings, draw_engine: BufferDrawEngine, session: FakeSession) -> SessionContext:
    scene = Scene(draw_engine, RectCollisionEngine(), settings.canvas.width, settings.canvas.height)
    return SessionContext(
        scene=scene,
        draw_engine=draw_engine,
        settings=settings,
        notify_game_over=session.notify_game_over,
        is_playing=session.is_playing,
    )


@pytest.fixture()
def make_game(
    settings: Settings,
    draw_engine: BufferDrawEngine,
    resources: ResourceStorage,
    storage: MemoryStorage,
    scheduler: ManualFrameScheduler,
    clock: FakeClock,
    rng: random.Random,
) -> Callable[..., GameStateMachine]:
    """Build a game from the shared fakes; keyword arguments override them."""

    def _make(**overrides: Any) -> GameStateMachine:
        kwargs: dict[str, Any] = dict(
            settings=settings,
            draw_engine=draw_engine,
            resources=resources,
            storage=storage,
            scheduler=scheduler,
            event_bus=EventBus(),
            clock=clock,
            rng=rng,
        )
        kwargs.update(overrides)
        return GameStateMachine(**kwargs)

    return _make


@pytest.fixture()
def game(make_game: Callable[..., GameStateMachine]) -> GameStateMachine:
    """Prepared game sitting in IDLE."""
    g = make_game()
    asyncio.run(g.prepare())
    return g


@pytest.fixture()
def tick(clock: FakeClock, scheduler: ManualFrameScheduler) -> Callable[..., int]:
    """Advance the frame loop; stops early once nothing is scheduled."""

    def _tick(count: int = 1, step_ms: float = 16.0) -> int:
        ran = 0
        for _ in range(count):
            clock.advance(step_ms)
            if not scheduler.run_pending():
                break
            ran += 1
        return ran

    return _tick
