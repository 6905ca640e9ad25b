"""
GameStateMachine: the top-level orchestrator of SKYFLAP.

Owns the game state, score, level and high score, builds a fresh scene
for every session and runs the self-rescheduling frame loop while
PLAYING. Input engines call handle_action(); what it does depends on the
current state.
"""

from typing import Any, Callable, Optional
import logging
import random
import time

from skyflap.config.settings import Settings
from skyflap.core.events import Event, EventBus, EventType
from skyflap.core.scheduler import FrameScheduler
from skyflap.core.state import Action, GameState, StateMachine, action_keys, require_exhaustive
from skyflap.engine.actor import Actor
from skyflap.engine.background import BackgroundTile, generate_backgrounds
from skyflap.engine.collision import RectCollisionEngine
from skyflap.engine.entity import SessionContext
from skyflap.engine.obstacles import ObstacleDriver
from skyflap.engine.physics import PhysicsEngine
from skyflap.engine.scene import Scene
from skyflap.graphics.components import CenteredTextComponent, TextComponent, WithScoresComponent
from skyflap.graphics.draw_engine import DrawEngine
from skyflap.graphics.primitives import crop_image
from skyflap.resources.persistence import KeyValueStorage
from skyflap.resources.storage import Manifest, ResourceSpec, ResourceStorage, ResourceType

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "highScore"
# Points needed per level
POINTS_PER_LEVEL = 10


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GameStateMachine:
    """
    Drives one game from loading to game over, over and over.

    States:
        LOADING -> IDLE (prepare) -> PLAYING (start) -> GAME_OVER
        GAME_OVER -> PLAYING (start, which resets first)
    """

    def __init__(
        self,
        settings: Settings,
        draw_engine: DrawEngine,
        resources: ResourceStorage,
        storage: KeyValueStorage,
        scheduler: FrameScheduler,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], float] = _monotonic_ms,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.draw_engine = draw_engine
        self.resources = resources
        self.storage = storage
        self.event_bus = event_bus or EventBus()
        self._scheduler = scheduler
        self._clock = clock
        self._rng = rng or random.Random()

        self._state_machine = StateMachine(GameState.LOADING)
        self._state_machine.add_listener(self._on_state_changed)

        self.score = 0
        self.level = 0
        self.high_score = 0
        self._last_update: Optional[float] = None

        self.width = settings.canvas.width
        self.height = settings.canvas.height

        # Session objects, rebuilt by reset()
        self.physics_engine: Optional[PhysicsEngine] = None
        self.collision_engine: Optional[RectCollisionEngine] = None
        self.scene: Optional[Scene] = None
        self.context: Optional[SessionContext] = None
        self.driver: Optional[ObstacleDriver] = None
        self.actor: Optional[Actor] = None
        self.backgrounds: list[BackgroundTile] = []

    @property
    def state(self) -> GameState:
        return self._state_machine.state

    @property
    def is_playing(self) -> bool:
        return self.state is GameState.PLAYING

    # Lifecycle

    def manifest(self) -> Manifest:
        """Resources loaded by prepare()."""
        res = self.settings.resources
        manifest: dict[str, ResourceSpec] = {
            "spriteSheet": ResourceSpec(
                type=ResourceType.IMAGE,
                src=res.assets_path / res.sprite_sheet,
                width=res.sprite_sheet_width,
                height=res.sprite_sheet_height,
            ),
        }
        for name, src in res.sounds.items():
            manifest[name] = ResourceSpec(type=ResourceType.AUDIO, src=res.assets_path / src)
        return manifest

    async def prepare(self) -> None:
        """Load high score and assets, then build the first session.

        Raises:
            ResourceLoadError: if any asset fails to load
        """
        self.high_score = self._read_high_score()
        self._change_state(GameState.LOADING)

        await self.resources.load(self.manifest())

        x, y, w, h = self.settings.resources.tube_pattern
        sheet = self.resources.get("spriteSheet")
        self.resources.register("tubePattern", crop_image(sheet, x, y, w, h))

        self.reset()

    def reset(self) -> None:
        """Throw away the session and build a new one, showing IDLE."""
        self._scheduler.cancel()
        self.score = 0
        self.level = 0

        self.physics_engine = PhysicsEngine(self.settings.gravitation)
        self.collision_engine = RectCollisionEngine()
        self.scene = Scene(self.draw_engine, self.collision_engine, self.width, self.height)
        self.draw_engine.resize(self.width, self.height)
        self.context = SessionContext(
            scene=self.scene,
            draw_engine=self.draw_engine,
            settings=self.settings,
            notify_game_over=self.game_over,
            is_playing=lambda: self.is_playing,
        )
        self._create_entities()

        self._change_state(GameState.IDLE)

    def start(self) -> None:
        """Begin a fresh session."""
        self.reset()
        self._play("swooshingSound")
        self._last_update = self._clock()
        self._change_state(GameState.PLAYING)

    def game_over(self) -> None:
        """Freeze the simulation. Ignored unless PLAYING."""
        if not self.is_playing:
            return
        self._scheduler.cancel()
        self._change_state(GameState.GAME_OVER)
        self.event_bus.emit(Event(
            EventType.GAME_OVER,
            data={"score": self.score, "level": self.level, "high_score": self.high_score},
        ))

    def handle_action(self, action: Action = Action.PRIMARY) -> None:
        """Single entry point for every input engine."""
        handler = self._ACTIONS[(self.state, action)]
        handler(self)

    def resize(self, width: int, height: int) -> None:
        """Apply a new viewport without touching game progress."""
        self.width = int(width)
        self.height = int(height)
        self.draw_engine.resize(self.width, self.height)

        if self.scene is not None:
            self.scene.resize(self.width, self.height)
            # Keep speed gained from level ups
            speed = self.backgrounds[0].speed if self.backgrounds else self.settings.background.speed
            self._generate_backgrounds(speed)
            self.driver.validate_spacing()

        logger.info(f"Resized to {self.width}x{self.height}")
        self.event_bus.emit(Event(EventType.RESIZED, data={"width": self.width, "height": self.height}))
        self._redraw()

    # Frame loop

    def _loop(self) -> None:
        now = self._clock()
        delta = 0.0 if self._last_update is None else (now - self._last_update) / 1000.0

        self._update(delta)

        if self.is_playing:
            self._draw()
            self._last_update = now
            self._scheduler.schedule_next(self.settings.frame_interval_ms, self._loop)

    def _update(self, delta: float) -> None:
        self.driver.update()
        self.scene.update(delta)
        if not self.is_playing:
            return

        self.update_score(delta)

        if self.score > self.high_score:
            self.high_score = self.score
            self.storage.save(HIGH_SCORE_KEY, self.high_score)
            logger.info(f"New high score: {self.high_score}")
            self.event_bus.emit(Event(EventType.HIGH_SCORE, data={"high_score": self.high_score}))

    def crossing_threshold(self, delta: float) -> float:
        """Horizontal window in which a pair counts as just passed."""
        speed = self.settings.tubes.speed + self.settings.level_up_acceleration * self.level
        return speed * delta

    def update_score(self, delta: float) -> bool:
        """Score the pair under the actor if its center is within the window.

        Each pair scores at most once.

        Returns:
            True if a point was scored
        """
        actor_center = self.actor.center_x
        crossing = self.driver.get_tubes(actor_center, actor_center)
        if not crossing:
            return False

        pair = crossing[0]
        if pair.scored:
            return False

        threshold = self.crossing_threshold(delta)
        if abs(pair.center_x - actor_center) > threshold / 2:
            return False

        pair.scored = True
        self.score += 1
        self._play("pointSound")
        self.event_bus.emit(Event(EventType.SCORE_CHANGED, data={"score": self.score}))

        if self.score >= POINTS_PER_LEVEL * (self.level + 1):
            self._increase_level()
        return True

    def _increase_level(self) -> None:
        acceleration = self.settings.level_up_acceleration
        self.level += 1

        # Driver speeds up its own pairs; the rest of the moving world here
        driver_pairs = self.driver.pairs
        self.driver.increase_speed(acceleration)
        for entity in self.scene.get_entities():
            if entity.is_moving() and entity not in driver_pairs:
                entity.increase_speed(acceleration)

        logger.info(f"Level up: {self.level} (score {self.score})")
        self.event_bus.emit(Event(EventType.LEVEL_UP, data={"level": self.level}))

    def _draw(self) -> None:
        self.draw_engine.clear()
        self.scene.draw()
        label = self.settings.score_label
        TextComponent(text=f"SCORE: {self.score}", x=label.x, y=label.y).draw(self.draw_engine)

    # Session building

    def _create_entities(self) -> None:
        self.backgrounds = []
        self._generate_backgrounds(self.settings.background.speed)

        tubes = self.settings.tubes
        self.driver = ObstacleDriver(
            self.context,
            width=tubes.width,
            speed=tubes.speed,
            border_offset=tubes.border_offset,
            space_min=tubes.space_min,
            space_max=tubes.space_max,
            min_distance=tubes.min_distance,
            max_distance=tubes.max_distance,
            lookahead=tubes.lookahead,
            pattern=self.resources.get("tubePattern"),
            rng=self._rng,
        )

        actor = self.settings.actor
        self.actor = Actor(
            self.context,
            x=actor.start_x,
            y=self.scene.height / 2 - actor.height / 2,
            width=actor.width,
            height=actor.height,
            physics_engine=self.physics_engine,
            flap_speed=actor.flap_speed,
            rotation_speed=actor.rotation_speed,
            frames=actor.frames,
            animation_speed=actor.animation_speed,
            sprite_sheet=self.resources.get("spriteSheet"),
            flap_sound=self.resources.get("flapSound"),
            hit_sound=self.resources.get("hitSound"),
            die_sound=self.resources.get("dieSound"),
        )

    def _generate_backgrounds(self, speed: float) -> None:
        for background in self.backgrounds:
            background.delete()

        bg = self.settings.background
        self.backgrounds = generate_backgrounds(
            self.context,
            aspect_ratio=bg.width / bg.height,
            speed=speed,
            frames=bg.frames,
            animation_speed=bg.animation_speed,
            sprite_sheet=self.resources.get("spriteSheet"),
        )

    def _read_high_score(self) -> int:
        raw = self.storage.load(HIGH_SCORE_KEY)
        try:
            return max(0, int(raw))
        except (TypeError, ValueError):
            return 0

    def _play(self, name: str) -> None:
        sound: Any = self.resources.get(name)
        sound.play()

    # State handling

    def _change_state(self, state: GameState) -> None:
        self.draw_engine.clear()
        if state is not self.state and not self._state_machine.transition(state):
            return
        self._ENTRIES[state](self)

    def _on_state_changed(self, old_state: GameState, new_state: GameState) -> None:
        self.event_bus.emit(Event(
            EventType.STATE_CHANGED,
            data={"from": old_state, "to": new_state},
        ))

    def _redraw(self) -> None:
        """Repaint the current state without re-entering it."""
        if self.is_playing:
            self._draw()
        else:
            self.draw_engine.clear()
            self._ENTRIES[self.state](self)

    def _draw_overlay(self, component: Any) -> None:
        if self.scene is not None:
            self.scene.draw()
        component.draw(self.draw_engine)

    def _enter_loading(self) -> None:
        CenteredTextComponent(text=self.settings.texts.loading).draw(self.draw_engine)

    def _enter_idle(self) -> None:
        self._draw_overlay(WithScoresComponent(
            text=self.settings.texts.idle,
            score=self.score,
            high_score=self.high_score,
        ))

    def _enter_playing(self) -> None:
        self._loop()

    def _enter_game_over(self) -> None:
        self._draw_overlay(WithScoresComponent(
            text=self.settings.texts.game_over,
            score=self.score,
            high_score=self.high_score,
        ))

    def _ignore_action(self) -> None:
        pass

    def _flap(self) -> None:
        self.actor.flap()

    _ENTRIES = require_exhaustive({
        GameState.LOADING: _enter_loading,
        GameState.IDLE: _enter_idle,
        GameState.PLAYING: _enter_playing,
        GameState.GAME_OVER: _enter_game_over,
    }, list(GameState), "state entry")

    _ACTIONS = require_exhaustive({
        (GameState.LOADING, Action.PRIMARY): _ignore_action,
        (GameState.IDLE, Action.PRIMARY): start,
        (GameState.PLAYING, Action.PRIMARY): _flap,
        (GameState.GAME_OVER, Action.PRIMARY): start,
    }, action_keys(), "action")
