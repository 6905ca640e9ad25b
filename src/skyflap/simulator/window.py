"""
Desktop window for SKYFLAP using pygame.

Pumps pygame events into the input engines, blits the draw engine's
buffer and keeps the asyncio loop turning so the frame scheduler and the
asset loader can run.
"""

from typing import Callable, Sequence
import asyncio
import logging

import pygame

from skyflap.config.settings import Settings
from skyflap.core.events import Event, EventType
from skyflap.core.scheduler import AsyncioFrameScheduler, Debouncer
from skyflap.core.state import Action
from skyflap.game import GameStateMachine
from skyflap.graphics.draw_engine import BufferDrawEngine
from skyflap.input.engines import GamepadInputEngine, InputEngine, KeyboardInputEngine, MouseInputEngine

logger = logging.getLogger(__name__)


class GameWindow:
    """
    Resizable pygame window hosting one GameStateMachine.

    Controls:
        action key / click / gamepad button: primary action
        ESC: Exit
    """

    def __init__(
        self,
        settings: Settings,
        game: GameStateMachine,
        draw_engine: BufferDrawEngine,
    ) -> None:
        self.settings = settings
        self.game = game
        self.draw_engine = draw_engine

        self.keyboard = KeyboardInputEngine()
        self.mouse = MouseInputEngine()
        self.gamepad = GamepadInputEngine()

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._resize = Debouncer(settings.resize_debounce_ms, AsyncioFrameScheduler())
        self._unsubscribers: list[Callable[[], None]] = []

        logger.info("GameWindow created")

    @property
    def inputs(self) -> Sequence[InputEngine]:
        return (self.keyboard, self.mouse, self.gamepad)

    def _init_pygame(self) -> None:
        """Initialize pygame and create the window."""
        pygame.init()
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except pygame.error as e:
            logger.warning(f"Audio unavailable: {e}")

        canvas = self.settings.canvas
        pygame.display.set_caption(canvas.title)
        self._screen = pygame.display.set_mode((canvas.width, canvas.height), pygame.RESIZABLE)
        self._clock = pygame.time.Clock()

        logger.info(f"Pygame initialized: {canvas.width}x{canvas.height}")

    def _bind_inputs(self) -> None:
        controls = self.settings.controls
        act = self.game.handle_action
        self._unsubscribers = [
            self.keyboard.subscribe(controls.action_key, lambda: act(Action.PRIMARY)),
            self.mouse.subscribe(controls.action_click, lambda: act(Action.PRIMARY)),
            self.gamepad.subscribe(controls.action_button, lambda: act(Action.PRIMARY)),
            self.game.event_bus.subscribe(EventType.SCORE_CHANGED, self._update_title),
            self.game.event_bus.subscribe(EventType.STATE_CHANGED, self._update_title),
        ]

    def _update_title(self, event: Event) -> None:
        title = self.settings.canvas.title
        pygame.display.set_caption(
            f"{title} - {self.game.state.name} - score {self.game.score} / best {self.game.high_score}"
        )

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._running = False

            elif event.type == pygame.VIDEORESIZE:
                width, height = event.w, event.h
                self._resize.trigger(lambda: self.game.resize(width, height))

            else:
                for engine in self.inputs:
                    engine.handle_event(event)

    def _render(self) -> None:
        if self._screen is None:
            return
        surface = pygame.surfarray.make_surface(self.draw_engine.buffer.swapaxes(0, 1))
        self._screen.fill((0, 0, 0))
        self._screen.blit(surface, (0, 0))
        pygame.display.flip()

    async def run(self) -> None:
        """Main window loop. Returns when the window is closed.

        Raises:
            ResourceLoadError: if the game failed to prepare
        """
        self._init_pygame()
        self._bind_inputs()
        self._running = True

        prepare = asyncio.create_task(self.game.prepare())
        logger.info("Window started")

        try:
            while self._running:
                self._handle_events()

                if prepare.done() and prepare.exception() is not None:
                    raise prepare.exception()

                self._render()

                if self._clock:
                    self._clock.tick(self.settings.fps)

                # Let the scheduler and loader run
                await asyncio.sleep(0)
        finally:
            if not prepare.done():
                prepare.cancel()
            self._cleanup()

    def _cleanup(self) -> None:
        self._resize.cancel()
        self.game.game_over()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        pygame.quit()
        logger.info("Window closed")

    def stop(self) -> None:
        """Stop the window loop."""
        self._running = False
