"""
Input engines translating pygame events into named device events.

Each engine keeps handlers keyed by a discrete device event (key name,
mouse button name, gamepad button index). The window feeds every pygame
event to every engine through handle_event().
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, Hashable, TypeVar
import logging

import pygame

logger = logging.getLogger(__name__)

Handler = Callable[[], None]
K = TypeVar("K", bound=Hashable)


class InputEngine(ABC, Generic[K]):
    """Subscription registry for one input device."""

    def __init__(self) -> None:
        self._handlers: dict[K, list[Handler]] = {}

    def subscribe(self, name: K, handler: Handler) -> Callable[[], None]:
        """
        Call handler whenever the named device event fires.

        Returns:
            Unsubscribe function
        """
        self._handlers.setdefault(name, []).append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(name, handler)

        return unsubscribe

    def unsubscribe(self, name: K, handler: Handler) -> None:
        handlers = self._handlers.get(name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Dispatch a pygame event if it belongs to this device.

        Returns:
            True if any handler was called
        """
        name = self.translate(event)
        if name is None:
            return False
        handlers = list(self._handlers.get(name, ()))
        for handler in handlers:
            handler()
        return bool(handlers)

    @abstractmethod
    def translate(self, event: pygame.event.Event) -> K | None:
        """Device event name for a pygame event, or None to ignore it."""
        ...


def key_code(name: str) -> int:
    """pygame key constant for a name like "space", "return" or "a".

    Raises:
        ValueError: if pygame has no such key
    """
    for attr in (f"K_{name}", f"K_{name.lower()}", f"K_{name.upper()}"):
        code = getattr(pygame, attr, None)
        if code is not None:
            return code
    raise ValueError(f"Unknown key name: {name!r}")


class KeyboardInputEngine(InputEngine[int]):
    """Key presses. Handlers are subscribed by key name."""

    def subscribe(self, name: str | int, handler: Handler) -> Callable[[], None]:
        code = key_code(name) if isinstance(name, str) else name
        return super().subscribe(code, handler)

    def unsubscribe(self, name: str | int, handler: Handler) -> None:
        code = key_code(name) if isinstance(name, str) else name
        super().unsubscribe(code, handler)

    def translate(self, event: pygame.event.Event) -> int | None:
        if event.type != pygame.KEYDOWN:
            return None
        return event.key


class MouseInputEngine(InputEngine[str]):
    """Mouse button presses: "left", "middle", "right"."""

    BUTTONS = {1: "left", 2: "middle", 3: "right"}

    def translate(self, event: pygame.event.Event) -> str | None:
        if event.type != pygame.MOUSEBUTTONDOWN:
            return None
        return self.BUTTONS.get(event.button)


class GamepadInputEngine(InputEngine[int]):
    """Gamepad button presses by button index.

    Joysticks are opened as they are plugged in; pygame only reports
    button events for opened devices.
    """

    def __init__(self) -> None:
        super().__init__()
        self._joysticks: dict[int, "pygame.joystick.JoystickType"] = {}

    def translate(self, event: pygame.event.Event) -> int | None:
        if event.type == pygame.JOYDEVICEADDED:
            self._open(event.device_index)
            return None
        if event.type == pygame.JOYDEVICEREMOVED:
            joystick = self._joysticks.pop(event.instance_id, None)
            if joystick is not None:
                logger.info(f"Gamepad disconnected: {joystick.get_name()}")
            return None
        if event.type != pygame.JOYBUTTONDOWN:
            return None
        return event.button

    def _open(self, device_index: int) -> None:
        joystick = pygame.joystick.Joystick(device_index)
        self._joysticks[joystick.get_instance_id()] = joystick
        logger.info(f"Gamepad connected: {joystick.get_name()}")
