"""Input engines."""

from .engines import (
    InputEngine,
    KeyboardInputEngine,
    MouseInputEngine,
    GamepadInputEngine,
    key_code,
)

__all__ = [
    "InputEngine",
    "KeyboardInputEngine",
    "MouseInputEngine",
    "GamepadInputEngine",
    "key_code",
]
