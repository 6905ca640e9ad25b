"""Desktop window for running SKYFLAP."""

from .window import GameWindow

__all__ = ["GameWindow"]
