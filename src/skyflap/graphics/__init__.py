"""Drawing for SKYFLAP: primitives, the draw surface and text overlays."""

from .draw_engine import DrawEngine, BufferDrawEngine
from .components import TextComponent, CenteredTextComponent, WithScoresComponent

__all__ = [
    "DrawEngine",
    "BufferDrawEngine",
    "TextComponent",
    "CenteredTextComponent",
    "WithScoresComponent",
]
