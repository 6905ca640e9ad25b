"""Text overlays drawn on top of (or instead of) the scene."""

from dataclasses import dataclass

from skyflap.graphics.draw_engine import Align, DrawEngine
from skyflap.graphics.primitives import Color, text_size

WHITE: Color = (255, 255, 255)
SHADOW: Color = (40, 40, 40)


@dataclass
class TextComponent:
    """A single line of text at a fixed position."""

    text: str
    x: float
    y: float
    align: Align = "left"
    color: Color = WHITE
    scale: int = 2

    def draw(self, draw_engine: DrawEngine) -> None:
        # One pixel drop shadow keeps text readable over the sky
        draw_engine.draw_text(self.text, self.x + 1, self.y + 1, SHADOW, self.align, self.scale)
        draw_engine.draw_text(self.text, self.x, self.y, self.color, self.align, self.scale)


@dataclass
class CenteredTextComponent:
    """Text centered on the surface."""

    text: str
    color: Color = WHITE
    scale: int = 3

    def draw(self, draw_engine: DrawEngine) -> None:
        _, text_h = text_size(self.text, self.scale)
        TextComponent(
            text=self.text,
            x=draw_engine.width / 2,
            y=(draw_engine.height - text_h) / 2,
            align="center",
            color=self.color,
            scale=self.scale,
        ).draw(draw_engine)


@dataclass
class WithScoresComponent:
    """Centered headline with the last score and best score below it."""

    text: str
    score: int
    high_score: int
    color: Color = WHITE
    scale: int = 3

    def lines(self) -> list[str]:
        return [self.text, f"SCORE: {self.score}", f"BEST: {self.high_score}"]

    def draw(self, draw_engine: DrawEngine) -> None:
        lines = self.lines()
        _, line_h = text_size("0", self.scale)
        spacing = line_h * 2
        top = (draw_engine.height - spacing * len(lines)) / 2

        for index, line in enumerate(lines):
            TextComponent(
                text=line,
                x=draw_engine.width / 2,
                y=top + index * spacing,
                align="center",
                color=self.color,
                # Headline bigger than the score lines
                scale=self.scale if index == 0 else max(1, self.scale - 1),
            ).draw(draw_engine)
