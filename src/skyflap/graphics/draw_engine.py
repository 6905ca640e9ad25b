"""Draw surface for the game: a resizable numpy RGB buffer."""

from abc import ABC, abstractmethod
from typing import Literal
import logging

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from skyflap.graphics.primitives import (
    Buffer, Color, clear, draw_rect, draw_image, draw_text, text_size, tile_image,
)

logger = logging.getLogger(__name__)

Align = Literal["left", "center", "right"]
Frame = tuple[int, int, int, int]

SKY_COLOR: Color = (78, 192, 202)


class DrawEngine(ABC):
    """Drawing contract used by entities and overlay components."""

    @property
    @abstractmethod
    def width(self) -> int:
        ...

    @property
    @abstractmethod
    def height(self) -> int:
        ...

    @abstractmethod
    def clear(self) -> None:
        """Reset the whole surface."""
        ...

    @abstractmethod
    def resize(self, width: int, height: int) -> None:
        """Reallocate the surface for a new viewport."""
        ...

    @abstractmethod
    def draw_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        ...

    @abstractmethod
    def draw_image(self, image: Buffer, x: float, y: float) -> None:
        ...

    @abstractmethod
    def draw_sprite(
        self,
        sheet: Buffer,
        frame: Frame,
        x: float,
        y: float,
        width: float,
        height: float,
        rotation: float = 0.0,
    ) -> None:
        """Draw one frame of a sprite sheet, scaled and rotated about its center."""
        ...

    @abstractmethod
    def draw_pattern(self, pattern: Buffer, x: float, y: float, width: float, height: float) -> None:
        """Fill a rectangle by repeating an image."""
        ...

    @abstractmethod
    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color = (255, 255, 255),
        align: Align = "left",
        scale: int = 2,
    ) -> None:
        ...


class BufferDrawEngine(DrawEngine):
    """DrawEngine backed by a (height, width, 3) uint8 array."""

    def __init__(self, width: int, height: int, background: Color = SKY_COLOR) -> None:
        self.background = background
        self._buffer: NDArray[np.uint8] = np.zeros((height, width, 3), dtype=np.uint8)
        self.clear()

    @property
    def width(self) -> int:
        return self._buffer.shape[1]

    @property
    def height(self) -> int:
        return self._buffer.shape[0]

    @property
    def buffer(self) -> NDArray[np.uint8]:
        """The live buffer; blit this to the screen."""
        return self._buffer

    def clear(self) -> None:
        clear(self._buffer, self.background)

    def resize(self, width: int, height: int) -> None:
        width, height = max(0, int(width)), max(0, int(height))
        if (width, height) == (self.width, self.height):
            return
        self._buffer = np.zeros((height, width, 3), dtype=np.uint8)
        self.clear()
        logger.debug(f"Draw surface resized to {width}x{height}")

    def draw_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        draw_rect(self._buffer, round(x), round(y), round(width), round(height), color)

    def draw_image(self, image: Buffer, x: float, y: float) -> None:
        draw_image(self._buffer, image, round(x), round(y))

    def draw_sprite(
        self,
        sheet: Buffer,
        frame: Frame,
        x: float,
        y: float,
        width: float,
        height: float,
        rotation: float = 0.0,
    ) -> None:
        fx, fy, fw, fh = frame
        region = sheet[fy:fy + fh, fx:fx + fw]
        target_w, target_h = max(1, round(width)), max(1, round(height))
        if region.size == 0:
            return

        image = Image.fromarray(np.ascontiguousarray(region))
        if image.size != (target_w, target_h):
            image = image.resize((target_w, target_h), Image.NEAREST)
        if rotation:
            # PIL rotates counter-clockwise; positive rotation tilts nose down
            image = image.rotate(-rotation, resample=Image.BILINEAR, expand=True)

        pixels = np.asarray(image)
        # Keep the sprite centered on its unrotated box
        offset_x = (pixels.shape[1] - target_w) / 2
        offset_y = (pixels.shape[0] - target_h) / 2
        draw_image(self._buffer, pixels, round(x - offset_x), round(y - offset_y))

    def draw_pattern(self, pattern: Buffer, x: float, y: float, width: float, height: float) -> None:
        tiled = tile_image(pattern, round(width), round(height))
        if tiled.size:
            draw_image(self._buffer, tiled, round(x), round(y))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        color: Color = (255, 255, 255),
        align: Align = "left",
        scale: int = 2,
    ) -> None:
        text_w, _ = text_size(text, scale)
        if align == "center":
            x -= text_w / 2
        elif align == "right":
            x -= text_w
        draw_text(self._buffer, text, round(x), round(y), color, scale)
