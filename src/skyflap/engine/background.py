"""Parallax background tiles."""

from typing import Optional, Sequence
import logging

from skyflap.engine.entity import AnimatedEntity, EntityKind, SessionContext
from skyflap.graphics.draw_engine import Frame

logger = logging.getLogger(__name__)


class BackgroundTile(AnimatedEntity):
    """One tile of the scrolling backdrop. Never collides."""

    kind = EntityKind.BACKGROUND
    z_index = 0
    fallback_color = (112, 197, 206)

    def __init__(
        self,
        context: SessionContext,
        x: float,
        y: float,
        width: float,
        height: float,
        speed: float,
        frames: Sequence[Frame] = (),
        animation_speed: float = 0.0,
        sprite_sheet: Optional[object] = None,
    ) -> None:
        super().__init__(
            context, x, y, width, height, speed,
            frames=frames,
            animation_speed=animation_speed,
            sprite_sheet=sprite_sheet,
        )
        self.initial_x = x
        # Total width of the strip this tile belongs to
        self.strip_width = width
        if animation_speed:
            self.enable_animation()

    def update(self, delta: float) -> None:
        """Scroll left; a tile leaving the left edge is reused as the new rightmost tile.

        Moving it by strip_width is the same as deleting it and appending a
        fresh tile after the last one, so [0, scene width] stays covered.
        """
        super().update(delta)
        # Wrap to the right end of the strip once fully off screen
        if self.x + self.width <= 0:
            self.x += self.strip_width


def generate_backgrounds(
    context: SessionContext,
    aspect_ratio: float,
    speed: float,
    frames: Sequence[Frame] = (),
    animation_speed: float = 0.0,
    sprite_sheet: Optional[object] = None,
) -> list[BackgroundTile]:
    """Lay tiles side by side until one starts past the right edge.

    Tiles are scaled to the scene height; the extra tile keeps [0, width]
    covered while the strip scrolls and wraps.
    """
    scene = context.scene
    tile_width = scene.height * aspect_ratio
    tiles: list[BackgroundTile] = []

    if tile_width <= 0:
        return tiles

    while not tiles or tiles[-1].initial_x < scene.width:
        x = tiles[-1].x + tiles[-1].width if tiles else 0.0
        tiles.append(BackgroundTile(
            context,
            x=x,
            y=0.0,
            width=tile_width,
            height=scene.height,
            speed=speed,
            frames=frames,
            animation_speed=animation_speed,
            sprite_sheet=sprite_sheet,
        ))

    strip_width = tile_width * len(tiles)
    for tile in tiles:
        tile.strip_width = strip_width

    logger.debug(f"Generated {len(tiles)} background tiles of width {tile_width:.1f}")
    return tiles
