"""Obstacle pairs and the driver that spawns, recycles and queries them."""

from typing import Optional
import logging
import random

from skyflap.engine.entity import Entity, EntityKind, SessionContext
from skyflap.engine.geometry import Rect

logger = logging.getLogger(__name__)

TUBE_COLOR = (84, 170, 60)


class ObstaclePair(Entity):
    """
    Two tubes with a passable gap between them, scrolling left.

    The pair spans the full viewport height; the gap covers
    [gap_y, gap_y + gap]. It collides and scores as one unit.
    """

    kind = EntityKind.OBSTACLE
    z_index = 1
    collidable = True

    def __init__(
        self,
        context: SessionContext,
        x: float,
        gap_y: float,
        gap: float,
        width: float,
        speed: float,
        pattern: Optional[object] = None,
    ) -> None:
        super().__init__(context, x, 0.0, width, context.scene.height, speed)
        self.gap_y = gap_y
        self.gap = gap
        self.pattern = pattern
        self.scored = False

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width

    def top_rect(self) -> Rect:
        return Rect(self.x, 0.0, self.width, self.gap_y)

    def bottom_rect(self) -> Rect:
        bottom_y = self.gap_y + self.gap
        return Rect(self.x, bottom_y, self.width, max(0.0, self.scene.height - bottom_y))

    def get_bounds(self) -> list[Rect]:
        return [self.top_rect(), self.bottom_rect()]

    def draw(self) -> None:
        draw_engine = self.context.draw_engine
        for rect in self.get_bounds():
            if rect.height <= 0:
                continue
            if self.pattern is not None:
                draw_engine.draw_pattern(self.pattern, rect.x, rect.y, rect.width, rect.height)
            else:
                draw_engine.draw_rect(rect.x, rect.y, rect.width, rect.height, TUBE_COLOR)


class ObstacleDriver:
    """
    Procedural generator for obstacle pairs.

    Keeps the alive pairs ordered by x. Spacing policy:
        - gap between a pair's right edge and the next pair's left edge
          is drawn from [min_distance, max_distance]
        - each pair's gap height is drawn from [space_min, space_max] and
          placed at least border_offset away from the top and bottom
    """

    def __init__(
        self,
        context: SessionContext,
        width: float,
        speed: float,
        border_offset: float,
        space_min: float,
        space_max: float,
        min_distance: float,
        max_distance: float,
        lookahead: Optional[float] = None,
        pattern: Optional[object] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.context = context
        self.width = width
        self.speed = speed
        self.border_offset = border_offset
        self.space_min = space_min
        self.space_max = space_max
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.lookahead = max_distance + width if lookahead is None else lookahead
        self.pattern = pattern
        self._rng = rng or random.Random()
        self._pairs: list[ObstaclePair] = []

        self.update()

    @property
    def scene(self):
        return self.context.scene

    @property
    def pairs(self) -> list[ObstaclePair]:
        return list(self._pairs)

    def update(self) -> None:
        """Recycle pairs that left the screen, then top up on the right."""
        self._recycle()
        self._spawn()

    def validate_spacing(self) -> None:
        """Re-apply the spawn rule after the viewport changed.

        Alive pairs keep their gap height; each gap is moved back inside
        the borders of the new height, then the right side is topped up.
        """
        for pair in self._pairs:
            pair.gap_y = self._place_gap(pair.gap_y, pair.gap)
        self._spawn()

    def get_tubes(self, from_x: float, to_x: float) -> list[ObstaclePair]:
        """Alive pairs whose horizontal span intersects [from_x, to_x], by x."""
        return [
            pair for pair in self._pairs
            if pair.x <= to_x and pair.right >= from_x
        ]

    def increase_speed(self, amount: float) -> None:
        """Speed up alive pairs and every pair spawned from now on."""
        self.speed += amount
        for pair in self._pairs:
            pair.increase_speed(amount)
        logger.debug(f"Obstacle speed now {self.speed:.1f}")

    def _recycle(self) -> None:
        alive = []
        for pair in self._pairs:
            if pair.deleted or pair.right < 0:
                pair.delete()
            else:
                alive.append(pair)
        self._pairs = alive

    def _spawn(self) -> None:
        limit = self.scene.width + self.lookahead
        while not self._pairs or self._pairs[-1].x < limit:
            if self._pairs:
                previous = self._pairs[-1]
                x = previous.right + self._rng.uniform(self.min_distance, self.max_distance)
            else:
                x = float(self.scene.width)
            self._pairs.append(self._create_pair(x))

    def _gap_bounds(self, gap: float) -> tuple[float, float]:
        return self.border_offset, self.scene.height - self.border_offset - gap

    def _place_gap(self, gap_y: float, gap: float) -> float:
        top, bottom = self._gap_bounds(gap)
        # A gap that cannot fit sticks to the top border
        if bottom < top:
            return top
        return min(max(gap_y, top), bottom)

    def _create_pair(self, x: float) -> ObstaclePair:
        gap = self._rng.uniform(self.space_min, self.space_max)
        top, bottom = self._gap_bounds(gap)
        gap_y = self._rng.uniform(top, bottom) if bottom >= top else top

        pair = ObstaclePair(
            self.context,
            x=x,
            gap_y=gap_y,
            gap=gap,
            width=self.width,
            speed=self.speed,
            pattern=self.pattern,
        )
        logger.debug(f"Spawned obstacle at x={x:.1f} gap_y={gap_y:.1f} gap={gap:.1f}")
        return pair
