"""Axis-aligned bounding-box collision detection."""

from typing import Iterable
import logging

from skyflap.engine.entity import Entity

logger = logging.getLogger(__name__)


class RectCollisionEngine:
    """
    Pairwise AABB checks over collidable entities.

    Entity counts are small (one actor and a few obstacle pairs), so every
    pair is tested each frame.
    """

    @staticmethod
    def intersects(a: Entity, b: Entity) -> bool:
        """True if any solid rectangle of a touches any of b."""
        return any(
            rect_a.intersects(rect_b)
            for rect_a in a.get_bounds()
            for rect_b in b.get_bounds()
        )

    def check(self, entities: Iterable[Entity]) -> int:
        """Run collide() on both sides of every overlapping pair.

        Returns:
            Number of colliding pairs
        """
        collidable = [e for e in entities if e.collidable and not e.deleted]
        hits = 0

        for i, a in enumerate(collidable):
            for b in collidable[i + 1:]:
                if a.deleted or b.deleted:
                    continue
                if self.intersects(a, b):
                    hits += 1
                    a.collide(b)
                    b.collide(a)

        return hits
