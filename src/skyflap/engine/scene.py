"""Scene: the live entity collection of one play session."""

from typing import TYPE_CHECKING
import logging

from skyflap.engine.collision import RectCollisionEngine
from skyflap.graphics.draw_engine import DrawEngine

if TYPE_CHECKING:
    from skyflap.engine.entity import Entity

logger = logging.getLogger(__name__)


class Scene:
    """
    Owns the entities of a session and the viewport they live in.

    Insertion order is kept for updates; drawing goes by ascending z-index
    (ties keep insertion order).
    """

    def __init__(
        self,
        draw_engine: DrawEngine,
        collision_engine: RectCollisionEngine,
        width: int,
        height: int,
    ) -> None:
        self.draw_engine = draw_engine
        self.collision_engine = collision_engine
        self.width = width
        self.height = height
        self._entities: list["Entity"] = []

    def add(self, entity: "Entity") -> None:
        if entity not in self._entities:
            self._entities.append(entity)

    def remove(self, entity: "Entity") -> None:
        if entity in self._entities:
            self._entities.remove(entity)

    def get_entities(self) -> list["Entity"]:
        return list(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity: object) -> bool:
        return entity in self._entities

    def update(self, delta: float) -> None:
        """Update every live entity once, then resolve collisions."""
        # Entities may delete themselves while we iterate
        for entity in list(self._entities):
            if entity.deleted:
                continue
            entity.update(delta)

        self.collision_engine.check(self._entities)

    def draw(self) -> None:
        for entity in sorted(self._entities, key=lambda e: e.z_index):
            entity.draw()

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        logger.debug(f"Scene resized to {width}x{height}")

    def clear(self) -> None:
        for entity in list(self._entities):
            entity.delete()
