"""Base classes for everything that lives in the scene."""

from abc import ABC
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional, Sequence
import logging

from skyflap.config.settings import Settings
from skyflap.engine.geometry import Rect
from skyflap.graphics.draw_engine import DrawEngine, Frame

if TYPE_CHECKING:
    from skyflap.engine.scene import Scene

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """What an entity is, for collision and leveling rules."""

    ACTOR = auto()
    OBSTACLE = auto()
    BACKGROUND = auto()


@dataclass
class SessionContext:
    """Shared context passed to entities of one play session.

    The scene reference is non-owning: entities use it for bounds and to
    remove themselves, never to manage other entities.
    """

    scene: "Scene"
    draw_engine: DrawEngine
    settings: Settings
    notify_game_over: Callable[[], None]
    is_playing: Callable[[], bool]


class Entity(ABC):
    """Abstract base for simulated objects.

    Lifecycle:
        1. __init__() - registers with the scene
        2. update(delta) - per-frame logic, called by the scene
        3. draw() - render, called by the scene in z-order
        4. delete() - leave the scene; no further update/draw calls
    """

    kind: EntityKind
    z_index: int = 0
    collidable: bool = False
    # Subject to gravity
    falling: bool = False

    def __init__(
        self,
        context: SessionContext,
        x: float,
        y: float,
        width: float,
        height: float,
        speed: float = 0.0,
    ) -> None:
        self.context = context
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.speed = speed
        self.deleted = False
        context.scene.add(self)

    @property
    def scene(self) -> "Scene":
        return self.context.scene

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def is_obstacle(self) -> bool:
        return self.kind is EntityKind.OBSTACLE

    def is_moving(self) -> bool:
        """Scrolls with the world and speeds up on level up."""
        return self.kind in (EntityKind.OBSTACLE, EntityKind.BACKGROUND)

    def get_bounds(self) -> list[Rect]:
        """Solid rectangles used for collision checks."""
        return [self.rect]

    def update(self, delta: float) -> None:
        """Scroll left at the entity's own speed."""
        self.x -= self.speed * delta

    def draw(self) -> None:
        pass

    def collide(self, other: "Entity") -> None:
        pass

    def increase_speed(self, amount: float) -> None:
        self.speed += amount

    def delete(self) -> None:
        if self.deleted:
            return
        self.deleted = True
        self.scene.remove(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(x={self.x:.1f}, y={self.y:.1f}, "
            f"w={self.width:.1f}, h={self.height:.1f}, speed={self.speed:.1f})"
        )


class AnimatedEntity(Entity):
    """Entity drawn from a cycle of sprite sheet frames."""

    # Solid color used when no sprite sheet is loaded
    fallback_color = (255, 255, 255)

    def __init__(
        self,
        context: SessionContext,
        x: float,
        y: float,
        width: float,
        height: float,
        speed: float = 0.0,
        frames: Sequence[Frame] = (),
        animation_speed: float = 0.0,
        sprite_sheet: Optional[object] = None,
    ) -> None:
        super().__init__(context, x, y, width, height, speed)
        self.frames = list(frames)
        self.animation_speed = animation_speed
        self.sprite_sheet = sprite_sheet
        self._animation_time = 0.0
        self._animating = False

    def enable_animation(self) -> None:
        self._animating = True

    def disable_animation(self) -> None:
        self._animating = False

    @property
    def frame_index(self) -> int:
        if not self.frames:
            return 0
        return int(self._animation_time * self.animation_speed) % len(self.frames)

    @property
    def rotation(self) -> float:
        return 0.0

    def update(self, delta: float) -> None:
        super().update(delta)
        if self._animating:
            self._animation_time += delta

    def draw(self) -> None:
        draw_engine = self.context.draw_engine
        if self.sprite_sheet is None or not self.frames:
            draw_engine.draw_rect(self.x, self.y, self.width, self.height, self.fallback_color)
            return
        draw_engine.draw_sprite(
            self.sprite_sheet,
            self.frames[self.frame_index],
            self.x,
            self.y,
            self.width,
            self.height,
            self.rotation,
        )
