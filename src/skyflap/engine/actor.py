"""The bird: the only entity the player controls."""

from typing import Optional, Sequence
import logging

from skyflap.engine.entity import AnimatedEntity, Entity, EntityKind, SessionContext
from skyflap.engine.physics import PhysicsEngine
from skyflap.graphics.draw_engine import Frame
from skyflap.resources.storage import Playable

logger = logging.getLogger(__name__)

# Tilt limits in degrees (negative is nose up)
MIN_ROTATION = -30.0
MAX_ROTATION = 90.0


class Actor(AnimatedEntity):
    """
    Falls under gravity, flaps upward on demand.

    The actor does not track its own liveness: it reports floor and
    obstacle hits through the session context and stops reporting once the
    game has left PLAYING.
    """

    kind = EntityKind.ACTOR
    z_index = 2
    collidable = True
    falling = True
    fallback_color = (250, 220, 60)

    def __init__(
        self,
        context: SessionContext,
        x: float,
        y: float,
        width: float,
        height: float,
        physics_engine: PhysicsEngine,
        flap_speed: float,
        rotation_speed: float = 0.0,
        frames: Sequence[Frame] = (),
        animation_speed: float = 0.0,
        sprite_sheet: Optional[object] = None,
        flap_sound: Optional[Playable] = None,
        hit_sound: Optional[Playable] = None,
        die_sound: Optional[Playable] = None,
    ) -> None:
        super().__init__(
            context, x, y, width, height,
            frames=frames,
            animation_speed=animation_speed,
            sprite_sheet=sprite_sheet,
        )
        self.physics_engine = physics_engine
        self.fall_velocity = 0.0
        self.flap_speed = flap_speed
        self.rotation_speed = rotation_speed
        self._flap_sound = flap_sound
        self._hit_sound = hit_sound
        self._die_sound = die_sound
        self.enable_animation()

    @property
    def rotation(self) -> float:
        tilt = self.fall_velocity * self.rotation_speed
        return max(MIN_ROTATION, min(MAX_ROTATION, tilt))

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def update(self, delta: float) -> None:
        super().update(delta)
        self.physics_engine.update(self, delta)

        # Ceiling
        if self.y < 0:
            self.y = 0

        # Floor
        if self.y + self.height >= self.scene.height:
            self._crash(self._die_sound, "floor")

    def collide(self, other: Entity) -> None:
        if other.is_obstacle():
            self._crash(self._hit_sound, "obstacle")

    def flap(self) -> None:
        self.fall_velocity = -self.flap_speed
        _play(self._flap_sound)

    def _crash(self, sound: Optional[Playable], cause: str) -> None:
        if not self.context.is_playing():
            return
        logger.info(f"Actor crashed into {cause} at y={self.y:.1f}")
        _play(sound)
        self.context.notify_game_over()


def _play(sound: Optional[Playable]) -> None:
    if sound is not None:
        sound.play()
