"""Gravity integration."""

import logging

from skyflap.engine.entity import Entity

logger = logging.getLogger(__name__)


class PhysicsEngine:
    """
    Applies constant gravitational acceleration to falling entities.

    Semi-implicit Euler: velocity is updated first and the new velocity
    moves the entity.
    """

    def __init__(self, gravitation: float) -> None:
        self.gravitation = gravitation

    def update(self, entity: Entity, delta: float) -> None:
        if not entity.falling:
            return
        entity.fall_velocity += self.gravitation * delta
        entity.y += entity.fall_velocity * delta
