"""Simulation engine: entities, scene, physics, collisions, obstacles."""

from .geometry import Rect
from .entity import Entity, AnimatedEntity, EntityKind, SessionContext
from .physics import PhysicsEngine
from .collision import RectCollisionEngine
from .scene import Scene
from .actor import Actor
from .obstacles import ObstaclePair, ObstacleDriver
from .background import BackgroundTile, generate_backgrounds

__all__ = [
    "Rect",
    "Entity",
    "AnimatedEntity",
    "EntityKind",
    "SessionContext",
    "PhysicsEngine",
    "RectCollisionEngine",
    "Scene",
    "Actor",
    "ObstaclePair",
    "ObstacleDriver",
    "BackgroundTile",
    "generate_backgrounds",
]
