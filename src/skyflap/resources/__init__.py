"""Assets and persisted state."""

from .storage import ResourceStorage, ResourceLoader, ResourceSpec, ResourceType
from .persistence import KeyValueStorage, JsonFileStorage, MemoryStorage

__all__ = [
    "ResourceStorage",
    "ResourceLoader",
    "ResourceSpec",
    "ResourceType",
    "KeyValueStorage",
    "JsonFileStorage",
    "MemoryStorage",
]
