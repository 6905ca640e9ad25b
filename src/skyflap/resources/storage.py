"""
Resource storage: loads a manifest once and hands out loaded assets.

The actual decoding is done by a ResourceLoader so the game can run
against any backend (pygame/Pillow in the window, fakes in tests).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol
import asyncio
import logging

from skyflap.errors import ResourceLoadError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class ResourceType(Enum):
    IMAGE = auto()
    AUDIO = auto()


@dataclass(frozen=True)
class ResourceSpec:
    """One manifest entry."""

    type: ResourceType
    src: str | Path
    width: Optional[int] = None
    height: Optional[int] = None


Manifest = Mapping[str, ResourceSpec]


class Playable(Protocol):
    """Anything with a play() method (sound effects)."""

    def play(self) -> Any:
        ...


class ResourceLoader(ABC):
    """Decodes a single resource. Called off the event loop."""

    @abstractmethod
    def load(self, spec: ResourceSpec) -> Any:
        ...


class ResourceStorage:
    """
    Name -> loaded resource registry.

    load() is a coroutine; every entry of a manifest is loaded
    concurrently and the first failure aborts the whole load.
    """

    def __init__(self, loader: ResourceLoader) -> None:
        self._loader = loader
        self._resources: dict[str, Any] = {}

    async def load(self, manifest: Manifest) -> None:
        names = list(manifest)
        logger.info(f"Loading {len(names)} resources")
        results = await asyncio.gather(
            *(self._load_one(name, manifest[name]) for name in names)
        )
        for name, resource in zip(names, results):
            self._resources[name] = resource
        logger.info(f"Loaded resources: {', '.join(names)}")

    async def _load_one(self, name: str, spec: ResourceSpec) -> Any:
        try:
            return await asyncio.to_thread(self._loader.load, spec)
        except Exception as e:
            logger.error(f"Failed to load {name} from {spec.src}: {e}")
            raise ResourceLoadError(name, str(spec.src), e) from e

    def register(self, name: str, resource: Any) -> None:
        """Add an already decoded resource (e.g. a cut-out image)."""
        self._resources[name] = resource

    def get(self, name: str) -> Any:
        try:
            return self._resources[name]
        except KeyError:
            raise ResourceNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._resources
