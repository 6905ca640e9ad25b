"""Pygame/Pillow backed resource loading."""

from pathlib import Path
from typing import Any
import logging

import numpy as np
from numpy.typing import NDArray
import pygame
from PIL import Image

from skyflap.resources.storage import ResourceLoader, ResourceSpec, ResourceType

logger = logging.getLogger(__name__)


class SilentSound:
    """Stand-in sound used when no audio device is available."""

    def play(self) -> None:
        pass


class PygameResourceLoader(ResourceLoader):
    """
    Images become RGBA numpy arrays, audio becomes pygame.mixer.Sound.

    Relative paths are resolved against base_path.
    """

    def __init__(self, base_path: Path | None = None) -> None:
        self.base_path = base_path or Path.cwd()
        self._warned_no_audio = False

    def _resolve(self, src: str | Path) -> Path:
        path = Path(src)
        if not path.is_absolute():
            path = self.base_path / path
        return path

    def load(self, spec: ResourceSpec) -> Any:
        path = self._resolve(spec.src)
        if spec.type is ResourceType.IMAGE:
            return self._load_image(path, spec)
        if spec.type is ResourceType.AUDIO:
            return self._load_audio(path)
        raise ValueError(f"Unknown resource type: {spec.type}")

    def _load_image(self, path: Path, spec: ResourceSpec) -> NDArray[np.uint8]:
        with Image.open(path) as image:
            image = image.convert("RGBA")
            if spec.width and spec.height and image.size != (spec.width, spec.height):
                image = image.resize((spec.width, spec.height), Image.NEAREST)
            pixels = np.array(image, dtype=np.uint8)
        logger.debug(f"Loaded image {path} {pixels.shape[1]}x{pixels.shape[0]}")
        return pixels

    def _load_audio(self, path: Path) -> Any:
        if not path.exists():
            raise FileNotFoundError(path)
        if not pygame.mixer.get_init():
            if not self._warned_no_audio:
                logger.warning("Audio mixer not initialized, sounds are muted")
                self._warned_no_audio = True
            return SilentSound()
        return pygame.mixer.Sound(str(path))

