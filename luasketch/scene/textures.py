"""
Texture library.

Images are loaded once, when the application starts, and looked up
by their path relative to the assets directory.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Optional, Union

import pygame

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tga")


def normalize_path(path: str) -> str:
    """Canonical lookup key for a texture path ("./a\\b.png" -> "a/b.png")."""
    key = PurePosixPath(path.replace("\\", "/")).as_posix()
    while key.startswith("./"):
        key = key[2:]
    return key


class TextureLibrary:
    """Preloaded textures keyed by normalized path."""

    def __init__(self):
        self._textures: Dict[str, pygame.Surface] = {}

    def __len__(self) -> int:
        return len(self._textures)

    def __contains__(self, path: str) -> bool:
        return normalize_path(path) in self._textures

    @property
    def paths(self) -> Iterable[str]:
        return sorted(self._textures)

    def add(self, path: str, surface: pygame.Surface) -> None:
        """Register an already loaded surface under a path."""
        self._textures[normalize_path(path)] = surface

    def get(self, path: str) -> Optional[pygame.Surface]:
        """Look up a texture; None when it was never loaded."""
        return self._textures.get(normalize_path(path))

    def preload(self, directory: Union[str, Path]) -> int:
        """
        Load every image below a directory.

        Args:
            directory: Assets directory

        Returns:
            Number of textures loaded
        """
        root = Path(directory)
        if not root.is_dir():
            logger.warning(f"Assets directory not found: {root}")
            return 0

        loaded = 0
        for file in sorted(root.rglob("*")):
            if file.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            key = file.relative_to(root).as_posix()
            try:
                surface = pygame.image.load(str(file))
            except pygame.error as e:
                logger.warning(f"Failed to load texture {file}: {e}")
                continue
            self.add(key, surface)
            loaded += 1

        logger.info(f"Preloaded {loaded} textures from {root}")
        return loaded
