"""
Scene module.

Host-owned objects scripts refer to through integer handles:
sprites and preloaded textures.
"""

from .arena import HandleArena
from .sprites import Sprite, SpriteScene
from .textures import TextureLibrary

__all__ = ["HandleArena", "Sprite", "SpriteScene", "TextureLibrary"]
