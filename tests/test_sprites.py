import pygame

from luasketch.scene.sprites import Sprite, SpriteScene
from luasketch.scene.textures import TextureLibrary, normalize_path


def test_advance_moves_by_velocity_times_step():
    sprite = Sprite(x=10, y=10, vx=2, vy=3)
    sprite.advance(0.5, (100, 100))
    assert (sprite.x, sprite.y) == (11.0, 11.5)


def test_advance_bounces_off_edges_accounting_for_size():
    sprite = Sprite(x=85, y=5, vx=10, vy=-10, texture=pygame.Surface((10, 20)))
    sprite.advance(1.0, (100, 100))
    assert sprite.x == 90.0
    assert sprite.vx == -10
    assert sprite.y == 0.0
    assert sprite.vy == 10


def test_tinted_texture_multiplies_channels():
    texture = pygame.Surface((2, 2), pygame.SRCALPHA)
    texture.fill((200, 100, 50, 255))
    sprite = Sprite(texture=texture, tint=(0.5, 1.0, 0.0, 1.0))

    tinted = sprite.tinted_texture()
    assert tinted is not texture
    r, g, b, a = tinted.get_at((0, 0))
    assert abs(r - 100) <= 1
    assert g == 100
    assert b == 0
    assert a == 255
    assert texture.get_at((0, 0)) == (200, 100, 50, 255)


def test_untinted_texture_is_used_directly():
    texture = pygame.Surface((2, 2))
    assert Sprite(texture=texture).tinted_texture() is texture
    assert Sprite().tinted_texture() is None


def test_scene_renders_textured_sprites_in_order():
    target = pygame.Surface((20, 20))
    target.fill((0, 0, 0))
    red = pygame.Surface((4, 4))
    red.fill((255, 0, 0))
    blue = pygame.Surface((4, 4))
    blue.fill((0, 0, 255))

    scene = SpriteScene()
    scene.add(Sprite(x=2, y=2, texture=red))
    scene.add(Sprite(x=4, y=4, texture=blue))
    scene.add(Sprite(x=10, y=10))
    scene.render(target)

    assert target.get_at((2, 2))[:3] == (255, 0, 0)
    assert target.get_at((5, 5))[:3] == (0, 0, 255)
    assert target.get_at((11, 11))[:3] == (0, 0, 0)


def test_scene_remove_and_clear():
    scene = SpriteScene()
    sprite = Sprite()
    scene.add(sprite)
    scene.remove(sprite)
    scene.remove(sprite)
    assert sprite not in scene

    scene.add(Sprite())
    scene.clear()
    assert len(scene) == 0


def test_normalize_path():
    assert normalize_path("./img/ball.png") == "img/ball.png"
    assert normalize_path("img\\ball.png") == "img/ball.png"


def test_texture_library_preload(tmp_path):
    image = pygame.Surface((3, 3))
    (tmp_path / "sub").mkdir()
    pygame.image.save(image, str(tmp_path / "sub" / "ball.bmp"))
    (tmp_path / "notes.txt").write_text("not an image")

    library = TextureLibrary()
    assert library.preload(tmp_path) == 1
    assert "sub/ball.bmp" in library
    assert library.get("./sub/ball.bmp").get_size() == (3, 3)
    assert list(library.paths) == ["sub/ball.bmp"]


def test_texture_library_missing_directory(tmp_path):
    assert TextureLibrary().preload(tmp_path / "nope") == 0


def test_scene_renders_sprites_with_non_finite_positions():
    target = pygame.Surface((20, 20))
    target.fill((0, 0, 0))
    texture = pygame.Surface((4, 4))
    texture.fill((255, 0, 0))

    scene = SpriteScene()
    scene.add(Sprite(x=float("nan"), y=1e300, texture=texture))
    scene.render(target)
    assert target.get_at((0, 0))[:3] == (0, 0, 0)
