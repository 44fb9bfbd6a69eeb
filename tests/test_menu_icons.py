"""Tests for the menu icon picker images."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from PIL import Image

from cliptray.settings import MenuIcon
from cliptray.icons import IconTheme, MenuIconFactory, detect_icon_theme


def test_factory_generates_every_icon(tmp_path: Path) -> None:
    factory = MenuIconFactory(icons_dir=tmp_path)
    for theme in IconTheme:
        for size in factory.sizes:
            images = factory.all_images(theme, size)
            assert list(images) == list(MenuIcon)
            for image in images.values():
                assert isinstance(image, Image.Image)
                assert image.size == (size, size)
                assert image.mode == "RGBA"
                assert image.getbbox() is not None


def test_unsupported_size_raises(tmp_path: Path) -> None:
    factory = MenuIconFactory(icons_dir=tmp_path)
    with pytest.raises(ValueError):
        factory.image(MenuIcon.CLIPBOARD, IconTheme.LIGHT, 99)


def test_ico_asset_overrides_drawn_glyph(tmp_path: Path) -> None:
    Image.new("RGBA", (32, 32), (255, 0, 0, 255)).save(tmp_path / "scissors.ico")
    factory = MenuIconFactory(icons_dir=tmp_path)

    image = factory.image(MenuIcon.SCISSORS, IconTheme.DARK, 16)

    assert image.size == (16, 16)
    assert image.getpixel((8, 8)) == (255, 0, 0, 255)


def test_images_are_cached(tmp_path: Path) -> None:
    factory = MenuIconFactory(icons_dir=tmp_path)
    first = factory.image(MenuIcon.PAPERCLIP, IconTheme.LIGHT, 20)
    assert factory.image(MenuIcon.PAPERCLIP, IconTheme.LIGHT, 20) is first


@pytest.mark.skipif(sys.platform == "win32", reason="reads the Windows registry")
def test_theme_detection_defaults_to_light() -> None:
    assert detect_icon_theme() is IconTheme.LIGHT
