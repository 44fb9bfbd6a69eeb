"""Icon helpers for the menu icon picker.

Loads ICO assets named after each :class:`MenuIcon` value from an icons
folder when one is present and draws simple glyphs with Pillow otherwise.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from PIL import Image, ImageDraw

from .settings import MenuIcon

ICON_SIZES: Tuple[int, ...] = (16, 20, 24, 32)

_LOGGER = logging.getLogger("cliptray.icons")


class IconTheme(str, Enum):
    """Color schemes the glyphs are drawn for."""

    LIGHT = "light"
    DARK = "dark"
    HIGH_CONTRAST = "high_contrast"


@dataclass(frozen=True)
class _IconKey:
    icon: MenuIcon
    theme: IconTheme
    size: int


class MenuIconFactory:
    """Generates and caches Pillow images for menu icon choices."""

    def __init__(
        self,
        sizes: Iterable[int] = ICON_SIZES,
        icons_dir: Optional[Path] = None,
    ) -> None:
        self._sizes = tuple(sorted(set(sizes)))
        self._icons_dir = icons_dir or _resolve_icons_dir()

    @property
    def sizes(self) -> Tuple[int, ...]:
        """Return the available icon sizes."""
        return self._sizes

    def image(self, icon: MenuIcon, theme: IconTheme, size: int) -> Image.Image:
        """Fetch a Pillow image for ``icon`` at ``size`` pixels."""
        if size not in self._sizes:
            raise ValueError(f"Unsupported menu icon size {size}")
        return self._load(_IconKey(icon=MenuIcon(icon), theme=theme, size=size))

    def all_images(self, theme: IconTheme, size: int) -> Dict[MenuIcon, Image.Image]:
        """One image per :class:`MenuIcon`, in declaration order."""
        return {icon: self.image(icon, theme, size) for icon in MenuIcon}

    @lru_cache(maxsize=64)  # noqa: B019
    def _load(self, key: _IconKey) -> Image.Image:
        if self._icons_dir:
            asset = self._icons_dir / f"{key.icon.value}.ico"
            if asset.exists():
                img = _open_ico_scaled(asset, key.size)
                if img is not None:
                    return img
        return _draw_glyph(key.icon, key.theme, key.size)


def _resolve_icons_dir() -> Optional[Path]:
    """Locate an optional folder of menu icon assets.

    Order:
    1) CLIPTRAY_ICONS_DIR env var
    2) PyInstaller bundle dir (sys._MEIPASS)/icons
    """
    env_dir = os.getenv("CLIPTRAY_ICONS_DIR")
    if env_dir:
        p = Path(env_dir)
        if p.is_dir():
            return p

    base = getattr(sys, "_MEIPASS", None)
    if base:
        p = Path(base) / "icons"
        if p.is_dir():
            return p
    return None


def _open_ico_scaled(path: Path, size: int) -> Optional[Image.Image]:
    """Open an ICO and return RGBA image scaled to (size, size)."""
    try:
        with Image.open(path) as im:
            target = im.convert("RGBA")
            if target.size != (size, size):
                target = target.resize((size, size), Image.LANCZOS)
            return target.copy()
    except OSError:
        _LOGGER.debug("Could not open icon %s", path, exc_info=True)
        return None


def _ink_for_theme(theme: IconTheme) -> Tuple[int, int, int, int]:
    if theme is IconTheme.HIGH_CONTRAST:
        return (255, 255, 0, 255)
    if theme is IconTheme.DARK:
        return (230, 230, 230, 255)
    return (50, 50, 50, 255)


def _draw_glyph(icon: MenuIcon, theme: IconTheme, size: int) -> Image.Image:
    """Draw a monochrome glyph on a transparent square."""
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    ink = _ink_for_theme(theme)
    width = max(1, size // 12)
    pad = max(1, size // 8)
    right = size - pad - 1
    bottom = size - pad - 1

    if icon is MenuIcon.CLIPBOARD:
        draw.rectangle((pad, pad + width * 2, right, bottom), outline=ink, width=width)
        clip_left = size // 3
        draw.rectangle(
            (clip_left, pad, size - clip_left - 1, pad + width * 3), fill=ink
        )
    elif icon is MenuIcon.SCISSORS:
        radius = max(2, size // 6)
        for cx in (pad + radius, right - radius):
            cy = bottom - radius
            draw.ellipse(
                (cx - radius, cy - radius, cx + radius, cy + radius),
                outline=ink,
                width=width,
            )
        draw.line((pad + radius, bottom - radius * 2, right, pad), fill=ink, width=width)
        draw.line((right - radius, bottom - radius * 2, pad, pad), fill=ink, width=width)
    else:
        draw.rounded_rectangle(
            (pad * 2, pad, right - pad, bottom),
            radius=max(1, size // 5),
            outline=ink,
            width=width,
        )
        draw.line((size // 2, pad * 2, size // 2, bottom - pad), fill=ink, width=width)
    return image


def detect_icon_theme() -> IconTheme:
    """Best-effort detection of the Windows theme preference."""
    try:
        import winreg
    except ModuleNotFoundError:  # pragma: no cover - not running on Windows
        return IconTheme.LIGHT

    # Check for high-contrast mode first
    try:
        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER,
            r"Control Panel\Accessibility\HighContrast",
        ) as key:  # type: ignore[attr-defined]
            flags, _ = winreg.QueryValueEx(key, "Flags")
            # HCF_HIGHCONTRASTON = 0x01
            if int(flags) & 0x01:
                return IconTheme.HIGH_CONTRAST
    except OSError:
        pass

    key_path = r"Software\Microsoft\Windows\CurrentVersion\Themes\Personalize"
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path) as key:  # type: ignore[attr-defined]
            value, _ = winreg.QueryValueEx(key, "SystemUsesLightTheme")
    except FileNotFoundError:
        return IconTheme.LIGHT
    except OSError:  # pragma: no cover - registry access failure
        _LOGGER.debug("Failed to query Windows theme preference", exc_info=True)
        return IconTheme.LIGHT
    return IconTheme.LIGHT if int(value) else IconTheme.DARK
