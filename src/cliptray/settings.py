"""Persistent appearance preferences and convenience helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

SETTINGS_ENV_VAR = "CLIPTRAY_SETTINGS_PATH"

LOGGER = logging.getLogger("cliptray.settings")


class PopupPosition(str, Enum):
    """Anchor rule deciding where the history popup opens."""

    CURSOR = "cursor"
    STATUS_ITEM = "statusItem"
    WINDOW = "window"
    CENTER = "center"
    LAST_POSITION = "lastPosition"

    @property
    def description(self) -> str:
        return _POPUP_POSITION_LABELS[self]

    @property
    def per_screen(self) -> bool:
        """Whether this anchor can target a specific display."""
        return self in (PopupPosition.CENTER, PopupPosition.LAST_POSITION)


_POPUP_POSITION_LABELS = {
    PopupPosition.CURSOR: "Cursor",
    PopupPosition.STATUS_ITEM: "Menu icon",
    PopupPosition.WINDOW: "Window center",
    PopupPosition.CENTER: "Screen center",
    PopupPosition.LAST_POSITION: "Last position",
}


class PinsPosition(str, Enum):
    """Where pinned items are listed in the popup."""

    TOP = "top"
    BOTTOM = "bottom"

    @property
    def description(self) -> str:
        return self.value.capitalize()


class HighlightMatch(str, Enum):
    """How search matches are emphasized."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    COLOR = "color"

    @property
    def description(self) -> str:
        return self.value.capitalize()


class MenuIcon(str, Enum):
    """Glyph shown in the menu bar / tray."""

    CLIPBOARD = "clipboard"
    SCISSORS = "scissors"
    PAPERCLIP = "paperclip"

    @property
    def description(self) -> str:
        return self.value.capitalize()


class SearchVisibility(str, Enum):
    """When the search field is shown in the popup."""

    ALWAYS = "always"
    DURING_SEARCH = "duringSearch"

    @property
    def description(self) -> str:
        if self is SearchVisibility.ALWAYS:
            return "Always"
        return "During search"


WindowPosition = Tuple[float, float]

DEFAULT_WINDOW_POSITION: WindowPosition = (0.5, 0.8)

ENUM_TYPES: Dict[str, type] = {
    "popup_position": PopupPosition,
    "pin_to": PinsPosition,
    "highlight_match": HighlightMatch,
    "menu_icon": MenuIcon,
    "search_visibility": SearchVisibility,
}

# (minimum, maximum) for every numeric preference
NUMERIC_LIMITS: Dict[str, Tuple[float, float]] = {
    "image_max_height": (1, 200),
    "preview_image_scale": (0.1, 1.0),
    "preview_delay": (200, 100_000),
}


@dataclass
class AppSettings:
    """User-adjustable appearance settings persisted to disk."""

    popup_position: PopupPosition = PopupPosition.CURSOR
    popup_screen: int = 0
    pin_to: PinsPosition = PinsPosition.TOP
    image_max_height: int = 40
    preview_image_scale: float = 0.4
    # Delay before the preview popover opens (in milliseconds)
    preview_delay: int = 1500
    highlight_match: HighlightMatch = HighlightMatch.BOLD
    menu_icon: MenuIcon = MenuIcon.CLIPBOARD
    show_in_status_bar: bool = True
    show_recent_copy_in_menu_bar: bool = False
    show_search: bool = True
    search_visibility: SearchVisibility = SearchVisibility.ALWAYS
    show_title: bool = True
    show_application_icons: bool = False
    show_footer: bool = True
    show_special_symbols: bool = True
    window_position: WindowPosition = DEFAULT_WINDOW_POSITION

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        """Return every preference key in declaration order."""
        return tuple(field.name for field in fields(cls))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the settings to a JSON-friendly dictionary."""
        data = asdict(self)
        for key in ENUM_TYPES:
            data[key] = data[key].value
        data["window_position"] = list(data["window_position"])
        return data

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppSettings":
        """Create a settings instance from a dictionary payload.

        Unknown keys are ignored and values that cannot be coerced fall back
        to their defaults, so older or hand-edited files still load.
        """
        defaults = cls()
        values: Dict[str, Any] = {}
        for key in cls.keys():
            if key not in payload:
                continue
            try:
                values[key] = coerce_value(key, payload[key])
            except (TypeError, ValueError):
                LOGGER.warning(
                    "Ignoring invalid value for %s: %r", key, payload[key]
                )
                values[key] = getattr(defaults, key)
        return cls(**values)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppSettings":
        """Load settings from disk, falling back to defaults."""
        settings_path = path or default_settings_path()
        if settings_path.is_file():
            try:
                payload = json.loads(settings_path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                LOGGER.warning(
                    "Could not read %s, using defaults", settings_path, exc_info=True
                )
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            return cls.from_dict(payload)
        return cls()

    def save(self, path: Optional[Path] = None) -> None:
        """Persist the settings to disk."""
        settings_path = path or default_settings_path()
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = json.dumps(self.to_dict(), indent=2, sort_keys=True)
        settings_path.write_text(serialized, encoding="utf-8")


def clamp_number(key: str, value: float) -> float:
    """Clamp a numeric preference into its declared domain."""
    minimum, maximum = NUMERIC_LIMITS[key]
    return max(minimum, min(maximum, value))


def coerce_value(key: str, value: Any) -> Any:
    """Convert a raw value into the type declared for ``key``.

    Raises ``ValueError`` or ``TypeError`` when the value does not fit.
    """
    if key in ENUM_TYPES:
        return ENUM_TYPES[key](value)
    if key == "window_position":
        x, y = value
        return (float(x), float(y))
    if key == "popup_screen":
        screen = _strict_int(value)
        if screen < 0:
            raise ValueError("popup_screen must not be negative")
        return screen
    if key == "preview_image_scale":
        if isinstance(value, bool):
            raise TypeError("expected a number")
        return float(clamp_number(key, float(value)))
    if key in NUMERIC_LIMITS:
        return int(clamp_number(key, _strict_int(value)))
    if key.startswith("show_"):
        if not isinstance(value, bool):
            raise TypeError(f"{key} expects a boolean")
        return value
    raise KeyError(key)


def _strict_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("expected an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not a whole number")
        return int(value)
    return int(value)


def _app_data_dir() -> Path:
    local_app_data = os.getenv("LOCALAPPDATA")
    if local_app_data:
        base = Path(local_app_data)
    else:
        base = Path.home() / "AppData" / "Local"
    return base / "Cliptray"


def default_settings_path() -> Path:
    """Resolve the path used to persist settings."""
    # Use explicit env var when provided
    override = os.getenv(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return _app_data_dir() / "settings.json"


def default_log_path() -> Path:
    """Resolve the path of the rolling application log."""
    return default_settings_path().with_name("cliptray.log")
