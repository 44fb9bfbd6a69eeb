"""Appearance settings logic shared by every settings surface."""

from .bounds import (
    NUMERIC_BOUNDS,
    NumericBounds,
    NumericInputError,
    clamp,
    format_bounded,
    parse_bounded,
    step_value,
)
from .pane import AppearancePane
from .positions import (
    ACTIVE_SCREEN_LABEL,
    PositionOption,
    render_position_options,
    screen_label,
)

__all__ = [
    "ACTIVE_SCREEN_LABEL",
    "AppearancePane",
    "NUMERIC_BOUNDS",
    "NumericBounds",
    "NumericInputError",
    "PositionOption",
    "clamp",
    "format_bounded",
    "parse_bounded",
    "render_position_options",
    "screen_label",
    "step_value",
]
