"""Validation domains for numeric appearance preferences."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Union

from ..settings import NUMERIC_LIMITS

Number = Union[int, float]

_EPSILON = 1e-9
_GRID_TOLERANCE = 1e-6


class NumericInputError(ValueError):
    """Raised when typed text is not a number inside the field's domain."""


@dataclass(frozen=True)
class NumericBounds:
    """Domain shared by the text entry and stepper of one preference."""

    key: str
    minimum: Number
    maximum: Number
    step: Number = 1
    percent: bool = False

    @property
    def integer(self) -> bool:
        return isinstance(self.step, int) and not self.percent

    def contains(self, value: Number) -> bool:
        return self.minimum - _EPSILON <= value <= self.maximum + _EPSILON


def _bounds(key: str, step: Number = 1, percent: bool = False) -> NumericBounds:
    minimum, maximum = NUMERIC_LIMITS[key]
    return NumericBounds(key, minimum, maximum, step=step, percent=percent)


NUMERIC_BOUNDS: Dict[str, NumericBounds] = {
    "image_max_height": _bounds("image_max_height"),
    "preview_image_scale": _bounds("preview_image_scale", step=0.05, percent=True),
    "preview_delay": _bounds("preview_delay"),
}


def clamp(value: Number, bounds: NumericBounds) -> Number:
    """Pin ``value`` into ``[bounds.minimum, bounds.maximum]``."""
    clamped = max(bounds.minimum, min(bounds.maximum, value))
    if bounds.integer:
        return int(round(clamped))
    return round(float(clamped), 6)


def step_value(value: Number, bounds: NumericBounds, direction: int) -> Number:
    """Move ``value`` to the next step-grid point up (direction > 0) or down.

    A value between grid points lands on the neighbouring one, so 0.42 with
    a 0.05 step goes to 0.45 or 0.4. The result stays in range.
    """
    if direction == 0:
        return clamp(value, bounds)
    steps = value / bounds.step
    if direction > 0:
        target = math.floor(steps + _GRID_TOLERANCE) + 1
    else:
        target = math.ceil(steps - _GRID_TOLERANCE) - 1
    return clamp(target * bounds.step, bounds)


def parse_bounded(raw: str, bounds: NumericBounds) -> Number:
    """Parse typed text for ``bounds``.

    Percent fields read ``"50%"`` and ``"50"`` alike as one half. Integer
    fields accept digit grouping (``"1,500"``). Text that is not a number,
    not whole for an integer field, or outside the domain raises
    :class:`NumericInputError`; nothing is clamped here.
    """
    text = (raw or "").strip().replace(",", "").replace("_", "").replace(" ", "")
    if bounds.percent and text.endswith("%"):
        text = text[:-1]
    if not text:
        raise NumericInputError("Enter a number")

    try:
        number = float(text)
    except ValueError:
        raise NumericInputError(f"{raw!r} is not a number") from None
    if number != number or number in (float("inf"), float("-inf")):
        raise NumericInputError(f"{raw!r} is not a number")

    if bounds.percent:
        value: Number = round(number / 100.0, 6)
    elif bounds.integer:
        if not number.is_integer():
            raise NumericInputError(f"{raw!r} is not a whole number")
        value = int(number)
    else:
        value = number

    if not bounds.contains(value):
        raise NumericInputError(
            f"Value must be between {format_bounded(bounds.minimum, bounds)} "
            f"and {format_bounded(bounds.maximum, bounds)}"
        )
    return clamp(value, bounds)


def format_bounded(value: Number, bounds: NumericBounds) -> str:
    """Render ``value`` the way the text field shows it."""
    if bounds.percent:
        return f"{round(float(value) * 100, 2):g}%"
    if bounds.integer:
        return f"{int(value):,}"
    return f"{value:g}"
