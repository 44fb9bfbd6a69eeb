"""Popup position choices, expanded per display when several are active."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..displays import Display
from ..settings import PopupPosition

ACTIVE_SCREEN_LABEL = "Active Screen"


@dataclass(frozen=True)
class PositionOption:
    """One entry of the popup position picker.

    Flat entries have no ``children`` and ``screen_index`` is ``None``.
    Expanded entries carry one child per target screen; index 0 of the
    children is the active screen.
    """

    position: PopupPosition
    label: str
    selected: bool = False
    screen_index: Optional[int] = None
    children: Tuple["PositionOption", ...] = ()

    @property
    def expanded(self) -> bool:
        return bool(self.children)


def display_labels(displays: Sequence[Display]) -> List[str]:
    """One label per display, numbered where several share a model name."""
    counts = Counter(display.name for display in displays)
    return [
        f"{display.name} ({offset + 1})" if counts[display.name] > 1 else display.name
        for offset, display in enumerate(displays)
    ]


def screen_label(screen_index: int, displays: Sequence[Display]) -> str:
    """Name of the screen a stored ``popup_screen`` value refers to.

    0 and any index outside the current enumeration mean the active screen.
    """
    if 1 <= screen_index <= len(displays):
        return display_labels(displays)[screen_index - 1]
    return ACTIVE_SCREEN_LABEL


def screen_choices(displays: Sequence[Display]) -> List[Tuple[int, str]]:
    """``(screen_index, label)`` pairs: the active screen, then each display."""
    choices = [(0, ACTIVE_SCREEN_LABEL)]
    choices.extend(
        (offset + 1, label) for offset, label in enumerate(display_labels(displays))
    )
    return choices


def position_label(
    position: PopupPosition,
    current_position: PopupPosition,
    current_screen: int,
    displays: Sequence[Display],
) -> str:
    """Picker label for ``position``, naming the screen when it is selected."""
    if position.per_screen and len(displays) > 1 and position == current_position:
        return f"{position.description} ({screen_label(current_screen, displays)})"
    return position.description


def render_position_options(
    current_position: PopupPosition,
    current_screen: int,
    displays: Sequence[Display],
) -> List[PositionOption]:
    """Build the ordered picker entries for every :class:`PopupPosition`."""
    multi_screen = len(displays) > 1
    options: List[PositionOption] = []
    for position in PopupPosition:
        is_current = position == current_position
        if position.per_screen and multi_screen:
            children = tuple(
                PositionOption(
                    position=position,
                    label=label,
                    selected=is_current and index == current_screen,
                    screen_index=index,
                )
                for index, label in screen_choices(displays)
            )
            options.append(
                PositionOption(
                    position=position,
                    label=position_label(
                        position, current_position, current_screen, displays
                    ),
                    selected=is_current,
                    children=children,
                )
            )
        else:
            options.append(
                PositionOption(
                    position=position,
                    label=position.description,
                    selected=is_current,
                )
            )
    return options
