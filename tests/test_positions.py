"""Tests for the popup position option rendering."""

from __future__ import annotations

from typing import List

import pytest

from cliptray.appearance.positions import (
    ACTIVE_SCREEN_LABEL,
    display_labels,
    render_position_options,
    screen_label,
)
from cliptray.displays import Display
from cliptray.settings import PopupPosition


def make_displays(count: int) -> List[Display]:
    return [Display(index=i, name=f"Display {i + 1}") for i in range(count)]


@pytest.mark.parametrize("count", [0, 1])
def test_single_display_renders_flat_options(count: int) -> None:
    options = render_position_options(
        PopupPosition.LAST_POSITION, 2, make_displays(count)
    )
    assert [o.position for o in options] == list(PopupPosition)
    assert not any(o.expanded for o in options)
    assert [o.label for o in options if o.selected] == ["Last position"]


@pytest.mark.parametrize("count", [2, 3, 5])
def test_multiple_displays_expand_per_screen_positions(count: int) -> None:
    options = render_position_options(PopupPosition.CURSOR, 0, make_displays(count))
    assert len(options) == len(PopupPosition)
    for option in options:
        if option.position in (PopupPosition.CENTER, PopupPosition.LAST_POSITION):
            assert len(option.children) == count + 1
            assert [c.screen_index for c in option.children] == list(range(count + 1))
        else:
            assert not option.expanded


def test_sub_option_labels() -> None:
    options = render_position_options(PopupPosition.CURSOR, 0, make_displays(2))
    last = next(o for o in options if o.position is PopupPosition.LAST_POSITION)
    assert [c.label for c in last.children] == [
        ACTIVE_SCREEN_LABEL,
        "Display 1",
        "Display 2",
    ]
    assert last.label == "Last position"


def test_selected_expanded_option_names_its_screen() -> None:
    options = render_position_options(PopupPosition.CENTER, 2, make_displays(2))
    center = next(o for o in options if o.position is PopupPosition.CENTER)
    assert center.selected
    assert center.label == "Screen center (Display 2)"
    assert [c.selected for c in center.children] == [False, False, True]


def test_out_of_range_screen_renders_as_active_screen() -> None:
    options = render_position_options(PopupPosition.CENTER, 7, make_displays(2))
    center = next(o for o in options if o.position is PopupPosition.CENTER)
    assert center.label == "Screen center (Active Screen)"
    assert not any(c.selected for c in center.children)


def test_screen_label() -> None:
    displays = make_displays(2)
    assert screen_label(0, displays) == ACTIVE_SCREEN_LABEL
    assert screen_label(1, displays) == "Display 1"
    assert screen_label(3, displays) == ACTIVE_SCREEN_LABEL
    assert screen_label(1, []) == ACTIVE_SCREEN_LABEL


def test_rendering_is_deterministic() -> None:
    displays = make_displays(3)
    first = render_position_options(PopupPosition.LAST_POSITION, 1, displays)
    second = render_position_options(PopupPosition.LAST_POSITION, 1, list(displays))
    assert first == second


def test_same_model_displays_get_distinct_labels() -> None:
    displays = [
        Display(index=0, name="Generic PnP Monitor"),
        Display(index=1, name="Generic PnP Monitor"),
        Display(index=2, name="DELL U2720Q"),
    ]
    options = render_position_options(PopupPosition.CENTER, 2, displays)
    center = next(o for o in options if o.position is PopupPosition.CENTER)

    labels = [child.label for child in center.children]
    assert labels == [
        ACTIVE_SCREEN_LABEL,
        "Generic PnP Monitor (1)",
        "Generic PnP Monitor (2)",
        "DELL U2720Q",
    ]
    assert center.label == "Screen center (Generic PnP Monitor (2))"
    assert display_labels(displays[:1]) == ["Generic PnP Monitor"]
