"""Toolkit-free controller behind the appearance settings window."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from ..displays import Display, DisplayTopologyProvider
from ..settings import ENUM_TYPES, PopupPosition
from ..store import PreferenceStore
from .bounds import (
    NUMERIC_BOUNDS,
    NumericBounds,
    NumericInputError,
    Number,
    format_bounded,
    parse_bounded,
    step_value,
)
from .positions import PositionOption, render_position_options, screen_label

LOGGER = logging.getLogger("cliptray.appearance")

PaneListener = Callable[[], None]


class AppearancePane:
    """Reads and writes appearance preferences on behalf of a view.

    The store and display provider are injected. The pane keeps a cached
    display list, refreshed whenever the provider reports a topology change,
    and tells its own listeners when that list actually changed.
    """

    def __init__(
        self, store: PreferenceStore, displays: DisplayTopologyProvider
    ) -> None:
        self._store = store
        self._provider = displays
        self._displays: List[Display] = list(displays.current_displays())
        self._listeners: List[PaneListener] = []
        self._unsubscribe_topology: Optional[Callable[[], None]] = displays.subscribe(
            self.refresh_displays
        )

    @property
    def store(self) -> PreferenceStore:
        return self._store

    # -- displays ---------------------------------------------------------

    def list_displays(self) -> List[Display]:
        return list(self._displays)

    def refresh_displays(self) -> bool:
        """Re-query the provider; return True when the cached list changed.

        Never writes a preference: a stored ``popup_screen`` that no longer
        points at a display is kept and only rendered as the active screen.
        """
        displays = list(self._provider.current_displays())
        if displays == self._displays:
            return False
        LOGGER.debug("Display list refreshed: %d display(s)", len(displays))
        self._displays = displays
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                LOGGER.exception("Appearance pane listener failed")
        return True

    def add_listener(self, listener: PaneListener) -> Callable[[], None]:
        """Call ``listener`` after every display list change."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return remove

    # -- popup position ---------------------------------------------------

    def position_options(self) -> List[PositionOption]:
        return render_position_options(
            self._store.get("popup_position"),
            self._store.get("popup_screen"),
            self._displays,
        )

    def selected_position_label(self) -> str:
        for option in self.position_options():
            if option.selected:
                return option.label
        return self._store.get("popup_position").description

    def current_screen_label(self) -> str:
        return screen_label(self._store.get("popup_screen"), self._displays)

    def select_position(
        self, position: PopupPosition, screen_index: Optional[int] = None
    ) -> None:
        """Store ``position`` and, when given, its target screen together."""
        position = PopupPosition(position)
        if screen_index is None:
            self._store.set("popup_position", position)
        else:
            self._store.update(popup_screen=screen_index, popup_position=position)
        LOGGER.info("Popup position set to %s (screen %s)", position.value, screen_index)

    def window_reset_visible(self) -> bool:
        return self._store.get("popup_position") is PopupPosition.LAST_POSITION

    def can_reset_window_position(self) -> bool:
        return not self._store.is_default("window_position")

    def reset_window_position(self) -> bool:
        """Restore the remembered popup location; no-op when already default."""
        if not self.can_reset_window_position():
            return False
        self._store.reset("window_position")
        LOGGER.info("Popup window position reset")
        return True

    # -- numeric fields ---------------------------------------------------

    def number_bounds(self, key: str) -> NumericBounds:
        try:
            return NUMERIC_BOUNDS[key]
        except KeyError:
            raise ValueError(f"{key} is not a numeric preference") from None

    def number_value(self, key: str) -> Number:
        self.number_bounds(key)
        return self._store.get(key)

    def number_text(self, key: str) -> str:
        return format_bounded(self.number_value(key), self.number_bounds(key))

    def submit_number(self, key: str, raw: str) -> bool:
        """Store typed text for ``key``; return False when it was rejected."""
        bounds = self.number_bounds(key)
        try:
            value = parse_bounded(raw, bounds)
        except NumericInputError as exc:
            LOGGER.debug("Rejected %r for %s: %s", raw, key, exc)
            return False
        self._store.set(key, value)
        return True

    def step_number(self, key: str, direction: int) -> Number:
        """Apply one stepper click and return the stored value."""
        bounds = self.number_bounds(key)
        value = step_value(self._store.get(key), bounds, direction)
        self._store.set(key, value)
        return self._store.get(key)

    # -- toggles and pickers ----------------------------------------------

    def set_flag(self, key: str, value: bool) -> None:
        if not isinstance(self._store.default(key), bool):
            raise ValueError(f"{key} is not a boolean preference")
        self._store.set(key, bool(value))

    def set_choice(self, key: str, value: Any) -> None:
        try:
            enum_type = ENUM_TYPES[key]
        except KeyError:
            raise ValueError(f"{key} is not a choice preference") from None
        if key == "popup_position":
            self.select_position(enum_type(value))
            return
        self._store.set(key, enum_type(value))

    def menu_icon_enabled(self) -> bool:
        return bool(self._store.get("show_in_status_bar"))

    def search_visibility_enabled(self) -> bool:
        return bool(self._store.get("show_search"))

    def footer_warning_visible(self) -> bool:
        return not self._store.get("show_footer")

    def close(self) -> None:
        """Drop the topology subscription and every pane listener."""
        if self._unsubscribe_topology is not None:
            self._unsubscribe_topology()
            self._unsubscribe_topology = None
        self._listeners.clear()
