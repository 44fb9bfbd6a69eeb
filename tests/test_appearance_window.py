"""Tests for the appearance window's store-driven redraw helpers."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

pytest.importorskip("customtkinter")

from cliptray.appearance import AppearancePane  # noqa: E402
from cliptray.displays import StaticDisplayProvider  # noqa: E402
from cliptray.store import PreferenceStore  # noqa: E402
from cliptray.ui.appearance import (  # noqa: E402
    FOOTER_WARNING,
    AppearanceSettingsWindow,
    field_hint,
    get_windows_dpi_scale,
)


def _stub_window(store: PreferenceStore) -> SimpleNamespace:
    pane = AppearancePane(store, StaticDisplayProvider())
    return SimpleNamespace(
        _store=store,
        _pane_required=lambda: pane,
        _pickers={"menu_icon": MagicMock(), "search_visibility": MagicMock()},
        _icon_preview=None,
        _icon_images={},
        _footer_warning=MagicMock(),
    )


def test_dependent_pickers_follow_their_toggles() -> None:
    store = PreferenceStore()
    window = _stub_window(store)

    store.set("show_in_status_bar", False)
    AppearanceSettingsWindow._refresh_dependents(window)

    window._pickers["menu_icon"].configure.assert_called_with(state="disabled")
    window._pickers["search_visibility"].configure.assert_called_with(state="normal")


def test_footer_warning_text_tracks_show_footer() -> None:
    store = PreferenceStore()
    window = _stub_window(store)

    AppearanceSettingsWindow._refresh_dependents(window)
    window._footer_warning.configure.assert_called_with(text="")

    store.set("show_footer", False)
    AppearanceSettingsWindow._refresh_dependents(window)
    window._footer_warning.configure.assert_called_with(text=FOOTER_WARNING)


def test_field_hints() -> None:
    assert field_hint("image_max_height") == "1 to 200"
    assert field_hint("preview_image_scale") == "10% to 100%"
    assert field_hint("preview_delay") == "200 to 100,000"


def test_dpi_scale_is_neutral_off_windows(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("cliptray.ui.appearance.sys.platform", "linux")
    assert get_windows_dpi_scale() == 1.0


class _ScreenRoot:
    """Tk root stand-in reporting one screen and recording ``after`` calls."""

    def __init__(self, width: int, height: int) -> None:
        self._width = width
        self._height = height
        self.scheduled = []

    def winfo_screenwidth(self) -> int:
        return self._width

    def winfo_screenheight(self) -> int:
        return self._height

    def after(self, ms, func):
        self.scheduled.append(func)
        return f"after#{len(self.scheduled)}"

    def after_cancel(self, after_id) -> None:
        pass


def test_reopened_window_reads_displays_from_the_new_root(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("cliptray.displays.topology.sys.platform", "linux")
    window = AppearanceSettingsWindow(PreferenceStore(), icon_factory=MagicMock())

    first = window._bind_displays(_ScreenRoot(1920, 1080))
    window._cleanup()
    second = window._bind_displays(_ScreenRoot(2560, 1440))

    assert second is not first
    assert [d.bounds for d in second.current_displays()] == [(0, 0, 2560, 1440)]
    window._cleanup()


def test_injected_display_provider_is_kept() -> None:
    provider = StaticDisplayProvider()
    window = AppearanceSettingsWindow(
        PreferenceStore(), displays=provider, icon_factory=MagicMock()
    )
    assert window._bind_displays(_ScreenRoot(800, 600)) is provider
    assert window._watcher is None
