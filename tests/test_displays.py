"""Tests for display enumeration and topology polling."""

from __future__ import annotations

import sys
from types import SimpleNamespace
from typing import Callable, Dict, List

import pytest

from cliptray.displays import (
    Display,
    DisplayTopologyProvider,
    DisplayWatcher,
    StaticDisplayProvider,
    SystemDisplayProvider,
)


class StubRoot:
    """Minimal stand-in for the Tk ``after`` scheduler."""

    def __init__(self) -> None:
        self._pending: Dict[str, Callable[[], None]] = {}
        self._counter = 0

    def after(self, ms: int, func: Callable[[], None]) -> str:
        self._counter += 1
        after_id = f"after#{self._counter}"
        self._pending[after_id] = func
        return after_id

    def after_cancel(self, after_id: str) -> None:
        self._pending.pop(after_id, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_pending(self) -> None:
        pending, self._pending = self._pending, {}
        for func in pending.values():
            func()


class MutableProvider(DisplayTopologyProvider):
    def __init__(self, displays: List[Display]) -> None:
        super().__init__()
        self.displays = displays

    def current_displays(self) -> List[Display]:
        return list(self.displays)


def test_static_provider_notifies_on_change() -> None:
    provider = StaticDisplayProvider([Display(0, "Display 1")])
    calls: List[int] = []
    unsubscribe = provider.subscribe(lambda: calls.append(1))

    provider.set_displays([Display(0, "Display 1"), Display(1, "Display 2")])
    unsubscribe()
    provider.set_displays([])

    assert calls == [1]
    assert provider.current_displays() == []


def test_failing_listener_does_not_block_others() -> None:
    provider = StaticDisplayProvider()
    calls: List[int] = []

    def broken() -> None:
        raise RuntimeError("boom")

    provider.subscribe(broken)
    provider.subscribe(lambda: calls.append(1))
    provider.notify_changed()
    assert calls == [1]


def test_watcher_fires_once_per_change() -> None:
    root = StubRoot()
    provider = MutableProvider([Display(0, "Display 1")])
    calls: List[int] = []
    provider.subscribe(lambda: calls.append(len(provider.current_displays())))

    watcher = DisplayWatcher(root, provider, interval_ms=10)
    watcher.start()
    watcher.start()
    assert watcher.running
    assert root.pending == 1

    root.run_pending()
    assert calls == []

    provider.displays = [Display(0, "Display 1"), Display(1, "Display 2")]
    root.run_pending()
    root.run_pending()
    assert calls == [2]

    watcher.stop()
    assert not watcher.running
    assert root.pending == 0


def test_watcher_poll_reports_changes() -> None:
    provider = MutableProvider([])
    watcher = DisplayWatcher(StubRoot(), provider)
    assert watcher.poll() is False
    provider.displays = [Display(0, "Display 1")]
    assert watcher.poll() is True
    assert watcher.poll() is False


def test_system_provider_falls_back_to_tk_screen(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("cliptray.displays.topology.sys.platform", "linux")
    root = SimpleNamespace(
        winfo_screenwidth=lambda: 1920,
        winfo_screenheight=lambda: 1080,
    )
    provider = SystemDisplayProvider(root)
    assert provider.current_displays() == [
        Display(index=0, name="Display 1", bounds=(0, 0, 1920, 1080))
    ]


def test_system_provider_without_root_is_empty(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("cliptray.displays.topology.sys.platform", "linux")
    assert SystemDisplayProvider().current_displays() == []


class FlakyProvider(MutableProvider):
    """Raises from ``current_displays`` on the call numbers in ``fail_on``."""

    def __init__(self, displays: List[Display], fail_on: int) -> None:
        super().__init__(displays)
        self.calls = 0
        self.fail_on = fail_on

    def current_displays(self) -> List[Display]:
        self.calls += 1
        if self.calls == self.fail_on:
            raise RuntimeError("enumeration failed")
        return super().current_displays()


def test_watcher_keeps_polling_after_a_failed_enumeration(
    caplog: pytest.LogCaptureFixture,
) -> None:
    root = StubRoot()
    provider = FlakyProvider([Display(0, "Display 1")], fail_on=2)
    fired: List[int] = []
    provider.subscribe(lambda: fired.append(1))

    watcher = DisplayWatcher(root, provider, interval_ms=10)
    watcher.start()
    with caplog.at_level("ERROR", logger="cliptray.displays"):
        root.run_pending()

    assert watcher.running
    assert root.pending == 1
    assert "Display topology poll failed" in caplog.text

    provider.displays = [Display(0, "Display 1"), Display(1, "Display 2")]
    root.run_pending()
    assert fired == [1]


def test_system_provider_falls_back_when_win32_call_fails(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    import ctypes

    def broken_enumeration() -> List[Display]:
        raise ctypes.ArgumentError("argument 1: OverflowError: int too long")

    monkeypatch.setattr("cliptray.displays.topology.sys.platform", "win32")
    monkeypatch.setitem(
        sys.modules,
        "cliptray.displays.win32",
        SimpleNamespace(enumerate_monitors=broken_enumeration),
    )
    root = SimpleNamespace(
        winfo_screenwidth=lambda: 1280,
        winfo_screenheight=lambda: 720,
    )
    assert SystemDisplayProvider(root).current_displays() == [
        Display(index=0, name="Display 1", bounds=(0, 0, 1280, 720))
    ]
