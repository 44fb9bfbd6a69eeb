"""Display enumeration and topology change notification."""

from __future__ import annotations

import ctypes
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

LOGGER = logging.getLogger("cliptray.displays")

Bounds = Tuple[int, int, int, int]
TopologyCallback = Callable[[], None]


@dataclass(frozen=True)
class Display:
    """One active display in platform enumeration order."""

    index: int
    name: str
    bounds: Bounds = (0, 0, 0, 0)


class DisplayTopologyProvider:
    """Base provider: holds topology listeners and fires change events."""

    def __init__(self) -> None:
        self._listeners: List[TopologyCallback] = []

    def current_displays(self) -> List[Display]:
        raise NotImplementedError

    def subscribe(self, callback: TopologyCallback) -> Callable[[], None]:
        """Register a payload-less topology-changed listener."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def notify_changed(self) -> None:
        """Tell every listener that the topology changed."""
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                LOGGER.exception("Display topology listener failed")


class StaticDisplayProvider(DisplayTopologyProvider):
    """Provider over an explicitly supplied display list."""

    def __init__(self, displays: Sequence[Display] = ()) -> None:
        super().__init__()
        self._displays = list(displays)

    def current_displays(self) -> List[Display]:
        return list(self._displays)

    def set_displays(self, displays: Sequence[Display]) -> None:
        """Replace the list and fire the topology-changed event."""
        self._displays = list(displays)
        self.notify_changed()


class SystemDisplayProvider(DisplayTopologyProvider):
    """Enumerate the real displays of this machine.

    Uses the Win32 monitor API on Windows. Elsewhere, or when enumeration
    fails, falls back to the single screen Tk reports for ``root``.
    """

    def __init__(self, root: Optional[Any] = None) -> None:
        super().__init__()
        self._root = root

    def current_displays(self) -> List[Display]:
        if sys.platform == "win32":
            from .win32 import enumerate_monitors

            try:
                displays = enumerate_monitors()
            except (AttributeError, OSError, ctypes.ArgumentError):
                LOGGER.warning("Win32 monitor enumeration failed", exc_info=True)
            else:
                if displays:
                    return displays
        return self._tk_displays()

    def _tk_displays(self) -> List[Display]:
        root = self._root
        if root is None:
            return []
        try:
            width = int(root.winfo_screenwidth())
            height = int(root.winfo_screenheight())
        except Exception:
            LOGGER.debug("Tk screen query failed", exc_info=True)
            return []
        return [Display(index=0, name="Display 1", bounds=(0, 0, width, height))]


class DisplayWatcher:
    """Poll a provider on the Tk event loop and fire topology changes.

    Tk offers no display-change event, so the enumeration is compared on a
    timer and ``provider.notify_changed()`` runs when it differs.
    """

    def __init__(
        self,
        root: Any,
        provider: DisplayTopologyProvider,
        interval_ms: int = 2000,
    ) -> None:
        self._root = root
        self._provider = provider
        self._interval_ms = interval_ms
        self._after_id: Optional[str] = None
        self._last: List[Display] = []

    @property
    def running(self) -> bool:
        return self._after_id is not None

    def start(self) -> None:
        if self._after_id is not None:
            return
        self._last = self._provider.current_displays()
        self._schedule()

    def stop(self) -> None:
        if self._after_id is None:
            return
        try:
            self._root.after_cancel(self._after_id)
        except Exception:
            LOGGER.debug("after_cancel failed", exc_info=True)
        self._after_id = None

    def poll(self) -> bool:
        """Compare the enumeration once; return True when it changed."""
        displays = self._provider.current_displays()
        if displays == self._last:
            return False
        LOGGER.info(
            "Display topology changed: %d -> %d display(s)",
            len(self._last),
            len(displays),
        )
        self._last = displays
        self._provider.notify_changed()
        return True

    def _tick(self) -> None:
        self._after_id = None
        try:
            self.poll()
        except Exception:
            LOGGER.exception("Display topology poll failed")
        finally:
            self._schedule()

    def _schedule(self) -> None:
        self._after_id = self._root.after(self._interval_ms, self._tick)
