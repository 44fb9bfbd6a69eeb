"""Win32 monitor enumeration through ctypes."""

from __future__ import annotations

import ctypes
import logging
from ctypes import wintypes
from typing import List

from .topology import Display

LOGGER = logging.getLogger("cliptray.displays")


class _MonitorInfoEx(ctypes.Structure):
    _fields_ = [
        ("cbSize", wintypes.DWORD),
        ("rcMonitor", wintypes.RECT),
        ("rcWork", wintypes.RECT),
        ("dwFlags", wintypes.DWORD),
        ("szDevice", wintypes.WCHAR * 32),
    ]


class _DisplayDevice(ctypes.Structure):
    _fields_ = [
        ("cb", wintypes.DWORD),
        ("DeviceName", wintypes.WCHAR * 32),
        ("DeviceString", wintypes.WCHAR * 128),
        ("StateFlags", wintypes.DWORD),
        ("DeviceID", wintypes.WCHAR * 128),
        ("DeviceKey", wintypes.WCHAR * 128),
    ]


def _friendly_name(device: str, position: int) -> str:
    """Return the monitor model name for a GDI device, if Windows knows it."""
    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    info = _DisplayDevice()
    info.cb = ctypes.sizeof(info)
    try:
        if user32.EnumDisplayDevicesW(device, 0, ctypes.byref(info), 0):
            name = info.DeviceString.strip()
            if name:
                return name
    except (AttributeError, OSError):
        LOGGER.debug("EnumDisplayDevicesW failed for %s", device, exc_info=True)
    return f"Display {position}"


def enumerate_monitors() -> List[Display]:
    """List attached monitors in the order Windows enumerates them."""
    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    handles: List[int] = []

    monitor_enum_proc = ctypes.WINFUNCTYPE(  # type: ignore[attr-defined]
        wintypes.BOOL,
        wintypes.HANDLE,
        wintypes.HDC,
        ctypes.POINTER(wintypes.RECT),
        wintypes.LPARAM,
    )

    def _collect(hmonitor, hdc, rect, lparam):  # noqa: ANN001
        del hdc, rect, lparam
        handles.append(hmonitor)
        return True

    if not user32.EnumDisplayMonitors(None, None, monitor_enum_proc(_collect), 0):
        raise OSError("EnumDisplayMonitors failed")

    displays: List[Display] = []
    for index, hmonitor in enumerate(handles):
        info = _MonitorInfoEx()
        info.cbSize = ctypes.sizeof(info)
        if not user32.GetMonitorInfoW(
            wintypes.HMONITOR(hmonitor), ctypes.byref(info)
        ):
            LOGGER.debug("GetMonitorInfoW failed for monitor %d", index)
            continue
        rect = info.rcMonitor
        displays.append(
            Display(
                index=len(displays),
                name=_friendly_name(info.szDevice, len(displays) + 1),
                bounds=(
                    rect.left,
                    rect.top,
                    rect.right - rect.left,
                    rect.bottom - rect.top,
                ),
            )
        )
    LOGGER.debug("Enumerated %d monitor(s)", len(displays))
    return displays
