"""Command-line entry point that opens the Cliptray appearance settings."""

from __future__ import annotations

import logging
import os
import sys
import threading

from cliptray.settings import default_log_path, default_settings_path
from cliptray.store import PreferenceStore

LOGGER = logging.getLogger("cliptray")


def _install_global_exception_handlers() -> None:
    """Log uncaught exceptions from the main thread and background threads."""

    def _handle_uncaught(exc_type, exc_value, exc_traceback) -> None:
        LOGGER.critical(
            "Uncaught exception in main thread",
            exc_info=(exc_type, exc_value, exc_traceback),
        )
        try:
            show_error_dialog(
                "Cliptray hit an unexpected error and needs to close. "
                "Details were written to the log file."
            )
        except Exception:
            # Avoid recursion if dialog/logging fails
            pass

    sys.excepthook = _handle_uncaught

    original_excepthook = threading.excepthook

    def _thread_excepthook(args) -> None:  # type: ignore[no-redef]
        LOGGER.critical(
            "Uncaught exception in thread %s",
            getattr(args, "thread", None),
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )
        original_excepthook(args)

    threading.excepthook = _thread_excepthook  # type: ignore[assignment]


def configure_logging() -> None:
    """Set up logging for console and a rolling log file.

    - Console level can be overridden via CLIPTRAY_LOG_LEVEL (e.g., DEBUG/INFO).
    - Detailed DEBUG logs are always written next to the settings file.
    """
    level_name = os.getenv("CLIPTRAY_LOG_LEVEL", "INFO").upper()
    console_level = getattr(logging, level_name, logging.INFO)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handlers: list[logging.Handler] = []

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    handlers.append(ch)

    try:
        from logging.handlers import RotatingFileHandler

        log_path = default_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            str(log_path), maxBytes=1_000_000, backupCount=2, encoding="utf-8"
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        handlers.append(fh)
    except OSError:
        # If file logging fails, continue with console-only
        pass

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)


def show_error_dialog(message: str, title: str = "Cliptray") -> None:
    """Display an error dialog, falling back to stderr when necessary."""
    LOGGER.error("%s", message)
    if sys.platform == "win32":
        try:
            ctypes = __import__("ctypes")
            ctypes.windll.user32.MessageBoxW(None, message, title, 0x00000010)  # type: ignore[attr-defined]
            return
        except Exception:  # pragma: no cover - fall back to stderr
            LOGGER.debug("Failed to display Windows message box", exc_info=True)
    print(f"{title}: {message}", file=sys.stderr)


def main() -> int:
    """Open the appearance settings window."""
    configure_logging()
    _install_global_exception_handlers()
    LOGGER.info(
        "Process starting (python=%s, platform=%s, settings=%s)",
        sys.version.split()[0],
        sys.platform,
        default_settings_path(),
    )
    store = PreferenceStore.open()

    from cliptray.ui import AppearanceSettingsWindow

    window = AppearanceSettingsWindow(store)
    window.show()
    LOGGER.info("Appearance settings closed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
