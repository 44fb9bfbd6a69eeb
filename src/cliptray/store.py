"""Process-wide preference store with per-key change notification."""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .settings import AppSettings, coerce_value

LOGGER = logging.getLogger("cliptray.store")

ChangeCallback = Callable[[str, Any], None]


class PreferenceStore:
    """Typed key/value access to :class:`AppSettings`.

    Writes are visible to the next read immediately. Subscribers of a key
    are called with ``(key, new_value)`` after the write lands; a multi-key
    :meth:`update` notifies only once every key holds its new value.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        *,
        path: Optional[Path] = None,
        autosave: bool = False,
    ) -> None:
        self._settings = settings or AppSettings()
        self._path = path
        self._autosave = autosave
        self._subscribers: Dict[str, List[ChangeCallback]] = defaultdict(list)

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "PreferenceStore":
        """Load the persisted settings and save back after every write."""
        return cls(AppSettings.load(path), path=path, autosave=True)

    def get(self, key: str) -> Any:
        self._check_key(key)
        return getattr(self._settings, key)

    def default(self, key: str) -> Any:
        """Return the declared default for ``key``."""
        self._check_key(key)
        return getattr(AppSettings(), key)

    def is_default(self, key: str) -> bool:
        return self.get(key) == self.default(key)

    def set(self, key: str, value: Any) -> None:
        self.update(**{key: value})

    def reset(self, key: str) -> None:
        """Restore ``key`` to its default value."""
        self.set(key, self.default(key))

    def update(self, **values: Any) -> None:
        """Write several keys as one logical change.

        Values are coerced (numbers clamped to their domain) before any of
        them is applied, so a bad value leaves the store untouched.
        """
        coerced: Dict[str, Any] = {}
        for key, value in values.items():
            self._check_key(key)
            coerced[key] = coerce_value(key, value)

        changed = [
            key for key, value in coerced.items() if getattr(self._settings, key) != value
        ]
        if not changed:
            return

        for key in changed:
            setattr(self._settings, key, coerced[key])
        LOGGER.debug("Preferences changed: %s", ", ".join(changed))

        if self._autosave:
            self.save()

        for key in changed:
            self._notify(key, coerced[key])

    def subscribe(self, key: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` for changes of ``key``.

        Returns a function that removes the subscription again.
        """
        self._check_key(key)
        self._subscribers[key].append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers[key].remove(callback)
            except ValueError:
                pass

        return unsubscribe

    def save(self) -> None:
        """Persist the current settings."""
        try:
            self._settings.save(self._path)
        except OSError:
            LOGGER.error("Failed to save settings", exc_info=True)

    def _notify(self, key: str, value: Any) -> None:
        for callback in list(self._subscribers.get(key, ())):
            try:
                callback(key, value)
            except Exception:
                LOGGER.exception("Preference subscriber for %s failed", key)

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in AppSettings.keys():
            raise KeyError(f"Unknown preference: {key}")
