"""Text entry paired with a stepper over one bounded preference."""

from __future__ import annotations

import logging
from typing import Any, Optional

import customtkinter as ctk

from ..appearance import AppearancePane

LOGGER = logging.getLogger("cliptray.ui")

_ERROR_BORDER = "#dc2626"


class BoundedNumberField(ctk.CTkFrame):
    """Entry plus -/+ buttons writing through :class:`AppearancePane`.

    Both controls read the stored value; the entry text is rewritten from
    the store after every commit, so typed text that was rejected snaps
    back to the last valid value.
    """

    def __init__(
        self,
        master: Any,
        pane: AppearancePane,
        key: str,
        *,
        width: int = 120,
    ) -> None:
        super().__init__(master, fg_color="transparent")
        self._pane = pane
        self._key = key
        self._flash_id: Optional[str] = None

        self._entry = ctk.CTkEntry(self, width=width, justify="right")
        self._entry.pack(side="left")
        self._default_border = self._entry.cget("border_color")

        ctk.CTkButton(
            self,
            text="−",
            width=28,
            command=lambda: self._step(-1),
        ).pack(side="left", padx=(6, 2))
        ctk.CTkButton(
            self,
            text="+",
            width=28,
            command=lambda: self._step(1),
        ).pack(side="left")

        self._entry.bind("<Return>", lambda e: self.commit())
        self._entry.bind("<FocusOut>", lambda e: self.commit())
        self._entry.bind("<Up>", lambda e: self._step(1))
        self._entry.bind("<Down>", lambda e: self._step(-1))
        self.refresh()

    @property
    def key(self) -> str:
        return self._key

    def refresh(self) -> None:
        """Show the stored value."""
        self._entry.delete(0, "end")
        self._entry.insert(0, self._pane.number_text(self._key))

    def commit(self) -> bool:
        """Submit the typed text; rejected input restores the stored value."""
        if not self.winfo_exists():
            return False
        raw = self._entry.get()
        if raw == self._pane.number_text(self._key):
            return True
        accepted = self._pane.submit_number(self._key, raw)
        if not accepted:
            LOGGER.debug("Input %r rejected for %s", raw, self._key)
            self._flash_error()
        self.refresh()
        return accepted

    def _step(self, direction: int) -> None:
        self._pane.step_number(self._key, direction)
        self.refresh()

    def _flash_error(self) -> None:
        self.bell()
        self._entry.configure(border_color=_ERROR_BORDER)
        if self._flash_id is not None:
            self.after_cancel(self._flash_id)
        self._flash_id = self.after(800, self._clear_error)

    def _clear_error(self) -> None:
        self._flash_id = None
        if self.winfo_exists():
            self._entry.configure(border_color=self._default_border)
