"""Appearance settings window for Cliptray."""

from __future__ import annotations

import ctypes
import logging
import sys
import tkinter as tk
from typing import Any, Callable, Dict, List, Optional

import customtkinter as ctk

from ..appearance import AppearancePane
from ..appearance.bounds import NUMERIC_BOUNDS
from ..displays import DisplayTopologyProvider, DisplayWatcher, SystemDisplayProvider
from ..icons import IconTheme, MenuIconFactory, detect_icon_theme
from ..settings import (
    ENUM_TYPES,
    HighlightMatch,
    MenuIcon,
    PinsPosition,
    SearchVisibility,
)
from ..store import PreferenceStore
from .number_field import BoundedNumberField

LOGGER = logging.getLogger("cliptray.ui")

FOOTER_WARNING = (
    "With the footer hidden, the popup no longer offers a Preferences entry. "
    "Open settings from the tray icon menu instead."
)

_TOGGLES = (
    ("show_special_symbols", "Show special symbols"),
    ("show_in_status_bar", "Show menu icon"),
    ("show_recent_copy_in_menu_bar", "Show recent copy next to menu icon"),
    ("show_search", "Show search field"),
    ("show_title", "Show title before search field"),
    ("show_application_icons", "Show application icons"),
    ("show_footer", "Show footer"),
)


def get_windows_dpi_scale() -> float:
    """Get the Windows DPI scale factor using the Windows API.

    Returns a scale factor (1.0 = 100%, 1.5 = 150%, 2.0 = 200%).
    Falls back to 1.0 if detection fails or not on Windows.
    """
    if sys.platform != "win32":
        return 1.0

    try:
        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(2)
        except (AttributeError, OSError):
            try:
                ctypes.windll.user32.SetProcessDPIAware()
            except (AttributeError, OSError):
                pass

        dpi = 96
        try:
            dpi = ctypes.windll.user32.GetDpiForSystem()
        except (AttributeError, OSError):
            pass

        scale = dpi / 96.0
        LOGGER.debug("Detected Windows DPI: %d, scale factor: %.2f", dpi, scale)
        return scale

    except Exception as e:
        LOGGER.warning("Failed to detect Windows DPI scale: %s", e)
        return 1.0


class AppearanceSettingsWindow:
    """Appearance pane: popup placement, previews, menu bar and popup chrome.

    Every control writes through :class:`AppearancePane`; the window
    subscribes to store keys and redraws from the store, never from widget
    state.
    """

    def __init__(
        self,
        store: PreferenceStore,
        displays: Optional[DisplayTopologyProvider] = None,
        on_close: Optional[Callable[[], None]] = None,
        icon_factory: Optional[MenuIconFactory] = None,
    ) -> None:
        self._store = store
        self._displays = displays
        self._on_close = on_close
        self._icon_factory = icon_factory or MenuIconFactory()
        self._root: Optional[ctk.CTk] = None
        self._pane: Optional[AppearancePane] = None
        self._watcher: Optional[DisplayWatcher] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._flag_vars: Dict[str, ctk.BooleanVar] = {}
        self._choice_vars: Dict[str, ctk.StringVar] = {}
        self._pickers: Dict[str, ctk.CTkOptionMenu] = {}
        self._number_fields: Dict[str, BoundedNumberField] = {}
        self._position_menu: Optional[tk.Menu] = None
        self._position_var: Optional[tk.StringVar] = None
        self._icon_images: Dict[MenuIcon, ctk.CTkImage] = {}
        self._icon_preview: Optional[ctk.CTkLabel] = None

    def show(self) -> None:
        """Show the settings window."""
        if self._root and self._root.winfo_exists():
            self._root.lift()
            return

        self._create_window()
        self._build_sections()
        self._subscribe()

        if self._root:
            self._root.mainloop()

    def _create_window(self) -> None:
        dpi_scale = get_windows_dpi_scale()

        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")
        ctk.set_widget_scaling(1.0)
        ctk.set_window_scaling(1.0)

        self._root = ctk.CTk()
        self._root.title("Cliptray Appearance")
        width = int(650 / dpi_scale)
        height = int(720 / dpi_scale)
        self._root.geometry(f"{width}x{height}")
        self._root.minsize(int(520 / dpi_scale), int(480 / dpi_scale))

        self._pane = AppearancePane(self._store, self._bind_displays(self._root))

        self._scroll = ctk.CTkScrollableFrame(self._root, fg_color="transparent")
        self._scroll.pack(fill="both", expand=True, padx=20, pady=20)
        self._scroll.grid_columnconfigure(1, weight=1)

        self._root.protocol("WM_DELETE_WINDOW", self._on_close_click)

    def _bind_displays(self, root: Any) -> DisplayTopologyProvider:
        """Return the provider for this window, watching real displays on ``root``."""
        if self._displays is None or isinstance(self._displays, SystemDisplayProvider):
            # Tk screen queries need the live root, which is new on every show().
            self._displays = SystemDisplayProvider(root)
            self._watcher = DisplayWatcher(root, self._displays)
            self._watcher.start()
        return self._displays

    # -- layout -----------------------------------------------------------

    def _row_label(self, row: int, text: str) -> None:
        ctk.CTkLabel(
            self._scroll,
            text=text,
            font=ctk.CTkFont(size=12),
            anchor="e",
        ).grid(row=row, column=0, sticky="e", padx=(0, 12), pady=6)

    def _build_sections(self) -> None:
        row = 0

        self._row_label(row, "Popup at:")
        position_row = ctk.CTkFrame(self._scroll, fg_color="transparent")
        position_row.grid(row=row, column=1, sticky="w")
        self._position_button = ctk.CTkButton(
            position_row,
            text="",
            width=220,
            anchor="w",
            command=self._open_position_menu,
        )
        self._position_button.pack(side="left")
        self._reset_position_button = ctk.CTkButton(
            position_row,
            text="↺",
            width=32,
            fg_color="transparent",
            border_width=1,
            text_color=("gray10", "gray90"),
            command=self._reset_window_position,
        )
        row += 1

        self._row_label(row, "Pin to:")
        self._build_picker(row, "pin_to", PinsPosition)
        row += 1

        self._row_label(row, "Image height:")
        row = self._build_number_field(row, "image_max_height")

        self._row_label(row, "Preview image scale:")
        row = self._build_number_field(row, "preview_image_scale")

        self._row_label(row, "Preview delay (ms):")
        row = self._build_number_field(row, "preview_delay")

        self._row_label(row, "Highlight matches:")
        self._build_picker(row, "highlight_match", HighlightMatch)
        row += 1

        ctk.CTkFrame(self._scroll, height=1, fg_color="gray40").grid(
            row=row, column=0, columnspan=2, sticky="ew", pady=10
        )
        row += 1

        for key, text in _TOGGLES:
            toggle_row = ctk.CTkFrame(self._scroll, fg_color="transparent")
            toggle_row.grid(row=row, column=1, sticky="w", pady=3)
            var = ctk.BooleanVar(value=self._store.get(key))
            self._flag_vars[key] = var
            ctk.CTkCheckBox(
                toggle_row,
                text=text,
                variable=var,
                command=lambda key=key, var=var: self._pane_required().set_flag(
                    key, var.get()
                ),
            ).pack(side="left")
            if key == "show_in_status_bar":
                self._build_menu_icon_picker(toggle_row)
            elif key == "show_search":
                self._build_inline_picker(
                    toggle_row, "search_visibility", SearchVisibility
                )
            row += 1

        self._footer_warning = ctk.CTkLabel(
            self._scroll,
            text=FOOTER_WARNING,
            font=ctk.CTkFont(size=11),
            text_color="gray",
            wraplength=380,
            justify="left",
        )
        self._footer_warning.grid(row=row, column=1, sticky="w", pady=(0, 10))

        self._refresh_position_row()
        self._refresh_dependents()

    def _build_number_field(self, row: int, key: str) -> int:
        field = BoundedNumberField(self._scroll, self._pane_required(), key)
        field.grid(row=row, column=1, sticky="w", pady=4)
        self._number_fields[key] = field
        ctk.CTkLabel(
            self._scroll,
            text=field_hint(key),
            font=ctk.CTkFont(size=10),
            text_color="gray",
        ).grid(row=row + 1, column=1, sticky="w")
        return row + 2

    def _build_picker(self, row: int, key: str, enum_type: Any) -> None:
        picker = self._make_picker(self._scroll, key, enum_type, width=160)
        picker.grid(row=row, column=1, sticky="w", pady=4)

    def _build_inline_picker(self, parent: Any, key: str, enum_type: Any) -> None:
        picker = self._make_picker(parent, key, enum_type, width=140)
        picker.pack(side="left", padx=(12, 0))

    def _build_menu_icon_picker(self, parent: Any) -> None:
        self._build_inline_picker(parent, "menu_icon", MenuIcon)
        theme = detect_icon_theme()
        high_contrast = theme is IconTheme.HIGH_CONTRAST
        light = self._icon_factory.all_images(
            theme if high_contrast else IconTheme.LIGHT, 20
        )
        dark = self._icon_factory.all_images(
            theme if high_contrast else IconTheme.DARK, 20
        )
        for icon in MenuIcon:
            self._icon_images[icon] = ctk.CTkImage(
                light_image=light[icon], dark_image=dark[icon], size=(20, 20)
            )
        self._icon_preview = ctk.CTkLabel(parent, text="", width=24)
        self._icon_preview.pack(side="left", padx=(8, 0))

    def _make_picker(
        self, parent: Any, key: str, enum_type: Any, width: int
    ) -> ctk.CTkOptionMenu:
        by_label = {member.description: member for member in enum_type}
        var = ctk.StringVar(value=self._store.get(key).description)
        self._choice_vars[key] = var
        picker = ctk.CTkOptionMenu(
            parent,
            values=list(by_label),
            variable=var,
            width=width,
            command=lambda label: self._pane_required().set_choice(
                key, by_label[label]
            ),
        )
        self._pickers[key] = picker
        return picker

    # -- popup position ---------------------------------------------------

    def _open_position_menu(self) -> None:
        pane = self._pane_required()
        if self._position_menu is not None:
            self._position_menu.destroy()
        menu = tk.Menu(self._root, tearoff=0)
        self._position_var = tk.StringVar(master=self._root)

        for option in pane.position_options():
            if option.expanded:
                submenu = tk.Menu(menu, tearoff=0)
                for child in option.children:
                    value = f"{child.position.value}:{child.screen_index}"
                    submenu.add_radiobutton(
                        label=child.label,
                        value=value,
                        variable=self._position_var,
                        command=lambda c=child: pane.select_position(
                            c.position, c.screen_index
                        ),
                    )
                    if child.selected:
                        self._position_var.set(value)
                menu.add_cascade(label=option.label, menu=submenu)
            else:
                value = option.position.value
                menu.add_radiobutton(
                    label=option.label,
                    value=value,
                    variable=self._position_var,
                    command=lambda o=option: pane.select_position(o.position),
                )
                if option.selected:
                    self._position_var.set(value)

        self._position_menu = menu
        button = self._position_button
        menu.tk_popup(button.winfo_rootx(), button.winfo_rooty() + button.winfo_height())

    def _reset_window_position(self) -> None:
        self._pane_required().reset_window_position()

    def _refresh_position_row(self) -> None:
        pane = self._pane_required()
        self._position_button.configure(text=pane.selected_position_label())
        if pane.window_reset_visible():
            self._reset_position_button.pack(side="left", padx=(8, 0))
            state = "normal" if pane.can_reset_window_position() else "disabled"
            self._reset_position_button.configure(state=state)
        else:
            self._reset_position_button.pack_forget()

    # -- store synchronisation --------------------------------------------

    def _subscribe(self) -> None:
        pane = self._pane_required()
        self._unsubscribers.append(pane.add_listener(self._refresh_position_row))
        for key in ("popup_position", "popup_screen", "window_position"):
            self._unsubscribers.append(
                self._store.subscribe(key, lambda k, v: self._refresh_position_row())
            )
        for key in self._number_fields:
            self._unsubscribers.append(self._store.subscribe(key, self._on_number))
        for key in self._flag_vars:
            self._unsubscribers.append(self._store.subscribe(key, self._on_flag))
        for key in self._choice_vars:
            self._unsubscribers.append(self._store.subscribe(key, self._on_choice))

    def _on_number(self, key: str, value: Any) -> None:
        self._number_fields[key].refresh()

    def _on_flag(self, key: str, value: Any) -> None:
        var = self._flag_vars[key]
        if var.get() != value:
            var.set(value)
        self._refresh_dependents()

    def _on_choice(self, key: str, value: Any) -> None:
        label = ENUM_TYPES[key](value).description
        if self._choice_vars[key].get() != label:
            self._choice_vars[key].set(label)
        if key == "menu_icon":
            self._refresh_dependents()

    def _refresh_dependents(self) -> None:
        pane = self._pane_required()
        enabled = {
            "menu_icon": pane.menu_icon_enabled(),
            "search_visibility": pane.search_visibility_enabled(),
        }
        for key, is_enabled in enabled.items():
            picker = self._pickers.get(key)
            if picker is not None:
                picker.configure(state="normal" if is_enabled else "disabled")

        if self._icon_preview is not None:
            icon = self._store.get("menu_icon")
            self._icon_preview.configure(image=self._icon_images[icon])

        if pane.footer_warning_visible():
            self._footer_warning.configure(text=FOOTER_WARNING)
        else:
            self._footer_warning.configure(text="")

    def _pane_required(self) -> AppearancePane:
        if self._pane is None:
            raise RuntimeError("Appearance window has not been created")
        return self._pane

    # -- teardown ---------------------------------------------------------

    def _on_close_click(self) -> None:
        for field in self._number_fields.values():
            field.commit()
        self._cleanup()
        if self._on_close:
            self._on_close()

    def _cleanup(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
        if self._pane is not None:
            self._pane.close()
            self._pane = None
        if self._root:
            try:
                self._root.quit()
                self._root.destroy()
            except tk.TclError:
                LOGGER.debug("Window already destroyed", exc_info=True)
            self._root = None


def field_hint(key: str) -> str:
    """Short range description shown under a numeric field."""
    bounds = NUMERIC_BOUNDS[key]
    if bounds.percent:
        return f"{bounds.minimum * 100:g}% to {bounds.maximum * 100:g}%"
    return f"{bounds.minimum:,} to {bounds.maximum:,}"
