"""UI components for Cliptray."""

from .appearance import AppearanceSettingsWindow
from .number_field import BoundedNumberField

__all__ = ["AppearanceSettingsWindow", "BoundedNumberField"]
