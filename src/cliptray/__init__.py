"""Top-level package for the Cliptray clipboard history settings."""

__all__ = [
    "appearance",
    "displays",
    "icons",
    "settings",
    "store",
    "ui",
]
