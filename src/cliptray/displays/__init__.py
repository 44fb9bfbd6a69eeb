"""Display enumeration and topology change events."""

from .topology import (
    Display,
    DisplayTopologyProvider,
    DisplayWatcher,
    StaticDisplayProvider,
    SystemDisplayProvider,
)

__all__ = [
    "Display",
    "DisplayTopologyProvider",
    "DisplayWatcher",
    "StaticDisplayProvider",
    "SystemDisplayProvider",
]
