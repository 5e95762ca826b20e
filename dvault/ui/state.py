from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal

from ..config import Settings
from ..registry import FileRegistry


class RegistryBridge(QObject):
    # Registry callbacks fire on worker threads; signals hop them to the GUI thread.
    changed = Signal()
    notified = Signal(object)

    def attach(self, registry: FileRegistry) -> None:
        registry.subscribe(on_change=self.changed.emit, on_notify=self.notified.emit)


@dataclass
class AppState:
    settings: Settings
    registry: FileRegistry
    bridge: RegistryBridge
