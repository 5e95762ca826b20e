from typing import List

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QGuiApplication
from PySide6.QtWidgets import QMainWindow, QPushButton, QTabWidget, QToolButton

from ..config import load_settings
from ..models import Notification
from ..registry import FileRegistry
from .state import AppState, RegistryBridge
from .views.files_tab import FilesTab
from .views.log_tab import LogTab
from .views.message_dialog import MessageDialog


def _copy_to_clipboard(text: str) -> None:
    QGuiApplication.clipboard().setText(text)


class MainWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("D-Vault - Decentralized File Storage with Pinata")
        self.resize(1000, 800)

        settings = load_settings()
        bridge = RegistryBridge(self)
        registry = FileRegistry(settings, clipboard=_copy_to_clipboard)
        bridge.attach(registry)
        self.state = AppState(settings=settings, registry=registry, bridge=bridge)
        self._dialogs: List[MessageDialog] = []

        self.tabs = QTabWidget(self)
        self.setCentralWidget(self.tabs)

        self.files_tab = FilesTab(registry, bridge, status_cb=self._set_status)
        self.log_tab = LogTab(settings.http_log_path)

        self.tabs.addTab(self.files_tab, "Files")
        self.tabs.addTab(self.log_tab, "LOG")

        bridge.notified.connect(self._show_notification)

        self._build_menu()
        self.statusBar().showMessage("Ready")
        self._apply_pointer_cursors()
        self.files_tab.refresh()

    def _apply_pointer_cursors(self) -> None:
        for btn in self.findChildren(QPushButton):
            btn.setCursor(Qt.PointingHandCursor)
        for btn in self.findChildren(QToolButton):
            btn.setCursor(Qt.PointingHandCursor)

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("Files")
        act_refresh = QAction("Refresh", self)
        act_refresh.setStatusTip("Reload the pinned file list from Pinata")
        act_refresh.triggered.connect(self.files_tab.refresh)
        menu.addAction(act_refresh)

        act_reload = QAction("Reload API keys", self)
        act_reload.setStatusTip(f"Re-read {self.state.settings.credentials_path}")
        act_reload.triggered.connect(self._reload_credentials)
        menu.addAction(act_reload)

    def _reload_credentials(self) -> None:
        try:
            self.state.registry.reload_credentials()
        except ValueError as exc:
            self._set_status(f"Credentials reload failed: {exc}")
            return
        self._set_status("API keys reloaded.")
        self.files_tab.refresh()

    def _show_notification(self, note: Notification) -> None:
        self._set_status(f"{note.title}: {note.message}")
        dialog = MessageDialog(note, parent=self)
        dialog.setAttribute(Qt.WA_DeleteOnClose, True)
        self._dialogs.append(dialog)
        dialog.finished.connect(lambda _code, d=dialog: self._dialogs.remove(d) if d in self._dialogs else None)
        dialog.open()

    def _set_status(self, text: str) -> None:
        self.statusBar().showMessage(text)
