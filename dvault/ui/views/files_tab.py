from typing import Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from ...models import FileRecord
from ...registry import FileRegistry
from ...utils import format_bytes, format_timestamp
from ..state import RegistryBridge
from ..threads import TaskRunner
from .credentials_panel import CredentialsPanel
from .upload_dialog import UploadDialog


def _action_button(text: str, handler: Callable[[], None], color: str = "#1d6fd6") -> QPushButton:
    btn = QPushButton(text)
    btn.setStyleSheet(f"background: {color}; color: #ffffff;")
    btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
    btn.setCursor(Qt.PointingHandCursor)
    btn.clicked.connect(handler)
    return btn


class FileCard(QFrame):
    def __init__(
        self,
        item: FileRecord,
        on_delete: Callable[[FileRecord], None],
        on_copy: Callable[[FileRecord], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.item = item

        self.setObjectName("fileCard")
        self.setStyleSheet(
            "#fileCard { background: #ffffff; border-radius: 10px; border: 1px solid #e6e6e6; }"
        )

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(6)

        header = QHBoxLayout()
        name_value = QLabel(item.name)
        name_value.setStyleSheet("font-weight: 600; color: #111111;")
        name_value.setWordWrap(True)
        header.addWidget(name_value, 1)
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.setCursor(Qt.PointingHandCursor)
        self.delete_btn.setFlat(True)
        self.delete_btn.setStyleSheet("color: #dc2626;")
        self.delete_btn.clicked.connect(lambda: on_delete(self.item))
        header.addWidget(self.delete_btn, alignment=Qt.AlignRight)
        layout.addLayout(header)

        meta = QLabel(
            f"{format_bytes(item.size_bytes)} • {item.media_type} • {format_timestamp(item.uploaded_at)}"
        )
        meta.setStyleSheet("color: #444444;")
        layout.addWidget(meta)

        pin_box = QFrame()
        pin_box.setStyleSheet("background: #f5f5f5; border-radius: 6px;")
        pin_layout = QVBoxLayout(pin_box)
        pin_layout.setContentsMargins(8, 8, 8, 8)
        provider = QLabel(f"{item.upload.provider} IPFS")
        provider.setStyleSheet("font-weight: 600; color: #333333;")
        pin_layout.addWidget(provider)
        for label, value in (("Hash", item.upload.hash), ("Gateway", item.upload.gateway)):
            row = QLabel(f"<b>{label}:</b> {value}")
            row.setStyleSheet("color: #666666; font-size: 11px;")
            row.setTextInteractionFlags(Qt.TextSelectableByMouse)
            row.setWordWrap(True)
            pin_layout.addWidget(row)
        layout.addWidget(pin_box)

        buttons_row = QHBoxLayout()
        buttons_row.addWidget(_action_button("Copy Link", lambda: on_copy(self.item)))
        buttons_row.addWidget(
            _action_button("Open", lambda: QDesktopServices.openUrl(QUrl(self.item.upload.url)))
        )
        buttons_row.addStretch(1)
        layout.addLayout(buttons_row)

    def set_deleting(self, deleting: bool, busy: bool) -> None:
        self.delete_btn.setText("Deleting..." if deleting else "Delete")
        self.delete_btn.setEnabled(not busy)


class FilesTab(QWidget):
    def __init__(
        self,
        registry: FileRegistry,
        bridge: RegistryBridge,
        status_cb: Optional[Callable[[str], None]] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._registry = registry
        self._bridge = bridge
        self._status = status_cb or (lambda _msg: None)
        self._runner = TaskRunner()
        self._cards: Dict[str, FileCard] = {}
        self._rendered: List[Tuple[str, str, int]] = []

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(10)

        root.addWidget(CredentialsPanel(registry, on_error=self._on_error))

        header = QHBoxLayout()
        self.upload_btn = QPushButton("Upload file")
        self.upload_btn.setCursor(Qt.PointingHandCursor)
        self.upload_btn.clicked.connect(self._upload_dialog)
        header.addWidget(self.upload_btn, alignment=Qt.AlignLeft)

        self.count_label = QLabel("No files uploaded yet.")
        self.count_label.setStyleSheet("color: #666666;")
        header.addStretch(1)
        header.addWidget(self.count_label, alignment=Qt.AlignCenter)
        header.addStretch(1)

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.setCursor(Qt.PointingHandCursor)
        self.refresh_btn.clicked.connect(self.refresh)
        header.addWidget(self.refresh_btn, alignment=Qt.AlignRight)
        root.addLayout(header)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        container = QWidget()
        self.list_layout = QVBoxLayout(container)
        self.list_layout.setSpacing(10)
        self.list_layout.addStretch(1)
        self.scroll.setWidget(container)
        root.addWidget(self.scroll)

        bridge.changed.connect(self._apply_state)

    def refresh(self) -> None:
        self._status("Loading files...")
        self._runner.run(self._registry.refresh, on_error=self._on_error, label="refresh")

    def _apply_state(self) -> None:
        state = self._registry.snapshot()
        rendered = [(item.id, item.name, item.size_bytes) for item in state.files]
        if rendered != self._rendered:
            self._render(state.files)
            self._rendered = rendered
        busy = state.deleting is not None
        for item_id, card in self._cards.items():
            card.set_deleting(item_id == state.deleting, busy)
        self.refresh_btn.setEnabled(not state.listing)
        self.refresh_btn.setText("Loading..." if state.listing else "Refresh")
        self.upload_btn.setEnabled(not state.uploading)
        if not state.files:
            self.count_label.setText("No files uploaded yet.")
        elif state.stale:
            self.count_label.setText(f"{len(state.files)} file(s) (out of date)")
        else:
            self.count_label.setText(f"{len(state.files)} file(s)")

    def _render(self, items: List[FileRecord]) -> None:
        self._clear_cards()
        for item in items:
            card = FileCard(item, on_delete=self._delete_item, on_copy=self._copy_link)
            self._cards[item.id] = card
            self.list_layout.insertWidget(self.list_layout.count() - 1, card)
        self._status(f"{len(items)} file(s) loaded.")

    def _clear_cards(self) -> None:
        while self.list_layout.count() > 1:
            item = self.list_layout.takeAt(0)
            widget = item.widget()
            if widget:
                widget.deleteLater()
        self._cards = {}

    def _upload_dialog(self) -> None:
        dialog = UploadDialog(self._registry, self._bridge, parent=self)
        accepted = dialog.exec()
        ipfs_hash = dialog.ipfs_hash
        dialog.deleteLater()
        if accepted and ipfs_hash:
            self._status(f"Upload ok (hash={ipfs_hash})")

    def _delete_item(self, item: FileRecord) -> None:
        ok = QMessageBox.question(self, "Delete", f"Delete {item.name}?")
        if ok != QMessageBox.StandardButton.Yes:
            return
        self._status(f"Deleting {item.name}...")
        self._runner.run(
            lambda: self._registry.delete(item.id), on_error=self._on_error, label=f"delete {item.id}"
        )

    def _copy_link(self, item: FileRecord) -> None:
        self._registry.copy_link(item.upload.url)

    def _on_error(self, exc: Exception) -> None:
        self._status(f"Error: {exc}")
