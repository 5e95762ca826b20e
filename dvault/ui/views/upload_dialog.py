from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
)

from ...registry import FileRegistry
from ...utils import format_bytes
from ..state import RegistryBridge
from ..threads import TaskRunner


class UploadDialog(QDialog):
    def __init__(self, registry: FileRegistry, bridge: RegistryBridge, parent=None) -> None:
        super().__init__(parent)
        self._registry = registry
        self._runner = TaskRunner()
        self.ipfs_hash: Optional[str] = None

        self.setWindowTitle("Upload Files to Pinata")
        self.setModal(True)
        self.setFixedSize(520, 200)

        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        file_row = QHBoxLayout()
        self.file_btn = QPushButton("Choose file")
        self.file_btn.setCursor(Qt.PointingHandCursor)
        self.file_btn.clicked.connect(self._choose_file)
        self.file_label = QLabel("No file selected")
        self.file_label.setStyleSheet("color: #666666;")
        self.file_label.setWordWrap(True)
        file_row.addWidget(self.file_btn)
        file_row.addWidget(self.file_label, 1)
        root.addLayout(file_row)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setValue(0)
        self.progress.setVisible(False)
        root.addWidget(self.progress)
        root.addStretch(1)

        footer = QHBoxLayout()
        footer.addStretch(1)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.clicked.connect(self.reject)
        self.upload_btn = QPushButton("Upload to Pinata")
        self.upload_btn.setCursor(Qt.PointingHandCursor)
        self.upload_btn.clicked.connect(self._start_upload)
        footer.addWidget(self.cancel_btn)
        footer.addWidget(self.upload_btn)
        root.addLayout(footer)

        self._bridge = bridge
        self._attached = True
        bridge.changed.connect(self._sync_state)
        self.finished.connect(self._detach)
        self._sync_state()

    def _detach(self, _code: int = 0) -> None:
        if self._attached:
            self._attached = False
            self._bridge.changed.disconnect(self._sync_state)

    def _choose_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Select file to upload")
        if not path:
            return
        try:
            self._registry.select_path(path)
        except OSError as exc:
            self.file_label.setText(f"Cannot read file: {exc}")

    def _sync_state(self) -> None:
        state = self._registry.snapshot()
        selected = state.selected_file
        if selected is not None:
            self.file_label.setText(f"Selected: {selected.name} ({format_bytes(selected.size_bytes)})")
        elif not state.uploading:
            self.file_label.setText("No file selected")
        self.progress.setVisible(state.uploading)
        self.progress.setValue(state.progress)
        self.upload_btn.setText("Uploading to Pinata..." if state.uploading else "Upload to Pinata")
        self.upload_btn.setEnabled(not state.uploading and selected is not None)
        self.file_btn.setEnabled(not state.uploading)
        self.cancel_btn.setEnabled(not state.uploading)

    def _start_upload(self) -> None:
        def done(ipfs_hash: Optional[str]) -> None:
            if ipfs_hash is None:
                return
            self.ipfs_hash = ipfs_hash
            self.accept()

        self._runner.run(self._registry.upload, on_result=done, on_error=self._on_error, label="upload")

    def _on_error(self, exc: Exception) -> None:
        self.file_label.setText(f"Upload failed: {exc}")
