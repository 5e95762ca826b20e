import os

from PySide6.QtCore import QTimer
from PySide6.QtGui import QTextCursor
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPlainTextEdit, QPushButton, QVBoxLayout, QWidget


class PinataLogView(QWidget):
    """Follows the Pinata HTTP log; secrets are already redacted by the client."""

    def __init__(self, path: str, parent=None) -> None:
        super().__init__(parent)
        self.path = path
        self._offset = 0

        layout = QVBoxLayout(self)
        header = QHBoxLayout()
        self.status = QLabel()
        self.status.setStyleSheet("color: #666666;")
        header.addWidget(self.status, 1)
        clear_btn = QPushButton("Clear view")
        clear_btn.clicked.connect(self.box_clear)
        header.addWidget(clear_btn)
        layout.addLayout(header)

        self.box = QPlainTextEdit()
        self.box.setReadOnly(True)
        self.box.setMaximumBlockCount(5000)
        layout.addWidget(self.box)

        self.timer = QTimer(self)
        self.timer.setInterval(1000)
        self.timer.timeout.connect(self._poll)
        self.timer.start()
        self._poll()

    def box_clear(self) -> None:
        self.box.clear()

    def _poll(self) -> None:
        if not os.path.exists(self.path):
            self.status.setText(f"No Pinata requests logged yet ({self.path})")
            self._offset = 0
            return
        try:
            size = os.path.getsize(self.path)
            if size < self._offset:
                self._offset = 0
                self.box.clear()
            with open(self.path, "r", encoding="utf-8", errors="ignore") as handle:
                handle.seek(self._offset)
                data = handle.read()
                self._offset = handle.tell()
        except OSError as exc:
            self.status.setText(f"Cannot read Pinata log: {exc}")
            return
        self.status.setText(f"Pinata HTTP log: {self.path}")
        if data:
            cursor = self.box.textCursor()
            cursor.movePosition(QTextCursor.End)
            cursor.insertText(data)
            self.box.setTextCursor(cursor)
            self.box.ensureCursorVisible()


class LogTab(QWidget):
    def __init__(self, log_path: str, parent=None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.addWidget(PinataLogView(log_path, self))
