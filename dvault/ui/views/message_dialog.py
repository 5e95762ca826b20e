from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QLabel, QPushButton, QVBoxLayout, QWidget

from ...models import Notification

_ICONS = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
}

_COLORS = {
    "success": "#16a34a",
    "error": "#dc2626",
    "warning": "#f59e0b",
    "info": "#2563eb",
}


class MessageDialog(QDialog):
    def __init__(self, note: Notification, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.note = note
        self.setWindowTitle(note.title)
        self.setModal(True)
        self.setMinimumWidth(360)
        color = _COLORS.get(note.kind, _COLORS["info"])

        root = QVBoxLayout(self)
        root.setContentsMargins(24, 24, 24, 24)
        root.setSpacing(12)

        icon = QLabel(_ICONS.get(note.kind, _ICONS["info"]))
        icon.setAlignment(Qt.AlignCenter)
        icon.setStyleSheet("font-size: 28px;")
        root.addWidget(icon)

        title = QLabel(note.title)
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 18px; font-weight: 600; color: #111111;")
        root.addWidget(title)

        message = QLabel(note.message)
        message.setAlignment(Qt.AlignCenter)
        message.setWordWrap(True)
        message.setTextInteractionFlags(Qt.TextSelectableByMouse)
        message.setStyleSheet("color: #444444;")
        root.addWidget(message)

        close_btn = QPushButton("Got it!")
        close_btn.setCursor(Qt.PointingHandCursor)
        close_btn.setStyleSheet(f"background: {color}; color: #ffffff; padding: 6px 18px; border-radius: 6px;")
        close_btn.clicked.connect(self.accept)
        root.addWidget(close_btn, alignment=Qt.AlignCenter)
