from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QWidget,
)

from ...models import Credential
from ...registry import FileRegistry
from ..threads import TaskRunner


class CredentialsPanel(QFrame):
    def __init__(
        self,
        registry: FileRegistry,
        on_error: Callable[[Exception], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._registry = registry
        self._on_error = on_error
        self._runner = TaskRunner()

        self.setObjectName("credentialsPanel")
        self.setStyleSheet(
            "#credentialsPanel { background: #ffffff; border-radius: 10px; border: 1px solid #e6e6e6; }"
        )

        layout = QGridLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setHorizontalSpacing(12)

        title = QLabel("Pinata Configuration")
        title.setStyleSheet("font-weight: 600; color: #111111;")
        layout.addWidget(title, 0, 0, 1, 2)

        layout.addWidget(QLabel("Pinata API Key"), 1, 0)
        self.key_edit = QLineEdit()
        self.key_edit.setEchoMode(QLineEdit.Password)
        self.key_edit.setPlaceholderText("Enter your Pinata API key")
        layout.addWidget(self.key_edit, 2, 0)

        layout.addWidget(QLabel("API Secret Key"), 1, 1)
        self.secret_edit = QLineEdit()
        self.secret_edit.setEchoMode(QLineEdit.Password)
        self.secret_edit.setPlaceholderText("Enter your Pinata Secret key")
        layout.addWidget(self.secret_edit, 2, 1)

        self.save_btn = QPushButton("Save API Keys")
        self.save_btn.setCursor(Qt.PointingHandCursor)
        self.save_btn.setStyleSheet("background: #1d6fd6; color: #ffffff;")
        self.save_btn.clicked.connect(self._save)
        layout.addWidget(self.save_btn, 3, 0, alignment=Qt.AlignLeft)

        credential = registry.credential
        self.key_edit.setText(credential.api_key)
        self.secret_edit.setText(credential.api_secret)

    def _save(self) -> None:
        credential = Credential(self.key_edit.text(), self.secret_edit.text())
        self.save_btn.setEnabled(False)
        self._runner.run(
            lambda: self._registry.save_credentials(credential),
            on_error=self._on_error,
            on_finished=lambda: self.save_btn.setEnabled(True),
            label="save-credentials",
        )
