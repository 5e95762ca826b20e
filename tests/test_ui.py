import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from dvault.ui.state import RegistryBridge  # noqa: E402
from dvault.ui.views.log_tab import PinataLogView  # noqa: E402
from dvault.ui.views.upload_dialog import UploadDialog  # noqa: E402


@pytest.fixture
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def bridge(qapp, registry):
    b = RegistryBridge()
    b.attach(registry)
    return b


def test_upload_dialog_follows_staged_file(bridge, registry, make_file):
    dialog = UploadDialog(registry, bridge)
    assert dialog.file_label.text() == "No file selected"
    assert not dialog.upload_btn.isEnabled()
    registry.select_file(make_file("report.pdf", size=2048))
    assert dialog.file_label.text() == "Selected: report.pdf (2.00KB)"
    assert dialog.upload_btn.isEnabled()
    dialog.done(0)


def test_closed_upload_dialog_stops_listening(bridge, registry, make_file):
    closed = UploadDialog(registry, bridge)
    closed.done(0)
    still_open = UploadDialog(registry, bridge)
    registry.select_file(make_file("a.txt"))
    assert closed.file_label.text() == "No file selected"
    assert still_open.file_label.text().startswith("Selected: a.txt")
    # Closing twice must not try to disconnect again.
    closed.done(0)
    still_open.done(0)


def test_log_view_tails_http_log(qapp, tmp_path):
    path = tmp_path / "http.log"
    view = PinataLogView(str(path))
    assert view.status.text().startswith("No Pinata requests logged yet")
    path.write_text("[2026-10-18 09:30:00] GET https://api.pinata.cloud/data/pinList\n", encoding="utf-8")
    view._poll()
    assert "data/pinList" in view.box.toPlainText()
    assert view.status.text() == f"Pinata HTTP log: {path}"
    view.box_clear()
    view._poll()
    assert view.box.toPlainText() == ""
    view.timer.stop()
