from typing import Any, Callable, Optional, Set

from PySide6.QtCore import QObject, QRunnable, Qt, QThread, QThreadPool, Signal, Slot

from ..utils import get_logger


class WorkerSignals(QObject):
    finished = Signal()
    error = Signal(Exception)
    result = Signal(object)


class Worker(QRunnable):
    """Runs one blocking registry call (refresh, upload, ...) on the pool."""

    def __init__(self, fn: Callable[[], Any], label: str) -> None:
        super().__init__()
        self.fn = fn
        self.label = label
        self.signals = WorkerSignals()
        self.logger = get_logger("dvault.qt")

    @Slot()
    def run(self) -> None:
        self.logger.debug("Task %s start thread=%s", self.label, QThread.currentThread())
        try:
            result = self.fn()
        except Exception as exc:
            # Registry calls report Pinata failures themselves; anything here is unexpected.
            self.logger.error("Task %s failed: %s", self.label, exc)
            self.signals.error.emit(exc)
        else:
            self.signals.result.emit(result)
        finally:
            self.logger.debug("Task %s finished", self.label)
            self.signals.finished.emit()


class TaskRunner:
    def __init__(self) -> None:
        self.pool = QThreadPool.globalInstance()
        self.logger = get_logger("dvault.qt")
        self._workers: Set[Worker] = set()

    def run(
        self,
        fn: Callable[[], Any],
        on_result: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_finished: Optional[Callable[[], None]] = None,
        label: str = "task",
    ) -> Worker:
        worker = Worker(fn, label)
        self._workers.add(worker)
        if on_result:
            worker.signals.result.connect(on_result, Qt.QueuedConnection)
        if on_error:
            worker.signals.error.connect(on_error, Qt.QueuedConnection)
        if on_finished:
            worker.signals.finished.connect(on_finished, Qt.QueuedConnection)
        worker.signals.finished.connect(lambda: self._workers.discard(worker), Qt.QueuedConnection)
        self.pool.start(worker)
        return worker
