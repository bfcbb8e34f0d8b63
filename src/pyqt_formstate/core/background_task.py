"""Background task that tags its result with the attempt that started it."""

from typing import Callable, Any, Tuple
from PyQt6.QtCore import QThread, pyqtSignal


class BackgroundTask(QThread):
    """
    Run one callable on a worker thread and report back through signals.

    Every task carries an attempt number so the receiver can tell a fresh
    result from one that was superseded while it was running.

    Usage:
        task = BackgroundTask(attempt=7, target=validator.validate, args=(values,))
        task.result_ready.connect(on_result)     # (attempt, result)
        task.error_occurred.connect(on_error)    # (attempt, Exception)
        task.start()

        # Later:
        task.cancel()  # Signals won't emit after this
    """

    result_ready = pyqtSignal(int, object)
    error_occurred = pyqtSignal(int, Exception)  # Full exception, caller decides

    def __init__(
        self,
        attempt: int,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: dict = None,
        parent=None
    ):
        super().__init__(parent)
        self.attempt = attempt
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}
        self.cancelled = False

    def run(self):
        """Execute target in background, respecting cancellation."""
        try:
            result = self._target(*self._args, **self._kwargs)
            if not self.cancelled:
                self.result_ready.emit(self.attempt, result)
        except Exception as e:
            if not self.cancelled:
                self.error_occurred.emit(self.attempt, e)

    def cancel(self):
        """Cancel task — signals won't emit after this."""
        self.cancelled = True
