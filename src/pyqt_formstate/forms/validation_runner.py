"""
Validation runner strategies.

A runner decides where a validation pass executes. The controller hands it
an attempt number plus a zero-argument callable and two callbacks; the
runner must eventually call exactly one of them with the same attempt.
Stale-result filtering is the controller's job, not the runner's.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from pyqt_formstate.core.background_task import BackgroundTask
from pyqt_formstate.protocols import ValidationResult, get_form_config

logger = logging.getLogger(__name__)

ResultCallback = Callable[[int, ValidationResult], None]
ErrorCallback = Callable[[int, Exception], None]


class ValidationRunner(ABC):
    """ABC for validation execution strategies."""

    @abstractmethod
    def run(self, attempt: int, validate: Callable[[], ValidationResult],
            on_result: ResultCallback, on_error: ErrorCallback) -> None:
        """Execute validate() and report the outcome tagged with attempt."""
        pass

    def cancel(self) -> None:
        """Drop interest in any in-flight validation."""
        pass

    def cleanup(self) -> None:
        """Release resources. Called when the owning controller goes away."""
        self.cancel()


class InlineValidationRunner(ValidationRunner):
    """Run the validator synchronously on the calling thread."""

    def run(self, attempt, validate, on_result, on_error):
        try:
            result = validate()
        except Exception as e:
            on_error(attempt, e)
            return
        on_result(attempt, result)


class BackgroundValidationRunner(ValidationRunner):
    """
    Run the validator on a worker thread via BackgroundTask.

    Results come back through queued Qt signals, so callbacks always run on
    the thread that owns the event loop. Starting a new pass cancels the
    previous task; the controller still discards anything stale that was
    already queued.

    Usage:
        controller = create_form_controller(
            SignupForm, validation_runner=BackgroundValidationRunner())
    """

    def __init__(self):
        self._current_task = None
        self._tasks: List[BackgroundTask] = []

    def run(self, attempt, validate, on_result, on_error):
        self.cancel()

        task = BackgroundTask(attempt=attempt, target=validate)
        task.result_ready.connect(on_result)
        task.error_occurred.connect(on_error)
        task.finished.connect(lambda: self._forget(task))

        # Keep a reference until the thread finishes, QThread must outlive run()
        self._tasks.append(task)
        self._current_task = task
        logger.debug(f"Starting background validation attempt={attempt}")
        task.start()

    def cancel(self):
        if self._current_task is not None:
            self._current_task.cancel()
            self._current_task = None

    def wait(self, timeout_ms: int = -1) -> bool:
        """Block until every started task has finished. Returns False on timeout."""
        for task in list(self._tasks):
            if timeout_ms < 0:
                task.wait()
            elif not task.wait(timeout_ms):
                return False
        return True

    def cleanup(self):
        """Cancel and wait for running tasks. Call from closeEvent."""
        self.cancel()
        wait_ms = get_form_config().background_cancel_wait_ms
        for task in list(self._tasks):
            if task.isRunning():
                task.cancel()
                task.wait(wait_ms)
        self._tasks.clear()

    def _forget(self, task: BackgroundTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)
        if task is self._current_task:
            self._current_task = None
