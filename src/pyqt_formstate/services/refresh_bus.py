"""
Process-wide refresh signal bus.

Lets any code path ask unrelated data owners to re-fetch or recompute,
without holding references to them.

Key features:
1. Synchronous broadcast in subscription order
2. Handle-based unsubscription (a listener may be subscribed more than once)
3. Listener faults are isolated and reported to an error sink
4. Nothing is retained between requests; late subscribers see only new events
"""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)

# Debug flag for verbose broadcast logging
DEBUG_REFRESH = False


@dataclass(frozen=True)
class RefreshEvent:
    """One refresh request. Created per request() call, never persisted."""
    sequence: int
    timestamp: float = field(default_factory=time.monotonic)
    callback: Optional[Callable[[], None]] = None


RefreshListener = Callable[[RefreshEvent], None]
ErrorSink = Callable[[Exception, RefreshListener], None]


def log_listener_error(error: Exception, listener: RefreshListener) -> None:
    """Default error sink: log with traceback and carry on."""
    name = getattr(listener, '__qualname__', repr(listener))
    logger.error(f"Refresh listener {name} failed: {error}", exc_info=error)


class Subscription:
    """
    Registration handle returned by RefreshSignalBus.subscribe().

    Unsubscribing removes exactly this registration; calling it again is a
    no-op. Also usable as a context manager:

        with bus.subscribe(self._reload):
            dialog.exec()
    """

    def __init__(self, bus: 'RefreshSignalBus', listener: RefreshListener):
        self._bus = bus
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._bus._remove(self)

    __call__ = unsubscribe

    def __enter__(self) -> 'Subscription':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class RefreshSignalBus:
    """
    Broadcast channel for "refresh requested" events.

    The bus broadcasts unconditionally; listeners decide whether an event is
    relevant to them. Dispatch is fire-and-forget: request() returns once
    every listener's handler was invoked, not once their follow-up work
    (e.g. a background re-fetch) has finished.

    Lifetime: instance() is the process-wide default, living until the
    process exits. Components should accept a bus as a parameter and fall
    back to instance(); tests construct a fresh RefreshSignalBus().

    Examples:
        bus = RefreshSignalBus()
        subscription = bus.subscribe(lambda event: table.reload())
        bus.request(callback=lambda: status.showMessage("Refreshed"))
        subscription.unsubscribe()
    """

    _instance: Optional['RefreshSignalBus'] = None

    @classmethod
    def instance(cls) -> 'RefreshSignalBus':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def __init__(self, error_sink: Optional[ErrorSink] = None):
        self._subscriptions: List[Subscription] = []
        self._error_sink = error_sink or log_listener_error
        self._sequence = itertools.count(1)

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, listener: RefreshListener) -> Subscription:
        """Register listener for every future request()."""
        if not callable(listener):
            raise TypeError(f"Refresh listener must be callable, got {type(listener).__name__}")
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        logger.debug(f"Refresh subscriber added (total: {len(self._subscriptions)})")
        return subscription

    def request(self, callback: Optional[Callable[[], None]] = None) -> RefreshEvent:
        """
        Broadcast a new RefreshEvent to all current subscribers, then run callback.

        Args:
            callback: Invoked after every listener has been notified

        Returns:
            The event that was broadcast
        """
        event = RefreshEvent(sequence=next(self._sequence), callback=callback)

        # Iterate a snapshot: listeners may subscribe/unsubscribe while we dispatch
        snapshot = list(self._subscriptions)
        if DEBUG_REFRESH:
            logger.info(f"REFRESH #{event.sequence} -> {len(snapshot)} listener(s)")

        for subscription in snapshot:
            # Removed earlier in this same broadcast
            if not subscription.active:
                continue
            try:
                subscription.listener(event)
            except Exception as e:
                self._report(e, subscription.listener)

        if callback is not None:
            callback()
        return event

    def clear(self) -> None:
        """Drop every subscription."""
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    def _report(self, error: Exception, listener: RefreshListener) -> None:
        try:
            self._error_sink(error, listener)
        except Exception as sink_error:
            logger.error(f"Refresh error sink failed while reporting {error!r}: {sink_error}",
                         exc_info=sink_error)

    def _remove(self, subscription: Subscription) -> None:
        # Rebuild instead of list.remove so an in-progress snapshot is untouched
        self._subscriptions = [s for s in self._subscriptions if s is not subscription]
        logger.debug(f"Refresh subscriber removed (total: {len(self._subscriptions)})")


def refresh_data(callback: Optional[Callable[[], None]] = None,
                 bus: Optional[RefreshSignalBus] = None) -> RefreshEvent:
    """Ask every data owner to reload, e.g. after a successful mutation."""
    return (bus or RefreshSignalBus.instance()).request(callback)


class QtRefreshBridge(QObject):
    """
    Re-emit bus events as a Qt signal so widgets can connect slots directly.

    Usage:
        bridge = QtRefreshBridge(parent=self)
        bridge.refresh_requested.connect(self._reload_table)
    """

    refresh_requested = pyqtSignal(object)  # RefreshEvent

    def __init__(self, bus: Optional[RefreshSignalBus] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.bus = bus or RefreshSignalBus.instance()
        subscription = self.bus.subscribe(self._on_refresh)
        self._subscription: Optional[Subscription] = subscription
        # Capture the handle, not self: destroyed fires after the wrapper is gone
        self.destroyed.connect(lambda *_: subscription.unsubscribe())

    def _on_refresh(self, event: RefreshEvent) -> None:
        self.refresh_requested.emit(event)

    def close(self) -> None:
        """Stop forwarding. Safe to call more than once."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
