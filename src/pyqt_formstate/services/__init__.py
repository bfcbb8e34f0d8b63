"""
Service layer for form state.

Cross-cutting concerns: the refresh signal bus and flag management.
"""

from .refresh_bus import (
    RefreshSignalBus,
    RefreshEvent,
    Subscription,
    QtRefreshBridge,
    refresh_data,
    log_listener_error,
)
from .flag_context_manager import FlagContextManager, ControllerFlag

__all__ = [
    "RefreshSignalBus",
    "RefreshEvent",
    "Subscription",
    "QtRefreshBridge",
    "refresh_data",
    "log_listener_error",
    "FlagContextManager",
    "ControllerFlag",
]
