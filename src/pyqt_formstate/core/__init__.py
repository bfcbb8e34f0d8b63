"""
Core utilities.

Foundational helpers with no form-specific logic: dotted field paths and a
worker-thread task for slow validators.
"""

from .background_task import BackgroundTask
from .field_paths import split_path, join_path, get_path, set_path, clone_values

__all__ = [
    "BackgroundTask",
    "split_path",
    "join_path",
    "get_path",
    "set_path",
    "clone_values",
]
