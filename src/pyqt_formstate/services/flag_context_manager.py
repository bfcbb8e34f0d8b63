"""
Context manager factory for boolean controller flags.

Instead of:
    self._is_submitting = True
    try:
        handler(values)
    finally:
        self._is_submitting = False

Use:
    with FlagContextManager.submitting_context(self):
        handler(values)

Flags are always restored, including when the wrapped block raises.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Set
import logging

logger = logging.getLogger(__name__)


class ControllerFlag(Enum):
    """
    Registry of valid FormStateController flags.

    Add new flags here as they're introduced to the codebase.
    """
    IS_SUBMITTING = '_is_submitting'
    IN_RESET = '_in_reset'


class FlagContextManager:
    """
    Context manager factory for boolean flag management.

    Examples:
        # Single flag:
        with FlagContextManager.manage_flags(controller, _in_reset=True):
            controller._clear_state()

        # Convenience methods:
        with FlagContextManager.submitting_context(controller):
            handler(values)
    """

    VALID_FLAGS: Set[str] = {flag.value for flag in ControllerFlag}

    @staticmethod
    @contextmanager
    def manage_flags(obj: Any, **flags: bool):
        """
        Set flags on entry and restore previous values on exit.

        Raises:
            ValueError: If any flag name is not in VALID_FLAGS registry
            AttributeError: If obj never initialized one of the flags
        """
        invalid_flags = set(flags.keys()) - FlagContextManager.VALID_FLAGS
        if invalid_flags:
            raise ValueError(
                f"Invalid flags: {invalid_flags}. "
                f"Valid flags: {FlagContextManager.VALID_FLAGS}. "
                f"Add new flags to ControllerFlag enum."
            )

        # No getattr default: flags must be initialized in __init__
        prev_values: Dict[str, bool] = {}
        for flag_name in flags:
            prev_values[flag_name] = getattr(obj, flag_name)

        for flag_name, flag_value in flags.items():
            setattr(obj, flag_name, flag_value)
            logger.debug(f"Setting flag {flag_name}={flag_value} on {type(obj).__name__}")

        try:
            yield
        finally:
            for flag_name, prev_value in prev_values.items():
                setattr(obj, flag_name, prev_value)
                logger.debug(f"Restoring flag {flag_name}={prev_value} on {type(obj).__name__}")

    @staticmethod
    @contextmanager
    def submitting_context(obj: Any):
        """Mark obj as submitting for the duration of the block."""
        with FlagContextManager.manage_flags(obj, **{ControllerFlag.IS_SUBMITTING.value: True}):
            yield

    @staticmethod
    @contextmanager
    def reset_context(obj: Any):
        """Mark obj as resetting; controllers hold back notifications meanwhile."""
        with FlagContextManager.manage_flags(obj, **{ControllerFlag.IN_RESET.value: True}):
            yield

    @staticmethod
    def is_flag_set(obj: Any, flag: ControllerFlag) -> bool:
        """Check if a flag is currently set to True."""
        return getattr(obj, flag.value)
