"""
pyqt-formstate: schema-bound form state and refresh signaling for PyQt6.

A small UI-state layer that sits between widgets and application logic.

Architecture:
- Tier 1 (Core): Field path helpers and worker-thread tasks
- Tier 2 (Protocols): SchemaValidator ABC and global configuration
- Tier 3 (Services): Refresh signal bus, flag management
- Tier 4 (Forms): FormStateController with pluggable validators

Key Features:
- Declarative validation via pydantic models or plain rule callables
- Configurable validation/revalidation triggers (onBlur, onChange, onSubmit)
- Last-writer-wins handling of slow background validation
- Decoupled "please refresh" broadcasts between unrelated widgets
"""

__version__ = "0.1.0"

from pyqt_formstate.exceptions import FormStateError, ValidationError, ValidatorFault
from pyqt_formstate.protocols import (
    SchemaValidator,
    ValidationResult,
    FormStateConfig,
    set_form_config,
    get_form_config,
)
from pyqt_formstate.services import RefreshSignalBus, RefreshEvent, Subscription, refresh_data

__all__ = [
    "__version__",
    "FormStateError",
    "ValidationError",
    "ValidatorFault",
    "SchemaValidator",
    "ValidationResult",
    "FormStateConfig",
    "set_form_config",
    "get_form_config",
    "RefreshSignalBus",
    "RefreshEvent",
    "Subscription",
    "refresh_data",
]
