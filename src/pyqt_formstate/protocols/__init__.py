"""
Protocol definitions and global configuration.

ABC-based validator contract plus the process-wide configuration hooks.
"""

from .schema_validator import SchemaValidator, ValidationResult
from .form_config import FormStateConfig, set_form_config, get_form_config

__all__ = [
    "SchemaValidator",
    "ValidationResult",
    "FormStateConfig",
    "set_form_config",
    "get_form_config",
]
