"""Schema-bound form state controller - MODEL layer behind form widgets."""

import copy
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Iterable, Optional, Set, Union

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formstate.core.field_paths import clone_values, get_path, set_path
from pyqt_formstate.exceptions import ValidatorFault
from pyqt_formstate.protocols import ValidationResult, get_form_config
from pyqt_formstate.services.flag_context_manager import ControllerFlag, FlagContextManager

from .form_state import FormState, ValidationTrigger
from .validation_runner import InlineValidationRunner, ValidationRunner
from .validators import resolve_validator

logger = logging.getLogger(__name__)

# Debug flag for verbose validation tracing
DEBUG_VALIDATION = False

# Options the controller owns; callers cannot override schema resolution
RESERVED_OPTIONS = frozenset({'resolver', 'validator', 'schema'})


@dataclass
class FormControllerConfig:
    """
    Configuration for FormStateController initialization.

    Trigger fields left as None fall back to the global FormStateConfig.
    extra_options is a pass-through bag: the controller stores it untouched
    so renderers can read settings it does not interpret itself
    (e.g. should_focus_error).
    """
    default_values: Optional[Any] = None
    validation_trigger: Optional[Union[ValidationTrigger, str]] = None
    revalidation_trigger: Optional[Union[ValidationTrigger, str]] = None
    validation_runner: Optional[ValidationRunner] = None
    root_error_key: Optional[str] = None
    parent: Optional[QObject] = None
    extra_options: Dict[str, Any] = field(default_factory=dict)


class FormStateController(QObject):
    """
    Owns values, errors and interaction metadata for one form instance.

    Widgets feed raw input through set_value()/blur()/submit() and render
    whatever state_changed delivers. Correctness checks are delegated to a
    SchemaValidator; validation is holistic, so every pass replaces the whole
    error mapping.

    Trigger policy:
    - A field is validated for the first time on validation_trigger
      (default onBlur).
    - Once touched and validated, or once the form has been submitted, a
      field is re-checked on revalidation_trigger (default onChange).
    - submit() always validates the full form.

    Every pass gets an attempt number. Only the result of the latest attempt
    is applied; results from superseded passes are dropped.
    """

    state_changed = pyqtSignal(object)      # FormState
    errors_changed = pyqtSignal(object)     # Dict[str, str]
    value_changed = pyqtSignal(str, object)  # path, value
    submit_failed = pyqtSignal(Exception)

    def __init__(self, schema: Any, config: Optional[FormControllerConfig] = None):
        config = config or FormControllerConfig()
        super().__init__(config.parent)
        global_config = get_form_config()

        self.validator = resolve_validator(schema)
        self.validation_trigger = ValidationTrigger.coerce(
            config.validation_trigger or global_config.validation_trigger)
        self.revalidation_trigger = ValidationTrigger.coerce(
            config.revalidation_trigger or global_config.revalidation_trigger)
        self.root_error_key = config.root_error_key or global_config.root_error_key
        self.extra_options: Dict[str, Any] = dict(config.extra_options)
        self._runner = config.validation_runner or InlineValidationRunner()

        self._default_values = clone_values(config.default_values)
        self._values = clone_values(self._default_values)
        self._errors: Dict[str, str] = {}
        self._touched: Set[str] = set()
        self._dirty: Set[str] = set()
        self._validated: Set[str] = set()
        self._accepted_value: Any = None

        self._submit_count = 0
        self._is_submitted = False
        self._is_submit_successful = False

        self._attempt = 0
        self._pending_attempt: Optional[int] = None

        # Flags managed by FlagContextManager
        self._is_submitting = False
        self._in_reset = False

        logger.debug(
            f"Created {type(self).__name__} validator={type(self.validator).__name__} "
            f"trigger={self.validation_trigger.value} revalidate={self.revalidation_trigger.value}"
        )

    # ========== STATE ACCESS ==========

    @property
    def state(self) -> FormState:
        """Snapshot of the current form state."""
        return FormState(
            values=copy.deepcopy(self._values),
            errors=dict(self._errors),
            touched=frozenset(self._touched),
            dirty_fields=frozenset(self._dirty),
            is_submitting=self._is_submitting,
            is_validating=self._pending_attempt is not None,
            is_submitted=self._is_submitted,
            is_submit_successful=self._is_submit_successful,
            submit_count=self._submit_count,
        )

    @property
    def values(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    @property
    def is_valid(self) -> bool:
        return not self._errors

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    def get_value(self, path: str, default: Any = None) -> Any:
        return copy.deepcopy(get_path(self._values, path, default))

    # ========== USER INTERACTION ==========

    def set_value(self, path: str, value: Any) -> None:
        """Update one field and re-validate if its trigger policy says so."""
        set_path(self._values, path, value)
        self._update_dirty(path)
        self.value_changed.emit(path, value)

        if self._is_field_validated(path):
            should_validate = self.revalidation_trigger is ValidationTrigger.ON_CHANGE
        else:
            should_validate = self.validation_trigger is ValidationTrigger.ON_CHANGE

        if should_validate:
            self._run_validation([path])
        else:
            self._emit_state()

    def blur(self, path: str) -> None:
        """Mark a field touched and validate it if its trigger policy says so."""
        self._touched.add(path)

        if self._is_field_validated(path):
            should_validate = self.revalidation_trigger is ValidationTrigger.ON_BLUR
        else:
            should_validate = self.validation_trigger is ValidationTrigger.ON_BLUR

        if should_validate:
            self._run_validation([path])
        else:
            self._emit_state()

    def submit(self, handler: Callable[[Any], Any],
               on_invalid: Optional[Callable[[Dict[str, str]], Any]] = None) -> bool:
        """
        Validate the whole form and hand the accepted value to handler.

        Validation runs synchronously regardless of trigger settings or
        runner, and supersedes any in-flight background pass.

        Args:
            handler: Called with the validator's normalized value when valid
            on_invalid: Optional callback receiving the error mapping

        Returns:
            True if handler ran and returned, False if validation failed

        Raises:
            Whatever handler raises, after is_submitting has been reset
        """
        if FlagContextManager.is_flag_set(self, ControllerFlag.IS_SUBMITTING):
            logger.warning("submit() called while a submit is already running; ignored")
            return False

        self._submit_count += 1
        self._is_submitted = True
        self._is_submit_successful = False

        self._runner.cancel()
        attempt = self._next_attempt()
        candidate = copy.deepcopy(self._values)
        try:
            result = self.validator.validate(candidate)
        except Exception as e:
            self._on_validation_error(attempt, e)
        else:
            self._on_validation_result(attempt, result)

        # Errored fields count as touched so renderers show their messages
        self._touched.update(self._errors)
        self._validated.update(self._errors)

        if self._errors:
            logger.info(f"Submit blocked by {len(self._errors)} error(s): {sorted(self._errors)}")
            self._emit_state()
            if on_invalid is not None:
                on_invalid(dict(self._errors))
            return False

        try:
            with FlagContextManager.submitting_context(self):
                self._emit_state()
                handler(self._accepted_value)
        except Exception as e:
            logger.error(f"Submit handler failed: {type(e).__name__}: {e}")
            self._emit_state()
            self.submit_failed.emit(e)
            raise

        self._is_submit_successful = True
        self._emit_state()
        return True

    # ========== IMPERATIVE API ==========

    def trigger(self, path: Optional[str] = None) -> Optional[bool]:
        """
        Validate on demand, regardless of trigger settings.

        Returns:
            Validity if the pass completed synchronously, None while a
            background pass is still running
        """
        if path is not None:
            self._touched.add(path)
            paths = [path]
        else:
            paths = list(self._touched)
        attempt = self._run_validation(paths)
        if self._pending_attempt == attempt:
            return None
        if path is None:
            self._validated.update(self._errors)
        return self.is_valid

    def set_error(self, path: str, message: str) -> None:
        """Attach an error (e.g. from a server response) until the next pass."""
        self._errors[path] = message
        self._emit_errors()

    def clear_errors(self, paths: Optional[Iterable[str]] = None) -> None:
        if paths is None:
            self._errors.clear()
        else:
            for path in paths:
                self._errors.pop(path, None)
        self._emit_errors()

    def reset(self, values: Optional[Any] = None) -> None:
        """
        Discard edits, errors and interaction metadata.

        Args:
            values: New default values; keeps the current defaults when None
        """
        with FlagContextManager.reset_context(self):
            self._runner.cancel()
            # Bump the attempt so in-flight results are dropped
            self._next_attempt()
            if values is not None:
                self._default_values = clone_values(values)
            self._values = clone_values(self._default_values)
            # Held back by _in_reset; one notification goes out below
            self.clear_errors()
            self._touched.clear()
            self._dirty.clear()
            self._validated.clear()
            self._accepted_value = None
            self._submit_count = 0
            self._is_submitted = False
            self._is_submit_successful = False
        logger.debug("Form reset")
        self._emit_errors()

    def close(self) -> None:
        """Stop any background validation. Call from the owning widget's closeEvent."""
        self._next_attempt()
        self._runner.cleanup()

    # ========== VALIDATION PIPELINE ==========

    def _next_attempt(self) -> int:
        self._attempt += 1
        self._pending_attempt = None
        return self._attempt

    def _run_validation(self, paths: Iterable[str]) -> int:
        attempt = self._next_attempt()
        self._pending_attempt = attempt
        self._validated.update(paths)
        candidate = copy.deepcopy(self._values)

        if DEBUG_VALIDATION:
            logger.info(f"VALIDATE attempt={attempt} paths={sorted(self._validated)}")

        self._runner.run(attempt, lambda: self.validator.validate(candidate),
                         self._on_validation_result, self._on_validation_error)

        # Still pending means the runner is asynchronous
        if self._pending_attempt == attempt:
            self._emit_state()
        return attempt

    def _on_validation_result(self, attempt: int, result: Any) -> None:
        if attempt != self._attempt:
            logger.debug(f"Discarding stale validation attempt={attempt} (latest={self._attempt})")
            return
        if not isinstance(result, ValidationResult):
            self._on_validation_error(attempt, TypeError(
                f"{type(self.validator).__name__}.validate() returned "
                f"{type(result).__name__}, expected ValidationResult"))
            return

        self._pending_attempt = None
        self._accepted_value = result.value if result.ok else None
        if DEBUG_VALIDATION:
            logger.info(f"VALIDATED attempt={attempt} errors={result.errors}")
        self._replace_errors(dict(result.errors))

    def _on_validation_error(self, attempt: int, error: Exception) -> None:
        if attempt != self._attempt:
            logger.debug(f"Discarding stale validator failure attempt={attempt}: {error}")
            return

        fault = error if isinstance(error, ValidatorFault) else ValidatorFault(error)
        logger.error(f"Validator fault on attempt={attempt}: {fault}", exc_info=error)

        self._pending_attempt = None
        self._accepted_value = None
        message = get_form_config().validator_fault_message.format(error=fault)
        self._replace_errors({self.root_error_key: message})

    def _replace_errors(self, errors: Dict[str, str]) -> None:
        if errors != self._errors:
            self._errors = errors
            self._emit_errors()
        else:
            self._emit_state()

    # ========== BOOKKEEPING ==========

    def _is_field_validated(self, path: str) -> bool:
        if self._is_submitted:
            return True
        return path in self._touched and path in self._validated

    def _update_dirty(self, path: str) -> None:
        if get_path(self._values, path) != get_path(self._default_values, path):
            self._dirty.add(path)
        else:
            self._dirty.discard(path)

    def _emit_errors(self) -> None:
        if self._in_reset:
            return
        self.errors_changed.emit(dict(self._errors))
        self._emit_state()

    def _emit_state(self) -> None:
        if self._in_reset:
            return
        self.state_changed.emit(self.state)


def create_form_controller(schema: Any, **options: Any) -> FormStateController:
    """
    Create a controller for schema.

    Recognized options are the FormControllerConfig fields (default_values,
    validation_trigger, revalidation_trigger, validation_runner,
    root_error_key, parent). Anything else is kept, as given, in
    controller.extra_options for the rendering layer to read; caller values
    win over anything the renderer would assume by default.
    resolver/validator/schema options are discarded: the controller always
    owns schema resolution.

    Example:
        controller = create_form_controller(
            SignupForm,
            default_values={"email": "", "age": 18},
            revalidation_trigger="onBlur",
        )
    """
    known = {f.name for f in fields(FormControllerConfig)} - {'extra_options'}
    config_kwargs: Dict[str, Any] = {}
    extra_options: Dict[str, Any] = {}
    for key, value in options.items():
        if key in RESERVED_OPTIONS:
            logger.warning(f"Ignoring option {key!r}: schema resolution is owned by the controller")
        elif key in known:
            config_kwargs[key] = value
        else:
            extra_options[key] = value

    if extra_options:
        logger.debug(f"Passing through extra form options: {sorted(extra_options)}")
    config = FormControllerConfig(extra_options=extra_options, **config_kwargs)
    return FormStateController(schema, config)
