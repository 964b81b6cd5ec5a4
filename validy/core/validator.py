"""Per-instance validation component and fluent chain.

The Validator owns the validation state of exactly one host object. It
exposes the fluent chain used inside entry point bodies and the
``run_entry_point`` engine shared by construction, entry point methods and
re-validating setters.

Hosts usually get a Validator through the ``Validy`` mixin, but the
component also works by plain composition:

    ```python
    class Account:
        def __init__(self, owner):
            self.validator = Validator(self)
            self.owner = owner
            self.validator.finish_construction()

        def validate(self):
            self.validator.required("owner").type(str)
    ```
"""

import logging
import threading
from typing import Any, Callable, Optional, Union

from validy.config import ValidySettings, get_settings
from validy.core.lifecycle import entry_point_for, implementation_for
from validy.exceptions import ValidationFailedError
from validy.models.validation_state import (
    EvaluationCursor,
    ValidationState,
    normalize_error,
    serialize_errors,
)

logger = logging.getLogger(__name__)

FailureCallback = Callable[[], Any]
Predicate = Union[str, Callable[[], Any]]


def _type_name(expected: Union[type, tuple]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(_type_name(item) for item in expected)
    return getattr(expected, "__name__", repr(expected))


class Validator:
    """Validation state and fluent chain of one host instance.

    Every chain method returns the validator itself and is a no-op once the
    current pass has recorded an error, so the first failure in program
    order is the one reported.

    Attributes:
        host: The object being validated
    """

    def __init__(
        self,
        host: Any,
        settings: Optional[ValidySettings] = None,
    ) -> None:
        """Initialize a fresh, valid state for ``host``.

        Args:
            host: Object whose attributes the chain reads
            settings: Optional settings. If not provided, uses get_settings()
        """
        self.host = host
        self._settings = settings
        self._state = ValidationState()
        self._cursor: Optional[EvaluationCursor] = None
        self._lock = threading.RLock()
        self._constructed = False
        self._running = False

    @property
    def settings(self) -> ValidySettings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def state(self) -> ValidationState:
        return self._state

    @property
    def cursor(self) -> Optional[EvaluationCursor]:
        return self._cursor

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def errors(self) -> dict[str, Any]:
        """Copy of the recorded errors in insertion order."""
        return dict(self._state.errors)

    def is_valid(self) -> bool:
        return self._state.valid

    def is_invalid(self) -> bool:
        return not self._state.valid

    def add_error(self, entries: Optional[dict] = None, **kwargs: Any) -> bool:
        """Record errors outside the fluent chain.

        Args:
            entries: Mapping of error key to message
            **kwargs: Additional entries, e.g. ``add_error(error="...")``

        Returns:
            Always False
        """
        merged = dict(entries or {})
        merged.update(kwargs)
        self._log_failure(merged)
        return self._state.add_error(merged)

    # -- fluent chain --------------------------------------------------------

    def required(
        self,
        attribute: str,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> "Validator":
        """Point the chain at ``attribute`` and require a value.

        Only ``None`` (or an unset attribute) counts as absent; ``False``
        and ``0`` are present values.

        Args:
            attribute: Host attribute name
            error: Message string or mapping of error entries. Defaults to
                ``"<attribute> required!"``
            on_failure: Callback invoked after the error is recorded

        Returns:
            The validator, for chaining
        """
        if self.is_invalid():
            return self

        value = getattr(self.host, attribute, None)
        self._cursor = EvaluationCursor(attribute=attribute, value=value)
        self._check(
            value is not None,
            error if error is not None else f"{attribute} required!",
            on_failure,
        )
        return self

    def optional(
        self,
        attribute: str,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> "Validator":
        """Point the chain at ``attribute`` without requiring a value.

        While the value is ``None``, following ``type`` and ``condition``
        checks on this cursor are skipped. ``optional`` never fails, so
        ``error`` and ``on_failure`` are accepted only to keep the chain
        signatures uniform.
        """
        if self.is_invalid():
            return self

        value = getattr(self.host, attribute, None)
        self._cursor = EvaluationCursor(attribute=attribute, value=value, optional=True)
        return self

    def type(
        self,
        expected: Union[type, tuple],
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> "Validator":
        """Check the cursor value is an instance of ``expected``.

        Args:
            expected: Type or tuple of types, as accepted by ``isinstance``
            error: Message string or mapping of error entries. Defaults to
                ``"'<value>' is not a type <TypeName>"``
            on_failure: Callback invoked after the error is recorded

        Returns:
            The validator, for chaining
        """
        if self.is_invalid() or self._skips_optional():
            return self

        value = self._cursor.value if self._cursor is not None else None
        self._check(
            isinstance(value, expected),
            error if error is not None else f"'{value}' is not a type {_type_name(expected)}",
            on_failure,
        )
        return self

    def condition(
        self,
        predicate: Predicate,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> "Validator":
        """Evaluate a predicate; a falsy result fails.

        Args:
            predicate: Zero-argument callable, or the name of a zero-argument
                host method
            error: Message string or mapping of error entries
            on_failure: Callback invoked after the error is recorded

        Returns:
            The validator, for chaining

        Raises:
            TypeError: If ``predicate`` is neither callable nor a string
            AttributeError: If the named host method does not exist
        """
        if self.is_invalid() or self._skips_optional():
            return self

        if callable(predicate):
            result = predicate()
            name = getattr(predicate, "__name__", repr(predicate))
        elif isinstance(predicate, str):
            result = getattr(self.host, predicate)()
            name = predicate
        else:
            raise TypeError(
                f"condition expects a callable or a method name, "
                f"got {type(predicate).__name__}"
            )

        self._check(
            bool(result),
            error if error is not None else f"condition {name} failed",
            on_failure,
        )
        return self

    # -- lifecycle -----------------------------------------------------------

    def run_entry_point(self, strict: Optional[bool] = None) -> bool:
        """Run one validation pass through the host entry point.

        The state is reset, the host body runs, and validity is read, all
        under the instance lock. A call made while a pass is already running
        (e.g. from inside the body) returns the current flag without
        starting a new pass.

        Args:
            strict: Raise on failure. Defaults to the entry point mode.

        Returns:
            Validity after the pass

        Raises:
            ValidationFailedError: If strict and the pass recorded errors
            EntryPointError: If the host has no usable entry point
        """
        host_cls = type(self.host)
        entry_point = entry_point_for(host_cls)
        if strict is None:
            strict = entry_point.is_strict

        with self._lock:
            if self._running:
                return self._state.valid

            implementation = implementation_for(host_cls, entry_point)
            self._running = True
            try:
                self._state.reset()
                self._cursor = None
                implementation(self.host)
            finally:
                self._running = False
                self._cursor = None
            valid = self._state.valid
            errors = self.errors

        logger.debug(
            f"{host_cls.__qualname__}.{implementation.__name__} pass finished: "
            f"valid={valid}, errors={len(errors)}"
        )

        if strict and not valid:
            raise ValidationFailedError(
                serialize_errors(errors, self.settings.error_separator),
                context={"host": host_cls.__qualname__, "errors": errors},
            )
        return valid

    def finish_construction(self) -> bool:
        """Mark the host as constructed and run the first pass.

        Returns:
            Validity after the pass (only in soft mode; strict raises)
        """
        entry_point_for(type(self.host))
        self._constructed = True
        return self.run_entry_point()

    def assign(self, attribute: str, value: Any) -> None:
        """Store an attribute value and re-run validation.

        During construction and inside a running pass the value is only
        stored.

        Raises:
            ValidationFailedError: If the entry point is strict and the new
                value makes the host invalid. The value stays assigned and
                the error context names the ``attribute``.
        """
        with self._lock:
            self.host.__dict__[attribute] = value
            if not self._constructed or self._running:
                return
            try:
                self.run_entry_point()
            except ValidationFailedError as e:
                raise e.with_context(attribute=attribute)

    def adopt(self, other: "Validator") -> None:
        """Take over the recorded outcome of another validator.

        Used when a host is copied: the clone keeps its own validator bound
        to itself and starts from an independent copy of the state.
        """
        with other._lock:
            self._state = other._state.model_copy(deep=True)
            self._settings = other._settings
            self._constructed = other._constructed

    # -- copy and pickle -----------------------------------------------------

    def __getstate__(self) -> dict[str, Any]:
        state = self.__dict__.copy()
        del state["_lock"]
        state["_running"] = False
        state["_cursor"] = None
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.__dict__.update(state)
        self._lock = threading.RLock()

    # -- internals -----------------------------------------------------------

    def _skips_optional(self) -> bool:
        return self._cursor is not None and self._cursor.skips_checks

    def _check(
        self,
        passed: bool,
        error: Any,
        on_failure: Optional[FailureCallback],
    ) -> None:
        if passed:
            return

        entries = normalize_error(error)
        self._log_failure(entries)
        self._state.add_error(entries)

        if on_failure is not None:
            on_failure()

    def _log_failure(self, entries: dict) -> None:
        if not self.settings.log_failures:
            return
        attribute = self._cursor.attribute if self._cursor is not None else None
        logger.debug(
            f"Validation failure on {type(self.host).__qualname__}"
            f"{'.' + attribute if attribute else ''}: {entries}"
        )
