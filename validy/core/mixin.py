"""The Validy mixin.

Subclassing ``Validy`` gives a class a validation lifecycle: each instance
gets a fresh Validator before ``__init__`` runs, the entry point is resolved
and run once ``__init__`` returns, and the fluent chain is available as
instance methods.

    ```python
    class Ship(Validy):
        def __init__(self, crew=None):
            self.crew = crew

        def validate(self):
            self.required("crew").type(int).condition(lambda: self.crew > 2)


    class Kraken(Validy, method="kraken!", setters=("foo",)):
        def __init__(self, foo):
            self.foo = foo

        def kraken(self):
            self.required("foo").type(int)
    ```
"""

import copy
import logging
from abc import ABCMeta
from typing import Any, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from validy.core.lifecycle import (
    BINDING_ATTR,
    bind_entry_point,
    get_binding,
    install_setters,
)
from validy.core.validator import FailureCallback, Predicate, Validator
from validy.exceptions import EntryPointError, InvalidBindingError
from validy.models.entry_point import ValidyBinding

logger = logging.getLogger(__name__)


class ValidyMeta(ABCMeta):
    """Metaclass running the validation lifecycle around construction.

    Derives from ABCMeta so hosts can also inherit from ``abc.ABC`` and
    declare abstract methods.
    """

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        bind_entry_point(cls)
        instance = super().__call__(*args, **kwargs)
        instance.validator.finish_construction()
        return instance


class Validy(metaclass=ValidyMeta):
    """Mixin attaching a validation lifecycle to its subclasses.

    Class keywords:
        method: Explicit entry point name. ``"name"`` is soft,
            ``"name!"`` or ``"name_strict"`` is strict.
        setters: Attribute names whose assignment re-runs validation in the
            entry point mode. Requires ``method``.
    """

    def __init_subclass__(
        cls,
        method: Optional[str] = None,
        setters: Optional[Iterable[str]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)

        if method is not None:
            try:
                binding = ValidyBinding(method=method, setters=setters or ())
            except PydanticValidationError as e:
                raise InvalidBindingError(
                    f"Invalid validy declaration on {cls.__qualname__}: "
                    f"{e.error_count()} error(s)",
                    context={
                        "host": cls.__qualname__,
                        "errors": e.errors(include_url=False),
                    },
                ) from e
            setattr(cls, BINDING_ATTR, binding)
        elif setters:
            raise InvalidBindingError(
                f"{cls.__qualname__} declares setters without a `method`",
                context={"host": cls.__qualname__, "setters": list(setters)},
            )

        binding = get_binding(cls)
        if binding is not None and binding.setters:
            install_setters(cls, binding.setters)

        try:
            bind_entry_point(cls)
        except EntryPointError as e:
            # Abstract hosts may implement the entry point in a subclass.
            logger.debug(f"Deferred entry point of {cls.__qualname__}: {e}")

    def __new__(cls, *args: Any, **kwargs: Any) -> Any:
        instance = super().__new__(cls)
        instance._validator = Validator(instance)
        return instance

    def __copy__(self) -> "Validy":
        """Shallow copy with its own validator bound to the clone."""
        clone = type(self).__new__(type(self))
        for key, value in self.__dict__.items():
            if key != "_validator":
                clone.__dict__[key] = value
        clone._validator.adopt(self._validator)
        return clone

    def __deepcopy__(self, memo: dict) -> "Validy":
        clone = type(self).__new__(type(self))
        memo[id(self)] = clone
        for key, value in self.__dict__.items():
            if key != "_validator":
                clone.__dict__[key] = copy.deepcopy(value, memo)
        clone._validator.adopt(self._validator)
        return clone

    @property
    def validator(self) -> Validator:
        return self._validator

    @property
    def errors(self) -> dict[str, Any]:
        return self._validator.errors

    def is_valid(self) -> bool:
        return self._validator.is_valid()

    def is_invalid(self) -> bool:
        return self._validator.is_invalid()

    def add_error(self, entries: Optional[dict] = None, **kwargs: Any) -> bool:
        """Record errors from inside the entry point body.

        Returns:
            Always False
        """
        return self._validator.add_error(entries, **kwargs)

    def required(
        self,
        attribute: str,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> Validator:
        return self._validator.required(attribute, error, on_failure)

    def optional(
        self,
        attribute: str,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> Validator:
        return self._validator.optional(attribute, error, on_failure)

    def condition(
        self,
        predicate: Predicate,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> Validator:
        return self._validator.condition(predicate, error, on_failure)

    def type(
        self,
        expected: Any,
        error: Any = None,
        on_failure: Optional[FailureCallback] = None,
    ) -> Validator:
        """Type check on the current cursor; see ``Validator.type``."""
        return self._validator.type(expected, error, on_failure)
