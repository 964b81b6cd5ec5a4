"""Entry point resolution and setter interception.

This module decides which host method is the validation entry point and in
which mode it runs, turns the entry point names on a host class into
dispatchers, and provides the descriptor used for re-validating setters.

Resolution precedence:
1. Explicit binding declared on the class (``method="name!"``)
2. ``validate`` implemented (soft)
3. ``validate_strict`` implemented (strict)

Implementing both canonical names without a binding is ambiguous, and
implementing neither leaves the host without an entry point. Both are
setup defects that abort construction.
"""

import functools
import inspect
import logging
from typing import Any, Callable, Optional

from validy.exceptions import AmbiguousEntryPointError, MissingEntryPointError
from validy.exceptions.entry_point_error import MUST_BE_IMPLEMENTED_ERROR
from validy.models.entry_point import (
    DEFAULT_SOFT_NAME,
    EntryPoint,
    EntryPointMode,
    ValidyBinding,
    strict_name_for,
)

logger = logging.getLogger(__name__)

BINDING_ATTR = "_validy_binding"
ENTRY_POINT_ATTR = "_validy_entry_point"
DISPATCH_MARKER = "_validy_dispatch"
IMPLEMENTATION_ATTR = "_validy_impl"

_MISSING = object()


def is_dispatcher(attr: Any) -> bool:
    return getattr(attr, DISPATCH_MARKER, False) is True


def user_implementation(cls: type, name: str) -> Optional[Callable]:
    """Return the host's own function for an entry point name.

    Dispatchers installed by validy are looked through: a dispatcher
    wrapping a host function yields that function, a synthesized one
    yields None.

    Args:
        cls: Host class
        name: Method name to probe

    Returns:
        Unbound host function, or None when not implemented
    """
    attr = getattr(cls, name, None)
    if attr is None or not callable(attr):
        return None
    if is_dispatcher(attr):
        return getattr(attr, IMPLEMENTATION_ATTR, None)
    return attr


def get_binding(cls: type) -> Optional[ValidyBinding]:
    return getattr(cls, BINDING_ATTR, None)


def resolve_entry_point(cls: type) -> EntryPoint:
    """Resolve the validation entry point of a host class.

    Args:
        cls: Host class

    Returns:
        EntryPoint naming the soft/strict pair and the construction mode

    Raises:
        MissingEntryPointError: If no usable entry point is implemented
        AmbiguousEntryPointError: If both canonical names are implemented
            and no binding disambiguates them
    """
    binding = get_binding(cls)
    if binding is not None:
        entry_point = binding.entry_point
        if not any(user_implementation(cls, name) for name in entry_point.names):
            raise MissingEntryPointError(
                MUST_BE_IMPLEMENTED_ERROR,
                context={
                    "host": cls.__qualname__,
                    "method": binding.method,
                    "names": list(entry_point.names),
                },
            )
        return entry_point

    strict_name = strict_name_for(DEFAULT_SOFT_NAME)
    has_soft = user_implementation(cls, DEFAULT_SOFT_NAME) is not None
    has_strict = user_implementation(cls, strict_name) is not None

    if has_soft and has_strict:
        raise AmbiguousEntryPointError(
            f"{cls.__qualname__} implements both '{DEFAULT_SOFT_NAME}' and "
            f"'{strict_name}'; declare the entry point with `method=`",
            context={"host": cls.__qualname__},
        )
    if has_soft:
        return EntryPoint.implicit(EntryPointMode.SOFT)
    if has_strict:
        return EntryPoint.implicit(EntryPointMode.STRICT)

    raise MissingEntryPointError(
        f"{cls.__qualname__} must implement '{DEFAULT_SOFT_NAME}' or "
        f"'{strict_name}'",
        context={"host": cls.__qualname__},
    )


def entry_point_for(cls: type) -> EntryPoint:
    """Return the cached entry point of a class, resolving it if needed."""
    cached = cls.__dict__.get(ENTRY_POINT_ATTR)
    if cached is not None:
        return cached
    return resolve_entry_point(cls)


def implementation_for(cls: type, entry_point: EntryPoint) -> Callable:
    """Pick the host function a validation pass calls.

    The soft body wins when both spellings are implemented.

    Raises:
        MissingEntryPointError: If neither spelling is implemented
    """
    for name in entry_point.names:
        implementation = user_implementation(cls, name)
        if implementation is not None:
            return implementation
    raise MissingEntryPointError(
        MUST_BE_IMPLEMENTED_ERROR,
        context={"host": cls.__qualname__, "names": list(entry_point.names)},
    )


def _make_dispatcher(
    name: str,
    strict: bool,
    implementation: Optional[Callable],
) -> Callable:
    def dispatch(self: Any) -> bool:
        validator = self.validator
        # Inside a running pass (e.g. super().validate()) the body runs inline.
        if validator.is_running and implementation is not None:
            implementation(self)
            return validator.is_valid()
        return validator.run_entry_point(strict=strict)

    if implementation is not None:
        functools.update_wrapper(dispatch, implementation)
    else:
        dispatch.__name__ = name
        dispatch.__qualname__ = name
        dispatch.__doc__ = (
            "Run a strict validation pass, raising when invalid."
            if strict
            else "Run a soft validation pass and return the validity flag."
        )
    setattr(dispatch, DISPATCH_MARKER, True)
    setattr(dispatch, IMPLEMENTATION_ATTR, implementation)
    return dispatch


def install_entry_point(cls: type, entry_point: EntryPoint) -> None:
    """Turn both entry point names on ``cls`` into dispatchers.

    Host functions are kept as the dispatcher implementation; a missing
    counterpart is synthesized. Dispatchers inherited from a base class are
    left alone since they look the implementation up at call time.
    """
    for name, strict in (
        (entry_point.soft_name, False),
        (entry_point.strict_name, True),
    ):
        attr = getattr(cls, name, None)
        if is_dispatcher(attr):
            continue
        implementation = attr if callable(attr) else None
        setattr(cls, name, _make_dispatcher(name, strict, implementation))


def bind_entry_point(cls: type) -> EntryPoint:
    """Resolve, install and cache the entry point of a host class.

    Raises:
        EntryPointError: If resolution fails
    """
    cached = cls.__dict__.get(ENTRY_POINT_ATTR)
    if cached is not None:
        return cached

    entry_point = resolve_entry_point(cls)
    install_entry_point(cls, entry_point)
    setattr(cls, ENTRY_POINT_ATTR, entry_point)
    logger.debug(
        f"Bound {cls.__qualname__} entry point "
        f"'{entry_point.soft_name}'/'{entry_point.strict_name}' "
        f"({entry_point.mode.value})"
    )
    return entry_point


class RevalidatingAttribute:
    """Data descriptor re-running validation after each assignment.

    Values live in the instance ``__dict__`` under the attribute name.
    Assignments are routed through ``Validator.assign``, which stores the
    value and re-runs the entry point once construction is complete.
    """

    def __init__(self, name: str, default: Any = _MISSING) -> None:
        self.name = name
        self.default = default

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            if self.default is not _MISSING:
                return self.default
            raise AttributeError(
                f"'{type(instance).__name__}' object has no attribute '{self.name}'"
            ) from None

    def __set__(self, instance: Any, value: Any) -> None:
        instance.validator.assign(self.name, value)

    def __delete__(self, instance: Any) -> None:
        try:
            del instance.__dict__[self.name]
        except KeyError:
            raise AttributeError(self.name) from None


def install_setters(cls: type, names: tuple[str, ...]) -> None:
    """Install a RevalidatingAttribute for each declared name.

    A plain class-level value becomes the attribute default; an existing
    property or method of the same name is replaced.
    """
    for name in names:
        existing = inspect.getattr_static(cls, name, _MISSING)
        if isinstance(existing, RevalidatingAttribute):
            continue
        if existing is not _MISSING and hasattr(type(existing), "__get__"):
            existing = _MISSING
        setattr(cls, name, RevalidatingAttribute(name, default=existing))
        logger.debug(f"Installed re-validating setter {cls.__qualname__}.{name}")
