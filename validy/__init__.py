"""Validy: object validation lifecycle mixin.

Attach a validation entry point to any class, run a fluent chain of
checks at construction time and, optionally, after each assignment of
declared attributes.
"""

from validy.config import ValidySettings, get_settings, reload_settings
from validy.core import RevalidatingAttribute, Validator, Validy
from validy.exceptions import (
    AmbiguousEntryPointError,
    EntryPointError,
    InvalidBindingError,
    MissingEntryPointError,
    ValidationFailedError,
    ValidyError,
)
from validy.models import EntryPoint, EntryPointMode, ValidationState, ValidyBinding

__version__ = "0.2.0"

__all__ = [
    "Validy",
    "Validator",
    "RevalidatingAttribute",
    "ValidySettings",
    "get_settings",
    "reload_settings",
    "EntryPoint",
    "EntryPointMode",
    "ValidyBinding",
    "ValidationState",
    "ValidyError",
    "EntryPointError",
    "MissingEntryPointError",
    "AmbiguousEntryPointError",
    "InvalidBindingError",
    "ValidationFailedError",
]
