"""Custom exception classes for validy.

This package contains the exception hierarchy:
- ValidyError: Base exception for all validy errors
- EntryPointError: Base for entry point setup defects
- MissingEntryPointError: No validation method is implemented
- AmbiguousEntryPointError: Both canonical validation methods are implemented
- InvalidBindingError: Malformed class-level declaration
- ValidationFailedError: Strict validation found the instance invalid
"""

from validy.exceptions.base import ValidyError
from validy.exceptions.entry_point_error import (
    AmbiguousEntryPointError,
    EntryPointError,
    InvalidBindingError,
    MissingEntryPointError,
)
from validy.exceptions.validation_failed import ValidationFailedError

__all__ = [
    "ValidyError",
    "EntryPointError",
    "MissingEntryPointError",
    "AmbiguousEntryPointError",
    "InvalidBindingError",
    "ValidationFailedError",
]
