"""Data models for validy.

- ValidationState: validity flag and ordered error map of one instance
- EvaluationCursor: attribute currently evaluated by the chain
- EntryPoint / EntryPointMode: resolved soft/strict entry point pair
- ValidyBinding: explicit class-level declaration
"""

from validy.models.entry_point import EntryPoint, EntryPointMode, ValidyBinding
from validy.models.validation_state import (
    GENERIC_ERROR_KEY,
    EvaluationCursor,
    ValidationState,
    normalize_error,
    serialize_errors,
)

__all__ = [
    "EntryPoint",
    "EntryPointMode",
    "ValidyBinding",
    "ValidationState",
    "EvaluationCursor",
    "GENERIC_ERROR_KEY",
    "normalize_error",
    "serialize_errors",
]
