"""Per-instance validation state.

This module defines the ValidationState model owned by every host instance
and the EvaluationCursor consumed by the fluent chain. Errors only
accumulate within a pass and validity only degrades; a new pass starts
from a clean state.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

GENERIC_ERROR_KEY = "error"


class ValidationState(BaseModel):
    """Validity flag and ordered error map of a single host instance.
    
    Attributes:
        valid: Whether the current pass recorded no error
        errors: Error messages keyed by attribute name or a custom label,
            in insertion order
    """
    
    model_config = {"extra": "forbid"}
    
    valid: bool = Field(
        default=True,
        description="Whether the current validation pass recorded no error",
    )
    
    errors: dict[str, Any] = Field(
        default_factory=dict,
        description="Recorded errors in insertion order",
    )
    
    def add_error(self, entries: Mapping[Any, Any]) -> bool:
        """Merge entries into the error map and mark the state invalid.
        
        Existing keys are overwritten, new keys are appended.
        
        Args:
            entries: Mapping of error key to message
        
        Returns:
            Always False, the validity after recording
        """
        for key, message in entries.items():
            self.errors[str(key)] = message
        self.valid = False
        return False
    
    def reset(self) -> None:
        """Start a new pass: clear errors and restore validity."""
        self.errors = {}
        self.valid = True
    
    def serialize(self, separator: str = "") -> str:
        """Render the error map as ``key: value`` entries.
        
        Args:
            separator: String placed between entries. The default empty
                string concatenates entries directly.
        
        Returns:
            Serialized error map, empty when there are no errors
        """
        return serialize_errors(self.errors, separator)


def serialize_errors(errors: Mapping[Any, Any], separator: str = "") -> str:
    """Render an error map as ``key: value`` entries in insertion order."""
    return separator.join(f"{key}: {message}" for key, message in errors.items())


def normalize_error(error: Any) -> dict[str, Any]:
    """Turn a chain error argument into error map entries.
    
    Mappings are used as-is, so one call may record several keys. Anything
    else is stored under the generic ``error`` key.
    """
    if isinstance(error, Mapping):
        return dict(error)
    return {GENERIC_ERROR_KEY: error}


@dataclass(frozen=True)
class EvaluationCursor:
    """Attribute currently evaluated by the chain.
    
    Attributes:
        attribute: Name of the host attribute
        value: Value read when the cursor was set
        optional: True when set by ``optional``; absent values then skip
            every following check on this cursor
    """
    
    attribute: str
    value: Any
    optional: bool = False
    
    @property
    def skips_checks(self) -> bool:
        return self.optional and self.value is None
