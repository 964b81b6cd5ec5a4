"""Validation failure exception.

This module defines the ValidationFailedError exception raised when a
strict validation pass finds the host instance invalid. Soft passes never
raise it; they record errors and return the validity flag instead.
"""

from validy.exceptions.base import ValidyError


class ValidationFailedError(ValidyError):
    """Raised when strict dispatch finds the instance invalid.
    
    The message is the serialized error map. The map itself is available
    as ``context["errors"]`` for callers that need structured access.
    """
    
    @property
    def errors(self) -> dict:
        return dict(self.context.get("errors", {}))
