"""Entry point setup errors.

These exceptions signal defects in how a host class wires its validation
entry point. They are raised at construction time (or class-definition
time for malformed declarations) and are never recoverable locally.
"""

from validy.exceptions.base import ValidyError

MUST_BE_IMPLEMENTED_ERROR = (
    "validation method given by the `method` declaration must be implemented!"
)


class EntryPointError(ValidyError):
    """Base class for entry point setup defects."""
    
    pass


class MissingEntryPointError(EntryPointError):
    """Raised when no recognizable validation method exists on the host.
    
    Neither `validate` nor `validate_strict` is implemented, or the method
    named by an explicit declaration is implemented under neither its soft
    nor its strict spelling.
    """
    
    pass


class AmbiguousEntryPointError(EntryPointError):
    """Raised when both canonical entry points are implemented.
    
    A host implementing `validate` and `validate_strict` without an explicit
    declaration leaves the evaluation order undefined, so construction is
    refused.
    """
    
    pass


class InvalidBindingError(EntryPointError):
    """Raised when a class-level declaration is malformed."""
    
    pass
