"""Validation lifecycle and fluent chain.

- Validy: mixin running the lifecycle around construction
- Validator: per-instance state and fluent chain
- RevalidatingAttribute: descriptor behind declared setters
"""

from validy.core.lifecycle import RevalidatingAttribute, resolve_entry_point
from validy.core.mixin import Validy, ValidyMeta
from validy.core.validator import Validator

__all__ = [
    "Validy",
    "ValidyMeta",
    "Validator",
    "RevalidatingAttribute",
    "resolve_entry_point",
]
