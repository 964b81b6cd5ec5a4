"""Entry point and binding models.

An entry point is the host method whose body runs the validation chain.
It always comes as a pair of names: the soft name (records errors and
returns the validity flag) and the strict name (raises when invalid).
Python identifiers cannot end in ``!``, so the strict spelling of ``name``
is ``name_strict``; declarations may still use the ``name!`` form.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_SOFT_NAME = "validate"
STRICT_MARKER = "!"
STRICT_SUFFIX = "_strict"


class EntryPointMode(str, Enum):
    """Raising policy of a validation pass."""
    
    SOFT = "soft"
    STRICT = "strict"


def strict_name_for(soft_name: str) -> str:
    return f"{soft_name}{STRICT_SUFFIX}"


class EntryPoint(BaseModel):
    """Resolved validation entry point of a host class.
    
    Attributes:
        soft_name: Method name of the non-raising entry point
        strict_name: Method name of the raising entry point
        mode: Policy applied at construction and by declared setters
    """
    
    model_config = {"frozen": True, "extra": "forbid"}
    
    soft_name: str
    strict_name: str
    mode: EntryPointMode
    
    @property
    def is_strict(self) -> bool:
        return self.mode is EntryPointMode.STRICT
    
    @property
    def names(self) -> tuple[str, str]:
        return (self.soft_name, self.strict_name)
    
    @classmethod
    def implicit(cls, mode: EntryPointMode) -> "EntryPoint":
        """Entry point built from the canonical ``validate`` names."""
        return cls(
            soft_name=DEFAULT_SOFT_NAME,
            strict_name=strict_name_for(DEFAULT_SOFT_NAME),
            mode=mode,
        )
    
    @classmethod
    def from_declaration(cls, method: str) -> "EntryPoint":
        """Normalize a declared method name into a soft/strict pair.
        
        ``"kraken"`` is soft; ``"kraken!"`` and ``"kraken_strict"`` are
        strict. All three resolve to the names ``kraken``/``kraken_strict``.
        
        Args:
            method: Declared entry point name
        
        Returns:
            EntryPoint for the declaration
        
        Raises:
            ValueError: If the base name is not a valid identifier
        """
        name = method.strip()
        mode = EntryPointMode.SOFT
        if name.endswith(STRICT_MARKER):
            name = name[: -len(STRICT_MARKER)]
            mode = EntryPointMode.STRICT
        elif name.endswith(STRICT_SUFFIX) and len(name) > len(STRICT_SUFFIX):
            name = name[: -len(STRICT_SUFFIX)]
            mode = EntryPointMode.STRICT
        
        if not name.isidentifier():
            raise ValueError(f"'{method}' is not a valid entry point name")
        
        return cls(soft_name=name, strict_name=strict_name_for(name), mode=mode)


class ValidyBinding(BaseModel):
    """Explicit class-level entry point declaration.
    
    Attributes:
        method: Entry point name, optionally marked strict
        setters: Attribute names whose assignment re-runs validation
    """
    
    model_config = {"frozen": True, "extra": "forbid"}
    
    method: str = Field(
        ...,
        description="Declared entry point name ('name', 'name!' or 'name_strict')",
        min_length=1,
    )
    
    setters: tuple[str, ...] = Field(
        default=(),
        description="Attributes whose setters re-run validation",
    )
    
    @field_validator("method")
    @classmethod
    def validate_method(cls, value: str) -> str:
        EntryPoint.from_declaration(value)
        return value.strip()
    
    @field_validator("setters", mode="before")
    @classmethod
    def validate_setters(cls, value: object) -> tuple[str, ...]:
        """Accept any iterable of names, reject non-identifiers.
        
        Raises:
            ValueError: If a name is not a valid identifier or is
                a bare string instead of a collection
        """
        if isinstance(value, str):
            raise ValueError("setters must be a collection of names, not a string")
        names = tuple(value)
        for name in names:
            if not isinstance(name, str) or not name.isidentifier():
                raise ValueError(f"'{name}' is not a valid attribute name")
        return tuple(dict.fromkeys(names))
    
    @property
    def entry_point(self) -> EntryPoint:
        return EntryPoint.from_declaration(self.method)
