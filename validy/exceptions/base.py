"""Base exception class for all validy errors.

Setup defects and strict-mode validation failures both inherit from
ValidyError, so callers can catch everything validy raises with a single
exception type. Every error names the host class it concerns in
``context["host"]`` when one is known.
"""

from typing import Any, Optional


class ValidyError(Exception):
    """Base exception for all validy errors.

    Attributes:
        message: Error message describing what went wrong
        context: Additional details, e.g. ``host`` (qualified class name of
            the validated object) and ``errors`` (recorded error map)
    """

    def __init__(
        self,
        message: str,
        context: dict | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    @property
    def host(self) -> Optional[str]:
        """Qualified name of the host class, if the error concerns one."""
        return self.context.get("host")

    def with_context(self, **details: Any) -> "ValidyError":
        """Merge extra details into the context and return the error.

        Allows call sites to enrich an error before re-raising it:
        ``raise error.with_context(attribute="foo")``.
        """
        self.context.update(details)
        return self

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        host_str = f" on {self.host}" if self.host else ""
        extra = {key: value for key, value in self.context.items() if key != "host"}
        context_str = f", context={extra}" if extra else ""
        return f"{self.__class__.__name__}{host_str}({self.message!r}{context_str})"
