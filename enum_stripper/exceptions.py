"""Package-specific exception types."""

from __future__ import annotations


class StripError(ValueError):
    """Base class for errors raised while stripping enums from a bundle."""


class ParseError(StripError):
    """Raised when a member entry matches neither compiled enum shape.

    Args:
        entry: The offending member entry text.
    """

    def __init__(self, entry: str):
        self.entry = entry
        super().__init__(f"Unrecognized enum member entry: {entry!r}")


class RunawayScanError(StripError):
    """Raised when the scanner hits its iteration limit.

    Args:
        limit: Maximum number of scanner steps that were allowed.
    """

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Scan stopped after {self.limit} iterations; "
            "the output is incomplete and was not written"
        )
