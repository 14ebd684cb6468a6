"""Validation and decoding of compiled enum member blocks.

Bundlers emit two member shapes inside the generating closure::

    t[t.NumberEnumItem=123]="NumberEnumItem"    numeric member
    t.StringEnumItem="ABC"                      string member

Both end with a quoted string. The numeric shape also writes the reverse
mapping, which is why its assignment sits inside the brackets.
"""

from __future__ import annotations

from .constants import (
    ASSIGNMENT,
    MEMBER_ACCESS,
    QUOTE_CHARS,
    REVERSE_LOOKUP_CLOSE,
    REVERSE_LOOKUP_OPEN,
    SEPARATOR_TOKEN,
)
from .exceptions import ParseError
from .models import MemberEntry


def _numeric_prefix(inner_root: str) -> str:
    return f"{inner_root}{REVERSE_LOOKUP_OPEN}{inner_root}{MEMBER_ACCESS}"


def _string_prefix(inner_root: str) -> str:
    return f"{inner_root}{MEMBER_ACCESS}"


def _split_numeric(entry: str, inner_root: str) -> tuple[str, str] | None:
    """Split a numeric member into its key and literal.

    Returns None when the reverse-lookup assignment cannot be located.
    """
    close = entry.find(REVERSE_LOOKUP_CLOSE)
    if close == -1:
        return None

    assignment = entry[len(inner_root) + len(REVERSE_LOOKUP_OPEN) : close]
    target, separator, literal = assignment.partition(ASSIGNMENT)
    if not separator:
        return None
    return target[len(inner_root) :], literal


def _split_string(entry: str, inner_root: str) -> tuple[str, str] | None:
    target, separator, literal = entry.partition(ASSIGNMENT)
    if not separator:
        return None
    return target[len(inner_root) :], literal


def _split_entry(entry: str, inner_root: str) -> tuple[str, str] | None:
    if not entry.endswith(QUOTE_CHARS):
        return None
    if entry.startswith(_numeric_prefix(inner_root)):
        return _split_numeric(entry, inner_root)
    if entry.startswith(_string_prefix(inner_root)):
        return _split_string(entry, inner_root)
    return None


def validate_guts(guts: str, inner_root: str) -> bool:
    """Check that every entry of a member block has a known compiled shape.

    Args:
        guts: Text between the arrow opener and the closing sequence.
        inner_root: Parameter name of the generating closure.

    Returns:
        bool: True when all entries are numeric or string members, otherwise
            False. There is no partial acceptance.

    Examples:
        validate_guts('t[t.A=1]="A",t.B="b"', "t")  # True
        validate_guts('t.A=1', "t")  # False, no trailing quote
    """
    return all(
        _split_entry(entry, inner_root) is not None
        for entry in guts.split(SEPARATOR_TOKEN)
    )


def extract_members(guts: str, inner_root: str) -> list[MemberEntry]:
    """Decode a validated member block into ordered member entries.

    A key that appears twice keeps its first position and takes the last
    literal, like repeated assignments would at runtime.

    Args:
        guts: Member block accepted by `validate_guts`.
        inner_root: Parameter name of the generating closure.

    Returns:
        list[MemberEntry]: Members in source order.

    Raises:
        ParseError: If an entry matches neither member shape.

    Examples:
        extract_members('t[t.A=1]="A",t.B="b"', "t")
        # [MemberEntry(".A", "1"), MemberEntry(".B", '"b"')]
    """
    literals: dict[str, str] = {}
    for entry in guts.split(SEPARATOR_TOKEN):
        parts = _split_entry(entry, inner_root)
        if parts is None:
            raise ParseError(entry)
        key, literal = parts
        literals[key] = literal

    return [MemberEntry(key=key, literal=literal) for key, literal in literals.items()]
