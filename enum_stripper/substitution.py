"""Replacement of enum member references with their literal values."""

from __future__ import annotations

import re

from .models import EnumTable

# Any character that can continue a minified identifier
_IDENTIFIER_CLASS = r"[A-Za-z0-9_$]"


def _ordered_tables(tables: list[EnumTable]) -> list[EnumTable]:
    # Longest root first so `ab.X` is never rewritten through `b.X`
    return sorted(tables, key=lambda table: len(table.definition.public_root), reverse=True)


def _replace_bounded(text: str, reference: str, literal: str) -> str:
    pattern = re.compile(
        rf"(?<!{_IDENTIFIER_CLASS}){re.escape(reference)}(?!{_IDENTIFIER_CLASS})"
    )
    return pattern.sub(lambda _match: literal, text)


def substitute_references(
    text: str, tables: list[EnumTable], boundary_safe: bool = False
) -> str:
    """Replace every ``<root><key>`` reference with the member's literal.

    Tables are processed by descending public-root length and members by
    descending key length, so a shorter name never rewrites part of a longer
    one that is still pending.

    Plain textual replacement also fires inside longer identifiers that end
    with ``<root><key>``. With `boundary_safe`, a reference is only replaced
    when the characters on both sides are not identifier characters.

    Args:
        text: Bundle text with enum definitions already removed.
        tables: Definitions and their members.
        boundary_safe: Respect identifier boundaries when matching.

    Returns:
        str: Text with enum references replaced by literal values.

    Examples:
        substitute_references("f(n.A)", tables)  # "f(1)"
    """
    for table in _ordered_tables(tables):
        root = table.definition.public_root
        members = sorted(table.members, key=lambda member: len(member.key), reverse=True)
        for member in members:
            reference = f"{root}{member.key}"
            if boundary_safe:
                text = _replace_bounded(text, reference, member.literal)
            else:
                text = text.replace(reference, member.literal)
    return text
