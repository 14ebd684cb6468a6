"""Single-pass scanner that finds and excises compiled enum definitions."""

from __future__ import annotations

from collections.abc import Callable

from .constants import (
    ARROW_OPEN,
    CLOSING_TEMPLATE,
    DECLARATION_TOKEN,
    DEFAULT_MAX_ITERATIONS,
    IDENTIFIER_CHARS,
    ROOT_ASSIGN,
    SEPARATOR_TOKEN,
    STATEMENT_TERMINATOR,
)
from .members import validate_guts
from .models import EnumCandidate, EnumDefinition, ParseMode, ScannerContext, ScanResult


def _find_token(text: str, token: str, start: int, cached: int | None) -> int:
    """Return the offset of the next `token` at or after `start`.

    `cached` is the answer of a previous lookup; it is reused while still
    ahead of `start`, and -1 stays -1 because the read cursor never moves
    backwards.
    """
    if cached is not None and (cached == -1 or cached >= start):
        return cached
    return text.find(token, start)


def _emit(ctx: ScannerContext, output: list[str], piece: str) -> None:
    if piece:
        output.append(piece)
        ctx.output_length += len(piece)


def _seek(ctx: ScannerContext, text: str, output: list[str]) -> bool:
    """Open a candidate at the nearest introducer or separator.

    Args:
        ctx: Scanner context to update.
        text: Bundle being scanned.
        output: Output pieces; text before the candidate is copied here.

    Returns:
        bool: False when neither token occurs again, True when a candidate was
            opened.
    """
    ctx.next_declaration = _find_token(
        text, DECLARATION_TOKEN, ctx.read_index, ctx.next_declaration
    )
    ctx.next_separator = _find_token(text, SEPARATOR_TOKEN, ctx.read_index, ctx.next_separator)

    found = [index for index in (ctx.next_declaration, ctx.next_separator) if index != -1]
    if not found:
        return False

    start = min(found)
    declaration_introduced = start == ctx.next_declaration
    token = DECLARATION_TOKEN if declaration_introduced else SEPARATOR_TOKEN

    # Everything before the candidate is ordinary code
    _emit(ctx, output, text[ctx.write_index : start])
    ctx.write_index = start

    ctx.candidate = EnumCandidate(start=start, declaration_introduced=declaration_introduced)
    ctx.read_index = start + len(token)
    ctx.mode = ParseMode.PUBLIC_ROOT
    return True


def _scan_public_root(ctx: ScannerContext, text: str) -> None:
    """Read one character of the public root, or move on at ``=(``."""
    candidate = ctx.candidate
    char = text[ctx.read_index : ctx.read_index + 1]

    if char in IDENTIFIER_CHARS:
        candidate.public_root += char
        ctx.read_index += 1
    elif candidate.public_root and text.startswith(ROOT_ASSIGN, ctx.read_index):
        ctx.read_index += len(ROOT_ASSIGN)
        ctx.mode = ParseMode.INNER_ROOT
    else:
        ctx.reset()


def _scan_inner_root(ctx: ScannerContext, text: str) -> None:
    """Read one character of the inner root, or move on at ``=>(``."""
    candidate = ctx.candidate
    char = text[ctx.read_index : ctx.read_index + 1]

    if char in IDENTIFIER_CHARS:
        candidate.inner_root += char
        ctx.read_index += 1
    elif candidate.inner_root and text.startswith(ARROW_OPEN, ctx.read_index):
        ctx.read_index += len(ARROW_OPEN)
        ctx.mode = ParseMode.GUTS_SCAN
    else:
        ctx.reset()


def _scan_guts(ctx: ScannerContext, text: str) -> None:
    """Locate the closing sequence and check the member block before it."""
    candidate = ctx.candidate
    closing = CLOSING_TEMPLATE.format(
        inner_root=candidate.inner_root, public_root=candidate.public_root
    )

    guts_end = text.find(closing, ctx.read_index)
    if guts_end == -1:
        ctx.reset()
        return

    if not validate_guts(text[ctx.read_index : guts_end], candidate.inner_root):
        ctx.reset()
        return

    ctx.read_index = guts_end + len(closing)
    ctx.mode = ParseMode.COMMIT


def _commit(
    ctx: ScannerContext, text: str, output: list[str], definitions: list[EnumDefinition]
) -> None:
    candidate = ctx.candidate
    definitions.append(
        EnumDefinition(
            public_root=candidate.public_root,
            inner_root=candidate.inner_root,
            start=candidate.start,
            end=ctx.read_index,
            raw_text=text[candidate.start : ctx.read_index],
        )
    )

    # Keep the declaration keyword; later declarators in the statement need it
    if candidate.declaration_introduced:
        ctx.introducer_offsets.append(ctx.output_length)
        _emit(ctx, output, DECLARATION_TOKEN)

    ctx.write_index = ctx.read_index
    ctx.reset()


def remove_dangling_introducers(text: str, offsets: list[int]) -> str:
    """Tidy declarations emptied by removed definitions.

    Only the re-emitted introducers at `offsets` are considered. One followed
    by a statement terminator is deleted with the terminator; one followed by
    a separator loses the separator.

    Args:
        text: Scanner output.
        offsets: Ascending offsets in `text` of re-emitted ``var `` tokens.

    Returns:
        str: Text with dangling declaration fragments removed.

    Examples:
        remove_dangling_introducers("var ;f();", [0])  # "f();"
        remove_dangling_introducers("var ,x=1;", [0])  # "var x=1;"
    """
    parts = []
    cursor = 0
    for offset in offsets:
        follower_index = offset + len(DECLARATION_TOKEN)
        follower = text[follower_index : follower_index + 1]
        if follower == STATEMENT_TERMINATOR:
            parts.append(text[cursor:offset])
            cursor = follower_index + 1
        elif follower == SEPARATOR_TOKEN:
            parts.append(text[cursor:follower_index])
            cursor = follower_index + 1
    parts.append(text[cursor:])
    return "".join(parts)


def scan_definitions(
    text: str,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    warn: Callable[[str], None] | None = None,
) -> ScanResult:
    """Excise compiled enum definitions from bundle text.

    Walks the text once, left to right. Each ``var `` or separator opens a
    candidate that must match ``<public>=(<inner>=>(<members>,<inner>))(<public>||{})``
    with a member block accepted by `validate_guts`. Candidates that fail any
    step are dropped and the text is kept as is.

    Args:
        text: Full bundle contents.
        max_iterations: Maximum number of scanner steps.
        warn: Optional callback for the warning emitted when the limit is hit.

    Returns:
        ScanResult: Stripped text and committed definitions. When the limit is
            hit, `truncated` is True and the rest of the text is kept unchanged.

    Examples:
        scan_definitions('var n=(t=>(t.A="a",t))(n||{});f(n.A);')
    """
    ctx = ScannerContext()
    output: list[str] = []
    definitions: list[EnumDefinition] = []
    truncated = False

    while True:
        if ctx.iterations >= max_iterations:
            truncated = True
            if warn is not None:
                warn(
                    f"Warning: enum scan stopped after {max_iterations} iterations; "
                    "output is incomplete"
                )
            break
        ctx.iterations += 1

        if ctx.mode is ParseMode.SEEKING:
            if not _seek(ctx, text, output):
                break
        elif ctx.mode is ParseMode.PUBLIC_ROOT:
            _scan_public_root(ctx, text)
        elif ctx.mode is ParseMode.INNER_ROOT:
            _scan_inner_root(ctx, text)
        elif ctx.mode is ParseMode.GUTS_SCAN:
            _scan_guts(ctx, text)
        elif ctx.mode is ParseMode.COMMIT:
            _commit(ctx, text, output, definitions)

    _emit(ctx, output, text[ctx.write_index :])
    stripped = remove_dangling_introducers("".join(output), ctx.introducer_offsets)

    return ScanResult(
        text=stripped,
        definitions=definitions,
        truncated=truncated,
        iterations=ctx.iterations,
    )
