"""Data models for enum-stripper."""

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from .constants import ARROW_OPEN, CLOSING_TEMPLATE


class ParseMode(Enum):
    """Scanner modes used while walking a bundle.

    Attributes:
        SEEKING: Looking for the next declaration introducer or separator.
        PUBLIC_ROOT: Reading the name the enum object is bound to.
        INNER_ROOT: Reading the parameter name of the generating closure.
        GUTS_SCAN: Looking for the closing sequence and checking the members.
        COMMIT: Recording a confirmed definition; always returns to SEEKING.
    """

    SEEKING = auto()
    PUBLIC_ROOT = auto()
    INNER_ROOT = auto()
    GUTS_SCAN = auto()
    COMMIT = auto()


@dataclass
class EnumCandidate:
    """A span that might turn out to be a compiled enum definition.

    Attributes:
        start: Offset of the token that opened the candidate.
        declaration_introduced: True when the candidate opened on ``var ``,
            False when it followed a separator.
        public_root: Name the enum object is bound to, read so far.
        inner_root: Closure parameter name, read so far.
    """

    start: int
    declaration_introduced: bool
    public_root: str = ""
    inner_root: str = ""


@dataclass(frozen=True)
class EnumDefinition:
    """A committed enum definition.

    Attributes:
        public_root: Name used to reference the enum throughout the bundle.
        inner_root: Name used for the enum inside its generating closure.
        start: Offset where the definition starts (inclusive).
        end: Offset where the definition ends (exclusive).
        raw_text: The definition text exactly as captured.
    """

    public_root: str
    inner_root: str
    start: int
    end: int
    raw_text: str

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end

    @property
    def interior(self) -> str:
        """Member block between the arrow opener and the closing sequence."""
        closing = CLOSING_TEMPLATE.format(
            inner_root=self.inner_root, public_root=self.public_root
        )
        begin = self.raw_text.index(ARROW_OPEN) + len(ARROW_OPEN)
        return self.raw_text[begin : len(self.raw_text) - len(closing)]


@dataclass(frozen=True)
class MemberEntry:
    """One enum member.

    Attributes:
        key: Member access suffix, including the leading dot (``".Foo"``).
        literal: Literal text that replaces references, quotes included.
    """

    key: str
    literal: str


@dataclass
class EnumTable:
    """A committed definition together with its decoded members."""

    definition: EnumDefinition
    members: list[MemberEntry]


@dataclass
class ScannerContext:
    """Encapsulate scanner state while walking a bundle.

    Attributes:
        mode: Current scanner mode.
        read_index: Next offset to inspect.
        write_index: First offset not yet copied to the output.
        candidate: Definition currently being matched, if any.
        iterations: Number of scanner steps taken so far.
        output_length: Number of characters emitted so far.
        next_declaration: Cached offset of the next ``var `` token (-1 when
            none remain, None before the first lookup).
        next_separator: Cached offset of the next separator token.
        introducer_offsets: Output offsets where a bare ``var `` was re-emitted.
    """

    mode: ParseMode = ParseMode.SEEKING
    read_index: int = 0
    write_index: int = 0
    candidate: EnumCandidate | None = None
    iterations: int = 0
    output_length: int = 0
    next_declaration: int | None = None
    next_separator: int | None = None
    introducer_offsets: list[int] = field(default_factory=list)

    def reset(self) -> None:
        """Abandon the current candidate and go back to seeking."""
        self.candidate = None
        self.mode = ParseMode.SEEKING


@dataclass
class ScanResult:
    """Structured result of scanning a bundle.

    Attributes:
        text: Bundle text with every committed definition excised.
        definitions: Committed definitions in text order.
        truncated: True when the scan stopped at the iteration limit.
        iterations: Number of scanner steps taken.
    """

    text: str
    definitions: list[EnumDefinition]
    truncated: bool = False
    iterations: int = 0


@dataclass
class StripResult:
    """Structured result of stripping enums from a bundle.

    Attributes:
        source: Original bundle text.
        text: Bundle text with definitions removed and references substituted.
        tables: Committed definitions and their members, in discovery order.
        truncated: True when the scan stopped at the iteration limit; the text
            is then best-effort only.
    """

    source: str
    text: str
    tables: list[EnumTable]
    truncated: bool = False

    @property
    def definitions(self) -> list[EnumDefinition]:
        return [table.definition for table in self.tables]

    @property
    def removal_log(self) -> str:
        """Captured text of every removed definition, one per line."""
        return "\n".join(table.definition.raw_text for table in self.tables)


@dataclass
class ArtifactPaths:
    """Files touched when a bundle is processed.

    Attributes:
        target: Bundle that is rewritten in place.
        backup: Copy of the original bundle.
        log: List of removed definitions.
    """

    target: Path
    backup: Path
    log: Path
