from enum_stripper.models import EnumCandidate, ParseMode, ScannerContext
from enum_stripper.scanner import (
    _commit,
    _scan_guts,
    _scan_inner_root,
    _scan_public_root,
    _seek,
    remove_dangling_introducers,
)


def _context_at(mode: ParseMode, read_index: int, **candidate_fields) -> ScannerContext:
    candidate = EnumCandidate(start=0, declaration_introduced=True, **candidate_fields)
    return ScannerContext(mode=mode, read_index=read_index, candidate=candidate)


def test_seek_picks_the_nearest_token():
    ctx = ScannerContext()
    output: list[str] = []

    assert _seek(ctx, "f(a),var b=1", output) is True
    assert ctx.mode is ParseMode.PUBLIC_ROOT
    assert ctx.candidate.start == 4
    assert ctx.candidate.declaration_introduced is False
    assert ctx.read_index == 5
    assert ctx.write_index == 4
    assert output == ["f(a)"]


def test_seek_records_declaration_introducer():
    ctx = ScannerContext()
    output: list[str] = []

    assert _seek(ctx, "x();var a=1,b=2", output) is True
    assert ctx.candidate.start == 4
    assert ctx.candidate.declaration_introduced is True
    assert ctx.read_index == 8
    assert ctx.output_length == 4


def test_seek_stops_when_no_token_remains():
    ctx = ScannerContext()
    output: list[str] = []

    assert _seek(ctx, "let a=1;", output) is False
    assert ctx.mode is ParseMode.SEEKING
    assert output == []


def test_seek_reuses_cached_positions_ahead_of_cursor():
    ctx = ScannerContext(read_index=2, next_declaration=-1, next_separator=5)
    output: list[str] = []

    # The cache claims there is no "var " left even though the text has one
    assert _seek(ctx, "ab;cd,var x", output) is True
    assert ctx.candidate.start == 5
    assert ctx.candidate.declaration_introduced is False


def test_public_root_accumulates_until_assignment():
    ctx = _context_at(ParseMode.PUBLIC_ROOT, 0)
    text = "a$_1=(t=>("

    for _ in range(4):
        _scan_public_root(ctx, text)
    assert ctx.candidate.public_root == "a$_1"
    assert ctx.mode is ParseMode.PUBLIC_ROOT

    _scan_public_root(ctx, text)
    assert ctx.mode is ParseMode.INNER_ROOT
    assert ctx.read_index == 6


def test_public_root_resets_on_empty_root():
    ctx = _context_at(ParseMode.PUBLIC_ROOT, 0)

    _scan_public_root(ctx, "=(t=>(")

    assert ctx.mode is ParseMode.SEEKING
    assert ctx.candidate is None
    assert ctx.read_index == 0


def test_public_root_resets_on_plain_assignment():
    ctx = _context_at(ParseMode.PUBLIC_ROOT, 1, public_root="a")

    _scan_public_root(ctx, "a=5")

    assert ctx.mode is ParseMode.SEEKING
    assert ctx.read_index == 1


def test_inner_root_advances_on_arrow():
    ctx = _context_at(ParseMode.INNER_ROOT, 0, public_root="n")
    text = "t=>(t.A"

    _scan_inner_root(ctx, text)
    _scan_inner_root(ctx, text)

    assert ctx.candidate.inner_root == "t"
    assert ctx.mode is ParseMode.GUTS_SCAN
    assert ctx.read_index == 4


def test_inner_root_resets_on_other_character():
    ctx = _context_at(ParseMode.INNER_ROOT, 0, public_root="n")

    _scan_inner_root(ctx, "t)")
    _scan_inner_root(ctx, "t)")

    assert ctx.mode is ParseMode.SEEKING
    assert ctx.candidate is None


def test_guts_scan_requires_closing_sequence():
    ctx = _context_at(ParseMode.GUTS_SCAN, 0, public_root="n", inner_root="t")

    _scan_guts(ctx, 't.A="a",t))(m||{})')

    assert ctx.mode is ParseMode.SEEKING
    assert ctx.read_index == 0


def test_guts_scan_rejects_invalid_members():
    ctx = _context_at(ParseMode.GUTS_SCAN, 0, public_root="n", inner_root="t")

    _scan_guts(ctx, "t.A=call(),t))(n||{})")

    assert ctx.mode is ParseMode.SEEKING


def test_guts_scan_moves_past_closing_sequence():
    text = 't.A="a",t))(n||{});'
    ctx = _context_at(ParseMode.GUTS_SCAN, 0, public_root="n", inner_root="t")

    _scan_guts(ctx, text)

    assert ctx.mode is ParseMode.COMMIT
    assert ctx.read_index == len(text) - 1


def test_commit_records_definition_and_keeps_introducer():
    text = 'var n=(t=>(t.A="a",t))(n||{});'
    ctx = _context_at(ParseMode.COMMIT, len(text) - 1, public_root="n", inner_root="t")
    output: list[str] = []
    definitions = []

    _commit(ctx, text, output, definitions)

    assert definitions[0].raw_text == text[:-1]
    assert definitions[0].span == (0, len(text) - 1)
    assert output == ["var "]
    assert ctx.introducer_offsets == [0]
    assert ctx.write_index == len(text) - 1
    assert ctx.mode is ParseMode.SEEKING


def test_commit_after_separator_emits_nothing():
    text = ',n=(t=>(t.A="a",t))(n||{})'
    ctx = ScannerContext(
        mode=ParseMode.COMMIT,
        read_index=len(text),
        candidate=EnumCandidate(
            start=0, declaration_introduced=False, public_root="n", inner_root="t"
        ),
    )
    output: list[str] = []
    definitions = []

    _commit(ctx, text, output, definitions)

    assert output == []
    assert ctx.introducer_offsets == []


def test_remove_dangling_introducers():
    assert remove_dangling_introducers("var ;f();", [0]) == "f();"
    assert remove_dangling_introducers("var ,x=1;", [0]) == "var x=1;"
    assert remove_dangling_introducers("var x;", [0]) == "var x;"
    assert remove_dangling_introducers("a;var ;b;var ,c;", [2, 9]) == "a;b;var c;"


def test_remove_dangling_introducers_ignores_unrecorded_fragments():
    assert remove_dangling_introducers('s="var ;";var ;', [10]) == 's="var ;";'
