from __future__ import annotations

import textwrap
from pathlib import Path

from enum_stripper.cli import cli

DEFINITION = (
    'var n=(t=>(t[t.NumberEnumItem=123]="NumberEnumItem",'
    't.StringEnumItem="ABC",t))(n||{})'
)
BUNDLE = f"{DEFINITION};const c=Math.random()>.5?n.NumberEnumItem:n.StringEnumItem;"
STRIPPED = 'const c=Math.random()>.5?123:"ABC";'


def _write(tmp_path: Path, filename: str, content: str = BUNDLE) -> Path:
    path = tmp_path / filename
    path.write_text(content, encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_strips_bundle_in_place(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "Stripped 1 enum definition(s) from app.js" in result.output
    assert target.read_text(encoding="utf-8") == STRIPPED
    assert (tmp_path / "app.orig.js").read_text(encoding="utf-8") == BUNDLE
    assert (tmp_path / "app.elog.txt").read_text(encoding="utf-8") == DEFINITION


def test_cli_accepts_relative_path(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assets = tmp_path / "build" / "assets"
    assets.mkdir(parents=True)
    target = _write(assets, "app.js")

    result = cli_runner.invoke(cli, ["build/assets/app.js"])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == STRIPPED


def test_cli_accepts_absolute_path_from_other_directory(cli_runner, tmp_path, monkeypatch):
    assets = tmp_path / "build" / "assets"
    assets.mkdir(parents=True)
    target = _write(assets, "app.js")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == STRIPPED
    assert (assets / "app.orig.js").read_text(encoding="utf-8") == BUNDLE
    assert list(elsewhere.iterdir()) == []


def test_cli_dry_run_writes_nothing(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, ["--dry-run", str(target)])

    assert result.exit_code == 0
    assert result.output == STRIPPED
    assert target.read_text(encoding="utf-8") == BUNDLE
    assert sorted(path.name for path in tmp_path.iterdir()) == ["app.js"]


def test_cli_reports_bundle_without_enums(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js", "console.log(1,2);")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "Stripped 0 enum definition(s)" in result.output
    assert target.read_text(encoding="utf-8") == "console.log(1,2);"
    assert (tmp_path / "app.elog.txt").read_text(encoding="utf-8") == ""


def test_cli_custom_suffixes(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(
        cli, ["--backup-suffix", ".bak.js", "--log-suffix", ".enums.txt", str(target)]
    )

    assert result.exit_code == 0
    assert (tmp_path / "app.bak.js").exists()
    assert (tmp_path / "app.enums.txt").exists()
    assert not (tmp_path / "app.orig.js").exists()


def test_cli_reads_pyproject_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.enum-stripper]
        log_suffix = ".removed.txt"
        boundary_safe = true
        """,
    )
    target = _write(tmp_path, "app.js", 'var n=(t=>(t.A="a",t))(n||{});f(n.A,xn.A);')

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == 'f("a",xn.A);'
    assert (tmp_path / "app.removed.txt").exists()


def test_cli_flag_overrides_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.enum-stripper]
        boundary_safe = true
        """,
    )
    target = _write(tmp_path, "app.js", 'var n=(t=>(t.A="a",t))(n||{});f(n.A,xn.A);')

    result = cli_runner.invoke(cli, ["--textual", str(target)])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == 'f("a",x"a");'


def test_cli_rejects_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(
        cli, ["--backup-suffix", ".same", "--log-suffix", ".same", str(target)]
    )

    assert result.exit_code != 0
    assert "must differ" in result.output
    assert target.read_text(encoding="utf-8") == BUNDLE


def test_cli_rejects_suffix_that_overwrites_bundle(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, ["--backup-suffix", ".js", str(target)])

    assert result.exit_code != 0
    assert "would overwrite the bundle" in result.output
    assert target.read_text(encoding="utf-8") == BUNDLE


def test_cli_rejects_non_script_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "notes.txt")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a script bundle" in result.output


def test_cli_fails_when_scan_is_truncated(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, ["--max-iterations", "3", str(target)])

    assert result.exit_code != 0
    assert "Scan stopped after 3 iterations" in result.output
    assert target.read_text(encoding="utf-8") == BUNDLE
    assert not (tmp_path / "app.orig.js").exists()


def test_cli_reads_iteration_limit_from_environment(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENUM_STRIPPER_MAX_ITERATIONS", "3")
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Scan stopped after 3 iterations" in result.output


def test_cli_flag_wins_over_environment_limit(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENUM_STRIPPER_MAX_ITERATIONS", "3")
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, ["--max-iterations", "1000", str(target)])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8") == STRIPPED


def test_cli_rejects_invalid_environment_value(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENUM_STRIPPER_MAX_FILE_SIZE", "huge")
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Invalid value for ENUM_STRIPPER_MAX_FILE_SIZE" in result.output


def test_cli_enforces_file_size(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENUM_STRIPPER_MAX_FILE_SIZE", "10")
    target = _write(tmp_path, "app.js")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "exceeds the maximum allowed size" in result.output
    assert target.read_text(encoding="utf-8") == BUNDLE


def test_cli_rejects_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "app.js"
    target.write_bytes(b"var a=\xff;")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Invalid UTF-8" in result.output
