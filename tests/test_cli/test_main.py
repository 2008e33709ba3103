"""Tests for the protoscribe CLI."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from protoscribe.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config discovery away from the repository root."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_compile_per_namespace(program_file: Path, tmp_path: Path) -> None:
    """Test compiling one file per namespace."""
    output = tmp_path / "protos"

    result = runner.invoke(
        app,
        [
            "compile",
            "--ir",
            str(program_file),
            "-o",
            str(output),
            "--package-structured",
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert "✓" in result.stdout
    assert "Wrote 2 proto file(s)" in result.stdout
    assert (output / "game" / "core.proto").is_file()
    assert (output / "game" / "net.proto").is_file()


def test_compile_dump(program_file: Path, tmp_path: Path) -> None:
    """Test compiling into a single dump file."""
    output = tmp_path / "protos"

    result = runner.invoke(
        app,
        [
            "compile",
            "--ir",
            str(program_file),
            "-o",
            str(output),
            "--dump",
            "--dump-file",
            "everything.proto",
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert [path.name for path in output.iterdir()] == ["everything.proto"]


def test_compile_uses_config_file(program_file: Path, tmp_path: Path) -> None:
    """Test taking the output settings from protoscribe.toml."""
    (tmp_path / "protoscribe.toml").write_text(
        '[protoscribe]\noutput_path = "generated"\npackage_structured = true\n'
    )

    result = runner.invoke(app, ["compile", "--ir", str(program_file)])

    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "generated" / "game" / "net.proto").is_file()


def test_compile_flat_overrides_config_file(
    program_file: Path, tmp_path: Path
) -> None:
    """Test that --flat wins over package_structured in the config file."""
    config_file = tmp_path / "protoscribe.toml"
    config_file.write_text(
        '[protoscribe]\noutput_path = "generated"\npackage_structured = true\n'
    )

    result = runner.invoke(
        app,
        ["compile", "--ir", str(program_file), "--config", str(config_file), "--flat"],
    )

    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "generated" / "game.core.proto").is_file()
    assert not (tmp_path / "generated" / "game").exists()


def test_compile_without_output(program_file: Path) -> None:
    """Test that a missing output path is reported."""
    result = runner.invoke(app, ["compile", "--ir", str(program_file)])

    assert result.exit_code == 1
    assert "No output path configured" in result.stdout


def test_compile_invalid_ir(tmp_path: Path) -> None:
    """Test that invalid IR is reported."""
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")

    result = runner.invoke(app, ["compile", "--ir", str(bad), "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Invalid IR" in result.stdout


def test_compile_unwritable_output(program_file: Path, tmp_path: Path) -> None:
    """Test that filesystem failures exit with an error."""
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    result = runner.invoke(
        app, ["compile", "--ir", str(program_file), "-o", str(blocker)]
    )

    assert result.exit_code == 1
    assert "Compilation failed" in result.stdout


def test_paths(program_file: Path) -> None:
    """Test listing namespace output paths."""
    result = runner.invoke(
        app, ["paths", "--ir", str(program_file), "--package-structured"]
    )

    assert result.exit_code == 0, result.stdout
    assert "Game.Core" in result.stdout
    assert "game.core" in result.stdout
    assert "game/net.proto" in result.stdout


def test_paths_flat(program_file: Path) -> None:
    """Test listing flat output paths."""
    result = runner.invoke(app, ["paths", "--ir", str(program_file), "--flat"])

    assert result.exit_code == 0, result.stdout
    assert "game.net.proto" in result.stdout
    assert "game/net.proto" not in result.stdout


def test_paths_empty_program(tmp_path: Path) -> None:
    """Test listing an empty program."""
    empty = tmp_path / "empty.json"
    empty.write_text('{"namespaces": []}')

    result = runner.invoke(app, ["paths", "--ir", str(empty)])

    assert result.exit_code == 0
    assert "No namespaces in program" in result.stdout
