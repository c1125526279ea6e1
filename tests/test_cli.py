"""CLI tests for the document commands."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from ago.cli import cli
from ago.state import DocumentsInfo, MetadataStore, StateError


def _env_with_home(tmp_path: Path) -> dict[str, str]:
    """Return environment variables pointing HOME to a temp directory.

    Args:
        tmp_path: Temporary directory provided by pytest.

    Returns:
        dict[str, str]: Environment mapping with HOME set.
    """
    env = dict(os.environ)
    env["HOME"] = str(tmp_path / "home")
    return env


def _write_sources(tmp_path: Path, *names: str) -> list[str]:
    directory = tmp_path / "sources"
    directory.mkdir(exist_ok=True)
    paths = []
    for name in names:
        path = directory / name
        path.write_text(f"contents of {name}", encoding="utf-8")
        paths.append(str(path))
    return paths


def _doc_info(tmp_path: Path) -> dict:
    info = tmp_path / "home" / ".ago" / "docs" / "info"
    return json.loads(info.read_text(encoding="utf-8"))


def _docs_dir(tmp_path: Path) -> Path:
    return tmp_path / "home" / ".ago" / "docs"


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "ago keeps private copies" in result.output
    assert "add-docs" in result.output


def test_no_command_prints_usage_and_fails(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, [], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "No argument." in result.output
    assert "USAGE: ago <commands>" in result.output


def test_unknown_command_fails(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["frobnicate"], env=_env_with_home(tmp_path))

    assert result.exit_code == 1
    assert "wrong command" in result.output


def test_first_run_initializes_metadata(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["ls-docs"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert result.output == ""
    assert _doc_info(tmp_path) == {"Docs": [], "Next_id": 0}
    assert (tmp_path / "home" / ".ago" / "words").exists()


def test_add_list_remove_scenario(tmp_path: Path) -> None:
    """Walk through add, list, remove and re-add with id allocation checks.

    Args:
        tmp_path: Temporary directory provided by pytest.
    """
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    a_txt, b_txt, c_txt = _write_sources(tmp_path, "a.txt", "b.txt", "c.txt")

    added = runner.invoke(cli, ["add-docs", a_txt, b_txt], env=env)
    assert added.exit_code == 0
    assert "analyze..." in added.output
    assert "contents of a.txt" in added.output

    listed = runner.invoke(cli, ["ls-docs"], env=env)
    assert listed.output == "0: a.txt\n1: b.txt\n"

    removed = runner.invoke(cli, ["rm-docs", "0"], env=env)
    assert removed.exit_code == 0
    assert not (_docs_dir(tmp_path) / "doc0").exists()

    listed = runner.invoke(cli, ["ls-docs"], env=env)
    assert listed.output == "1: b.txt\n"

    runner.invoke(cli, ["add-docs", c_txt], env=env)
    listed = runner.invoke(cli, ["ls-docs"], env=env)
    assert listed.output == "1: b.txt\n2: c.txt\n"
    assert _doc_info(tmp_path)["Next_id"] == 3
    assert (_docs_dir(tmp_path) / "doc2" / "c.txt").read_text(encoding="utf-8") == (
        "contents of c.txt"
    )


def test_add_docs_fails_fast_on_missing_first_file(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    (real,) = _write_sources(tmp_path, "real.txt")
    missing = str(tmp_path / "missing.txt")

    result = runner.invoke(cli, ["add-docs", missing, real], env=env)

    assert result.exit_code == 1
    assert "failed to add doc" in result.output
    assert "file not exists" in result.output
    assert _doc_info(tmp_path) == {"Docs": [], "Next_id": 0}
    assert not (_docs_dir(tmp_path) / "doc0").exists()


def test_add_docs_persists_progress_before_failure(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    first, last = _write_sources(tmp_path, "first.txt", "last.txt")
    missing = str(tmp_path / "missing.txt")

    result = runner.invoke(cli, ["add-docs", first, missing, last], env=env)

    assert result.exit_code == 1
    assert _doc_info(tmp_path) == {"Docs": [{"Name": "first.txt", "Id": 0}], "Next_id": 1}
    listed = runner.invoke(cli, ["ls-docs"], env=env)
    assert listed.output == "0: first.txt\n"


def test_rm_docs_is_best_effort(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    sources = _write_sources(tmp_path, "a.txt", "b.txt")
    runner.invoke(cli, ["add-docs", *sources], env=env)

    result = runner.invoke(cli, ["rm-docs", "0", "99", "oops", "1"], env=env)

    assert result.exit_code == 0
    assert "failed to remove doc id 99: no such doc" in result.output
    assert "argument must be doc id: oops" in result.output
    assert _doc_info(tmp_path) == {"Docs": [], "Next_id": 2}


def test_rm_docs_unknown_id_leaves_collection_unchanged(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    runner.invoke(cli, ["add-docs", *_write_sources(tmp_path, "a.txt")], env=env)

    result = runner.invoke(cli, ["rm-docs", "7"], env=env)

    assert result.exit_code == 0
    assert "no such doc" in result.output
    assert _doc_info(tmp_path) == {"Docs": [{"Name": "a.txt", "Id": 0}], "Next_id": 1}


def test_corrupt_document_info_is_fatal(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    runner.invoke(cli, ["ls-docs"], env=env)
    (_docs_dir(tmp_path) / "info").write_text("{broken", encoding="utf-8")

    result = runner.invoke(cli, ["ls-docs"], env=env)

    assert result.exit_code == 1
    assert "error while parsing doc info" in result.output


def test_echo_can_be_disabled(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    config_path = tmp_path / "home" / ".ago" / "config.yaml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text("analysis:\n  echo_content: false\n", encoding="utf-8")

    result = runner.invoke(cli, ["add-docs", *_write_sources(tmp_path, "a.txt")], env=env)

    assert result.exit_code == 0
    assert "analyze..." not in result.output


def test_stub_commands(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    tested = runner.invoke(cli, ["test", "10", "--hard"], env=env)
    helped = runner.invoke(cli, ["help"], env=env)

    assert tested.exit_code == 0
    assert tested.output == "do test [10 --hard]\n"
    assert helped.exit_code == 0
    assert "Use the source ;)" in helped.output


def test_verbose_flag_enables_debug_logging(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["-v", "ls-docs"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "docs dir" in result.output


def test_undecodable_document_info_is_fatal(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    runner.invoke(cli, ["ls-docs"], env=env)
    info = _docs_dir(tmp_path) / "info"
    info.write_bytes(b'{"Docs":[{"Name":"\xff","Id":0}],"Next_id":1}')

    result = runner.invoke(cli, ["ls-docs"], env=env)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "error while parsing doc info" in result.output


def test_rm_docs_negative_id_is_reported(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["rm-docs", "-1"], env=env)

    assert result.exit_code == 0
    assert "failed to remove doc id -1: no such doc" in result.output


def test_add_docs_accepts_dash_prefixed_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    _write_sources(tmp_path, "-notes.txt")
    monkeypatch.chdir(tmp_path / "sources")

    result = runner.invoke(cli, ["add-docs", "-notes.txt"], env=env)

    assert result.exit_code == 0
    assert _doc_info(tmp_path) == {"Docs": [{"Name": "-notes.txt", "Id": 0}], "Next_id": 1}


def test_rm_docs_save_failure_is_reported_not_fatal(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)
    runner.invoke(cli, ["add-docs", *_write_sources(tmp_path, "a.txt")], env=env)

    def _refuse(self: MetadataStore, path: Path, state: DocumentsInfo) -> None:
        raise StateError("failed to write doc info: read-only file system")

    monkeypatch.setattr(MetadataStore, "save", _refuse)

    result = runner.invoke(cli, ["rm-docs", "0"], env=env)

    assert result.exit_code == 0
    assert "failed to write doc info" in result.output
    assert _doc_info(tmp_path) == {"Docs": [{"Name": "a.txt", "Id": 0}], "Next_id": 1}
