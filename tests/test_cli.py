"""Tests for the CLI module."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from git_survey.cli import main


@patch("git_survey.cli.asyncio.run")
def test_main_defaults(mock_asyncio_run):
    runner = CliRunner()
    with patch("git_survey.cli.run") as mock_run:
        result = runner.invoke(main, [], env={"GIT_SURVEY_IGNORE_BRANCH": None})
    assert result.exit_code == 0
    mock_asyncio_run.assert_called_once()
    config = mock_run.call_args.args[0]
    assert config.start_dir == Path(".")
    assert config.ignore_branches == ()
    assert config.output_format == "line"
    assert config.jobs == 1
    assert config.options.include_ignored is False
    assert config.options.detect_renames is True


@patch("git_survey.cli.asyncio.run")
def test_main_with_all_options(mock_asyncio_run, tmp_path):
    runner = CliRunner()
    with patch("git_survey.cli.run") as mock_run:
        result = runner.invoke(main, [
            "--debug",
            "--start-dir", str(tmp_path),
            "-i", "main",
            "-i", "develop",
            "-i", "main",
            "--include-ignored",
            "--no-renames",
            "--jobs", "4",
            "--format", "json",
        ], env={"GIT_SURVEY_LOG": None})
    assert result.exit_code == 0
    config = mock_run.call_args.args[0]
    assert config.start_dir == tmp_path
    assert config.ignore_branches == ("main", "develop")
    assert config.output_format == "json"
    assert config.jobs == 4
    assert config.options.include_ignored is True
    assert config.options.detect_renames is False
    assert config.log.level == logging.DEBUG


@patch("git_survey.cli.asyncio.run")
def test_main_ignore_branches_from_env(mock_asyncio_run):
    runner = CliRunner()
    with patch("git_survey.cli.run") as mock_run:
        result = runner.invoke(main, [], env={"GIT_SURVEY_IGNORE_BRANCH": "main master"})
    assert result.exit_code == 0
    assert mock_run.call_args.args[0].ignore_branches == ("main", "master")


def test_main_rejects_missing_start_dir(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["--start-dir", str(tmp_path / "missing")])
    assert result.exit_code != 0


def test_main_rejects_zero_jobs():
    runner = CliRunner()
    result = runner.invoke(main, ["--jobs", "0"])
    assert result.exit_code != 0


def test_main_version():
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()


def test_main_scans_repositories(make_repo, tmp_path):
    """Full run: exit status is 0 even when a repository fails."""
    builder = make_repo("proj")
    builder.commit_files(**{"a.txt": "one\n"})
    builder.write("b.txt")
    (tmp_path / "broken" / ".git").mkdir(parents=True)

    runner = CliRunner()
    result = runner.invoke(
        main, ["--start-dir", str(tmp_path), "-i", "main"], env={"GIT_SURVEY_LOG": None}
    )

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].startswith(f"{tmp_path / 'broken'} -> failed to open")
    assert lines[1] == f"{tmp_path / 'proj'} -> main ✚ 1"
    assert "Done!" in lines[2]
