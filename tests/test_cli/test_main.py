"""Test main CLI functionality."""

import json
import re
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from conftest import FakeGitHubClient, event_data, issue_data, transient_error
from typer.testing import CliRunner

from issue_pulse.cli.main import app


def strip_ansi(text: str) -> str:
    """Strip ANSI escape codes and line wrapping from text."""
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return " ".join(ansi_escape.sub("", text).split())


@pytest.fixture
def runner() -> CliRunner:
    """Provide CLI test runner."""
    return CliRunner(env={"NO_COLOR": "1", "FORCE_COLOR": "0", "COLUMNS": "200"})


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    path = tmp_path / "token"
    path.write_text("ghp_test\n")
    path.chmod(0o600)
    return path


class TestMainCommand:
    """Test the issue-pulse command."""

    def test_help_display(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        clean_output = strip_ansi(result.stdout)
        for option in ("--cache", "--update", "--project", "--token"):
            assert option in clean_output

    def test_invalid_project(self, runner: CliRunner, cache_dir: Path) -> None:
        result = runner.invoke(app, ["-p", "cockroach", "-c", str(cache_dir)])

        assert result.exit_code == 1
        assert "must be owner/repo" in strip_ansi(result.stdout)

    def test_report_from_empty_cache(self, runner: CliRunner, cache_dir: Path) -> None:
        result = runner.invoke(app, ["-p", "o/r", "-c", str(cache_dir)])

        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "age: mean=0.0 stddev=0.0" in output
        assert cache_dir.is_dir()

    def test_report_from_cache(self, runner: CliRunner, cache_dir: Path) -> None:
        cache_dir.mkdir()
        for data in (
            issue_data(42),
            issue_data(
                43,
                pull_request=True,
                created_at="2024-03-01T00:00:00Z",
                closed_at="2024-03-02T12:00:00Z",
            ),
        ):
            (cache_dir / str(data["number"])).write_text(json.dumps(data))

        result = runner.invoke(app, ["-p", "o/r", "-c", str(cache_dir)])

        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "age: mean=2.0 stddev=0.0" in output
        assert re.search(r"Cached issues\W+2\b", output)

    def test_corrupted_cache(self, runner: CliRunner, cache_dir: Path) -> None:
        cache_dir.mkdir()
        (cache_dir / "7").write_text("{not json")

        result = runner.invoke(app, ["-p", "o/r", "-c", str(cache_dir)])

        assert result.exit_code == 1
        assert "Corrupted cache file" in strip_ansi(result.stdout)

    def test_cache_of_other_project(self, runner: CliRunner, cache_dir: Path) -> None:
        cache_dir.mkdir()
        (cache_dir / "meta").write_text(
            json.dumps(
                {"Owner": "o", "Repo": "r", "RefreshedAt": "2024-06-01T00:00:00Z"}
            )
        )

        result = runner.invoke(app, ["-p", "other/repo", "-c", str(cache_dir)])

        assert result.exit_code == 1
        assert "holds o/r, not other/repo" in strip_ansi(result.stdout)

    def test_update_rejects_open_token_file(
        self, runner: CliRunner, cache_dir: Path, token_file: Path
    ) -> None:
        token_file.chmod(0o644)

        result = runner.invoke(
            app,
            ["-p", "o/r", "-c", str(cache_dir), "-u", "--token", str(token_file)],
        )

        assert result.exit_code == 1
        assert "mode is 0o644" in strip_ansi(result.stdout)

    @patch("issue_pulse.cli.main.GitHubClient")
    def test_update(
        self,
        mock_client_class: Mock,
        runner: CliRunner,
        cache_dir: Path,
        token_file: Path,
    ) -> None:
        mock_client_class.return_value = FakeGitHubClient(
            issue_pages=[[issue_data(1), issue_data(2)]],
            timelines={1: [[event_data(1, actor=1)]], 2: [[event_data(2, actor=1)]]},
        )

        result = runner.invoke(
            app,
            ["-p", "o/r", "-c", str(cache_dir), "-u", "--token", str(token_file)],
        )

        assert result.exit_code == 0
        mock_client_class.assert_called_once_with("ghp_test", per_page=100)
        assert sorted(p.name for p in cache_dir.iterdir()) == ["1", "2", "meta"]
        meta = json.loads((cache_dir / "meta").read_text())
        assert (meta["Owner"], meta["Repo"]) == ("o", "r")
        assert meta["RefreshedAt"] is not None

    @patch("issue_pulse.cli.main.GitHubClient")
    def test_update_backfill_failure(
        self,
        mock_client_class: Mock,
        runner: CliRunner,
        cache_dir: Path,
        token_file: Path,
    ) -> None:
        mock_client_class.return_value = FakeGitHubClient(
            issue_pages=[[issue_data(1)]],
            timelines={1: [transient_error()]},
        )

        result = runner.invoke(
            app,
            ["-p", "o/r", "-c", str(cache_dir), "-u", "--token", str(token_file)],
        )

        assert result.exit_code == 1
        output = strip_ansi(result.stdout)
        assert "GitHub error" in output
        assert "rerun to resume" in output
        assert (cache_dir / "meta").exists()
