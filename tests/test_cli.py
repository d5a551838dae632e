"""Tests for the CLI module."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from contrib_stats.cli import main
from contrib_stats.exceptions import GitHubServiceError


def _close(coro):
    coro.close()


@patch("contrib_stats.cli.asyncio.run", side_effect=_close)
@patch("contrib_stats.cli.run", new_callable=AsyncMock)
def test_main_passes_options(mock_run, mock_asyncio_run):
    runner = CliRunner()
    result = runner.invoke(main, [
        "myorg", "--token", "fake-token",
        "--username", "octocat",
        "--variant", "progress",
        "--top", "5",
        "--format", "json",
        "--cancel-after", "1.5",
    ])
    assert result.exit_code == 0, result.output
    mock_asyncio_run.assert_called_once()
    kwargs = mock_run.call_args.kwargs
    assert kwargs["org"] == "myorg"
    assert kwargs["username"] == "octocat"
    assert kwargs["token"] == "fake-token"
    assert kwargs["variant"] == "progress"
    assert kwargs["top_n"] == 5
    assert kwargs["output_format"] == "json"
    assert kwargs["cancel_after"] == 1.5
    assert kwargs["mock"] is False


@patch("contrib_stats.cli.asyncio.run", side_effect=_close)
@patch("contrib_stats.cli.run", new_callable=AsyncMock)
def test_main_token_from_env(mock_run, mock_asyncio_run):
    runner = CliRunner(env={"GITHUB_TOKEN": "env-token", "GITHUB_USERNAME": "env-user"})
    result = runner.invoke(main, ["myorg"])
    assert result.exit_code == 0, result.output
    assert mock_run.call_args.kwargs["token"] == "env-token"
    assert mock_run.call_args.kwargs["username"] == "env-user"
    assert mock_run.call_args.kwargs["variant"] == "concurrent"


@patch("contrib_stats.cli.asyncio.run", side_effect=_close)
@patch("contrib_stats.cli.run", new_callable=AsyncMock)
def test_main_mock_needs_no_token(mock_run, mock_asyncio_run):
    runner = CliRunner(env={"GITHUB_TOKEN": ""})
    result = runner.invoke(main, ["myorg", "--mock", "--variant", "NOT-CANCELLABLE"])
    assert result.exit_code == 0, result.output
    assert mock_run.call_args.kwargs["mock"] is True
    assert mock_run.call_args.kwargs["variant"] == "not-cancellable"


def test_main_missing_token():
    runner = CliRunner(env={"GITHUB_TOKEN": ""})
    result = runner.invoke(main, ["myorg"])
    assert result.exit_code != 0
    assert "token" in result.output.lower()


def test_main_rejects_unknown_variant():
    runner = CliRunner()
    result = runner.invoke(main, ["myorg", "--token", "t", "--variant", "threads"])
    assert result.exit_code != 0


def _fail(coro):
    coro.close()
    raise GitHubServiceError("bad credentials", status_code=401)


@patch("contrib_stats.cli.asyncio.run", side_effect=_fail)
def test_main_reports_service_errors(mock_asyncio_run):
    runner = CliRunner()
    result = runner.invoke(main, ["myorg", "--token", "t"])
    assert result.exit_code == 1
    assert "bad credentials" in result.output


def test_main_version():
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()
