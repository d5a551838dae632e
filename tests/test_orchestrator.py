"""Tests for the orchestrator module."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from scenario import EXPECTED, TIME_SCALE, seconds

from contrib_stats.exceptions import GitHubServiceError
from contrib_stats.github.mock import MockGitHubService
from contrib_stats.orchestrator import run


@pytest.fixture
def fast_demo():
    """Swap the full-length demo service for a fast one; yields the services created."""
    created = []

    def demo():
        service = MockGitHubService.demo(time_scale=TIME_SCALE)
        created.append(service)
        return service

    with patch("contrib_stats.orchestrator.MockGitHubService") as mock_cls:
        mock_cls.demo.side_effect = demo
        yield created


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_report")
async def test_run_table_format(mock_render, fast_demo):
    report = await run(org="test-org", mock=True, variant="suspend")

    assert report.contributors == EXPECTED
    assert report.status == "completed"
    assert report.variant == "suspend"
    mock_render.assert_called_once_with(report, top_n=10, output_file=None)


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_json")
async def test_run_json_format(mock_render_json, fast_demo):
    report = await run(org="test-org", mock=True, output_format="json", output_file="/tmp/out.json")
    mock_render_json.assert_called_once_with(report, output_file="/tmp/out.json")


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_csv")
async def test_run_csv_format(mock_render_csv, fast_demo):
    await run(org="test-org", mock=True, output_format="csv")
    mock_render_csv.assert_called_once()


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_report")
async def test_run_cancel_after(mock_render, fast_demo):
    report = await run(org="test-org", mock=True, variant="concurrent", cancel_after=seconds(1500))

    assert report.status == "canceled"
    assert report.contributors == []


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_report")
async def test_run_not_cancellable_waits_for_detached_requests(mock_render, fast_demo):
    report = await run(org="test-org", mock=True, variant="not-cancellable", cancel_after=seconds(1500))

    assert report.status == "canceled"
    assert sorted(fast_demo[0].finished) == ["repo-1", "repo-2", "repo-3"]


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_report")
@patch("contrib_stats.orchestrator.HttpGitHubService")
async def test_run_uses_http_service(mock_service_cls, mock_render):
    service = MockGitHubService.demo(time_scale=TIME_SCALE)
    service.aclose = AsyncMock()
    mock_service_cls.return_value = service

    report = await run(
        org="test-org", username="octocat", token="secret", api_url="https://ghe.local/api/v3", timeout=5.0
    )

    mock_service_cls.assert_called_once_with("octocat", "secret", base_url="https://ghe.local/api/v3", timeout=5.0)
    service.aclose.assert_awaited_once()
    assert report.contributors == EXPECTED


@pytest.mark.asyncio
@patch("contrib_stats.orchestrator.render_report")
@patch("contrib_stats.orchestrator.HttpGitHubService")
async def test_run_propagates_service_failure(mock_service_cls, mock_render, failing_service):
    failing_service.aclose = AsyncMock()
    mock_service_cls.return_value = failing_service

    with pytest.raises(GitHubServiceError):
        await run(org="test-org", token="secret", variant="progress")
    failing_service.aclose.assert_awaited_once()
    mock_render.assert_not_called()
