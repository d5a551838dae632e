"""Orchestrator: wires together data source, loader, view, and renderer."""

from __future__ import annotations

import asyncio
import logging

from .github.client import HttpGitHubService
from .github.mock import MockGitHubService
from .loader import ContributorsLoader
from .models import ContributorsReport, RequestData, Variant
from .renderer import ConsoleView, render_csv, render_json, render_report
from .tasks import GLOBAL_SCOPE

logger = logging.getLogger(__name__)


async def load(
    loader: ContributorsLoader,
    params: RequestData,
    variant: Variant,
    cancel_after: float | None = None,
) -> asyncio.Future:
    """Start one load, optionally cancel it after a delay, and wait for it to settle."""
    future = loader.start(params, variant)
    if cancel_after is not None:
        asyncio.get_running_loop().call_later(cancel_after, loader.cancel)
    await asyncio.wait([future])

    if variant is Variant.NOT_CANCELLABLE and future.cancelled() and GLOBAL_SCOPE.tasks:
        logger.warning("Load was canceled but %d request(s) are still running", len(GLOBAL_SCOPE.tasks))
        await GLOBAL_SCOPE.join()
    return future


async def run(
    org: str,
    username: str = "",
    token: str = "",
    variant: str = "concurrent",
    top_n: int = 10,
    output_format: str = "table",
    output_file: str | None = None,
    api_url: str | None = None,
    timeout: float = 30.0,
    mock: bool = False,
    cancel_after: float | None = None,
) -> ContributorsReport:
    """Main pipeline: fetch data, aggregate, render."""
    selected = Variant.parse(variant)
    if mock:
        service = MockGitHubService.demo()
    else:
        service = HttpGitHubService(username, token, base_url=api_url, timeout=timeout)

    view = ConsoleView()
    loader = ContributorsLoader(view, lambda _username, _password: service)
    try:
        future = await load(loader, RequestData(username, token, org), selected, cancel_after)
    finally:
        await service.aclose()

    if future.cancelled():
        contributors = view.contributors
    else:
        contributors = future.result()

    report = ContributorsReport(
        org=org,
        variant=selected.value,
        status=loader.state.status.value,
        elapsed_time=loader.state.elapsed_time,
        contributors=contributors,
    )
    if output_format == "json":
        render_json(report, output_file=output_file)
    elif output_format == "csv":
        render_csv(report, output_file=output_file)
    else:
        render_report(report, top_n=top_n, output_file=output_file)
    return report
