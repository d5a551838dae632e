"""Command line entry point."""

from __future__ import annotations

import asyncio
import logging

import click

from . import __version__
from .exceptions import ContribStatsError
from .models import Variant
from .orchestrator import run

_VARIANTS = [variant.value for variant in Variant]
_LOG_FORMAT = "%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=_LOG_FORMAT)


@click.command()
@click.argument("org")
@click.option("--username", envvar="GITHUB_USERNAME", default="", help="GitHub username.")
@click.option("--token", envvar="GITHUB_TOKEN", default="", help="GitHub token or password.")
@click.option(
    "--variant",
    type=click.Choice(_VARIANTS, case_sensitive=False),
    default=Variant.CONCURRENT.value,
    show_default=True,
    help="Concurrency strategy used to load contributors.",
)
@click.option("--top", "top_n", type=int, default=10, show_default=True, help="Rows to show.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    show_default=True,
)
@click.option("--output", "output_file", type=click.Path(dir_okay=False), help="Write output to a file.")
@click.option("--api-url", help="GitHub API base URL (GitHub Enterprise).")
@click.option("--timeout", type=float, default=30.0, show_default=True, help="HTTP timeout in seconds.")
@click.option("--mock", is_flag=True, help="Use the simulated service instead of GitHub.")
@click.option(
    "--cancel-after",
    type=float,
    help="Cancel the load after this many seconds.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="contrib-stats")
def main(
    org: str,
    username: str,
    token: str,
    variant: str,
    top_n: int,
    output_format: str,
    output_file: str | None,
    api_url: str | None,
    timeout: float,
    mock: bool,
    cancel_after: float | None,
    verbose: bool,
) -> None:
    """Load and rank the contributors of every repository in ORG."""
    if not mock and not token:
        raise click.UsageError("A GitHub token is required (--token or GITHUB_TOKEN), or use --mock.")
    _configure_logging(verbose)

    try:
        asyncio.run(
            run(
                org=org,
                username=username,
                token=token,
                variant=variant,
                top_n=top_n,
                output_format=output_format,
                output_file=output_file,
                api_url=api_url,
                timeout=timeout,
                mock=mock,
                cancel_after=cancel_after,
            )
        )
    except ContribStatsError as exc:
        raise click.ClickException(str(exc)) from exc
