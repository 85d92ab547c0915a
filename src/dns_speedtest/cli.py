"""
Command-line interface for DNS Speed Test.

Runs resolver benchmarks from the terminal, scores saved results and
starts the streaming HTTP API.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import (
    DEFAULT_DOWNLOAD_DURATION,
    DEFAULT_DOWNLOAD_URL,
    DEFAULT_TEST_COUNT,
    ProbeSettings,
)
from .errors import ValidationError
from .models import ErrorEvent, ProgressEvent, ResultsEvent, RunRequest
from .output import JSONOutput, RichConsoleOutput, encode_event
from .resolvers import DEFAULT_DOMAINS, RESOLVERS, default_resolver_ips
from .runner import BenchmarkRunner
from .scoring import select_best


def configure_logging(verbose: int) -> None:
    """Route package logs through rich on stderr."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__)
def main():
    """
    DNS Speed Test - find the fastest resolver for your network.

    Measures lookup latency, ping spikes, packet loss and download
    throughput per resolver, then recommends the best one.
    """
    pass


@main.command()
@click.option(
    "--resolver", "-r",
    multiple=True,
    help="Resolver address to test (can specify multiple). Default: built-in catalog",
)
@click.option(
    "--domain", "-d",
    multiple=True,
    help="Domain to resolve (can specify multiple). Default: built-in list",
)
@click.option(
    "--test-count", "-n",
    type=int,
    default=DEFAULT_TEST_COUNT,
    show_default=True,
    help="Lookups per domain",
)
@click.option(
    "--download-url",
    default=DEFAULT_DOWNLOAD_URL,
    show_default=True,
    help="URL used for the download speed test",
)
@click.option(
    "--download-duration",
    type=float,
    default=DEFAULT_DOWNLOAD_DURATION,
    show_default=True,
    help="Download test duration in seconds",
)
@click.option(
    "--no-download",
    is_flag=True,
    help="Skip the download speed test",
)
@click.option(
    "--timeout",
    type=float,
    default=5.0,
    show_default=True,
    help="Per-lookup timeout in seconds",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Save results to a JSON file",
)
@click.option(
    "--json",
    is_flag=True,
    help="Stream run events as NDJSON to stdout",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress progress output",
)
@click.option(
    "--verbose", "-v",
    count=True,
    help="Increase log verbosity (-v info, -vv debug)",
)
def run(
    resolver: tuple,
    domain: tuple,
    test_count: int,
    download_url: str,
    download_duration: float,
    no_download: bool,
    timeout: float,
    output: Optional[str],
    json: bool,
    quiet: bool,
    verbose: int,
):
    """
    Run the DNS speed test.

    Examples:

    \b
      # Test the built-in resolvers against the default domains
      dns-speedtest run

    \b
      # Compare two resolvers on one domain, no download test
      dns-speedtest run -r 1.1.1.1 -r 8.8.8.8 -d example.com --no-download

    \b
      # Save results for later scoring
      dns-speedtest run -o results.json
    """
    configure_logging(verbose)

    request = RunRequest(
        resolvers=list(resolver) or default_resolver_ips(),
        domains=list(domain) or list(DEFAULT_DOMAINS),
        download_url=download_url or None,
        test_count=test_count,
        download_test_duration=download_duration,
        enable_download_test=not no_download,
    )

    runner = BenchmarkRunner(settings=ProbeSettings(lookup_timeout=timeout))

    try:
        events = runner.run(request)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    show_progress = not quiet and not json

    async def consume():
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed:>3.0f}%"),
            console=Console(stderr=True),
            transient=True,
            disable=not show_progress,
        )
        terminal = None
        with progress:
            task_id = progress.add_task("Starting...", total=100)
            async for event in events:
                if json:
                    click.echo(encode_event(event), nl=False)
                if isinstance(event, ProgressEvent):
                    progress.update(task_id, description=event.message)
                    if event.percent is not None:
                        progress.update(task_id, completed=event.percent)
                else:
                    terminal = event
        return terminal

    terminal = asyncio.run(consume())

    if isinstance(terminal, ErrorEvent):
        click.echo(f"Error: {terminal.message}", err=True)
        sys.exit(1)
    if not isinstance(terminal, ResultsEvent):
        click.echo("Error: run ended without results", err=True)
        sys.exit(1)

    results = terminal.results
    best = select_best(results, request.throughput_enabled)

    if not quiet and not json:
        RichConsoleOutput.print(results, best, request.throughput_enabled)

    if output:
        path = Path(output)
        JSONOutput.save(results, path, best)
        if not quiet and not json:
            click.echo(f"Results saved to {path}")


@main.command()
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--no-throughput",
    is_flag=True,
    help="Ignore download speeds when scoring",
)
def best(results_file: str, no_throughput: bool):
    """Score saved results and print the best resolver."""
    try:
        results = JSONOutput.load(Path(results_file))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not results:
        click.echo("Error: results file is empty", err=True)
        sys.exit(1)

    winner = select_best(results, not no_throughput)
    RichConsoleOutput.print(results, winner, not no_throughput)


@main.command()
def list_available():
    """List the built-in public DNS resolvers."""
    console = Console()
    table = Table(
        title="Known DNS Resolvers",
        box=box.ROUNDED,
        header_style="bold cyan",
    )

    table.add_column("Name", style="green")
    table.add_column("IP", style="cyan")
    table.add_column("Website")

    for resolver in RESOLVERS:
        table.add_row(resolver.name, resolver.ip, resolver.website)

    console.print(table)


@main.command()
@click.option(
    "--port", "-p",
    type=int,
    default=5000,
    help="Port to run the API server on",
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host to bind the server to",
)
@click.option(
    "--verbose", "-v",
    count=True,
    help="Increase log verbosity",
)
def serve(port: int, host: str, verbose: int):
    """
    Start the streaming HTTP API.

    POST a JSON request to /api/dns-test to receive NDJSON progress.
    """
    try:
        from .server import run_server
    except ImportError as e:
        click.echo("Server dependencies not installed.", err=True)
        click.echo("Install with: pip install dns-speedtest[server]", err=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    configure_logging(verbose)
    click.echo(f"Serving DNS Speed Test API on http://{host}:{port}")
    click.echo("Press Ctrl+C to stop the server")

    run_server(host=host, port=port)


if __name__ == "__main__":
    main()
