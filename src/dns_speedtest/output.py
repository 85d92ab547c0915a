"""
Output formatting for DNS speed test results.

Provides:
- NDJSON: one line per streamed run event
- JSON: saved results with summaries and the chosen resolver
- Human-readable: Rich terminal tables and summaries
"""

import json
from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .models import ResolverResult, RunEvent
from .resolvers import lookup_resolver
from .scoring import rank
from .statistics import summarize


def encode_event(event: RunEvent) -> str:
    """Encode a run event as a newline-terminated JSON line."""
    return json.dumps(event.to_dict()) + "\n"


def _best_entry(best: Optional[str]) -> Optional[dict]:
    if best is None:
        return None
    known = lookup_resolver(best)
    return {
        "dnsServer": best,
        "name": known.name if known else None,
        "website": known.website if known else None,
    }


class JSONOutput:
    """JSON output formatter."""

    @staticmethod
    def format(
        results: Sequence[ResolverResult],
        best: Optional[str] = None,
        indent: int = 2,
    ) -> str:
        """
        Format results as JSON.

        Args:
            results: Completed resolver results
            best: Winning resolver, if one was selected
            indent: JSON indentation level

        Returns:
            JSON string
        """
        data = {
            "results": [r.to_dict() for r in results],
            "summaries": [summarize(r).to_dict() for r in results],
            "best": _best_entry(best),
        }
        return json.dumps(data, indent=indent)

    @staticmethod
    def save(
        results: Sequence[ResolverResult],
        path: Path,
        best: Optional[str] = None,
    ) -> None:
        """Save results to a JSON file."""
        with open(path, "w") as f:
            f.write(JSONOutput.format(results, best))

    @staticmethod
    def load(path: Path) -> list[ResolverResult]:
        """
        Load results saved by save(), a results event, or a bare list.

        Raises:
            ValueError: If the file holds no result list
        """
        with open(path, "r") as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get("results")
        if not isinstance(data, list):
            raise ValueError(f"No results found in {path}")

        try:
            return [ResolverResult.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed result in {path}: {e!r}") from e


class RichConsoleOutput:
    """Rich library console output with colors and tables."""

    @staticmethod
    def print(
        results: Sequence[ResolverResult],
        best: Optional[str] = None,
        throughput_enabled: bool = True,
        console: Optional[Console] = None,
    ) -> None:
        """
        Print results as a ranked table followed by the winner.

        The winner always heads the table; the remaining rows follow the
        standalone ranking, which can disagree with it on partial speed data.
        """
        console = console or Console()
        scores = dict(rank(results, throughput_enabled))
        ordered = sorted(
            results,
            key=lambda r: (r.dns_server == best, scores[r.dns_server]),
            reverse=True,
        )

        table = Table(
            title="DNS Resolver Performance",
            box=box.ROUNDED,
            header_style="bold magenta",
        )

        table.add_column("Resolver", style="cyan")
        table.add_column("Name", style="dim")
        table.add_column("Avg (ms)", justify="right", style="green")
        table.add_column("p95 (ms)", justify="right", style="yellow")
        table.add_column("Jitter", justify="right")
        table.add_column("Spikes", justify="right")
        table.add_column("Loss", justify="right", style="red")
        table.add_column("Mbps", justify="right")

        def fmt(value: Optional[float], suffix: str = "") -> str:
            return f"{value:.1f}{suffix}" if value is not None else "-"

        for result in ordered:
            stats = summarize(result)
            known = lookup_resolver(result.dns_server)
            table.add_row(
                result.dns_server,
                known.name if known else "",
                fmt(stats.avg_latency),
                fmt(stats.p95_latency),
                fmt(stats.jitter_ms, "ms"),
                str(stats.ping_spikes),
                f"{stats.packet_loss_pct:.1f}%",
                fmt(stats.download_speed),
            )

        console.print()
        console.print(table)
        console.print()

        if best is None:
            console.print(Panel(
                "[bold yellow]No results - cannot determine best resolver[/bold yellow]",
                border_style="yellow",
            ))
            return

        known = lookup_resolver(best)
        lines = [f"[bold green]BEST DNS SERVER: {best}[/bold green]"]
        if known:
            lines.append(f"{known.name} - {known.website}")
        console.print(Panel("\n".join(lines), border_style="green"))
        console.print()
