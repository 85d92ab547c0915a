"""
Resolver scoring.

Combines latency, throughput, ping spikes and packet loss into a single
composite score and picks the best resolver.
"""

from typing import Optional, Sequence

from .models import ResolverResult

# Floor for the average ping so a zero-latency fluke cannot yield an
# infinite score
MIN_AVG_PING_MS = 0.01

# Score given to resolvers without a single successful lookup
WORST_SCORE = float("-inf")


def average_ping(result: ResolverResult) -> Optional[float]:
    """Mean latency across all domains, or None without samples."""
    samples = result.latencies
    if not samples:
        return None
    return sum(samples) / len(samples)


def packet_loss_pct(result: ResolverResult) -> float:
    """Failed lookups as a percentage of all attempts."""
    attempts = result.total_pings + result.packet_loss
    if attempts == 0:
        return 0.0
    return result.packet_loss / attempts * 100


def composite_score(result: ResolverResult, include_speed: bool = False) -> float:
    """
    Score one resolver; higher is better.

    score = 1/avg_ping [* speed] * (1 - spikes/pings) * (1 - loss%/100)

    Args:
        result: Resolver measurements
        include_speed: Multiply by the download speed when present

    Returns:
        Composite score, WORST_SCORE if no lookup succeeded
    """
    avg = average_ping(result)
    if avg is None:
        return WORST_SCORE

    score = 1 / max(avg, MIN_AVG_PING_MS)

    if include_speed and result.download_speed:
        score *= result.download_speed

    score *= 1 - result.ping_spikes / result.total_pings
    score *= 1 - packet_loss_pct(result) / 100
    return score


def select_best(
    results: Sequence[ResolverResult],
    throughput_enabled: bool = True,
) -> str:
    """
    Pick the best resolver with a left fold over ``results``.

    Throughput counts in a pairing only when both sides measured a speed,
    so with partial speed data the winner depends on list order. Ties keep
    the earlier resolver.

    Args:
        results: Completed results in run order
        throughput_enabled: Whether download speeds may be used at all

    Returns:
        Identifier of the winning resolver

    Raises:
        ValueError: If ``results`` is empty
    """
    if not results:
        raise ValueError("Cannot select a resolver from an empty result list")

    best = results[0]
    for current in results[1:]:
        include_speed = (
            throughput_enabled
            and bool(current.download_speed)
            and bool(best.download_speed)
        )
        if composite_score(current, include_speed) > composite_score(best, include_speed):
            best = current

    return best.dns_server


def rank(
    results: Sequence[ResolverResult],
    throughput_enabled: bool = True,
) -> list[tuple[str, float]]:
    """
    Order resolvers by standalone score, best first.

    Speed is included only when every resolver has one, which keeps the
    ranking independent of list order.
    """
    include_speed = throughput_enabled and all(r.download_speed for r in results)
    scored = [(r.dns_server, composite_score(r, include_speed)) for r in results]
    return sorted(scored, key=lambda item: item[1], reverse=True)
