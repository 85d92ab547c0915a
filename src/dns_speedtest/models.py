"""
Data models for DNS Speed Test.

Defines the run request, per-resolver results and the typed events
streamed by the runner, together with their JSON wire shapes.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .config import DEFAULT_DOWNLOAD_DURATION, DEFAULT_TEST_COUNT
from .errors import ValidationError


@dataclass
class RunRequest:
    """Complete configuration for one benchmark run."""
    resolvers: list[str]
    domains: list[str]
    download_url: Optional[str] = None
    test_count: int = DEFAULT_TEST_COUNT
    download_test_duration: float = DEFAULT_DOWNLOAD_DURATION  # seconds
    enable_download_test: bool = True

    @property
    def throughput_enabled(self) -> bool:
        """Whether a throughput trial runs for each resolver."""
        return self.enable_download_test and bool(self.download_url)

    @property
    def download_budget_ms(self) -> float:
        return self.download_test_duration * 1000

    @property
    def total_steps(self) -> int:
        """Advisory step count used for percentage reporting."""
        steps = len(self.resolvers) * len(self.domains) * self.test_count
        if self.throughput_enabled:
            steps += len(self.resolvers)
        return steps

    def validate(self) -> None:
        """
        Check the request before any probing starts.

        Raises:
            ValidationError: If the request cannot be run
        """
        if not self.resolvers or not self.domains:
            raise ValidationError(
                "At least one DNS server and one domain are required"
            )
        if any(not r or not r.strip() for r in self.resolvers):
            raise ValidationError("DNS server entries must not be empty")
        if any(not d or not d.strip() for d in self.domains):
            raise ValidationError("Domain entries must not be empty")
        if self.test_count < 1:
            raise ValidationError("testCount must be at least 1")
        if self.download_test_duration <= 0:
            raise ValidationError("downloadTestDuration must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunRequest":
        """
        Build a request from its camelCase JSON form.

        Raises:
            ValidationError: If fields have the wrong type or are missing
        """
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        resolvers = data.get("dnsServers") or []
        domains = data.get("domains") or []
        if not isinstance(resolvers, list) or not isinstance(domains, list):
            raise ValidationError("dnsServers and domains must be lists")
        if not all(isinstance(v, str) for v in resolvers + domains):
            raise ValidationError("dnsServers and domains must contain strings")

        try:
            test_count = int(data.get("testCount", DEFAULT_TEST_COUNT))
            duration = float(
                data.get("downloadTestDuration", DEFAULT_DOWNLOAD_DURATION)
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid numeric field: {e}") from e

        download_url = data.get("downloadUrl")
        if download_url is not None and not isinstance(download_url, str):
            raise ValidationError("downloadUrl must be a string")

        enable_download = data.get("enableDownloadTest", True)
        if not isinstance(enable_download, bool):
            raise ValidationError("enableDownloadTest must be a boolean")

        return cls(
            resolvers=[r.strip() for r in resolvers],
            domains=[d.strip() for d in domains],
            download_url=download_url or None,
            test_count=test_count,
            download_test_duration=duration,
            enable_download_test=enable_download,
        )


@dataclass
class LookupOutcome:
    """Result of probing one domain against one resolver."""
    latencies: list[float] = field(default_factory=list)  # ms, attempt order
    ping_spikes: int = 0
    packet_loss: int = 0

    @property
    def attempts(self) -> int:
        return len(self.latencies) + self.packet_loss


@dataclass(frozen=True)
class ResolverResult:
    """Aggregated measurements for one resolver."""
    dns_server: str
    dns_results: dict[str, tuple[float, ...]]
    download_speed: Optional[float] = None  # Mbps
    ping_spikes: int = 0
    packet_loss: int = 0

    @property
    def latencies(self) -> list[float]:
        """All successful samples across domains, in domain order."""
        return [ms for times in self.dns_results.values() for ms in times]

    @property
    def total_pings(self) -> int:
        """Number of successful samples."""
        return sum(len(times) for times in self.dns_results.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "dnsServer": self.dns_server,
            "dnsResults": {
                domain: list(times) for domain, times in self.dns_results.items()
            },
            "downloadSpeed": self.download_speed,
            "pingSpikes": self.ping_spikes,
            "packetLoss": self.packet_loss,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResolverResult":
        speed = data.get("downloadSpeed")
        return cls(
            dns_server=data["dnsServer"],
            dns_results={
                domain: tuple(float(ms) for ms in times)
                for domain, times in data.get("dnsResults", {}).items()
            },
            download_speed=float(speed) if speed is not None else None,
            ping_spikes=int(data.get("pingSpikes", 0)),
            packet_loss=int(data.get("packetLoss", 0)),
        )


@dataclass(frozen=True)
class ProgressEvent:
    """Intermediate progress notification."""
    message: str
    percent: Optional[int] = None

    is_terminal = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"progress": self.message}
        if self.percent is not None:
            data["percent"] = self.percent
        return data


@dataclass(frozen=True)
class ResultsEvent:
    """Terminal event carrying every resolver's results in run order."""
    results: tuple[ResolverResult, ...]

    is_terminal = True

    def to_dict(self) -> dict[str, Any]:
        return {"results": [r.to_dict() for r in self.results]}


@dataclass(frozen=True)
class ErrorEvent:
    """Terminal event for a run that failed unexpectedly."""
    message: str

    is_terminal = True

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


RunEvent = Union[ProgressEvent, ResultsEvent, ErrorEvent]
