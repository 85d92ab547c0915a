import pytest

from dns_speedtest.errors import ValidationError
from dns_speedtest.models import (
    ErrorEvent,
    ProgressEvent,
    ResolverResult,
    ResultsEvent,
    RunRequest,
)


def test_request_from_json_defaults():
    request = RunRequest.from_dict({
        "dnsServers": ["1.1.1.1"],
        "domains": ["example.com"],
    })

    assert request.test_count == 5
    assert request.download_test_duration == 5
    assert request.enable_download_test is True
    assert request.download_url is None
    assert request.throughput_enabled is False


def test_request_from_json_full():
    request = RunRequest.from_dict({
        "dnsServers": [" 1.1.1.1 ", "8.8.8.8"],
        "domains": ["example.com"],
        "downloadUrl": "http://files.example.test/big",
        "testCount": 25,
        "downloadTestDuration": 3,
        "enableDownloadTest": True,
    })

    assert request.resolvers == ["1.1.1.1", "8.8.8.8"]
    assert request.test_count == 25
    assert request.download_budget_ms == 3000
    assert request.throughput_enabled is True
    assert request.total_steps == 2 * 1 * 25 + 2


def test_disabled_download_keeps_url_but_skips_test():
    request = RunRequest(
        resolvers=["1.1.1.1"],
        domains=["example.com"],
        download_url="http://files.example.test/big",
        enable_download_test=False,
    )

    assert request.throughput_enabled is False
    assert request.total_steps == 5


@pytest.mark.parametrize("body", [
    {},
    {"dnsServers": [], "domains": ["example.com"]},
    {"dnsServers": ["1.1.1.1"], "domains": []},
    {"dnsServers": "1.1.1.1", "domains": ["example.com"]},
    {"dnsServers": [1], "domains": ["example.com"]},
    {"dnsServers": ["1.1.1.1"], "domains": ["example.com"], "testCount": "many"},
    {"dnsServers": ["1.1.1.1"], "domains": ["example.com"], "testCount": 0},
    {"dnsServers": ["1.1.1.1"], "domains": ["example.com"], "downloadTestDuration": 0},
    {"dnsServers": ["1.1.1.1"], "domains": [""]},
    {"dnsServers": ["1.1.1.1"], "domains": ["example.com"], "downloadUrl": 123},
    {"dnsServers": ["1.1.1.1"], "domains": ["example.com"], "enableDownloadTest": "false"},
])
def test_invalid_requests(body):
    with pytest.raises(ValidationError):
        RunRequest.from_dict(body).validate()


def test_download_flag_and_url_taken_as_given():
    request = RunRequest.from_dict({
        "dnsServers": ["1.1.1.1"],
        "domains": ["example.com"],
        "downloadUrl": "http://files.example.test/big",
        "enableDownloadTest": False,
    })

    assert request.download_url == "http://files.example.test/big"
    assert request.throughput_enabled is False


def test_non_object_body_rejected():
    with pytest.raises(ValidationError):
        RunRequest.from_dict(["1.1.1.1"])


def test_resolver_result_wire_shape():
    result = ResolverResult(
        dns_server="1.1.1.1",
        dns_results={"example.com": (10.5, 12.0), "example.org": ()},
        download_speed=None,
        ping_spikes=0,
        packet_loss=3,
    )

    data = result.to_dict()

    assert data == {
        "dnsServer": "1.1.1.1",
        "dnsResults": {"example.com": [10.5, 12.0], "example.org": []},
        "downloadSpeed": None,
        "pingSpikes": 0,
        "packetLoss": 3,
    }
    assert ResolverResult.from_dict(data) == result
    assert result.total_pings == 2


def test_resolver_result_is_frozen():
    result = ResolverResult(dns_server="1.1.1.1", dns_results={})

    with pytest.raises(AttributeError):
        result.ping_spikes = 4


def test_event_shapes():
    assert ProgressEvent("Testing").to_dict() == {"progress": "Testing"}
    assert ProgressEvent("Done", 40).to_dict() == {"progress": "Done", "percent": 40}
    assert ErrorEvent("boom").to_dict() == {"error": "boom"}
    assert ResultsEvent(()).to_dict() == {"results": []}

    assert not ProgressEvent("x").is_terminal
    assert ErrorEvent("x").is_terminal
    assert ResultsEvent(()).is_terminal
