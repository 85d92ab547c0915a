import json

import pytest
from rich.console import Console

from dns_speedtest.models import ProgressEvent, ResolverResult, ResultsEvent
from dns_speedtest.output import JSONOutput, RichConsoleOutput, encode_event


@pytest.fixture
def results():
    return [
        ResolverResult(
            dns_server="1.1.1.1",
            dns_results={"example.com": (10.0, 12.0)},
            download_speed=80.0,
        ),
        ResolverResult(
            dns_server="192.0.2.53",
            dns_results={"example.com": ()},
            packet_loss=2,
        ),
    ]


def test_encode_event_is_one_line():
    line = encode_event(ProgressEvent("Testing domain 1/1: example.com", 50))

    assert line.endswith("\n")
    assert line.count("\n") == 1
    assert json.loads(line) == {"progress": "Testing domain 1/1: example.com", "percent": 50}


def test_json_output_includes_catalog_entry(results):
    data = json.loads(JSONOutput.format(results, best="1.1.1.1"))

    assert data["best"] == {
        "dnsServer": "1.1.1.1",
        "name": "Cloudflare",
        "website": "https://www.cloudflare.com/dns/",
    }
    assert [s["dnsServer"] for s in data["summaries"]] == ["1.1.1.1", "192.0.2.53"]
    assert data["results"][1]["packetLoss"] == 2


def test_save_and_load(tmp_path, results):
    path = tmp_path / "results.json"

    JSONOutput.save(results, path, best="1.1.1.1")

    assert JSONOutput.load(path) == results


def test_load_accepts_results_event(tmp_path, results):
    path = tmp_path / "event.json"
    path.write_text(encode_event(ResultsEvent(tuple(results))))

    assert JSONOutput.load(path) == results


def test_load_rejects_other_documents(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"progress": "Testing"}))

    with pytest.raises(ValueError):
        JSONOutput.load(path)


@pytest.mark.parametrize("items", [
    [{"dnsResults": {}}],
    ["1.1.1.1"],
    [{"dnsServer": "1.1.1.1", "dnsResults": ["example.com"]}],
])
def test_load_rejects_malformed_results(tmp_path, items):
    path = tmp_path / "malformed.json"
    path.write_text(json.dumps({"results": items}))

    with pytest.raises(ValueError, match="Malformed result"):
        JSONOutput.load(path)


def test_console_output_lists_winner_first():
    # Pairwise speed scoring picks 192.0.2.3, the standalone ranking prefers .2
    results = [
        ResolverResult("192.0.2.1", {"example.com": (10.0,)}, download_speed=100.0),
        ResolverResult("192.0.2.2", {"example.com": (5.0,)}, download_speed=1.0),
        ResolverResult("192.0.2.3", {"example.com": (8.0,)}),
    ]
    console = Console(record=True, width=120)

    RichConsoleOutput.print(results, best="192.0.2.3", console=console)
    text = console.export_text()

    assert text.index("192.0.2.3") < text.index("192.0.2.2") < text.index("192.0.2.1")


def test_console_output_names_winner(results):
    console = Console(record=True, width=120)

    RichConsoleOutput.print(results, best="1.1.1.1", console=console)
    text = console.export_text()

    assert "BEST DNS SERVER: 1.1.1.1" in text
    assert "Cloudflare" in text
    assert "192.0.2.53" in text
