from __future__ import annotations

import json

from raincheck import cli
from raincheck.geo.geocoder import NominatimGeocoder

from conftest import HOME, WORK


def test_cli_mock_json_output(monkeypatch, capsys) -> None:
    places = {"Home": HOME, "Work": WORK}
    monkeypatch.setattr(NominatimGeocoder, "resolve", lambda self, text: places[text])

    cli.main(["--start", "Home", "--end", "Work", "--mock", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["phase"] == "available"
    assert payload["advisory"]["kind"] in {"fully_clear", "clear_now", "raining_now", "partial_rain"}
    assert payload["error"] is None


def test_cli_reports_geocoding_failure(monkeypatch, capsys) -> None:
    from raincheck.geo.geocoder import GeocodingFailed

    def fail(self, text):
        raise GeocodingFailed(f"no match for '{text}'")

    monkeypatch.setattr(NominatimGeocoder, "resolve", fail)

    cli.main(["--start", "Atlantis", "--end", "Work", "--mock"])

    out = capsys.readouterr().out
    assert "Could not refresh" in out
    assert "Atlantis" in out


def test_cli_shuts_down_provider_pool(monkeypatch, capsys) -> None:
    from raincheck.providers.combined import CombinedProvider

    places = {"Home": HOME, "Work": WORK}
    closed = []
    monkeypatch.setattr(NominatimGeocoder, "resolve", lambda self, text: places[text])
    monkeypatch.setattr(CombinedProvider, "close", lambda self: closed.append(self))

    cli.main(["--start", "Home", "--end", "Work", "--mock", "--json"])

    assert len(closed) == 1
