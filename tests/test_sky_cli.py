"""CLI tests with providers replaced by fakes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from arriva_sky import sky_cli
from arriva_sky.exceptions import ConfigError, WeatherProviderError
from arriva_sky.weather.base import WeatherProvider
from arriva_sky.weather.chain import WeatherProviderChain
from arriva_sky.weather.models import ProviderResult


class _DownProvider(WeatherProvider):
    name = "met_no"

    def fetch(self) -> dict[str, Any]:
        raise WeatherProviderError("met_no unavailable", provider=self.name)

    def normalize(self, raw: dict[str, Any]) -> ProviderResult:
        raise AssertionError("unreachable")

    def close(self) -> None:
        return None


@pytest.fixture(autouse=True)
def _offline(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JOURNAL_DIR", str(tmp_path / "journal"))
    monkeypatch.setattr(
        "arriva_sky.composer.build_provider_chain",
        lambda settings, logger=None: WeatherProviderChain([_DownProvider()]),
    )


def test_parse_args_reads_instant_and_seed() -> None:
    args = sky_cli.parse_args(["--at", "2026-03-01T07:00:00+00:00", "--seed", "3", "--json"])
    assert args.at.hour == 7
    assert args.seed == 3
    assert args.json is True
    assert args.serve is False


def test_json_output_for_fixed_instant(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = sky_cli.main(["--at", "2026-03-01T07:00:00+00:00", "--seed", "3", "--json"])

    assert exit_code == 0
    body = json.loads(capsys.readouterr().out)
    assert body["skyPhase"] == "daylight"
    assert body["weather"]["source"] == "default"
    assert body["celestialObjects"]["sun"]["visible"] is True


def test_table_output_renders(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = sky_cli.main(["--at", "2026-02-28T21:00:00+00:00"])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Phase=night" in out
    assert "No change expected" in out


def test_journal_records_attempts(tmp_path: Path) -> None:
    exit_code = sky_cli.main(["--at", "2026-03-01T07:00:00+00:00", "--json", "--journal"])

    assert exit_code == 0
    files = list((tmp_path / "journal").glob("*.jsonl"))
    assert len(files) == 1
    records = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert [record["event_type"] for record in records] == ["sky_startup", "payload_composed"]
    attempts = records[1]["payload"]["attempts"]
    assert attempts[0]["provider"] == "met_no"
    assert attempts[0]["ok"] is False


def test_config_failure_exits_with_two(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail() -> Any:
        raise ConfigError("Invalid configuration: bad latitude")

    monkeypatch.setattr(sky_cli, "load_settings", _fail)
    assert sky_cli.main(["--json"]) == 2


def test_journal_failure_exits_with_three(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setenv("JOURNAL_DIR", str(blocker / "journal"))
    assert sky_cli.main(["--journal"]) == 3
