from __future__ import annotations

import pytest

from gpstracker.__main__ import _parse_args, build_config, main


def test_build_config_merges_flags_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GPSTRACKER_ENDPOINT_URL", "https://ntfy.example.com/env")
    monkeypatch.setenv("GPSTRACKER_TOKEN", "tk_env")

    config = build_config(_parse_args(["--endpoint", "https://ntfy.example.com/cli", "--gpsd-port", "2950"]))

    assert config.endpoint_url == "https://ntfy.example.com/cli"
    assert config.token == "tk_env"
    assert config.gpsd_port == 2950


def test_main_reports_configuration_errors(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.delenv("GPSTRACKER_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("GPSTRACKER_TOKEN", raising=False)

    assert main(["--token", "tk"]) == 2
    assert "endpoint_url" in capsys.readouterr().err
