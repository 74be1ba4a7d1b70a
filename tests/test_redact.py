from __future__ import annotations

from gpstracker._redact import redact_for_log, redact_url


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "time": "2026-01-01T00:00:00+00:00",
        "auth": "tk_secret",
        "nested": {"token": "tk_other", "gpsposition": "40.0, -74.0"},
    }

    redacted = redact_for_log(payload)
    assert redacted["auth"] == "<redacted>"
    assert redacted["nested"]["token"] == "<redacted>"
    assert redacted["nested"]["gpsposition"] == "40.0, -74.0"
    assert redacted["time"] == payload["time"]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_url_hides_auth_query_parameter() -> None:
    url = "https://ntfy.example.com:8443/gps?auth=tk_secret&priority=low"

    redacted = redact_url(url)

    assert "tk_secret" not in redacted
    assert redacted.startswith("https://ntfy.example.com:8443/gps?")
    assert "priority=low" in redacted


def test_redact_url_without_query_is_unchanged() -> None:
    assert redact_url("https://ntfy.example.com/gps") == "https://ntfy.example.com/gps"
