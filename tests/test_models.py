from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from gpstracker.models import Accuracy, Granularity, LocationFix, LocationRequest, SubmissionPayload
from gpstracker.models.payload import format_position


def test_fix_accepts_short_aliases_and_naive_time() -> None:
    fix = LocationFix.model_validate({"time": datetime(2026, 1, 1, 8, 30), "lat": 51.4416, "lon": 5.4697})

    assert fix.timestamp == datetime(2026, 1, 1, 8, 30, tzinfo=UTC)
    assert fix.latitude == 51.4416
    assert fix.longitude == 5.4697


def test_fix_converts_epoch_milliseconds_and_offsets_to_utc() -> None:
    from_ms = LocationFix(timestamp=1_767_225_600_000, latitude=0.0, longitude=0.0)
    from_offset = LocationFix(
        timestamp=datetime(2026, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2))),
        latitude=0.0,
        longitude=0.0,
    )

    assert from_ms.timestamp == datetime(2026, 1, 1, tzinfo=UTC)
    assert from_offset.timestamp == datetime(2026, 1, 1, tzinfo=UTC)
    assert from_offset.timestamp.tzinfo == UTC


@pytest.mark.parametrize(
    ("latitude", "longitude"),
    [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.01), (float("nan"), 0.0)],
)
def test_fix_rejects_out_of_range_coordinates(latitude: float, longitude: float) -> None:
    with pytest.raises(ValidationError):
        LocationFix(timestamp=datetime(2026, 1, 1, tzinfo=UTC), latitude=latitude, longitude=longitude)


def test_fix_is_immutable() -> None:
    fix = LocationFix(timestamp=datetime(2026, 1, 1, tzinfo=UTC), latitude=1.0, longitude=2.0)

    with pytest.raises(ValidationError):
        fix.latitude = 3.0  # type: ignore[misc]


def test_payload_from_fix_matches_wire_format() -> None:
    ts = datetime(2026, 10, 19, 9, 15, 0, tzinfo=UTC)
    fix = LocationFix(timestamp=ts, latitude=40.0, longitude=-74.0)

    payload = SubmissionPayload.from_fix(fix)

    assert payload.model_dump() == {"time": "2026-10-19T09:15:00+00:00", "gpsposition": "40.0, -74.0"}


def test_format_position_keeps_full_precision() -> None:
    text = format_position(-33.868820123456789, 151.20929899999999)

    lat, lon = (float(part) for part in text.split(", "))
    assert lat == -33.868820123456789
    assert lon == 151.20929899999999


def test_location_request_defaults_to_high_fine() -> None:
    request = LocationRequest(interval=5, min_update_interval=1, max_update_delay=6, max_update_age=5)

    assert request.accuracy is Accuracy.HIGH
    assert request.granularity is Granularity.FINE


def test_location_request_rejects_inverted_intervals() -> None:
    with pytest.raises(ValidationError):
        LocationRequest(interval=5, min_update_interval=10, max_update_delay=6, max_update_age=5)
    with pytest.raises(ValidationError):
        LocationRequest(interval=5, min_update_interval=1, max_update_delay=2, max_update_age=5)
