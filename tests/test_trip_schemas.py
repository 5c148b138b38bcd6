import pytest

from gps.schemas import InvalidTripRecord, RawTripRecord, parse_trip_batch

T1 = {
    "tripid": "T1",
    "begintime": 1700000000,
    "endtime": 1700003600,
    "mileage": 12.5,
    "slat": 59.3,
    "slon": 18.0,
    "elat": 59.4,
    "elon": 18.1,
}


def test_parse_maps_provider_fields() -> None:
    record = RawTripRecord.parse(T1)

    assert record.provider_trip_id == "T1"
    assert record.start_epoch_seconds == 1700000000
    assert record.end_epoch_seconds == 1700003600
    assert record.distance_km == 12.5
    assert record.start_coordinates == (59.3, 18.0)
    assert record.end_coordinates == (59.4, 18.1)
    assert record.duration_seconds == 3600
    assert record.start_time.isoformat() == "2023-11-14T22:13:20+00:00"


def test_numeric_trip_id_is_normalized_to_string() -> None:
    record = RawTripRecord.parse({**T1, "tripid": 98765})

    assert record.provider_trip_id == "98765"


def test_optional_fields_default_when_absent() -> None:
    record = RawTripRecord.parse({"begintime": 1700000000, "endtime": 1700000600})

    assert record.provider_trip_id is None
    assert record.distance_km == 0.0
    assert record.start_coordinates is None
    assert record.end_coordinates is None


def test_zero_coordinates_are_kept() -> None:
    record = RawTripRecord.parse({**T1, "slat": 0, "slon": 0})

    assert record.start_coordinates == (0.0, 0.0)


@pytest.mark.parametrize(
    ("raw", "reason"),
    [
        ({"tripid": "T9", "endtime": 1700000600}, "Missing required field: begintime"),
        ({"tripid": "T9", "begintime": 1700000000}, "Missing required field: endtime"),
        ("not-a-trip", "Malformed trip record"),
        (
            {"tripid": "T9", "begintime": 1700000600, "endtime": 1700000000},
            "Trip ends before it starts",
        ),
        (
            {"tripid": "T9", "begintime": "yesterday", "endtime": 1700000000},
            "Invalid field: begintime",
        ),
    ],
)
def test_parse_rejects_with_reason(raw, reason: str) -> None:
    with pytest.raises(InvalidTripRecord) as raised:
        RawTripRecord.parse(raw)

    assert raised.value.reason == reason


def test_parse_trip_batch_splits_valid_and_rejected() -> None:
    trips, rejected = parse_trip_batch([T1, {"tripid": 5, "endtime": 1}])

    assert [t.provider_trip_id for t in trips] == ["T1"]
    assert rejected == [{"tripId": "5", "reason": "Missing required field: begintime"}]


def test_parse_trip_batch_handles_missing_list() -> None:
    assert parse_trip_batch(None) == ([], [])
