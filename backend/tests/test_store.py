import pytest

from app.errors import DuplicateReport, NotFound
from app.services import hazard_service
from app.services.geo import bounding_box
from app.services.retention import active_cutoff
from app.services.validation import HazardReport


def _report(hazard_type="Police", lat=51.5074, lng=-0.1278, by="anonymous"):
    return HazardReport(type=hazard_type, latitude=lat, longitude=lng, reported_by=by)


def test_insert_assigns_id_and_store_timestamp(store, clock):
    hazard = store.insert(_report(by="driver-7"))

    assert hazard.id is not None
    assert hazard.type == "Police"
    assert hazard.latitude == 51.5074
    assert hazard.longitude == -0.1278
    assert hazard.reported_by == "driver-7"
    assert hazard.timestamp.replace(tzinfo=None) == clock().replace(tzinfo=None)


def test_duplicate_within_window_and_tolerance(store, clock):
    first = store.insert(_report())
    clock.advance(minutes=4, seconds=59)

    assert store.query_duplicates("Police", 51.5078, -0.1272) == [first.id]


def test_duplicate_window_expires_after_five_minutes(store, clock):
    store.insert(_report())
    clock.advance(minutes=5, seconds=1)

    assert store.query_duplicates("Police", 51.5074, -0.1278) == []


def test_duplicate_requires_same_type(store):
    store.insert(_report())

    assert store.query_duplicates("Accident", 51.5074, -0.1278) == []


@pytest.mark.parametrize("dlat,dlng", [(0.002, 0), (0, 0.002), (-0.0015, 0.0015)])
def test_duplicate_tolerance_is_per_axis(store, dlat, dlng):
    store.insert(_report())

    assert store.query_duplicates("Police", 51.5074 + dlat, -0.1278 + dlng) == []


@pytest.mark.parametrize(
    "lat,lng",
    [
        (51.5084, -0.1278),
        (51.5064, -0.1278),
        (51.5074, -0.1268),
        (51.5074, -0.1288),
    ],
)
def test_move_of_exactly_tolerance_is_not_duplicate(store, lat, lng):
    store.insert(_report())

    assert store.query_duplicates("Police", lat, lng) == []


@pytest.mark.parametrize("lat,lng", [(12.501, 77.6), (12.499, 77.6), (12.5, 77.601), (12.5, 77.599)])
def test_report_one_thousandth_away_is_accepted(store, lat, lng):
    hazard_service.report_hazard(store, {"type": "Debris", "latitude": 12.5, "longitude": 77.6})

    moved = hazard_service.report_hazard(store, {"type": "Debris", "latitude": lat, "longitude": lng})

    assert moved.id is not None


def test_report_hazard_rejects_duplicate(store, clock):
    payload = {"type": "Debris", "latitude": 12.5, "longitude": 77.6}
    hazard_service.report_hazard(store, payload)
    clock.advance(seconds=30)

    with pytest.raises(DuplicateReport):
        hazard_service.report_hazard(store, payload)

    clock.advance(minutes=6)
    second = hazard_service.report_hazard(store, payload)
    assert second.id is not None


def test_active_box_query_filters_space_and_time(store, clock):
    old = store.insert(_report(lat=51.50, lng=-0.12))
    clock.advance(hours=23)
    inside = store.insert(_report(hazard_type="Accident", lat=51.51, lng=-0.13))
    far = store.insert(_report(hazard_type="Weather", lat=48.85, lng=2.35))
    clock.advance(hours=1, seconds=1)

    box = bounding_box(51.5074, -0.1278, 50)
    ids = [h.id for h in store.query_active_in_box(box)]

    assert inside.id in ids
    assert old.id not in ids
    assert far.id not in ids


def test_active_box_query_is_most_recent_first(store, clock):
    first = store.insert(_report(hazard_type="Police"))
    clock.advance(minutes=1)
    second = store.insert(_report(hazard_type="Accident"))
    clock.advance(minutes=1)
    third = store.insert(_report(hazard_type="Debris"))

    box = bounding_box(51.5074, -0.1278, 10)
    assert [h.id for h in store.query_active_in_box(box)] == [third.id, second.id, first.id]


def test_delete_by_id_ignores_age(store, clock):
    hazard_id = store.insert(_report()).id
    clock.advance(days=3)

    assert store.delete_by_id(hazard_id) == hazard_id
    with pytest.raises(NotFound):
        store.delete_by_id(hazard_id)


def test_delete_missing_id(store):
    with pytest.raises(NotFound):
        store.delete_by_id(987654)


def test_delete_expired_is_idempotent(store, clock):
    store.insert(_report(hazard_type="Police"))
    store.insert(_report(hazard_type="Accident"))
    clock.advance(hours=25)
    fresh = store.insert(_report(hazard_type="Weather"))

    cutoff = active_cutoff(clock())
    assert store.count_expired(cutoff) == 2
    assert store.delete_expired(cutoff) == 2
    assert store.delete_expired(cutoff) == 0

    remaining = store.query_active_in_box(bounding_box(51.5074, -0.1278))
    assert [h.id for h in remaining] == [fresh.id]


def test_exactly_24_hours_old_is_expired(store, clock):
    store.insert(_report())
    clock.advance(hours=24)

    assert store.query_active_in_box(bounding_box(51.5074, -0.1278)) == []
    assert hazard_service.purge_expired(store, dry_run=True) == 1
    assert hazard_service.purge_expired(store) == 1
    assert hazard_service.purge_expired(store) == 0


def test_count_and_group_active(store, clock):
    store.insert(_report(hazard_type="Police", lat=10.0))
    clock.advance(hours=30)
    store.insert(_report(hazard_type="Police", lat=20.0))
    store.insert(_report(hazard_type="Police", lat=30.0))
    store.insert(_report(hazard_type="Accident", lat=40.0))

    total, by_type = store.count_and_group_active()

    assert total == 3
    assert by_type == [("Police", 2), ("Accident", 1)]


def test_serialized_timestamp_carries_utc_offset(store, clock):
    hazard = store.insert(_report())

    item = hazard_service.hazard_to_dict(hazard, now=clock())

    assert item["timestamp"] == "2026-10-19T12:00:00+00:00"
    assert item["age_minutes"] == 0.0
