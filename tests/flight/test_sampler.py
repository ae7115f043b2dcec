import datetime

import pytest

from sunside.flight.geodesy import distance_m
from sunside.flight.sampler import classify_viewing_side, sample_flight_path
from sunside.flight.types import Airport

UTC = datetime.timezone.utc


@pytest.mark.parametrize(
    "azimuth,bearing,expected",
    [
        (90.0, 0.0, "right"),
        (270.0, 0.0, "left"),
        (0.0, 0.0, "left"),
        (180.0, 0.0, "left"),
        (10.0, 350.0, "right"),
        (340.0, 10.0, "left"),
        (95.0, 78.0, "right"),
    ],
)
def test_classify_viewing_side(azimuth, bearing, expected):
    assert classify_viewing_side(azimuth, bearing) == expected


def test_sample_count_and_endpoints(jfk, lhr):
    traj = sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC), 420)
    assert len(traj.points) == 85
    first, last = traj.points[0], traj.points[-1]
    assert first.progress == 0.0
    assert last.progress == 1.0
    assert first.time_utc == datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC)
    assert last.time_utc == datetime.datetime(2024, 3, 15, 15, 0, tzinfo=UTC)
    assert distance_m(first.location, jfk.point) < 1.0
    assert distance_m(last.location, lhr.point) < 1000.0
    assert traj.total_distance_m / 1000.0 == pytest.approx(5540.0, abs=50.0)


def test_last_sample_clamped_when_interval_does_not_divide(jfk, lhr):
    traj = sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC), 62)
    assert len(traj.points) == 14
    offsets = [(p.time_utc - traj.points[0].time_utc).total_seconds() / 60.0 for p in traj.points]
    assert offsets[-2] == 60.0
    assert offsets[-1] == 62.0
    assert traj.points[-1].progress == 1.0


def test_progress_is_monotonic(jfk, lhr):
    traj = sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC), 420, interval_min=10)
    progress = [p.progress for p in traj.points]
    assert progress == sorted(progress)
    assert all(0.0 <= p <= 1.0 for p in progress)


def test_side_counts_cover_visible_samples(jfk, lhr):
    traj = sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC), 420)
    assert traj.left_side_count + traj.right_side_count == traj.sun_visible_count
    assert traj.sun_visible_count == sum(1 for p in traj.points if p.sun.visible)
    for p in traj.points:
        assert (p.viewing_side is not None) == p.sun.visible
        assert p.aircraft_bearing_deg == traj.bearing_deg


def test_naive_departure_time_is_utc(lhr, cdg):
    aware = sample_flight_path(lhr, cdg, datetime.datetime(2024, 6, 21, 11, 30, tzinfo=UTC), 60)
    naive = sample_flight_path(lhr, cdg, datetime.datetime(2024, 6, 21, 11, 30), 60)
    assert [p.sun for p in naive.points] == [p.sun for p in aware.points]


def test_offset_departure_time_is_converted_to_utc(jfk, lhr):
    plus_two = datetime.timezone(datetime.timedelta(hours=2))
    offset = sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, 10, 0, tzinfo=plus_two), 420)
    utc = sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, 8, 0, tzinfo=UTC), 420)
    assert offset.points[0].time_utc.utcoffset() == datetime.timedelta(0)
    assert offset.points[0].time_utc.hour == 8
    assert [p.time_utc.isoformat() for p in offset.points] == [p.time_utc.isoformat() for p in utc.points]


def test_antipodal_pair_has_no_viewing_side(caplog):
    a = Airport(iata="AAA", name="A", latitude_deg=0.0, longitude_deg=0.0)
    b = Airport(iata="BBB", name="B", latitude_deg=0.0, longitude_deg=180.0)
    with caplog.at_level("WARNING"):
        traj = sample_flight_path(a, b, datetime.datetime(2024, 3, 20, 12, 0, tzinfo=UTC), 60)
    assert traj.bearing_deg is None
    assert traj.left_side_count == traj.right_side_count == 0
    assert all(p.viewing_side is None for p in traj.points)
    assert "antipodal" in caplog.text


@pytest.mark.parametrize("duration,interval", [(0, 5), (-10, 5), (60, 0)])
def test_rejects_non_positive_duration_or_interval(jfk, lhr, duration, interval):
    with pytest.raises(ValueError):
        sample_flight_path(jfk, lhr, datetime.datetime(2024, 3, 15, tzinfo=UTC), duration, interval_min=interval)
