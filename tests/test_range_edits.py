"""Tests for reversing, moving, interpolating and averaging point ranges."""

from __future__ import annotations

import pytest

from track_core.config import UnitSettings
from track_core.model.point import Altitude, DataPoint, Timestamp
from track_core.model.projection_cache import Fresh, Stale
from track_core.model.track import Track
from track_core.units import AltitudeFormat


def _point(
    lat: float,
    lon: float,
    *,
    segment: bool = False,
    waypoint: str | None = None,
    altitude: Altitude | float | None = None,
    timestamp: float | None = None,
) -> DataPoint:
    point = DataPoint(lat, lon, altitude, timestamp=timestamp, waypoint_name=waypoint)
    point.segment_start = segment
    return point


def _track(points: list[DataPoint], **kwargs) -> tuple[Track, list[int]]:
    events: list[int] = []
    track = Track(on_change=lambda: events.append(1), **kwargs)
    track.replace_contents(points)
    events.clear()
    return track, events


def _line(count: int) -> list[DataPoint]:
    points = [_point(float(i), float(i)) for i in range(count)]
    points[0].segment_start = True
    return points


def test_reverse_range_reverses_order_and_anchors_segments() -> None:
    points = _line(6)
    track, events = _track(points)

    assert track.reverse_range(0, 4)

    assert track.clone_contents() == [points[4], points[3], points[2], points[1], points[0], points[5]]
    assert points[4].segment_start
    assert points[5].segment_start
    assert not any(p.segment_start for p in points[:4])
    assert events == [1]
    track.validate(check_segments=True)


def test_reverse_range_keeps_interior_break_shifted() -> None:
    points = _line(5)
    points[2].segment_start = True
    track, _events = _track(points)

    assert track.reverse_range(1, 4)

    # order is now 0, 4, 3, 2, 1; the break before 2 now sits before 1
    assert [p.segment_start for p in track.clone_contents()] == [True, True, False, False, True]


def test_invalid_reverse_range_leaves_track_unchanged() -> None:
    points = _line(5)
    flags = [p.segment_start for p in points]
    track, events = _track(points)

    assert not track.reverse_range(-1, 3)
    assert not track.reverse_range(2, 2)
    assert not track.reverse_range(3, 5)

    assert track.clone_contents() == points
    assert [p.segment_start for p in points] == flags
    assert events == []


def test_cut_and_move_forward_and_backward() -> None:
    points = _line(6)
    expected = [points[0], points[3], points[4], points[1], points[2], points[5]]

    forward, _ = _track(list(points))
    assert forward.cut_and_move_section(3, 4, 1)
    assert forward.clone_contents() == expected

    backward, _ = _track(list(points))
    assert backward.cut_and_move_section(1, 2, 5)
    assert backward.clone_contents() == expected


def test_cut_and_move_to_end_of_track() -> None:
    points = _line(5)
    track, _events = _track(points)

    assert track.cut_and_move_section(1, 2, 5)

    assert track.clone_contents() == [points[0], points[3], points[4], points[1], points[2]]


@pytest.mark.parametrize(
    ("start", "end", "move_to"),
    [(0, 2, 4), (2, 2, 0), (1, 3, 2), (1, 3, 4), (1, 2, -1), (1, 2, 7), (3, 6, 0)],
)
def test_cut_and_move_rejects_invalid_bounds(start: int, end: int, move_to: int) -> None:
    points = _line(6)
    track, events = _track(points)

    assert not track.cut_and_move_section(start, end, move_to)

    assert track.clone_contents() == points
    assert events == []


def test_interpolate_inserts_evenly_spaced_points() -> None:
    first = _point(0.0, 0.0, segment=True)
    last = _point(10.0, 10.0)
    track, events = _track([first, last])

    assert track.interpolate(0, 3)

    assert track.num_points == 5
    inserted = track.clone_range(1, 3)
    assert [p.latitude for p in inserted] == [2.5, 5.0, 7.5]
    assert [p.longitude for p in inserted] == [2.5, 5.0, 7.5]
    assert track.get_point(4) is last
    assert events == [1]


def test_interpolate_needs_following_point() -> None:
    track, events = _track(_line(2))

    assert not track.interpolate(1, 2)
    assert not track.interpolate(0, 0)
    assert not track.interpolate(-1, 2)
    assert track.num_points == 2
    assert events == []


def test_average_inserts_mean_point_after_range() -> None:
    points = [
        _point(10.0, 0.0, segment=True, altitude=100.0),
        _point(20.0, 0.0),
        _point(30.0, 0.0, altitude=200.0),
        _point(40.0, 0.0),
    ]
    track, events = _track(points)

    assert track.average(0, 2)

    averaged = track.get_point(3)
    assert track.num_points == 5
    assert averaged.latitude == 20.0
    assert averaged.longitude == 0.0
    assert averaged.altitude.get_value() == 150.0
    assert averaged.segment_start
    assert points[3].segment_start
    assert track.clone_range(0, 2) == points[:3]
    assert events == [1]


def test_average_uses_configured_altitude_unit() -> None:
    points = [
        _point(1.0, 1.0, altitude=Altitude(100.0, AltitudeFormat.FEET)),
        _point(1.0, 1.0, altitude=Altitude(201.0, AltitudeFormat.FEET)),
    ]
    track, _events = _track(points, units=UnitSettings(metric=False))

    assert track.average(0, 1)

    altitude = track.get_point(2).altitude
    assert altitude.format == AltitudeFormat.FEET
    assert altitude.get_value() == 150.0


def test_average_without_altitudes_has_no_altitude() -> None:
    track, _events = _track(_line(3))

    assert track.average(0, 2)
    assert not track.get_point(3).has_altitude()
    assert not track.average(2, 2)
    assert not track.average(1, 9)


def test_time_offset_applies_only_to_timestamped_points() -> None:
    points = [
        _point(0.0, 0.0, timestamp=100.0),
        _point(1.0, 1.0),
        _point(2.0, 2.0, timestamp=300.0),
    ]
    track, events = _track(points)
    assert track.x_range.has_data()

    assert track.add_time_offset(0, 2, 60.0)

    assert points[0].timestamp.seconds == 160.0
    assert not points[1].has_timestamp()
    assert points[2].timestamp.seconds == 360.0
    assert isinstance(track.cache_state, Fresh)
    assert events == [1]


def test_time_offset_reports_when_nothing_changed() -> None:
    track, events = _track(_line(3))

    assert not track.add_time_offset(0, 2, 60.0)
    assert not track.add_time_offset(2, 1, 60.0)
    assert events == []


def test_altitude_offset_invalidates_cache() -> None:
    points = [_point(0.0, 0.0, altitude=10.0), _point(1.0, 1.0, altitude=20.0)]
    track, events = _track(points)
    assert track.altitude_range.get_maximum() == 20.0

    assert track.add_altitude_offset(0, 1, 5.0, AltitudeFormat.METRES, 0)

    assert isinstance(track.cache_state, Stale)
    assert track.altitude_range.get_maximum() == 25.0
    assert events == [1]


def test_time_offset_keeps_timestamp_objects() -> None:
    stamp = Timestamp(50.0)
    point = DataPoint(0.0, 0.0, timestamp=stamp)
    track, _events = _track([point, _point(1.0, 1.0)])

    assert track.add_time_offset(0, 1, -20.0)
    assert stamp.seconds == 30.0
