from __future__ import annotations

from track_core.model.point import DataPoint
from track_core.model.segments import next_track_point_index, shift_segment_starts


def _point(segment: bool = False, waypoint: str | None = None) -> DataPoint:
    point = DataPoint(0.0, 0.0, waypoint_name=waypoint)
    point.segment_start = segment
    return point


def test_shift_moves_flags_forward_with_true_flowing_in() -> None:
    points = [_point(False), _point(True), _point(False), _point(False)]

    shift_segment_starts(points, 0, 3)

    assert [p.segment_start for p in points] == [True, False, True, False]


def test_shift_skips_waypoints() -> None:
    waypoint = _point(True, waypoint="Hut")
    points = [_point(False), waypoint, _point(True), _point(False)]

    shift_segment_starts(points, 0, 3)

    assert waypoint.segment_start
    assert [points[i].segment_start for i in (0, 2, 3)] == [True, False, True]


def test_next_track_point_skips_waypoints() -> None:
    points = [_point(), _point(waypoint="A"), _point(waypoint="B"), _point()]

    assert next_track_point_index(points, 4, 1) == 3
    assert next_track_point_index(points, 4, 2, forward=False) == 0


def test_next_track_point_stops_at_end_of_data() -> None:
    points = [_point(), _point(waypoint="A"), _point(waypoint="B")]

    assert next_track_point_index(points, 3, 1) is None
    assert next_track_point_index(points, 3, 5) is None
    assert next_track_point_index(points, 3, 1, 1) is None
