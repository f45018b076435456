"""Segment-start bookkeeping for the track points of a point sequence.

A drawn track line breaks wherever a track point has ``segment_start`` set.
Waypoints carry the flag too, but it has no meaning for them and these
helpers never read or write it.
"""
from __future__ import annotations

from typing import Sequence

from track_core.model.point import DataPoint


def is_track_point(point: DataPoint | None) -> bool:
    return point is not None and point.is_valid() and not point.is_waypoint()


def next_track_point_index(
    points: Sequence[DataPoint],
    count: int,
    from_index: int,
    to_index: int | None = None,
    *,
    forward: bool = True,
) -> int | None:
    """Return the index of the first track point found scanning from ``from_index``.

    Scans towards ``to_index`` (inclusive, default the end of data in the scan
    direction). Waypoints are skipped; running off the data ends the scan.
    """

    step = 1 if forward else -1
    if to_index is None:
        to_index = count - 1 if forward else 0
    index = from_index
    while (index <= to_index) if forward else (index >= to_index):
        if index < 0 or index >= count:
            return None
        if is_track_point(points[index]):
            return index
        index += step
    return None


def shift_segment_starts(points: Sequence[DataPoint], start: int, end: int) -> None:
    """Move each track point's segment flag in ``[start, end]`` on by one track point.

    The first track point in the range receives ``True``; the flag of the last
    one drops off the end of the range.
    """

    previous_flag = True
    for index in range(max(0, start), min(end, len(points) - 1) + 1):
        point = points[index]
        if point is None or point.is_waypoint():
            continue
        current_flag = point.segment_start
        point.segment_start = previous_flag
        previous_flag = current_flag


def mark_first_segment_start(points: Sequence[DataPoint], count: int) -> None:
    first = next_track_point_index(points, count, 0)
    if first is not None:
        points[first].segment_start = True
