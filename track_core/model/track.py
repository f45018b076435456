"""Editable track of points and waypoints, with lazily derived geometry."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping, Sequence

import numpy as np
from PyQt5 import QtCore

from track_core.config import UnitSettings
from track_core.model.fields import ALTITUDE, TIMESTAMP, Field, FieldList
from track_core.model.invariants import validate_track
from track_core.model.point import Altitude, DataPoint
from track_core.model.projection import project_latitudes, project_longitudes
from track_core.model.projection_cache import (
    ArrayProjection,
    CacheState,
    ProjectionCache,
    ScaledData,
)
from track_core.model.ranges import AltitudeRange, DoubleRange
from track_core.model.segments import (
    mark_first_segment_start,
    next_track_point_index,
    shift_segment_starts,
)
from track_core.units import AltitudeFormat

logger = logging.getLogger(__name__)


class Track(QtCore.QObject):
    """Ordered points of a loaded track and the edits that restructure them.

    Only indices ``[0, num_points)`` are meaningful. Every successful mutation
    marks the projection cache stale and emits ``track_changed`` before
    returning; a rejected edit returns ``False`` (or ``None``/``0``) and leaves
    the track untouched.
    """

    track_changed = QtCore.pyqtSignal()

    def __init__(
        self,
        units: UnitSettings | None = None,
        on_change: Callable[[], None] | None = None,
        parent: QtCore.QObject | None = None,
        *,
        project_x: ArrayProjection = project_longitudes,
        project_y: ArrayProjection = project_latitudes,
    ) -> None:
        super().__init__(parent)
        self._points: list[DataPoint] = []
        self._num_points = 0
        self._field_list = FieldList()
        self._cache = ProjectionCache(project_x, project_y)
        self._units = units or UnitSettings()
        self._metadata: object | None = None
        if on_change is not None:
            self.track_changed.connect(on_change)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _live_points(self) -> list[DataPoint]:
        return self._points[: self._num_points]

    def _set_points(self, points: list[DataPoint]) -> None:
        self._points = points
        self._num_points = len(points)
        self._cache.invalidate()

    def _notify(self) -> None:
        self.track_changed.emit()

    def _scaled(self) -> ScaledData:
        return self._cache.ensure_scaled(self._points, self._num_points)

    def _valid_span(self, start: int, end: int) -> bool:
        return 0 <= start < end < self._num_points

    # ------------------------------------------------------------------
    # Loading and bulk replacement
    # ------------------------------------------------------------------
    def load(
        self,
        fields: FieldList | Iterable[Field] | None,
        rows: Iterable[Sequence[str | None]] | None,
        altitude_format: AltitudeFormat = AltitudeFormat.METRES,
    ) -> bool:
        """Replace the whole track with points parsed from ``rows``.

        Rows that do not yield a valid point are dropped. Missing inputs leave
        an empty track and return ``False``.
        """

        if fields is None or rows is None:
            had_points = self._num_points > 0
            self._set_points([])
            if had_points:
                self._notify()
            return False

        self._field_list = FieldList(fields)
        points = []
        skipped = 0
        for row in rows:
            point = DataPoint.from_values(row, self._field_list, altitude_format)
            if point.is_valid():
                points.append(point)
            else:
                skipped += 1
        self._set_points(points)
        mark_first_segment_start(self._points, self._num_points)
        logger.info(
            "Loaded track: points=%d skipped=%d fields=%d",
            self._num_points,
            skipped,
            len(self._field_list),
        )
        self._notify()
        return True

    def load_from(self, other: "Track | None") -> bool:
        """Take over the contents of another, already loaded, track."""
        if other is None:
            return False
        self._field_list = other._field_list
        self._points = other._points
        self._num_points = other._num_points
        self._metadata = other._metadata
        self._cache.invalidate()
        self._notify()
        return True

    def replace_contents(self, points: Sequence[DataPoint] | None) -> bool:
        """Swap in a new point sequence; the field list is kept."""
        if points is None:
            return False
        self._set_points(list(points))
        logger.debug("Replaced track contents: points=%d", self._num_points)
        self._notify()
        return True

    def combine(self, other: "Track | None") -> bool:
        """Append another track's points and merge its fields into this one."""
        if other is None:
            return False
        self._field_list = self._field_list.merge(other._field_list)
        self._set_points(self._live_points() + other._live_points())
        logger.debug(
            "Combined tracks: points=%d added=%d", self._num_points, other._num_points
        )
        self._notify()
        return True

    def extend_field_list(self, fields: FieldList | Iterable[Field]) -> None:
        self._field_list = self._field_list.merge(fields)

    def request_rescale(self) -> None:
        self._cache.invalidate()

    # ------------------------------------------------------------------
    # Low-level insert and delete
    # ------------------------------------------------------------------
    def insert_range(self, points: Sequence[DataPoint] | None, index: int) -> bool:
        if points is None or index < 0 or index > self._num_points:
            return False
        live = self._live_points()
        live[index:index] = list(points)
        self._set_points(live)
        self._notify()
        return True

    def insert_point(self, point: DataPoint | None, index: int) -> bool:
        if point is None:
            return False
        return self.insert_range([point], index)

    def append_points(self, points: Sequence[DataPoint] | None) -> bool:
        if not points:
            return False
        return self.insert_range(points, self._num_points)

    def delete_range(self, start: int, end: int) -> bool:
        """Delete points ``start`` to ``end`` inclusive.

        A segment break inside the deleted block moves to the next remaining
        track point.
        """

        if start < 0 or end < 0 or end < start or end >= self._num_points:
            return False
        next_index = next_track_point_index(self._points, self._num_points, end + 1)
        if next_index is not None and any(
            self._points[i].segment_start for i in range(start, end + 1)
        ):
            self._points[next_index].segment_start = True
        live = self._live_points()
        del live[start : end + 1]
        self._set_points(live)
        logger.debug("Deleted range: start=%d end=%d remaining=%d", start, end, self._num_points)
        self._notify()
        return True

    def delete_point(self, index: int) -> bool:
        return self.delete_range(index, index)

    def delete_marked_points(self) -> int:
        """Remove every point marked for deletion and return how many went."""
        live = self._live_points()
        kept = [point for point in live if not point.marked_for_deletion]
        num_deleted = len(live) - len(kept)
        if num_deleted > 0:
            self._set_points(kept)
            logger.debug("Deleted marked points: count=%d", num_deleted)
            self._notify()
        return num_deleted

    def crop_to(self, new_size: int) -> bool:
        """Shrink the counted points to ``new_size``; storage is kept."""
        if new_size < 0 or new_size >= self._num_points:
            return False
        self._num_points = new_size
        self._cache.invalidate()
        self._notify()
        return True

    def clone_contents(self) -> list[DataPoint]:
        return self._live_points()

    def clone_range(self, start: int, end: int) -> list[DataPoint]:
        if start < 0 or end < start:
            return []
        return self._points[start : min(end, self._num_points - 1) + 1]

    def edit_point(
        self,
        point: DataPoint | None,
        edits: Mapping[Field, str | None] | None,
        undo: bool = False,
    ) -> bool:
        """Apply field edits to ``point``, adding unseen fields to the field list."""
        if point is None or not edits:
            return False
        for field, value in edits.items():
            point.set_field_value(field, value, undo)
            if not self._field_list.contains(field):
                self._field_list.extend(field)
        self._cache.invalidate()
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Range edits
    # ------------------------------------------------------------------
    def reverse_range(self, start: int, end: int) -> bool:
        if start < 0 or end < 0 or start >= end or end >= self._num_points:
            return False
        points = self._points
        for offset in range((end - start + 1) // 2):
            left, right = start + offset, end - offset
            points[left], points[right] = points[right], points[left]
        shift_segment_starts(points, start, end)
        for anchor in (start, end + 1):
            index = next_track_point_index(points, self._num_points, anchor)
            if index is not None:
                points[index].segment_start = True
        self._cache.invalidate()
        logger.debug("Reversed range: start=%d end=%d", start, end)
        self._notify()
        return True

    def cut_and_move_section(self, section_start: int, section_end: int, move_to: int) -> bool:
        """Move points ``section_start..section_end`` to just before ``move_to``."""
        if not (
            section_start > 0
            and section_end > section_start
            and section_end < self._num_points
            and 0 <= move_to <= self._num_points
            and (move_to < section_start or move_to > section_end + 1)
        ):
            return False
        live = self._live_points()
        section = live[section_start : section_end + 1]
        if move_to < section_start:
            reordered = (
                live[:move_to]
                + section
                + live[move_to:section_start]
                + live[section_end + 1 :]
            )
        else:
            reordered = (
                live[:section_start]
                + live[section_end + 1 : move_to]
                + section
                + live[move_to:]
            )
        self._set_points(reordered)
        logger.debug(
            "Moved section: start=%d end=%d to=%d", section_start, section_end, move_to
        )
        self._notify()
        return True

    def interpolate(self, start_index: int, num_points: int) -> bool:
        if start_index < 0 or start_index + 1 >= self._num_points or num_points <= 0:
            return False
        start_point = self._points[start_index]
        end_point = self._points[start_index + 1]
        return self.insert_range(
            start_point.interpolate(end_point, num_points), start_index + 1
        )

    def average(self, start_index: int, end_index: int) -> bool:
        """Insert the mean of points ``start_index..end_index`` after the range.

        Latitude and longitude are averaged as offsets from the first point,
        with no correction for ranges that cross the antimeridian.
        """

        if start_index < 0 or end_index <= start_index or end_index >= self._num_points:
            return False
        first = self._points[start_index]
        lat_diff = 0.0
        lon_diff = 0.0
        total_altitude = 0.0
        num_altitudes = 0
        altitude_format = self._units.altitude_format
        for point in self._points[start_index : end_index + 1]:
            lat_diff += point.latitude - first.latitude
            lon_diff += point.longitude - first.longitude
            if point.has_altitude():
                total_altitude += point.altitude.get_value(altitude_format)
                num_altitudes += 1
        count = end_index - start_index + 1
        mean_altitude = None
        if num_altitudes > 0:
            mean_altitude = Altitude(int(total_altitude / num_altitudes), altitude_format)

        averaged = DataPoint(
            first.latitude + lat_diff / count,
            first.longitude + lon_diff / count,
            mean_altitude,
        )
        averaged.segment_start = True
        next_index = next_track_point_index(self._points, self._num_points, end_index + 1)
        if next_index is not None:
            self._points[next_index].segment_start = True
        return self.insert_range([averaged], end_index + 1)

    def collect_waypoints(self, at_start: bool) -> bool:
        """Gather all waypoints before (or after) all other points, keeping order."""
        waypoints: list[DataPoint] = []
        others: list[DataPoint] = []
        way_after_other = False
        other_after_way = False
        for point in self._live_points():
            if point.is_waypoint():
                waypoints.append(point)
                way_after_other |= bool(others)
            else:
                others.append(point)
                other_after_way |= bool(waypoints)

        if (
            not waypoints
            or not others
            or (at_start and not way_after_other and other_after_way)
            or (not at_start and way_after_other and not other_after_way)
        ):
            return False
        self._set_points(waypoints + others if at_start else others + waypoints)
        self._notify()
        return True

    def interleave_waypoints(self) -> bool:
        """Place each waypoint directly after its nearest track point."""
        live = self._live_points()
        num_waypoints = sum(1 for point in live if point.is_waypoint())
        if num_waypoints == 0 or num_waypoints == len(live):
            return False

        data = self._scaled()
        matched: dict[int, list[DataPoint]] = {}
        for index, point in enumerate(live):
            if point.is_waypoint():
                nearest = self.get_nearest_point_index(
                    float(data.x_values[index]), float(data.y_values[index]), -1.0, True
                )
                matched.setdefault(nearest, []).append(point)

        reordered: list[DataPoint] = []
        for index, point in enumerate(live):
            if not point.is_waypoint():
                reordered.append(point)
            reordered.extend(matched.get(index, ()))
        self._set_points(reordered)
        self._notify()
        return True

    def add_time_offset(self, start: int, end: int, offset: float, undo: bool = False) -> bool:
        """Shift timestamps in ``start..end`` by ``offset`` seconds."""
        if not self._valid_span(start, end):
            return False
        found = False
        for point in self._points[start : end + 1]:
            found |= point.add_time_offset(offset, undo)
        if found:
            self._notify()
        return found

    def add_altitude_offset(
        self,
        start: int,
        end: int,
        offset: float,
        fmt: AltitudeFormat | None = None,
        decimals: int = 0,
    ) -> bool:
        if not self._valid_span(start, end):
            return False
        found = False
        for point in self._points[start : end + 1]:
            found |= point.add_altitude_offset(offset, fmt, decimals)
        self._cache.invalidate()
        if found:
            self._notify()
        return found

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_point(self, index: int) -> DataPoint | None:
        if 0 <= index < self._num_points:
            return self._points[index]
        return None

    @property
    def num_points(self) -> int:
        return self._num_points

    @property
    def storage_length(self) -> int:
        return len(self._points)

    @property
    def field_list(self) -> FieldList:
        return self._field_list

    @property
    def units(self) -> UnitSettings:
        return self._units

    @property
    def metadata(self) -> object | None:
        return self._metadata

    @metadata.setter
    def metadata(self, value: object | None) -> None:
        self._metadata = value

    @property
    def cache_state(self) -> CacheState:
        return self._cache.state

    def get_point_index(self, point: DataPoint | None) -> int | None:
        if point is None:
            return None
        for index, candidate in enumerate(self._live_points()):
            if candidate is point:
                return index
        return None

    def get_waypoints(self) -> list[DataPoint]:
        return [point for point in self._live_points() if point.is_waypoint()]

    def get_next_track_point(self, index: int) -> DataPoint | None:
        found = next_track_point_index(self._points, self._num_points, index)
        return None if found is None else self._points[found]

    def get_next_track_point_in_range(self, start: int, end: int) -> DataPoint | None:
        found = next_track_point_index(self._points, self._num_points, start, end)
        return None if found is None else self._points[found]

    def get_previous_track_point(self, index: int) -> DataPoint | None:
        found = next_track_point_index(
            self._points, self._num_points, index, forward=False
        )
        return None if found is None else self._points[found]

    def has_data(self, field: Field, start: int = 0, end: int | None = None) -> bool:
        if end is None:
            if field == ALTITUDE:
                return self.has_altitude_data()
            end = self._num_points - 1
        for point in self._points[max(0, start) : min(end, self._num_points - 1) + 1]:
            if point.get_field_value(field) is None:
                continue
            if field == ALTITUDE and not point.has_altitude():
                continue
            if field == TIMESTAMP and not point.has_timestamp():
                continue
            return True
        return False

    def has_altitude_data(self) -> bool:
        return any(point.has_altitude() for point in self._live_points())

    def has_marked_points(self) -> bool:
        return any(point.marked_for_deletion for point in self._live_points())

    def clear_deletion_markers(self) -> None:
        for point in self._live_points():
            point.marked_for_deletion = False

    def get_range_index_within(
        self, east: float, north: float, west: float, south: float
    ) -> tuple[int, int] | None:
        """Return the first and last index of points inside the lat/lon box."""
        first = last = None
        for index, point in enumerate(self._live_points()):
            if south <= point.latitude <= north and west <= point.longitude <= east:
                if first is None:
                    first = index
                last = index
        if first is None:
            return None
        return first, last

    def get_nearest_point_index(
        self, x: float, y: float, max_dist: float, trackpoints_only: bool
    ) -> int | None:
        """Index of the point closest to ``(x, y)`` by L1 distance.

        Ties go to the lowest index. A positive ``max_dist`` rejects a best
        match further away than that.
        """

        data = self._scaled()
        live = self._live_points()
        if trackpoints_only:
            candidates = np.flatnonzero(
                np.fromiter((not p.is_waypoint() for p in live), dtype=bool, count=len(live))
            )
        else:
            candidates = np.arange(len(live))
        distances = np.abs(data.x_values[candidates] - x) + np.abs(
            data.y_values[candidates] - y
        )
        finite = np.isfinite(distances)
        candidates = candidates[finite]
        distances = distances[finite]
        if candidates.size == 0:
            return None
        best = int(np.argmin(distances))
        if max_dist > 0.0 and distances[best] > max_dist:
            return None
        return int(candidates[best])

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------
    def get_x(self, index: int) -> float | None:
        if index < 0 or index >= self._num_points:
            return None
        return float(self._scaled().x_values[index])

    def get_y(self, index: int) -> float | None:
        if index < 0 or index >= self._num_points:
            return None
        return float(self._scaled().y_values[index])

    @property
    def x_values(self) -> np.ndarray:
        return self._scaled().x_values

    @property
    def y_values(self) -> np.ndarray:
        return self._scaled().y_values

    @property
    def x_range(self) -> DoubleRange:
        return self._scaled().x_range

    @property
    def y_range(self) -> DoubleRange:
        return self._scaled().y_range

    @property
    def lat_range(self) -> DoubleRange:
        return self._scaled().lat_range

    @property
    def lon_range(self) -> DoubleRange:
        return self._scaled().lon_range

    @property
    def altitude_range(self) -> AltitudeRange:
        return self._scaled().altitude_range

    def has_track_points(self) -> bool:
        return self._scaled().has_trackpoint

    def has_waypoints(self) -> bool:
        return self._scaled().has_waypoint

    def validate(self, *, check_segments: bool = False) -> None:
        validate_track(self, check_segments=check_segments)
