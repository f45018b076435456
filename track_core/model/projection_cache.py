"""Lazily derived projected coordinates and value ranges of a track.

The cache is a two-state machine. :class:`Stale` means nothing is known and
the next read must rebuild; :class:`Fresh` holds the derived data for exactly
the points that were scaled. ``Fresh`` instances are only produced by
:func:`scale_points`; any mutation of the owning track swaps the state back
to ``Stale``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Sequence, Union

import numpy as np

from track_core.model.point import DataPoint
from track_core.model.projection import project_latitudes, project_longitudes
from track_core.model.ranges import AltitudeRange, DoubleRange

logger = logging.getLogger(__name__)

ArrayProjection = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True)
class Stale:
    pass


@dataclass(frozen=True)
class ScaledData:
    x_values: np.ndarray
    y_values: np.ndarray
    x_range: DoubleRange
    y_range: DoubleRange
    lat_range: DoubleRange
    lon_range: DoubleRange
    altitude_range: AltitudeRange
    has_waypoint: bool
    has_trackpoint: bool


@dataclass(frozen=True)
class Fresh:
    data: ScaledData = field(repr=False)


CacheState = Union[Stale, Fresh]


def _finite_range(values: np.ndarray) -> DoubleRange:
    # Poles and out-of-range latitudes project to inf or nan.
    result = DoubleRange()
    finite = values[np.isfinite(values)]
    if finite.size:
        result.add_value(float(finite.min()))
        result.add_value(float(finite.max()))
    return result


def scale_points(
    points: Sequence[DataPoint],
    count: int,
    *,
    project_x: ArrayProjection = project_longitudes,
    project_y: ArrayProjection = project_latitudes,
) -> Fresh:
    """Derive ranges and projected coordinates for ``points[:count]``."""

    lon_range = DoubleRange()
    lat_range = DoubleRange()
    altitude_range = AltitudeRange()
    has_waypoint = False
    has_trackpoint = False
    for point in points[:count]:
        if point is None or not point.is_valid():
            continue
        lon_range.add_value(point.longitude)
        lat_range.add_value(point.latitude)
        if point.altitude.is_valid():
            altitude_range.add_value(point.altitude)
        if point.is_waypoint():
            has_waypoint = True
        else:
            has_trackpoint = True

    longitudes = np.fromiter((p.longitude for p in points[:count]), dtype=float, count=count)
    latitudes = np.fromiter((p.latitude for p in points[:count]), dtype=float, count=count)
    x_values = project_x(longitudes)
    y_values = project_y(latitudes)
    x_values.setflags(write=False)
    y_values.setflags(write=False)
    x_range = _finite_range(x_values)
    y_range = _finite_range(y_values)

    logger.debug(
        "Scaled track points: count=%d waypoints=%s trackpoints=%s",
        count,
        has_waypoint,
        has_trackpoint,
    )
    return Fresh(
        ScaledData(
            x_values=x_values,
            y_values=y_values,
            x_range=x_range,
            y_range=y_range,
            lat_range=lat_range,
            lon_range=lon_range,
            altitude_range=altitude_range,
            has_waypoint=has_waypoint,
            has_trackpoint=has_trackpoint,
        )
    )


class ProjectionCache:
    """Holds the cache state for one track and rebuilds it on demand."""

    def __init__(
        self,
        project_x: ArrayProjection = project_longitudes,
        project_y: ArrayProjection = project_latitudes,
    ) -> None:
        self._state: CacheState = Stale()
        self._project_x = project_x
        self._project_y = project_y

    @property
    def state(self) -> CacheState:
        return self._state

    def invalidate(self) -> None:
        self._state = Stale()

    def ensure_scaled(self, points: Sequence[DataPoint], count: int) -> ScaledData:
        if isinstance(self._state, Fresh):
            return self._state.data
        self._state = scale_points(
            points, count, project_x=self._project_x, project_y=self._project_y
        )
        return self._state.data
