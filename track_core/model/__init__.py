"""Track data model: points, fields, derived geometry and range edits."""
from __future__ import annotations

from track_core.model.fields import (
    ALTITUDE,
    BUILTIN_FIELDS,
    DESCRIPTION,
    LATITUDE,
    LONGITUDE,
    NEW_SEGMENT,
    TIMESTAMP,
    WAYPT_NAME,
    WAYPT_TYPE,
    Field,
    FieldList,
)
from track_core.model.invariants import InvariantError, validate_track
from track_core.model.point import Altitude, DataPoint, Timestamp
from track_core.model.projection_cache import Fresh, ProjectionCache, Stale
from track_core.model.ranges import AltitudeRange, DoubleRange
from track_core.model.track import Track

__all__ = [
    "ALTITUDE",
    "BUILTIN_FIELDS",
    "DESCRIPTION",
    "LATITUDE",
    "LONGITUDE",
    "NEW_SEGMENT",
    "TIMESTAMP",
    "WAYPT_NAME",
    "WAYPT_TYPE",
    "Altitude",
    "AltitudeRange",
    "DataPoint",
    "DoubleRange",
    "Field",
    "FieldList",
    "Fresh",
    "InvariantError",
    "ProjectionCache",
    "Stale",
    "Timestamp",
    "Track",
    "validate_track",
]
