"""Point records held by a track, with their altitude and timestamp values."""
from __future__ import annotations

from datetime import datetime, timezone
import math
from typing import Mapping, Sequence

from track_core.model.fields import (
    ALTITUDE,
    LATITUDE,
    LONGITUDE,
    NEW_SEGMENT,
    TIMESTAMP,
    WAYPT_NAME,
    Field,
    FieldList,
)
from track_core.units import AltitudeFormat, convert_altitude

_TRUE_FLAGS = {"1", "true", "yes", "y", "t"}


def _parse_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _format_number(value: float) -> str:
    return f"{value:.8f}".rstrip("0").rstrip(".")


class Altitude:
    """Altitude value tagged with the unit it was recorded in."""

    def __init__(
        self,
        value: float | None = None,
        fmt: AltitudeFormat = AltitudeFormat.METRES,
    ) -> None:
        self._value = 0.0 if value is None else float(value)
        self._format = fmt
        self._valid = value is not None

    @classmethod
    def parse(cls, text: object, fmt: AltitudeFormat) -> "Altitude":
        return cls(_parse_float(text), fmt)

    def __repr__(self) -> str:
        if not self._valid:
            return "Altitude(invalid)"
        return f"Altitude({self._value!r}, {self._format.name})"

    def is_valid(self) -> bool:
        return self._valid

    @property
    def format(self) -> AltitudeFormat:
        return self._format

    @property
    def value(self) -> float:
        return self._value

    def get_value(self, fmt: AltitudeFormat | None = None) -> float:
        if fmt is None:
            return self._value
        return convert_altitude(self._value, self._format, fmt)

    def add_offset(
        self, offset: float, fmt: AltitudeFormat | None = None, decimals: int = 0
    ) -> None:
        """Add ``offset`` given in ``fmt`` units, rounded to ``decimals`` places."""
        if not self._valid:
            return
        delta = convert_altitude(offset, fmt or self._format, self._format)
        self._value = round(self._value + delta, max(0, int(decimals)))

    def interpolate(self, end: "Altitude", fraction: float) -> "Altitude":
        if not (self._valid and end.is_valid()):
            return Altitude(None, self._format)
        end_value = end.get_value(self._format)
        return Altitude(self._value + (end_value - self._value) * fraction, self._format)


class Timestamp:
    """Point in time, stored as seconds since the Unix epoch."""

    def __init__(self, seconds: float | None = None) -> None:
        self._seconds = 0.0 if seconds is None else float(seconds)
        self._valid = seconds is not None

    @classmethod
    def parse(cls, text: object) -> "Timestamp":
        if text is None:
            return cls()
        candidate = str(text).strip()
        if not candidate:
            return cls()
        numeric = _parse_float(candidate)
        if numeric is not None:
            return cls(numeric)
        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            return cls()
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return cls(parsed.timestamp())

    def __repr__(self) -> str:
        if not self._valid:
            return "Timestamp(invalid)"
        return f"Timestamp({self._seconds!r})"

    def is_valid(self) -> bool:
        return self._valid

    @property
    def seconds(self) -> float:
        return self._seconds

    def add_offset(self, seconds: float) -> None:
        if self._valid:
            self._seconds += seconds

    def interpolate(self, end: "Timestamp", fraction: float) -> "Timestamp":
        if not (self._valid and end.is_valid()):
            return Timestamp()
        return Timestamp(self._seconds + (end.seconds - self._seconds) * fraction)


class DataPoint:
    """A single track point or waypoint.

    Points compare by identity: two points at the same coordinates are still
    distinct entries of a track. ``is_waypoint`` and ``valid`` are fixed when
    the point is created; ``segment_start`` and ``marked_for_deletion`` are
    mutable flags owned by the track editing code.
    """

    def __init__(
        self,
        latitude: float | None,
        longitude: float | None,
        altitude: Altitude | float | None = None,
        *,
        timestamp: Timestamp | float | None = None,
        waypoint_name: str | None = None,
        field_values: Mapping[Field, str] | None = None,
    ) -> None:
        self._values: dict[Field, str] = dict(field_values or {})
        self._latitude = None if latitude is None else float(latitude)
        self._longitude = None if longitude is None else float(longitude)
        if self._latitude is not None:
            self._values.setdefault(LATITUDE, _format_number(self._latitude))
        if self._longitude is not None:
            self._values.setdefault(LONGITUDE, _format_number(self._longitude))

        if isinstance(altitude, Altitude):
            self._altitude = altitude
        else:
            self._altitude = Altitude(altitude)
        if self._altitude.is_valid():
            self._values.setdefault(ALTITUDE, _format_number(self._altitude.value))

        if isinstance(timestamp, Timestamp):
            self._timestamp = timestamp
        else:
            self._timestamp = Timestamp(timestamp)
        if self._timestamp.is_valid():
            self._values.setdefault(TIMESTAMP, _format_number(self._timestamp.seconds))

        if waypoint_name:
            self._values[WAYPT_NAME] = waypoint_name
        name = self._values.get(WAYPT_NAME, "")
        self._is_waypoint = bool(name and name.strip())
        self._segment_start = (
            self._values.get(NEW_SEGMENT, "").strip().lower() in _TRUE_FLAGS
        )
        self._marked_for_deletion = False
        self._modified = False
        self._valid = (
            self._latitude is not None
            and self._longitude is not None
            and -90.0 <= self._latitude <= 90.0
            and -180.0 <= self._longitude <= 180.0
        )

    @classmethod
    def from_values(
        cls,
        values: Sequence[str | None],
        field_list: FieldList,
        altitude_format: AltitudeFormat = AltitudeFormat.METRES,
    ) -> "DataPoint":
        """Build a point from one raw row whose columns follow ``field_list``."""
        field_values: dict[Field, str] = {}
        for index, field in enumerate(field_list):
            if index >= len(values):
                break
            value = values[index]
            if value is not None:
                field_values[field] = str(value)
        return cls(
            _parse_float(field_values.get(LATITUDE)),
            _parse_float(field_values.get(LONGITUDE)),
            Altitude.parse(field_values.get(ALTITUDE), altitude_format),
            timestamp=Timestamp.parse(field_values.get(TIMESTAMP)),
            field_values=field_values,
        )

    def __repr__(self) -> str:
        kind = "Waypoint" if self._is_waypoint else "DataPoint"
        return f"<{kind} lat={self._latitude} lon={self._longitude} at {id(self):#x}>"

    @property
    def latitude(self) -> float:
        return 0.0 if self._latitude is None else self._latitude

    @property
    def longitude(self) -> float:
        return 0.0 if self._longitude is None else self._longitude

    @property
    def altitude(self) -> Altitude:
        return self._altitude

    @property
    def timestamp(self) -> Timestamp:
        return self._timestamp

    @property
    def waypoint_name(self) -> str:
        return self._values.get(WAYPT_NAME, "")

    def is_valid(self) -> bool:
        return self._valid

    def is_waypoint(self) -> bool:
        return self._is_waypoint

    def has_altitude(self) -> bool:
        return self._altitude.is_valid()

    def has_timestamp(self) -> bool:
        return self._timestamp.is_valid()

    @property
    def segment_start(self) -> bool:
        return self._segment_start

    @segment_start.setter
    def segment_start(self, value: bool) -> None:
        self._segment_start = bool(value)

    @property
    def marked_for_deletion(self) -> bool:
        return self._marked_for_deletion

    @marked_for_deletion.setter
    def marked_for_deletion(self, value: bool) -> None:
        self._marked_for_deletion = bool(value)

    @property
    def modified(self) -> bool:
        return self._modified

    def set_modified(self, undo: bool) -> None:
        self._modified = not undo

    def get_field_value(self, field: Field) -> str | None:
        return self._values.get(field)

    def set_field_value(self, field: Field, value: str | None, undo: bool = False) -> None:
        """Set a field value, re-parsing coordinates, altitude or timestamp."""
        if value is None:
            self._values.pop(field, None)
        else:
            self._values[field] = str(value)

        if field == LATITUDE:
            self._latitude = _parse_float(value)
        elif field == LONGITUDE:
            self._longitude = _parse_float(value)
        elif field == ALTITUDE:
            self._altitude = Altitude.parse(value, self._altitude.format)
        elif field == TIMESTAMP:
            self._timestamp = Timestamp.parse(value)
        elif field == NEW_SEGMENT:
            self._segment_start = str(value or "").strip().lower() in _TRUE_FLAGS
        self.set_modified(undo)

    def add_time_offset(self, seconds: float, undo: bool = False) -> bool:
        if not self._timestamp.is_valid():
            return False
        self._timestamp.add_offset(seconds)
        self._values[TIMESTAMP] = _format_number(self._timestamp.seconds)
        self.set_modified(undo)
        return True

    def add_altitude_offset(
        self,
        offset: float,
        fmt: AltitudeFormat | None = None,
        decimals: int = 0,
        undo: bool = False,
    ) -> bool:
        if not self._altitude.is_valid():
            return False
        self._altitude.add_offset(offset, fmt, decimals)
        self._values[ALTITUDE] = _format_number(self._altitude.value)
        self.set_modified(undo)
        return True

    def interpolate(self, end_point: "DataPoint", num_points: int) -> list["DataPoint"]:
        """Return ``num_points`` points evenly spaced between this point and ``end_point``."""
        points: list[DataPoint] = []
        if num_points <= 0:
            return points
        for step in range(num_points):
            fraction = (step + 1) / (num_points + 1)
            points.append(
                DataPoint(
                    self.latitude + (end_point.latitude - self.latitude) * fraction,
                    self.longitude + (end_point.longitude - self.longitude) * fraction,
                    self._altitude.interpolate(end_point.altitude, fraction),
                    timestamp=self._timestamp.interpolate(end_point.timestamp, fraction),
                )
            )
        return points
