from __future__ import annotations

from dataclasses import dataclass

from track_core.model.point import Altitude
from track_core.units import AltitudeFormat, convert_altitude


@dataclass
class DoubleRange:
    minimum: float = 0.0
    maximum: float = 0.0
    empty: bool = True

    def add_value(self, value: float) -> None:
        if self.empty:
            self.minimum = self.maximum = float(value)
            self.empty = False
            return
        if value < self.minimum:
            self.minimum = float(value)
        if value > self.maximum:
            self.maximum = float(value)

    def has_data(self) -> bool:
        return not self.empty

    @property
    def span(self) -> float:
        return self.maximum - self.minimum


@dataclass
class AltitudeRange:
    """Altitude extremes, held in the unit of the first altitude added."""

    range: DoubleRange | None = None
    format: AltitudeFormat = AltitudeFormat.METRES

    def __post_init__(self) -> None:
        if self.range is None:
            self.range = DoubleRange()

    def add_value(self, altitude: Altitude) -> None:
        if not altitude.is_valid():
            return
        if self.range.empty:
            self.format = altitude.format
        self.range.add_value(altitude.get_value(self.format))

    def has_data(self) -> bool:
        return self.range.has_data()

    def get_minimum(self, fmt: AltitudeFormat | None = None) -> float:
        return convert_altitude(self.range.minimum, self.format, fmt or self.format)

    def get_maximum(self, fmt: AltitudeFormat | None = None) -> float:
        return convert_altitude(self.range.maximum, self.format, fmt or self.format)
