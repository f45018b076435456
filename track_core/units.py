from __future__ import annotations

from enum import Enum

METERS_PER_FOOT = 0.3048


class AltitudeFormat(Enum):
    METRES = "metre"
    FEET = "feet"


UNIT_LABELS = {AltitudeFormat.METRES: "m", AltitudeFormat.FEET: "ft"}


def altitude_unit_label(fmt: AltitudeFormat) -> str:
    return UNIT_LABELS.get(fmt, "m")


def feet_to_metres(value: float) -> float:
    return value * METERS_PER_FOOT


def metres_to_feet(value: float) -> float:
    return value / METERS_PER_FOOT


def convert_altitude(
    value: float, source: AltitudeFormat, target: AltitudeFormat
) -> float:
    if source == target:
        return float(value)
    if target == AltitudeFormat.METRES:
        return feet_to_metres(value)
    return metres_to_feet(value)


def format_altitude(value: float | None, *, fmt: AltitudeFormat) -> str:
    if value is None:
        return "–"
    return f"{int(round(value))} {altitude_unit_label(fmt)}"
