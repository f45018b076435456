"""Spherical Mercator projection of coordinates onto the unit tile square."""
from __future__ import annotations

import math

import numpy as np


def x_from_longitude(longitude: float) -> float:
    return (longitude + 180.0) / 360.0


def y_from_latitude(latitude: float) -> float:
    lat_rad = math.radians(latitude)
    return (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0


def latitude_from_y(y: float) -> float:
    n = math.pi * (1.0 - 2.0 * y)
    return math.degrees(math.atan(math.sinh(n)))


def project_longitudes(longitudes: np.ndarray) -> np.ndarray:
    """Vectorised :func:`x_from_longitude`."""
    return (np.asarray(longitudes, dtype=float) + 180.0) / 360.0


def project_latitudes(latitudes: np.ndarray) -> np.ndarray:
    """Vectorised :func:`y_from_latitude`.

    The poles themselves map to +/-inf, as in the scalar form.
    """
    lat_rad = np.radians(np.asarray(latitudes, dtype=float))
    with np.errstate(divide="ignore", invalid="ignore"):
        return (1.0 - np.log(np.tan(lat_rad) + 1.0 / np.cos(lat_rad)) / np.pi) / 2.0
