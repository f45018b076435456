"""Editable GPS track model with derived map geometry."""
from __future__ import annotations

import logging
import os
import sys

from track_core.config import UnitSettings, load_unit_settings, save_unit_settings
from track_core.model import DataPoint, Field, FieldList, Track
from track_core.units import AltitudeFormat


def configure_logging(log_dir: str | None = None) -> None:
    base_dir = log_dir if log_dir is not None else os.path.dirname(sys.argv[0])
    log_path = os.path.join(base_dir, "track_core_log.txt")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_path, mode="a", encoding="utf-8"),
            logging.StreamHandler(sys.stdout),
        ],
    )


__all__ = [
    "AltitudeFormat",
    "DataPoint",
    "Field",
    "FieldList",
    "Track",
    "UnitSettings",
    "configure_logging",
    "load_unit_settings",
    "save_unit_settings",
]
