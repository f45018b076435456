"""Configuration helpers for track unit settings persistence."""
from __future__ import annotations

from configparser import ConfigParser, Error
from dataclasses import dataclass
import os
from pathlib import Path
import sys
from typing import Optional

from track_core.units import AltitudeFormat

CONFIG_FILENAME = "track_core.ini"
_SECTION = "units"
_METRIC_KEY = "metric"


@dataclass(frozen=True)
class UnitSettings:
    metric: bool = True

    @property
    def altitude_format(self) -> AltitudeFormat:
        return AltitudeFormat.METRES if self.metric else AltitudeFormat.FEET


def settings_path(main_script_path: Optional[Path] = None) -> Path:
    """Location of the unit settings INI.

    A frozen build keeps it beside the executable; otherwise it sits next to
    the launching script, falling back to the working directory.
    """
    if getattr(sys, "frozen", False):
        base = Path(sys.executable).parent
    else:
        script = main_script_path
        if script is None:
            script_file = getattr(sys.modules.get("__main__"), "__file__", None)
            script = Path(script_file) if script_file else None
        base = script.resolve().parent if script is not None else Path.cwd()
    return base / CONFIG_FILENAME


def load_unit_settings(main_script_path: Optional[Path]) -> UnitSettings:
    ini_path = settings_path(main_script_path)
    if not ini_path.exists():
        return UnitSettings()
    parser = ConfigParser()
    try:
        with ini_path.open("r", encoding="utf-8") as handle:
            parser.read_file(handle)
        metric = parser.getboolean(_SECTION, _METRIC_KEY, fallback=True)
    except (OSError, Error, ValueError):
        return UnitSettings()
    return UnitSettings(metric=metric)


def save_unit_settings(
    settings: UnitSettings, main_script_path: Optional[Path]
) -> None:
    config = ConfigParser()
    config.optionxform = str
    ini_path = settings_path(main_script_path)
    if ini_path.exists():
        try:
            with ini_path.open("r", encoding="utf-8") as handle:
                config.read_file(handle)
        except (OSError, Error):
            return
    config[_SECTION] = {_METRIC_KEY: "true" if settings.metric else "false"}
    try:
        with ini_path.open("w", encoding="utf-8") as handle:
            config.write(handle)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError:
        return
