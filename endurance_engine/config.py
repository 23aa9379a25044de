"""Configuration loader for the endurance strategy engine."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from endurance_engine.core.compound import CompoundInput
from endurance_engine.core.inputs import RaceInputs, as_number

logger = logging.getLogger(__name__)

DATA_DIR: Path = Path(__file__).resolve().parent / "data"
DEFAULT_RACE_PATH: Path = DATA_DIR / "default_race.yaml"
CAR_PRESETS_PATH: Path = DATA_DIR / "car_presets.yaml"

_REQUIRED_RACE_FIELDS: tuple[str, ...] = (
    "race_duration_hours",
    "tank_size",
    "laps_per_full_tank",
)

_OPTIONAL_RACE_FIELDS: tuple[str, ...] = (
    "fuel_map",
    "pit_base_secs",
    "tire_change_secs",
    "fuel_rate_liters_per_sec",
    "mandatory_stops",
    "current_lap",
    "current_fuel",
)

_REQUIRED_PRESET_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "tank_size",
    "laps_per_full_tank",
    "race_duration_hours",
)

_DEFAULT_TIRE_WEAR_BASE: float = 30.0


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


def _require_numeric(entry: dict[str, Any], field: str, where: str) -> float:
    if field not in entry:
        raise ValueError(f"{where} is missing required field '{field}'")
    value = as_number(entry[field])
    if value is None:
        raise ValueError(
            f"{where}: '{field}' must be numeric, got {type(entry[field]).__name__}"
        )
    return value


def _parse_compound(idx: int, entry: dict[str, Any]) -> CompoundInput:
    if "id" not in entry:
        raise ValueError(f"Compound entry {idx} is missing required field 'id'")
    tire_life = as_number(entry.get("tire_life", 0))
    if tire_life is None or tire_life < 0:
        raise ValueError(
            f"Compound entry {idx} ({entry['id']}): 'tire_life' must be a "
            f"number >= 0, got {entry.get('tire_life')!r}"
        )
    return CompoundInput(
        id=str(entry["id"]),
        name=str(entry.get("name") or ""),
        tire_life=tire_life,
        mandatory=bool(entry.get("mandatory", False)),
        start_lap_time=str(entry.get("start_lap_time") or ""),
        half_lap_time=str(entry.get("half_lap_time") or ""),
        end_lap_time=str(entry.get("end_lap_time") or ""),
    )


def load_race_config(path: Path | None = None) -> RaceInputs:
    """Load race inputs from a YAML file.

    The file holds a ``race`` mapping with the :class:`RaceInputs` fields
    and a ``compounds`` list of compound definitions.  Optional fields may
    be omitted or ``null``; their defaults are applied at simulation time.

    Args:
        path: Optional override for the configuration file path.

    Returns:
        The parsed :class:`RaceInputs`.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a required field is missing or not numeric.
    """
    config_path = path or DEFAULT_RACE_PATH
    data = _read_yaml(config_path)

    race: dict[str, Any] = data.get("race") or {}
    values: dict[str, Any] = {
        field: _require_numeric(race, field, "Race section")
        for field in _REQUIRED_RACE_FIELDS
    }
    for field in _OPTIONAL_RACE_FIELDS:
        if race.get(field) is not None:
            values[field] = _require_numeric(race, field, "Race section")
    if values.get("mandatory_stops") is not None:
        values["mandatory_stops"] = int(values["mandatory_stops"])
    if values.get("current_lap") is not None:
        values["current_lap"] = int(values["current_lap"])

    compounds = tuple(
        _parse_compound(idx, entry)
        for idx, entry in enumerate(data.get("compounds") or [])
    )

    inputs = RaceInputs(
        compounds=compounds,
        mid_race_mode=bool(race.get("mid_race_mode", False)),
        **values,
    )
    logger.info(
        "Loaded race config %s: %.1f h, %d compounds",
        config_path,
        inputs.race_duration_hours,
        len(compounds),
    )
    return inputs


# ---------------------------------------------------------------------------
# Car presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CarPreset:
    """Built-in car fuel and tyre-wear figures.

    Attributes:
        id: Short preset key.
        name: Car name.
        tank_size: Fuel tank capacity in liters.
        laps_per_full_tank: Laps per full tank at fuel map 1.0.
        race_duration_hours: Typical race length for the car.
        tire_wear_laps: Tyre life of the first active compound on this
            car.  ``None`` leaves tyre lives untouched.
    """

    id: str
    name: str
    tank_size: float
    laps_per_full_tank: float
    race_duration_hours: float
    tire_wear_laps: float | None = None

    def apply(self, inputs: RaceInputs) -> RaceInputs:
        """Return *inputs* with this car's fuel figures, race length and tyre wear.

        Tyre lives are rescaled by ``tire_wear_laps / base``, where *base*
        is the tyre life of the first active compound (30 when none is
        active).  Scaled lives round half up and never drop below one lap;
        disabled compounds stay at zero.
        """
        compounds = inputs.compounds
        if self.tire_wear_laps is not None:
            compounds = _rescale_tire_life(compounds, self.tire_wear_laps)
        return replace(
            inputs,
            tank_size=self.tank_size,
            laps_per_full_tank=self.laps_per_full_tank,
            race_duration_hours=self.race_duration_hours,
            compounds=compounds,
        )


def _rescale_tire_life(
    compounds: tuple[CompoundInput, ...], tire_wear_laps: float
) -> tuple[CompoundInput, ...]:
    lives = [as_number(c.tire_life) or 0.0 for c in compounds]
    base = next((life for life in lives if life > 0), _DEFAULT_TIRE_WEAR_BASE)
    ratio = tire_wear_laps / base
    return tuple(
        replace(c, tire_life=max(1, math.floor(life * ratio + 0.5)) if life > 0 else 0)
        for c, life in zip(compounds, lives)
    )


def load_car_presets(path: Path | None = None) -> list[CarPreset]:
    """Load the built-in car presets from a YAML file.

    Args:
        path: Optional override for the presets file path.

    Returns:
        List of :class:`CarPreset` in file order.

    Raises:
        FileNotFoundError: If the presets file does not exist.
        ValueError: If an entry is missing fields or has non-positive values.
    """
    data = _read_yaml(path or CAR_PRESETS_PATH)
    presets: list[CarPreset] = []

    for idx, entry in enumerate(data.get("presets") or []):
        for field in _REQUIRED_PRESET_FIELDS:
            if field not in entry:
                raise ValueError(
                    f"Preset entry {idx} ({entry.get('name', '<unknown>')}) "
                    f"is missing required field '{field}'"
                )
        where = f"Preset entry {idx} ({entry['name']})"
        numbers = {
            field: _require_numeric(entry, field, where)
            for field in ("tank_size", "laps_per_full_tank", "race_duration_hours")
        }
        for field, value in numbers.items():
            if value <= 0:
                raise ValueError(f"{where}: '{field}' must be > 0, got {value}")
        if entry.get("tire_wear_laps") is not None:
            numbers["tire_wear_laps"] = _require_numeric(entry, "tire_wear_laps", where)
            if numbers["tire_wear_laps"] <= 0:
                raise ValueError(
                    f"{where}: 'tire_wear_laps' must be > 0, got {numbers['tire_wear_laps']}"
                )
        presets.append(CarPreset(id=str(entry["id"]), name=str(entry["name"]), **numbers))

    return presets
