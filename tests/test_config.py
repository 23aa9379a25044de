"""Tests for the YAML configuration loaders and the input defaults table."""

from dataclasses import replace
from pathlib import Path

import pytest

import endurance_engine
from endurance_engine.config import (
    CAR_PRESETS_PATH,
    DATA_DIR,
    DEFAULT_RACE_PATH,
    CarPreset,
    load_car_presets,
    load_race_config,
)
from endurance_engine.core.compound import CompoundInput
from endurance_engine.core.inputs import DEFAULTS, RaceInputs, or_default

# ---------------------------------------------------------------------------
# Defaults table
# ---------------------------------------------------------------------------


def test_or_default_replaces_falsy_values() -> None:
    assert or_default(None, 25.0) == 25.0
    assert or_default("", 25.0) == 25.0
    assert or_default(0, 25.0) == 25.0
    assert or_default("abc", 25.0) == 25.0
    assert or_default(float("nan"), 25.0) == 25.0
    assert or_default("30", 25.0) == 30.0
    assert or_default(12.5, 25.0) == 12.5


def test_parameters_fall_back_to_defaults() -> None:
    """Empty optional fields resolve to 25 s / 27 s / 4 L/s / 1.0 / 0 stops."""
    params = RaceInputs(race_duration_hours=8, tank_size=75, laps_per_full_tank=22).to_parameters()

    assert params.pit_base_secs == DEFAULTS.pit_base_secs == 25.0
    assert params.tire_change_secs == DEFAULTS.tire_change_secs == 27.0
    assert params.fuel_rate_liters_per_sec == DEFAULTS.fuel_rate_liters_per_sec == 4.0
    assert params.mandatory_stops == DEFAULTS.mandatory_stops == 0
    assert params.effective_laps_per_tank == 22
    assert params.effective_liters_per_lap == pytest.approx(75 / 22)
    assert params.target_race_time_secs == 28800
    assert params.start_lap_offset == 1
    assert params.initial_fuel is None


def test_fuel_map_scales_consumption() -> None:
    """A 2.0 fuel map halves the laps per tank and doubles liters per lap."""
    inputs = RaceInputs(race_duration_hours=8, tank_size=75, laps_per_full_tank=22, fuel_map=2.0)
    assert inputs.effective_laps_per_tank == 11
    assert inputs.effective_liters_per_lap == pytest.approx(75 / 22 * 2)


def test_mid_race_fields_only_apply_in_mid_race_mode() -> None:
    inputs = RaceInputs(
        race_duration_hours=8, tank_size=75, laps_per_full_tank=22,
        current_lap=45, current_fuel=28.5,
    )
    assert inputs.start_lap_offset == 1
    assert inputs.initial_fuel is None

    mid = RaceInputs(
        race_duration_hours=8, tank_size=75, laps_per_full_tank=22,
        mid_race_mode=True, current_lap=45, current_fuel=28.5,
    )
    assert mid.start_lap_offset == 45
    assert mid.initial_fuel == 28.5


def test_mid_race_without_lap_starts_at_one() -> None:
    mid = RaceInputs(
        race_duration_hours=8, tank_size=75, laps_per_full_tank=22,
        mid_race_mode=True, current_lap=None, current_fuel=None,
    )
    assert mid.start_lap_offset == 1
    assert mid.initial_fuel is None


# ---------------------------------------------------------------------------
# Race configuration files
# ---------------------------------------------------------------------------


def test_default_race_config_loads() -> None:
    inputs = load_race_config()

    assert inputs.race_duration_hours == 8
    assert inputs.tank_size == 100
    assert inputs.laps_per_full_tank == 28
    assert inputs.mandatory_stops == 1
    assert inputs.tire_change_secs == 5
    assert [c.id for c in inputs.compounds] == ["H", "M", "S", "IM", "W"]
    assert [c.id for c in inputs.active_compounds()] == ["H", "M", "S"]
    assert not inputs.mid_race_mode


def test_race_config_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_race_config(Path("/nonexistent/race.yaml"))


def test_bundled_data_ships_inside_the_package() -> None:
    """The YAML files live under the package so an installed wheel carries them."""
    package_dir = Path(endurance_engine.__file__).resolve().parent
    assert DATA_DIR == package_dir / "data"
    assert DEFAULT_RACE_PATH.is_file()
    assert CAR_PRESETS_PATH.is_file()


def test_race_config_missing_required_field(tmp_path: Path) -> None:
    path = tmp_path / "race.yaml"
    path.write_text("race:\n  race_duration_hours: 6\n  tank_size: 80\n", encoding="utf-8")
    with pytest.raises(ValueError, match="laps_per_full_tank"):
        load_race_config(path)


def test_race_config_rejects_non_numeric(tmp_path: Path) -> None:
    path = tmp_path / "race.yaml"
    path.write_text(
        "race:\n  race_duration_hours: six\n  tank_size: 80\n  laps_per_full_tank: 20\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="race_duration_hours"):
        load_race_config(path)


def test_race_config_mandatory_compound(tmp_path: Path) -> None:
    path = tmp_path / "race.yaml"
    path.write_text(
        "race:\n"
        "  race_duration_hours: 2\n"
        "  tank_size: 80\n"
        "  laps_per_full_tank: 20\n"
        "  mid_race_mode: true\n"
        "  current_lap: 12\n"
        "  current_fuel: 40\n"
        "compounds:\n"
        "  - {id: M, tire_life: 40, mandatory: true, start_lap_time: '1:58'}\n",
        encoding="utf-8",
    )
    inputs = load_race_config(path)

    assert inputs.mandatory_ids() == frozenset({"M"})
    assert inputs.compounds[0].display_name == "Medium"
    assert inputs.start_lap_offset == 12
    assert inputs.initial_fuel == 40.0


# ---------------------------------------------------------------------------
# Car presets
# ---------------------------------------------------------------------------


def test_car_presets_load() -> None:
    presets = load_car_presets()
    assert [p.id for p in presets] == ["gr010", "p4", "rx500"]
    gr010 = presets[0]
    assert gr010.tank_size == 75
    assert gr010.laps_per_full_tank == 22


def test_preset_apply_replaces_fuel_figures() -> None:
    preset = CarPreset("gr010", "GR010 Hybrid", 75, 22, 6)
    inputs = preset.apply(load_race_config())

    assert inputs.tank_size == 75
    assert inputs.laps_per_full_tank == 22
    assert inputs.race_duration_hours == 6
    assert [c.tire_life for c in inputs.compounds] == [60, 40, 25, 0, 0]


def test_preset_apply_rescales_tire_life() -> None:
    """Hard 60 becomes the car's 35 laps; Medium and Soft scale by 35/60."""
    gr010 = load_car_presets()[0]
    inputs = gr010.apply(load_race_config())

    assert gr010.tire_wear_laps == 35
    assert [c.tire_life for c in inputs.compounds] == [35, 23, 15, 0, 0]
    assert [c.id for c in inputs.active_compounds()] == ["H", "M", "S"]


def test_preset_rescale_keeps_at_least_one_lap() -> None:
    """Scaled lives never round down to zero; disabled compounds stay disabled."""
    compounds = (
        CompoundInput("H", tire_life=60),
        CompoundInput("S", tire_life=1),
        CompoundInput("W", tire_life=0),
    )
    inputs = RaceInputs(race_duration_hours=8, tank_size=75, laps_per_full_tank=22,
                        compounds=compounds)
    preset = CarPreset("x", "X", 75, 22, 8, tire_wear_laps=10)

    assert [c.tire_life for c in preset.apply(inputs).compounds] == [10, 1, 0]
    all_disabled = replace(inputs, compounds=compounds[2:])
    assert [c.tire_life for c in preset.apply(all_disabled).compounds] == [0]


def test_preset_rejects_non_positive_values(tmp_path: Path) -> None:
    path = tmp_path / "presets.yaml"
    path.write_text(
        "presets:\n"
        "  - {id: x, name: X, tank_size: 0, laps_per_full_tank: 10, race_duration_hours: 1}\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="tank_size"):
        load_car_presets(path)
