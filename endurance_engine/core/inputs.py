"""Caller-facing race inputs and their documented defaults.

:class:`RaceInputs` is the flat record a front end fills in.  Values may
be missing, zero or half-typed; every numeric field is resolved through
:func:`or_default` against the :data:`DEFAULTS` table, so an invalid
field falls back to a documented value instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from endurance_engine.core.compound import CompoundInput, CompoundSpec
from endurance_engine.core.simulator import SimulationParameters


@dataclass(frozen=True)
class InputDefaults:
    """Fallbacks for optional fields left empty or zero."""

    pit_base_secs: float = 25.0
    tire_change_secs: float = 27.0
    fuel_rate_liters_per_sec: float = 4.0
    fuel_map: float = 1.0
    mandatory_stops: int = 0


DEFAULTS = InputDefaults()


def as_number(value: Any) -> float | None:
    """Coerce *value* to a finite float, or ``None`` if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def or_default(value: Any, default: float) -> float:
    """Return *value* as a float, or *default* when it is empty, zero or invalid."""
    return as_number(value) or default


@dataclass(frozen=True)
class RaceInputs:
    """Flat race configuration as supplied by the caller.

    Attributes:
        race_duration_hours: Race length in hours.
        tank_size: Fuel tank capacity in liters.
        laps_per_full_tank: Laps a full tank lasts at fuel map 1.0.
        compounds: Compound definitions; inactive ones are ignored.
        fuel_map: Fuel-consumption multiplier (1.0 = nominal).
        pit_base_secs: Fixed pit-stop cost in seconds.
        tire_change_secs: Extra seconds for a tyre change.
        fuel_rate_liters_per_sec: Refuelling flow rate.
        mandatory_stops: Number of required pit stops.
        mid_race_mode: Re-plan from the current lap and fuel level.
        current_lap: Lap to resume from in mid-race mode.
        current_fuel: Fuel on board in mid-race mode, in liters.
    """

    race_duration_hours: float
    tank_size: float
    laps_per_full_tank: float
    compounds: tuple[CompoundInput, ...] = ()
    fuel_map: float | None = None
    pit_base_secs: float | None = None
    tire_change_secs: float | None = None
    fuel_rate_liters_per_sec: float | None = None
    mandatory_stops: int | None = None
    mid_race_mode: bool = False
    current_lap: int | None = None
    current_fuel: float | None = None

    # -- Derived race figures -------------------------------------------------

    @property
    def target_race_time_secs(self) -> float:
        secs = (as_number(self.race_duration_hours) or 0.0) * 3600
        return secs if math.isfinite(secs) else 0.0

    @property
    def resolved_fuel_map(self) -> float:
        return or_default(self.fuel_map, DEFAULTS.fuel_map)

    @property
    def effective_laps_per_tank(self) -> int:
        """Laps per full tank after the fuel map: ``floor(laps / fuel_map)``."""
        laps = as_number(self.laps_per_full_tank) or 0.0
        ratio = laps / self.resolved_fuel_map
        return math.floor(ratio) if math.isfinite(ratio) else 0

    @property
    def effective_liters_per_lap(self) -> float:
        laps = as_number(self.laps_per_full_tank) or 0.0
        tank = as_number(self.tank_size) or 0.0
        if laps <= 0:
            return 0.0
        return tank / laps * self.resolved_fuel_map

    @property
    def start_lap_offset(self) -> int:
        if self.mid_race_mode:
            lap = as_number(self.current_lap)
            if lap:
                return max(int(lap), 1)
        return 1

    @property
    def initial_fuel(self) -> float | None:
        if self.mid_race_mode:
            fuel = as_number(self.current_fuel)
            if fuel is not None:
                return max(fuel, 0.0)
        return None

    # -- Compounds ------------------------------------------------------------

    def active_compounds(self) -> list[CompoundSpec]:
        """Enabled compounds (positive tyre life) in input order."""
        return [c.to_spec() for c in self.compounds if c.is_active]

    def mandatory_ids(self) -> frozenset[str]:
        return frozenset(c.id for c in self.compounds if c.mandatory)

    # -- Validation -----------------------------------------------------------

    def is_valid(self) -> bool:
        """Whether the inputs describe a race that can be simulated."""
        return (
            self.target_race_time_secs > 0
            and (as_number(self.tank_size) or 0.0) > 0
            and (as_number(self.laps_per_full_tank) or 0.0) > 0
            and self.effective_laps_per_tank > 0
            and math.isfinite(self.effective_liters_per_lap)
            and self._initial_fuel_laps_finite()
            and any(c.is_active for c in self.compounds)
        )

    def _initial_fuel_laps_finite(self) -> bool:
        fuel = self.initial_fuel
        liters_per_lap = self.effective_liters_per_lap
        if fuel is None or liters_per_lap <= 0:
            return True
        return math.isfinite(fuel / liters_per_lap)

    def to_parameters(self) -> SimulationParameters:
        """Resolve defaults into :class:`SimulationParameters`.

        Raises:
            ValueError: If the inputs are not valid (see :meth:`is_valid`).
        """
        return SimulationParameters(
            target_race_time_secs=self.target_race_time_secs,
            tank_size=as_number(self.tank_size) or 0.0,
            effective_laps_per_tank=self.effective_laps_per_tank,
            effective_liters_per_lap=self.effective_liters_per_lap,
            pit_base_secs=or_default(self.pit_base_secs, DEFAULTS.pit_base_secs),
            tire_change_secs=or_default(self.tire_change_secs, DEFAULTS.tire_change_secs),
            fuel_rate_liters_per_sec=or_default(
                self.fuel_rate_liters_per_sec, DEFAULTS.fuel_rate_liters_per_sec
            ),
            mandatory_stops=max(
                int(or_default(self.mandatory_stops, DEFAULTS.mandatory_stops)), 0
            ),
            start_lap_offset=self.start_lap_offset,
            initial_fuel=self.initial_fuel,
        )
