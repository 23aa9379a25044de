"""Stint records produced by the simulator.

A stint is either an :class:`IntermediateStint`, which ends in a pit stop,
or a :class:`FinalStint`, which ends at the chequered flag.  Both expose
the same read-only attributes so reporting code can treat them uniformly;
the final variant reports the neutral pit values (no pit lap, no fuel, no
tyre change, zero pit time).
"""

from __future__ import annotations

from dataclasses import dataclass

FUEL_CAPACITY_WARNING: str = "Fuel required exceeds tank capacity"


@dataclass(frozen=True)
class IntermediateStint:
    """A stint that ends with a pit stop on its last lap.

    Attributes:
        stint_num: 1-based position in the strategy.
        start_lap: First lap of the stint (inclusive).
        end_lap: Last lap of the stint (inclusive); the pit lap.
        compound_id: Compound driven during the stint.
        compound_name: Display name of that compound.
        avg_lap_time_secs: Lap time used for the stint.
        warning: Diagnostic message, or ``None``.
        fuel_to_add_liters: Fuel added at the closing stop.
        tires_changed: Whether tyres are changed at the closing stop.
        pit_stop_time_secs: Duration of the closing stop.
    """

    stint_num: int
    start_lap: int
    end_lap: int
    compound_id: str
    compound_name: str
    avg_lap_time_secs: float
    warning: str | None
    fuel_to_add_liters: float
    tires_changed: bool
    pit_stop_time_secs: float

    @property
    def laps_in_stint(self) -> int:
        return self.end_lap - self.start_lap + 1

    @property
    def pit_lap(self) -> int:
        return self.end_lap

    @property
    def is_final(self) -> bool:
        return False


@dataclass(frozen=True)
class FinalStint:
    """The last stint of a strategy, ending at the finish."""

    stint_num: int
    start_lap: int
    end_lap: int
    compound_id: str
    compound_name: str
    avg_lap_time_secs: float
    warning: str | None

    @property
    def laps_in_stint(self) -> int:
        return self.end_lap - self.start_lap + 1

    @property
    def pit_lap(self) -> None:
        return None

    @property
    def fuel_to_add_liters(self) -> float:
        return 0.0

    @property
    def tires_changed(self) -> bool:
        return False

    @property
    def pit_stop_time_secs(self) -> float:
        return 0.0

    @property
    def is_final(self) -> bool:
        return True


Stint = IntermediateStint | FinalStint
