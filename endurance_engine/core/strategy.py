"""Strategy result containers for the endurance strategy engine."""

from __future__ import annotations

from dataclasses import dataclass

from endurance_engine.core.stint import Stint


@dataclass(frozen=True)
class StrategyResult:
    """Aggregate outcome of simulating one compound plan.

    Attributes:
        total_laps: Last lap of the race (``stints[-1].end_lap``).
        num_pit_stops: Number of stints that end in a pit stop.
        total_time_lost_secs: Sum of all pit-stop durations.
        total_driving_time_secs: Sum of all lap times driven.
        est_total_race_time_secs: Driving plus pit time.
        effective_laps_per_tank: Laps per full tank after the fuel map.
        laps_per_tire_set: Tyre-safe laps of the longest-lived compound
            in the plan (reporting only).
        stints: Ordered stint records; the last one is final.
    """

    total_laps: int
    num_pit_stops: int
    total_time_lost_secs: float
    total_driving_time_secs: float
    est_total_race_time_secs: float
    effective_laps_per_tank: int
    laps_per_tire_set: int
    stints: tuple[Stint, ...]

    @property
    def has_warnings(self) -> bool:
        return any(stint.warning for stint in self.stints)


@dataclass(frozen=True)
class RankedStrategy:
    """A simulated strategy as presented to the caller.

    Attributes:
        label: Compound sequence with consecutive repeats collapsed,
            e.g. ``"Hard → Medium"``.
        compound_ids: Distinct compound ids actually driven, in first-use
            order.
        strategy: The underlying simulation result.
    """

    label: str
    compound_ids: tuple[str, ...]
    strategy: StrategyResult


@dataclass(frozen=True)
class StrategyReport:
    """Ranked strategies with the best one singled out."""

    ranked: tuple[RankedStrategy, ...]
    best: RankedStrategy
