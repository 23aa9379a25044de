"""Tyre compound model for the endurance strategy engine.

A :class:`CompoundInput` is what a race engineer types in: tyre life plus
three sampled lap times (fresh, half-worn, end of life).  The engine works
on :class:`CompoundSpec`, which reduces the samples to one representative
average lap time.

All tyre-life figures are used at 90% of nominal (:data:`TIRE_SAFETY_FACTOR`)
to leave a margin for in-session degradation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from endurance_engine.core.laptime import average_lap_time, parse_lap_time

TIRE_SAFETY_FACTOR: float = 0.9

# ---------------------------------------------------------------------------
# Built-in compound registry (id -> display name)
# ---------------------------------------------------------------------------

TIRE_COMPOUNDS: dict[str, str] = {
    "H": "Hard",
    "M": "Medium",
    "S": "Soft",
    "IM": "Intermediate",
    "W": "Wet",
}


def safe_tire_laps(tire_life: float) -> int:
    """Actionable wear limit: ``floor(tire_life * 0.9)``."""
    return math.floor(tire_life * TIRE_SAFETY_FACTOR)


@dataclass(frozen=True)
class CompoundSpec:
    """Immutable compound description used by the simulator.

    Attributes:
        id: Compound identifier (e.g. ``"H"``).
        name: Display name (e.g. ``"Hard"``).
        tire_life: Nominal tyre life in laps (> 0).
        avg_lap_time_secs: Representative lap time on this compound (> 0).
    """

    id: str
    name: str
    tire_life: float
    avg_lap_time_secs: float

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Compound id must be non-empty.")
        if not math.isfinite(self.tire_life) or self.tire_life <= 0:
            raise ValueError("tire_life must be a positive number.")
        if not math.isfinite(self.avg_lap_time_secs) or self.avg_lap_time_secs <= 0:
            raise ValueError("avg_lap_time_secs must be a positive number.")

    @property
    def safe_laps(self) -> int:
        """Tyre-safe laps for a fresh set of this compound."""
        return safe_tire_laps(self.tire_life)


@dataclass(frozen=True)
class CompoundInput:
    """Caller-supplied compound definition.

    Attributes:
        id: Compound identifier.
        name: Fallback display name for ids outside :data:`TIRE_COMPOUNDS`.
        tire_life: Nominal tyre life in laps.  ``0`` disables the compound.
        mandatory: Whether every strategy must run this compound.
        start_lap_time: Lap-time text on fresh tyres.
        half_lap_time: Lap-time text at half life.
        end_lap_time: Lap-time text at end of life.
    """

    id: str
    name: str = ""
    tire_life: float = 0
    mandatory: bool = False
    start_lap_time: str = ""
    half_lap_time: str = ""
    end_lap_time: str = ""

    @property
    def display_name(self) -> str:
        return TIRE_COMPOUNDS.get(self.id) or self.name or self.id

    @property
    def avg_lap_time_secs(self) -> float:
        return average_lap_time(
            parse_lap_time(self.start_lap_time),
            parse_lap_time(self.half_lap_time),
            parse_lap_time(self.end_lap_time),
        )

    @property
    def is_active(self) -> bool:
        """Enabled with a positive tyre life and a usable lap time."""
        try:
            tire_life = float(self.tire_life)
        except (TypeError, ValueError):
            return False
        avg = self.avg_lap_time_secs
        return (
            math.isfinite(tire_life)
            and tire_life > 0
            and math.isfinite(avg)
            and avg > 0
        )

    def to_spec(self) -> CompoundSpec:
        """Build the simulator-facing :class:`CompoundSpec`.

        Raises:
            ValueError: If the compound is not active.
        """
        return CompoundSpec(
            id=self.id,
            name=self.display_name,
            tire_life=float(self.tire_life),
            avg_lap_time_secs=self.avg_lap_time_secs,
        )


# An ordered sequence of 1-3 compounds a strategy intends to run.
CompoundPlan = tuple[CompoundSpec, ...]

MAX_PLAN_LENGTH: int = 3


def validate_plan(plan: CompoundPlan) -> None:
    """Check the structural rules of a compound plan.

    Raises:
        ValueError: If the plan is empty, longer than
            :data:`MAX_PLAN_LENGTH`, or repeats a compound back-to-back.
    """
    if not 1 <= len(plan) <= MAX_PLAN_LENGTH:
        raise ValueError(f"A compound plan holds 1-{MAX_PLAN_LENGTH} compounds.")
    for prev, nxt in zip(plan, plan[1:]):
        if prev.id == nxt.id:
            raise ValueError(f"Compound {prev.id!r} repeats back-to-back in plan.")
