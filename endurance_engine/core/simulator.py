"""Deterministic stint simulator for the endurance strategy engine.

The simulator turns one compound plan into a full stint schedule for a
race of fixed duration.  It is written as a fold: :func:`step` takes an
immutable :class:`SimulationState`, drives one stint, and returns the next
state together with the stint it emitted.  :func:`simulate_plan` repeats
``step`` until the final stint has been produced.

Each stint reconciles three independent limits:

* **Fuel** -- laps left on the current fuel load.
* **Tyres** -- tyre-safe laps left on the current set.
* **Pacing** -- when mandatory stops remain, the estimated laps to the
  finish split evenly among the remaining stops plus one.

If the pacing limit is the tightest, the car stops there (changing tyres
only when the set is within three laps of its limit).  Otherwise fuel and
tyre limits within three laps of each other are merged into one stop with
a tyre change; a fuel limit that comes first stops for fuel only, a tyre
limit that comes first stops for tyres.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from endurance_engine.core.compound import CompoundPlan, validate_plan
from endurance_engine.core.pit import calc_pit_stop_time
from endurance_engine.core.stint import (
    FUEL_CAPACITY_WARNING,
    FinalStint,
    IntermediateStint,
    Stint,
)
from endurance_engine.core.strategy import StrategyResult

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MERGE_WINDOW_LAPS: int = 3  # fuel/tyre stops this close are merged
UNBOUNDED_STINT_LAPS: int = 9999  # pacing limit when no mandatory stop remains
FUEL_SAFETY_MARGIN_LITERS: float = 0.5

# ---------------------------------------------------------------------------
# Parameters and state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationParameters:
    """Race-wide inputs shared by every simulated plan.

    Attributes:
        target_race_time_secs: Race duration in seconds (> 0).
        tank_size: Fuel tank capacity in liters (> 0).
        effective_laps_per_tank: Laps covered by a full tank (>= 1).
        effective_liters_per_lap: Fuel used per lap in liters (> 0).
        pit_base_secs: Fixed pit-stop cost.
        tire_change_secs: Additional time for a tyre change.
        fuel_rate_liters_per_sec: Refuelling flow rate.
        mandatory_stops: Number of stops the race requires (>= 0).
        start_lap_offset: Lap the simulation starts on (>= 1).
        initial_fuel: Fuel on board at the start, in liters.  ``None``
            means a full first stint of ``effective_laps_per_tank`` laps.
    """

    target_race_time_secs: float
    tank_size: float
    effective_laps_per_tank: int
    effective_liters_per_lap: float
    pit_base_secs: float = 25.0
    tire_change_secs: float = 27.0
    fuel_rate_liters_per_sec: float = 4.0
    mandatory_stops: int = 0
    start_lap_offset: int = 1
    initial_fuel: float | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.target_race_time_secs) or self.target_race_time_secs <= 0:
            raise ValueError("target_race_time_secs must be finite and > 0.")
        if self.tank_size <= 0:
            raise ValueError("tank_size must be > 0.")
        if self.effective_laps_per_tank < 1:
            raise ValueError("effective_laps_per_tank must be >= 1.")
        if not math.isfinite(self.effective_liters_per_lap) or self.effective_liters_per_lap <= 0:
            raise ValueError("effective_liters_per_lap must be finite and > 0.")
        if self.mandatory_stops < 0:
            raise ValueError("mandatory_stops must be >= 0.")
        if self.start_lap_offset < 1:
            raise ValueError("start_lap_offset must be >= 1.")
        if self.initial_fuel is not None and self.initial_fuel < 0:
            raise ValueError("initial_fuel must be >= 0.")


@dataclass(frozen=True)
class SimulationState:
    """Snapshot of the simulation between two stints.

    Attributes:
        current_lap: First lap of the next stint.
        elapsed_secs: Race clock, driving plus pit time.
        compound_index: Index of the fitted compound in the plan.
        tire_laps_left: Tyre-safe laps left on the fitted set.
        fuel_laps_left: Laps the fuel on board covers.
        total_time_lost_secs: Cumulative pit time.
        total_driving_time_secs: Cumulative driving time.
        pits_done: Pit stops completed so far.
        finished: Whether the final stint has been emitted.
    """

    current_lap: int
    elapsed_secs: float
    compound_index: int
    tire_laps_left: int
    fuel_laps_left: int
    total_time_lost_secs: float = 0.0
    total_driving_time_secs: float = 0.0
    pits_done: int = 0
    finished: bool = False


# ---------------------------------------------------------------------------
# Decision helpers
# ---------------------------------------------------------------------------


def _pacing_limit(est_remaining_laps: int, required_stops: int) -> int:
    """Laps per stint that spread the remaining mandatory stops evenly."""
    if required_stops > 0 and est_remaining_laps > 0:
        return math.ceil(est_remaining_laps / (required_stops + 1))
    return UNBOUNDED_STINT_LAPS


def _stint_decision(
    pacing_limit: int, fuel_laps: int, tire_laps: int
) -> tuple[int, bool]:
    """Choose a stint length and whether it ends with a tyre change.

    Args:
        pacing_limit: Mandatory-stop pacing limit in laps.
        fuel_laps: Laps until the fuel runs out.
        tire_laps: Laps until the tyres reach their safe limit.

    Returns:
        ``(laps, change_tires)``.
    """
    if pacing_limit < fuel_laps and pacing_limit < tire_laps:
        return pacing_limit, pacing_limit >= tire_laps - MERGE_WINDOW_LAPS
    if abs(fuel_laps - tire_laps) <= MERGE_WINDOW_LAPS:
        return min(fuel_laps, tire_laps), True
    if fuel_laps < tire_laps:
        return fuel_laps, False
    return tire_laps, True


# ---------------------------------------------------------------------------
# Fold
# ---------------------------------------------------------------------------


def initial_state(plan: CompoundPlan, params: SimulationParameters) -> SimulationState:
    """Build the state before the first stint of *plan*.

    With an initial fuel load (mid-race continuation) the first stint's
    fuel range is ``floor(initial_fuel / liters_per_lap)`` laps instead of
    a full tank.  The fuel range is never below one lap.
    """
    validate_plan(plan)
    if params.initial_fuel is not None:
        fuel_laps = math.floor(params.initial_fuel / params.effective_liters_per_lap)
    else:
        fuel_laps = params.effective_laps_per_tank
    return SimulationState(
        current_lap=params.start_lap_offset,
        elapsed_secs=0.0,
        compound_index=0,
        tire_laps_left=plan[0].safe_laps,
        fuel_laps_left=max(fuel_laps, 1),
    )


def step(
    state: SimulationState,
    plan: CompoundPlan,
    params: SimulationParameters,
) -> tuple[SimulationState, Stint]:
    """Drive one stint and return ``(next_state, stint)``.

    The stint runs lap by lap to the chosen stop lap.  If the race clock
    reaches the target duration first, the stint is final and no pit stop
    is made.  Otherwise the stop is planned: the next compound, whether
    tyres really need changing, the next stint's length and the fuel
    needed for it.

    Raises:
        ValueError: If *state* is already finished.
    """
    if state.finished:
        raise ValueError("Cannot step a finished simulation.")

    active = plan[state.compound_index]
    target = params.target_race_time_secs
    current_lap = state.current_lap

    # 1. Limits for this stint
    est_laps_to_finish = math.ceil((target - state.elapsed_secs) / active.avg_lap_time_secs)
    pacing_limit = _pacing_limit(est_laps_to_finish, params.mandatory_stops - state.pits_done)
    planned_laps, change_tires = _stint_decision(
        pacing_limit, state.fuel_laps_left, state.tire_laps_left
    )
    target_stop_lap = max(current_lap + planned_laps - 1, current_lap)

    # 2. Drive lap by lap against the race clock
    laps_in_stint = 0
    stint_driving_secs = 0.0
    is_last = False
    for _ in range(current_lap, target_stop_lap + 1):
        stint_driving_secs += active.avg_lap_time_secs
        laps_in_stint += 1
        if state.elapsed_secs + stint_driving_secs >= target:
            is_last = True
            break

    end_lap = current_lap + laps_in_stint - 1
    elapsed_secs = state.elapsed_secs + stint_driving_secs
    total_driving_time_secs = state.total_driving_time_secs + stint_driving_secs

    warning: str | None = None
    if laps_in_stint * params.effective_liters_per_lap > params.tank_size:
        warning = FUEL_CAPACITY_WARNING

    stint_fields = dict(
        stint_num=state.pits_done + 1,
        start_lap=current_lap,
        end_lap=end_lap,
        compound_id=active.id,
        compound_name=active.name,
        avg_lap_time_secs=active.avg_lap_time_secs,
        warning=warning,
    )

    if is_last:
        next_state = replace(
            state,
            current_lap=end_lap + 1,
            elapsed_secs=elapsed_secs,
            total_driving_time_secs=total_driving_time_secs,
            finished=True,
        )
        return next_state, FinalStint(**stint_fields)

    # 3. Plan the pit stop
    pits_done = state.pits_done + 1
    time_remaining_at_pit = target - elapsed_secs
    if change_tires and state.compound_index + 1 < len(plan):
        next_index = state.compound_index + 1
    else:
        next_index = state.compound_index
    next_compound = plan[next_index]
    est_remaining_laps = math.ceil(time_remaining_at_pit / next_compound.avg_lap_time_secs)

    tire_life_left = state.tire_laps_left - laps_in_stint
    is_compound_switch = active.id != next_compound.id
    # Same compound that would last to the finish: keep the set on.
    if change_tires and not is_compound_switch and est_remaining_laps <= tire_life_left:
        change_tires = False
    tires_changed = change_tires or is_compound_switch

    next_pacing_limit = _pacing_limit(est_remaining_laps, params.mandatory_stops - pits_done)
    if tires_changed:
        next_tire_cap = next_compound.safe_laps
    else:
        next_tire_cap = tire_life_left
    next_tire_cap = max(next_tire_cap, 1)

    next_stint_laps, _ = _stint_decision(
        next_pacing_limit, params.effective_laps_per_tank, next_tire_cap
    )
    laps_in_next_stint = min(next_stint_laps, est_remaining_laps)

    raw_fuel = laps_in_next_stint * params.effective_liters_per_lap + FUEL_SAFETY_MARGIN_LITERS
    fuel_to_add_liters = min(raw_fuel, params.tank_size)

    pit_stop_time_secs = calc_pit_stop_time(
        params.pit_base_secs,
        tires_changed,
        params.tire_change_secs,
        fuel_to_add_liters,
        params.fuel_rate_liters_per_sec,
    )

    # 4. Carry tyre and fuel state into the next stint
    if tires_changed:
        compound_index = next_index
        tire_laps_left = plan[compound_index].safe_laps
    else:
        compound_index = state.compound_index
        tire_laps_left = state.tire_laps_left - laps_in_stint

    if fuel_to_add_liters >= params.tank_size:
        fuel_laps_left = params.effective_laps_per_tank
    else:
        fuel_laps_left = laps_in_next_stint

    next_state = SimulationState(
        current_lap=end_lap + 1,
        elapsed_secs=elapsed_secs + pit_stop_time_secs,
        compound_index=compound_index,
        tire_laps_left=tire_laps_left,
        fuel_laps_left=max(fuel_laps_left, 1),
        total_time_lost_secs=state.total_time_lost_secs + pit_stop_time_secs,
        total_driving_time_secs=total_driving_time_secs,
        pits_done=pits_done,
    )
    stint = IntermediateStint(
        **stint_fields,
        fuel_to_add_liters=fuel_to_add_liters,
        tires_changed=tires_changed,
        pit_stop_time_secs=pit_stop_time_secs,
    )
    return next_state, stint


def simulate_plan(plan: CompoundPlan, params: SimulationParameters) -> StrategyResult:
    """Simulate *plan* from the start lap until the race clock expires.

    If a pit stop carries the clock past the target duration, the car
    still completes one more lap to take the flag, so every result ends
    with exactly one :class:`FinalStint`.

    Args:
        plan: Ordered compounds to run (1-3 entries, no adjacent repeats).
        params: Race-wide simulation parameters.

    Returns:
        The aggregated :class:`StrategyResult`.

    Raises:
        ValueError: If *plan* is structurally invalid.
    """
    state = initial_state(plan, params)
    stints: list[Stint] = []
    while not state.finished:
        state, stint = step(state, plan, params)
        stints.append(stint)

    return StrategyResult(
        total_laps=stints[-1].end_lap,
        num_pit_stops=sum(1 for s in stints if not s.is_final),
        total_time_lost_secs=state.total_time_lost_secs,
        total_driving_time_secs=state.total_driving_time_secs,
        est_total_race_time_secs=state.elapsed_secs,
        effective_laps_per_tank=params.effective_laps_per_tank,
        laps_per_tire_set=max(c.safe_laps for c in plan),
        stints=tuple(stints),
    )
