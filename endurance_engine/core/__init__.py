"""Core modules of the endurance strategy engine."""

from endurance_engine.core.compound import (
    TIRE_COMPOUNDS,
    CompoundInput,
    CompoundPlan,
    CompoundSpec,
    safe_tire_laps,
)
from endurance_engine.core.inputs import DEFAULTS, InputDefaults, RaceInputs
from endurance_engine.core.laptime import (
    average_lap_time,
    format_lap_time,
    format_race_time,
    parse_lap_time,
)
from endurance_engine.core.pit import calc_pit_stop_time
from endurance_engine.core.search import (
    compute_strategy,
    enumerate_compound_plans,
    find_best_strategies,
    rank_plans,
)
from endurance_engine.core.simulator import (
    SimulationParameters,
    SimulationState,
    initial_state,
    simulate_plan,
    step,
)
from endurance_engine.core.stint import FinalStint, IntermediateStint, Stint
from endurance_engine.core.strategy import (
    RankedStrategy,
    StrategyReport,
    StrategyResult,
)

__all__ = [
    "CompoundInput",
    "CompoundPlan",
    "CompoundSpec",
    "DEFAULTS",
    "FinalStint",
    "InputDefaults",
    "IntermediateStint",
    "RaceInputs",
    "RankedStrategy",
    "SimulationParameters",
    "SimulationState",
    "Stint",
    "StrategyReport",
    "StrategyResult",
    "TIRE_COMPOUNDS",
    "average_lap_time",
    "calc_pit_stop_time",
    "compute_strategy",
    "enumerate_compound_plans",
    "find_best_strategies",
    "format_lap_time",
    "format_race_time",
    "initial_state",
    "parse_lap_time",
    "rank_plans",
    "safe_tire_laps",
    "simulate_plan",
    "step",
]
