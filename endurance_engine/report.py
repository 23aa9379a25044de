"""Plain-text rendering of strategy results."""

from __future__ import annotations

from collections.abc import Sequence

from endurance_engine.core.laptime import format_lap_time, format_race_time
from endurance_engine.core.strategy import RankedStrategy, StrategyResult

_DASH = "-"


def format_stint_table(result: StrategyResult) -> str:
    """Render the stint plan as a fixed-width table.

    The final stint shows ``FINISH`` in the pit-lap column and dashes for
    the pit-related columns.  Stints with warnings are flagged with ``!``
    and the warnings are listed under the table.
    """
    header = (
        f"  {'Stint':>5}  {'Start':>5}  {'End':>5}  {'Laps':>4}  {'Pit Lap':>7}  "
        f"{'Fuel (L)':>8}  {'Tyres':>5}  {'Compound':<12}  {'Lap Time':>9}  {'Pit (s)':>7}"
    )
    lines = [header, "  " + "-" * (len(header) - 2)]
    notes: list[str] = []

    for stint in result.stints:
        if stint.is_final:
            pit_lap, fuel, tyres, pit_time = "FINISH", _DASH, _DASH, _DASH
        else:
            pit_lap = str(stint.pit_lap)
            fuel = f"+{stint.fuel_to_add_liters:.1f}" if stint.fuel_to_add_liters > 0 else _DASH
            tyres = "Yes" if stint.tires_changed else "No"
            pit_time = f"{stint.pit_stop_time_secs:.1f}"
        flag = "!" if stint.warning else " "
        lines.append(
            f"{flag} {stint.stint_num:>5}  {stint.start_lap:>5}  {stint.end_lap:>5}  "
            f"{stint.laps_in_stint:>4}  {pit_lap:>7}  {fuel:>8}  {tyres:>5}  "
            f"{stint.compound_name:<12}  {format_lap_time(stint.avg_lap_time_secs):>9}  "
            f"{pit_time:>7}"
        )
        if stint.warning:
            notes.append(f"  ! Stint {stint.stint_num}: {stint.warning}")

    return "\n".join(lines + notes)


def format_summary(ranked: Sequence[RankedStrategy], top: int = 5) -> str:
    """Summarise the best strategy and up to ``top - 1`` alternatives.

    Alternatives show their lap and race-time deltas to the best strategy.
    """
    if not ranked:
        return "No valid strategy for these inputs."

    best = ranked[0]
    res = best.strategy
    lines = [
        f"Best strategy : {best.label}",
        f"  Total laps        : {res.total_laps}",
        f"  Pit stops         : {res.num_pit_stops}",
        f"  Laps per tank     : {res.effective_laps_per_tank}",
        f"  Laps per tyre set : {res.laps_per_tire_set}",
        f"  Pit time lost     : {res.total_time_lost_secs / 60:.1f} min",
        f"  Est. race time    : {format_race_time(res.est_total_race_time_secs)}",
    ]
    if res.has_warnings:
        lines.append("  Warning: strategy has warnings, check the stint table")

    alternatives = ranked[1:top]
    if alternatives:
        lines.append("")
        lines.append("Alternatives:")
        for pos, alt in enumerate(alternatives, start=2):
            lap_delta = alt.strategy.total_laps - res.total_laps
            time_delta = alt.strategy.est_total_race_time_secs - res.est_total_race_time_secs
            lines.append(
                f"  {pos:2d}) {alt.label:<32} {alt.strategy.total_laps:4d} laps "
                f"({lap_delta:+d})  {alt.strategy.num_pit_stops:2d} stops  "
                f"{time_delta:+8.1f}s"
            )

    return "\n".join(lines)
