"""Pit-stop duration model."""

from __future__ import annotations


def calc_pit_stop_time(
    pit_base_secs: float,
    tires_changed: bool,
    tire_change_secs: float,
    fuel_to_add_liters: float,
    fuel_rate_liters_per_sec: float,
) -> float:
    """Return the stationary time of one pit stop in seconds.

    Pit time = base + optional tyre change + refuelling time.  Refuelling
    only counts when both the fuel amount and the flow rate are positive.

    Args:
        pit_base_secs: Fixed cost of entering, stopping and leaving.
        tires_changed: Whether a new set of tyres is fitted.
        tire_change_secs: Extra time for the tyre change.
        fuel_to_add_liters: Fuel delivered during the stop.
        fuel_rate_liters_per_sec: Fuel rig flow rate.

    Returns:
        Total pit-stop time in seconds.
    """
    time: float = pit_base_secs
    if tires_changed:
        time += tire_change_secs
    if fuel_to_add_liters > 0 and fuel_rate_liters_per_sec > 0:
        time += fuel_to_add_liters / fuel_rate_liters_per_sec
    return time
