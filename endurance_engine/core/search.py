"""Compound-sequence strategy search.

Enumerates every compound plan of length 1-3 (no compound back-to-back),
simulates each with :func:`simulate_plan`, drops plans that miss a
mandatory compound or duplicate an earlier plan's stint schedule, and
ranks the survivors by laps completed (more is better), then by total
race time (less is better).

Plan count for ``n`` active compounds::

    n + n * (n - 1) + n * (n - 1) ** 2

The search only covers compound *sequences*; pit timing inside each plan
is fixed by the simulator's greedy policy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from endurance_engine.core.compound import CompoundPlan, CompoundSpec
from endurance_engine.core.inputs import RaceInputs
from endurance_engine.core.simulator import SimulationParameters, simulate_plan
from endurance_engine.core.stint import Stint
from endurance_engine.core.strategy import RankedStrategy, StrategyReport

logger = logging.getLogger(__name__)

LABEL_SEPARATOR: str = " → "

# (laps_in_stint, compound_id, fuel_to_add_liters) per stint
StintSignature = tuple[tuple[int, str, float], ...]


# ---------------------------------------------------------------------------
# Plan enumeration
# ---------------------------------------------------------------------------


def enumerate_compound_plans(compounds: Sequence[CompoundSpec]) -> list[CompoundPlan]:
    """Return all singletons, distinct pairs and triples without adjacent repeats.

    Plans are ordered by length, then lexicographically by input order.
    A compound may recur non-adjacently (``A → B → A``).
    """
    plans: list[CompoundPlan] = [(c1,) for c1 in compounds]
    for c1 in compounds:
        for c2 in compounds:
            if c1.id != c2.id:
                plans.append((c1, c2))
    for c1 in compounds:
        for c2 in compounds:
            for c3 in compounds:
                if c1.id != c2.id and c2.id != c3.id:
                    plans.append((c1, c2, c3))
    return plans


# ---------------------------------------------------------------------------
# Stint-sequence helpers
# ---------------------------------------------------------------------------


def compound_sequence_label(stints: Iterable[Stint]) -> str:
    """Compound names in driving order, consecutive repeats collapsed."""
    names: list[str] = []
    last_id: str | None = None
    for stint in stints:
        if stint.compound_id != last_id:
            names.append(stint.compound_name)
            last_id = stint.compound_id
    return LABEL_SEPARATOR.join(names)


def used_compound_ids(stints: Iterable[Stint]) -> tuple[str, ...]:
    """Distinct compound ids driven, in first-use order."""
    return tuple(dict.fromkeys(stint.compound_id for stint in stints))


def stint_signature(stints: Iterable[Stint]) -> StintSignature:
    """Key identifying plans that produce the same stint schedule."""
    return tuple(
        (stint.laps_in_stint, stint.compound_id, stint.fuel_to_add_liters)
        for stint in stints
    )


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


def rank_plans(
    compounds: Sequence[CompoundSpec],
    params: SimulationParameters,
    mandatory_ids: Iterable[str] = (),
) -> list[RankedStrategy]:
    """Simulate, filter, deduplicate and rank every plan over *compounds*.

    Args:
        compounds: Active compounds to combine.
        params: Shared simulation parameters.
        mandatory_ids: Compound ids every returned strategy must drive.

    Returns:
        Ranked strategies, best first.
    """
    plans = enumerate_compound_plans(compounds)
    logger.debug("Simulating %d compound plans", len(plans))

    candidates: list[RankedStrategy] = []
    for plan in plans:
        result = simulate_plan(plan, params)
        candidates.append(
            RankedStrategy(
                label=compound_sequence_label(result.stints),
                compound_ids=used_compound_ids(result.stints),
                strategy=result,
            )
        )

    required = frozenset(mandatory_ids)
    if required:
        candidates = [c for c in candidates if required.issubset(c.compound_ids)]
        logger.debug("%d plans cover mandatory compounds %s", len(candidates), sorted(required))

    unique: list[RankedStrategy] = []
    seen: set[StintSignature] = set()
    for candidate in candidates:
        signature = stint_signature(candidate.strategy.stints)
        if signature not in seen:
            seen.add(signature)
            unique.append(candidate)
    logger.debug("%d distinct strategies after deduplication", len(unique))

    return sorted(
        unique,
        key=lambda c: (-c.strategy.total_laps, c.strategy.est_total_race_time_secs),
    )


def find_best_strategies(inputs: RaceInputs) -> list[RankedStrategy]:
    """Rank every compound strategy for *inputs*.

    Returns an empty list, rather than raising, when the inputs cannot be
    simulated: non-positive race duration, tank size or laps per tank, or
    no active compound.

    Args:
        inputs: Race configuration as supplied by the caller.

    Returns:
        Ranked strategies, best first.
    """
    if not inputs.is_valid():
        logger.debug("Race inputs are not simulatable; returning no strategies")
        return []
    return rank_plans(
        inputs.active_compounds(),
        inputs.to_parameters(),
        inputs.mandatory_ids(),
    )


def compute_strategy(inputs: RaceInputs) -> StrategyReport | None:
    """Run :func:`find_best_strategies` and single out the best entry.

    Returns:
        A :class:`StrategyReport`, or ``None`` if no strategy is available.
    """
    ranked = find_best_strategies(inputs)
    if not ranked:
        return None
    return StrategyReport(ranked=tuple(ranked), best=ranked[0])
