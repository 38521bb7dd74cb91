"""Kill statistics for the combat simulator.

Per-attacker summaries over zone results, zone result sorting, and a
Monte Carlo simulator that repeats a zone simulation to estimate the
shots-to-kill distribution.
"""

import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable, Mapping, Optional, Union

import numpy as np

from ..config import settings
from ..data.models.loadout import AttackerSetup, DefenderSetup
from .simulation import ZoneCalculation, simulate_zone

logger = logging.getLogger(__name__)


class SortBy(StrEnum):
    """Orderings offered for a zone result table."""

    TTK = "ttk"
    STK = "stk"
    CTK = "ctk"
    DAMAGE = "damage"


@dataclass(frozen=True)
class ZoneTiming:
    zone_id: str
    ttk: float


@dataclass(frozen=True)
class AttackerSummary:
    """Headline numbers of one attacker across all zones."""

    attacker_id: str
    best_zone: ZoneTiming
    worst_zone: ZoneTiming  # Slowest zone that can still be killed
    average_ttk: float  # Over viable zones, math.inf if none
    total_cost: int  # Average cost to kill over viable zones
    viable_zones: int


@dataclass(frozen=True)
class ShotDistribution:
    shots: int
    probability: float  # 0.0 to 1.0


@dataclass
class CombatStatistics:
    """
    Result of a Monte Carlo zone simulation.

    Only resolved runs contribute to the shot statistics; runs hitting the
    shot cap are counted in ``unresolved_rate``.
    """

    expected_stk: float  # Mean over resolved runs, math.inf if none
    min_stk: float
    max_stk: float
    distribution: list[ShotDistribution]
    average_penetration_chance: float
    unresolved_rate: float  # 0.0 to 1.0
    iterations: int

    # Time statistics
    expected_ttk: float = math.inf
    median_stk: float = math.inf

    # Raw results for detailed analysis
    individual_results: list[ZoneCalculation] = field(default_factory=list)

    @property
    def kill_probability(self) -> float:
        return 1.0 - self.unresolved_rate


def _as_list(
    zone_calculations: Union[Iterable[ZoneCalculation], Mapping[str, ZoneCalculation]],
) -> list[ZoneCalculation]:
    if isinstance(zone_calculations, Mapping):
        return list(zone_calculations.values())
    return list(zone_calculations)


def calculate_attacker_summary(
    attacker_id: str,
    zone_calculations: Union[Iterable[ZoneCalculation], Mapping[str, ZoneCalculation]],
) -> AttackerSummary:
    """
    Summarize an attacker's zone results.

    Args:
        attacker_id: Attacker the results belong to.
        zone_calculations: Zone results, as a list or keyed by zone id.

    Returns:
        AttackerSummary. With no viable zone, the worst zone is the last
        zone by TTK and the average TTK is infinite.
    """
    calculations = _as_list(zone_calculations)
    if not calculations:
        raise ValueError(f"No zone results for attacker '{attacker_id}'")

    by_ttk = sorted(calculations, key=lambda calc: calc.ttk)
    viable = [calc for calc in by_ttk if not math.isinf(calc.ttk)]

    best = by_ttk[0]
    worst = viable[-1] if viable else by_ttk[-1]

    if viable:
        average_ttk = sum(calc.ttk for calc in viable) / len(viable)
    else:
        average_ttk = math.inf

    total_cost = sum(calc.cost_to_kill for calc in viable) / (len(viable) or 1)

    return AttackerSummary(
        attacker_id=attacker_id,
        best_zone=ZoneTiming(best.zone_id, best.ttk),
        worst_zone=ZoneTiming(worst.zone_id, worst.ttk),
        average_ttk=average_ttk,
        total_cost=round(total_cost),
        viable_zones=len(viable),
    )


def sort_zone_calculations(
    zone_calculations: Union[Iterable[ZoneCalculation], Mapping[str, ZoneCalculation]],
    sort_by: Union[SortBy, str] = SortBy.TTK,
) -> list[ZoneCalculation]:
    """Sort zone results; ``damage`` puts the hardest hitting zone first."""
    calculations = _as_list(zone_calculations)
    sort_by = SortBy(sort_by)

    if sort_by == SortBy.TTK:
        return sorted(calculations, key=lambda calc: calc.ttk)
    if sort_by == SortBy.STK:
        return sorted(calculations, key=lambda calc: calc.shots_to_kill)
    if sort_by == SortBy.CTK:
        return sorted(calculations, key=lambda calc: calc.cost_to_kill)
    return sorted(calculations, key=lambda calc: calc.average_damage_per_shot, reverse=True)


def get_confidence_interval(
    distribution: Iterable[ShotDistribution],
    confidence: float = 0.9,
) -> tuple[int, int]:
    """
    Central interval of a shots-to-kill distribution.

    Args:
        distribution: Shot counts with their probabilities.
        confidence: Probability mass the interval must hold (0 to 1).

    Returns:
        (lower, upper) shot counts.
    """
    if not 0 < confidence <= 1:
        raise ValueError(f"Confidence must be in (0, 1], got {confidence}")

    ordered = sorted(distribution, key=lambda item: item.shots)
    if not ordered:
        raise ValueError("Cannot compute an interval of an empty distribution")

    shots = np.array([item.shots for item in ordered])
    cumulative = np.cumsum([item.probability for item in ordered])

    tail = (1 - confidence) / 2
    # Tolerance keeps float round-off from skipping a bucket
    lower_index = int(np.searchsorted(cumulative, tail - 1e-12, side="left"))
    upper_index = int(np.searchsorted(cumulative, 1 - tail - 1e-12, side="left"))
    lower_index = min(lower_index, len(ordered) - 1)
    upper_index = min(upper_index, len(ordered) - 1)

    return int(shots[lower_index]), int(shots[upper_index])


class CombatSimulator:
    """
    Monte Carlo zone simulator.

    Repeats ``simulate_zone`` with derived seeds to estimate how many shots
    a zone takes to kill.

    Usage:
        simulator = CombatSimulator(base_seed=42)
        stats = simulator.simulate(attacker, defender, "spine_01", iterations=1000)
        print(f"Expected STK: {stats.expected_stk:.1f}")
    """

    def __init__(self, base_seed: Optional[int] = None):
        """
        Initialize simulator.

        Args:
            base_seed: Base seed for reproducibility (seeds will be derived).
        """
        self.base_seed = base_seed
        self.rng = random.Random(base_seed)

    def simulate(
        self,
        attacker: AttackerSetup,
        defender: DefenderSetup,
        zone_id: str,
        range_m: Optional[float] = None,
        iterations: Optional[int] = None,
        max_shots: Optional[int] = None,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> CombatStatistics:
        """
        Run the Monte Carlo simulation.

        Args:
            attacker: Attacker loadout.
            defender: Defender loadout.
            zone_id: Hit zone id.
            range_m: Engagement distance in meters.
            iterations: Number of simulation runs (default from settings).
            max_shots: Shot cap per run.
            parallel: Whether to run simulations in parallel.
            max_workers: Max parallel workers.

        Returns:
            CombatStatistics over all runs.
        """
        if iterations is None:
            iterations = settings.DEFAULT_ITERATIONS
        if not 1 <= iterations <= settings.MAX_ITERATIONS:
            raise ValueError(
                f"Iterations must be between 1 and {settings.MAX_ITERATIONS}, got {iterations}"
            )

        def run_single(seed: int) -> ZoneCalculation:
            return simulate_zone(
                attacker, defender, zone_id,
                range_m=range_m, rng=random.Random(seed), max_shots=max_shots,
            )

        # Seeds are drawn up front so parallel runs match sequential ones
        seeds = [self._get_iteration_seed(i) for i in range(iterations)]
        if parallel and iterations > 10:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(run_single, seeds))
        else:
            results = [run_single(seed) for seed in seeds]

        stats = self._analyze_results(results, iterations)
        logger.info(
            "Monte Carlo %s vs %s: %d runs, expected STK %.2f, unresolved %.1f%%",
            attacker.id, zone_id, iterations, stats.expected_stk, stats.unresolved_rate * 100,
        )
        return stats

    def _get_iteration_seed(self, iteration: int) -> int:
        """Get deterministic seed for an iteration."""
        if self.base_seed is not None:
            return self.base_seed + iteration
        return self.rng.randint(0, 2**31)

    def _analyze_results(
        self, results: list[ZoneCalculation], iterations: int
    ) -> CombatStatistics:
        """Analyze simulation results."""
        resolved = [r for r in results if r.killed]
        unresolved_rate = (iterations - len(resolved)) / iterations

        chances = [shot.penetration_chance for r in results for shot in r.shots]
        average_chance = float(np.mean(chances)) if chances else 0.0

        if not resolved:
            return CombatStatistics(
                expected_stk=math.inf,
                min_stk=math.inf,
                max_stk=math.inf,
                distribution=[],
                average_penetration_chance=average_chance,
                unresolved_rate=unresolved_rate,
                iterations=iterations,
                individual_results=results,
            )

        stk = np.array([r.shots_to_kill for r in resolved], dtype=int)
        ttk = np.array([r.ttk for r in resolved], dtype=float)
        counts = np.bincount(stk)
        shots = np.flatnonzero(counts)

        distribution = [
            ShotDistribution(shots=int(s), probability=float(counts[s] / len(stk)))
            for s in shots
        ]

        return CombatStatistics(
            expected_stk=float(stk.mean()),
            min_stk=int(stk.min()),
            max_stk=int(stk.max()),
            distribution=distribution,
            average_penetration_chance=average_chance,
            unresolved_rate=unresolved_rate,
            iterations=iterations,
            expected_ttk=float(ttk.mean()),
            median_stk=float(np.median(stk)),
            individual_results=results,
        )
