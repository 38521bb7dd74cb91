"""Tests for kill statistics and the Monte Carlo simulator."""

import math
import random

import pytest

from combat_sim.combat.shot import Shot
from combat_sim.combat.simulation import ZoneCalculation, ZoneOutcome
from combat_sim.combat.statistics import (
    CombatSimulator,
    ShotDistribution,
    SortBy,
    calculate_attacker_summary,
    get_confidence_interval,
    sort_zone_calculations,
)
from factories import create_test_ammo, create_test_attacker


def create_test_calc(
    zone_id: str,
    ttk: float,
    stk: float = 1,
    cost: float = 100,
    damage_per_shot: float = 40,
) -> ZoneCalculation:
    """Create a zone result with a uniform shot log."""
    killed = not math.isinf(stk)
    shot_count = int(stk) if killed else 3
    shots = tuple(
        Shot(
            is_penetrating=True,
            damage_to_body_part=damage_per_shot,
            damage_to_armor=0,
            penetration_chance=1.0,
            remaining_hp=100 - damage_per_shot * (i + 1),
            remaining_armor_durability=0,
        )
        for i in range(shot_count)
    )
    return ZoneCalculation(
        zone_id=zone_id,
        body_part_id="chest",
        shots=shots,
        shots_to_kill=stk,
        ttk=ttk,
        cost_to_kill=cost,
        is_protected=False,
        armor_class=0,
        outcome=ZoneOutcome.KILLED if killed else ZoneOutcome.SHOT_CAP,
    )


class TestAttackerSummary:
    """calculate_attacker_summary() tests."""

    def test_best_worst_and_averages(self):
        calcs = [
            create_test_calc("slow", ttk=1.0, stk=3, cost=500),
            create_test_calc("never", ttk=math.inf, stk=math.inf, cost=math.inf),
            create_test_calc("fast", ttk=0.5, stk=2, cost=300),
        ]

        summary = calculate_attacker_summary("rifle", calcs)

        assert summary.attacker_id == "rifle"
        assert summary.best_zone.zone_id == "fast"
        assert summary.worst_zone.zone_id == "slow"
        assert summary.average_ttk == pytest.approx(0.75)
        assert summary.total_cost == 400
        assert summary.viable_zones == 2

    def test_accepts_mapping(self):
        calcs = {"a": create_test_calc("a", ttk=0.2), "b": create_test_calc("b", ttk=0.4)}

        summary = calculate_attacker_summary("rifle", calcs)

        assert summary.best_zone.ttk == pytest.approx(0.2)

    def test_no_viable_zone(self):
        calcs = [
            create_test_calc("a", ttk=math.inf, stk=math.inf, cost=math.inf),
            create_test_calc("b", ttk=math.inf, stk=math.inf, cost=math.inf),
        ]

        summary = calculate_attacker_summary("rifle", calcs)

        assert summary.viable_zones == 0
        assert summary.average_ttk == math.inf
        assert summary.total_cost == 0

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            calculate_attacker_summary("rifle", [])


class TestSortZoneCalculations:
    """sort_zone_calculations() tests."""

    @pytest.fixture
    def calcs(self):
        return [
            create_test_calc("a", ttk=0.4, stk=3, cost=90, damage_per_shot=30),
            create_test_calc("b", ttk=0.1, stk=2, cost=300, damage_per_shot=45),
            create_test_calc("c", ttk=math.inf, stk=math.inf, cost=math.inf, damage_per_shot=1),
            create_test_calc("d", ttk=0.0, stk=1, cost=150, damage_per_shot=80),
        ]

    @pytest.mark.parametrize("sort_by, order", [
        (SortBy.TTK, ["d", "b", "a", "c"]),
        (SortBy.STK, ["d", "b", "a", "c"]),
        (SortBy.CTK, ["a", "d", "b", "c"]),
        (SortBy.DAMAGE, ["d", "b", "a", "c"]),
        ("ctk", ["a", "d", "b", "c"]),
    ])
    def test_orders(self, calcs, sort_by, order):
        result = sort_zone_calculations(calcs, sort_by)

        assert [calc.zone_id for calc in result] == order

    def test_does_not_modify_input(self, calcs):
        sort_zone_calculations(calcs, SortBy.TTK)

        assert [calc.zone_id for calc in calcs] == ["a", "b", "c", "d"]

    def test_unknown_order_raises(self, calcs):
        with pytest.raises(ValueError):
            sort_zone_calculations(calcs, "fun")


class TestConfidenceInterval:
    """get_confidence_interval() tests."""

    @pytest.fixture
    def distribution(self):
        return [
            ShotDistribution(shots=4, probability=0.4),
            ShotDistribution(shots=2, probability=0.05),
            ShotDistribution(shots=5, probability=0.05),
            ShotDistribution(shots=3, probability=0.5),
        ]

    def test_ninety_percent(self, distribution):
        assert get_confidence_interval(distribution) == (2, 4)

    def test_eighty_percent(self, distribution):
        assert get_confidence_interval(distribution, confidence=0.8) == (3, 4)

    def test_full_confidence_spans_everything(self, distribution):
        assert get_confidence_interval(distribution, confidence=1.0) == (2, 5)

    def test_single_bucket(self):
        assert get_confidence_interval([ShotDistribution(shots=3, probability=1.0)]) == (3, 3)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            get_confidence_interval([])


class TestCombatSimulator:
    """Monte Carlo simulation tests."""

    def test_deterministic_outcome(self, unarmored_defender):
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40))

        stats = CombatSimulator(base_seed=1).simulate(
            attacker, unarmored_defender, "spine_01", range_m=0, iterations=20
        )

        assert stats.expected_stk == 3
        assert stats.min_stk == stats.max_stk == 3
        assert stats.distribution == [ShotDistribution(shots=3, probability=1.0)]
        assert stats.unresolved_rate == 0
        assert stats.expected_ttk == pytest.approx(0.2)

    def test_distribution_sums_to_one(self, attacker, armored_defender):
        stats = CombatSimulator(base_seed=5).simulate(
            attacker, armored_defender, "spine_01", range_m=0, iterations=200
        )

        assert sum(d.probability for d in stats.distribution) == pytest.approx(1.0)
        assert stats.min_stk <= stats.expected_stk <= stats.max_stk
        assert 0 < stats.average_penetration_chance <= 1
        assert stats.iterations == 200
        assert len(stats.individual_results) == 200

    def test_same_seed_same_statistics(self, attacker, armored_defender):
        first = CombatSimulator(base_seed=11).simulate(
            attacker, armored_defender, "spine_01", iterations=50
        )
        second = CombatSimulator(base_seed=11).simulate(
            attacker, armored_defender, "spine_01", iterations=50
        )

        assert first.distribution == second.distribution
        assert first.expected_stk == second.expected_stk

    def test_parallel_matches_sequential(self, attacker, armored_defender):
        sequential = CombatSimulator(base_seed=3).simulate(
            attacker, armored_defender, "spine_02", iterations=40
        )
        parallel = CombatSimulator(base_seed=3).simulate(
            attacker, armored_defender, "spine_02", iterations=40, parallel=True
        )

        assert parallel.distribution == sequential.distribution
        assert parallel.individual_results == sequential.individual_results

    def test_parallel_matches_sequential_with_drawn_seeds(self, attacker, armored_defender):
        """Without a base seed, iteration seeds come from the simulator's own source."""
        sequential_sim, parallel_sim = CombatSimulator(), CombatSimulator()
        sequential_sim.rng = random.Random(9)
        parallel_sim.rng = random.Random(9)

        sequential = sequential_sim.simulate(
            attacker, armored_defender, "spine_02", iterations=40
        )
        parallel = parallel_sim.simulate(
            attacker, armored_defender, "spine_02", iterations=40, parallel=True
        )

        assert parallel.individual_results == sequential.individual_results

    def test_unresolvable(self, unarmored_defender):
        attacker = create_test_attacker(ammo=create_test_ammo(damage=0))

        stats = CombatSimulator(base_seed=1).simulate(
            attacker, unarmored_defender, "head_top", iterations=5
        )

        assert stats.unresolved_rate == 1.0
        assert stats.kill_probability == 0.0
        assert stats.expected_stk == math.inf
        assert stats.distribution == []

    @pytest.mark.parametrize("iterations", [0, -1, 10001])
    def test_iterations_bounds(self, attacker, unarmored_defender, iterations):
        with pytest.raises(ValueError):
            CombatSimulator().simulate(
                attacker, unarmored_defender, "head_top", iterations=iterations
            )
