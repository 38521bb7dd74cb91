"""Tests for the per-zone kill simulation."""

import math
import random

import pytest

from combat_sim.combat.curves import curve_from_pairs
from combat_sim.combat.simulation import (
    ZoneOutcome,
    calculate_combat_results,
    calculate_time_to_kill,
    simulate_zone,
)
from combat_sim.exceptions import UnknownZoneError, UnresolvableKillError
from factories import (
    create_test_ammo,
    create_test_attacker,
    create_test_body_armor,
    create_test_defender,
    create_test_weapon,
)


def always_penetrated_vest(**stats):
    return create_test_body_armor(penetration_chance_curve=curve_from_pairs([(0, 1.0)]), **stats)


def never_penetrated_vest(**stats):
    return create_test_body_armor(penetration_chance_curve=curve_from_pairs([(0, 0.0)]), **stats)


class TestTimeToKill:
    """calculate_time_to_kill() tests."""

    @pytest.mark.parametrize("stk, fire_rate, ttk", [
        (1, 600, 0.0),
        (2, 600, 0.1),
        (3, 600, 0.2),
        (5, 800, 0.3),
    ])
    def test_first_shot_is_free(self, stk, fire_rate, ttk):
        assert calculate_time_to_kill(stk, fire_rate) == pytest.approx(ttk)

    def test_unresolvable(self):
        assert calculate_time_to_kill(math.inf, 600) == math.inf


class TestSimulateZoneUnarmored:
    """Zones no armor covers."""

    def test_one_shot_head(self, unarmored_defender):
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40, price=100))

        calc = simulate_zone(attacker, unarmored_defender, "head_top", range_m=0)

        assert calc.killed
        assert calc.shots_to_kill == 1
        assert calc.ttk == 0
        assert calc.cost_to_kill == 100
        assert calc.shots[-1].remaining_hp == pytest.approx(-5)
        assert not calc.is_protected
        assert calc.armor_class == 0

    def test_chest_takes_three_shots(self, unarmored_defender):
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40, price=100))

        calc = simulate_zone(attacker, unarmored_defender, "spine_01", range_m=0)

        assert calc.shots_to_kill == 3
        assert calc.ttk == pytest.approx(0.2)
        assert calc.cost_to_kill == 300
        assert calc.total_damage_dealt == pytest.approx(120)
        assert calc.body_part_id == "chest"

    def test_default_fire_rate(self, unarmored_defender):
        attacker = create_test_attacker(
            weapon=create_test_weapon(fire_rate=None),
            ammo=create_test_ammo(damage=40),
        )

        calc = simulate_zone(attacker, unarmored_defender, "spine_01", range_m=0)

        assert calc.ttk == pytest.approx(0.2)

    def test_range_reduces_damage(self, unarmored_defender):
        attacker = create_test_attacker(
            ammo=create_test_ammo(damage=40, damage_curve=[(0, 40), (100, 20)])
        )

        assert simulate_zone(attacker, unarmored_defender, "head_top", range_m=0).shots_to_kill == 1
        assert simulate_zone(attacker, unarmored_defender, "head_top", range_m=100).shots_to_kill == 2

    def test_default_range(self, unarmored_defender):
        """Without a range the default engagement distance (60m) applies."""
        attacker = create_test_attacker(
            ammo=create_test_ammo(damage=40, damage_curve=[(0, 40), (60, 30), (120, 20)])
        )

        calc = simulate_zone(attacker, unarmored_defender, "head_top")

        assert calc.shots[0].damage_to_body_part == pytest.approx(30)


class TestSimulateZoneArmored:
    """Zones covered by armor."""

    def test_always_penetrating(self):
        defender = create_test_defender(body_armor=always_penetrated_vest())
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40))

        calc = simulate_zone(attacker, defender, "spine_01", range_m=0)

        assert calc.shots_to_kill == 3
        assert calc.is_protected
        assert calc.armor_class == 4
        assert calc.average_penetration_chance == pytest.approx(1.0)

    def test_never_penetrating_kills_with_blunt_damage(self, rng):
        """0.8 blunt damage per shot needs 107 shots for 85 HP."""
        defender = create_test_defender(body_armor=never_penetrated_vest())
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40, blunt_damage_scale=0.1))

        calc = simulate_zone(attacker, defender, "spine_01", range_m=0, rng=rng)

        assert calc.killed
        assert calc.shots_to_kill == 107
        assert not any(shot.is_penetrating for shot in calc.shots)
        assert calc.final_armor_durability == 0

    def test_armor_wears_down(self, rng):
        defender = create_test_defender(body_armor=always_penetrated_vest(max_durability=100))
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40))

        calc = simulate_zone(attacker, defender, "spine_01", range_m=0, rng=rng)

        durabilities = [shot.remaining_armor_durability for shot in calc.shots]
        assert durabilities == sorted(durabilities, reverse=True)
        assert durabilities[-1] < 100

    def test_hp_strictly_decreasing(self, armored_defender, attacker, rng):
        calc = simulate_zone(attacker, armored_defender, "spine_02", range_m=0, rng=rng)

        hps = [85] + [shot.remaining_hp for shot in calc.shots]
        assert all(later < earlier for earlier, later in zip(hps, hps[1:]))
        assert calc.killed

    def test_class_zero_vest_matches_bare_chest(self, unarmored_defender, rng):
        defender = create_test_defender(body_armor=create_test_body_armor(armor_class=0))
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40))

        calc = simulate_zone(attacker, defender, "spine_01", range_m=0, rng=rng)
        bare = simulate_zone(attacker, unarmored_defender, "spine_01", range_m=0)

        assert calc.shots_to_kill == bare.shots_to_kill == 3
        assert calc.armor_class == 0
        assert calc.final_armor_durability == 50

    def test_more_damage_never_needs_more_shots(self):
        """Penetration 5 against class 4 stays above the threshold while the plate wears."""
        defender = create_test_defender(body_armor=create_test_body_armor(armor_class=4))

        for seed in range(40):
            previous_stk = math.inf
            for damage in range(30, 61):
                attacker = create_test_attacker(
                    ammo=create_test_ammo(damage=damage, penetration=5)
                )
                calc = simulate_zone(
                    attacker, defender, "spine_01", range_m=0, rng=random.Random(seed)
                )

                assert calc.shots_to_kill <= previous_stk, (seed, damage)
                previous_stk = calc.shots_to_kill

    def test_durability_never_negative(self):
        """Blocked and penetrating shots both wear a 50 point plate past zero."""
        vest = create_test_body_armor(max_durability=50, durability_damage_scalar=1.0)
        defender = create_test_defender(body_armor=vest)
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40, penetration=4))

        runs = [
            simulate_zone(attacker, defender, "spine_01", range_m=0, rng=random.Random(seed))
            for seed in range(20)
        ]

        outcomes = {shot.is_penetrating for calc in runs for shot in calc.shots}
        assert outcomes == {True, False}
        for calc in runs:
            durabilities = [shot.remaining_armor_durability for shot in calc.shots]
            assert min(durabilities) >= 0
            assert durabilities == sorted(durabilities, reverse=True)
            assert calc.final_armor_durability == 0

    def test_unlisted_zone_is_unprotected(self, armored_defender, attacker, rng):
        calc = simulate_zone(attacker, armored_defender, "UpperArm_L", range_m=0, rng=rng)

        assert not calc.is_protected
        assert calc.shots_to_kill == 2


class TestUnresolvableKills:
    """Shot cap and zero damage guard."""

    def test_shot_cap(self, rng):
        defender = create_test_defender(body_armor=never_penetrated_vest())
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40, price=100))

        calc = simulate_zone(attacker, defender, "spine_01", range_m=0, rng=rng, max_shots=10)

        assert not calc.killed
        assert calc.outcome == ZoneOutcome.SHOT_CAP
        assert len(calc.shots) == 10
        assert calc.shots_to_kill == math.inf
        assert calc.ttk == math.inf
        assert calc.cost_to_kill == math.inf

    def test_shot_cap_strict_raises(self, rng):
        defender = create_test_defender(body_armor=never_penetrated_vest())
        attacker = create_test_attacker(ammo=create_test_ammo(damage=40))

        with pytest.raises(UnresolvableKillError) as exc_info:
            simulate_zone(attacker, defender, "spine_01", range_m=0, rng=rng,
                          max_shots=10, strict=True)

        assert exc_info.value.zone_id == "spine_01"
        assert exc_info.value.shots_fired == 10

    def test_zero_damage_short_circuits(self, unarmored_defender):
        attacker = create_test_attacker(ammo=create_test_ammo(damage=0))

        calc = simulate_zone(attacker, unarmored_defender, "head_top")

        assert calc.outcome == ZoneOutcome.NO_DAMAGE
        assert calc.shots == ()
        assert calc.ttk == math.inf

    def test_zero_blunt_and_penetrated_damage(self):
        defender = create_test_defender(body_armor=create_test_body_armor())
        attacker = create_test_attacker(ammo=create_test_ammo(
            damage=40, blunt_damage_scale=0, protection_gear_penetrated_damage_scale=0,
        ))

        calc = simulate_zone(attacker, defender, "spine_01")

        assert calc.outcome == ZoneOutcome.NO_DAMAGE

    def test_unknown_zone(self, attacker, unarmored_defender):
        with pytest.raises(UnknownZoneError):
            simulate_zone(attacker, unarmored_defender, "tail")

    def test_incomplete_attacker(self, unarmored_defender):
        attacker = create_test_attacker().model_copy(update={"ammo": None})

        with pytest.raises(ValueError):
            simulate_zone(attacker, unarmored_defender, "head_top")


class TestCalculateCombatResults:
    """Attacker x zone tables."""

    def test_all_zones_by_default(self, attacker, armored_defender):
        results = calculate_combat_results([attacker], armored_defender, range_m=0, seed=1)

        assert set(results) == {"attacker"}
        assert len(results["attacker"]) == 19

    def test_seed_replays_exactly(self, attacker, armored_defender):
        first = calculate_combat_results([attacker], armored_defender, seed=7)
        second = calculate_combat_results([attacker], armored_defender, seed=7)

        assert first == second

    def test_zone_results_independent_of_zone_list(self, attacker, armored_defender):
        full = calculate_combat_results([attacker], armored_defender, seed=7)
        single = calculate_combat_results([attacker], armored_defender, seed=7, zones=["spine_01"])

        assert single["attacker"]["spine_01"] == full["attacker"]["spine_01"]

    def test_unknown_zones_are_skipped(self, attacker, armored_defender):
        full = calculate_combat_results([attacker], armored_defender, seed=7)
        results = calculate_combat_results(
            [attacker], armored_defender, seed=7, zones=["spine_01", "tail"]
        )

        assert set(results["attacker"]) == {"spine_01"}
        assert results["attacker"]["spine_01"] == full["attacker"]["spine_01"]

    def test_skips_incompatible_and_incomplete(self, attacker, armored_defender):
        wrong_caliber = create_test_attacker(
            "wrong", ammo=create_test_ammo(caliber="9x19mm")
        )
        no_ammo = attacker.model_copy(update={"id": "no_ammo", "ammo": None})

        results = calculate_combat_results(
            [attacker, wrong_caliber, no_ammo], armored_defender, seed=1, zones=["head_top"]
        )

        assert set(results) == {"attacker"}

    def test_multiple_attackers(self, armored_defender):
        strong = create_test_attacker("strong", ammo=create_test_ammo(damage=90))
        weak = create_test_attacker("weak", ammo=create_test_ammo(damage=20))

        results = calculate_combat_results(
            [strong, weak], armored_defender, range_m=0, seed=3, zones=["Thigh_L"]
        )

        assert results["strong"]["Thigh_L"].shots_to_kill == 1
        assert results["weak"]["Thigh_L"].shots_to_kill == 4
