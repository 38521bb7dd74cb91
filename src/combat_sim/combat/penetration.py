"""Penetration Model.

Decides whether a round defeats the armor covering a zone and how much
damage reaches the body and the armor.

- Range: damage and penetration power come from the round's ballistic
  curves at the engagement distance
- Durability: the armor's effective class is its nominal class scaled by
  the anti-penetration durability curve at the current durability fraction
- Chance: the penetration chance curve is evaluated at
  penetration power / effective class; fully worn armor (effective class 0)
  gives the curve maximum
- Outcome: a single uniform draw from the injected RNG decides penetration
- Armor is depleted whether or not the round penetrates
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..core.constants import (
    DEFAULT_ANTI_PENETRATION_DURABILITY_CURVE,
    DEFAULT_PENETRATION_CHANCE_CURVE,
)
from ..data.models.item import Ammunition, Armor
from .curves import curve_from_pairs, curve_max, evaluate

if TYPE_CHECKING:
    from .zones import ZoneProtection

logger = logging.getLogger(__name__)

DEFAULT_PENETRATION_CHANCE = curve_from_pairs(DEFAULT_PENETRATION_CHANCE_CURVE)
DEFAULT_ANTI_PENETRATION_DURABILITY = curve_from_pairs(DEFAULT_ANTI_PENETRATION_DURABILITY_CURVE)


@dataclass(frozen=True)
class PenetrationResult:
    """Outcome of one round against one armored zone."""

    is_penetrating: bool
    penetration_chance: float  # 0.0 to 1.0
    penetration_power: float  # At range
    effective_armor_class: float
    damage: float  # Round damage at range, before armor
    damage_scalar_to_body: float
    damage_to_body: float
    durability_damage_to_armor: float
    remaining_durability: float


def damage_at_range(ammo: Ammunition, range_m: float) -> float:
    """Round damage at a distance, base damage when the round has no curve."""
    curve = ammo.ballistic_curves.damage_over_distance
    if curve is None:
        return ammo.damage
    return max(0.0, evaluate(curve, range_m))


def penetration_at_range(ammo: Ammunition, range_m: float) -> float:
    """Penetration power at a distance, base penetration without a curve."""
    curve = ammo.ballistic_curves.penetration_power_over_distance
    if curve is None:
        return ammo.penetration
    return max(0.0, evaluate(curve, range_m))


def durability_fraction(armor: Armor, durability: float) -> float:
    return max(0.0, min(1.0, durability / armor.max_durability))


def anti_penetration_scalar(armor: Armor, durability: float) -> float:
    """Fraction of the armor class retained at a durability."""
    curve = armor.anti_penetration_durability_scalar_curve or DEFAULT_ANTI_PENETRATION_DURABILITY
    return max(0.0, evaluate(curve, durability_fraction(armor, durability)))


def effective_armor_class(armor_class: float, armor: Armor, durability: float) -> float:
    """
    Armor class after durability loss.

    Args:
        armor_class: Nominal class of the zone.
        armor: Armor piece providing the curves.
        durability: Current absolute durability.

    Returns:
        Effective class, 0 for fully worn armor.
    """
    return armor_class * anti_penetration_scalar(armor, durability)


def penetration_ratio(penetration_power: float, armor_class: float) -> float:
    if armor_class <= 0:
        return math.inf
    return penetration_power / armor_class


def penetration_chance(
    penetration_power: float,
    effective_class: float,
    armor: Armor,
) -> float:
    """
    Chance that a round penetrates.

    Args:
        penetration_power: Penetration power at range.
        effective_class: Durability-adjusted armor class.
        armor: Armor piece providing the penetration chance curve.

    Returns:
        Probability (0.0 to 1.0).
    """
    curve = armor.penetration_chance_curve or DEFAULT_PENETRATION_CHANCE

    if effective_class <= 0:
        chance = curve_max(curve)
    else:
        chance = evaluate(curve, penetration_power / effective_class)

    return max(0.0, min(1.0, chance))


def penetration_damage_scalar(
    penetration_power: float,
    effective_class: float,
    armor: Armor,
) -> float:
    """Share of damage kept by a penetrating round, 1.0 without a curve."""
    curve = armor.penetration_damage_scalar_curve
    if curve is None:
        return 1.0
    return max(0.0, evaluate(curve, penetration_ratio(penetration_power, effective_class)))


def resolve_shot(
    ammo: Ammunition,
    protection: "ZoneProtection",
    range_m: float,
    rng: Optional[random.Random] = None,
    force_penetration: Optional[bool] = None,
) -> PenetrationResult:
    """
    Resolve one round against an armored zone.

    Args:
        ammo: Round fired.
        protection: Protection of the zone at its current durability.
        range_m: Engagement distance in meters.
        rng: Random source for the penetration roll.
        force_penetration: Skip the roll and force the outcome (used to
            replay recorded in-game shots).

    Returns:
        PenetrationResult. ``protection`` is not modified; the new armor
        durability is returned in ``remaining_durability``.
    """
    armor = protection.armor
    damage = damage_at_range(ammo, range_m)
    power = penetration_at_range(ammo, range_m)
    effective_class = protection.effective_armor_class
    chance = penetration_chance(power, effective_class, armor)

    if force_penetration is None:
        if rng is None:
            rng = random.Random()
        is_penetrating = rng.random() < chance
    else:
        is_penetrating = force_penetration

    base_durability_damage = damage * armor.durability_damage_scalar

    if is_penetrating:
        scalar = (
            ammo.protection_gear_penetrated_damage_scale
            * penetration_damage_scalar(power, effective_class, armor)
        )
        durability_damage = base_durability_damage * anti_penetration_scalar(
            armor, protection.current_durability
        )
    else:
        # Blunt trauma through the plate
        scalar = (
            ammo.blunt_damage_scale
            * protection.blunt_damage_scalar
            * ammo.protection_gear_blunt_damage_scale
        )
        durability_damage = base_durability_damage

    remaining = max(0.0, protection.current_durability - durability_damage)

    logger.debug(
        "Shot vs %s (%s): power=%.2f class=%.2f chance=%.3f penetrated=%s",
        protection.zone_id, armor.id, power, effective_class, chance, is_penetrating,
    )

    return PenetrationResult(
        is_penetrating=is_penetrating,
        penetration_chance=chance,
        penetration_power=power,
        effective_armor_class=effective_class,
        damage=damage,
        damage_scalar_to_body=scalar,
        damage_to_body=damage * scalar,
        durability_damage_to_armor=durability_damage,
        remaining_durability=remaining,
    )
