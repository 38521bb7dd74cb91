"""Shot Resolver.

Resolves a single round fired by an attacker into a hit zone:
- Zone protection lookup at the armor durability carried in the state
- Penetration roll and damage split for armored zones
- Full damage, no roll, for unprotected zones
- Remaining HP (signed, overkill kept) and remaining armor durability
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional

from ..data.models.item import BodyArmor, FaceShield, Helmet
from ..data.models.loadout import AttackerSetup, DefenderSetup
from ..exceptions import UnknownZoneError
from .penetration import damage_at_range, resolve_shot
from .zones import find_covering_armor, get_body_part_for_zone, resolve_zone_protection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneState:
    """HP and armor durability of a zone between two shots."""

    remaining_hp: float
    armor_durability: Optional[float] = None  # None when no armor covers the zone

    @property
    def is_dead(self) -> bool:
        return self.remaining_hp <= 0


@dataclass(frozen=True)
class Shot:
    """One simulated round, as shown in the shot log."""

    is_penetrating: bool
    damage_to_body_part: float
    damage_to_armor: float
    penetration_chance: float  # 0.0 to 1.0
    remaining_hp: float  # Negative on overkill
    remaining_armor_durability: float


def initial_zone_state(defender: DefenderSetup, zone_id: str) -> ZoneState:
    """
    Starting state for a zone: full body part HP and the covering piece's
    equipped durability.

    Raises:
        UnknownZoneError: If the zone maps to no body part.
    """
    body_part = get_body_part_for_zone(zone_id)
    if body_part is None:
        raise UnknownZoneError(zone_id)

    piece = find_covering_armor(defender, zone_id)
    durability = piece.durability if piece is not None else None
    return ZoneState(remaining_hp=body_part.hp, armor_durability=durability)


def fire_shot(
    attacker: AttackerSetup,
    defender: DefenderSetup,
    zone_id: str,
    previous_state: ZoneState,
    range_m: float,
    rng: Optional[random.Random] = None,
    force_penetration: Optional[bool] = None,
) -> Shot:
    """
    Fire one round into a zone.

    Args:
        attacker: Attacker loadout; must carry ammunition.
        defender: Defender loadout.
        zone_id: Hit zone id.
        previous_state: Zone state before this shot. Not modified.
        range_m: Engagement distance in meters.
        rng: Random source for the penetration roll.
        force_penetration: Force the penetration outcome of an armored zone.

    Returns:
        Shot record; build the next state with ``next_state``.
    """
    ammo = attacker.ammo
    if ammo is None:
        raise ValueError(f"Attacker '{attacker.id}' has no ammunition selected")

    protection = resolve_zone_protection(
        defender, zone_id, durability=previous_state.armor_durability
    )

    if protection is None or not protection.is_armored:
        # Class 0 coverage takes no durability loss and keeps its durability
        damage = damage_at_range(ammo, range_m)
        logger.debug("Shot vs %s (unprotected): damage=%.2f", zone_id, damage)
        return Shot(
            is_penetrating=True,
            damage_to_body_part=damage,
            damage_to_armor=0.0,
            penetration_chance=1.0,
            remaining_hp=previous_state.remaining_hp - damage,
            remaining_armor_durability=(
                protection.current_durability if protection is not None else 0.0
            ),
        )

    match protection.armor:
        case BodyArmor():
            logger.debug("Shot vs %s (body armor %s)", zone_id, protection.armor.id)
        case Helmet():
            logger.debug("Shot vs %s (helmet %s)", zone_id, protection.armor.id)
        case FaceShield():
            logger.debug("Shot vs %s (face shield %s)", zone_id, protection.armor.id)

    result = resolve_shot(
        ammo, protection, range_m, rng=rng, force_penetration=force_penetration
    )
    return Shot(
        is_penetrating=result.is_penetrating,
        damage_to_body_part=result.damage_to_body,
        damage_to_armor=result.durability_damage_to_armor,
        penetration_chance=result.penetration_chance,
        remaining_hp=previous_state.remaining_hp - result.damage_to_body,
        remaining_armor_durability=result.remaining_durability,
    )


def next_state(previous_state: ZoneState, shot: Shot) -> ZoneState:
    """Zone state after a shot."""
    durability = previous_state.armor_durability
    if durability is not None or shot.damage_to_armor > 0:
        durability = shot.remaining_armor_durability
    return ZoneState(remaining_hp=shot.remaining_hp, armor_durability=durability)
