"""Zone/Armor Resolver.

Maps a hit zone to the body part that takes the damage and to the armor
piece, if any, that protects it.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..core.constants import ARMOR_ZONES, BODY_PARTS, ArmorZone, BodyPart
from ..data.models.item import ArmorSlot, BodyArmor, FaceShield, Helmet
from ..data.models.loadout import DefenderSetup, EquippedArmor
from .penetration import effective_armor_class

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneProtection:
    """Protection state of a single zone at a given armor durability."""

    zone_id: str
    armor: Union[BodyArmor, Helmet, FaceShield]
    slot: ArmorSlot
    armor_class: float  # Nominal class for this zone
    blunt_damage_scalar: float
    current_durability: float
    max_durability: float
    protection_angle: float = 0.0

    @property
    def is_armored(self) -> bool:
        """False for class 0 coverage, which stops nothing."""
        return self.armor_class > 0

    @property
    def durability_fraction(self) -> float:
        return max(0.0, min(1.0, self.current_durability / self.max_durability))

    @property
    def effective_armor_class(self) -> float:
        """Armor class after durability loss."""
        return effective_armor_class(self.armor_class, self.armor, self.current_durability)

    def with_durability(self, durability: float) -> "ZoneProtection":
        """Copy of this protection at another durability, floored at 0."""
        return ZoneProtection(
            zone_id=self.zone_id,
            armor=self.armor,
            slot=self.slot,
            armor_class=self.armor_class,
            blunt_damage_scalar=self.blunt_damage_scalar,
            current_durability=max(0.0, durability),
            max_durability=self.max_durability,
            protection_angle=self.protection_angle,
        )


def get_zone(zone_id: str) -> Optional[ArmorZone]:
    return ARMOR_ZONES.get(zone_id)


def get_body_part_for_zone(zone_id: str) -> Optional[BodyPart]:
    """Get the body part a zone belongs to, None for unknown zones."""
    zone = ARMOR_ZONES.get(zone_id)
    if zone is None:
        return None
    return BODY_PARTS.get(zone.body_part)


def get_zones_for_body_part(body_part_id: str) -> list[ArmorZone]:
    return [zone for zone in ARMOR_ZONES.values() if zone.body_part == body_part_id]


def get_total_body_hp() -> float:
    """Sum of all body part HP pools."""
    return sum(part.hp for part in BODY_PARTS.values())


def get_vital_body_parts() -> list[BodyPart]:
    return [part for part in BODY_PARTS.values() if part.is_vital]


def find_covering_armor(defender: DefenderSetup, zone_id: str) -> Optional[EquippedArmor]:
    """
    Find the equipped piece protecting a zone.

    Pieces are checked outermost first (face shield, helmet, body armor).
    A piece covers a zone when its protective data lists the zone, or,
    when it carries no protective data at all, when the zone defaults to
    the piece's slot.

    Args:
        defender: Defender loadout.
        zone_id: Hit zone id.

    Returns:
        The covering piece, or None when the zone is unprotected.
    """
    zone = ARMOR_ZONES.get(zone_id)

    for piece in defender.equipped():
        if piece.armor.zone_protection(zone_id) is not None:
            return piece
        if not piece.armor.protective_data and zone is not None and piece.slot in zone.default_slots:
            return piece

    return None


def build_zone_protection(
    armor: Union[BodyArmor, Helmet, FaceShield],
    zone_id: Optional[str],
    durability: float,
) -> ZoneProtection:
    """
    Build the protection an armor piece gives a zone.

    The piece's protective data entry for the zone supplies class, blunt
    scalar and angle; without one the piece's own class and blunt scalar
    apply.

    Args:
        armor: Covering armor piece.
        zone_id: Hit zone id, or None to use the piece's own values.
        durability: Current durability, clamped to [0, max durability].
    """
    zone_data = armor.zone_protection(zone_id) if zone_id is not None else None
    if zone_data is not None:
        armor_class = zone_data.armor_class
        blunt_scalar = zone_data.blunt_damage_scalar
        protection_angle = zone_data.protection_angle
    else:
        armor_class = armor.armor_class
        blunt_scalar = armor.blunt_damage_scalar
        protection_angle = 0.0

    return ZoneProtection(
        zone_id=zone_id or armor.id,
        armor=armor,
        slot=armor.slot,
        armor_class=armor_class,
        blunt_damage_scalar=blunt_scalar,
        current_durability=max(0.0, min(durability, armor.max_durability)),
        max_durability=armor.max_durability,
        protection_angle=protection_angle,
    )


def resolve_zone_protection(
    defender: DefenderSetup,
    zone_id: str,
    durability: Optional[float] = None,
) -> Optional[ZoneProtection]:
    """
    Resolve the protection of a zone.

    Args:
        defender: Defender loadout.
        zone_id: Hit zone id. Unknown ids resolve as unprotected.
        durability: Durability override for the covering piece; defaults to
            the durability it is equipped with.

    Returns:
        ZoneProtection, or None when nothing covers the zone.
    """
    piece = find_covering_armor(defender, zone_id)
    if piece is None:
        logger.debug("Zone %s is unprotected", zone_id)
        return None

    current = piece.durability if durability is None else durability
    return build_zone_protection(piece.armor, zone_id, current)
