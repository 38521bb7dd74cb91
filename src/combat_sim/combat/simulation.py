"""Simulation Aggregator.

The per-zone simulation loop built on the Shot Resolver:
- Zone initialization (body part HP, covering armor durability)
- Shot loop: fire, log, carry HP and durability forward until death
- Shot cap and zero-damage guard for kills that can never resolve
- STK / TTK / CTK calculation
- Attacker x zone result tables
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from ..config import settings
from ..core.constants import ARMOR_ZONES
from ..data.models.item import Ammunition
from ..data.models.loadout import AttackerSetup, DefenderSetup
from ..exceptions import UnknownZoneError, UnresolvableKillError
from .curves import curve_max
from .penetration import damage_at_range
from .shot import Shot, ZoneState, fire_shot, initial_zone_state, next_state
from .zones import ZoneProtection, get_body_part_for_zone, resolve_zone_protection

logger = logging.getLogger(__name__)


class ZoneOutcome(Enum):
    """How a zone simulation ended."""

    KILLED = auto()  # HP reached 0
    SHOT_CAP = auto()  # Still alive after the maximum number of shots
    NO_DAMAGE = auto()  # No shot can ever deal damage


@dataclass(frozen=True)
class ZoneCalculation:
    """Simulation result for one attacker against one zone."""

    zone_id: str
    body_part_id: str
    shots: tuple[Shot, ...]
    shots_to_kill: float  # math.inf when the kill is unresolvable
    ttk: float  # Seconds between first and last shot
    cost_to_kill: float
    is_protected: bool
    armor_class: float  # Nominal class, 0 when unprotected
    outcome: ZoneOutcome = ZoneOutcome.KILLED

    @property
    def killed(self) -> bool:
        return self.outcome == ZoneOutcome.KILLED

    @property
    def total_damage_dealt(self) -> float:
        return sum(shot.damage_to_body_part for shot in self.shots)

    @property
    def average_damage_per_shot(self) -> float:
        if not self.shots:
            return 0.0
        return self.total_damage_dealt / len(self.shots)

    @property
    def average_penetration_chance(self) -> float:
        if not self.shots:
            return 0.0
        return sum(shot.penetration_chance for shot in self.shots) / len(self.shots)

    @property
    def final_armor_durability(self) -> float:
        if not self.shots:
            return 0.0
        return self.shots[-1].remaining_armor_durability


def calculate_time_to_kill(shots_to_kill: float, fire_rate: float) -> float:
    """
    Time between the first and the killing shot.

    Args:
        shots_to_kill: Shots needed (math.inf if unresolvable).
        fire_rate: Rounds per minute.

    Returns:
        Seconds; 0 for one-shot kills, math.inf for unresolvable kills.
    """
    if math.isinf(shots_to_kill):
        return math.inf
    if shots_to_kill <= 1:
        return 0.0

    time_between_shots = 60 / fire_rate
    return (shots_to_kill - 1) * time_between_shots


def calculate_cost_to_kill(shots_to_kill: float, ammo: Ammunition) -> float:
    if math.isinf(shots_to_kill):
        return math.inf
    return shots_to_kill * ammo.price


def max_damage_per_shot(
    ammo: Ammunition,
    protection: Optional[ZoneProtection],
    range_m: float,
) -> float:
    """Best-case body damage of one round against a zone."""
    damage = damage_at_range(ammo, range_m)
    if protection is None or not protection.is_armored:
        return damage

    armor = protection.armor
    penetrated_scalar = ammo.protection_gear_penetrated_damage_scale
    if armor.penetration_damage_scalar_curve is not None:
        penetrated_scalar *= curve_max(armor.penetration_damage_scalar_curve)
    blunt_scalar = (
        ammo.blunt_damage_scale
        * protection.blunt_damage_scalar
        * ammo.protection_gear_blunt_damage_scale
    )
    return damage * max(penetrated_scalar, blunt_scalar)


def simulate_zone(
    attacker: AttackerSetup,
    defender: DefenderSetup,
    zone_id: str,
    range_m: Optional[float] = None,
    rng: Optional[random.Random] = None,
    max_shots: Optional[int] = None,
    strict: bool = False,
) -> ZoneCalculation:
    """
    Fire at one zone until its body part dies.

    Args:
        attacker: Attacker loadout with weapon and ammunition.
        defender: Defender loadout.
        zone_id: Hit zone id.
        range_m: Engagement distance in meters (default from settings).
        rng: Random source for penetration rolls.
        max_shots: Shot cap (default from settings).
        strict: Raise instead of reporting an unresolvable kill.

    Returns:
        ZoneCalculation with the full shot log.

    Raises:
        UnknownZoneError: If the zone maps to no body part.
        UnresolvableKillError: In strict mode, if the zone survives.
    """
    if attacker.weapon is None or attacker.ammo is None:
        raise ValueError(f"Attacker '{attacker.id}' needs both a weapon and ammunition")

    body_part = get_body_part_for_zone(zone_id)
    if body_part is None:
        raise UnknownZoneError(zone_id)

    if range_m is None:
        range_m = settings.DEFAULT_RANGE
    if max_shots is None:
        max_shots = settings.MAX_SHOTS
    if rng is None:
        rng = random.Random()

    weapon, ammo = attacker.weapon, attacker.ammo
    protection = resolve_zone_protection(defender, zone_id)
    state: ZoneState = initial_zone_state(defender, zone_id)
    shots: list[Shot] = []

    if max_damage_per_shot(ammo, protection, range_m) <= 0:
        outcome = ZoneOutcome.NO_DAMAGE
    else:
        while len(shots) < max_shots:
            shot = fire_shot(attacker, defender, zone_id, state, range_m, rng=rng)
            shots.append(shot)
            state = next_state(state, shot)
            if state.is_dead:
                break
        outcome = ZoneOutcome.KILLED if state.is_dead else ZoneOutcome.SHOT_CAP

    if outcome != ZoneOutcome.KILLED:
        reason = (
            "ammunition deals no damage to this zone"
            if outcome == ZoneOutcome.NO_DAMAGE
            else f"target survived the {max_shots} shot cap"
        )
        logger.warning(
            "Unresolvable kill: attacker=%s zone=%s shots=%d (%s)",
            attacker.id, zone_id, len(shots), reason,
        )
        if strict:
            raise UnresolvableKillError(zone_id, len(shots), reason)
        shots_to_kill = math.inf
    else:
        shots_to_kill = len(shots)

    fire_rate = weapon.fire_rate or settings.DEFAULT_FIRE_RATE

    return ZoneCalculation(
        zone_id=zone_id,
        body_part_id=body_part.id,
        shots=tuple(shots),
        shots_to_kill=shots_to_kill,
        ttk=calculate_time_to_kill(shots_to_kill, fire_rate),
        cost_to_kill=calculate_cost_to_kill(shots_to_kill, ammo),
        is_protected=protection is not None,
        armor_class=protection.armor_class if protection is not None else 0.0,
        outcome=outcome,
    )


def calculate_combat_results(
    attackers: Iterable[AttackerSetup],
    defender: DefenderSetup,
    range_m: Optional[float] = None,
    seed: Optional[int] = None,
    zones: Optional[Iterable[str]] = None,
    max_shots: Optional[int] = None,
) -> dict[str, dict[str, ZoneCalculation]]:
    """
    Simulate every attacker against every zone.

    Attackers without a weapon and ammunition, or with ammunition the
    weapon cannot chamber, are skipped. Each (attacker, zone) pair gets
    its own random source derived from ``seed``, so results do not depend
    on the order of attackers or zones.

    Args:
        attackers: Attacker loadouts.
        defender: Defender loadout.
        range_m: Engagement distance in meters.
        seed: Seed for reproducible runs; None for non-deterministic runs.
        zones: Zone ids to simulate (default: every known zone). Unknown ids
            are skipped with a warning.
        max_shots: Shot cap per zone.

    Returns:
        Mapping attacker id -> zone id -> ZoneCalculation.
    """
    zone_ids = []
    for zone_id in (zones if zones is not None else ARMOR_ZONES):
        if get_body_part_for_zone(zone_id) is None:
            logger.warning("Skipping unknown zone %s", zone_id)
            continue
        zone_ids.append(zone_id)
    results: dict[str, dict[str, ZoneCalculation]] = {}

    for attacker in attackers:
        if not attacker.is_complete or not attacker.is_compatible:
            logger.info("Skipping attacker %s: incomplete or incompatible loadout", attacker.id)
            continue

        zone_results = {}
        for zone_id in zone_ids:
            rng = random.Random(f"{seed}:{attacker.id}:{zone_id}") if seed is not None else None
            zone_results[zone_id] = simulate_zone(
                attacker, defender, zone_id,
                range_m=range_m, rng=rng, max_shots=max_shots,
            )
        results[attacker.id] = zone_results

    logger.info(
        "Simulated %d attackers x %d zones", len(results), len(zone_ids)
    )
    return results
