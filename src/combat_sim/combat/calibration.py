"""Calibration against recorded in-game shots.

Each case describes one shot observed in the game (weapon, ammunition,
armor at a known durability, range, whether it penetrated) together with
the damage the game reported. The shot is replayed with the penetration
outcome forced, and the simulated damage is compared with the recorded
one.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import settings
from ..data.models.item import Ammunition, Armor, BodyArmor, FaceShield, Helmet, Weapon
from .penetration import damage_at_range, resolve_shot
from .zones import build_zone_protection

logger = logging.getLogger(__name__)

CalibrationItem = Union[Weapon, Ammunition, BodyArmor, Helmet, FaceShield]


class _CaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class CaseArmor(_CaseModel):
    id: str
    current_durability: Optional[float] = Field(
        default=None, ge=0, description="Absolute durability; full when omitted"
    )


class GameResults(_CaseModel):
    """Damage reported by the game for the recorded shot."""
    armor_damage: Optional[float] = None
    body_damage: float


class SingleShotTestCase(_CaseModel):
    """One recorded in-game shot."""
    id: str
    description: Optional[str] = None
    weapon: str  # Item ids
    ammo: str
    armor: Optional[CaseArmor] = None
    zone_id: Optional[str] = None  # Zone whose protective data applies
    range: float = Field(default=0.0, ge=0)
    is_penetration: bool
    game_results: GameResults


@dataclass(frozen=True)
class DamageDeviation:
    absolute: float = 0.0
    percentage: float = 0.0


@dataclass(frozen=True)
class CalibrationResult:
    """Comparison of one replayed shot with its recording."""

    test_case: SingleShotTestCase
    passed: bool
    simulated_armor_damage: float
    simulated_body_damage: float
    armor_damage_deviation: DamageDeviation
    body_damage_deviation: DamageDeviation
    accuracy: float  # 0 to 100
    missing_items: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviationSummary:
    """Mean signed deviation percentages for one group of cases."""

    average_armor_damage_deviation: float
    average_body_damage_deviation: float
    test_count: int


@dataclass
class CalibrationSummary:
    total_tests: int
    passed_tests: int
    failed_tests: int
    average_accuracy: float
    deviation_by_armor: dict[str, DeviationSummary] = field(default_factory=dict)
    deviation_by_ammo: dict[str, DeviationSummary] = field(default_factory=dict)


def _deviation(simulated: float, recorded: Optional[float]) -> DamageDeviation:
    if recorded is None:
        return DamageDeviation()
    absolute = simulated - recorded
    percentage = absolute / recorded * 100 if recorded else 0.0
    return DamageDeviation(absolute=absolute, percentage=percentage)


def _failed_result(case: SingleShotTestCase, missing: list[str]) -> CalibrationResult:
    return CalibrationResult(
        test_case=case,
        passed=False,
        simulated_armor_damage=0.0,
        simulated_body_damage=0.0,
        armor_damage_deviation=DamageDeviation(),
        body_damage_deviation=DamageDeviation(),
        accuracy=0.0,
        missing_items=tuple(missing),
    )


def run_single_case(
    case: SingleShotTestCase,
    items: Iterable[CalibrationItem],
) -> CalibrationResult:
    """
    Replay one recorded shot and compare it with the game.

    Args:
        case: Recorded shot.
        items: Item catalogue to look the case's ids up in.

    Returns:
        CalibrationResult. Cases referring to unknown items fail with zero
        accuracy.
    """
    by_id = {item.id: item for item in items}

    weapon = by_id.get(case.weapon)
    ammo = by_id.get(case.ammo)
    armor = by_id.get(case.armor.id) if case.armor is not None else None

    missing = []
    if not isinstance(weapon, Weapon):
        missing.append(case.weapon)
    if not isinstance(ammo, Ammunition):
        missing.append(case.ammo)
    if case.armor is not None and not isinstance(armor, Armor):
        missing.append(case.armor.id)
    if missing:
        logger.warning("Calibration case %s references unknown items: %s", case.id, missing)
        return _failed_result(case, missing)

    if armor is None:
        armor_damage = 0.0
        body_damage = damage_at_range(ammo, case.range)
    else:
        durability = case.armor.current_durability
        if durability is None:
            durability = armor.max_durability
        protection = build_zone_protection(armor, case.zone_id, durability)
        result = resolve_shot(
            ammo, protection, case.range, force_penetration=case.is_penetration
        )
        armor_damage = result.durability_damage_to_armor
        body_damage = result.damage_to_body

    recorded = case.game_results
    armor_deviation = _deviation(armor_damage, recorded.armor_damage)
    body_deviation = _deviation(body_damage, recorded.body_damage)

    if recorded.armor_damage is None:
        average_deviation = abs(body_deviation.percentage)
    else:
        average_deviation = (abs(armor_deviation.percentage) + abs(body_deviation.percentage)) / 2
    accuracy = max(0.0, 100 - average_deviation)

    return CalibrationResult(
        test_case=case,
        passed=accuracy > settings.CALIBRATION_PASS_ACCURACY,
        simulated_armor_damage=armor_damage,
        simulated_body_damage=body_damage,
        armor_damage_deviation=armor_deviation,
        body_damage_deviation=body_deviation,
        accuracy=accuracy,
    )


def run_calibration(
    cases: Iterable[SingleShotTestCase],
    items: Iterable[CalibrationItem],
) -> list[CalibrationResult]:
    """Replay every case against the same item catalogue."""
    items = list(items)
    results = [run_single_case(case, items) for case in cases]
    logger.info(
        "Calibration: %d/%d cases passed",
        sum(1 for r in results if r.passed), len(results),
    )
    return results


def _group_summary(results: list[CalibrationResult]) -> DeviationSummary:
    count = len(results)
    return DeviationSummary(
        average_armor_damage_deviation=sum(r.armor_damage_deviation.percentage for r in results) / count,
        average_body_damage_deviation=sum(r.body_damage_deviation.percentage for r in results) / count,
        test_count=count,
    )


def summarize(results: Iterable[CalibrationResult]) -> CalibrationSummary:
    """Aggregate calibration results overall, per armor and per ammunition."""
    results = list(results)
    total = len(results)
    passed = sum(1 for r in results if r.passed)

    by_armor: dict[str, list[CalibrationResult]] = defaultdict(list)
    by_ammo: dict[str, list[CalibrationResult]] = defaultdict(list)
    for result in results:
        case = result.test_case
        by_armor[case.armor.id if case.armor is not None else "none"].append(result)
        by_ammo[case.ammo].append(result)

    return CalibrationSummary(
        total_tests=total,
        passed_tests=passed,
        failed_tests=total - passed,
        average_accuracy=sum(r.accuracy for r in results) / total if total else 0.0,
        deviation_by_armor={key: _group_summary(group) for key, group in by_armor.items()},
        deviation_by_ammo={key: _group_summary(group) for key, group in by_ammo.items()},
    )
