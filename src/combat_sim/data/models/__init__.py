# Data Models
from .item import (
    Ammunition,
    Armor,
    ArmorItem,
    ArmorSlot,
    BallisticCurves,
    BodyArmor,
    Curve,
    CurvePoint,
    FaceShield,
    Helmet,
    InterpMode,
    Item,
    ProtectiveZone,
    TangentMode,
    Weapon,
    parse_item,
    validate_curve,
)
from .loadout import AttackerSetup, DefenderSetup, EquippedArmor

__all__ = [
    "Ammunition",
    "Armor",
    "ArmorItem",
    "ArmorSlot",
    "BallisticCurves",
    "BodyArmor",
    "Curve",
    "CurvePoint",
    "FaceShield",
    "Helmet",
    "InterpMode",
    "Item",
    "ProtectiveZone",
    "TangentMode",
    "Weapon",
    "parse_item",
    "validate_curve",
    "AttackerSetup",
    "DefenderSetup",
    "EquippedArmor",
]
