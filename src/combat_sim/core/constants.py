"""Combat Simulator Game Constants."""

from dataclasses import dataclass
from typing import Final

from ..data.models.item import ArmorSlot


# =============================================================================
# BODY PARTS
# =============================================================================
@dataclass(frozen=True)
class BodyPart:
    """A damageable body part with its own HP pool."""

    id: str
    name: str
    hp: float
    is_vital: bool  # Death on 0 HP


@dataclass(frozen=True)
class ArmorZone:
    """A hit zone on the body model that armor can cover."""

    id: str
    name: str
    body_part: str
    # Slots that cover this zone when an equipped piece lists no protective data
    default_slots: tuple[ArmorSlot, ...] = ()


BODY_PARTS: Final[dict[str, BodyPart]] = {
    "head": BodyPart("head", "Head", 35, True),
    "chest": BodyPart("chest", "Chest", 85, True),
    "stomach": BodyPart("stomach", "Stomach", 70, False),
    "left_arm": BodyPart("left_arm", "Left Arm", 60, False),
    "right_arm": BodyPart("right_arm", "Right Arm", 60, False),
    "left_leg": BodyPart("left_leg", "Left Leg", 65, False),
    "right_leg": BodyPart("right_leg", "Right Leg", 65, False),
}

_HELMET = (ArmorSlot.HELMET,)
_FACE = (ArmorSlot.FACE_SHIELD, ArmorSlot.HELMET)
_TORSO = (ArmorSlot.BODY_ARMOR,)

ARMOR_ZONES: Final[dict[str, ArmorZone]] = {
    # Head (helmet / face shield)
    "head_top": ArmorZone("head_top", "Head (Top)", "head", _HELMET),
    "head_eyes": ArmorZone("head_eyes", "Head (Eyes)", "head", _FACE),
    "head_chin": ArmorZone("head_chin", "Head (Chin)", "head", _FACE),
    # Torso (body armor)
    "spine_01": ArmorZone("spine_01", "Upper Chest", "chest", _TORSO),
    "spine_02": ArmorZone("spine_02", "Lower Chest", "chest", _TORSO),
    "spine_03": ArmorZone("spine_03", "Upper Stomach", "stomach", _TORSO),
    "pelvis": ArmorZone("pelvis", "Pelvis", "stomach"),
    # Arms - upper arms only when the armor lists them
    "UpperArm_L": ArmorZone("UpperArm_L", "Left Upper Arm", "left_arm"),
    "UpperArm_R": ArmorZone("UpperArm_R", "Right Upper Arm", "right_arm"),
    "arm_lower_l": ArmorZone("arm_lower_l", "Left Forearm", "left_arm"),
    "arm_lower_r": ArmorZone("arm_lower_r", "Right Forearm", "right_arm"),
    "hand_l": ArmorZone("hand_l", "Left Hand", "left_arm"),
    "hand_r": ArmorZone("hand_r", "Right Hand", "right_arm"),
    # Legs - thighs only when the armor lists them
    "Thigh_L": ArmorZone("Thigh_L", "Left Thigh", "left_leg"),
    "Thigh_R": ArmorZone("Thigh_R", "Right Thigh", "right_leg"),
    "leg_lower_l": ArmorZone("leg_lower_l", "Left Lower Leg", "left_leg"),
    "leg_lower_r": ArmorZone("leg_lower_r", "Right Lower Leg", "right_leg"),
    "foot_l": ArmorZone("foot_l", "Left Foot", "left_leg"),
    "foot_r": ArmorZone("foot_r", "Right Foot", "right_leg"),
}

# =============================================================================
# DEFAULT ARMOR CURVES
# =============================================================================
# Used when an armor record carries no curve of its own.
# Format: (x, value) pairs, linearly interpolated.

# x = penetration power / effective armor class
# Pen well below class: 2-5%, pen == class: ~30%, pen above class: 92%
DEFAULT_PENETRATION_CHANCE_CURVE: Final[list[tuple[float, float]]] = [
    (0.0, 0.02),
    (0.6, 0.05),
    (1.0, 0.30),
    (1.1, 0.92),
]

# x = current durability / max durability, value = fraction of armor class kept
# 50% durability keeps ~70% of the armor class
DEFAULT_ANTI_PENETRATION_DURABILITY_CURVE: Final[list[tuple[float, float]]] = [
    (0.0, 0.0),
    (0.5, 0.7),
    (1.0, 1.0),
]

# =============================================================================
# RANGE PRESETS
# =============================================================================
RANGE_VALUES: Final[list[float]] = [0, 60, 120, 240, 480]

RANGE_PRESETS: Final[dict[str, tuple[float, str]]] = {
    "CQB": (RANGE_VALUES[0], "Close quarters combat"),
    "Short": (RANGE_VALUES[1], "Short range engagement"),
    "Medium": (RANGE_VALUES[2], "Medium range combat"),
    "Long": (RANGE_VALUES[3], "Long range engagement"),
    "Sniper": (RANGE_VALUES[4], "Extreme range sniping"),
}

# =============================================================================
# DISPLAY
# =============================================================================
# Upper TTK bound (seconds) -> color, checked in order
TTK_COLORS: Final[list[tuple[float, str]]] = [
    (1.0, "#10b981"),  # very fast
    (2.0, "#84cc16"),
    (3.0, "#facc15"),
    (5.0, "#fb923c"),
]
TTK_COLOR_SLOW: Final[str] = "#ef4444"
TTK_COLOR_IMPOSSIBLE: Final[str] = "#dc2626"

ARMOR_CLASS_COLORS: Final[dict[int, str]] = {
    0: "#E7D1A9",  # Unarmored
    2: "#374151",  # Common
    3: "#2E331B",  # Uncommon
    4: "#1E3A8A",  # Rare
    5: "#581C87",  # Epic
    6: "#92400E",  # Legendary
}
