# Core constants and display helpers
from .constants import (
    ARMOR_ZONES,
    BODY_PARTS,
    RANGE_PRESETS,
    RANGE_VALUES,
    ArmorZone,
    BodyPart,
)
from .formatting import (
    format_ctk,
    format_probability,
    format_stk,
    format_ttk,
    get_armor_class_color,
    get_ttk_color,
)

__all__ = [
    "ARMOR_ZONES",
    "BODY_PARTS",
    "RANGE_PRESETS",
    "RANGE_VALUES",
    "ArmorZone",
    "BodyPart",
    "format_ctk",
    "format_probability",
    "format_stk",
    "format_ttk",
    "get_armor_class_color",
    "get_ttk_color",
]
