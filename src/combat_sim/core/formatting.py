"""Display helpers for simulation results."""

import math

from .constants import (
    ARMOR_CLASS_COLORS,
    TTK_COLOR_IMPOSSIBLE,
    TTK_COLOR_SLOW,
    TTK_COLORS,
)

INFINITY_SYMBOL = "∞"


def format_ttk(ttk: float) -> str:
    """Format time to kill in seconds, e.g. ``0.3s``."""
    if math.isinf(ttk):
        return INFINITY_SYMBOL
    return f"{ttk:.1f}s"


def format_stk(stk: float) -> str:
    """Format shots to kill."""
    if math.isinf(stk):
        return INFINITY_SYMBOL
    return str(int(stk))


def format_ctk(ctk: float) -> str:
    """Format cost to kill with thousands separators, e.g. ``$1,250``."""
    if math.isinf(ctk):
        return INFINITY_SYMBOL
    return f"${ctk:,.0f}"


def format_probability(probability: float) -> str:
    return f"{probability * 100:.1f}%"


def get_ttk_color(ttk: float) -> str:
    """Heat-map color for a TTK value."""
    if math.isinf(ttk):
        return TTK_COLOR_IMPOSSIBLE
    for upper_bound, color in TTK_COLORS:
        if ttk < upper_bound:
            return color
    return TTK_COLOR_SLOW


def get_armor_class_color(armor_class: float) -> str:
    """Rarity color for an armor class, unarmored color for unknown classes."""
    return ARMOR_CLASS_COLORS.get(int(armor_class), ARMOR_CLASS_COLORS[0])
