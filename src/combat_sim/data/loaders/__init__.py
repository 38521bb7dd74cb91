# Data Loaders
from .calibration_loader import load_calibration_cases
from .item_loader import (
    clear_cache,
    get_ammo_for_weapon,
    get_ammunition,
    get_armor,
    get_item_by_id,
    get_weapons,
    load_items,
    require_item,
)

__all__ = [
    # Item loaders
    "load_items",
    "get_item_by_id",
    "require_item",
    "get_weapons",
    "get_ammunition",
    "get_armor",
    "get_ammo_for_weapon",
    "clear_cache",
    # Calibration loaders
    "load_calibration_cases",
]
