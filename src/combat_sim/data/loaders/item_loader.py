"""Item data loader."""

import json
import logging
from functools import lru_cache
from typing import Any, Optional, Union

from pydantic import ValidationError

from ...config import settings
from ...exceptions import ItemNotFoundError
from ..models.item import (
    ARMOR_SUBCATEGORIES,
    MODELLED_CATEGORIES,
    Ammunition,
    Armor,
    BodyArmor,
    FaceShield,
    Helmet,
    Weapon,
    parse_item,
)

logger = logging.getLogger(__name__)

LoadedItem = Union[Weapon, Ammunition, BodyArmor, Helmet, FaceShield]


def _is_modelled(item_data: dict[str, Any]) -> bool:
    category = item_data.get("category")
    if category not in MODELLED_CATEGORIES:
        return False
    if category == "gear":
        return item_data.get("subcategory") in ARMOR_SUBCATEGORIES
    return True


def _parse_item(item_data: dict[str, Any]) -> LoadedItem:
    """Parse an item from JSON data.

    Nested ``stats`` objects, as served by the item service, are flattened
    into the record before validation.

    Args:
        item_data: Dictionary containing item data.

    Returns:
        Concrete item model.
    """
    record = {key: value for key, value in item_data.items() if key != "stats"}
    record.update(item_data.get("stats") or {})
    return parse_item(record)


@lru_cache(maxsize=1)
def load_items() -> tuple[LoadedItem, ...]:
    """Load all modelled items from the JSON files of the items directory.

    Returns:
        Tuple of item models, in file name then record order.
    """
    items = []

    for path in sorted(settings.ITEMS_DATA_DIR.glob("*.json")):
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        for item_data in data["items"]:
            if not _is_modelled(item_data):
                logger.debug("Skipping unmodelled item %s", item_data.get("id"))
                continue
            try:
                items.append(_parse_item(item_data))
            except ValidationError as e:
                logger.warning("Skipping invalid item %s in %s: %s", item_data.get("id"), path.name, e)

        logger.debug("Loaded items from %s", path)

    return tuple(items)


def get_item_by_id(item_id: str) -> Optional[LoadedItem]:
    """Get an item by its ID.

    Args:
        item_id: The unique item identifier.

    Returns:
        Item if found, None otherwise.
    """
    for item in load_items():
        if item.id == item_id:
            return item
    return None


def require_item(item_id: str) -> LoadedItem:
    """Get an item by its ID.

    Raises:
        ItemNotFoundError: If no loaded item has this ID.
    """
    item = get_item_by_id(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return item


def get_weapons() -> list[Weapon]:
    return [item for item in load_items() if isinstance(item, Weapon)]


def get_ammunition() -> list[Ammunition]:
    return [item for item in load_items() if isinstance(item, Ammunition)]


def get_armor() -> list[Union[BodyArmor, Helmet, FaceShield]]:
    return [item for item in load_items() if isinstance(item, Armor)]


def get_ammo_for_weapon(weapon: Union[Weapon, str]) -> list[Ammunition]:
    """Get all ammunition a weapon can chamber.

    Args:
        weapon: Weapon model or weapon ID.

    Returns:
        Ammunition of the weapon's caliber, empty if it has none.
    """
    if isinstance(weapon, str):
        found = require_item(weapon)
        if not isinstance(found, Weapon):
            raise ItemNotFoundError(weapon)
        weapon = found

    if weapon.caliber is None:
        return []
    return [ammo for ammo in get_ammunition() if ammo.caliber == weapon.caliber]


def clear_cache() -> None:
    """Clear the item cache. Useful for testing or hot-reloading data."""
    load_items.cache_clear()
