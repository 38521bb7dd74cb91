"""Attacker and defender loadouts supplied by the caller."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .item import Ammunition, ArmorItem, ArmorSlot, BodyArmor, FaceShield, Helmet, Weapon


class _LoadoutModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class EquippedArmor(_LoadoutModel):
    """An armor piece worn by the defender, with its current durability."""
    armor: ArmorItem
    current_durability: Optional[float] = Field(
        default=None, ge=0, description="Absolute durability; full when omitted"
    )

    @model_validator(mode="after")
    def _check_durability(self) -> "EquippedArmor":
        if (
            self.current_durability is not None
            and self.current_durability > self.armor.max_durability
        ):
            raise ValueError(
                f"current_durability {self.current_durability} exceeds "
                f"max_durability {self.armor.max_durability} of {self.armor.id}"
            )
        return self

    @classmethod
    def from_percent(
        cls,
        armor: Union[BodyArmor, Helmet, FaceShield],
        percent: float,
    ) -> "EquippedArmor":
        """Equip an armor piece at a durability percentage (0-100)."""
        percent = max(0.0, min(100.0, percent))
        return cls(armor=armor, current_durability=percent / 100 * armor.max_durability)

    @property
    def durability(self) -> float:
        if self.current_durability is None:
            return self.armor.max_durability
        return self.current_durability

    @property
    def slot(self) -> ArmorSlot:
        return self.armor.slot


class DefenderSetup(_LoadoutModel):
    """Armor configuration of the simulated target."""
    body_armor: Optional[EquippedArmor] = None
    helmet: Optional[EquippedArmor] = None
    face_shield: Optional[EquippedArmor] = None

    @model_validator(mode="after")
    def _check_slots(self) -> "DefenderSetup":
        for slot in ArmorSlot:
            piece = getattr(self, slot.value)
            if piece is not None and piece.slot != slot:
                raise ValueError(
                    f"{piece.armor.id} is a {piece.slot} piece and cannot be "
                    f"equipped as {slot}"
                )
        return self

    def equipped(self) -> list[EquippedArmor]:
        """Equipped pieces, outermost layer first."""
        pieces = [self.face_shield, self.helmet, self.body_armor]
        return [piece for piece in pieces if piece is not None]


class AttackerSetup(_LoadoutModel):
    """A weapon and ammunition pairing to evaluate."""
    id: str
    name: Optional[str] = None
    weapon: Optional[Weapon] = None
    ammo: Optional[Ammunition] = None

    @property
    def is_complete(self) -> bool:
        return self.weapon is not None and self.ammo is not None

    @property
    def is_compatible(self) -> bool:
        """Whether the weapon chambers the selected ammunition."""
        if self.weapon is None or self.ammo is None:
            return False
        return self.weapon.caliber == self.ammo.caliber
