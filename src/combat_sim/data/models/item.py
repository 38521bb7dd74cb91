"""Item data models for the combat simulator.

Items arrive as JSON-like records from the external item service. Each
record is discriminated by ``category`` (and, for gear, ``subcategory``)
so callers get a concrete Weapon / Ammunition / BodyArmor / Helmet /
FaceShield instance instead of a loose dictionary.
"""

from enum import StrEnum
from typing import Annotated, Any, ClassVar, Literal, Optional, Sequence, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from ...exceptions import MalformedCurveError


class InterpMode(StrEnum):
    """Interpolation used between a curve point and the next one."""
    CUBIC = "cubic"
    LINEAR = "linear"


class TangentMode(StrEnum):
    """How the tangents of a curve point were authored."""
    USER = "user"
    AUTO = "auto"


class ArmorSlot(StrEnum):
    """Equipment slot an armor piece occupies on the defender."""
    BODY_ARMOR = "body_armor"
    HELMET = "helmet"
    FACE_SHIELD = "face_shield"


class _ItemModel(BaseModel):
    """Common model configuration: frozen, camelCase aliases accepted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
    )


class CurvePoint(_ItemModel):
    """A keyed point of a ballistic or armor curve."""
    time: float
    value: float
    arrive_tangent: float = 0.0
    leave_tangent: float = 0.0
    interp_mode: InterpMode = InterpMode.CUBIC
    tangent_mode: TangentMode = TangentMode.AUTO


def validate_curve(points: Sequence[CurvePoint]) -> Sequence[CurvePoint]:
    """Reject empty curves and curves whose time is not strictly increasing.

    Raises:
        MalformedCurveError: If the curve cannot be evaluated.
    """
    if len(points) == 0:
        raise MalformedCurveError("Curve must contain at least one point")

    for previous, current in zip(points, points[1:]):
        if current.time <= previous.time:
            raise MalformedCurveError(
                f"Curve time must be strictly increasing "
                f"(got {previous.time} followed by {current.time})"
            )
    return points


Curve = Annotated[tuple[CurvePoint, ...], AfterValidator(validate_curve)]


class BallisticCurves(_ItemModel):
    """Range-dependent curves of a round, keyed by distance in meters."""
    damage_over_distance: Optional[Curve] = None
    penetration_power_over_distance: Optional[Curve] = None


class ProtectiveZone(_ItemModel):
    """Protection an armor piece gives to a single body zone."""
    body_part: str = Field(..., description="Zone id, e.g. spine_01 or Thigh_L")
    armor_class: float = Field(..., ge=0)
    blunt_damage_scalar: float = Field(default=0.2, ge=0)
    protection_angle: float = Field(default=0.0)


class Weapon(_ItemModel):
    """Firearm item."""
    category: Literal["weapons"] = "weapons"
    id: str
    name: str
    subcategory: str = ""
    price: float = Field(default=0.0, ge=0)
    fire_rate: Optional[float] = Field(default=None, gt=0, description="Rounds per minute")
    caliber: Optional[str] = None


class Ammunition(_ItemModel):
    """Ammunition item."""
    category: Literal["ammo"] = "ammo"
    id: str
    name: str
    subcategory: str = ""
    price: float = Field(default=0.0, ge=0)
    damage: float = Field(..., ge=0)
    penetration: float = Field(..., ge=0)
    blunt_damage_scale: float = Field(default=0.1, ge=0)
    bleeding_chance: float = Field(default=0.0, ge=0, le=1)
    protection_gear_penetrated_damage_scale: float = Field(default=1.0, ge=0)
    protection_gear_blunt_damage_scale: float = Field(default=1.0, ge=0)
    muzzle_velocity: Optional[float] = None
    caliber: Optional[str] = None
    ballistic_curves: BallisticCurves = Field(default_factory=BallisticCurves)


class Armor(_ItemModel):
    """Protective gear. Use the concrete slot subclasses."""
    slot: ClassVar[ArmorSlot]

    category: Literal["gear"] = "gear"
    id: str
    name: str
    price: float = Field(default=0.0, ge=0)
    armor_class: float = Field(..., ge=0)
    max_durability: float = Field(..., gt=0)
    durability_damage_scalar: float = Field(default=0.5, ge=0)
    blunt_damage_scalar: float = Field(default=0.2, ge=0)
    protective_data: tuple[ProtectiveZone, ...] = ()
    penetration_chance_curve: Optional[Curve] = None
    penetration_damage_scalar_curve: Optional[Curve] = None
    anti_penetration_durability_scalar_curve: Optional[Curve] = None

    def zone_protection(self, zone_id: str) -> Optional[ProtectiveZone]:
        """Return the protective data entry for a zone, if listed."""
        for zone in self.protective_data:
            if zone.body_part == zone_id:
                return zone
        return None


class BodyArmor(Armor):
    slot: ClassVar[ArmorSlot] = ArmorSlot.BODY_ARMOR
    subcategory: Literal["Body Armor"] = "Body Armor"


class Helmet(Armor):
    slot: ClassVar[ArmorSlot] = ArmorSlot.HELMET
    subcategory: Literal["Helmets"] = "Helmets"


class FaceShield(Armor):
    slot: ClassVar[ArmorSlot] = ArmorSlot.FACE_SHIELD
    subcategory: Literal["Face Shields"] = "Face Shields"


ArmorItem = Annotated[
    Union[BodyArmor, Helmet, FaceShield],
    Field(discriminator="subcategory"),
]

Item = Annotated[
    Union[Weapon, Ammunition, ArmorItem],
    Field(discriminator="category"),
]

MODELLED_CATEGORIES = frozenset({"weapons", "ammo", "gear"})
ARMOR_SUBCATEGORIES = frozenset({"Body Armor", "Helmets", "Face Shields"})

_item_adapter = TypeAdapter(Item)


def parse_item(data: dict[str, Any]) -> Union[Weapon, Ammunition, BodyArmor, Helmet, FaceShield]:
    """Validate a single item record into its concrete model.

    Raises:
        pydantic.ValidationError: If the record is invalid or of an
            unmodelled category.
    """
    return _item_adapter.validate_python(data)
