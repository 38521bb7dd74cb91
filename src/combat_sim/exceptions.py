"""Exceptions raised by the combat simulation engine."""


class CombatSimError(Exception):
    """Base class for engine errors."""


class MalformedCurveError(CombatSimError, ValueError):
    """A curve is empty or its points are not strictly increasing in time."""


class UnresolvableKillError(CombatSimError):
    """A zone could not be killed within the shot cap."""

    def __init__(self, zone_id: str, shots_fired: int, reason: str):
        self.zone_id = zone_id
        self.shots_fired = shots_fired
        self.reason = reason
        super().__init__(
            f"Cannot resolve kill on zone '{zone_id}' after {shots_fired} shots: {reason}"
        )


class UnknownZoneError(CombatSimError, KeyError):
    """A zone id maps to no body part."""

    def __str__(self) -> str:
        return f"Unknown zone: {self.args[0]!r}"


class ItemNotFoundError(CombatSimError, KeyError):
    """An item id is not present in the loaded item data."""

    def __str__(self) -> str:
        return f"Item not found: {self.args[0]!r}"
