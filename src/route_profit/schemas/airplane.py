"""
Airplane model reference data and the operator's owned-fleet entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AirplaneType(Enum):
    """Size category of an airplane model. Drives the slot fee multiplier."""

    LIGHT = "light"
    SMALL = "small"
    REGIONAL = "regional"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"
    JUMBO = "jumbo"
    SUPERSONIC = "supersonic"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AirplaneType"]:
        """
        Parse a type tag as the game spells it ('Extra Large', 'EXTRA_LARGE', ...).

        Returns:
            The matching AirplaneType, or None if the tag is unknown.
        """
        if not value:
            return None
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        for member in cls:
            if member.value == normalized:
                return member
        return None


@dataclass(frozen=True)
class AirplaneModelSpec:
    """
    Immutable airplane model specification.

    Attributes:
        id: Numeric model id.
        name: Model display name (e.g. 'Airbus A320').
        fuel_burn: Fuel burn rate per distance unit.
        price: Acquisition price.
        lifespan_weeks: Operational lifespan in weeks.
        airplane_type: Size category, None when the game sent an unknown tag.
        capacity: Maximum seat count.
    """

    id: int
    name: str
    fuel_burn: float
    price: float
    lifespan_weeks: int
    airplane_type: Optional[AirplaneType]
    capacity: int = 0


def normalize_model_name(name: str) -> str:
    """Trim and lower-case a model name for comparison."""
    return name.strip().lower()


@dataclass(frozen=True)
class OwnedAircraftEntry:
    """
    One entry of an operator's plane list.

    Exactly one of model_id or model_name is set. Names are stored
    normalized (trimmed, lower-cased) and may be partial fragments.
    """

    model_id: Optional[int] = None
    model_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that exactly one identifier is present."""
        if (self.model_id is None) == (self.model_name is None):
            raise ValueError("OwnedAircraftEntry needs exactly one of model_id or model_name")
        if self.model_name is not None:
            normalized = normalize_model_name(self.model_name)
            if not normalized:
                raise ValueError("model_name cannot be blank")
            object.__setattr__(self, "model_name", normalized)

    @classmethod
    def parse(cls, identifier: str) -> "OwnedAircraftEntry":
        """
        Build an entry from user input.

        A string of ASCII digits becomes a model id; anything else is
        stored as a normalized name fragment.

        Examples:
            >>> OwnedAircraftEntry.parse("42")
            OwnedAircraftEntry(model_id=42, model_name=None)
            >>> OwnedAircraftEntry.parse("  Airbus A320 ")
            OwnedAircraftEntry(model_id=None, model_name='airbus a320')
        """
        text = identifier.strip()
        if text.isascii() and text.isdigit():
            return cls(model_id=int(text))
        return cls(model_name=text)

    @property
    def label(self) -> str:
        """Display form used in plane list listings."""
        if self.model_id is not None:
            return f"ID: {self.model_id}"
        return f'"{self.model_name}"'
