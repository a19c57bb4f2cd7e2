"""
Airport reference data.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Airport:
    """
    Immutable airport record as published by the game.

    Attributes:
        id: Numeric airport id used by the game backend.
        iata: 3-letter IATA code (unique).
        name: Airport display name.
        city: City the airport serves.
        size: Size class (1 = smallest); drives slot and landing fee tiers.
        country_code: ISO country code, if known.
    """

    id: int
    iata: str
    name: str
    city: str
    size: int
    country_code: Optional[str] = None

    @property
    def label(self) -> str:
        """IATA code with city, e.g. 'IST (Istanbul)'."""
        return f"{self.iata} ({self.city})"
