"""
Fleet Matcher port interface.

Decides which of the aircraft offered for a route the operator owns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from src.route_profit.schemas.airplane import OwnedAircraftEntry
    from src.route_profit.schemas.route import AircraftOption


class FleetMatcher(ABC):
    """
    Abstract strategy for matching owned aircraft to offered options.

    Implementations:
    - SubstringFleetMatcher: id match or name-fragment containment
    - ExactFleetMatcher: id match or exact normalized name
    """

    @abstractmethod
    def match(
        self,
        owned: Sequence[OwnedAircraftEntry],
        options: Sequence[AircraftOption],
    ) -> List[AircraftOption]:
        """
        Return the offered options the operator owns.

        Args:
            owned: The operator's plane list.
            options: Aircraft offered for the route, in game order.

        Returns:
            Matching options in their offered order. Empty when nothing
            matches; that is not an error.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy identifier."""
        ...
