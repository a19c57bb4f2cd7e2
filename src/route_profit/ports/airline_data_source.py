"""
Airline Data Source port interface.

Defines the abstract contract for the game backend the scan reads
from. Implementations own transport details (sessions, cookies,
retries); the domain only sees the shapes returned here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from src.route_profit.schemas.account import Credentials
    from src.route_profit.schemas.airplane import AirplaneModelSpec
    from src.route_profit.schemas.airport import Airport
    from src.route_profit.schemas.route import RouteOffer


@dataclass(frozen=True)
class AirlineSession:
    """
    Handle for an authenticated session.

    Attributes:
        airline_id: The operator's airline id (first airline of the account).
        username: Account the session belongs to.
    """

    airline_id: int
    username: str


class AirlineDataSource(ABC):
    """
    Abstract interface for the game backend.

    All methods are coroutines: every call is a suspension point of
    the scan.

    Implementations:
    - AirlineClubDataSource: HTTP client for airline-club.com
    - FakeAirlineDataSource: In-memory data for testing
    """

    @abstractmethod
    async def login(self, credentials: Credentials) -> AirlineSession:
        """
        Authenticate and open a session.

        Raises:
            AuthError: If the credentials are rejected or the server fails.
        """
        ...

    @abstractmethod
    async def fetch_airports(self, session: AirlineSession) -> List[Airport]:
        """
        Return the full airport list, in the game's order.

        Raises:
            ReferenceDataError: If the list cannot be fetched.
        """
        ...

    @abstractmethod
    async def fetch_airplane_models(self, session: AirlineSession) -> List[AirplaneModelSpec]:
        """
        Return every airplane model specification.

        Raises:
            ReferenceDataError: If the list cannot be fetched.
        """
        ...

    @abstractmethod
    async def fetch_route_offer(
        self,
        session: AirlineSession,
        origin_airport_id: int,
        destination_airport_id: int,
    ) -> RouteOffer:
        """
        Quote a route between two airports.

        Raises:
            FetchError: If the quote cannot be fetched or parsed.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this data source."""
        ...

    async def aclose(self) -> None:
        """Release transport resources. Default implementation does nothing."""
        return None
