"""
Shared fixtures for route_profit tests.

Provides reference data, a virtual clock and an in-memory data source
so a full scan runs without network access or real waiting.
"""

from typing import Callable, List, Optional, Tuple

import pytest

from src.route_profit.exceptions import AuthError, FetchError
from src.route_profit.ports.airline_data_source import AirlineDataSource, AirlineSession
from src.route_profit.ports.rate_limiter import RateLimiter
from src.route_profit.schemas.account import AccountSnapshot, Base, Credentials
from src.route_profit.schemas.airplane import AirplaneModelSpec, AirplaneType, OwnedAircraftEntry
from src.route_profit.schemas.airport import Airport
from src.route_profit.schemas.route import AircraftOption, RouteOffer


@pytest.fixture
def anyio_backend():
    """Use asyncio backend."""
    return "asyncio"


# =============================================================================
# TEST DOUBLES
# =============================================================================


class VirtualClock:
    """Clock whose sleep() advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.time = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.time

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.time += seconds


class CountingRateLimiter(RateLimiter):
    """Rate limiter that only records how often it was acquired."""

    def __init__(self) -> None:
        self.calls = 0

    async def acquire(self) -> None:
        self.calls += 1


class FakeAirlineDataSource(AirlineDataSource):
    """
    In-memory data source.

    Route offers come from offer_factory(origin_id, destination_id);
    pairs listed in failing_pairs raise FetchError, pairs in
    crashing_pairs raise RuntimeError.
    """

    def __init__(
        self,
        airports: List[Airport],
        specs: List[AirplaneModelSpec],
        offer_factory: Callable[[int, int], RouteOffer],
        fail_login: bool = False,
        failing_pairs: Tuple[Tuple[int, int], ...] = (),
        crashing_pairs: Tuple[Tuple[int, int], ...] = (),
        on_fetch: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        self.airports = airports
        self.specs = specs
        self.offer_factory = offer_factory
        self.fail_login = fail_login
        self.failing_pairs = set(failing_pairs)
        self.crashing_pairs = set(crashing_pairs)
        self.on_fetch = on_fetch
        self.fetched: List[Tuple[int, int]] = []
        self.logins = 0

    @property
    def name(self) -> str:
        return "Fake"

    async def login(self, credentials: Credentials) -> AirlineSession:
        self.logins += 1
        if self.fail_login:
            raise AuthError()
        return AirlineSession(airline_id=77, username=credentials.username)

    async def fetch_airports(self, session: AirlineSession) -> List[Airport]:
        return list(self.airports)

    async def fetch_airplane_models(self, session: AirlineSession) -> List[AirplaneModelSpec]:
        return list(self.specs)

    async def fetch_route_offer(
        self,
        session: AirlineSession,
        origin_airport_id: int,
        destination_airport_id: int,
    ) -> RouteOffer:
        pair = (origin_airport_id, destination_airport_id)
        self.fetched.append(pair)
        if self.on_fetch is not None:
            self.on_fetch(*pair)
        if pair in self.failing_pairs:
            raise FetchError(origin_airport_id, destination_airport_id, "HTTP 500")
        if pair in self.crashing_pairs:
            raise RuntimeError("connection reset")
        return self.offer_factory(origin_airport_id, destination_airport_id)


# =============================================================================
# REFERENCE DATA
# =============================================================================


@pytest.fixture
def a320_spec() -> AirplaneModelSpec:
    """Medium-type narrowbody."""
    return AirplaneModelSpec(
        id=10,
        name="Airbus A320",
        fuel_burn=10.0,
        price=1_000_000.0,
        lifespan_weeks=1000,
        airplane_type=AirplaneType.MEDIUM,
        capacity=180,
    )


@pytest.fixture
def atr_spec() -> AirplaneModelSpec:
    """Regional turboprop."""
    return AirplaneModelSpec(
        id=20,
        name="ATR 72",
        fuel_burn=3.0,
        price=200_000.0,
        lifespan_weeks=800,
        airplane_type=AirplaneType.REGIONAL,
        capacity=70,
    )


@pytest.fixture
def istanbul() -> Airport:
    return Airport(id=1, iata="IST", name="Istanbul Airport", city="Istanbul", size=5)


@pytest.fixture
def diyarbakir() -> Airport:
    return Airport(id=2, iata="DIY", name="Diyarbakir Airport", city="Diyarbakir", size=3)


@pytest.fixture
def a320_option() -> AircraftOption:
    return AircraftOption(
        model_id=10,
        model_name="Airbus A320",
        max_frequency=10,
        capacity=180,
        duration_minutes=120.0,
    )


@pytest.fixture
def make_airports() -> Callable[[int], List[Airport]]:
    """Factory for n airports with ids 1..n and IATA codes A01, A02, ..."""

    def _make(count: int) -> List[Airport]:
        return [
            Airport(id=i, iata=f"A{i:02d}", name=f"Airport {i}", city=f"City {i}", size=3)
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def priced_offer_factory() -> Callable[[int, int], RouteOffer]:
    """
    Offers with one A320 option priced by destination id, so a
    higher destination id always scores higher.
    """

    def _factory(origin_id: int, destination_id: int) -> RouteOffer:
        return RouteOffer(
            origin_airport_id=origin_id,
            destination_airport_id=destination_id,
            distance=500.0,
            options=(
                AircraftOption(
                    model_id=10,
                    model_name="Airbus A320",
                    max_frequency=7,
                    capacity=180,
                    duration_minutes=75.0,
                ),
            ),
            suggested_economy_price=200.0 + 10.0 * destination_id,
        )

    return _factory


@pytest.fixture
def account_factory() -> Callable[..., AccountSnapshot]:
    """Factory for snapshots owning the A320, with the given bases."""

    def _make(
        bases: Tuple[Base, ...],
        planes: Tuple[OwnedAircraftEntry, ...] = (OwnedAircraftEntry(model_name="a320"),),
    ) -> AccountSnapshot:
        return AccountSnapshot.create(
            name="main",
            credentials=Credentials(username="pilot", password="secret"),
            planes=planes,
            bases=bases,
        )

    return _make


@pytest.fixture
def fake_source_factory(
    a320_spec: AirplaneModelSpec,
    priced_offer_factory: Callable[[int, int], RouteOffer],
) -> Callable[..., FakeAirlineDataSource]:
    """Factory for FakeAirlineDataSource with the A320 spec loaded."""

    def _make(airports: List[Airport], **kwargs) -> FakeAirlineDataSource:
        kwargs.setdefault("offer_factory", priced_offer_factory)
        return FakeAirlineDataSource(airports=airports, specs=[a320_spec], **kwargs)

    return _make


@pytest.fixture
def virtual_clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def counting_rate_limiter() -> CountingRateLimiter:
    return CountingRateLimiter()
