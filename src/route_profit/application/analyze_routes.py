"""
AnalyzeRoutes Use Case - Public API for route profitability scans.

Acts as a Facade/Factory: builds the data source, fleet matcher, rate
limiter, cost model and orchestrator from Settings, and exposes a
small async interface to consumers (CLI, bots).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from src.route_profit.adapters.data_sources.airline_club import AirlineClubDataSource
from src.route_profit.adapters.fleet_matchers import get_fleet_matcher
from src.route_profit.adapters.rate_limiters import FixedIntervalRateLimiter
from src.route_profit.adapters.state.json_state_store import JsonStateStore
from src.route_profit.config import Settings
from src.route_profit.exceptions import ConfigurationError
from src.route_profit.ports.airline_data_source import AirlineDataSource
from src.route_profit.ports.fleet_matcher import FleetMatcher
from src.route_profit.ports.progress import ProgressSink
from src.route_profit.ports.rate_limiter import RateLimiter
from src.route_profit.schemas.account import AccountSnapshot, Credentials
from src.route_profit.schemas.airport import Airport
from src.route_profit.schemas.route import RouteScore
from src.route_profit.services.cost_model import CostModel
from src.route_profit.services.route_scorer import RouteScorer
from src.route_profit.services.scan_orchestrator import ScanOrchestrator

logger = logging.getLogger(__name__)


class AnalyzeRoutes:
    """
    Public API for route profitability analysis.

    Example usage:
        >>> async with AnalyzeRoutes() as analyzer:
        ...     account = analyzer.state_store.account("main")
        ...     results = await analyzer.run(account, progress=print)
        ...     for base, routes in results.items():
        ...         print(base, [route.score for route in routes])

    Attributes:
        _settings: Application settings.
        _data_source: Game backend adapter.
        _state_store: Persisted account state.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        data_source: Optional[AirlineDataSource] = None,
        fleet_matcher: Optional[FleetMatcher] = None,
        rate_limiter: Optional[RateLimiter] = None,
        state_store: Optional[JsonStateStore] = None,
    ) -> None:
        """
        Initialize the analyzer with optional custom dependencies.

        Args:
            settings: Settings. If None, reads Settings.from_env().
            data_source: Custom data source. If None, uses AirlineClubDataSource.
            fleet_matcher: Custom matcher. If None, built from settings.fleet_matcher.
            rate_limiter: Custom throttle. If None, a FixedIntervalRateLimiter
                per run using settings.request_interval_ms.
            state_store: Custom state store. If None, uses settings.state_path.
        """
        self._settings = settings or Settings.from_env()
        self._data_source = data_source or AirlineClubDataSource(
            base_url=self._settings.base_url,
            config=self._settings.http,
        )
        if fleet_matcher is None:
            try:
                fleet_matcher = get_fleet_matcher(self._settings.fleet_matcher)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        self._fleet_matcher = fleet_matcher
        self._rate_limiter = rate_limiter
        self._state_store = state_store or JsonStateStore(self._settings.state_path)
        self._scorer = RouteScorer(CostModel(self._settings.cost_constants), self._fleet_matcher)

        logger.info(
            "AnalyzeRoutes initialized: source=%s, matcher=%s, cost constants %s",
            self._data_source.name,
            self._fleet_matcher.name,
            self._settings.cost_constants.version,
        )

    @property
    def state_store(self) -> JsonStateStore:
        return self._state_store

    @property
    def settings(self) -> Settings:
        return self._settings

    def build_orchestrator(self, **scan_overrides) -> ScanOrchestrator:
        """Orchestrator for one run; scan_overrides adjust the ScanConfig."""
        config = self._settings.scan_config(**scan_overrides)
        rate_limiter = self._rate_limiter or FixedIntervalRateLimiter(
            config.request_interval_seconds
        )
        return ScanOrchestrator(
            data_source=self._data_source,
            scorer=self._scorer,
            rate_limiter=rate_limiter,
            config=config,
        )

    async def run(
        self,
        account: AccountSnapshot,
        progress: Optional[ProgressSink] = None,
        cancel_event: Optional[asyncio.Event] = None,
        **scan_overrides,
    ) -> Dict[str, List[RouteScore]]:
        """
        Scan all bases of an account.

        Args:
            account: Account snapshot (see JsonStateStore.account).
            progress: Optional progress sink.
            cancel_event: Optional cooperative cancellation flag.
            **scan_overrides: ScanConfig fields overriding the settings
                (e.g. destination_cap=200, verbose=True).

        Returns:
            Base IATA -> best-first RouteScores.
        """
        orchestrator = self.build_orchestrator(**scan_overrides)
        return await orchestrator.run(account, progress=progress, cancel_event=cancel_event)

    async def run_account(
        self,
        account_name: str,
        progress: Optional[ProgressSink] = None,
        **scan_overrides,
    ) -> Dict[str, List[RouteScore]]:
        """Load an account from the state store and scan it."""
        return await self.run(self._state_store.account(account_name), progress, **scan_overrides)

    async def lookup_airport(self, credentials: Credentials, iata: str) -> Optional[Airport]:
        """
        Find an airport by IATA code using a fresh login.

        Returns:
            The airport, or None if the code is unknown.
        """
        session = await self._data_source.login(credentials)
        code = iata.strip().upper()
        for airport in await self._data_source.fetch_airports(session):
            if airport.iata == code:
                return airport
        return None

    async def aclose(self) -> None:
        """Release the data source."""
        await self._data_source.aclose()
        logger.debug("AnalyzeRoutes shutdown complete")

    async def __aenter__(self) -> "AnalyzeRoutes":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
