"""
Airline Club Data Source - HTTP adapter for airline-club.com.

Logs in with HTTP Basic credentials, keeps the session cookie in the
httpx client, and reads reference data and route quotes from the
same JSON endpoints the game's web client uses. Retries HTTP 429 with
exponential backoff; every other failure surfaces as the error type
the scan expects.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from src.route_profit.adapters.data_sources.payloads import (
    AirplaneModelPayload,
    AirportPayload,
    LoginPayload,
    PlanLinkPayload,
)
from src.route_profit.exceptions import AuthError, FetchError, ReferenceDataError
from src.route_profit.ports.airline_data_source import AirlineDataSource, AirlineSession
from src.route_profit.schemas.account import Credentials
from src.route_profit.schemas.airplane import AirplaneModelSpec
from src.route_profit.schemas.airport import Airport
from src.route_profit.schemas.route import RouteOffer

logger = logging.getLogger(__name__)

AIRLINE_CLUB_URL = "https://www.airline-club.com"


@dataclass(frozen=True)
class HttpConfig:
    """
    Transport settings for the Airline Club client.

    Attributes:
        request_timeout_ms: Per-request timeout in milliseconds.
        max_retries: Max retry attempts on HTTP 429.
        initial_backoff_seconds: First backoff delay.
        backoff_multiplier: Exponential backoff multiplier for retries.
    """

    request_timeout_ms: int = 15000
    max_retries: int = 3
    initial_backoff_seconds: float = 1.0
    backoff_multiplier: float = 2.0


class _RetryableStatus(Exception):
    """Internal: the server kept answering 429 past max_retries."""


class AirlineClubDataSource(AirlineDataSource):
    """
    Data source backed by the Airline Club web API.

    The httpx client is created lazily and shares one cookie jar, so a
    login carries over to every later request.

    Attributes:
        _base_url: Game server URL.
        _config: Transport settings.
        _client: Async HTTP client.
    """

    def __init__(
        self,
        base_url: str = AIRLINE_CLUB_URL,
        config: Optional[HttpConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the data source.

        Args:
            base_url: Game server URL.
            config: Transport settings. If None, uses defaults.
            client: Pre-built client (tests). If None, one is created on first use.
        """
        self._base_url = base_url.rstrip("/")
        self._config = config or HttpConfig()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={
                    "X-Requested-With": "XMLHttpRequest",
                    "Accept": "application/json",
                },
                timeout=httpx.Timeout(self._config.request_timeout_ms / 1000.0, connect=5.0),
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    @property
    def name(self) -> str:
        return "Airline Club"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send a request, retrying HTTP 429 with exponential backoff.

        Raises:
            httpx.HTTPError: On transport errors and non-2xx responses.
            _RetryableStatus: If 429 persists past max_retries.
        """
        client = self._get_client()
        retries = 0
        backoff = self._config.initial_backoff_seconds

        while True:
            response = await client.request(method, path, **kwargs)
            if response.status_code != 429:
                response.raise_for_status()
                return response

            retries += 1
            if retries > self._config.max_retries:
                raise _RetryableStatus(f"rate limited after {self._config.max_retries} retries")
            logger.warning(
                "Rate limited by Airline Club on %s, retry %d/%d in %.1fs",
                path,
                retries,
                self._config.max_retries,
                backoff,
            )
            await asyncio.sleep(backoff)
            backoff *= self._config.backoff_multiplier

    async def login(self, credentials: Credentials) -> AirlineSession:
        token = base64.b64encode(
            f"{credentials.username}:{credentials.password}".encode("utf-8")
        ).decode("ascii")
        try:
            response = await self._request(
                "POST",
                "/login",
                headers={"Authorization": f"Basic {token}"},
            )
            payload = LoginPayload.model_validate(response.json())
        except (httpx.HTTPError, _RetryableStatus, ValidationError, ValueError) as e:
            logger.error("Login request failed: %s", e)
            raise AuthError() from e

        if not payload.airline_ids:
            raise AuthError("Login failed: No airlineIds found in response.")

        return AirlineSession(airline_id=payload.airline_ids[0], username=credentials.username)

    async def fetch_airports(self, session: AirlineSession) -> List[Airport]:
        try:
            response = await self._request("GET", "/airports")
            payloads = [AirportPayload.model_validate(item) for item in response.json()]
        except (httpx.HTTPError, _RetryableStatus, ValidationError, ValueError, TypeError) as e:
            logger.error("Failed to fetch airports: %s", e)
            raise ReferenceDataError("airport list", str(e)) from e
        return [payload.to_domain() for payload in payloads]

    async def fetch_airplane_models(self, session: AirlineSession) -> List[AirplaneModelSpec]:
        try:
            response = await self._request("GET", "/airplane-models")
            payloads = [AirplaneModelPayload.model_validate(item) for item in response.json()]
        except (httpx.HTTPError, _RetryableStatus, ValidationError, ValueError, TypeError) as e:
            logger.error("Failed to fetch airplane models: %s", e)
            raise ReferenceDataError("airplane model list", str(e)) from e

        specs = [payload.to_domain() for payload in payloads]
        unknown = [spec.name for spec in specs if spec.airplane_type is None]
        if unknown:
            logger.warning("Airplane models with unknown type (not costed): %s", ", ".join(unknown))
        return specs

    async def fetch_route_offer(
        self,
        session: AirlineSession,
        origin_airport_id: int,
        destination_airport_id: int,
    ) -> RouteOffer:
        form = {
            "airlineId": str(session.airline_id),
            "fromAirportId": str(origin_airport_id),
            "toAirportId": str(destination_airport_id),
        }
        try:
            response = await self._request(
                "POST",
                f"/airlines/{session.airline_id}/plan-link",
                data=form,
            )
            payload = PlanLinkPayload.model_validate(response.json())
        except (httpx.HTTPError, _RetryableStatus, ValidationError, ValueError) as e:
            raise FetchError(origin_airport_id, destination_airport_id, str(e)) from e
        return payload.to_domain()

