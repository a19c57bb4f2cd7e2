"""
Custom exceptions for the route_profit package.

Provides a hierarchy of exceptions separating fatal run failures
from per-route failures the scan recovers from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from src.route_profit.schemas.route import RouteScore


class RouteProfitError(Exception):
    """Base exception for all route_profit errors."""

    pass


class AuthError(RouteProfitError):
    """Raised when logging into the game backend fails. Aborts the run."""

    def __init__(self, message: str = "Login failed. Check credentials and server status.") -> None:
        super().__init__(message)


class FetchError(RouteProfitError):
    """Raised when a single route quote cannot be fetched."""

    def __init__(
        self,
        origin_airport_id: int,
        destination_airport_id: int,
        reason: str = "",
    ) -> None:
        self.origin_airport_id = origin_airport_id
        self.destination_airport_id = destination_airport_id
        self.reason = reason
        message = f"Failed to fetch route data ({origin_airport_id} -> {destination_airport_id})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReferenceDataError(RouteProfitError):
    """Raised when the airport or airplane model lists cannot be fetched."""

    def __init__(self, resource: str, reason: str = "") -> None:
        self.resource = resource
        message = f"Could not fetch {resource}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ScanCancelledError(RouteProfitError):
    """Raised when a scan is cancelled. Carries the bases ranked so far."""

    def __init__(self, partial_results: Optional[Dict[str, List[RouteScore]]] = None) -> None:
        self.partial_results = partial_results or {}
        super().__init__(
            f"Scan cancelled after {len(self.partial_results)} completed base(s)"
        )


class ConfigurationError(RouteProfitError):
    """Raised when a setting or cost-constant override is malformed."""

    pass


class StateStoreError(RouteProfitError):
    """Base exception for persisted account state errors."""

    pass


class AccountNotFoundError(StateStoreError):
    """Raised when an account name is not in the state file."""

    def __init__(self, account: str) -> None:
        self.account = account
        super().__init__(f'Account "{account}" not found')


class BaseNotFoundError(StateStoreError):
    """Raised when a base IATA code is not in an account's base list."""

    def __init__(self, account: str, base_iata: str) -> None:
        self.account = account
        self.base_iata = base_iata
        super().__init__(f'Base "{base_iata}" not found in baselist for account "{account}"')


class DuplicateEntryError(StateStoreError):
    """Raised when adding an entry that is already present."""

    pass


class EntryNotFoundError(StateStoreError):
    """Raised when removing an entry that is not present."""

    pass
