"""
Account snapshot schemas.

An AccountSnapshot is the immutable view of one operator's persisted
configuration, taken once at run start and handed to the scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Mapping, Tuple

from src.route_profit.schemas.airplane import OwnedAircraftEntry


@dataclass(frozen=True)
class Credentials:
    """Game login credentials. The password is hidden from repr."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Base:
    """
    A home airport used as scan origin.

    Exclusions are scoped to this base only: the same airport may be
    excluded here and scanned from another base.

    Attributes:
        iata: Base IATA code (upper-case).
        airport_id: Game airport id of the base.
        excluded_airports: (IATA, airport id) pairs skipped for this base.
    """

    iata: str
    airport_id: int
    excluded_airports: Tuple[Tuple[str, int], ...] = ()

    @classmethod
    def create(
        cls,
        iata: str,
        airport_id: int,
        excluded_airports: Mapping[str, int] | None = None,
    ) -> "Base":
        """Factory accepting a plain IATA -> id mapping for exclusions."""
        excluded = tuple(
            sorted((code.upper(), airport_id) for code, airport_id in (excluded_airports or {}).items())
        )
        return cls(iata=iata.upper(), airport_id=airport_id, excluded_airports=excluded)

    @property
    def excluded_airport_ids(self) -> FrozenSet[int]:
        """Airport ids skipped when scanning from this base."""
        return frozenset(airport_id for _, airport_id in self.excluded_airports)


@dataclass(frozen=True)
class AccountSnapshot:
    """
    Immutable copy of an account's configuration for one analysis run.

    Attributes:
        name: Account name in the state store.
        credentials: Game login credentials.
        planes: Owned aircraft entries.
        bases: Bases in declaration order.
    """

    name: str
    credentials: Credentials
    planes: Tuple[OwnedAircraftEntry, ...] = ()
    bases: Tuple[Base, ...] = ()

    @classmethod
    def create(
        cls,
        name: str,
        credentials: Credentials,
        planes: Iterable[OwnedAircraftEntry] = (),
        bases: Iterable[Base] = (),
    ) -> "AccountSnapshot":
        """Factory converting iterables to tuples."""
        return cls(name=name, credentials=credentials, planes=tuple(planes), bases=tuple(bases))

    @property
    def home_base_ids(self) -> FrozenSet[int]:
        """Airport ids of all declared bases (eligible for the slot fee discount)."""
        return frozenset(base.airport_id for base in self.bases)
