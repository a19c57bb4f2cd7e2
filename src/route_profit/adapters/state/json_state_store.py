"""
JSON State Store - persisted per-account configuration.

Stores accounts, plane lists, bases and per-base exclude lists in a
single JSON document:

    {
      "accounts": {
        "<name>": {
          "username": "...",
          "password": "...",
          "planeList": [{"modelId": 12, "modelName": null}, ...],
          "baseAirports": {"IST": {"id": 101, "excludeAirports": {"DIY": 202}}}
        }
      }
    }

Older layouts are migrated on load. Scans receive immutable
AccountSnapshots, never the document itself.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from src.route_profit.exceptions import (
    AccountNotFoundError,
    BaseNotFoundError,
    DuplicateEntryError,
    EntryNotFoundError,
    StateStoreError,
)
from src.route_profit.schemas.account import AccountSnapshot, Base, Credentials
from src.route_profit.schemas.airplane import OwnedAircraftEntry

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = "bot_state.json"

State = Dict[str, Any]


def migrate_state(state: State) -> State:
    """
    Bring a loaded document up to the current layout.

    - Global planeList/baseAirports move to the first account when that
      account has none of its own, and are dropped otherwise.
    - Bases stored as a bare airport id become {"id", "excludeAirports"}.
    - Account-level excludeAirports are dropped (exclusions are per base).

    Returns:
        A migrated deep copy; the input is not modified.
    """
    state = copy.deepcopy(state)
    accounts = state.setdefault("accounts", {})

    global_planes = state.pop("planeList", None) or []
    global_bases = state.pop("baseAirports", None) or {}
    if (global_planes or global_bases) and accounts:
        first_name = next(iter(accounts))
        first = accounts[first_name]
        if global_planes and not first.get("planeList"):
            first["planeList"] = global_planes
            logger.info("Migrated planeList (%d items) to account %s", len(global_planes), first_name)
        if global_bases and not first.get("baseAirports"):
            first["baseAirports"] = global_bases
            logger.info("Migrated baseAirports (%d items) to account %s", len(global_bases), first_name)

    for account in accounts.values():
        account.setdefault("planeList", [])
        bases = account.setdefault("baseAirports", {})
        for iata, base in list(bases.items()):
            if not isinstance(base, dict):
                bases[iata] = {"id": base, "excludeAirports": {}}
            elif not base.get("excludeAirports"):
                base["excludeAirports"] = {}
        account.pop("excludeAirports", None)

    return state


def _plane_entry(raw: Dict[str, Any]) -> OwnedAircraftEntry | None:
    if raw.get("modelId") is not None:
        return OwnedAircraftEntry(model_id=int(raw["modelId"]))
    if raw.get("modelName"):
        return OwnedAircraftEntry(model_name=str(raw["modelName"]))
    return None


def _parse_plane(identifier: str) -> OwnedAircraftEntry:
    try:
        return OwnedAircraftEntry.parse(identifier)
    except ValueError as e:
        raise StateStoreError(f"Invalid plane \"{identifier}\": {e}") from e


class JsonStateStore:
    """
    Flat keyed-document store backed by a JSON file.

    Every operation reads the file, applies migrations and, for writes,
    saves atomically (temp file + rename).

    Attributes:
        _path: Location of the JSON document.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_STATE_PATH) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_file(self) -> None:
        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self.save({"accounts": {}})

    def load(self) -> State:
        """
        Read and migrate the document, creating it if missing.

        Raises:
            StateStoreError: If the file is not valid JSON.
        """
        self._ensure_file()
        try:
            with open(self._path, "r", encoding="utf-8") as file:
                raw = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            raise StateStoreError(f"Failed to load state from {self._path}: {e}") from e
        if not isinstance(raw, dict):
            raise StateStoreError(f"State file {self._path} must hold a JSON object")
        return migrate_state(raw)

    def save(self, state: State) -> None:
        """Write the document atomically."""
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".state-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(state, file, indent=2)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise StateStoreError(f"Failed to save state to {self._path}: {e}") from e
        logger.debug("State saved to %s", self._path)

    @staticmethod
    def _account(state: State, name: str) -> Dict[str, Any]:
        try:
            return state["accounts"][name]
        except KeyError:
            raise AccountNotFoundError(name) from None

    @staticmethod
    def _base(account_state: Dict[str, Any], account: str, base_iata: str) -> Dict[str, Any]:
        try:
            return account_state["baseAirports"][base_iata.upper()]
        except KeyError:
            raise BaseNotFoundError(account, base_iata.upper()) from None

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def account_names(self) -> List[str]:
        return list(self.load()["accounts"])

    def upsert_account(self, name: str, username: str, password: str) -> None:
        """Create an account or replace its credentials, keeping its lists."""
        state = self.load()
        account = state["accounts"].setdefault(name, {"planeList": [], "baseAirports": {}})
        account["username"] = username
        account["password"] = password
        self.save(state)

    def account(self, name: str) -> AccountSnapshot:
        """
        Immutable snapshot of one account.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """
        account = self._account(self.load(), name)

        planes = []
        for raw in account["planeList"]:
            entry = _plane_entry(raw)
            if entry is None:
                logger.warning("Ignoring empty plane entry in account %s", name)
                continue
            planes.append(entry)

        bases = [
            Base.create(
                iata=iata,
                airport_id=int(base["id"]),
                excluded_airports={
                    code.upper(): int(airport_id)
                    for code, airport_id in base["excludeAirports"].items()
                },
            )
            for iata, base in account["baseAirports"].items()
        ]

        return AccountSnapshot.create(
            name=name,
            credentials=Credentials(
                username=account.get("username", ""),
                password=account.get("password", ""),
            ),
            planes=planes,
            bases=bases,
        )

    # ------------------------------------------------------------------
    # Plane list
    # ------------------------------------------------------------------

    def add_plane(self, account: str, identifier: str) -> OwnedAircraftEntry:
        """
        Add a plane by model id (digits) or name fragment.

        Raises:
            DuplicateEntryError: If the same id or normalized name is listed.
        """
        entry = _parse_plane(identifier)
        state = self.load()
        planes = self._account(state, account)["planeList"]
        if any(_plane_entry(raw) == entry for raw in planes):
            raise DuplicateEntryError(
                f"Plane {entry.label} is already in the list for account \"{account}\""
            )
        planes.append({"modelId": entry.model_id, "modelName": entry.model_name})
        self.save(state)
        return entry

    def remove_plane(self, account: str, identifier: str) -> OwnedAircraftEntry:
        """
        Remove a plane by model id or exact stored name.

        Raises:
            EntryNotFoundError: If nothing matched.
        """
        entry = _parse_plane(identifier)
        state = self.load()
        account_state = self._account(state, account)
        remaining = [raw for raw in account_state["planeList"] if _plane_entry(raw) != entry]
        if len(remaining) == len(account_state["planeList"]):
            raise EntryNotFoundError(
                f"Could not find plane \"{identifier}\" in the list for account \"{account}\""
            )
        account_state["planeList"] = remaining
        self.save(state)
        return entry

    # ------------------------------------------------------------------
    # Bases
    # ------------------------------------------------------------------

    def add_base(self, account: str, iata: str, airport_id: int) -> None:
        """
        Raises:
            DuplicateEntryError: If the base is already listed.
        """
        code = iata.upper()
        state = self.load()
        bases = self._account(state, account)["baseAirports"]
        if code in bases:
            raise DuplicateEntryError(f"Airport {code} is already in the baselist for account \"{account}\"")
        bases[code] = {"id": airport_id, "excludeAirports": {}}
        self.save(state)

    def remove_base(self, account: str, iata: str) -> None:
        code = iata.upper()
        state = self.load()
        account_state = self._account(state, account)
        self._base(account_state, account, code)
        del account_state["baseAirports"][code]
        self.save(state)

    # ------------------------------------------------------------------
    # Per-base exclude lists
    # ------------------------------------------------------------------

    def add_exclusion(self, account: str, base_iata: str, iata: str, airport_id: int) -> None:
        """
        Exclude an airport from one base's scans.

        Raises:
            BaseNotFoundError: If the base is not listed.
            DuplicateEntryError: If the airport is already excluded for this base.
        """
        code = iata.upper()
        state = self.load()
        base = self._base(self._account(state, account), account, base_iata)
        if code in base["excludeAirports"]:
            raise DuplicateEntryError(
                f"Airport {code} is already in the exclude list for base \"{base_iata.upper()}\""
            )
        base["excludeAirports"][code] = airport_id
        self.save(state)

    def remove_exclusion(self, account: str, base_iata: str, iata: str) -> None:
        code = iata.upper()
        state = self.load()
        base = self._base(self._account(state, account), account, base_iata)
        if code not in base["excludeAirports"]:
            raise EntryNotFoundError(
                f"Airport {code} is not in the exclude list for base \"{base_iata.upper()}\""
            )
        del base["excludeAirports"][code]
        self.save(state)
