"""
Configuration module for Route Profit.

Loads environment variables (optionally from a .env file) and provides
the settings used to wire a scan: backend URL, state file, request
pacing, ranking size and cost calibration overrides.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from src.route_profit.adapters.data_sources.airline_club import AIRLINE_CLUB_URL, HttpConfig
from src.route_profit.adapters.state.json_state_store import DEFAULT_STATE_PATH
from src.route_profit.exceptions import ConfigurationError
from src.route_profit.schemas.cost import DEFAULT_COST_CONSTANTS, CostConstants
from src.route_profit.schemas.scan import ScanConfig

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got '{raw}'") from None


def load_cost_constants(path: Optional[str]) -> CostConstants:
    """
    Read a JSON calibration file of CostConstants overrides.

    Returns:
        DEFAULT_COST_CONSTANTS when path is empty, otherwise the defaults
        with the file's values applied.

    Raises:
        ConfigurationError: If the file is missing, malformed or has unknown keys.
    """
    if not path:
        return DEFAULT_COST_CONSTANTS
    try:
        with open(path, "r", encoding="utf-8") as file:
            overrides = json.load(file)
        return CostConstants.from_mapping(overrides)
    except (OSError, json.JSONDecodeError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid cost constants file {path}: {e}") from e


@dataclass(frozen=True)
class Settings:
    """
    Application settings.

    Attributes:
        base_url: Airline Club server URL.
        state_path: JSON account state file.
        request_interval_ms: Minimum spacing between route quotes.
        progress_every: Progress cadence in processed destinations.
        top_n: Routes kept per base.
        destination_cap: Only scan the first N airports (None = all).
        verbose: Log every scored pair.
        fleet_matcher: Fleet matching strategy name ('substring' or 'exact').
        http: Transport settings.
        cost_constants: Cost model calibration.
    """

    base_url: str = AIRLINE_CLUB_URL
    state_path: Path = Path(DEFAULT_STATE_PATH)
    request_interval_ms: int = 150
    progress_every: int = 50
    top_n: int = 10
    destination_cap: Optional[int] = None
    verbose: bool = False
    fleet_matcher: str = "substring"
    http: HttpConfig = HttpConfig()
    cost_constants: CostConstants = DEFAULT_COST_CONSTANTS

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv: bool = True,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Variables to read. Defaults to os.environ.
            dotenv: Load a .env file into os.environ first.

        Raises:
            ConfigurationError: If a value is malformed.
        """
        if dotenv:
            load_dotenv()
        env = os.environ if env is None else env

        http = HttpConfig(
            request_timeout_ms=_int(env, "ROUTE_PROFIT_TIMEOUT_MS", HttpConfig.request_timeout_ms),
            max_retries=_int(env, "ROUTE_PROFIT_MAX_RETRIES", HttpConfig.max_retries),
        )
        return cls(
            base_url=env.get("AIRLINE_CLUB_BASE_URL", "").strip() or AIRLINE_CLUB_URL,
            state_path=Path(env.get("ROUTE_PROFIT_STATE_PATH", "").strip() or DEFAULT_STATE_PATH),
            request_interval_ms=_int(env, "ROUTE_PROFIT_REQUEST_INTERVAL_MS", 150),
            progress_every=_int(env, "ROUTE_PROFIT_PROGRESS_EVERY", 50),
            top_n=_int(env, "ROUTE_PROFIT_TOP_N", 10),
            destination_cap=_int(env, "ROUTE_PROFIT_DESTINATION_CAP", None),
            verbose=env.get("ROUTE_PROFIT_VERBOSE", "").strip().lower() in _TRUE_VALUES,
            fleet_matcher=env.get("ROUTE_PROFIT_FLEET_MATCHER", "").strip() or "substring",
            http=http,
            cost_constants=load_cost_constants(env.get("ROUTE_PROFIT_COST_CONSTANTS", "").strip()),
        )

    def scan_config(self, **overrides) -> ScanConfig:
        """
        ScanConfig derived from these settings.

        Raises:
            ConfigurationError: If a value is out of range.
        """
        values = dict(
            request_interval_seconds=self.request_interval_ms / 1000.0,
            progress_every=self.progress_every,
            top_n=self.top_n,
            destination_cap=self.destination_cap,
            verbose=self.verbose,
        )
        values.update(overrides)
        try:
            return ScanConfig(**values)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
