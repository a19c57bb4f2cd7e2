"""
Schema definitions for Route Profit.

Frozen dataclasses for domain records, Pandera models for tabular export.
"""

from .account import AccountSnapshot, Base, Credentials
from .airplane import AirplaneModelSpec, AirplaneType, OwnedAircraftEntry
from .airport import Airport
from .cost import DEFAULT_COST_CONSTANTS, CostBreakdown, CostConstants
from .route import (
    AircraftOption,
    RouteOffer,
    RouteScore,
    RouteScoreSchema,
    scores_to_frame,
)
from .scan import ScanConfig

__all__ = [
    # Reference data
    "Airport",
    "AirplaneModelSpec",
    "AirplaneType",
    # Account configuration
    "AccountSnapshot",
    "Base",
    "Credentials",
    "OwnedAircraftEntry",
    # Cost model
    "CostBreakdown",
    "CostConstants",
    "DEFAULT_COST_CONSTANTS",
    # Routes
    "AircraftOption",
    "RouteOffer",
    "RouteScore",
    "RouteScoreSchema",
    "scores_to_frame",
    # Scan
    "ScanConfig",
]
