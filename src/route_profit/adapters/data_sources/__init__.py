"""
Data source adapters for the game backend.
"""

from src.route_profit.adapters.data_sources.airline_club import (
    AIRLINE_CLUB_URL,
    AirlineClubDataSource,
    HttpConfig,
)

__all__ = [
    "AIRLINE_CLUB_URL",
    "AirlineClubDataSource",
    "HttpConfig",
]
