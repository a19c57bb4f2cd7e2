"""
Port interfaces for Route Profit.

Ports define the abstract interfaces (ABCs and Protocols) that the domain
layer uses to communicate with external systems. This follows the
Ports and Adapters (Hexagonal) architecture pattern.
"""

from src.route_profit.ports.airline_data_source import AirlineDataSource, AirlineSession
from src.route_profit.ports.fleet_matcher import FleetMatcher
from src.route_profit.ports.progress import ProgressSink
from src.route_profit.ports.rate_limiter import Clock, RateLimiter

__all__ = [
    "AirlineDataSource",
    "AirlineSession",
    "Clock",
    "FleetMatcher",
    "ProgressSink",
    "RateLimiter",
]
