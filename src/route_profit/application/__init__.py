"""
Application layer for Route Profit.

Provides the public API for route profitability scans: a facade that
wires adapters and services together, and the command line interface.
"""

from src.route_profit.application.analyze_routes import AnalyzeRoutes

__all__ = ["AnalyzeRoutes"]
