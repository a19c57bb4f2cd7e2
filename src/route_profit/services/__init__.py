"""
Domain services for Route Profit.

Services hold the route economics (cost model, scorer) and orchestrate
the scan across ports (data source, rate limiter, progress sink).
"""

from src.route_profit.services.cost_model import CostInputs, CostModel
from src.route_profit.services.route_scorer import (
    RouteEvaluation,
    RouteScorer,
    ScoringContext,
    select_ticket_price,
)
from src.route_profit.services.scan_orchestrator import (
    ScanOrchestrator,
    rank_route_scores,
)

__all__ = [
    "CostInputs",
    "CostModel",
    "RouteEvaluation",
    "RouteScorer",
    "ScanOrchestrator",
    "ScoringContext",
    "rank_route_scores",
    "select_ticket_price",
]
