"""
Route Scorer - picks the best owned aircraft for a route.

For every viable aircraft with a positive weekly frequency, weekly
revenue minus weekly cost is divided by the frequency; the highest
profit per frequency wins.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, FrozenSet, List, Mapping, Optional, Sequence

from src.route_profit.schemas.cost import CostBreakdown
from src.route_profit.schemas.route import AircraftOption, RouteOffer
from src.route_profit.services.cost_model import CostInputs, CostModel

if TYPE_CHECKING:
    from src.route_profit.ports.fleet_matcher import FleetMatcher
    from src.route_profit.schemas.airplane import AirplaneModelSpec, OwnedAircraftEntry
    from src.route_profit.schemas.airport import Airport

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves towards positive infinity.

    Python's round() uses banker's rounding; the game rounds halves up.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))


def select_ticket_price(offer: RouteOffer) -> Optional[float]:
    """
    Economy fare used for revenue.

    The cheapest competitor economy fare if the route has competitors,
    otherwise the game's suggested economy fare.

    Returns:
        The fare, or None when neither is available.
    """
    if offer.competitor_economy_prices:
        return min(offer.competitor_economy_prices)
    return offer.suggested_economy_price


@dataclass(frozen=True)
class ScoringContext:
    """
    Run-wide lookups needed to cost an aircraft.

    Attributes:
        specs_by_id: Airplane model id -> specification.
        airports_by_id: Airport id -> airport.
        home_base_ids: Airport ids of the operator's bases.
        load_factor: Assumed passenger load.
    """

    specs_by_id: Mapping[int, AirplaneModelSpec]
    airports_by_id: Mapping[int, Airport]
    home_base_ids: FrozenSet[int] = field(default_factory=frozenset)
    load_factor: float = 1.0


@dataclass(frozen=True)
class OptionScore:
    """Profit figures of a single aircraft option."""

    option: AircraftOption
    ticket_price: float
    revenue: float
    cost: CostBreakdown
    score: int

    @property
    def profit(self) -> float:
        """Weekly profit."""
        return self.revenue - self.cost.total


@dataclass(frozen=True)
class RouteEvaluation:
    """
    Winning aircraft for a route.

    Attributes:
        score: Rounded weekly profit per frequency.
        aircraft_name: Display name of the winning model.
        option: The winning offered option.
        cost: Its weekly cost breakdown.
    """

    score: int
    aircraft_name: str
    option: AircraftOption
    cost: CostBreakdown


class RouteScorer:
    """
    Scores route offers against the operator's fleet.

    Attributes:
        _cost_model: Weekly cost calculator.
        _fleet_matcher: Strategy deciding which offered aircraft are owned.
    """

    def __init__(self, cost_model: CostModel, fleet_matcher: FleetMatcher) -> None:
        """
        Initialize the scorer.

        Args:
            cost_model: Weekly cost calculator.
            fleet_matcher: Owned-aircraft matching strategy.
        """
        self._cost_model = cost_model
        self._fleet_matcher = fleet_matcher

    def viable_options(
        self,
        offer: RouteOffer,
        owned: Sequence[OwnedAircraftEntry],
    ) -> List[AircraftOption]:
        """Offered options the operator owns."""
        return self._fleet_matcher.match(owned, offer.options)

    def score_options(
        self,
        offer: RouteOffer,
        viable: Sequence[AircraftOption],
        context: ScoringContext,
    ) -> List[OptionScore]:
        """
        Score every viable option that can be costed.

        Options with zero frequency, or whose cost is unavailable, are
        left out.

        Returns:
            OptionScores in the order of the viable options.
        """
        ticket_price = select_ticket_price(offer)
        if ticket_price is None:
            logger.debug(
                "No ticket price for %d -> %d",
                offer.origin_airport_id,
                offer.destination_airport_id,
            )
            return []

        origin = context.airports_by_id.get(offer.origin_airport_id)
        destination = context.airports_by_id.get(offer.destination_airport_id)

        scored: List[OptionScore] = []
        for option in viable:
            frequency = option.max_frequency
            if frequency <= 0:
                continue

            cost = self._cost_model.weekly_cost(
                CostInputs(
                    distance=offer.distance,
                    duration_minutes=option.duration_minutes,
                    frequency=frequency,
                    capacity=option.capacity,
                    spec=context.specs_by_id.get(option.model_id),
                    origin=origin,
                    destination=destination,
                    origin_is_base=offer.origin_airport_id in context.home_base_ids,
                    destination_is_base=offer.destination_airport_id in context.home_base_ids,
                    load_factor=context.load_factor,
                )
            )
            if cost is None:
                logger.debug("Skipping %s: cost unavailable", option.model_name)
                continue

            revenue = ticket_price * frequency * option.capacity
            score = round_half_up((revenue - cost.total) / frequency)
            scored.append(
                OptionScore(
                    option=option,
                    ticket_price=ticket_price,
                    revenue=revenue,
                    cost=cost,
                    score=score,
                )
            )
        return scored

    def evaluate(
        self,
        offer: RouteOffer,
        viable: Sequence[AircraftOption],
        context: ScoringContext,
    ) -> Optional[RouteEvaluation]:
        """
        Select the best viable option.

        Ties keep the first option encountered.

        Returns:
            RouteEvaluation, or None when no option could be scored.
        """
        best: Optional[OptionScore] = None
        for candidate in self.score_options(offer, viable, context):
            if best is None or candidate.score > best.score:
                best = candidate

        if best is None:
            return None

        return RouteEvaluation(
            score=best.score,
            aircraft_name=best.option.model_name,
            option=best.option,
            cost=best.cost,
        )

    def score_offer(
        self,
        offer: RouteOffer,
        owned: Sequence[OwnedAircraftEntry],
        context: ScoringContext,
    ) -> Optional[RouteEvaluation]:
        """Match the fleet against the offer, then evaluate it."""
        viable = self.viable_options(offer, owned)
        if not viable:
            return None
        return self.evaluate(offer, viable, context)

    @property
    def fleet_matcher_name(self) -> str:
        """Name of the matching strategy in use."""
        return self._fleet_matcher.name
