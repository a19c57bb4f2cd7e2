"""
Tests for RouteScorer.

Tests cover:
- Ticket price selection (competitor minimum vs suggested fare)
- Profit per frequency scoring and half-up rounding
- Best aircraft selection and tie-breaking
- Routes with no viable aircraft
"""

import dataclasses

import pytest

from src.route_profit.adapters.fleet_matchers import ExactFleetMatcher, SubstringFleetMatcher
from src.route_profit.schemas.airplane import AirplaneModelSpec, OwnedAircraftEntry
from src.route_profit.schemas.airport import Airport
from src.route_profit.schemas.route import AircraftOption, RouteOffer
from src.route_profit.services.cost_model import CostModel
from src.route_profit.services.route_scorer import (
    RouteScorer,
    ScoringContext,
    round_half_up,
    select_ticket_price,
)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def scorer() -> RouteScorer:
    return RouteScorer(CostModel(), SubstringFleetMatcher())


@pytest.fixture
def atr_option() -> AircraftOption:
    return AircraftOption(
        model_id=20,
        model_name="ATR 72",
        max_frequency=14,
        capacity=70,
        duration_minutes=90.0,
    )


@pytest.fixture
def context(
    a320_spec: AirplaneModelSpec,
    atr_spec: AirplaneModelSpec,
    istanbul: Airport,
    diyarbakir: Airport,
) -> ScoringContext:
    return ScoringContext(
        specs_by_id={a320_spec.id: a320_spec, atr_spec.id: atr_spec, 11: dataclasses.replace(a320_spec, id=11)},
        airports_by_id={istanbul.id: istanbul, diyarbakir.id: diyarbakir},
    )


@pytest.fixture
def offer(a320_option: AircraftOption, atr_option: AircraftOption) -> RouteOffer:
    """IST -> DIY, 1000 units, two competitors at 650 and 500."""
    return RouteOffer(
        origin_airport_id=1,
        destination_airport_id=2,
        distance=1000.0,
        options=(atr_option, a320_option),
        competitor_economy_prices=(650.0, 500.0),
        suggested_economy_price=420.0,
    )


OWNS_BOTH = (OwnedAircraftEntry(model_name="a320"), OwnedAircraftEntry(model_id=20))


# =============================================================================
# TICKET PRICE
# =============================================================================


class TestTicketPrice:
    def test_cheapest_competitor_wins(self, offer: RouteOffer):
        assert select_ticket_price(offer) == 500.0

    def test_suggested_price_without_competitors(self, offer: RouteOffer):
        uncontested = dataclasses.replace(offer, competitor_economy_prices=())
        assert select_ticket_price(uncontested) == 420.0

    def test_no_price_available(self, offer: RouteOffer):
        bare = dataclasses.replace(offer, competitor_economy_prices=(), suggested_economy_price=None)
        assert select_ticket_price(bare) is None


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,expected",
        [(2.5, 3), (2.4, 2), (-2.5, -2), (-2.6, -3), (0.0, 0), (69364.0, 69364)],
    )
    def test_round_half_up(self, value: float, expected: int):
        assert round_half_up(value) == expected


# =============================================================================
# SCORING
# =============================================================================


class TestScoreOffer:
    def test_a320_profit_per_frequency(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        """Revenue 500 * 10 * 180 = 900,000 minus weekly cost 206,360, over 10 frequencies."""
        evaluation = scorer.score_offer(offer, (OwnedAircraftEntry(model_name="a320"),), context)

        assert evaluation is not None
        assert evaluation.score == 69_364
        assert evaluation.aircraft_name == "Airbus A320"
        assert evaluation.cost.total == pytest.approx(206_360.0)

    def test_destination_base_gets_slot_discount(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        """DIY declared as a base: 20% off its 640 slot fee saves 128 per flight."""
        owned = (OwnedAircraftEntry(model_id=10),)
        plain = scorer.score_offer(offer, owned, context)
        at_base = scorer.score_offer(
            offer, owned, dataclasses.replace(context, home_base_ids=frozenset({2}))
        )

        assert at_base.cost.total == pytest.approx(plain.cost.total - 128.0 * 10)
        assert at_base.cost.airport_fees < plain.cost.airport_fees
        assert at_base.score == 69_492

    def test_both_endpoints_at_bases(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        """Origin slot 2,000 and destination slot 640 are both discounted."""
        owned = (OwnedAircraftEntry(model_id=10),)
        both = scorer.score_offer(
            offer, owned, dataclasses.replace(context, home_base_ids=frozenset({1, 2}))
        )

        assert both.cost.total == pytest.approx(206_360.0 - (400.0 + 128.0) * 10)

    def test_suggested_price_used_when_uncontested(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        uncontested = dataclasses.replace(offer, competitor_economy_prices=())
        evaluation = scorer.score_offer(uncontested, (OwnedAircraftEntry(model_id=10),), context)

        assert evaluation.score == 54_964

    def test_best_aircraft_selected(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        scored = scorer.score_options(offer, scorer.viable_options(offer, OWNS_BOTH), context)
        evaluation = scorer.score_offer(offer, OWNS_BOTH, context)

        assert [option_score.option.model_name for option_score in scored] == ["ATR 72", "Airbus A320"]
        assert scored[0].score == 27_927
        assert evaluation.score == max(option_score.score for option_score in scored)
        assert evaluation.aircraft_name == "Airbus A320"

    def test_only_owned_aircraft_considered(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        evaluation = scorer.score_offer(offer, (OwnedAircraftEntry(model_name="atr"),), context)

        assert evaluation.aircraft_name == "ATR 72"
        assert evaluation.score == 27_927

    def test_tie_keeps_first_option(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        a320_option: AircraftOption,
        context: ScoringContext,
    ):
        twin = dataclasses.replace(a320_option, model_id=11, model_name="Airbus A320 Twin")
        tied = dataclasses.replace(offer, options=(a320_option, twin))

        evaluation = scorer.score_offer(tied, (OwnedAircraftEntry(model_name="a320"),), context)

        assert evaluation.aircraft_name == "Airbus A320"

    def test_zero_frequency_option_skipped(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        a320_option: AircraftOption,
        context: ScoringContext,
    ):
        grounded = dataclasses.replace(offer, options=(dataclasses.replace(a320_option, max_frequency=0),))
        assert scorer.score_offer(grounded, OWNS_BOTH, context) is None

    def test_no_owned_aircraft(self, scorer: RouteScorer, offer: RouteOffer, context: ScoringContext):
        assert scorer.score_offer(offer, (OwnedAircraftEntry(model_name="boeing"),), context) is None

    def test_no_price_means_no_score(self, scorer: RouteScorer, offer: RouteOffer, context: ScoringContext):
        bare = dataclasses.replace(offer, competitor_economy_prices=(), suggested_economy_price=None)
        assert scorer.score_offer(bare, OWNS_BOTH, context) is None

    def test_unknown_model_spec_skipped(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        """Options whose spec is missing are left out; the others still score."""
        no_a320 = dataclasses.replace(context, specs_by_id={20: context.specs_by_id[20]})
        evaluation = scorer.score_offer(offer, OWNS_BOTH, no_a320)

        assert evaluation.aircraft_name == "ATR 72"

    def test_unprofitable_route_keeps_negative_score(
        self,
        scorer: RouteScorer,
        offer: RouteOffer,
        context: ScoringContext,
    ):
        cheap = dataclasses.replace(offer, competitor_economy_prices=(10.0,))
        evaluation = scorer.score_offer(cheap, (OwnedAircraftEntry(model_id=10),), context)

        assert evaluation.score == round_half_up((10.0 * 10 * 180 - 206_360.0) / 10)
        assert evaluation.score < 0

    def test_exact_matcher_rejects_fragments(self, offer: RouteOffer, context: ScoringContext):
        scorer = RouteScorer(CostModel(), ExactFleetMatcher())

        assert scorer.score_offer(offer, (OwnedAircraftEntry(model_name="a320"),), context) is None
        assert scorer.score_offer(offer, (OwnedAircraftEntry(model_name="Airbus A320"),), context) is not None
        assert scorer.fleet_matcher_name == "exact"

    def test_scoring_is_deterministic(self, scorer: RouteScorer, offer: RouteOffer, context: ScoringContext):
        first = scorer.score_offer(offer, OWNS_BOTH, context)
        second = scorer.score_offer(offer, OWNS_BOTH, context)
        assert first == second
