"""
Cost Model - weekly operating cost of an aircraft on a route.

Reconstructs the game's link economics from distance, aircraft
specification and endpoint airports. Six independent terms are summed:
fuel, crew, airport fees, depreciation, maintenance and service supplies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.route_profit.schemas.airplane import AirplaneModelSpec
from src.route_profit.schemas.airport import Airport
from src.route_profit.schemas.cost import (
    DEFAULT_COST_CONSTANTS,
    CostBreakdown,
    CostConstants,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostInputs:
    """
    Everything the cost model needs for one aircraft on one route.

    spec, origin and destination are Optional so callers can pass
    lookups straight through; a missing value makes the cost unavailable.

    Attributes:
        distance: Route distance.
        duration_minutes: One-way flight duration.
        frequency: Scheduled weekly frequency.
        capacity: Seats per flight.
        spec: Airplane model specification.
        origin: Origin airport.
        destination: Destination airport.
        origin_is_base: Origin is one of the operator's bases.
        destination_is_base: Destination is one of the operator's bases.
        load_factor: Assumed passenger load in [0, 1].
    """

    distance: float
    duration_minutes: float
    frequency: int
    capacity: int
    spec: Optional[AirplaneModelSpec]
    origin: Optional[Airport]
    destination: Optional[Airport]
    origin_is_base: bool = False
    destination_is_base: bool = False
    load_factor: float = 1.0


class CostModel:
    """
    Pure weekly cost calculator.

    Stateless apart from its calibration constants, so repeated calls
    with the same inputs return identical results.

    Attributes:
        _constants: Calibration in use.
    """

    def __init__(self, constants: Optional[CostConstants] = None) -> None:
        """
        Initialize the cost model.

        Args:
            constants: Calibration constants. If None, uses DEFAULT_COST_CONSTANTS.
        """
        self._constants = constants or DEFAULT_COST_CONSTANTS

    @property
    def constants(self) -> CostConstants:
        """Calibration in use."""
        return self._constants

    def weekly_cost(self, inputs: CostInputs) -> Optional[CostBreakdown]:
        """
        Compute the weekly operating cost breakdown.

        Args:
            inputs: Route, aircraft and airport data.

        Returns:
            CostBreakdown, or None when an input is missing or out of
            range (unknown spec, unknown airport, uncalibrated airplane
            type, non-positive lifespan, negative quantities).

        Raises:
            ValueError: If load_factor is outside [0, 1].
        """
        if not 0.0 <= inputs.load_factor <= 1.0:
            raise ValueError(f"load_factor must be within [0, 1], got {inputs.load_factor}")

        spec = inputs.spec
        if spec is None or inputs.origin is None or inputs.destination is None:
            logger.debug("Cost unavailable: missing spec or airport")
            return None
        if spec.airplane_type is None or self._constants.type_multiplier(spec.airplane_type) is None:
            logger.debug("Cost unavailable: uncalibrated airplane type for %s", spec.name)
            return None
        if spec.lifespan_weeks <= 0:
            logger.debug("Cost unavailable: %s has no lifespan", spec.name)
            return None
        if min(
            inputs.distance,
            inputs.duration_minutes,
            inputs.frequency,
            inputs.capacity,
            spec.fuel_burn,
            spec.price,
        ) < 0:
            logger.debug("Cost unavailable: negative input for %s", spec.name)
            return None

        return CostBreakdown(
            fuel=self.fuel_cost(inputs),
            crew=self.crew_cost(inputs),
            airport_fees=self.airport_fees(inputs),
            depreciation=spec.price / spec.lifespan_weeks,
            maintenance=inputs.capacity * self._constants.maintenance_per_seat,
            service_supplies=self.service_supplies_cost(inputs),
        )

    def _legs(self) -> int:
        return 2 if self._constants.round_trip_fuel_and_crew else 1

    def banded_distance(self, distance: float) -> float:
        """
        Distance weighted by the ascent band multipliers.

        The first band covers the start of the route, the next band
        continues from there; whatever is left is flown at cruise rate.
        """
        remaining = distance
        weighted = 0.0
        for width, multiplier in self._constants.fuel_ascent_bands:
            if remaining <= 0:
                break
            portion = min(remaining, width)
            weighted += portion * multiplier
            remaining -= portion
        if remaining > 0:
            weighted += remaining * self._constants.fuel_cruise_multiplier
        return weighted

    def load_multiplier(self, load_factor: float) -> float:
        """Fuel burn multiplier: 1.0 at full load, the empty-burn fraction at zero."""
        empty = self._constants.fuel_empty_burn_fraction
        return empty + (1.0 - empty) * load_factor

    def fuel_cost(self, inputs: CostInputs) -> float:
        """Weekly fuel cost."""
        per_flight = (
            inputs.spec.fuel_burn
            * self.banded_distance(inputs.distance)
            * self._constants.fuel_unit_price
            * self.load_multiplier(inputs.load_factor)
        )
        return per_flight * self._legs() * inputs.frequency

    def crew_cost(self, inputs: CostInputs) -> float:
        """Weekly crew cost."""
        hours = inputs.duration_minutes / 60.0
        per_flight = inputs.capacity * hours * self._constants.crew_cost_per_seat_hour
        return per_flight * self._legs() * inputs.frequency

    def airport_fees(self, inputs: CostInputs) -> float:
        """Weekly slot and landing fees at both endpoints."""
        per_flight = self._endpoint_fee(
            inputs.origin, inputs.spec, inputs.capacity, inputs.origin_is_base
        ) + self._endpoint_fee(
            inputs.destination, inputs.spec, inputs.capacity, inputs.destination_is_base
        )
        return per_flight * inputs.frequency

    def _endpoint_fee(
        self,
        airport: Airport,
        spec: AirplaneModelSpec,
        capacity: int,
        is_base: bool,
    ) -> float:
        constants = self._constants
        slot_fee = constants.slot_fee_for_size(airport.size) * constants.type_multiplier(
            spec.airplane_type
        )
        if is_base:
            slot_fee *= 1.0 - constants.base_slot_discount
        landing_fee = capacity * constants.landing_fee_per_seat(airport.size)
        return slot_fee + landing_fee

    def service_supplies_cost(self, inputs: CostInputs) -> float:
        """Weekly in-flight service cost, both directions, at the assumed load."""
        hours = inputs.duration_minutes / 60.0
        per_passenger_leg = (
            self._constants.inflight_base_cost + self._constants.inflight_hourly_cost() * hours
        )
        seats_sold = inputs.capacity * inputs.load_factor
        return per_passenger_leg * 2 * seats_sold * inputs.frequency
