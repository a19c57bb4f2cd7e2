"""
Cost model calibration constants and cost breakdown schemas.

The constants were reverse-engineered from observed in-game link costs.
They live in a single versioned record so recalibration is a data
change; algorithm code never embeds a rate.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from src.route_profit.schemas.airplane import AirplaneType


@dataclass(frozen=True)
class CostConstants:
    """
    Calibration constants for the weekly operating cost model.

    Attributes:
        version: Calibration identifier, logged with every run.
        fuel_unit_price: Price per unit of fuel.
        fuel_ascent_bands: (band width, burn multiplier) pairs applied in
            order from the start of the route.
        fuel_cruise_multiplier: Burn multiplier for distance beyond the bands.
        fuel_empty_burn_fraction: Share of full-load burn an empty aircraft
            still uses; the load multiplier blends it with the load factor.
        crew_cost_per_seat_hour: Crew cost per seat per flight hour.
        round_trip_fuel_and_crew: Charge fuel and crew for both legs of
            each weekly frequency.
        slot_fee_by_size: (airport size, base slot fee) tiers.
        slot_fee_oversize: Slot fee for sizes beyond the tier table.
        type_fee_multipliers: Slot fee multiplier per airplane type.
        base_slot_discount: Slot fee discount at the operator's own bases.
        landing_fee_flat_max_size: Largest airport size charged the flat
            per-seat landing rate; larger airports charge their size per seat.
        landing_fee_flat_per_seat: Flat landing rate per seat.
        maintenance_per_seat: Weekly maintenance cost per seat.
        inflight_base_cost: Fixed in-flight service cost per passenger leg.
        inflight_hourly_cost_by_star: (star level, cost per passenger hour) tiers.
        service_star_level: Service quality level assumed for all links.
    """

    version: str = "2024.11-baseline"

    fuel_unit_price: float = 0.08
    fuel_ascent_bands: Tuple[Tuple[float, float], ...] = (
        (180.0, 3.0),
        (250.0, 2.0),
        (570.0, 1.5),
    )
    fuel_cruise_multiplier: float = 1.0
    fuel_empty_burn_fraction: float = 0.7

    crew_cost_per_seat_hour: float = 12.0
    round_trip_fuel_and_crew: bool = False

    slot_fee_by_size: Tuple[Tuple[int, float], ...] = (
        (1, 50.0),
        (2, 50.0),
        (3, 80.0),
        (4, 150.0),
        (5, 250.0),
    )
    slot_fee_oversize: float = 500.0
    type_fee_multipliers: Tuple[Tuple[AirplaneType, float], ...] = (
        (AirplaneType.LIGHT, 1.0),
        (AirplaneType.SMALL, 1.0),
        (AirplaneType.REGIONAL, 3.0),
        (AirplaneType.MEDIUM, 8.0),
        (AirplaneType.LARGE, 12.0),
        (AirplaneType.EXTRA_LARGE, 15.0),
        (AirplaneType.JUMBO, 18.0),
        (AirplaneType.SUPERSONIC, 12.0),
    )
    base_slot_discount: float = 0.2
    landing_fee_flat_max_size: int = 3
    landing_fee_flat_per_seat: float = 3.0

    maintenance_per_seat: float = 30.0

    inflight_base_cost: float = 20.0
    inflight_hourly_cost_by_star: Tuple[Tuple[int, float], ...] = (
        (1, 1.0),
        (2, 2.0),
        (3, 4.0),
        (4, 6.0),
        (5, 8.0),
    )
    service_star_level: int = 3

    def __post_init__(self) -> None:
        """Reject calibrations that could produce negative cost terms."""
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
                raise ValueError(f"{field.name} must be >= 0, got {value}")
        if not 0.0 <= self.fuel_empty_burn_fraction <= 1.0:
            raise ValueError("fuel_empty_burn_fraction must be within [0, 1]")
        if not 0.0 <= self.base_slot_discount <= 1.0:
            raise ValueError("base_slot_discount must be within [0, 1]")
        if any(width < 0 or multiplier < 0 for width, multiplier in self.fuel_ascent_bands):
            raise ValueError("fuel_ascent_bands must hold non-negative widths and multipliers")
        for name in ("slot_fee_by_size", "inflight_hourly_cost_by_star"):
            if any(tier < 0 or value < 0 for tier, value in getattr(self, name)):
                raise ValueError(f"{name} must hold non-negative tiers and values")
        if any(multiplier < 0 for _, multiplier in self.type_fee_multipliers):
            raise ValueError("type_fee_multipliers must be non-negative")

    def slot_fee_for_size(self, size: int) -> float:
        """Base slot fee for an airport of the given size class."""
        for tier_size, fee in self.slot_fee_by_size:
            if size <= tier_size:
                return fee
        return self.slot_fee_oversize

    def type_multiplier(self, airplane_type: AirplaneType) -> float | None:
        """Slot fee multiplier for an airplane type, None if uncalibrated."""
        for tag, multiplier in self.type_fee_multipliers:
            if tag is airplane_type:
                return multiplier
        return None

    def landing_fee_per_seat(self, size: int) -> float:
        """Landing fee per seat for an airport of the given size class."""
        if size <= self.landing_fee_flat_max_size:
            return self.landing_fee_flat_per_seat
        return float(size)

    def inflight_hourly_cost(self) -> float:
        """Per-passenger hourly service cost at the configured star level."""
        rate = 0.0
        for star, hourly in self.inflight_hourly_cost_by_star:
            if star <= self.service_star_level:
                rate = hourly
        return rate

    @classmethod
    def from_mapping(
        cls,
        overrides: Mapping[str, Any],
        base: "CostConstants | None" = None,
    ) -> "CostConstants":
        """
        Apply overrides (e.g. parsed from a JSON calibration file).

        Tier tables accept lists of pairs; type multipliers accept a
        {type tag: multiplier} mapping.

        Raises:
            ValueError: If a key is unknown or a value is invalid.
        """
        base = base or DEFAULT_COST_CONSTANTS
        known = {field.name for field in dataclasses.fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown cost constant(s): {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if key == "type_fee_multipliers":
                pairs = []
                for tag, multiplier in dict(value).items():
                    airplane_type = AirplaneType.parse(tag)
                    if airplane_type is None:
                        raise ValueError(f"Unknown airplane type: {tag}")
                    pairs.append((airplane_type, float(multiplier)))
                changes[key] = tuple(pairs)
            elif key in ("fuel_ascent_bands", "slot_fee_by_size", "inflight_hourly_cost_by_star"):
                changes[key] = tuple(tuple(pair) for pair in value)
            else:
                changes[key] = value
        return dataclasses.replace(base, **changes)


DEFAULT_COST_CONSTANTS = CostConstants()


@dataclass(frozen=True)
class CostBreakdown:
    """Weekly operating cost of one aircraft on one route, by term."""

    fuel: float
    crew: float
    airport_fees: float
    depreciation: float
    maintenance: float
    service_supplies: float

    @property
    def total(self) -> float:
        """Sum of all six terms."""
        return (
            self.fuel
            + self.crew
            + self.airport_fees
            + self.depreciation
            + self.maintenance
            + self.service_supplies
        )
