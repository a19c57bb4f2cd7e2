"""
Pydantic models for Airline Club JSON payloads.

Responses are parsed here at the boundary and converted to domain
records; unknown fields are ignored so backend additions do not break
parsing.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.route_profit.schemas.airplane import AirplaneModelSpec, AirplaneType
from src.route_profit.schemas.airport import Airport
from src.route_profit.schemas.route import AircraftOption, RouteOffer


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LoginPayload(_Payload):
    airline_ids: List[int] = Field(default_factory=list, alias="airlineIds")


class AirportPayload(_Payload):
    id: int
    iata: str
    name: str = ""
    city: str = ""
    size: int = 1
    country_code: Optional[str] = Field(default=None, alias="countryCode")

    def to_domain(self) -> Airport:
        return Airport(
            id=self.id,
            iata=self.iata.upper(),
            name=self.name,
            city=self.city,
            size=self.size,
            country_code=self.country_code,
        )


class AirplaneModelPayload(_Payload):
    id: int
    name: str
    fuel_burn: float = Field(alias="fuelBurn")
    price: float
    lifespan: int
    airplane_type: Optional[str] = Field(default=None, alias="airplaneType")
    capacity: int = 0

    def to_domain(self) -> AirplaneModelSpec:
        return AirplaneModelSpec(
            id=self.id,
            name=self.name,
            fuel_burn=self.fuel_burn,
            price=self.price,
            lifespan_weeks=self.lifespan,
            airplane_type=AirplaneType.parse(self.airplane_type),
            capacity=self.capacity,
        )


class PricePayload(_Payload):
    economy: Optional[float] = None
    business: Optional[float] = None
    first: Optional[float] = None


class OtherLinkPayload(_Payload):
    price: PricePayload = Field(default_factory=PricePayload)


class ModelPlanLinkInfoPayload(_Payload):
    model_id: int = Field(alias="modelId")
    model_name: str = Field(alias="modelName")
    max_frequency: int = Field(default=0, alias="maxFrequency")
    capacity: int = 0
    duration: float = 0.0

    def to_domain(self) -> AircraftOption:
        return AircraftOption(
            model_id=self.model_id,
            model_name=self.model_name,
            max_frequency=self.max_frequency,
            capacity=self.capacity,
            duration_minutes=self.duration,
        )


class PlanLinkPayload(_Payload):
    from_airport_id: int = Field(alias="fromAirportId")
    to_airport_id: int = Field(alias="toAirportId")
    distance: float
    model_plan_link_info: List[ModelPlanLinkInfoPayload] = Field(
        default_factory=list, alias="modelPlanLinkInfo"
    )
    other_links: List[OtherLinkPayload] = Field(default_factory=list, alias="otherLinks")
    suggested_price: Optional[PricePayload] = Field(default=None, alias="suggestedPrice")

    def to_domain(self) -> RouteOffer:
        competitor_prices = tuple(
            link.price.economy for link in self.other_links if link.price.economy is not None
        )
        suggested = self.suggested_price.economy if self.suggested_price else None
        return RouteOffer(
            origin_airport_id=self.from_airport_id,
            destination_airport_id=self.to_airport_id,
            distance=self.distance,
            options=tuple(info.to_domain() for info in self.model_plan_link_info),
            competitor_economy_prices=competitor_prices,
            suggested_economy_price=suggested,
        )
