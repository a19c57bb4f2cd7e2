"""
Route offer and route score schemas.

RouteOffer is the game's per-pair quote, consumed and discarded right
after scoring. RouteScore is the ranked output; RouteScoreSchema is the
Pandera contract for its tabular export.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
import pandera as pa
from pandera.typing import DataFrame, Series


@dataclass(frozen=True)
class AircraftOption:
    """
    One aircraft model the game offers for a route.

    Attributes:
        model_id: Airplane model id.
        model_name: Airplane model display name.
        max_frequency: Maximum weekly frequency on this route.
        capacity: Seats per flight.
        duration_minutes: One-way flight duration in minutes.
    """

    model_id: int
    model_name: str
    max_frequency: int
    capacity: int
    duration_minutes: float


@dataclass(frozen=True)
class RouteOffer:
    """
    The game's snapshot of economics for one origin-destination pair.

    Attributes:
        origin_airport_id: Origin airport id.
        destination_airport_id: Destination airport id.
        distance: Great-circle distance.
        options: Aircraft the game offers for the route, in game order.
        competitor_economy_prices: Economy fares of existing competitor links.
        suggested_economy_price: Game-suggested economy fare, if sent.
    """

    origin_airport_id: int
    destination_airport_id: int
    distance: float
    options: Tuple[AircraftOption, ...] = ()
    competitor_economy_prices: Tuple[float, ...] = ()
    suggested_economy_price: Optional[float] = None


@dataclass(frozen=True)
class RouteScore:
    """
    A ranked route: profit per weekly frequency for the best owned aircraft.
    """

    origin_airport_id: int
    origin_iata: str
    origin_city: str
    destination_airport_id: int
    destination_iata: str
    destination_city: str
    score: int
    aircraft_name: str

    def as_record(self) -> Dict[str, object]:
        """Presentation record handed to the display layer."""
        return {
            "originIata": self.origin_iata,
            "originCity": self.origin_city,
            "destinationIata": self.destination_iata,
            "destinationCity": self.destination_city,
            "score": self.score,
            "aircraftName": self.aircraft_name,
        }


class RouteScoreSchema(pa.DataFrameModel):
    """
    Schema for exported scan results.

    Each row is one ranked route of one base.
    """

    base: Series[str] = pa.Field(
        nullable=False,
        description="Base IATA code the route was scanned from",
    )
    rank: Series[int] = pa.Field(
        ge=1,
        description="1-based rank within the base",
    )
    origin_iata: Series[str] = pa.Field(nullable=False)
    origin_city: Series[str] = pa.Field(nullable=True)
    destination_iata: Series[str] = pa.Field(nullable=False)
    destination_city: Series[str] = pa.Field(nullable=True)
    score: Series[int] = pa.Field(
        description="Rounded weekly profit per frequency (may be negative)",
    )
    aircraft_name: Series[str] = pa.Field(nullable=False)

    class Config:
        strict = False
        coerce = True
        name = "RouteScoreSchema"
        ordered = True


RouteScoreDataFrame = DataFrame[RouteScoreSchema]

_EXPORT_COLUMNS: List[str] = [
    "base",
    "rank",
    "origin_iata",
    "origin_city",
    "destination_iata",
    "destination_city",
    "score",
    "aircraft_name",
]


def scores_to_frame(results: Mapping[str, Sequence[RouteScore]]) -> RouteScoreDataFrame:
    """
    Flatten per-base results into a validated DataFrame.

    Args:
        results: Base IATA -> ranked routes, as returned by a scan.

    Returns:
        DataFrame validated against RouteScoreSchema, bases in input order.
    """
    rows = [
        {
            "base": base_iata,
            "rank": rank,
            "origin_iata": score.origin_iata,
            "origin_city": score.origin_city,
            "destination_iata": score.destination_iata,
            "destination_city": score.destination_city,
            "score": score.score,
            "aircraft_name": score.aircraft_name,
        }
        for base_iata, scores in results.items()
        for rank, score in enumerate(scores, start=1)
    ]
    frame = pd.DataFrame(rows, columns=_EXPORT_COLUMNS)
    return RouteScoreSchema.validate(frame)
