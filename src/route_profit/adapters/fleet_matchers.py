"""
Fleet matching strategies.
"""

from typing import List, Sequence

from src.route_profit.ports.fleet_matcher import FleetMatcher
from src.route_profit.schemas.airplane import OwnedAircraftEntry, normalize_model_name
from src.route_profit.schemas.route import AircraftOption


def _split_entries(owned: Sequence[OwnedAircraftEntry]) -> tuple[set[int], list[str]]:
    ids = {entry.model_id for entry in owned if entry.model_id is not None}
    names = [entry.model_name for entry in owned if entry.model_name is not None]
    return ids, names


class SubstringFleetMatcher(FleetMatcher):
    """
    Permissive matcher: an option is owned if its model id is listed, or
    if its normalized name contains any listed name fragment.

    Tolerates partial names ('a320' matches 'Airbus A320neo'). Short
    fragments can over-match ('a3' matches every A3xx model).
    """

    def match(
        self,
        owned: Sequence[OwnedAircraftEntry],
        options: Sequence[AircraftOption],
    ) -> List[AircraftOption]:
        ids, fragments = _split_entries(owned)
        matched = []
        for option in options:
            if option.model_id in ids:
                matched.append(option)
                continue
            name = normalize_model_name(option.model_name)
            if any(fragment in name for fragment in fragments):
                matched.append(option)
        return matched

    @property
    def name(self) -> str:
        return "substring"


class ExactFleetMatcher(FleetMatcher):
    """Strict matcher: model id or the full normalized model name."""

    def match(
        self,
        owned: Sequence[OwnedAircraftEntry],
        options: Sequence[AircraftOption],
    ) -> List[AircraftOption]:
        ids, names = _split_entries(owned)
        name_set = set(names)
        return [
            option
            for option in options
            if option.model_id in ids or normalize_model_name(option.model_name) in name_set
        ]

    @property
    def name(self) -> str:
        return "exact"


FLEET_MATCHERS = {
    "substring": SubstringFleetMatcher,
    "exact": ExactFleetMatcher,
}


def get_fleet_matcher(name: str) -> FleetMatcher:
    """
    Build a matcher by strategy name.

    Raises:
        ValueError: If the name is unknown.
    """
    try:
        return FLEET_MATCHERS[name.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown fleet matcher '{name}', expected one of: {', '.join(FLEET_MATCHERS)}"
        ) from None
