"""
Geo helpers for provider proximity.

Distances are between state capitals (see `NIGERIAN_STATE_COORDINATES`);
there is no geocoding here. Reverse geocoding to state/LGA is done by a
database RPC elsewhere.
"""

import asyncio
import logging
import math
from typing import Protocol

from app.models.location import NIGERIAN_STATE_COORDINATES, StateCoordinates
from app.schemas.location import Coordinates, ProximityLevel, ReverseGeocode

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
GEOLOCATION_TIMEOUT_SECONDS = 10.0


class GeoLocator(Protocol):
    """Device location capability (browser bridge, IP lookup, ...)."""

    async def current_position(self, high_accuracy: bool) -> Coordinates:
        ...


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Haversine great-circle distance in whole kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c)


def get_state_coordinates(state_name: str) -> StateCoordinates | None:
    wanted = state_name.strip().lower()
    for state in NIGERIAN_STATE_COORDINATES:
        if state.name.lower() == wanted:
            return state
    return None


def get_state_distance(state1: str, state2: str) -> int | None:
    """Capital-to-capital distance, None if either state is unknown."""
    coord1 = get_state_coordinates(state1)
    coord2 = get_state_coordinates(state2)
    if coord1 is None or coord2 is None:
        return None
    return calculate_distance(
        coord1.latitude, coord1.longitude, coord2.latitude, coord2.longitude
    )


def format_distance(distance: int | None) -> str:
    if distance is None:
        return "Location not available"
    if distance == 0:
        return "Within your area"
    if distance < 10:
        return "< 10 km away"
    if distance < 50:
        return f"{distance} km away"
    return f"~{distance} km away"


def get_proximity_level(
    user_state: str | None,
    user_lga: str | None,
    provider_state: str | None,
    provider_lga: str | None,
) -> ProximityLevel:
    """Exact name comparison, no fuzzy matching."""
    if user_state == provider_state and user_lga == provider_lga:
        return ProximityLevel.SAME_LGA
    if user_state == provider_state:
        return ProximityLevel.SAME_STATE
    return ProximityLevel.DIFFERENT_STATE


PROXIMITY_LABELS: dict[ProximityLevel, str] = {
    ProximityLevel.SAME_LGA: "In your area",
    ProximityLevel.SAME_STATE: "In your state",
    ProximityLevel.DIFFERENT_STATE: "Other state",
}


def format_location(state: str | None, lga: str | None) -> str:
    if state and lga:
        return f"{lga}, {state}"
    if state:
        return state
    return "Location not set"


def estimate_travel_time(distance_km: float) -> str:
    """Very rough road-time bucket."""
    if distance_km < 5:
        return "5-10 mins"
    if distance_km < 15:
        return "15-30 mins"
    if distance_km < 50:
        return "30-60 mins"
    if distance_km < 100:
        return "1-2 hours"
    return "2+ hours"


async def get_user_location(
    locator: GeoLocator | None,
    timeout: float = GEOLOCATION_TIMEOUT_SECONDS,
) -> Coordinates | None:
    """
    Current device position, or None.

    None means "location unknown": no capability, permission denied,
    timeout, or any other failure. This never raises.
    """
    if locator is None:
        return None
    try:
        return await asyncio.wait_for(
            locator.current_position(high_accuracy=True), timeout=timeout
        )
    except Exception as e:
        logger.warning("Geolocation error: %s", e)
        return None


def reverse_geocode_to_state(latitude: float, longitude: float) -> ReverseGeocode:
    # Always empty: the database RPC owns reverse geocoding.
    logger.debug("Reverse geocoding not implemented for (%s, %s)", latitude, longitude)
    return ReverseGeocode()
