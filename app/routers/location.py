from fastapi import APIRouter, HTTPException, status

from app.schemas.location import DistanceRead, ProximityRead
from app.services.location_service import (
    PROXIMITY_LABELS,
    estimate_travel_time,
    format_distance,
    get_proximity_level,
    get_state_coordinates,
    get_state_distance,
)

router = APIRouter(prefix="/api/location", tags=["Location"])


@router.get("/distance", response_model=DistanceRead)
def state_distance(from_state: str, to_state: str):
    """Capital-to-capital distance between two states."""
    for name in (from_state, to_state):
        if get_state_coordinates(name) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown state: {name}",
            )
    distance = get_state_distance(from_state, to_state)
    return DistanceRead(
        from_state=from_state,
        to_state=to_state,
        distance_km=distance,
        label=format_distance(distance),
        travel_time=estimate_travel_time(distance) if distance is not None else None,
    )


@router.get("/proximity", response_model=ProximityRead)
def proximity(
    user_state: str,
    provider_state: str,
    user_lga: str | None = None,
    provider_lga: str | None = None,
):
    """same-lga / same-state / different-state (exact name match)."""
    level = get_proximity_level(user_state, user_lga, provider_state, provider_lga)
    return ProximityRead(level=level, label=PROXIMITY_LABELS[level])
