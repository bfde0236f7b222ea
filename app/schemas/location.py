from enum import Enum

from sqlmodel import SQLModel


class ProximityLevel(str, Enum):
    SAME_LGA = "same-lga"
    SAME_STATE = "same-state"
    DIFFERENT_STATE = "different-state"


class Coordinates(SQLModel):
    latitude: float
    longitude: float


class DistanceRead(SQLModel):
    from_state: str
    to_state: str
    distance_km: int | None = None
    label: str
    travel_time: str | None = None


class ProximityRead(SQLModel):
    level: ProximityLevel
    label: str


class ReverseGeocode(SQLModel):
    state: str | None = None
    lga: str | None = None
