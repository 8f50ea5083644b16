from datetime import datetime
from typing import Literal
from pydantic import Field
from app.schemas.common import CamelModel

class PlaceCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    address: str | None = None
    city: str | None = None
    state: str | None = None
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

class GeoPoint(CamelModel):
    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]   # (lng, lat)

class PlaceOut(CamelModel):
    id: str
    name: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    lat: float
    lng: float
    location: GeoPoint
    brand_id: str | None = None
    owner_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

class NearbyPlaceOut(PlaceOut):
    distance_meters: float
