# app/routers/places.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import InvalidInputError, NotFoundError
from app.db.session import get_session
from app.middlewares.auth import current_user
from app.schemas.common import MessageOut
from app.schemas.place import PlaceCreate, PlaceOut, NearbyPlaceOut
from app.services.places import (
    PersonalScope, DEFAULT_RADIUS_KM, DEFAULT_LIMIT,
    create_place, delete_place, list_places_for_owner, near_places,
)

router = APIRouter(prefix="/places", tags=["places"])

def nearby_out(results) -> list[NearbyPlaceOut]:
    return [
        NearbyPlaceOut(**PlaceOut.model_validate(place).model_dump(), distance_meters=distance)
        for place, distance in results
    ]

class NearQuery:
    """Query string shared by the personal and brand proximity endpoints."""

    def __init__(
        self,
        lat: float = Query(..., ge=-90, le=90),
        lng: float = Query(..., ge=-180, le=180),
        radius_km: float = Query(DEFAULT_RADIUS_KM, alias="radiusKm", gt=0),
        limit: int = Query(DEFAULT_LIMIT, ge=1),
    ):
        self.lat = lat
        self.lng = lng
        self.radius_km = radius_km
        self.limit = limit

@router.get("/near", response_model=list[NearbyPlaceOut])
async def near_route(
    q: NearQuery = Depends(),
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    results = await near_places(session, PersonalScope(user["sub"]), q.lat, q.lng, q.radius_km, q.limit)
    return nearby_out(results)

@router.post("", response_model=PlaceOut, status_code=201)
async def create_place_route(
    payload: PlaceCreate,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    return await create_place(session, PersonalScope(user["sub"]), payload)

@router.delete("", response_model=MessageOut)
async def delete_place_route(
    identity: str | None = Query(None),
    record_id: str | None = Query(None, alias="recordId"),
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    if not identity or not record_id:
        raise InvalidInputError("identity and recordId are required")
    # solo el dueño puede borrar; cualquier otro caso es 404
    if identity != user["sub"]:
        raise NotFoundError("Place not found or you are not authorized")
    await delete_place(session, identity, record_id)
    return {"message": "Place deleted successfully"}

@router.get("/user", response_model=list[PlaceOut])
async def list_user_places_route(
    identity: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
):
    if not identity:
        raise InvalidInputError("identity is required")
    return await list_places_for_owner(session, identity)
