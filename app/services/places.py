import logging, math
from dataclasses import dataclass
from typing import Union
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import ConflictError, NotFoundError
from app.db.models.place import Place
from app.schemas.place import PlaceCreate
from app.utils.ids import new_id

logger = logging.getLogger(__name__)

# =========================
# Config
# =========================

DEFAULT_RADIUS_KM = 5.0
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Radio esférico usado por las queries GeoJSON "spherical" (metros)
EARTH_RADIUS_M = 6_378_100.0
METERS_PER_DEGREE = math.pi * EARTH_RADIUS_M / 180.0

# =========================
# Scope
# =========================

@dataclass(frozen=True)
class PersonalScope:
    # places legado, por usuario
    user_id: str

@dataclass(frozen=True)
class BrandScope:
    brand_id: str

Scope = Union[PersonalScope, BrandScope]

def _scope_clause(scope: Scope):
    if isinstance(scope, PersonalScope):
        return Place.owner_id == scope.user_id
    return Place.brand_id == scope.brand_id

def _scope_columns(scope: Scope) -> dict:
    if isinstance(scope, PersonalScope):
        return {"owner_id": scope.user_id, "brand_id": None}
    return {"owner_id": None, "brand_id": scope.brand_id}

def geo_point(lat: float, lng: float) -> dict:
    # GeoJSON: [lng, lat] (orden inverso a los campos planos)
    return {"type": "Point", "coordinates": [lng, lat]}

# =========================
# CRUD
# =========================

async def create_place(session: AsyncSession, scope: Scope, data: PlaceCreate) -> Place:
    # personal: mismo dueño + mismas coords -> 409; brand: sin chequeo
    if isinstance(scope, PersonalScope):
        q = await session.execute(
            select(Place.id).where(
                Place.owner_id == scope.user_id,
                Place.lat == data.lat,
                Place.lng == data.lng,
            ).limit(1)
        )
        if q.scalar_one_or_none():
            raise ConflictError("A place with these coordinates already exists")

    place = Place(
        id=new_id("plc"),
        name=data.name,
        address=_clean(data.address),
        city=_clean(data.city),
        state=_clean(data.state),
        lat=data.lat,
        lng=data.lng,
        location=geo_point(data.lat, data.lng),
        **_scope_columns(scope),
    )
    session.add(place)
    await session.commit()
    await session.refresh(place)
    return place

def _clean(value: str | None) -> str | None:
    # "" después del trim -> NULL
    return value or None

async def list_places_for_owner(session: AsyncSession, user_id: str) -> list[Place]:
    q = await session.execute(
        select(Place).where(Place.owner_id == user_id).order_by(Place.created_at.desc())
    )
    return list(q.scalars().all())

async def delete_place(session: AsyncSession, user_id: str, place_id: str) -> None:
    # Ajeno o inexistente -> 404 en ambos casos
    result = await session.execute(
        delete(Place).where(Place.id == place_id, Place.owner_id == user_id)
    )
    await session.commit()
    if result.rowcount == 0:
        raise NotFoundError("Place not found or you are not authorized")

# =========================
# Proximity
# =========================

def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = phi2 - phi1
    dlmb = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))

def bounding_box(lat: float, lng: float, radius_m: float) -> tuple[float, float, float | None, float | None]:
    # lng en None si la caja toca un polo o cruza el antimeridiano (solo filtra por lat)
    dlat = radius_m / METERS_PER_DEGREE
    min_lat, max_lat = lat - dlat, lat + dlat
    if min_lat <= -90 or max_lat >= 90:
        return max(min_lat, -90.0), min(max_lat, 90.0), None, None
    # el círculo se ensancha hacia el polo más cercano
    widest = max(abs(min_lat), abs(max_lat))
    dlng = dlat / math.cos(math.radians(widest))
    min_lng, max_lng = lng - dlng, lng + dlng
    if min_lng < -180 or max_lng > 180:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lng, max_lng

async def near_places(
    session: AsyncSession,
    scope: Scope,
    lat: float,
    lng: float,
    radius_km: float = DEFAULT_RADIUS_KM,
    limit: int = DEFAULT_LIMIT,
) -> list[tuple[Place, float]]:
    # Prefiltro por caja en SQL, distancia haversine en Python, más cercano primero
    limit = min(limit, MAX_LIMIT)
    radius_m = radius_km * 1000

    min_lat, max_lat, min_lng, max_lng = bounding_box(lat, lng, radius_m)
    stmt = select(Place).where(_scope_clause(scope), Place.lat.between(min_lat, max_lat))
    if min_lng is not None:
        stmt = stmt.where(Place.lng.between(min_lng, max_lng))

    candidates = (await session.execute(stmt)).scalars().all()
    ranked = []
    for place in candidates:
        d = haversine_m(lat, lng, place.lat, place.lng)
        if d <= radius_m:
            ranked.append((place, d))
    ranked.sort(key=lambda pair: pair[1])
    logger.debug("near(%s, %s, %skm): %d candidates, %d in range", lat, lng, radius_km, len(candidates), len(ranked))
    return ranked[:limit]
