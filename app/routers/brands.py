# app/routers/brands.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.models.brand_member import BrandRole
from app.db.session import get_session
from app.middlewares.auth import current_user
from app.routers.places import NearQuery, nearby_out
from app.schemas.brand import BrandCreate, BrandUpdate, BrandOut, MemberAdd, MemberRoleUpdate, MemberOut
from app.schemas.common import MessageOut
from app.schemas.place import PlaceCreate, PlaceOut, NearbyPlaceOut
from app.services import brands as brands_service
from app.services.access import require_brand_access
from app.services.places import BrandScope, create_place, near_places

router = APIRouter(prefix="/brands", tags=["brands"])

def brand_out(brand, role) -> BrandOut:
    return BrandOut.model_validate(brand).model_copy(update={"role": BrandRole(role)})

# =========================
# Brands
# =========================

@router.get("", response_model=list[BrandOut])
async def list_brands_route(
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    rows = await brands_service.list_brands_for_user(session, user["sub"])
    return [brand_out(brand, role) for brand, role in rows]

@router.post("", response_model=BrandOut, status_code=201)
async def create_brand_route(
    payload: BrandCreate,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    brand = await brands_service.create_brand(session, user["sub"], payload)
    return brand_out(brand, "owner")

@router.get("/{brand_id}", response_model=BrandOut)
async def get_brand_route(
    brand_id: str,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    brand, role = await brands_service.get_brand(session, user["sub"], brand_id)
    return brand_out(brand, role)

@router.put("/{brand_id}", response_model=BrandOut)
async def update_brand_route(
    brand_id: str,
    payload: BrandUpdate,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    brand, role = await brands_service.update_brand(session, user["sub"], brand_id, payload)
    return brand_out(brand, role)

@router.delete("/{brand_id}", response_model=MessageOut)
async def delete_brand_route(
    brand_id: str,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    await brands_service.delete_brand(session, user["sub"], brand_id)
    return {"success": True}

# =========================
# Members
# =========================

@router.get("/{brand_id}/members", response_model=list[MemberOut])
async def list_members_route(
    brand_id: str,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    return await brands_service.list_members(session, user["sub"], brand_id)

@router.post("/{brand_id}/members", response_model=MemberOut, status_code=201)
async def add_member_route(
    brand_id: str,
    payload: MemberAdd,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    return await brands_service.add_member(session, user["sub"], brand_id, payload.user_id, payload.role)

@router.put("/{brand_id}/members/{member_user_id}", response_model=MemberOut)
async def update_member_route(
    brand_id: str,
    member_user_id: str,
    payload: MemberRoleUpdate,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    return await brands_service.update_member_role(session, user["sub"], brand_id, member_user_id, payload.role)

@router.delete("/{brand_id}/members/{member_user_id}", response_model=MessageOut)
async def remove_member_route(
    brand_id: str,
    member_user_id: str,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    await brands_service.remove_member(session, user["sub"], brand_id, member_user_id)
    return {"success": True}

# =========================
# Places de la brand
# =========================

@router.get("/{brand_id}/places/near", response_model=list[NearbyPlaceOut])
async def brand_near_route(
    brand_id: str,
    q: NearQuery = Depends(),
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    await require_brand_access(session, user["sub"], brand_id)
    results = await near_places(session, BrandScope(brand_id), q.lat, q.lng, q.radius_km, q.limit)
    return nearby_out(results)

@router.post("/{brand_id}/places", response_model=PlaceOut, status_code=201)
async def create_brand_place_route(
    brand_id: str,
    payload: PlaceCreate,
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    await require_brand_access(session, user["sub"], brand_id)
    return await create_place(session, BrandScope(brand_id), payload)
