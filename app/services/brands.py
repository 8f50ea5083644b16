import logging
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import ConflictError, LastOwnerError, NotFoundError
from app.db.base import utcnow
from app.db.models.brand import Brand
from app.db.models.brand_member import BrandMember, BrandRole
from app.db.models.place import Place
from app.schemas.brand import BrandCreate, BrandUpdate
from app.services.access import require_brand_access
from app.utils.ids import new_id

logger = logging.getLogger(__name__)

OWNER = BrandRole.OWNER.value

# =========================
# Helpers
# =========================

async def _get_member(session: AsyncSession, brand_id: str, user_id: str) -> BrandMember | None:
    q = await session.execute(
        select(BrandMember).where(BrandMember.brand_id == brand_id, BrandMember.user_id == user_id)
    )
    return q.scalar_one_or_none()

async def _owner_count(session: AsyncSession, brand_id: str) -> int:
    q = await session.execute(
        select(func.count()).select_from(BrandMember).where(
            BrandMember.brand_id == brand_id, BrandMember.role == OWNER
        )
    )
    return q.scalar_one()

async def _guard_last_owner(session: AsyncSession, target: BrandMember | None, new_role: str | None) -> None:
    # new_role None = el miembro se elimina
    if target is None or target.role != OWNER or new_role == OWNER:
        return
    if await _owner_count(session, target.brand_id) <= 1:
        raise LastOwnerError()

# =========================
# Brands
# =========================

async def create_brand(session: AsyncSession, user_id: str, data: BrandCreate) -> Brand:
    # brand + membership owner en una sola transacción
    brand = Brand(id=new_id("brd"), name=data.name, description=data.description, owner_id=user_id)
    session.add(brand)
    await session.flush()
    session.add(BrandMember(
        id=new_id("mbr"),
        brand_id=brand.id,
        user_id=user_id,
        role=OWNER,
        accepted_at=utcnow(),
    ))
    await session.commit()
    await session.refresh(brand)
    logger.info("Brand %s created by %s", brand.id, user_id)
    return brand

async def list_brands_for_user(session: AsyncSession, user_id: str) -> list[tuple[Brand, str]]:
    q = await session.execute(
        select(Brand, BrandMember.role)
        .join(BrandMember, BrandMember.brand_id == Brand.id)
        .where(BrandMember.user_id == user_id)
        .order_by(Brand.created_at.desc())
    )
    return [(brand, role) for brand, role in q.all()]

async def get_brand(session: AsyncSession, user_id: str, brand_id: str) -> tuple[Brand, str]:
    membership = await require_brand_access(session, user_id, brand_id)
    brand = await session.get(Brand, brand_id)
    if not brand:
        raise NotFoundError("Brand not found")
    return brand, membership.role

async def update_brand(session: AsyncSession, user_id: str, brand_id: str, patch: BrandUpdate) -> tuple[Brand, str]:
    membership = await require_brand_access(session, user_id, brand_id, BrandRole.ADMIN)
    brand = await session.get(Brand, brand_id)
    if not brand:
        raise NotFoundError("Brand not found")
    for field, value in patch.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(brand, field, value)
    await session.commit()
    await session.refresh(brand)
    return brand, membership.role

async def delete_brand(session: AsyncSession, user_id: str, brand_id: str) -> None:
    await require_brand_access(session, user_id, brand_id, BrandRole.OWNER)
    places = await session.execute(delete(Place).where(Place.brand_id == brand_id))
    members = await session.execute(delete(BrandMember).where(BrandMember.brand_id == brand_id))
    await session.execute(delete(Brand).where(Brand.id == brand_id))
    await session.commit()
    logger.info("Brand %s deleted by %s (%s members, %s places)", brand_id, user_id, members.rowcount, places.rowcount)

# =========================
# Members
# =========================

async def list_members(session: AsyncSession, user_id: str, brand_id: str) -> list[BrandMember]:
    await require_brand_access(session, user_id, brand_id)
    q = await session.execute(
        select(BrandMember).where(BrandMember.brand_id == brand_id).order_by(BrandMember.created_at.asc())
    )
    return list(q.scalars().all())

async def add_member(session: AsyncSession, user_id: str, brand_id: str, new_user_id: str, role: BrandRole) -> BrandMember:
    await require_brand_access(session, user_id, brand_id, BrandRole.ADMIN)
    if await _get_member(session, brand_id, new_user_id):
        raise ConflictError("User is already a member of this brand")
    member = BrandMember(
        id=new_id("mbr"),
        brand_id=brand_id,
        user_id=new_user_id,
        role=BrandRole(role).value,
        invited_by=user_id,
        accepted_at=utcnow(),
    )
    session.add(member)
    await session.commit()
    await session.refresh(member)
    return member

async def update_member_role(session: AsyncSession, user_id: str, brand_id: str, target_user_id: str, role: BrandRole) -> BrandMember:
    await require_brand_access(session, user_id, brand_id, BrandRole.ADMIN)
    role = BrandRole(role).value
    target = await _get_member(session, brand_id, target_user_id)
    await _guard_last_owner(session, target, role)
    if target is None:
        raise NotFoundError("Member not found")
    target.role = role
    await session.commit()
    await session.refresh(target)
    return target

async def remove_member(session: AsyncSession, user_id: str, brand_id: str, target_user_id: str) -> None:
    # self-removal siempre permitido; sacar a otro requiere admin+
    if user_id != target_user_id:
        await require_brand_access(session, user_id, brand_id, BrandRole.ADMIN)
    target = await _get_member(session, brand_id, target_user_id)
    await _guard_last_owner(session, target, None)
    if target is None:
        raise NotFoundError("Member not found")
    await session.delete(target)
    await session.commit()
