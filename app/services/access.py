from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import ForbiddenError
from app.db.models.brand_member import BrandMember, BrandRole

# Jerarquía: owner > admin > member
ROLE_RANK = {
    BrandRole.MEMBER.value: 1,
    BrandRole.ADMIN.value: 2,
    BrandRole.OWNER.value: 3,
}

def role_rank(role: str | BrandRole) -> int:
    if isinstance(role, BrandRole):
        role = role.value
    return ROLE_RANK.get(role, 0)

async def check_brand_access(
    session: AsyncSession,
    user_id: str,
    brand_id: str,
    required_role: str | BrandRole | None = None,
) -> BrandMember | None:
    q = await session.execute(
        select(BrandMember).where(BrandMember.brand_id == brand_id, BrandMember.user_id == user_id)
    )
    membership = q.scalar_one_or_none()
    if membership is None:
        return None
    if required_role is not None and role_rank(membership.role) < role_rank(required_role):
        return None
    return membership

async def require_brand_access(
    session: AsyncSession,
    user_id: str,
    brand_id: str,
    required_role: str | BrandRole | None = None,
) -> BrandMember:
    membership = await check_brand_access(session, user_id, brand_id, required_role)
    if membership is None:
        if required_role is None:
            raise ForbiddenError()
        role = required_role.value if isinstance(required_role, BrandRole) else required_role
        raise ForbiddenError(f"Forbidden - {role.capitalize()} access required")
    return membership

