"""Move per-user places into brands.

For every user that still owns places directly: create a default brand,
make the user its owner and move the places into it. Users that already
own a brand are skipped, so the migration can be re-run after a partial
failure. Each user is migrated in its own transaction.
"""
import logging
from dataclasses import dataclass, field
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.db.base import utcnow
from app.db.models.brand import Brand
from app.db.models.brand_member import BrandMember, BrandRole
from app.db.models.place import Place
from app.utils.ids import new_id

logger = logging.getLogger(__name__)

DEFAULT_BRAND_NAME = "My Brand"
DEFAULT_BRAND_DESCRIPTION = "Default brand created during migration"

@dataclass
class MigrationResult:
    users_processed: int = 0
    brands_created: int = 0
    places_updated: int = 0
    errors: list[str] = field(default_factory=list)

async def _migrate_user(session: AsyncSession, user_id: str, result: MigrationResult) -> None:
    existing = (await session.execute(select(Brand.id).where(Brand.owner_id == user_id).limit(1))).scalar_one_or_none()
    if existing:
        logger.info("User %s already has brand %s, skipping", user_id, existing)
        return

    brand = Brand(id=new_id("brd"), name=DEFAULT_BRAND_NAME, description=DEFAULT_BRAND_DESCRIPTION, owner_id=user_id)
    session.add(brand)
    await session.flush()
    session.add(BrandMember(id=new_id("mbr"), brand_id=brand.id, user_id=user_id,
                            role=BrandRole.OWNER.value, accepted_at=utcnow()))
    moved = await session.execute(
        update(Place).where(Place.owner_id == user_id).values(brand_id=brand.id, owner_id=None)
    )
    await session.commit()

    result.brands_created += 1
    result.places_updated += moved.rowcount
    logger.info("User %s migrated to brand %s (%d places)", user_id, brand.id, moved.rowcount)

async def migrate_to_brands(session_factory: async_sessionmaker[AsyncSession]) -> MigrationResult:
    result = MigrationResult()
    async with session_factory() as session:
        q = await session.execute(select(Place.owner_id).where(Place.owner_id.is_not(None)).distinct())
        user_ids = [row[0] for row in q.all()]
    logger.info("Found %d users with per-user places", len(user_ids))

    for user_id in user_ids:
        async with session_factory() as session:
            try:
                await _migrate_user(session, user_id, result)
                result.users_processed += 1
            except SQLAlchemyError as e:
                await session.rollback()
                msg = f"Error processing user {user_id}: {e}"
                logger.error(msg)
                result.errors.append(msg)
    return result
