import logging
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.security import generate_api_key, hash_api_key
from app.db.base import utcnow
from app.db.models.api_key import ApiKey
from app.utils.ids import new_id

logger = logging.getLogger(__name__)

DEFAULT_KEY_NAME = "Default API Key"

async def get_key(session: AsyncSession, user_id: str) -> ApiKey | None:
    q = await session.execute(select(ApiKey).where(ApiKey.user_id == user_id))
    return q.scalar_one_or_none()

async def get_key_info(session: AsyncSession, user_id: str) -> dict:
    key = await get_key(session, user_id)
    if not key:
        return {"has_key": False}
    return {
        "has_key": True,
        "name": key.name,
        "is_active": key.is_active,
        "last_used": key.last_used_at,
        "created_at": key.created_at,
    }

async def regenerate_key(session: AsyncSession, user_id: str) -> str:
    # upsert sobre user_id (único): nunca hay dos keys por usuario
    secret = generate_api_key()
    hashed = hash_api_key(secret)

    key = await get_key(session, user_id)
    if key is None:
        session.add(ApiKey(id=new_id("key"), user_id=user_id, hashed_key=hashed,
                           name=DEFAULT_KEY_NAME, is_active=True))
        try:
            await session.commit()
        except IntegrityError:
            # otra request creó la key en paralelo: sobreescribimos esa
            await session.rollback()
            key = await get_key(session, user_id)
            if key is None:
                raise
    if key is not None:
        key.hashed_key = hashed
        key.name = DEFAULT_KEY_NAME
        key.is_active = True
        key.last_used_at = None
        await session.commit()

    logger.info("API key regenerated for user %s", user_id)
    return secret

async def delete_key(session: AsyncSession, user_id: str) -> None:
    await session.execute(delete(ApiKey).where(ApiKey.user_id == user_id))
    await session.commit()

async def authenticate_api_key(session: AsyncSession, api_key: str) -> str | None:
    # Cualquier error de DB cuenta como "sin key" (falla cerrado)
    try:
        q = await session.execute(
            select(ApiKey).where(ApiKey.hashed_key == hash_api_key(api_key), ApiKey.is_active.is_(True))
        )
        key = q.scalar_one_or_none()
        if not key:
            return None
        key.last_used_at = utcnow()
        await session.commit()
        return key.user_id
    except SQLAlchemyError:
        logger.warning("API key authentication failed", exc_info=True)
        await session.rollback()
        return None
