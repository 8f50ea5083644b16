from collections.abc import AsyncIterator
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from app.core.config import settings
from app.db.base import Base
from app.db.models import api_key, brand, brand_member, place  # noqa: F401  registra las tablas

# Engine asincrónico, uno por proceso. pre_ping descarta conexiones muertas del pool
engine = create_async_engine(settings.database_url, echo=False, future=True, pool_pre_ping=True)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)

async def get_session() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session

async def create_tables() -> None:
    # MVP: create_all en el startup. En prod, usar migraciones.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def dispose_engine() -> None:
    await engine.dispose()
