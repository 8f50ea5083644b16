from app.db import session as db_session
from app.db.base import Base


async def test_create_tables_registers_every_model() -> None:
    assert {"api_keys", "brands", "brand_members", "places"} <= set(Base.metadata.tables)
    await db_session.create_tables()
    await db_session.dispose_engine()


async def test_get_session_yields_a_bound_session() -> None:
    gen = db_session.get_session()
    session = await gen.__anext__()
    assert session.bind is db_session.engine
    await gen.aclose()
    await db_session.dispose_engine()
