# app/scripts/migrate_to_brands.py
# Uso: python -m app.scripts.migrate_to_brands
import asyncio, logging, sys
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import AsyncSessionLocal, dispose_engine
from app.services.migration import migrate_to_brands

if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

logger = logging.getLogger("migrate_to_brands")

async def main() -> int:
    try:
        result = await migrate_to_brands(AsyncSessionLocal)
    finally:
        await dispose_engine()

    logger.info("Users processed: %d", result.users_processed)
    logger.info("Brands created: %d", result.brands_created)
    logger.info("Places updated: %d", result.places_updated)
    for error in result.errors:
        logger.warning("  - %s", error)
    return 1 if result.errors else 0

if __name__ == "__main__":
    configure_logging(settings.log_level)
    sys.exit(asyncio.run(main()))
