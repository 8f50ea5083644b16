import sys, asyncio, logging
from collections import defaultdict
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import StoreLocatorError
from app.core.logging import configure_logging
from app.db.session import create_tables, dispose_engine

from app.routers import health
from app.routers import places as places_router
from app.routers import brands as brands_router
from app.routers import api_keys as api_keys_router

load_dotenv()

if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

logger = logging.getLogger(__name__)

def flatten_validation_errors(errors: list[dict]) -> dict:
    """Group pydantic errors as ``{"formErrors": [...], "fieldErrors": {field: [...]}}``."""
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = defaultdict(list)
    for err in errors:
        # loc = ("body", "lat") | ("query", "radiusKm") | ("body",)
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        if loc:
            field_errors[".".join(loc)].append(err.get("msg", "Invalid value"))
        else:
            form_errors.append(err.get("msg", "Invalid request"))
    return {"formErrors": form_errors, "fieldErrors": dict(field_errors)}

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreLocatorError)
    async def store_locator_error_handler(request: Request, exc: StoreLocatorError):
        return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"detail": jsonable_encoder(flatten_validation_errors(exc.errors()))},
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"detail": "Internal server error"}, status_code=500)

def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Store Locator API")

    origins = settings.get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # el browser no acepta "*" con credenciales
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(places_router.router)
    app.include_router(brands_router.router)
    app.include_router(api_keys_router.router)

    @app.on_event("startup")
    async def on_startup():
        await create_tables()
        logger.info("Store locator API started (env=%s)", settings.env)

    @app.on_event("shutdown")
    async def on_shutdown():
        await dispose_engine()

    return app

app = create_app()
