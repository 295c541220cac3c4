from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager, suppress
import asyncio
import logging
import sys

from finmodel.core.config import settings
from finmodel.core.exceptions import StorageFailed, ValidationFailed
from finmodel.api import deps
from finmodel.api.api import api_router
from finmodel.db.adapter import DbAdapter, close_db, get_db
from finmodel.db.schema import init_schema
from finmodel.db.seed import seed
from finmodel.events import EventBroadcaster, broadcaster

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def validate_configuration() -> None:
    """Log settings that are unusual for the current environment"""
    if settings.is_production:
        if not settings.use_postgres:
            logger.warning("Production environment is running on the local SQLite file")
        if "*" in settings.CORS_ORIGINS:
            logger.warning("Production environment accepts requests from any origin")
    elif settings.is_development:
        logger.info(f"Development environment, seed on startup: {settings.SEED_ON_STARTUP}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting up {settings.PROJECT_NAME} backend ({settings.ENVIRONMENT.value})...")
    validate_configuration()
    db = get_db()
    await init_schema(db)
    if settings.SEED_ON_STARTUP:
        await seed(db)

    heartbeat = asyncio.create_task(broadcaster.run_heartbeat(settings.EVENTS_HEARTBEAT_SECONDS))

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME} backend...")
    heartbeat.cancel()
    with suppress(asyncio.CancelledError):
        await heartbeat
    close_db()


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(status_code=400, content=exc.to_response())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"message": "Invalid request"})
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    body = {"message": first.get("msg", "Invalid request")}
    if loc:
        body["field"] = ".".join(loc)
    return JSONResponse(status_code=400, content=body)


async def storage_failed_handler(request: Request, exc: StorageFailed) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": exc.message})


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StorageFailed, storage_failed_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check(
        db: DbAdapter = Depends(deps.get_database),
        events: EventBroadcaster = Depends(deps.get_broadcaster),
    ):
        return {
            "status": "ok",
            "database": db.dialect,
            "connections": events.active_count,
        }

    return app


app = create_app()
