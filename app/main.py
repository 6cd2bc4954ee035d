import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import router as api_router
from app.config import settings
from app.core.exception_handlers import (
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.exceptions import AppException
from app.database import Database, check_db_connection

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables are managed by Alembic migrations unless CREATE_TABLES_ON_STARTUP is set
    # Run: alembic upgrade head
    database: Database = app.state.database
    if await check_db_connection(database):
        logger.info("Database connection successful")
    else:
        logger.warning("Database connection failed - ensure database is running")
    yield
    await database.dispose()


def create_app(database: Database | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
    )
    app.state.database = database or Database(
        settings.DATABASE_URL,
        create_tables=settings.CREATE_TABLES_ON_STARTUP,
        pool_pre_ping=True,
    )

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    cors_origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "Admin Management Server is running successfully!"}

    @app.get("/health")
    async def health_check(request: Request):
        connected = await check_db_connection(request.app.state.database)
        return {
            "status": "healthy" if connected else "degraded",
            "database": "connected" if connected else "disconnected",
        }

    return app


app = create_app()
