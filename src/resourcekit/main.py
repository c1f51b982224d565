"""
Application factory.

    uvicorn --factory resourcekit.main:create_app

`create_app()` wires logging, the request-id middleware, the exception
handlers and one router per resource. There is no module-level app, so
importing this module neither reads settings nor touches logging.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from resourcekit.api.v1.error_handlers import register_exception_handlers
from resourcekit.api.v1.router import build_resource_router
from resourcekit.config import Settings, get_settings
from resourcekit.core.dependencies import get_user_role_service
from resourcekit.core.logging import RequestIDMiddleware, setup_logging
from resourcekit.database.base import Base
from resourcekit.database.session import get_engine
from resourcekit.schemas.user_role import UserRoleDTO
import resourcekit.models  # noqa: F401 – registers the models with Base.metadata

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = get_engine()

    # Outside production the schema is created on startup; production uses migrations.
    if settings.ENV != "production":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info("app.startup", extra={"env": settings.ENV})
    yield
    await engine.dispose()
    logger.info("app.shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title=settings.SERVICE_NAME, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)

    app.include_router(
        build_resource_router(
            prefix="/user-roles",
            dto_model=UserRoleDTO,
            service_dependency=get_user_role_service,
            tags=["user-roles"],
        ),
        prefix="/api/v1",
    )
    return app
