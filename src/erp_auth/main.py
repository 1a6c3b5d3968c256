"""FastAPI application entry point for ERP Auth."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from erp_auth import __version__
from erp_auth.api.errors import register_exception_handlers
from erp_auth.api.routes import router
from erp_auth.config import Settings, get_settings
from erp_auth.context import AppContext

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Browser origins always allowed besides APP_URL
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:3000",
]
LOCAL_ORIGIN_REGEX = r"^http://(localhost|127\.0\.0\.1):\d+$"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the application context on startup, close it on shutdown."""
    owns_context = getattr(app.state, "context", None) is None
    if owns_context:
        # Missing configuration fails here, before the server accepts requests.
        settings = get_settings()
        logger.info(f"Starting ERP Auth v{__version__}")
        app.state.context = await AppContext.create(settings)

    yield

    if owns_context:
        await app.state.context.aclose()
        app.state.context = None
    logger.info("Shutting down ERP Auth")


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Pre-built context; when given, startup does not connect to
            Supabase or Redis
    """
    settings: Settings = context.settings if context else get_settings()
    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    app = FastAPI(
        title="ERP Auth",
        description="Authentication, approval and role gating for the ERP backend",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o for o in [settings.app_url, *DEV_ORIGINS] if o],
        allow_origin_regex=LOCAL_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.debug(f"{request.method} {request.url.path}")
            return await call_next(request)

    register_exception_handlers(app)
    app.include_router(router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "erp_auth.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
