"""Top-level router for ERP Auth."""

from datetime import UTC, datetime

from fastapi import APIRouter

from erp_auth import __version__
from erp_auth.api.auth_routes import router as auth_router
from erp_auth.api.deps import Context
from erp_auth.api.user_routes import router as user_router

router = APIRouter()


@router.get("/health")
async def health(ctx: Context) -> dict:
    """Health check endpoint.

    ``status`` is ``degraded`` when the profile database is unreachable.
    Redis is optional and never degrades the status.
    """
    database = await ctx.repository.health_check()
    return {
        "status": "ok" if database["healthy"] else "degraded",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
        "database": database,
        "redis": "connected" if await ctx.cache.ping() else "disconnected",
    }


router.include_router(auth_router)
router.include_router(user_router)
