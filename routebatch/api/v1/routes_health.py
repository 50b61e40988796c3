# routebatch/api/v1/routes_health.py
from fastapi import APIRouter
from routebatch.core.config import settings

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("/", summary="Health check")
async def health_check():
    """
    Report that the API is up, plus the configured rate limit and whether
    credentials are present (never their values).
    """
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "rate_limit": settings.RATE_LIMIT,
        "credentials_configured": bool(
            settings.API_KEY or (settings.CLIENT_ID and settings.PRIVATE_KEY)
        ),
    }
