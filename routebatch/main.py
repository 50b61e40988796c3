# routebatch/main.py

from fastapi import FastAPI

from routebatch.api.v1 import routes_directions, routes_health
from routebatch.core.config import settings
from routebatch.core.logger import logger


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Batch requests against the Google Directions API.",
    )

    # Routers
    app.include_router(routes_health.router, prefix="", tags=["health"])
    app.include_router(routes_directions.router, prefix="", tags=["directions"])

    logger.info("{} {} ready ({})", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    return app


app = create_app()
