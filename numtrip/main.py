import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from numtrip.api.v1.routes.auth import router as auth_router
from numtrip.api.v1.routes.businesses import router as businesses_router
from numtrip.api.v1.routes.claims import router as claims_router
from numtrip.api.v1.routes.dashboard import router as dashboard_router
from numtrip.api.v1.routes.health import router as health_router
from numtrip.api.v1.routes.indexnow import router as indexnow_router
from numtrip.api.v1.routes.promo_codes import router as promo_codes_router
from numtrip.api.v1.routes.sitemap import router as sitemap_router
from numtrip.config import get_settings
from numtrip.core.database_init import initialize_database
from numtrip.core.errors import register_exception_handlers
from numtrip.core.logging_setup import configure_logging
from numtrip.infrastructure.external_apis.http_client import close_shared_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    configure_logging()
    logger.info("Starting up application...")

    if not initialize_database():
        logger.error("Database initialization failed; continuing without schema sync")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_shared_client()


def create_app() -> FastAPI:
    """Create FastAPI application and include routers."""
    settings = get_settings()
    app = FastAPI(
        title="NumTrip Backend",
        version="0.1.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(businesses_router, prefix=settings.API_PREFIX)
    app.include_router(promo_codes_router, prefix=settings.API_PREFIX)
    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(claims_router, prefix=settings.API_PREFIX)
    app.include_router(dashboard_router, prefix=settings.API_PREFIX)
    app.include_router(health_router, prefix=settings.API_PREFIX)
    # SEO routes live at the site root; the key file route must come after robots.txt
    app.include_router(sitemap_router)
    app.include_router(indexnow_router)
    return app


app = create_app()


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}
