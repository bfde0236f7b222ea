# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from supabase import Client

from app.core.config import Settings, get_settings
from app.core.email_client import Mailer
from app.core.errors import register_error_handlers
from app.core.middleware import RouteGuardMiddleware
from app.core.supabase_client import ClientFactory, client_factory_for, create_supabase_client

# Routers
from app.routers.auth import router as auth_router
from app.routers.providers import router as providers_router
from app.routers.notifications import router as notifications_router
from app.routers.location import router as location_router
from app.routers.seo import router as seo_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Log which Supabase project and site URL are in use.

    Shutdown:
      - No special cleanup needed; the Supabase client holds no session.
    """
    settings: Settings = app.state.settings
    logger.info("🔄 Startup: Supabase project %s", settings.SUPABASE_URL)
    logger.info("✅ Startup: serving %s", settings.APP_URL)
    yield


def create_app(
    settings: Settings | None = None,
    supabase: Client | None = None,
    mailer: Mailer | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """
    Build the application.

    The shared Supabase client and the mailer are created once here and
    handed to routes through dependencies. `client_factory` builds the
    short-lived per-request clients (caller-scoped table access, OTP
    verification). Missing Supabase credentials make
    `get_settings()` raise, which aborts startup.

    Run with:
        uvicorn app.main:create_app --factory
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME or "Nimart API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.supabase = supabase or create_supabase_client(settings)
    app.state.mailer = mailer or Mailer(settings)
    app.state.client_factory = client_factory or client_factory_for(settings)

    register_error_handlers(app)

    # Route guard runs on every request; CORS wraps it so preflights
    # are answered before the guard sees them.
    app.add_middleware(RouteGuardMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(providers_router)
    app.include_router(notifications_router)
    app.include_router(location_router)
    app.include_router(seo_router)

    @app.get("/api/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "nimart-backend"}

    return app
