"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from storefront.config import get_settings
from storefront.infrastructure.database import Database
from storefront.core.logging import configure_logging
from storefront.core.middleware import setup_middleware
from storefront.core.exceptions import register_exception_handlers

from storefront.interfaces.api.users import router as users_router
from storefront.interfaces.api.products import router as products_router
from storefront.interfaces.api.categories import router as categories_router

logger = structlog.get_logger(__name__)


def bootstrap_admin(database: Database) -> None:
    """Create the configured admin account if it does not exist yet."""
    settings = get_settings()
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return

    from storefront.application.services.user_service import create_user
    from storefront.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    with database.session() as db:
        repo = SQLAlchemyUserRepository(db)
        if repo.find_by_email(settings.ADMIN_EMAIL, include_inactive=True):
            return
        create_user(
            repo,
            name=settings.ADMIN_NAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            role="admin",
        )
        logger.info("Default admin user created", email=settings.ADMIN_EMAIL)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """Build the application around an explicitly provided database handle."""
    settings = get_settings()
    configure_logging()

    if database is None:
        database = Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan — startup and shutdown events."""
        logger.info("Starting Storefront API...", env=settings.ENVIRONMENT)

        # Create DB tables (dev only; use migrations in production)
        database.create_all()
        logger.info("Database tables created/verified")

        bootstrap_admin(database)

        yield

        database.dispose()
        logger.info("Storefront API stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        description="API Backend — usuarios, autenticación JWT, productos y categorías",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.database = database

    setup_middleware(app)
    register_exception_handlers(app)

    app.include_router(users_router)
    app.include_router(products_router)
    app.include_router(categories_router)

    @app.get("/")
    def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    def health():
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.ENVIRONMENT,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
