import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from nest_admin.apis.auth import parse_allow_list
from nest_admin.apis.oauth.providers import build_providers
from nest_admin.apis.oauth.service import OAuthService
from nest_admin.config import app_cfg
from nest_admin.db.base import DatabaseGateway, LogicalDatabase
from nest_admin.exceptions import DatabaseUnavailable
from nest_admin.sessions import SessionCookieSigner, SessionStore

logger = logging.getLogger(__name__)


async def run_startup_dependencies(app: FastAPI) -> None:
    """Initialize all application dependencies at startup."""
    logger.info(f"Starting {app_cfg.APP_TITLE}")

    allowed_admins = parse_allow_list(app_cfg.ALLOWED_ADMINS)
    if allowed_admins:
        logger.info(f"Admin allow-list loaded with {len(allowed_admins)} entries")
    else:
        logger.warning("ALLOWED_ADMINS is empty - every authenticated identity is admitted")

    app.state.allowed_admins = allowed_admins
    app.state.session_store = SessionStore(ttl_seconds=app_cfg.SESSION_TTL_SECONDS)
    app.state.cookie_signer = SessionCookieSigner(
        app_cfg.SESSION_SECRET,
        max_age=app_cfg.SESSION_TTL_SECONDS
    )
    app.state.oauth_service = OAuthService(
        providers=build_providers(app_cfg),
        allowed_admins=allowed_admins,
        state_secret=app_cfg.SESSION_SECRET,
        verify_ssl=app_cfg.VERIFY_SSL,
        timeout=app_cfg.OAUTH_TIMEOUT_SECONDS
    )

    db = DatabaseGateway.from_config(app_cfg)
    app.state.db = db
    for database in LogicalDatabase:
        try:
            await db.connect(database)
        except DatabaseUnavailable as e:
            # The API still serves auth and status; queries retry the connection lazily
            logger.warning(f"{database.value} database connection failed - running without it: {e.details}")

    logger.info("API ready to accept requests")


async def shutdown_dependencies(app: FastAPI) -> None:
    """Cleanup all application dependencies at shutdown."""
    logger.info(f"Shutting down {app_cfg.APP_TITLE}...")

    try:
        if hasattr(app.state, 'db'):
            logger.info("Disposing database connection pools...")
            await app.state.db.dispose()

        if hasattr(app.state, 'session_store'):
            logger.info(f"Dropping {len(app.state.session_store)} in-memory sessions")
            app.state.session_store = None

        logger.info("All resources cleaned up successfully")

    except Exception as e:
        logger.error(f"Error during shutdown cleanup: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan (startup and shutdown)."""
    try:
        await run_startup_dependencies(app)
        yield
        await shutdown_dependencies(app)

    except Exception as e:
        logger.error(f"Error in lifespan management: {e}", exc_info=True)
        raise
