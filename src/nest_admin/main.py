import logging
import uvicorn
from fastapi import Depends, FastAPI

from nest_admin.middleware import configure_middleware
from nest_admin.exception_handlers import admin_api_error_handler, unhandled_exception_handler
from nest_admin.exceptions import AdminApiError
from nest_admin.lifespan import lifespan
from nest_admin.apis.auth import require_admin
from nest_admin.apis.accounts.router import accounts_router
from nest_admin.apis.characters.router import characters_router
from nest_admin.apis.dashboard.router import dashboard_router
from nest_admin.apis.logs.router import logs_router
from nest_admin.apis.meta.router import meta_router
from nest_admin.apis.oauth.router import oauth_router
from nest_admin.apis.server.router import server_router
from nest_admin.config import app_cfg

logging.basicConfig(
    level=app_cfg.LOG_LEVEL.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

api = FastAPI(
    title=app_cfg.APP_TITLE,
    description="Administrative dashboard API for accounts, characters, inventory and game logs",
    version="0.1.0",
    exception_handlers={
        AdminApiError: admin_api_error_handler,
        Exception: unhandled_exception_handler
    },
    lifespan=lifespan
)

api = configure_middleware(api)

api.include_router(meta_router)
api.include_router(oauth_router)

for router in (dashboard_router, accounts_router, characters_router, logs_router, server_router):
    api.include_router(
        router,
        prefix=app_cfg.API_ROUTER_PATH_PREFIX,
        dependencies=[Depends(require_admin)]
    )

if __name__ == '__main__':
    uvicorn.run(
        app="nest_admin.main:api",
        host="0.0.0.0",
        port=app_cfg.PORT,
        reload=not app_cfg.is_production,
        log_level=app_cfg.LOG_LEVEL.lower()
    )
