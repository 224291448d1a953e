import logging
from fastapi import APIRouter, Response, Request, status

from nest_admin.apis.meta.models import HealthCheck, StatusChecks, StatusCheckValue
from nest_admin.apis.meta.status import StatusCheck, status_check
from nest_admin.apis.oauth.providers import Provider
from nest_admin.config import app_cfg
from nest_admin.db.base import LogicalDatabase


logger = logging.getLogger(__name__)

meta_router = APIRouter(
    redirect_slashes=True,
    tags=["meta"]
)

# A missing OAuth provider is a configuration choice, not an outage
_optional_services = ["google-oauth", "discord-oauth"]


@meta_router.get("/health", status_code=status.HTTP_200_OK, operation_id="health_check")
async def health_check() -> HealthCheck:
    """
    Simple health check for load balancers and Kubernetes probes.
    Returns 200 OK if the process is running; touches no database.
    """
    return HealthCheck(service=app_cfg.APP_TITLE)


@status_check(name="membership-database")
async def membership_database_status(request: Request) -> dict:
    """Check the membership (accounts) database."""
    is_healthy = await request.app.state.db.check(LogicalDatabase.MEMBERSHIP)
    return {"status": StatusCheckValue.OK if is_healthy else StatusCheckValue.DOWN}


@status_check(name="world-database")
async def world_database_status(request: Request) -> dict:
    """Check the game world database."""
    is_healthy = await request.app.state.db.check(LogicalDatabase.WORLD)
    return {"status": StatusCheckValue.OK if is_healthy else StatusCheckValue.DOWN}


@status_check(name="google-oauth")
async def google_oauth_status(request: Request) -> dict:
    """Check if Google login is configured."""
    if Provider.GOOGLE in request.app.state.oauth_service.providers:
        return {"status": StatusCheckValue.OK}
    return {"status": StatusCheckValue.DISABLED}


@status_check(name="discord-oauth")
async def discord_oauth_status(request: Request) -> dict:
    """Check if Discord login is configured."""
    if Provider.DISCORD in request.app.state.oauth_service.providers:
        return {"status": StatusCheckValue.OK}
    return {"status": StatusCheckValue.DISABLED}


@meta_router.get("/status", status_code=status.HTTP_200_OK, operation_id="status_check")
async def service_status(
    request: Request,
    response: Response,
) -> StatusChecks:
    """Status of every dependency; 503 when a required one is down."""
    logger.debug('Requesting component statuses...')

    result = await StatusCheck.run(request)
    status_checks = StatusChecks(services=result)

    for service_name, service_status in status_checks.services.items():
        if service_name in _optional_services:
            continue

        if service_status.get("status") == StatusCheckValue.DOWN:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
            logger.warning(f"Service {service_name} is DOWN - returning 503")
            break

    return status_checks
