import logging
import time
from fastapi import APIRouter, Depends
from typing import Annotated

from nest_admin.apis.dependencies import get_database
from nest_admin.apis.server.models import ServerStatusResponse
from nest_admin.constants import ServerStatus
from nest_admin.db.base import DatabaseGateway
from nest_admin.db.characters.crud import count_online_characters
from nest_admin.exceptions import DatabaseUnavailable

logger = logging.getLogger(__name__)

_process_started = time.monotonic()

server_router = APIRouter(prefix="/server", tags=["server"])


def process_uptime() -> float:
    return time.monotonic() - _process_started


@server_router.get(
    "/status",
    response_model=ServerStatusResponse,
    summary="Game server status",
    description="Never fails on database errors; reports database_unreachable instead"
)
async def get_server_status(
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> ServerStatusResponse:
    try:
        online = await count_online_characters(db)
    except DatabaseUnavailable as e:
        logger.warning(f"Server status degraded, world database unreachable: {e.details}")
        return ServerStatusResponse(
            status=ServerStatus.DATABASE_UNREACHABLE,
            onlinePlayers=0,
            uptime=process_uptime(),
        )

    return ServerStatusResponse(
        status=ServerStatus.RUNNING,
        onlinePlayers=online,
        uptime=process_uptime(),
    )
