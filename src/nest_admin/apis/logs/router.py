import logging
from fastapi import APIRouter, Depends, Query
from typing import Annotated

from nest_admin.apis.dependencies import get_database
from nest_admin.apis.logs.models import LogPage, LogTypes
from nest_admin.apis.models import ErrorResponse
from nest_admin.apis.pagination import PageParams, normalize_search, page_params
from nest_admin.constants import DEFAULT_LOG_PAGE_LIMIT, LogType
from nest_admin.db.base import DatabaseGateway
from nest_admin.db.logs.crud import list_logs
from nest_admin.exceptions import DatabaseUnavailable

logger = logging.getLogger(__name__)

logs_router = APIRouter(
    prefix="/logs",
    tags=["logs"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


@logs_router.get(
    "",
    response_model=LogPage,
    summary="List game logs",
    description="Paginated game logs, most recent first. No total is returned; "
                "a full page means more pages may exist."
)
async def get_logs(
    db: Annotated[DatabaseGateway, Depends(get_database)],
    paging: Annotated[PageParams, Depends(page_params(DEFAULT_LOG_PAGE_LIMIT))],
    type: Annotated[str | None, Query(description="Exact LogType, e.g. Login or Trade")] = None,
) -> LogPage:
    log_type = normalize_search(type)
    try:
        rows = await list_logs(db, paging.offset, paging.limit, log_type)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch logs: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch logs")

    return LogPage(data=rows, page=paging.page, limit=paging.limit)


@logs_router.get("/types", response_model=LogTypes, summary="List known log types")
async def get_log_types() -> LogTypes:
    return LogTypes(data=[log_type.value for log_type in LogType])
