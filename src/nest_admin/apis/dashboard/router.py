import logging
from fastapi import APIRouter, Depends
from typing import Annotated

from nest_admin.apis.dashboard.models import ClassDistribution, DashboardStats
from nest_admin.apis.dashboard.service import collect_class_distribution, collect_dashboard_stats
from nest_admin.apis.dependencies import get_database
from nest_admin.apis.models import ErrorResponse
from nest_admin.db.base import DatabaseGateway
from nest_admin.exceptions import DatabaseUnavailable

logger = logging.getLogger(__name__)

dashboard_router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


@dashboard_router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Dashboard overview",
    description="Total accounts, total characters and online players"
)
async def get_dashboard_stats(
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> DashboardStats:
    try:
        return await collect_dashboard_stats(db)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch dashboard stats: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch dashboard stats")


@dashboard_router.get(
    "/class-distribution",
    response_model=ClassDistribution,
    summary="Characters per class"
)
async def get_class_distribution(
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> ClassDistribution:
    try:
        return ClassDistribution(data=await collect_class_distribution(db))
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch class distribution: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch class distribution")
