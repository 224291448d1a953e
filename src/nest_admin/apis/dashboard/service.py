import asyncio
import logging
from typing import List

from nest_admin.apis.dashboard.models import ClassCount, DashboardStats
from nest_admin.constants import class_name
from nest_admin.db.accounts.crud import count_accounts
from nest_admin.db.base import DatabaseGateway
from nest_admin.db.characters.crud import (
    count_characters,
    count_characters_by_class,
    count_online_characters,
)

logger = logging.getLogger(__name__)


async def collect_dashboard_stats(db: DatabaseGateway) -> DashboardStats:
    """
    Gather the headline counts from both databases concurrently.

    All three counts must succeed; the first failure is raised and no
    partial summary is returned.
    """
    total_accounts, total_characters, online_players = await asyncio.gather(
        count_accounts(db),
        count_characters(db),
        count_online_characters(db),
    )
    return DashboardStats(
        totalAccounts=total_accounts,
        totalCharacters=total_characters,
        onlinePlayers=online_players,
    )


async def collect_class_distribution(db: DatabaseGateway) -> List[ClassCount]:
    rows = await count_characters_by_class(db)
    return [
        ClassCount(
            classId=row["CharacterClass"],
            className=class_name(row["CharacterClass"]),
            count=row["count"],
        )
        for row in rows
    ]
