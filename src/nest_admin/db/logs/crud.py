from typing import List

from sqlalchemy import bindparam, select

from nest_admin.db.base import DatabaseGateway, LogicalDatabase
from nest_admin.db.logs.models import GameLog

LOG_COLUMNS = (
    GameLog.LogID,
    GameLog.LogType,
    GameLog.LogMessage,
    GameLog.CharacterName,
    GameLog.LogDate,
)


async def list_logs(
    db: DatabaseGateway,
    offset: int,
    limit: int,
    log_type: str | None = None
) -> List[dict]:
    """
    Get one page of game logs, most recent first.

    No total is computed for logs; GameLog grows without bound and a full
    count on every page would dominate the request.

    Args:
        db: Database gateway
        offset: Rows to skip
        limit: Maximum rows to return
        log_type: Exact LogType to filter on

    Returns:
        Log rows ordered by LogDate descending
    """
    statement = select(*LOG_COLUMNS)
    params = {}
    if log_type:
        statement = statement.where(GameLog.LogType == bindparam("type"))
        params["type"] = log_type

    statement = statement.order_by(
        GameLog.LogDate.desc(),
        GameLog.LogID.desc()
    ).offset(offset).limit(limit)
    return await db.execute(statement, params, LogicalDatabase.WORLD)
