from typing import List

from sqlalchemy import bindparam, func, select

from nest_admin.db.base import DatabaseGateway, LogicalDatabase, LIKE_ESCAPE, contains_pattern
from nest_admin.db.accounts.models import Account

ACCOUNT_COLUMNS = (
    Account.AccountName,
    Account.CreateDate,
    Account.LastLoginDate,
    Account.Cash,
)


def _search_params(search: str | None) -> dict:
    return {"search": contains_pattern(search)} if search else {}


def _apply_search(statement, search: str | None):
    if not search:
        return statement
    return statement.where(Account.AccountName.ilike(bindparam("search"), escape=LIKE_ESCAPE))


async def count_accounts(db: DatabaseGateway, search: str | None = None) -> int:
    """
    Count accounts, optionally restricted to names containing ``search``.

    Args:
        db: Database gateway
        search: Case-insensitive substring of AccountName

    Returns:
        Number of matching accounts
    """
    statement = _apply_search(select(func.count()).select_from(Account), search)
    total = await db.scalar(statement, _search_params(search), LogicalDatabase.MEMBERSHIP)
    return total or 0


async def list_accounts(
    db: DatabaseGateway,
    offset: int,
    limit: int,
    search: str | None = None
) -> List[dict]:
    """
    Get one page of accounts, newest first.

    AccountName breaks CreateDate ties so pages never overlap.
    """
    statement = _apply_search(select(*ACCOUNT_COLUMNS), search).order_by(
        Account.CreateDate.desc(),
        Account.AccountName.asc()
    ).offset(offset).limit(limit)
    return await db.execute(statement, _search_params(search), LogicalDatabase.MEMBERSHIP)


async def get_account(db: DatabaseGateway, account_name: str) -> dict | None:
    """
    Get a single account by its name.

    Returns:
        Account row or None if not found
    """
    statement = select(*ACCOUNT_COLUMNS).where(Account.AccountName == bindparam("name"))
    rows = await db.execute(statement, {"name": account_name}, LogicalDatabase.MEMBERSHIP)
    return rows[0] if rows else None
