import logging
from fastapi import APIRouter, Depends, Path, Query
from typing import Annotated

from nest_admin.apis.accounts.models import Account, AccountPage
from nest_admin.apis.characters.models import CharacterList
from nest_admin.apis.dependencies import get_database
from nest_admin.apis.models import ErrorResponse
from nest_admin.apis.pagination import PageParams, normalize_search, page_params
from nest_admin.constants import DEFAULT_ACCOUNT_PAGE_LIMIT
from nest_admin.db.accounts.crud import count_accounts, get_account, list_accounts
from nest_admin.db.base import DatabaseGateway
from nest_admin.db.characters.crud import get_characters_by_account
from nest_admin.exceptions import DatabaseUnavailable, NotFound

logger = logging.getLogger(__name__)

accounts_router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


@accounts_router.get(
    "",
    response_model=AccountPage,
    summary="List accounts",
    description="Paginated accounts, newest first, optionally filtered by a case-insensitive name substring"
)
async def get_accounts(
    db: Annotated[DatabaseGateway, Depends(get_database)],
    paging: Annotated[PageParams, Depends(page_params(DEFAULT_ACCOUNT_PAGE_LIMIT))],
    search: Annotated[str | None, Query(description="Substring of AccountName")] = None,
) -> AccountPage:
    search = normalize_search(search)
    try:
        total = await count_accounts(db, search)
        rows = await list_accounts(db, paging.offset, paging.limit, search)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch accounts: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch accounts")

    logger.debug(f"Fetched {len(rows)} of {total} accounts (page={paging.page}, search={search!r})")
    return AccountPage(data=rows, total=total, page=paging.page, limit=paging.limit)


@accounts_router.get(
    "/{account_name}",
    response_model=Account,
    summary="Get an account",
    responses={404: {"model": ErrorResponse}}
)
async def get_account_detail(
    account_name: Annotated[str, Path(description="AccountName", examples=["DragonSlayer99"])],
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> Account:
    try:
        row = await get_account(db, account_name)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch account {account_name}: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch account")

    if row is None:
        raise NotFound("Account not found")
    return Account(**row)


@accounts_router.get(
    "/{account_name}/characters",
    response_model=CharacterList,
    summary="List the characters of an account"
)
async def get_account_characters(
    account_name: Annotated[str, Path(description="AccountName", examples=["DragonSlayer99"])],
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> CharacterList:
    """Characters owned by an account, highest level first. Unknown accounts yield an empty list."""
    try:
        rows = await get_characters_by_account(db, account_name)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch characters of account {account_name}: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch account characters")

    return CharacterList(data=rows)
