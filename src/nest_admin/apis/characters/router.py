import logging
from fastapi import APIRouter, Depends, Path, Query
from typing import Annotated

from nest_admin.apis.characters.models import Character, CharacterPage, Inventory
from nest_admin.apis.dependencies import get_database
from nest_admin.apis.models import ErrorResponse
from nest_admin.apis.pagination import PageParams, normalize_search, page_params
from nest_admin.constants import DEFAULT_CHARACTER_PAGE_LIMIT, MAX_CHARACTER_ID
from nest_admin.db.base import DatabaseGateway
from nest_admin.db.characters.crud import (
    count_characters,
    get_character,
    get_inventory,
    list_characters,
)
from nest_admin.exceptions import DatabaseUnavailable, NotFound

logger = logging.getLogger(__name__)

characters_router = APIRouter(
    prefix="/characters",
    tags=["characters"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


def parse_character_id(raw: str) -> int:
    """
    Character ids that are not plain non-negative integers within BIGINT
    range can never match a row.
    """
    if not (raw.isascii() and raw.isdigit()):
        raise NotFound("Character not found")
    character_id = int(raw)
    if character_id > MAX_CHARACTER_ID:
        raise NotFound("Character not found")
    return character_id


@characters_router.get(
    "",
    response_model=CharacterPage,
    summary="List characters",
    description="Paginated characters, highest level first, optionally filtered by a case-insensitive name substring"
)
async def get_characters(
    db: Annotated[DatabaseGateway, Depends(get_database)],
    paging: Annotated[PageParams, Depends(page_params(DEFAULT_CHARACTER_PAGE_LIMIT))],
    search: Annotated[str | None, Query(description="Substring of CharacterName")] = None,
) -> CharacterPage:
    search = normalize_search(search)
    try:
        total = await count_characters(db, search)
        rows = await list_characters(db, paging.offset, paging.limit, search)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch characters: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch characters")

    return CharacterPage(data=rows, total=total, page=paging.page, limit=paging.limit)


@characters_router.get(
    "/{character_id}",
    response_model=Character,
    summary="Get a character",
    responses={404: {"model": ErrorResponse}}
)
async def get_character_detail(
    character_id: Annotated[str, Path(description="CharacterID", examples=["1"])],
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> Character:
    character_id = parse_character_id(character_id)
    try:
        row = await get_character(db, character_id)
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch character {character_id}: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch character")

    if row is None:
        raise NotFound("Character not found")
    return Character(**row)


@characters_router.get(
    "/{character_id}/inventory",
    response_model=Inventory,
    summary="Get a character's inventory",
    description="Items owned by the character, ordered by SlotNo ascending",
    responses={404: {"model": ErrorResponse}}
)
async def get_character_inventory(
    character_id: Annotated[str, Path(description="CharacterID", examples=["1"])],
    db: Annotated[DatabaseGateway, Depends(get_database)],
) -> Inventory:
    character_id = parse_character_id(character_id)
    try:
        rows = await get_inventory(db, character_id)
        # An empty inventory is only valid for a character that exists
        owner = await get_character(db, character_id) if not rows else None
    except DatabaseUnavailable as e:
        logger.error(f"Failed to fetch inventory of character {character_id}: {e.details}")
        raise DatabaseUnavailable(e.database, e.details, message="Failed to fetch inventory")

    if not rows and owner is None:
        raise NotFound("Character not found")
    return Inventory(data=rows)
