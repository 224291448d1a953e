from typing import List

from sqlalchemy import bindparam, func, select

from nest_admin.db.base import DatabaseGateway, LogicalDatabase, LIKE_ESCAPE, contains_pattern
from nest_admin.db.characters.models import Character, Item

CHARACTER_COLUMNS = (
    Character.CharacterID,
    Character.CharacterName,
    Character.AccountName,
    Character.CharacterClass,
    Character.CharacterLevel,
    Character.CurHP,
    Character.CurMP,
    Character.Money,
    Character.CreateDate,
    Character.LastLoginDate,
    Character.LoginStatus,
)

ITEM_COLUMNS = (
    Item.ItemID,
    Item.ItemName,
    Item.Quantity,
    Item.EnhanceLevel,
    Item.SlotNo,
)


def _search_params(search: str | None) -> dict:
    return {"search": contains_pattern(search)} if search else {}


def _apply_search(statement, search: str | None):
    if not search:
        return statement
    return statement.where(Character.CharacterName.ilike(bindparam("search"), escape=LIKE_ESCAPE))


async def count_characters(db: DatabaseGateway, search: str | None = None) -> int:
    """Count characters, optionally restricted to names containing ``search``."""
    statement = _apply_search(select(func.count()).select_from(Character), search)
    total = await db.scalar(statement, _search_params(search), LogicalDatabase.WORLD)
    return total or 0


async def count_online_characters(db: DatabaseGateway) -> int:
    """Count characters currently logged in (LoginStatus = 1)."""
    statement = select(func.count()).select_from(Character).where(
        Character.LoginStatus == bindparam("online")
    )
    total = await db.scalar(statement, {"online": 1}, LogicalDatabase.WORLD)
    return total or 0


async def list_characters(
    db: DatabaseGateway,
    offset: int,
    limit: int,
    search: str | None = None
) -> List[dict]:
    """
    Get one page of characters, highest level first.

    CharacterID breaks level ties so pages never overlap.
    """
    statement = _apply_search(select(*CHARACTER_COLUMNS), search).order_by(
        Character.CharacterLevel.desc(),
        Character.CharacterID.asc()
    ).offset(offset).limit(limit)
    return await db.execute(statement, _search_params(search), LogicalDatabase.WORLD)


async def get_character(db: DatabaseGateway, character_id: int) -> dict | None:
    """
    Get a single character by ID.

    Returns:
        Character row or None if not found
    """
    statement = select(*CHARACTER_COLUMNS).where(Character.CharacterID == bindparam("id"))
    rows = await db.execute(statement, {"id": character_id}, LogicalDatabase.WORLD)
    return rows[0] if rows else None


async def get_characters_by_account(db: DatabaseGateway, account_name: str) -> List[dict]:
    """Get every character owned by an account, highest level first."""
    statement = select(*CHARACTER_COLUMNS).where(
        Character.AccountName == bindparam("account")
    ).order_by(Character.CharacterLevel.desc(), Character.CharacterID.asc())
    return await db.execute(statement, {"account": account_name}, LogicalDatabase.WORLD)


async def get_inventory(db: DatabaseGateway, character_id: int) -> List[dict]:
    """
    Get the inventory of a character.

    Returns:
        Item rows ordered by SlotNo ascending
    """
    statement = select(*ITEM_COLUMNS).where(
        Item.OwnerID == bindparam("id")
    ).order_by(Item.SlotNo.asc(), Item.ItemID.asc())
    return await db.execute(statement, {"id": character_id}, LogicalDatabase.WORLD)


async def count_characters_by_class(db: DatabaseGateway) -> List[dict]:
    """Count characters per CharacterClass, ordered by class id."""
    statement = select(
        Character.CharacterClass,
        func.count().label("count")
    ).group_by(Character.CharacterClass).order_by(Character.CharacterClass.asc())
    return await db.execute(statement, database=LogicalDatabase.WORLD)
