from datetime import datetime
from typing import List
from pydantic import BaseModel, Field


class Account(BaseModel):
    """A membership account as stored by the game server."""

    AccountName: str = Field(examples=["DragonSlayer99"])
    CreateDate: datetime | None = None
    LastLoginDate: datetime | None = None
    Cash: int | None = Field(default=None, examples=[15000])


class AccountPage(BaseModel):
    """One page of accounts, newest first."""

    data: List[Account]
    total: int = Field(ge=0, description="Number of accounts matching the search")
    page: int = Field(ge=1)
    limit: int = Field(ge=1, description="Effective page size; requests above MAX_PAGE_LIMIT (default 200) are capped")
