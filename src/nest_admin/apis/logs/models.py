from datetime import datetime
from typing import List
from pydantic import BaseModel, Field


class LogEntry(BaseModel):
    LogID: int
    LogType: str = Field(examples=["Login", "Enhancement"])
    LogMessage: str | None = Field(default=None, examples=["Player logged in from 10.0.0.5"])
    CharacterName: str | None = Field(default=None, examples=["ShadowBlade"])
    LogDate: datetime


class LogPage(BaseModel):
    """
    One page of game logs, most recent first.

    There is deliberately no ``total``: another page may exist whenever
    ``len(data) == limit``.
    """

    data: List[LogEntry]
    page: int = Field(ge=1)
    limit: int = Field(ge=1, description="Effective page size; requests above MAX_PAGE_LIMIT (default 200) are capped")


class LogTypes(BaseModel):
    data: List[str] = Field(examples=[["Login", "Logout", "Trade"]])
