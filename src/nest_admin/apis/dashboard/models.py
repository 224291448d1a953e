from typing import List
from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """Headline counts across both databases."""

    totalAccounts: int = Field(ge=0)
    totalCharacters: int = Field(ge=0)
    onlinePlayers: int = Field(ge=0)


class ClassCount(BaseModel):
    classId: int = Field(examples=[1])
    className: str = Field(examples=["Warrior"])
    count: int = Field(ge=0)


class ClassDistribution(BaseModel):
    data: List[ClassCount]
