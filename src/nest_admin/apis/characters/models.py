from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, computed_field

from nest_admin.constants import class_name


class Character(BaseModel):
    """A game-world character."""

    CharacterID: int = Field(examples=[1])
    CharacterName: str = Field(examples=["ShadowBlade"])
    AccountName: str = Field(examples=["DragonSlayer99"])
    CharacterClass: int = Field(description="Class id (1-10)", examples=[7])
    CharacterLevel: int = Field(examples=[95])
    CurHP: int | None = None
    CurMP: int | None = None
    Money: int | None = None
    CreateDate: datetime | None = None
    LastLoginDate: datetime | None = None
    LoginStatus: int = Field(description="1 when online, 0 when offline", examples=[0, 1])

    @computed_field
    @property
    def ClassName(self) -> str:
        return class_name(self.CharacterClass)


class CharacterPage(BaseModel):
    """One page of characters, highest level first."""

    data: List[Character]
    total: int = Field(ge=0, description="Number of characters matching the search")
    page: int = Field(ge=1)
    limit: int = Field(ge=1, description="Effective page size; requests above MAX_PAGE_LIMIT (default 200) are capped")


class CharacterList(BaseModel):
    data: List[Character]


class InventoryItem(BaseModel):
    ItemID: int
    ItemName: str = Field(examples=["Apocalypse Dagger"])
    Quantity: int = Field(examples=[1])
    EnhanceLevel: int = Field(examples=[12])
    SlotNo: int = Field(examples=[0])


class Inventory(BaseModel):
    """Inventory items ordered by slot."""

    data: List[InventoryItem]
