from sqlalchemy import Column, String, DateTime, Integer, BigInteger, SmallInteger
from nest_admin.db.base import WorldBase


class Character(WorldBase):
    """
    SQLAlchemy model for the Characters table of the world database.

    READ-ONLY MODEL:
    - Do not use for INSERT/UPDATE/DELETE operations
    - LoginStatus is the only online/offline signal (1 = online)
    """

    __tablename__ = "Characters"

    CharacterID = Column(BigInteger, primary_key=True)
    CharacterName = Column(String(50), nullable=False)
    AccountName = Column(String(50), nullable=False)
    CharacterClass = Column(SmallInteger, nullable=False)
    CharacterLevel = Column(Integer, nullable=False)
    CurHP = Column(BigInteger)
    CurMP = Column(BigInteger)
    Money = Column(BigInteger)
    CreateDate = Column(DateTime)
    LastLoginDate = Column(DateTime)
    LoginStatus = Column(SmallInteger, nullable=False, default=0)


class Item(WorldBase):
    """
    SQLAlchemy model for the Items table (character inventory).

    READ-ONLY MODEL - OwnerID references Characters.CharacterID.
    """

    __tablename__ = "Items"

    ItemID = Column(BigInteger, primary_key=True)
    OwnerID = Column(BigInteger, nullable=False, index=True)
    ItemName = Column(String(100), nullable=False)
    Quantity = Column(Integer, nullable=False, default=1)
    EnhanceLevel = Column(SmallInteger, nullable=False, default=0)
    SlotNo = Column(Integer, nullable=False)
