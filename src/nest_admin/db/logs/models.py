from sqlalchemy import Column, String, DateTime, BigInteger
from nest_admin.db.base import WorldBase


class GameLog(WorldBase):
    """
    SQLAlchemy model for the GameLog table (created and appended by the game server).

    READ-ONLY MODEL - rows are append-only at the source.
    """

    __tablename__ = "GameLog"

    LogID = Column(BigInteger, primary_key=True)
    LogType = Column(String(32), nullable=False, index=True)
    LogMessage = Column(String(1024))
    CharacterName = Column(String(50))
    LogDate = Column(DateTime, nullable=False)
