from sqlalchemy import Column, String, DateTime, BigInteger
from nest_admin.db.base import MembershipBase


class Account(MembershipBase):
    """
    SQLAlchemy model for the Accounts table of the membership database.

    READ-ONLY MODEL - the game server owns this table.
    """

    __tablename__ = "Accounts"

    AccountName = Column(String(50), primary_key=True)
    CreateDate = Column(DateTime)
    LastLoginDate = Column(DateTime)
    Cash = Column(BigInteger, nullable=False, default=0)
