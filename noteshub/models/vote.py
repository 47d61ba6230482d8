# noteshub/models/vote.py
import enum

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from noteshub.models.database import Base


class VoteDirection(str, enum.Enum):
    UP = "up"
    DOWN = "down"

    @property
    def opposite(self) -> "VoteDirection":
        return VoteDirection.DOWN if self is VoteDirection.UP else VoteDirection.UP


class Vote(Base):
    """One row per (account, upload) with a direction; no row means no vote."""

    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("account_id", "upload_id", name="uq_vote_account_upload"),)

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    upload_id = Column(Integer, ForeignKey("uploads.id"), nullable=False, index=True)
    direction = Column(String(4), nullable=False)

    account = relationship("Account", back_populates="votes")
    upload = relationship("UploadRecord", back_populates="votes")
