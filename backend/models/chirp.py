"""Chirp model — a short text post owned by a user."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Chirp(Base):
    __tablename__ = "chirps"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)
    body = Column(String(1024), nullable=False)
    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    author = relationship("User", back_populates="chirps")

    __table_args__ = (
        Index("idx_chirp_user_id", "user_id"),
        Index("idx_chirp_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Chirp {self.id} user={self.user_id}>"
