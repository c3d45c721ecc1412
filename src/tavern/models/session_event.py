from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class SessionEventModel(Base):
    __tablename__ = "session_events"

    id = Column(String, primary_key=True, index=True, default=new_id)
    session_id = Column(
        String, ForeignKey("game_sessions.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # Campaign-wide events have no character
    character_id = Column(
        String, ForeignKey("characters.id", ondelete="SET NULL"), index=True, nullable=True
    )
    type = Column(String, nullable=False)
    data = Column(JSON, nullable=True)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    session = relationship("GameSessionModel", back_populates="events")
