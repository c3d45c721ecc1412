from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class GameSessionModel(Base):
    __tablename__ = "game_sessions"

    id = Column(String, primary_key=True, index=True, default=new_id)
    campaign_id = Column(
        String, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    session_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    owner_email = Column(String, index=True, nullable=True)
    created_by_id = Column(String, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    campaign = relationship("CampaignModel", back_populates="sessions")
    events = relationship(
        "SessionEventModel",
        back_populates="session",
        cascade="all, delete-orphan",
    )
