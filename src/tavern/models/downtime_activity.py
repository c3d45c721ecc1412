from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow

STATUS_ONGOING = "ONGOING"
STATUS_COMPLETED = "COMPLETED"
STATUS_CANCELLED = "CANCELLED"


class DowntimeActivityModel(Base):
    __tablename__ = "downtime_activities"

    id = Column(String, primary_key=True, index=True, default=new_id)
    campaign_id = Column(
        String, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    character_id = Column(
        String, ForeignKey("characters.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    goal = Column(String, nullable=True)
    progress = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default=STATUS_ONGOING)

    owner_email = Column(String, index=True, nullable=True)
    created_by_id = Column(String, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    campaign = relationship("CampaignModel", back_populates="downtime_activities")
    character = relationship("CharacterModel", back_populates="downtime_activities")
