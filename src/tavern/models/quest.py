from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow

QUEST_PLANNED = "PLANNED"
QUEST_ACTIVE = "ACTIVE"
QUEST_COMPLETED = "COMPLETED"
QUEST_FAILED = "FAILED"
QUEST_STATUSES = (QUEST_PLANNED, QUEST_ACTIVE, QUEST_COMPLETED, QUEST_FAILED)


class QuestModel(Base):
    __tablename__ = "quests"

    id = Column(String, primary_key=True, index=True, default=new_id)
    campaign_id = Column(
        String, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    summary = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=QUEST_PLANNED)
    owner_email = Column(String, index=True, nullable=True)
    created_by_id = Column(String, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    campaign = relationship("CampaignModel", back_populates="quests")
