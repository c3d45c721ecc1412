from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class NpcModel(Base):
    __tablename__ = "npcs"

    id = Column(String, primary_key=True, index=True, default=new_id)
    campaign_id = Column(
        String, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    name = Column(String, nullable=False)
    role = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    owner_email = Column(String, index=True, nullable=True)
    created_by_id = Column(String, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    campaign = relationship("CampaignModel", back_populates="npcs")
