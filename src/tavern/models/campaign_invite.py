"""Campaign invite database model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class CampaignInviteModel(Base):
    """Token-addressed grant allowing a limited number of party joins."""

    __tablename__ = "campaign_invites"

    id = Column(String, primary_key=True, index=True, default=new_id)
    campaign_id = Column(
        String, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    token = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)
    is_revoked = Column(Boolean, nullable=False, default=False)
    created_by_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    campaign = relationship("CampaignModel", back_populates="invites")
