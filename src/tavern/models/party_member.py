from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class PartyMemberModel(Base):
    __tablename__ = "party_members"
    __table_args__ = (
        UniqueConstraint(
            "campaign_id",
            "character_id",
            name="uq_party_members_campaign_character",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    campaign_id = Column(
        String, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    character_id = Column(
        String, ForeignKey("characters.id", ondelete="CASCADE"), index=True, nullable=False
    )
    owner_email = Column(String, nullable=True)
    user_id = Column(String, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    campaign = relationship("CampaignModel", back_populates="party_members")
    character = relationship("CharacterModel")
