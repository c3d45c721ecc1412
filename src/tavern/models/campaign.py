from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class CampaignModel(Base):
    __tablename__ = "campaigns"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    gm_name = Column(String, nullable=True)

    # Two generations of ownership: email first, then user id
    owner_email = Column(String, index=True, nullable=True)
    created_by_id = Column(String, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    invites = relationship(
        "CampaignInviteModel",
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
    party_members = relationship(
        "PartyMemberModel",
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
    sessions = relationship(
        "GameSessionModel",
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
    downtime_activities = relationship(
        "DowntimeActivityModel",
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
    npcs = relationship(
        "NpcModel",
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
    quests = relationship(
        "QuestModel",
        back_populates="campaign",
        cascade="all, delete-orphan",
    )
