from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class CharacterModel(Base):
    __tablename__ = "characters"

    id = Column(String, primary_key=True, index=True, default=new_id)
    name = Column(String, nullable=False)
    system = Column(String, nullable=True)
    class_name = Column(String, nullable=True)
    level = Column(Integer, nullable=False, default=1)

    hp_current = Column(Integer, nullable=False, default=10)
    hp_max = Column(Integer, nullable=False, default=10)
    xp = Column(Integer, nullable=False, default=0)
    conditions = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)

    owner_email = Column(String, index=True, nullable=True)
    created_by_id = Column(String, index=True, nullable=True)

    is_archived = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Character passport, filled in by the chain minting service
    passport_token_id = Column(String, nullable=True)
    passport_tx_hash = Column(String, nullable=True)
    passport_simulated = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    downtime_activities = relationship(
        "DowntimeActivityModel",
        back_populates="character",
        cascade="all, delete-orphan",
    )
