from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from .base import Base, utcnow


class BadgeModel(Base):
    __tablename__ = "badges"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    token_id = Column(String, nullable=False)
    chain_id = Column(Integer, nullable=False)
    contract_address = Column(String, nullable=True)
    metadata_uri = Column(String, nullable=False)
    tx_hash = Column(String, nullable=False)
    # Simulated mints are placeholders, not on-chain state
    simulated = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
