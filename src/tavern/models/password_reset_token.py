from sqlalchemy import Column, DateTime, ForeignKey, String

from .base import Base, new_id, utcnow


class PasswordResetTokenModel(Base):
    __tablename__ = "password_reset_tokens"

    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(
        String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True, nullable=False
    )
    token = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
