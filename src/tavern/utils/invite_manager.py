"""Campaign invite utilities.

Invite tokens are opaque, URL-safe strings looked up by exact match. This
module generates them, administers a campaign's invites and decides whether
a presented token currently grants join rights.
"""

import base64
import logging
import math
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

import pytz
from sqlalchemy.orm import Session, joinedload

from tavern.config import (
    DEFAULT_INVITE_EXPIRES_IN_DAYS,
    INVITE_TOKEN_BYTES,
    INVITE_TOKEN_LENGTH,
)
from tavern.core.exceptions import InviteNotFoundError, ValidationError
from tavern.models.campaign import CampaignModel
from tavern.models.campaign_invite import CampaignInviteModel
from tavern.schemas.user import User

logger = logging.getLogger(__name__)

STATUS_ACTIVE = "active"
STATUS_REVOKED = "revoked"
STATUS_EXPIRED = "expired"
STATUS_EXHAUSTED = "exhausted"


def generate_invite_token(length: Optional[int] = None) -> str:
    """Return a fresh invite token of ``length`` characters from a CSPRNG."""
    length = length or INVITE_TOKEN_LENGTH
    # base64 yields 4 characters per 3 bytes
    n_bytes = max(INVITE_TOKEN_BYTES, math.ceil(length * 3 / 4))
    raw = secrets.token_bytes(n_bytes)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")[:length]


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on load)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def invite_status(invite: CampaignInviteModel, now: Optional[datetime] = None) -> str:
    """Classify an invite. Revocation wins over expiry, expiry over exhaustion."""
    now = now or datetime.now(pytz.utc)
    if invite.is_revoked:
        return STATUS_REVOKED
    expires_at = as_utc(invite.expires_at)
    if expires_at is not None and expires_at <= now:
        return STATUS_EXPIRED
    if invite.max_uses is not None and invite.used_count >= invite.max_uses:
        return STATUS_EXHAUSTED
    return STATUS_ACTIVE


def join_path(token: str) -> str:
    return f"/join/{token}"


def validate_invite_token(
    db: Session, token: Optional[str], now: Optional[datetime] = None
) -> Optional[CampaignInviteModel]:
    """Look up a token and decide whether it can be used to join.

    Read-only: validation never touches ``used_count``, so calling it any
    number of times is safe.

    Args:
        db: SQLAlchemy Session.
        token: The presented token, compared case-sensitively.
        now: Override for the current time.

    Returns:
        The invite with its campaign loaded, or None when the token is
        unknown, revoked, expired, exhausted or its campaign is gone.
    """
    if not token:
        return None
    invite = (
        db.query(CampaignInviteModel)
        .options(joinedload(CampaignInviteModel.campaign))
        .filter(CampaignInviteModel.token == token)
        .first()
    )
    if invite is None:
        return None
    if invite_status(invite, now) != STATUS_ACTIVE:
        return None
    if invite.campaign is None:
        return None
    return invite


class InviteManager:
    """Creates, lists and revokes the invites of a campaign.

    Callers are expected to have run the ownership guard on the campaign.
    """

    def __init__(self, db: Session):
        self.db = db

    def validate(self, token: Optional[str]) -> Optional[CampaignInviteModel]:
        return validate_invite_token(self.db, token)

    def create_invite(
        self,
        campaign: CampaignModel,
        created_by: User,
        expires_at: Optional[datetime] = None,
        expires_in_days: Optional[int] = None,
        max_uses: Optional[int] = None,
    ) -> CampaignInviteModel:
        """Create an invite for a campaign.

        Args:
            campaign: Campaign owned by ``created_by``.
            created_by: The acting user.
            expires_at: Absolute expiry, read as UTC when naive.
            expires_in_days: Relative expiry; ignored when ``expires_at`` is set.
                Falls back to DEFAULT_INVITE_EXPIRES_IN_DAYS when neither is
                given.
            max_uses: Number of joins allowed; unlimited when None.

        Returns:
            The stored invite.

        Raises:
            ValidationError: If ``max_uses`` is below 1 or the expiry is not
                in the future.
        """
        now = datetime.now(pytz.utc)
        if max_uses is not None and max_uses < 1:
            raise ValidationError("max_uses must be at least 1")
        if expires_at is None and expires_in_days is None:
            expires_in_days = DEFAULT_INVITE_EXPIRES_IN_DAYS
        if expires_at is None and expires_in_days is not None:
            expires_at = now + timedelta(days=expires_in_days)
        expires_at = as_utc(expires_at)
        if expires_at is not None and expires_at <= now:
            raise ValidationError("expires_at must be in the future")

        token = generate_invite_token()
        while (
            self.db.query(CampaignInviteModel.id)
            .filter(CampaignInviteModel.token == token)
            .first()
        ):
            token = generate_invite_token()

        invite = CampaignInviteModel(
            campaign_id=campaign.id,
            token=token,
            expires_at=expires_at,
            max_uses=max_uses,
            used_count=0,
            is_revoked=False,
            created_by_id=created_by.user_id,
            created_at=now,
        )
        self.db.add(invite)
        self.db.commit()
        self.db.refresh(invite)
        logger.info(
            "Created invite %s for campaign %s (max_uses=%s, expires_at=%s)",
            invite.id,
            campaign.id,
            max_uses,
            expires_at,
        )
        return invite

    def list_invites(self, campaign_id: str) -> List[CampaignInviteModel]:
        return (
            self.db.query(CampaignInviteModel)
            .filter(CampaignInviteModel.campaign_id == campaign_id)
            .order_by(CampaignInviteModel.created_at.desc())
            .all()
        )

    def revoke_invite(self, campaign_id: str, invite_id: str) -> CampaignInviteModel:
        """Revoke an invite. Revoking twice is a no-op.

        Raises:
            InviteNotFoundError: If no such invite exists for the campaign.
        """
        invite = (
            self.db.query(CampaignInviteModel)
            .filter(
                CampaignInviteModel.id == invite_id,
                CampaignInviteModel.campaign_id == campaign_id,
            )
            .first()
        )
        if not invite:
            raise InviteNotFoundError(invite_id)
        if not invite.is_revoked:
            invite.is_revoked = True
            self.db.commit()
            self.db.refresh(invite)
            logger.info("Revoked invite %s for campaign %s", invite_id, campaign_id)
        return invite
