"""Party membership utilities.

Seats characters in campaign parties, either through an invite token or
directly by the campaign owner. A join through an invite inserts the party
member and consumes one use of the invite in the same transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from tavern.core.exceptions import (
    CharacterNotFoundError,
    InvalidInviteError,
    PartyMemberNotFoundError,
)
from tavern.models.campaign import CampaignModel
from tavern.models.campaign_invite import CampaignInviteModel
from tavern.models.character import CharacterModel
from tavern.models.downtime_activity import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    DowntimeActivityModel,
)
from tavern.models.game_session import GameSessionModel
from tavern.models.party_member import PartyMemberModel
from tavern.models.session_event import SessionEventModel
from tavern.schemas.user import User
from tavern.utils.invite_manager import (
    STATUS_EXHAUSTED,
    invite_status,
    validate_invite_token,
)
from tavern.utils.ownership import ensure_owner, is_owner

logger = logging.getLogger(__name__)

PLAYER_VIEW_DOWNTIME_LIMIT = 20
PLAYER_VIEW_EVENT_LIMIT = 50
PLAYER_VIEW_SESSION_LIMIT = 5


@dataclass
class JoinResult:
    """Outcome of seating a character.

    ``already_member`` is True when the character was seated before the call;
    in that case nothing was written.
    """

    membership: PartyMemberModel
    already_member: bool


@dataclass
class PlayerSeat:
    """A seat as its player sees it.

    The party is in seating order; the history lists are newest first.
    """

    campaign: CampaignModel
    character: CharacterModel
    party: List[PartyMemberModel]
    downtime: List[DowntimeActivityModel] = field(default_factory=list)
    events: List[SessionEventModel] = field(default_factory=list)
    recent_sessions: List[GameSessionModel] = field(default_factory=list)

    @property
    def ongoing_downtime(self) -> List[DowntimeActivityModel]:
        return [
            d for d in self.downtime
            if d.status not in (STATUS_COMPLETED, STATUS_CANCELLED)
        ]

    @property
    def completed_downtime(self) -> List[DowntimeActivityModel]:
        return [d for d in self.downtime if d.status == STATUS_COMPLETED]

    @property
    def your_events(self) -> List[SessionEventModel]:
        return [e for e in self.events if e.character_id == self.character.id]

    @property
    def campaign_events(self) -> List[SessionEventModel]:
        return [e for e in self.events if e.character_id != self.character.id]


class PartyManager:
    """Manages party membership using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def find_membership(
        self, campaign_id: str, character_id: str
    ) -> Optional[PartyMemberModel]:
        return (
            self.db.query(PartyMemberModel)
            .filter(
                PartyMemberModel.campaign_id == campaign_id,
                PartyMemberModel.character_id == character_id,
            )
            .first()
        )

    def _get_joinable_character(self, character_id: str, user: User) -> CharacterModel:
        model = (
            self.db.query(CharacterModel)
            .filter(CharacterModel.id == character_id)
            .first()
        )
        if model is not None and model.is_archived:
            model = None
        return ensure_owner(model, user, CharacterNotFoundError, character_id)

    def _find_replayed_join(
        self, token: str, character_id: str, user: User
    ) -> Optional[PartyMemberModel]:
        """Find the seat an exhausted invite already granted to this character.

        Lets a resubmitted join form land on the existing seat after the
        invite's last use went to that very join. Revoked and expired
        invites never match.
        """
        if not token or not character_id:
            return None
        invite = (
            self.db.query(CampaignInviteModel)
            .filter(CampaignInviteModel.token == token)
            .first()
        )
        if invite is None or invite_status(invite) != STATUS_EXHAUSTED:
            return None
        membership = self.find_membership(invite.campaign_id, character_id)
        if membership is None or membership.character is None:
            return None
        if membership.character.is_archived or not is_owner(membership.character, user):
            return None
        return membership

    def _consume_invite(self, invite_id: str) -> None:
        """Increment ``used_count`` only while the invite is still usable.

        The limit checks are part of the UPDATE itself so concurrent joins
        cannot push ``used_count`` past ``max_uses``.

        Raises:
            InvalidInviteError: If the invite stopped being usable since it
                was validated.
        """
        now = datetime.now(pytz.utc)
        updated = (
            self.db.query(CampaignInviteModel)
            .filter(
                CampaignInviteModel.id == invite_id,
                CampaignInviteModel.is_revoked.is_(False),
                or_(
                    CampaignInviteModel.max_uses.is_(None),
                    CampaignInviteModel.used_count < CampaignInviteModel.max_uses,
                ),
                or_(
                    CampaignInviteModel.expires_at.is_(None),
                    CampaignInviteModel.expires_at > now,
                ),
            )
            .update(
                {CampaignInviteModel.used_count: CampaignInviteModel.used_count + 1},
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise InvalidInviteError()

    def _seat(
        self,
        campaign_id: str,
        character: CharacterModel,
        user: User,
        invite_id: Optional[str] = None,
    ) -> JoinResult:
        existing = self.find_membership(campaign_id, character.id)
        if existing:
            logger.info(
                "Character %s already in campaign %s, nothing to do",
                character.id,
                campaign_id,
            )
            return JoinResult(existing, already_member=True)

        membership = PartyMemberModel(
            campaign_id=campaign_id,
            character_id=character.id,
            owner_email=user.email,
            user_id=user.user_id,
        )
        try:
            self.db.add(membership)
            self.db.flush()
            if invite_id is not None:
                self._consume_invite(invite_id)
            self.db.commit()
        except IntegrityError:
            # A concurrent join for the same character committed first
            self.db.rollback()
            existing = self.find_membership(campaign_id, character.id)
            if existing is None:
                raise
            logger.info(
                "Concurrent join for character %s in campaign %s resolved to existing seat",
                character.id,
                campaign_id,
            )
            return JoinResult(existing, already_member=True)
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(membership)
        logger.info(
            "Seated character %s in campaign %s (invite=%s)",
            character.id,
            campaign_id,
            invite_id,
        )
        return JoinResult(membership, already_member=False)

    def join_via_invite(self, token: str, character_id: str, user: User) -> JoinResult:
        """Join a campaign party with an invite token.

        Joining with a character that is already seated succeeds without
        writing anything, so resubmitting the join form is harmless. This
        holds even when that join used up the invite's last seat.

        Args:
            token: Invite token from the join link.
            character_id: Character the caller wants to seat.
            user: The authenticated caller.

        Returns:
            JoinResult with the new or existing membership.

        Raises:
            InvalidInviteError: If the token does not grant join rights.
            CharacterNotFoundError: If the character is missing, archived or
                not owned by the caller.
        """
        invite = validate_invite_token(self.db, token)
        if invite is None:
            replayed = self._find_replayed_join(token, character_id, user)
            if replayed is not None:
                logger.info(
                    "Character %s already seated through a spent invite",
                    character_id,
                )
                return JoinResult(replayed, already_member=True)
            logger.info("Rejected join with an invalid invite token")
            raise InvalidInviteError()

        character = self._get_joinable_character(character_id, user)
        return self._seat(invite.campaign_id, character, user, invite_id=invite.id)

    def add_member(
        self, campaign: CampaignModel, character_id: str, user: User
    ) -> JoinResult:
        """Seat one of the caller's characters in a campaign they own.

        Does not touch any invite.
        """
        character = self._get_joinable_character(character_id, user)
        return self._seat(campaign.id, character, user)

    def remove_member(
        self, campaign: CampaignModel, character_id: str, user: User
    ) -> None:
        """Remove a character from a party.

        The member's owner and the campaign owner may remove a seat. Invite
        use counts are never given back.

        Raises:
            PartyMemberNotFoundError: If there is no such seat or the caller
                may not remove it.
        """
        membership = self.find_membership(campaign.id, character_id)
        if membership is None or not (
            is_owner(membership, user) or is_owner(campaign, user)
        ):
            raise PartyMemberNotFoundError(character_id)
        self.db.delete(membership)
        self.db.commit()
        logger.info("Removed character %s from campaign %s", character_id, campaign.id)

    def get_player_view(
        self, campaign_id: str, character_id: str, user: User
    ) -> PlayerSeat:
        """Load what a player sees for one seat.

        Visible to the seat's owner and to the campaign owner only.

        Raises:
            PartyMemberNotFoundError: If not seated or not visible to the caller.
        """
        membership = (
            self.db.query(PartyMemberModel)
            .options(
                joinedload(PartyMemberModel.campaign),
                joinedload(PartyMemberModel.character),
            )
            .filter(
                PartyMemberModel.campaign_id == campaign_id,
                PartyMemberModel.character_id == character_id,
            )
            .first()
        )
        if membership is None or membership.campaign is None or membership.character is None:
            raise PartyMemberNotFoundError(character_id)
        if not (is_owner(membership, user) or is_owner(membership.campaign, user)):
            raise PartyMemberNotFoundError(character_id)

        party = (
            self.db.query(PartyMemberModel)
            .options(joinedload(PartyMemberModel.character))
            .filter(PartyMemberModel.campaign_id == campaign_id)
            .order_by(PartyMemberModel.created_at.asc())
            .all()
        )
        downtime = (
            self.db.query(DowntimeActivityModel)
            .filter(
                DowntimeActivityModel.campaign_id == campaign_id,
                DowntimeActivityModel.character_id == character_id,
            )
            .order_by(DowntimeActivityModel.created_at.desc())
            .limit(PLAYER_VIEW_DOWNTIME_LIMIT)
            .all()
        )
        events = (
            self.db.query(SessionEventModel)
            .join(GameSessionModel, SessionEventModel.session_id == GameSessionModel.id)
            .filter(GameSessionModel.campaign_id == campaign_id)
            .order_by(SessionEventModel.created_at.desc())
            .limit(PLAYER_VIEW_EVENT_LIMIT)
            .all()
        )
        sessions = (
            self.db.query(GameSessionModel)
            .filter(GameSessionModel.campaign_id == campaign_id)
            .order_by(GameSessionModel.created_at.desc())
            .limit(PLAYER_VIEW_SESSION_LIMIT)
            .all()
        )
        return PlayerSeat(
            campaign=membership.campaign,
            character=membership.character,
            party=party,
            downtime=downtime,
            events=events,
            recent_sessions=sessions,
        )
