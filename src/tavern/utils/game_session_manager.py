"""Session log management module.

This module handles creating, listing and deleting the play-session logs
recorded against campaigns, and the events the GM logs during a session.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from tavern.core.exceptions import CampaignNotFoundError, SessionNotFoundError, ValidationError
from tavern.models.campaign import CampaignModel
from tavern.models.game_session import GameSessionModel
from tavern.models.party_member import PartyMemberModel
from tavern.models.session_event import SessionEventModel
from tavern.schemas.user import User
from tavern.utils.invite_manager import as_utc
from tavern.utils.ownership import ensure_owner, owned_by

logger = logging.getLogger(__name__)


class GameSessionManager:
    """Manages session log operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize GameSessionManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def list_sessions(
        self, user: User, campaign_id: Optional[str] = None
    ) -> List[GameSessionModel]:
        """List the user's session logs, most recent session date first.

        Args:
            user: The acting user.
            campaign_id: Optional campaign filter.
        """
        query = self.db.query(GameSessionModel).filter(owned_by(GameSessionModel, user))
        if campaign_id:
            query = query.filter(GameSessionModel.campaign_id == campaign_id)
        return query.order_by(
            GameSessionModel.session_date.desc(),
            GameSessionModel.created_at.desc(),
        ).all()

    def create_session(
        self,
        user: User,
        campaign_id: str,
        title: str,
        session_date: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> GameSessionModel:
        """Log a session for a campaign the user owns.

        Raises:
            ValidationError: If the title is blank.
            CampaignNotFoundError: If the campaign is absent or not owned.
        """
        title = title.strip()
        if not title:
            raise ValidationError("Session title is required.")
        campaign = (
            self.db.query(CampaignModel)
            .filter(CampaignModel.id == campaign_id)
            .first()
        )
        ensure_owner(campaign, user, CampaignNotFoundError, campaign_id)

        model = GameSessionModel(
            campaign_id=campaign_id,
            title=title,
            session_date=as_utc(session_date),
            notes=notes,
            owner_email=user.email,
            created_by_id=user.user_id,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created session %s in campaign %s", model.id, campaign_id)
        return model

    def read_session(self, session_id: str, user: User) -> GameSessionModel:
        """Read a session log.

        Raises:
            SessionNotFoundError: If the session does not exist or owner mismatch.
        """
        model = (
            self.db.query(GameSessionModel)
            .filter(GameSessionModel.id == session_id)
            .first()
        )
        return ensure_owner(model, user, SessionNotFoundError, session_id)

    def delete_session(self, session_id: str, user: User) -> None:
        model = self.read_session(session_id, user)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted session: %s", session_id)

    def get_campaign_session(
        self, session_id: str, user: User, campaign_id: Optional[str] = None
    ) -> GameSessionModel:
        """Fetch a session whose campaign the user owns.

        Events are the GM's log, so the campaign's owner decides who may
        write them, not whoever created the session row.

        Raises:
            SessionNotFoundError: If absent, in another campaign, or the
                campaign is not the user's.
        """
        model = (
            self.db.query(GameSessionModel)
            .options(joinedload(GameSessionModel.campaign))
            .filter(GameSessionModel.id == session_id)
            .first()
        )
        if model is None or (campaign_id and model.campaign_id != campaign_id):
            raise SessionNotFoundError(session_id)
        ensure_owner(model.campaign, user, SessionNotFoundError, session_id)
        return model

    def add_event(
        self,
        session: GameSessionModel,
        event_type: str,
        character_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> SessionEventModel:
        """Stage an event on the session; the caller commits."""
        event = SessionEventModel(
            session_id=session.id,
            character_id=character_id,
            type=event_type,
            data=data or {},
            message=message,
        )
        self.db.add(event)
        return event

    def record_event(
        self,
        session_id: str,
        user: User,
        event_type: str,
        character_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> SessionEventModel:
        """Log an event in a session of a campaign the user runs.

        Raises:
            SessionNotFoundError: If the session is not visible to the user.
            ValidationError: If the type is blank or the character is not
                seated in the session's campaign.
        """
        event_type = event_type.strip()
        if not event_type:
            raise ValidationError("Event type is required.")
        session = self.get_campaign_session(session_id, user)
        if character_id:
            seated = (
                self.db.query(PartyMemberModel.id)
                .filter(
                    PartyMemberModel.campaign_id == session.campaign_id,
                    PartyMemberModel.character_id == character_id,
                )
                .first()
            )
            if seated is None:
                raise ValidationError("Character is not in this campaign's party.")

        event = self.add_event(
            session, event_type, character_id=character_id, data=data, message=message
        )
        self.db.commit()
        self.db.refresh(event)
        logger.info("Recorded %s event in session %s", event_type, session_id)
        return event

    def list_events(self, session_id: str, user: User) -> List[SessionEventModel]:
        """Events of a session, newest first."""
        session = self.get_campaign_session(session_id, user)
        return (
            self.db.query(SessionEventModel)
            .filter(SessionEventModel.session_id == session.id)
            .order_by(SessionEventModel.created_at.desc())
            .all()
        )
