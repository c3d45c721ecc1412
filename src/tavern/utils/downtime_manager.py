"""Downtime activity management module.

Between sessions the GM tracks what each seated character is working on:
crafting, training, research. An activity starts ONGOING, gains progress as
the GM advances it and ends COMPLETED or CANCELLED. Every change can also be
logged as a session event so players see it in their feed.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from tavern.core.exceptions import (
    ConflictError,
    DowntimeNotFoundError,
    ValidationError,
)
from tavern.models.campaign import CampaignModel
from tavern.models.downtime_activity import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_ONGOING,
    DowntimeActivityModel,
)
from tavern.models.party_member import PartyMemberModel
from tavern.schemas.user import User
from tavern.utils.campaign_manager import CampaignManager
from tavern.utils.game_session_manager import GameSessionManager
from tavern.utils.session_events import (
    EVENT_DOWNTIME_ADVANCE,
    EVENT_DOWNTIME_CANCEL,
    EVENT_DOWNTIME_COMPLETE,
    EVENT_DOWNTIME_START,
)

logger = logging.getLogger(__name__)


class DowntimeManager:
    """Manages downtime activities using SQLAlchemy.

    Every operation requires the acting user to own the campaign.
    """

    def __init__(self, db: Session):
        self.db = db
        self.campaigns = CampaignManager(db)
        self.sessions = GameSessionManager(db)

    def _get_owned_campaign(self, campaign_id: str, user: User) -> CampaignModel:
        return self.campaigns.get_owned_campaign(campaign_id, user)

    def _get_activity(
        self, campaign_id: str, activity_id: str, user: User
    ) -> DowntimeActivityModel:
        self._get_owned_campaign(campaign_id, user)
        activity = (
            self.db.query(DowntimeActivityModel)
            .filter(
                DowntimeActivityModel.id == activity_id,
                DowntimeActivityModel.campaign_id == campaign_id,
            )
            .first()
        )
        if activity is None:
            raise DowntimeNotFoundError(activity_id)
        return activity

    def _log(
        self,
        activity: DowntimeActivityModel,
        session_id: Optional[str],
        user: User,
        event_type: str,
    ) -> None:
        if not session_id:
            return
        session = self.sessions.get_campaign_session(
            session_id, user, campaign_id=activity.campaign_id
        )
        self.sessions.add_event(
            session,
            event_type,
            character_id=activity.character_id,
            data={
                "activity_id": activity.id,
                "title": activity.title,
                "progress": activity.progress,
                "status": activity.status,
            },
        )

    def list_activities(
        self,
        campaign_id: str,
        user: User,
        character_id: Optional[str] = None,
    ) -> List[DowntimeActivityModel]:
        self._get_owned_campaign(campaign_id, user)
        query = self.db.query(DowntimeActivityModel).filter(
            DowntimeActivityModel.campaign_id == campaign_id
        )
        if character_id:
            query = query.filter(DowntimeActivityModel.character_id == character_id)
        return query.order_by(DowntimeActivityModel.created_at.desc()).all()

    def create_activity(
        self,
        campaign_id: str,
        user: User,
        character_id: str,
        title: str,
        description: Optional[str] = None,
        goal: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> DowntimeActivityModel:
        """Start a downtime activity for a seated character.

        Raises:
            CampaignNotFoundError: If the campaign is absent or not owned.
            ValidationError: If the title is blank or the character is not
                seated in the campaign.
            SessionNotFoundError: If ``session_id`` is not a session of this
                campaign.
        """
        title = title.strip()
        if not title:
            raise ValidationError("Downtime title is required.")
        self._get_owned_campaign(campaign_id, user)
        seated = (
            self.db.query(PartyMemberModel.id)
            .filter(
                PartyMemberModel.campaign_id == campaign_id,
                PartyMemberModel.character_id == character_id,
            )
            .first()
        )
        if seated is None:
            raise ValidationError("Character is not in this campaign's party.")

        activity = DowntimeActivityModel(
            campaign_id=campaign_id,
            character_id=character_id,
            title=title,
            description=description,
            goal=goal,
            progress=0,
            status=STATUS_ONGOING,
            owner_email=user.email,
            created_by_id=user.user_id,
        )
        self.db.add(activity)
        try:
            self.db.flush()
            self._log(activity, session_id, user, EVENT_DOWNTIME_START)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(activity)
        logger.info("Started downtime %s for character %s", activity.id, character_id)
        return activity

    def _transition(
        self,
        campaign_id: str,
        activity_id: str,
        user: User,
        event_type: str,
        session_id: Optional[str],
        status: Optional[str] = None,
        amount: int = 0,
    ) -> DowntimeActivityModel:
        activity = self._get_activity(campaign_id, activity_id, user)
        if activity.status != STATUS_ONGOING:
            raise ConflictError(
                f"Downtime activity is already {activity.status.lower()}."
            )
        activity.progress = (activity.progress or 0) + amount
        if status:
            activity.status = status
        try:
            self._log(activity, session_id, user, event_type)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(activity)
        logger.info("Downtime %s: %s", activity_id, event_type)
        return activity

    def advance_activity(
        self,
        campaign_id: str,
        activity_id: str,
        user: User,
        amount: int = 1,
        session_id: Optional[str] = None,
    ) -> DowntimeActivityModel:
        """Add progress to an ongoing activity.

        Raises:
            ValidationError: If ``amount`` is not positive.
            ConflictError: If the activity already finished.
        """
        if amount < 1:
            raise ValidationError("Progress must advance by at least 1.")
        return self._transition(
            campaign_id, activity_id, user, EVENT_DOWNTIME_ADVANCE, session_id,
            amount=amount,
        )

    def complete_activity(
        self,
        campaign_id: str,
        activity_id: str,
        user: User,
        session_id: Optional[str] = None,
    ) -> DowntimeActivityModel:
        return self._transition(
            campaign_id, activity_id, user, EVENT_DOWNTIME_COMPLETE, session_id,
            status=STATUS_COMPLETED,
        )

    def cancel_activity(
        self,
        campaign_id: str,
        activity_id: str,
        user: User,
        session_id: Optional[str] = None,
    ) -> DowntimeActivityModel:
        return self._transition(
            campaign_id, activity_id, user, EVENT_DOWNTIME_CANCEL, session_id,
            status=STATUS_CANCELLED,
        )
