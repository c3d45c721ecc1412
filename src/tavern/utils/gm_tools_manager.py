"""Game master tools: the NPCs and quests of a campaign.

Only the campaign owner sees or edits them; players learn about quest
progress through the ``quest_update`` events logged in sessions.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from tavern.core.exceptions import NpcNotFoundError, QuestNotFoundError, ValidationError
from tavern.models.npc import NpcModel
from tavern.models.quest import QUEST_PLANNED, QUEST_STATUSES, QuestModel
from tavern.schemas.user import User
from tavern.utils.campaign_manager import CampaignManager
from tavern.utils.game_session_manager import GameSessionManager
from tavern.utils.session_events import EVENT_QUEST_UPDATE

logger = logging.getLogger(__name__)


def _required(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationError(f"{label} is required.")
    return value


def _quest_status(value: str) -> str:
    status = value.strip().upper()
    if status not in QUEST_STATUSES:
        raise ValidationError(
            f"Quest status must be one of: {', '.join(QUEST_STATUSES)}."
        )
    return status


class GmToolsManager:
    """Manages campaign NPCs and quests using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db
        self.campaigns = CampaignManager(db)
        self.sessions = GameSessionManager(db)

    # --- NPCs ---

    def list_npcs(self, campaign_id: str, user: User) -> List[NpcModel]:
        self.campaigns.get_owned_campaign(campaign_id, user)
        return (
            self.db.query(NpcModel)
            .filter(NpcModel.campaign_id == campaign_id)
            .order_by(NpcModel.name.asc())
            .all()
        )

    def create_npc(
        self,
        campaign_id: str,
        user: User,
        name: str,
        role: Optional[str] = None,
        description: Optional[str] = None,
    ) -> NpcModel:
        name = _required(name, "NPC name")
        self.campaigns.get_owned_campaign(campaign_id, user)
        npc = NpcModel(
            campaign_id=campaign_id,
            name=name,
            role=role,
            description=description,
            owner_email=user.email,
            created_by_id=user.user_id,
        )
        self.db.add(npc)
        self.db.commit()
        self.db.refresh(npc)
        logger.info("Created NPC %s in campaign %s", npc.id, campaign_id)
        return npc

    def _get_npc(self, campaign_id: str, npc_id: str, user: User) -> NpcModel:
        self.campaigns.get_owned_campaign(campaign_id, user)
        npc = (
            self.db.query(NpcModel)
            .filter(NpcModel.id == npc_id, NpcModel.campaign_id == campaign_id)
            .first()
        )
        if npc is None:
            raise NpcNotFoundError(npc_id)
        return npc

    def update_npc(
        self,
        campaign_id: str,
        npc_id: str,
        user: User,
        name: Optional[str] = None,
        role: Optional[str] = None,
        description: Optional[str] = None,
    ) -> NpcModel:
        npc = self._get_npc(campaign_id, npc_id, user)
        if name is not None:
            npc.name = _required(name, "NPC name")
        if role is not None:
            npc.role = role or None
        if description is not None:
            npc.description = description or None
        self.db.commit()
        self.db.refresh(npc)
        return npc

    def delete_npc(self, campaign_id: str, npc_id: str, user: User) -> None:
        npc = self._get_npc(campaign_id, npc_id, user)
        self.db.delete(npc)
        self.db.commit()
        logger.info("Deleted NPC %s", npc_id)

    # --- Quests ---

    def list_quests(self, campaign_id: str, user: User) -> List[QuestModel]:
        self.campaigns.get_owned_campaign(campaign_id, user)
        return (
            self.db.query(QuestModel)
            .filter(QuestModel.campaign_id == campaign_id)
            .order_by(QuestModel.created_at.desc())
            .all()
        )

    def create_quest(
        self,
        campaign_id: str,
        user: User,
        title: str,
        summary: Optional[str] = None,
        status: str = QUEST_PLANNED,
    ) -> QuestModel:
        """Add a quest.

        Raises:
            CampaignNotFoundError: If the campaign is absent or not owned.
            ValidationError: On a blank title or an unknown status.
        """
        title = _required(title, "Quest title")
        status = _quest_status(status)
        self.campaigns.get_owned_campaign(campaign_id, user)
        quest = QuestModel(
            campaign_id=campaign_id,
            title=title,
            summary=summary,
            status=status,
            owner_email=user.email,
            created_by_id=user.user_id,
        )
        self.db.add(quest)
        self.db.commit()
        self.db.refresh(quest)
        logger.info("Created quest %s in campaign %s", quest.id, campaign_id)
        return quest

    def _get_quest(self, campaign_id: str, quest_id: str, user: User) -> QuestModel:
        self.campaigns.get_owned_campaign(campaign_id, user)
        quest = (
            self.db.query(QuestModel)
            .filter(QuestModel.id == quest_id, QuestModel.campaign_id == campaign_id)
            .first()
        )
        if quest is None:
            raise QuestNotFoundError(quest_id)
        return quest

    def update_quest(
        self,
        campaign_id: str,
        quest_id: str,
        user: User,
        title: Optional[str] = None,
        summary: Optional[str] = None,
        status: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> QuestModel:
        """Edit a quest, logging a status change in ``session_id`` if given.

        Raises:
            QuestNotFoundError: If the quest is not in this campaign.
            SessionNotFoundError: If ``session_id`` is not a session of this
                campaign.
            ValidationError: On a blank title or an unknown status.
        """
        quest = self._get_quest(campaign_id, quest_id, user)
        new_status = _quest_status(status) if status is not None else None
        if title is not None:
            quest.title = _required(title, "Quest title")
        if summary is not None:
            quest.summary = summary or None

        changed = new_status is not None and new_status != quest.status
        if new_status is not None:
            quest.status = new_status
        try:
            if changed and session_id:
                session = self.sessions.get_campaign_session(
                    session_id, user, campaign_id=campaign_id
                )
                self.sessions.add_event(
                    session,
                    EVENT_QUEST_UPDATE,
                    data={
                        "quest_id": quest.id,
                        "title": quest.title,
                        "status": quest.status,
                    },
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(quest)
        if changed:
            logger.info("Quest %s is now %s", quest_id, quest.status)
        return quest

    def delete_quest(self, campaign_id: str, quest_id: str, user: User) -> None:
        quest = self._get_quest(campaign_id, quest_id, user)
        self.db.delete(quest)
        self.db.commit()
        logger.info("Deleted quest %s", quest_id)
