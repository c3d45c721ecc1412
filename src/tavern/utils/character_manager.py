"""Character management utilities.

Covers character CRUD, archival and the simple game state tracked per
character (HP, XP and conditions).
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import pytz
from sqlalchemy import select
from sqlalchemy.orm import Session

from tavern.config import ARCHIVE_CONFIRMATION
from tavern.core.exceptions import CharacterNotFoundError, ConflictError, ValidationError
from tavern.models.character import CharacterModel
from tavern.models.party_member import PartyMemberModel
from tavern.schemas.user import User
from tavern.utils.ownership import ensure_owner, owned_by

logger = logging.getLogger(__name__)


def _clean_conditions(conditions: Iterable[str]) -> List[str]:
    seen = []
    for condition in conditions:
        condition = condition.strip().lower()
        if condition and condition not in seen:
            seen.append(condition)
    return seen


class CharacterManager:
    """Manages characters owned by users."""

    def __init__(self, db: Session):
        self.db = db

    def create_character(
        self,
        owner: User,
        name: str,
        system: Optional[str] = None,
        class_name: Optional[str] = None,
        level: int = 1,
        hp_max: int = 10,
        hp_current: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> CharacterModel:
        name = name.strip()
        if not name:
            raise ValidationError("Character name is required.")
        if hp_current is None:
            hp_current = hp_max
        character = CharacterModel(
            name=name,
            system=system,
            class_name=class_name,
            level=level,
            hp_max=hp_max,
            hp_current=max(0, min(hp_current, hp_max)),
            xp=0,
            conditions=[],
            notes=notes,
            owner_email=owner.email,
            created_by_id=owner.user_id,
        )
        self.db.add(character)
        self.db.commit()
        self.db.refresh(character)
        logger.info("Created character %s for user %s", character.id, owner.user_id)
        return character

    def get_owned_character(
        self, character_id: str, user: User, include_archived: bool = True
    ) -> CharacterModel:
        """Fetch a character the user may mutate.

        Args:
            character_id: Character to load.
            user: The acting user.
            include_archived: When False, archived characters count as missing.

        Raises:
            CharacterNotFoundError: If absent, archived (when excluded) or
                owned by someone else.
        """
        model = (
            self.db.query(CharacterModel)
            .filter(CharacterModel.id == character_id)
            .first()
        )
        if model is not None and model.is_archived and not include_archived:
            model = None
        return ensure_owner(model, user, CharacterNotFoundError, character_id)

    def list_characters(
        self, user: User, include_archived: bool = False
    ) -> List[CharacterModel]:
        query = self.db.query(CharacterModel).filter(owned_by(CharacterModel, user))
        if not include_archived:
            query = query.filter(CharacterModel.is_archived.is_(False))
        return query.order_by(CharacterModel.created_at.desc()).all()

    def list_available_for_campaign(
        self, user: User, campaign_id: str
    ) -> List[CharacterModel]:
        """List the user's active characters not yet seated in the campaign."""
        seated = select(PartyMemberModel.character_id).where(
            PartyMemberModel.campaign_id == campaign_id
        )
        return (
            self.db.query(CharacterModel)
            .filter(
                owned_by(CharacterModel, user),
                CharacterModel.is_archived.is_(False),
                CharacterModel.id.not_in(seated),
            )
            .order_by(CharacterModel.created_at.desc())
            .all()
        )

    def update_character(
        self,
        character_id: str,
        user: User,
        name: Optional[str] = None,
        system: Optional[str] = None,
        class_name: Optional[str] = None,
        level: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> CharacterModel:
        character = self.get_owned_character(character_id, user)
        if name is not None and name.strip():
            character.name = name.strip()
        if system is not None:
            character.system = system
        if class_name is not None:
            character.class_name = class_name
        if level is not None:
            character.level = level
        if notes is not None:
            character.notes = notes
        # Editing brings an archived character back
        character.is_archived = False
        character.deleted_at = None
        self.db.commit()
        self.db.refresh(character)
        return character

    def update_state(
        self,
        character_id: str,
        user: User,
        hp_current: Optional[int] = None,
        hp_max: Optional[int] = None,
        xp: Optional[int] = None,
        award_xp: Optional[int] = None,
        conditions: Optional[List[str]] = None,
    ) -> CharacterModel:
        """Apply a partial game-state update.

        HP is clamped to 0..hp_max after applying ``hp_max``; XP never goes
        below zero.
        """
        character = self.get_owned_character(character_id, user, include_archived=False)
        if hp_max is not None:
            if hp_max < 1:
                raise ValidationError("hp_max must be at least 1")
            character.hp_max = hp_max
        if hp_current is not None:
            character.hp_current = hp_current
        character.hp_current = max(0, min(character.hp_current, character.hp_max))

        if xp is not None:
            character.xp = xp
        if award_xp:
            character.xp = character.xp + award_xp
        character.xp = max(0, character.xp)

        if conditions is not None:
            character.conditions = _clean_conditions(conditions)

        self.db.commit()
        self.db.refresh(character)
        logger.info(
            "Updated state of character %s: hp=%s/%s xp=%s",
            character_id,
            character.hp_current,
            character.hp_max,
            character.xp,
        )
        return character

    def archive_character(
        self, character_id: str, user: User, confirmation: str
    ) -> CharacterModel:
        if confirmation.strip() != ARCHIVE_CONFIRMATION:
            raise ValidationError(f"Type {ARCHIVE_CONFIRMATION} to confirm.")
        character = self.get_owned_character(character_id, user)
        character.is_archived = True
        character.deleted_at = datetime.now(pytz.utc)
        self.db.commit()
        self.db.refresh(character)
        logger.info("Archived character: %s", character_id)
        return character

    def delete_character(self, character_id: str, user: User, confirmation: str) -> None:
        """Delete a character permanently.

        Raises:
            CharacterNotFoundError: If absent or owned by someone else.
            ValidationError: If the confirmation is not the character's name.
            ConflictError: If the character is seated in any party.
        """
        character = self.get_owned_character(character_id, user)
        if confirmation.strip() != character.name:
            raise ValidationError("Type the character's name to confirm deletion.")
        seated = (
            self.db.query(PartyMemberModel.id)
            .filter(PartyMemberModel.character_id == character_id)
            .first()
        )
        if seated:
            raise ConflictError("Character is still a member of a party.")
        self.db.delete(character)
        self.db.commit()
        logger.info("Deleted character: %s", character_id)
