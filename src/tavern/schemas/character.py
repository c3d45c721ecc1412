"""Character schema definitions.

Request bodies for character CRUD and game-state tracking, plus the response
shapes returned by the character routes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateCharacterRequest(BaseModel):
    name: str = Field(min_length=1)
    system: Optional[str] = Field(default=None, description="Game system, e.g. '5e'.")
    class_name: Optional[str] = None
    level: int = Field(default=1, ge=1)
    hp_max: int = Field(default=10, ge=1)
    hp_current: Optional[int] = Field(
        default=None,
        ge=0,
        description="Starting HP; defaults to hp_max.",
    )
    notes: Optional[str] = None


class UpdateCharacterRequest(BaseModel):
    name: Optional[str] = None
    system: Optional[str] = None
    class_name: Optional[str] = None
    level: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None


class UpdateCharacterStateRequest(BaseModel):
    """Partial update of tracked game state.

    HP values are clamped to 0..hp_max. ``award_xp`` is added on top of
    ``xp`` when both are given.
    """

    hp_current: Optional[int] = None
    hp_max: Optional[int] = Field(default=None, ge=1)
    xp: Optional[int] = Field(default=None, ge=0)
    award_xp: Optional[int] = Field(default=None, ge=0)
    conditions: Optional[List[str]] = None


class ConfirmationRequest(BaseModel):
    confirmation: str = Field(
        description="Must be 'ARCHIVE' to archive, or the character name to delete."
    )


class CharacterSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    class_name: Optional[str] = None
    level: int


class CharacterInfo(CharacterSummary):
    system: Optional[str] = None
    hp_current: int
    hp_max: int
    xp: int
    conditions: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    owner_email: Optional[str] = None
    created_by_id: Optional[str] = None
    is_archived: bool
    passport_token_id: Optional[str] = None
    passport_tx_hash: Optional[str] = None
    passport_simulated: bool = False
    created_at: datetime
    updated_at: datetime
