"""NPC and quest schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateNpcRequest(BaseModel):
    name: str = Field(min_length=1)
    role: Optional[str] = Field(default=None, description="Bartender, patron, villain...")
    description: Optional[str] = None


class UpdateNpcRequest(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = None


class NpcInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    name: str
    role: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CreateQuestRequest(BaseModel):
    title: str = Field(min_length=1)
    summary: Optional[str] = Field(default=None, description="Goal, stakes or key info.")
    status: str = "PLANNED"


class UpdateQuestRequest(BaseModel):
    """Partial quest update.

    A status change is logged as a ``quest_update`` event when
    ``session_id`` names a session of the campaign.
    """

    title: Optional[str] = None
    summary: Optional[str] = None
    status: Optional[str] = None
    session_id: Optional[str] = None


class QuestInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    title: str
    summary: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
