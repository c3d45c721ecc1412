from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tavern.utils.session_events import humanize_event


class CreateSessionRequest(BaseModel):
    title: str = Field(min_length=1)
    campaign_id: str = Field(min_length=1)
    session_date: Optional[datetime] = None
    notes: Optional[str] = None


class SessionInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    title: str
    session_date: Optional[datetime] = None
    notes: Optional[str] = None
    owner_email: Optional[str] = None
    created_at: datetime


class RecordEventRequest(BaseModel):
    type: str = Field(min_length=1, description="Event type, e.g. 'hp_change'.")
    character_id: Optional[str] = Field(
        default=None,
        description="Seated character the event is about; omit for campaign-wide events.",
    )
    data: Dict[str, Any] = Field(default_factory=dict)
    message: Optional[str] = None


class SessionEventInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    character_id: Optional[str] = None
    type: str
    data: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    created_at: datetime
    text: str = ""

    @model_validator(mode="after")
    def render_text(self) -> "SessionEventInfo":
        self.text = humanize_event(self.type, self.data, self.message)
        return self
