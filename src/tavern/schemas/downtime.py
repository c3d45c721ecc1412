from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateDowntimeRequest(BaseModel):
    character_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    goal: Optional[str] = Field(default=None, description="Free-form target, e.g. '10 days'.")
    session_id: Optional[str] = Field(
        default=None,
        description="Session to log a downtime event in.",
    )


class AdvanceDowntimeRequest(BaseModel):
    amount: int = Field(default=1, ge=1)
    session_id: Optional[str] = None


class FinishDowntimeRequest(BaseModel):
    session_id: Optional[str] = None


class DowntimeInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    character_id: str
    title: str
    description: Optional[str] = None
    goal: Optional[str] = None
    progress: int
    status: str
    created_at: datetime
    updated_at: datetime
