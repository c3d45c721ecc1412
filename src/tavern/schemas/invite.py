"""Campaign invite schema definitions."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tavern.schemas.campaign import CampaignSummary
from tavern.schemas.character import CharacterSummary


class CreateInviteRequest(BaseModel):
    expires_at: Optional[datetime] = Field(
        default=None,
        description="Absolute expiry; naive values are read as UTC.",
    )
    expires_in_days: Optional[int] = Field(default=None, ge=1, le=365)
    max_uses: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of joins allowed; unlimited when omitted.",
    )

    @model_validator(mode="after")
    def check_single_expiry(self):
        if self.expires_at is not None and self.expires_in_days is not None:
            raise ValueError("Give either expires_at or expires_in_days, not both.")
        return self


class InviteInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    token: str
    join_path: str
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = None
    used_count: int
    is_revoked: bool
    status: str = Field(description="active, revoked, expired or exhausted")
    created_at: datetime


class InviteListResponse(BaseModel):
    invites: List[InviteInfo]


class JoinCampaignRequest(BaseModel):
    token: str = ""
    character_id: str = ""


class JoinPreview(BaseModel):
    """What a visitor of a join link sees before picking a character."""

    token: str
    campaign: CampaignSummary
    characters: List[CharacterSummary] = Field(
        description="Caller's characters that can still join, newest first."
    )
