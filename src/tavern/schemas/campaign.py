from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateCampaignRequest(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    gm_name: Optional[str] = None


class UpdateCampaignRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    gm_name: Optional[str] = None


class CampaignSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None


class CampaignInfo(CampaignSummary):
    gm_name: Optional[str] = None
    owner_email: Optional[str] = None
    created_by_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
