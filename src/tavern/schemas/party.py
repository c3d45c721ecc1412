from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from tavern.schemas.campaign import CampaignInfo
from tavern.schemas.character import CharacterInfo, CharacterSummary
from tavern.schemas.downtime import DowntimeInfo
from tavern.schemas.game_session import SessionEventInfo, SessionInfo


class AddPartyMemberRequest(BaseModel):
    character_id: str


class PartyMemberInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    campaign_id: str
    character_id: str
    owner_email: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime
    character: Optional[CharacterSummary] = None


class AddPartyMemberResponse(BaseModel):
    party_member: PartyMemberInfo
    already_in_party: bool


class PlayerView(BaseModel):
    """Everything a player sees for one seat at the table."""

    campaign: CampaignInfo
    character: CharacterInfo
    party: List[PartyMemberInfo]
    ongoing_downtime: List[DowntimeInfo] = []
    completed_downtime: List[DowntimeInfo] = []
    your_events: List[SessionEventInfo] = []
    campaign_events: List[SessionEventInfo] = []
    recent_sessions: List[SessionInfo] = []
