from .base import Base
from .user import UserModel
from .password_reset_token import PasswordResetTokenModel
from .campaign import CampaignModel
from .character import CharacterModel
from .campaign_invite import CampaignInviteModel
from .party_member import PartyMemberModel
from .game_session import GameSessionModel
from .session_event import SessionEventModel
from .downtime_activity import DowntimeActivityModel
from .npc import NpcModel
from .quest import QuestModel
from .badge import BadgeModel

__all__ = [
    "Base",
    "UserModel",
    "PasswordResetTokenModel",
    "CampaignModel",
    "CharacterModel",
    "CampaignInviteModel",
    "PartyMemberModel",
    "GameSessionModel",
    "SessionEventModel",
    "DowntimeActivityModel",
    "NpcModel",
    "QuestModel",
    "BadgeModel",
]
