"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Managers are built per request around the request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from tavern.core.database import get_db
from tavern.utils import campaign_manager
from tavern.utils import chain_service
from tavern.utils import character_manager
from tavern.utils import downtime_manager
from tavern.utils import game_session_manager
from tavern.utils import gm_tools_manager
from tavern.utils import invite_manager
from tavern.utils import mint_manager
from tavern.utils import party_manager
from tavern.utils import user_manager

# Singleton for ChainMinter (reads chain config once)
_chain_minter_instance: chain_service.ChainMinter = None


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_campaign_manager(
    db: Session = Depends(get_db),
) -> campaign_manager.CampaignManager:
    """Get CampaignManager instance with request-scoped DB session."""
    return campaign_manager.CampaignManager(db)


def get_character_manager(
    db: Session = Depends(get_db),
) -> character_manager.CharacterManager:
    """Get CharacterManager instance with request-scoped DB session."""
    return character_manager.CharacterManager(db)


def get_invite_manager(db: Session = Depends(get_db)) -> invite_manager.InviteManager:
    """Get InviteManager instance with request-scoped DB session."""
    return invite_manager.InviteManager(db)


def get_party_manager(db: Session = Depends(get_db)) -> party_manager.PartyManager:
    """Get PartyManager instance with request-scoped DB session."""
    return party_manager.PartyManager(db)


def get_game_session_manager(
    db: Session = Depends(get_db),
) -> game_session_manager.GameSessionManager:
    """Get GameSessionManager instance with request-scoped DB session."""
    return game_session_manager.GameSessionManager(db)


def get_downtime_manager(
    db: Session = Depends(get_db),
) -> downtime_manager.DowntimeManager:
    """Get DowntimeManager instance with request-scoped DB session."""
    return downtime_manager.DowntimeManager(db)


def get_gm_tools_manager(
    db: Session = Depends(get_db),
) -> gm_tools_manager.GmToolsManager:
    """Get GmToolsManager instance with request-scoped DB session."""
    return gm_tools_manager.GmToolsManager(db)


def get_chain_minter() -> chain_service.ChainMinter:
    """Get ChainMinter singleton instance.

    Returns:
        ChainMinter instance (singleton).
    """
    global _chain_minter_instance
    if _chain_minter_instance is None:
        _chain_minter_instance = chain_service.ChainMinter()
    return _chain_minter_instance


def get_mint_manager(
    db: Session = Depends(get_db),
    minter: chain_service.ChainMinter = Depends(get_chain_minter),
) -> mint_manager.MintManager:
    """Get MintManager bound to the request session and the chain minter."""
    return mint_manager.MintManager(db, minter)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
CampaignManagerDep = Annotated[
    campaign_manager.CampaignManager, Depends(get_campaign_manager)
]
CharacterManagerDep = Annotated[
    character_manager.CharacterManager, Depends(get_character_manager)
]
InviteManagerDep = Annotated[
    invite_manager.InviteManager, Depends(get_invite_manager)
]
PartyManagerDep = Annotated[
    party_manager.PartyManager, Depends(get_party_manager)
]
GameSessionManagerDep = Annotated[
    game_session_manager.GameSessionManager, Depends(get_game_session_manager)
]
DowntimeManagerDep = Annotated[
    downtime_manager.DowntimeManager, Depends(get_downtime_manager)
]
GmToolsManagerDep = Annotated[
    gm_tools_manager.GmToolsManager, Depends(get_gm_tools_manager)
]
MintManagerDep = Annotated[
    mint_manager.MintManager, Depends(get_mint_manager)
]
