"""Invite join routes.

A join link ``/join/{token}`` previews the invite and lists the caller's
characters that can still be seated. Submitting a choice seats the character
and redirects to its player view. Rejections redirect back to the join link
with ``?error=invalid`` or ``?error=character``; the specific reason an
invite was refused is never disclosed.
"""

import logging
from typing import Optional
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse

from tavern.api.routes.auth import get_current_user, get_optional_user
from tavern.config import LOGIN_PATH
from tavern.core.dependencies import (
    CharacterManagerDep,
    InviteManagerDep,
    PartyManagerDep,
)
from tavern.core.exceptions import (
    CharacterNotFoundError,
    InvalidInviteError,
    PartyMemberNotFoundError,
)
from tavern.schemas.campaign import CampaignInfo, CampaignSummary
from tavern.schemas.character import CharacterInfo, CharacterSummary
from tavern.schemas.downtime import DowntimeInfo
from tavern.schemas.game_session import SessionEventInfo, SessionInfo
from tavern.schemas.invite import JoinCampaignRequest, JoinPreview
from tavern.schemas.party import PartyMemberInfo, PlayerView
from tavern.schemas.user import User
from tavern.utils.invite_manager import join_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Join"])

ERROR_INVALID = "invalid"
ERROR_CHARACTER = "character"


def login_redirect(token: str) -> RedirectResponse:
    callback = quote(join_path(token), safe="/")
    return RedirectResponse(
        f"{LOGIN_PATH}?callbackUrl={callback}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


def join_error_redirect(token: str, error: str) -> RedirectResponse:
    return RedirectResponse(
        f"{join_path(quote(token, safe=''))}?{urlencode({'error': error})}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


def play_path(campaign_id: str, character_id: str) -> str:
    return f"/play/{campaign_id}/{character_id}"


@router.get("/join/{token}", response_model=JoinPreview, summary="Preview invite")
def preview_invite(
    token: str,
    invite_manager: InviteManagerDep,
    character_manager: CharacterManagerDep,
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Show the invited campaign and the caller's joinable characters.

    Returns 404 for an unusable invite and redirects anonymous visitors to
    the login page with this link as the callback.
    """
    invite = invite_manager.validate(token)
    if invite is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(InvalidInviteError()),
        )
    if current_user is None:
        return login_redirect(token)

    characters = character_manager.list_available_for_campaign(
        current_user, invite.campaign_id
    )
    return JoinPreview(
        token=token,
        campaign=CampaignSummary.model_validate(invite.campaign),
        characters=[CharacterSummary.model_validate(c) for c in characters],
    )


@router.post("/join", summary="Join campaign with invite")
def join_campaign(
    req: JoinCampaignRequest,
    party_manager: PartyManagerDep,
    current_user: Optional[User] = Depends(get_optional_user),
) -> RedirectResponse:
    """Seat a character through an invite and redirect to its player view.

    Joining with a character that is already seated redirects to the same
    player view without consuming the invite again.
    """
    token = req.token.strip()
    character_id = req.character_id.strip()
    if current_user is None:
        return login_redirect(token)
    if not token:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    if not character_id:
        return join_error_redirect(token, ERROR_CHARACTER)

    try:
        result = party_manager.join_via_invite(token, character_id, current_user)
    except InvalidInviteError:
        return join_error_redirect(token, ERROR_INVALID)
    except CharacterNotFoundError:
        logger.info("Rejected join for character %s: not available to caller", character_id)
        return join_error_redirect(token, ERROR_CHARACTER)

    membership = result.membership
    return RedirectResponse(
        play_path(membership.campaign_id, membership.character_id),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get(
    "/play/{campaign_id}/{character_id}",
    response_model=PlayerView,
    summary="Player view of a seat",
)
def player_view(
    campaign_id: str,
    character_id: str,
    party_manager: PartyManagerDep,
    current_user: User = Depends(get_current_user),
) -> PlayerView:
    try:
        seat = party_manager.get_player_view(campaign_id, character_id, current_user)
    except PartyMemberNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Party member not found",
        )
    return PlayerView(
        campaign=CampaignInfo.model_validate(seat.campaign),
        character=CharacterInfo.model_validate(seat.character),
        party=[PartyMemberInfo.model_validate(m) for m in seat.party],
        ongoing_downtime=[DowntimeInfo.model_validate(d) for d in seat.ongoing_downtime],
        completed_downtime=[
            DowntimeInfo.model_validate(d) for d in seat.completed_downtime
        ],
        your_events=[SessionEventInfo.model_validate(e) for e in seat.your_events],
        campaign_events=[
            SessionEventInfo.model_validate(e) for e in seat.campaign_events
        ],
        recent_sessions=[SessionInfo.model_validate(s) for s in seat.recent_sessions],
    )
