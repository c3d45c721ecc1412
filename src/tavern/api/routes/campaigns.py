"""Campaign management routes.

Campaign CRUD plus the owner-only invite administration and party roster
endpoints nested under a campaign.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import (
    CampaignManagerDep,
    InviteManagerDep,
    PartyManagerDep,
)
from tavern.core.exceptions import (
    CampaignNotFoundError,
    CharacterNotFoundError,
    InviteNotFoundError,
    PartyMemberNotFoundError,
    ValidationError,
)
from tavern.models.campaign_invite import CampaignInviteModel
from tavern.schemas.campaign import (
    CampaignInfo,
    CreateCampaignRequest,
    UpdateCampaignRequest,
)
from tavern.schemas.invite import CreateInviteRequest, InviteInfo, InviteListResponse
from tavern.schemas.party import (
    AddPartyMemberRequest,
    AddPartyMemberResponse,
    PartyMemberInfo,
)
from tavern.schemas.user import User
from tavern.utils.invite_manager import invite_status, join_path

router = APIRouter(prefix="/api/campaigns", tags=["Campaign"])


def _build_invite_info(model: CampaignInviteModel) -> InviteInfo:
    return InviteInfo(
        id=model.id,
        campaign_id=model.campaign_id,
        token=model.token,
        join_path=join_path(model.token),
        expires_at=model.expires_at,
        max_uses=model.max_uses,
        used_count=model.used_count,
        is_revoked=model.is_revoked,
        status=invite_status(model),
        created_at=model.created_at,
    )


def _campaign_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Campaign not found",
    )


@router.post(
    "",
    response_model=CampaignInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create campaign",
)
def create_campaign(
    req: CreateCampaignRequest,
    campaign_manager: CampaignManagerDep,
    current_user: User = Depends(get_current_user),
) -> CampaignInfo:
    try:
        model = campaign_manager.create_campaign(
            current_user, req.name, description=req.description, gm_name=req.gm_name
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CampaignInfo.model_validate(model)


@router.get("", response_model=List[CampaignInfo], summary="List own campaigns")
def list_campaigns(
    campaign_manager: CampaignManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[CampaignInfo]:
    models = campaign_manager.list_campaigns_for_user(current_user)
    return [CampaignInfo.model_validate(m) for m in models]


@router.get("/{campaign_id}", response_model=CampaignInfo, summary="Get campaign")
def get_campaign(
    campaign_id: str,
    campaign_manager: CampaignManagerDep,
    current_user: User = Depends(get_current_user),
) -> CampaignInfo:
    try:
        model = campaign_manager.get_owned_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()
    return CampaignInfo.model_validate(model)


@router.patch("/{campaign_id}", response_model=CampaignInfo, summary="Update campaign")
def update_campaign(
    campaign_id: str,
    req: UpdateCampaignRequest,
    campaign_manager: CampaignManagerDep,
    current_user: User = Depends(get_current_user),
) -> CampaignInfo:
    try:
        model = campaign_manager.update_campaign(
            campaign_id,
            current_user,
            name=req.name,
            description=req.description,
            gm_name=req.gm_name,
        )
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CampaignInfo.model_validate(model)


@router.delete("/{campaign_id}", summary="Delete campaign")
def delete_campaign(
    campaign_id: str,
    campaign_manager: CampaignManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        campaign_manager.delete_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()
    return {"success": True, "message": "Campaign deleted successfully"}


@router.post(
    "/{campaign_id}/invites",
    response_model=InviteInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create invite",
)
def create_invite(
    campaign_id: str,
    req: CreateInviteRequest,
    campaign_manager: CampaignManagerDep,
    invite_manager: InviteManagerDep,
    current_user: User = Depends(get_current_user),
) -> InviteInfo:
    """Create an invite link for a campaign.

    Only the campaign owner may create invites; anyone else gets 404.
    """
    try:
        campaign = campaign_manager.get_owned_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()

    try:
        model = invite_manager.create_invite(
            campaign,
            current_user,
            expires_at=req.expires_at,
            expires_in_days=req.expires_in_days,
            max_uses=req.max_uses,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _build_invite_info(model)


@router.get(
    "/{campaign_id}/invites",
    response_model=InviteListResponse,
    summary="List invites",
)
def list_invites(
    campaign_id: str,
    campaign_manager: CampaignManagerDep,
    invite_manager: InviteManagerDep,
    current_user: User = Depends(get_current_user),
) -> InviteListResponse:
    try:
        campaign_manager.get_owned_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()

    models = invite_manager.list_invites(campaign_id)
    return InviteListResponse(invites=[_build_invite_info(m) for m in models])


@router.post(
    "/{campaign_id}/invites/{invite_id}/revoke",
    response_model=InviteInfo,
    summary="Revoke invite",
)
def revoke_invite(
    campaign_id: str,
    invite_id: str,
    campaign_manager: CampaignManagerDep,
    invite_manager: InviteManagerDep,
    current_user: User = Depends(get_current_user),
) -> InviteInfo:
    try:
        campaign_manager.get_owned_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()

    try:
        model = invite_manager.revoke_invite(campaign_id, invite_id)
    except InviteNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invite not found for this campaign.",
        )
    return _build_invite_info(model)


@router.get(
    "/{campaign_id}/party",
    response_model=List[PartyMemberInfo],
    summary="List party",
)
def list_party(
    campaign_id: str,
    campaign_manager: CampaignManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[PartyMemberInfo]:
    try:
        campaign_manager.get_owned_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()

    members = campaign_manager.list_party(campaign_id)
    return [PartyMemberInfo.model_validate(m) for m in members]


@router.post(
    "/{campaign_id}/party",
    response_model=AddPartyMemberResponse,
    summary="Add own character to party",
)
def add_party_member(
    campaign_id: str,
    req: AddPartyMemberRequest,
    campaign_manager: CampaignManagerDep,
    party_manager: PartyManagerDep,
    current_user: User = Depends(get_current_user),
) -> AddPartyMemberResponse:
    """Seat one of the owner's characters without an invite.

    Returns the existing seat with ``already_in_party`` set when the
    character is already a member.
    """
    try:
        campaign = campaign_manager.get_owned_campaign(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()

    character_id = req.character_id.strip()
    if not character_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="character_id is required.",
        )
    try:
        result = party_manager.add_member(campaign, character_id, current_user)
    except CharacterNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Character not found",
        )
    return AddPartyMemberResponse(
        party_member=PartyMemberInfo.model_validate(result.membership),
        already_in_party=result.already_member,
    )


@router.delete(
    "/{campaign_id}/party/{character_id}",
    summary="Remove character from party",
)
def remove_party_member(
    campaign_id: str,
    character_id: str,
    campaign_manager: CampaignManagerDep,
    party_manager: PartyManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    """Leave a party, or kick a member as the campaign owner."""
    try:
        campaign = campaign_manager.get_campaign(campaign_id)
        party_manager.remove_member(campaign, character_id, current_user)
    except (CampaignNotFoundError, PartyMemberNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Party member not found",
        )
    return {"success": True, "message": "Left party successfully"}
