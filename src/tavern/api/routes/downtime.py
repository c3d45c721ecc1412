"""Downtime activity routes.

The campaign owner starts, advances and closes the downtime activities of
seated characters. Each change may name a session of the campaign, in which
case it is also logged there as a session event.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import DowntimeManagerDep
from tavern.core.exceptions import (
    CampaignNotFoundError,
    ConflictError,
    DowntimeNotFoundError,
    SessionNotFoundError,
    ValidationError,
)
from tavern.schemas.downtime import (
    AdvanceDowntimeRequest,
    CreateDowntimeRequest,
    DowntimeInfo,
    FinishDowntimeRequest,
)
from tavern.schemas.user import User

router = APIRouter(prefix="/api/campaigns/{campaign_id}/downtime", tags=["Downtime"])


def _to_http(error: Exception) -> HTTPException:
    if isinstance(error, CampaignNotFoundError):
        return HTTPException(status_code=404, detail="Campaign not found")
    if isinstance(error, (DowntimeNotFoundError, SessionNotFoundError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


_HANDLED = (
    CampaignNotFoundError,
    DowntimeNotFoundError,
    SessionNotFoundError,
    ConflictError,
    ValidationError,
)


@router.get("", response_model=List[DowntimeInfo], summary="List downtime activities")
def list_downtime(
    campaign_id: str,
    downtime_manager: DowntimeManagerDep,
    character_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
) -> List[DowntimeInfo]:
    try:
        models = downtime_manager.list_activities(
            campaign_id, current_user, character_id=character_id
        )
    except _HANDLED as e:
        raise _to_http(e)
    return [DowntimeInfo.model_validate(m) for m in models]


@router.post(
    "",
    response_model=DowntimeInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Start a downtime activity",
)
def create_downtime(
    campaign_id: str,
    req: CreateDowntimeRequest,
    downtime_manager: DowntimeManagerDep,
    current_user: User = Depends(get_current_user),
) -> DowntimeInfo:
    """Start a downtime activity for a character seated in the campaign.

    Raises:
        HTTPException: 400 if the character is not seated, 404 if the
            campaign or session is not the caller's.
    """
    try:
        model = downtime_manager.create_activity(
            campaign_id,
            current_user,
            character_id=req.character_id.strip(),
            title=req.title,
            description=req.description,
            goal=req.goal,
            session_id=req.session_id,
        )
    except _HANDLED as e:
        raise _to_http(e)
    return DowntimeInfo.model_validate(model)


@router.post(
    "/{activity_id}/advance",
    response_model=DowntimeInfo,
    summary="Advance a downtime activity",
)
def advance_downtime(
    campaign_id: str,
    activity_id: str,
    downtime_manager: DowntimeManagerDep,
    req: Optional[AdvanceDowntimeRequest] = None,
    current_user: User = Depends(get_current_user),
) -> DowntimeInfo:
    """Add progress (1 by default) to an ongoing activity."""
    req = req or AdvanceDowntimeRequest()
    try:
        model = downtime_manager.advance_activity(
            campaign_id,
            activity_id,
            current_user,
            amount=req.amount,
            session_id=req.session_id,
        )
    except _HANDLED as e:
        raise _to_http(e)
    return DowntimeInfo.model_validate(model)


@router.post(
    "/{activity_id}/complete",
    response_model=DowntimeInfo,
    summary="Complete a downtime activity",
)
def complete_downtime(
    campaign_id: str,
    activity_id: str,
    downtime_manager: DowntimeManagerDep,
    req: Optional[FinishDowntimeRequest] = None,
    current_user: User = Depends(get_current_user),
) -> DowntimeInfo:
    req = req or FinishDowntimeRequest()
    try:
        model = downtime_manager.complete_activity(
            campaign_id, activity_id, current_user, session_id=req.session_id
        )
    except _HANDLED as e:
        raise _to_http(e)
    return DowntimeInfo.model_validate(model)


@router.post(
    "/{activity_id}/cancel",
    response_model=DowntimeInfo,
    summary="Cancel a downtime activity",
)
def cancel_downtime(
    campaign_id: str,
    activity_id: str,
    downtime_manager: DowntimeManagerDep,
    req: Optional[FinishDowntimeRequest] = None,
    current_user: User = Depends(get_current_user),
) -> DowntimeInfo:
    req = req or FinishDowntimeRequest()
    try:
        model = downtime_manager.cancel_activity(
            campaign_id, activity_id, current_user, session_id=req.session_id
        )
    except _HANDLED as e:
        raise _to_http(e)
    return DowntimeInfo.model_validate(model)
