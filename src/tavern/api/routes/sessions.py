"""Session log routes.

This module handles HTTP endpoints for the play-session logs of campaigns
and the events recorded in them.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import GameSessionManagerDep
from tavern.core.exceptions import CampaignNotFoundError, SessionNotFoundError, ValidationError
from tavern.schemas.game_session import (
    CreateSessionRequest,
    RecordEventRequest,
    SessionEventInfo,
    SessionInfo,
)
from tavern.schemas.user import User

router = APIRouter(prefix="/api/sessions", tags=["Session"])


@router.get("", response_model=List[SessionInfo], summary="List own session logs")
def list_sessions(
    session_manager: GameSessionManagerDep,
    campaign_id: Optional[str] = None,
    current_user: User = Depends(get_current_user),
) -> List[SessionInfo]:
    models = session_manager.list_sessions(current_user, campaign_id=campaign_id)
    return [SessionInfo.model_validate(m) for m in models]


@router.post(
    "",
    response_model=SessionInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Log a session",
)
def create_session(
    req: CreateSessionRequest,
    session_manager: GameSessionManagerDep,
    current_user: User = Depends(get_current_user),
) -> SessionInfo:
    """Log a session against a campaign.

    Raises:
        HTTPException: 400 on a blank title, 404 if the campaign is not the
            caller's.
    """
    try:
        model = session_manager.create_session(
            current_user,
            req.campaign_id.strip(),
            req.title,
            session_date=req.session_date,
            notes=req.notes,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CampaignNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Campaign not found for user.",
        )
    return SessionInfo.model_validate(model)


@router.get("/{session_id}", response_model=SessionInfo, summary="Get session log")
def get_session(
    session_id: str,
    session_manager: GameSessionManagerDep,
    current_user: User = Depends(get_current_user),
) -> SessionInfo:
    try:
        return SessionInfo.model_validate(
            session_manager.read_session(session_id, current_user)
        )
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{session_id}", summary="Delete session log")
def delete_session(
    session_id: str,
    session_manager: GameSessionManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        session_manager.delete_session(session_id, current_user)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": "Session deleted successfully"}


@router.post(
    "/{session_id}/events",
    response_model=SessionEventInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Record a session event",
)
def record_event(
    session_id: str,
    req: RecordEventRequest,
    session_manager: GameSessionManagerDep,
    current_user: User = Depends(get_current_user),
) -> SessionEventInfo:
    """Log an event (HP change, loot, note, ...) in a session.

    Only the owner of the session's campaign may record events.

    Raises:
        HTTPException: 400 on a blank type or a character outside the party,
            404 if the session is not the caller's to write.
    """
    character_id = req.character_id.strip() if req.character_id else None
    try:
        model = session_manager.record_event(
            session_id,
            current_user,
            req.type,
            character_id=character_id or None,
            data=req.data,
            message=req.message,
        )
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return SessionEventInfo.model_validate(model)


@router.get(
    "/{session_id}/events",
    response_model=List[SessionEventInfo],
    summary="List session events",
)
def list_events(
    session_id: str,
    session_manager: GameSessionManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[SessionEventInfo]:
    try:
        models = session_manager.list_events(session_id, current_user)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [SessionEventInfo.model_validate(m) for m in models]
