"""NPC and quest routes.

Campaign-owner tools nested under a campaign. Any other caller gets 404 as
if the campaign did not exist.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import GmToolsManagerDep
from tavern.core.exceptions import (
    CampaignNotFoundError,
    NpcNotFoundError,
    QuestNotFoundError,
    SessionNotFoundError,
    ValidationError,
)
from tavern.schemas.gm_tools import (
    CreateNpcRequest,
    CreateQuestRequest,
    NpcInfo,
    QuestInfo,
    UpdateNpcRequest,
    UpdateQuestRequest,
)
from tavern.schemas.user import User

router = APIRouter(prefix="/api/campaigns/{campaign_id}", tags=["GM Tools"])


def _campaign_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Campaign not found",
    )


@router.get("/npcs", response_model=List[NpcInfo], summary="List NPCs")
def list_npcs(
    campaign_id: str,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[NpcInfo]:
    try:
        npcs = gm_tools.list_npcs(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()
    return [NpcInfo.model_validate(n) for n in npcs]


@router.post(
    "/npcs",
    response_model=NpcInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Add an NPC",
)
def create_npc(
    campaign_id: str,
    req: CreateNpcRequest,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> NpcInfo:
    try:
        npc = gm_tools.create_npc(
            campaign_id,
            current_user,
            req.name,
            role=req.role,
            description=req.description,
        )
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return NpcInfo.model_validate(npc)


@router.patch("/npcs/{npc_id}", response_model=NpcInfo, summary="Update an NPC")
def update_npc(
    campaign_id: str,
    npc_id: str,
    req: UpdateNpcRequest,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> NpcInfo:
    try:
        npc = gm_tools.update_npc(
            campaign_id,
            npc_id,
            current_user,
            name=req.name,
            role=req.role,
            description=req.description,
        )
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except NpcNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return NpcInfo.model_validate(npc)


@router.delete("/npcs/{npc_id}", summary="Delete an NPC")
def delete_npc(
    campaign_id: str,
    npc_id: str,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        gm_tools.delete_npc(campaign_id, npc_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except NpcNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": "NPC deleted successfully"}


@router.get("/quests", response_model=List[QuestInfo], summary="List quests")
def list_quests(
    campaign_id: str,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> List[QuestInfo]:
    try:
        quests = gm_tools.list_quests(campaign_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()
    return [QuestInfo.model_validate(q) for q in quests]


@router.post(
    "/quests",
    response_model=QuestInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Add a quest",
)
def create_quest(
    campaign_id: str,
    req: CreateQuestRequest,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuestInfo:
    try:
        quest = gm_tools.create_quest(
            campaign_id,
            current_user,
            req.title,
            summary=req.summary,
            status=req.status,
        )
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return QuestInfo.model_validate(quest)


@router.patch("/quests/{quest_id}", response_model=QuestInfo, summary="Update a quest")
def update_quest(
    campaign_id: str,
    quest_id: str,
    req: UpdateQuestRequest,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> QuestInfo:
    """Edit a quest or move it along (PLANNED, ACTIVE, COMPLETED, FAILED).

    Raises:
        HTTPException: 400 on an unknown status, 404 if the quest or the
            named session is not in the caller's campaign.
    """
    try:
        quest = gm_tools.update_quest(
            campaign_id,
            quest_id,
            current_user,
            title=req.title,
            summary=req.summary,
            status=req.status,
            session_id=req.session_id,
        )
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except (QuestNotFoundError, SessionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return QuestInfo.model_validate(quest)


@router.delete("/quests/{quest_id}", summary="Delete a quest")
def delete_quest(
    campaign_id: str,
    quest_id: str,
    gm_tools: GmToolsManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        gm_tools.delete_quest(campaign_id, quest_id, current_user)
    except CampaignNotFoundError:
        raise _campaign_not_found()
    except QuestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": "Quest deleted successfully"}
