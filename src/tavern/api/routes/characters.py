"""Character routes.

This module handles HTTP endpoints for characters, their tracked game state
and passport minting.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import CharacterManagerDep, MintManagerDep
from tavern.core.exceptions import (
    ChainError,
    CharacterNotFoundError,
    ConflictError,
    ValidationError,
)
from tavern.schemas.chain import MintPassportRequest, MintPassportResponse
from tavern.schemas.character import (
    CharacterInfo,
    ConfirmationRequest,
    CreateCharacterRequest,
    UpdateCharacterRequest,
    UpdateCharacterStateRequest,
)
from tavern.schemas.user import User

router = APIRouter(prefix="/api/characters", tags=["Character"])

_NOT_FOUND_DETAIL = "Character not found"


@router.post(
    "",
    response_model=CharacterInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create character",
)
def create_character(
    req: CreateCharacterRequest,
    character_manager: CharacterManagerDep,
    current_user: User = Depends(get_current_user),
) -> CharacterInfo:
    try:
        model = character_manager.create_character(
            current_user,
            req.name,
            system=req.system,
            class_name=req.class_name,
            level=req.level,
            hp_max=req.hp_max,
            hp_current=req.hp_current,
            notes=req.notes,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CharacterInfo.model_validate(model)


@router.get("", response_model=List[CharacterInfo], summary="List own characters")
def list_characters(
    character_manager: CharacterManagerDep,
    include_archived: bool = False,
    current_user: User = Depends(get_current_user),
) -> List[CharacterInfo]:
    models = character_manager.list_characters(
        current_user, include_archived=include_archived
    )
    return [CharacterInfo.model_validate(m) for m in models]


@router.get("/{character_id}", response_model=CharacterInfo, summary="Get character")
def get_character(
    character_id: str,
    character_manager: CharacterManagerDep,
    current_user: User = Depends(get_current_user),
) -> CharacterInfo:
    try:
        model = character_manager.get_owned_character(character_id, current_user)
    except CharacterNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)
    return CharacterInfo.model_validate(model)


@router.patch("/{character_id}", response_model=CharacterInfo, summary="Update character")
def update_character(
    character_id: str,
    req: UpdateCharacterRequest,
    character_manager: CharacterManagerDep,
    current_user: User = Depends(get_current_user),
) -> CharacterInfo:
    try:
        model = character_manager.update_character(
            character_id,
            current_user,
            name=req.name,
            system=req.system,
            class_name=req.class_name,
            level=req.level,
            notes=req.notes,
        )
    except CharacterNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)
    return CharacterInfo.model_validate(model)


@router.patch(
    "/{character_id}/state",
    response_model=CharacterInfo,
    summary="Update HP, XP and conditions",
)
def update_character_state(
    character_id: str,
    req: UpdateCharacterStateRequest,
    character_manager: CharacterManagerDep,
    current_user: User = Depends(get_current_user),
) -> CharacterInfo:
    try:
        model = character_manager.update_state(
            character_id,
            current_user,
            hp_current=req.hp_current,
            hp_max=req.hp_max,
            xp=req.xp,
            award_xp=req.award_xp,
            conditions=req.conditions,
        )
    except CharacterNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return CharacterInfo.model_validate(model)


@router.post(
    "/{character_id}/archive",
    response_model=CharacterInfo,
    summary="Archive character",
)
def archive_character(
    character_id: str,
    req: ConfirmationRequest,
    character_manager: CharacterManagerDep,
    current_user: User = Depends(get_current_user),
) -> CharacterInfo:
    try:
        model = character_manager.archive_character(
            character_id, current_user, req.confirmation
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CharacterNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)
    return CharacterInfo.model_validate(model)


@router.post("/{character_id}/delete", summary="Delete character")
def delete_character(
    character_id: str,
    req: ConfirmationRequest,
    character_manager: CharacterManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    """Delete a character permanently.

    The confirmation must repeat the character's name, and a character that
    still sits in a party cannot be deleted (409).
    """
    try:
        character_manager.delete_character(character_id, current_user, req.confirmation)
    except CharacterNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return {"success": True, "message": "Character deleted successfully"}


@router.post(
    "/{character_id}/mint",
    response_model=MintPassportResponse,
    summary="Mint character passport",
)
def mint_passport(
    character_id: str,
    req: MintPassportRequest,
    character_manager: CharacterManagerDep,
    mint_manager: MintManagerDep,
    current_user: User = Depends(get_current_user),
) -> MintPassportResponse:
    """Mint a passport token for a character.

    Without chain configuration the result is simulated; check
    ``result.simulated`` before showing it as on-chain.
    """
    try:
        character = character_manager.get_owned_character(
            character_id, current_user, include_archived=False
        )
    except CharacterNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND_DETAIL)

    try:
        result = mint_manager.mint_passport(
            character, req.to or current_user.wallet_address, req.token_uri
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ChainError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return MintPassportResponse(character_id=character_id, result=result)
