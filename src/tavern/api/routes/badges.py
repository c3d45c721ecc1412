"""Badge minting routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import MintManagerDep
from tavern.core.exceptions import ChainError, UserNotFoundError, ValidationError
from tavern.schemas.chain import BadgeInfo, MintBadgeRequest
from tavern.schemas.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/badges", tags=["Badge"])


@router.post("/mint", response_model=BadgeInfo, summary="Mint badge")
def mint_badge(
    req: MintBadgeRequest,
    mint_manager: MintManagerDep,
    current_user: User = Depends(get_current_user),
) -> BadgeInfo:
    """Mint a badge to the caller, or to ``target_user_id`` when given.

    Raises:
        HTTPException: 404 for an unknown target, 400 when the target has no
            wallet, 502 when a configured chain call fails.
    """
    user_id = req.target_user_id or current_user.user_id
    try:
        badge = mint_manager.mint_badge(user_id, req.token_uri)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ChainError as e:
        logger.error("Badge mint error for user %s: %s", user_id, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Badge mint failed")
    return BadgeInfo.model_validate(badge)
