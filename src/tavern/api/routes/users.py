"""User profile routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from tavern.api.routes.auth import get_current_user
from tavern.core.dependencies import UserManagerDep
from tavern.core.exceptions import UserNotFoundError, ValidationError
from tavern.schemas.user import CurrentUserResponse, UpdateWalletRequest, User

router = APIRouter(prefix="/api/users", tags=["User"])


@router.post("/wallet", response_model=CurrentUserResponse, summary="Link wallet")
def update_wallet(
    req: UpdateWalletRequest,
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    """Store the caller's wallet address for passport and badge mints."""
    address = req.address.strip()
    if not address:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing address",
        )
    try:
        user = user_manager.update_wallet(current_user.user_id, address)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CurrentUserResponse(user=user.public_dict())
