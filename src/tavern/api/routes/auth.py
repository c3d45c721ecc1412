"""Authentication routes.

This module handles HTTP endpoints for user authentication, registration and
password resets, and provides the identity dependencies used by every other
router.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from tavern.config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from tavern.core.dependencies import UserManagerDep
from tavern.core.exceptions import ConflictError, ValidationError
from tavern.schemas.user import (
    CurrentUserResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Missing credentials are handled here so join links can redirect instead
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(pytz.utc) + expires_delta})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def get_optional_user(
    user_manager: UserManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[User]:
    """Resolve the acting identity, or None when not authenticated.

    A missing, malformed or expired token, or a token for a deleted user,
    all count as anonymous.
    """
    if credentials is None:
        return None
    try:
        payload = jwt.decode(
            credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM]
        )
    except JWTError:
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    return user_manager.get_user_by_id(user_id)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Get current authenticated user.

    Raises:
        HTTPException: 401 if the request is not authenticated.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register")
def register(req: RegisterRequest, user_manager: UserManagerDep) -> dict:
    """Register a new user.

    Args:
        req: Registration request with email, password and display name.
        user_manager: Injected UserManager instance.

    Returns:
        Dictionary with success message and user_id.

    Raises:
        HTTPException: 409 if the email is already registered.
    """
    try:
        user = user_manager.create_user(
            email=req.email,
            password=req.password,
            display_name=req.display_name,
        )
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return {
        "success": True,
        "message": "User registered successfully",
        "user_id": user.user_id,
    }


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> LoginResponse:
    """Login with email and password.

    Returns:
        LoginResponse with user information and JWT token.

    Raises:
        HTTPException: 401 if the credentials do not match.
    """
    user = user_manager.authenticate(req.email, req.password)
    if user is None:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token = create_access_token(data={"sub": user.user_id})
    return LoginResponse(user=user.public_dict(), token=token)


@router.post("/logout", summary="Log out")
def logout() -> dict:
    """Logout endpoint.

    Tokens are stateless JWTs, so logout is handled client-side by dropping
    the token. This endpoint exists for API consistency.
    """
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    return CurrentUserResponse(user=current_user.public_dict())


@router.post("/forgot-password", summary="Request a password reset link")
def forgot_password(req: ForgotPasswordRequest, user_manager: UserManagerDep) -> dict:
    """Send a reset link to the address if it belongs to an account.

    The response is the same whether or not the email is registered.
    """
    user_manager.request_password_reset(req.email)
    return {
        "success": True,
        "message": "If that email is registered, a reset link has been sent.",
    }


@router.post("/reset-password/{token}", summary="Reset password")
def reset_password(
    token: str, req: ResetPasswordRequest, user_manager: UserManagerDep
) -> dict:
    """Set a new password with a token from a reset link.

    Raises:
        HTTPException: 400 if the link is unknown or expired.
    """
    try:
        user_manager.reset_password(token, req.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "message": "Password updated. You can log in now."}
