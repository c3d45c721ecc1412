"""Conversions between pydantic schemas and ORM models."""

from tavern.models.user import UserModel
from tavern.schemas.user import User


def user_to_model(user: User) -> UserModel:
    return UserModel(
        user_id=user.user_id,
        email=user.email,
        password_hash=user.password_hash,
        display_name=user.display_name,
        wallet_address=user.wallet_address,
        created_at=user.created_at,
    )


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        email=model.email,
        password_hash=model.password_hash,
        display_name=model.display_name,
        wallet_address=model.wallet_address,
        created_at=model.created_at,
    )
