"""User management utilities.

This module provides user management functionality including user storage,
password hashing, lookups, password resets and wallet linking.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tavern.config import APP_URL, BCRYPT_ROUNDS, PASSWORD_RESET_EXPIRE_MINUTES
from tavern.core.exceptions import ConflictError, UserNotFoundError, ValidationError
from tavern.models.password_reset_token import PasswordResetTokenModel
from tavern.models.user import UserModel
from tavern.schemas.user import User
from tavern.utils.converters import model_to_user, user_to_model
from tavern.utils.invite_manager import as_utc

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session, bcrypt_rounds: int = BCRYPT_ROUNDS):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
            bcrypt_rounds: Cost factor for new password hashes.
        """
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                _password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def create_user(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> User:
        """Create a new user.

        Args:
            email: Normalized login email.
            password: Plain text password.
            display_name: Optional display name.

        Returns:
            Created User object.

        Raises:
            ConflictError: If the email is already registered.
        """
        if self.db.query(UserModel).filter(UserModel.email == email).first():
            raise ConflictError(f"Email '{email}' is already registered")

        user = User(
            email=email,
            password_hash=self.hash_password(password),
            display_name=display_name,
        )

        # Two concurrent registrations can both pass the check above; the
        # unique constraint on email catches the loser.
        try:
            self.db.add(user_to_model(user))
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Email '{email}' is already registered") from e

        logger.info("Created user: %s", user.user_id)
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        model = self.db.query(UserModel).filter(UserModel.email == email).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, otherwise None."""
        user = self.get_user_by_email(email)
        if user is None:
            return None
        if not self.verify_password(password, user.password_hash):
            return None
        return user

    def update_wallet(self, user_id: str, address: str) -> User:
        """Link a wallet address to a user.

        Args:
            user_id: User to update.
            address: Wallet address; stored in checksum form.

        Raises:
            UserNotFoundError: If the user does not exist.
            ValidationError: If the address is not a valid wallet address.
        """
        from web3 import Web3

        if not Web3.is_address(address):
            raise ValidationError(f"Invalid wallet address: {address}")

        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not model:
            raise UserNotFoundError(user_id)
        model.wallet_address = Web3.to_checksum_address(address)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Linked wallet for user %s", user_id)
        return model_to_user(model)

    def request_password_reset(self, email: str) -> Optional[str]:
        """Issue a reset token and send the reset link.

        Unknown emails are ignored; the caller answers the same either way.

        Returns:
            The new token, or None when no user has that email.
        """
        model = self.db.query(UserModel).filter(UserModel.email == email).first()
        if model is None:
            logger.info("Password reset requested for unknown email")
            return None

        token = secrets.token_urlsafe(32)
        self.db.add(
            PasswordResetTokenModel(
                user_id=model.user_id,
                token=token,
                expires_at=datetime.now(pytz.utc)
                + timedelta(minutes=PASSWORD_RESET_EXPIRE_MINUTES),
            )
        )
        self.db.commit()
        send_password_reset_email(model.email, f"{APP_URL}/reset-password/{token}")
        logger.info("Issued password reset token for user %s", model.user_id)
        return token

    def reset_password(self, token: str, password: str) -> User:
        """Set a new password using a reset token.

        All outstanding reset tokens of the user are spent.

        Raises:
            ValidationError: If the token is unknown or expired.
        """
        record = (
            self.db.query(PasswordResetTokenModel)
            .filter(PasswordResetTokenModel.token == token)
            .first()
        )
        if record is None or as_utc(record.expires_at) <= datetime.now(pytz.utc):
            raise ValidationError("Reset link expired.")

        model = self.db.query(UserModel).filter(UserModel.user_id == record.user_id).first()
        if model is None:
            raise ValidationError("Reset link expired.")
        model.password_hash = self.hash_password(password)
        self.db.query(PasswordResetTokenModel).filter(
            PasswordResetTokenModel.user_id == model.user_id
        ).delete(synchronize_session=False)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Password reset for user %s", model.user_id)
        return model_to_user(model)


def send_password_reset_email(email: str, link: str) -> None:
    """Deliver a reset link.

    No mail transport is configured; the link goes to the log instead.
    """
    logger.info("[password-reset-email] to=%s link=%s", email, link)
