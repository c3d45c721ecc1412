"""Ownership checks shared by every mutating operation.

Owned rows carry two generations of owner reference: an ``owner_email``
from the original email-based accounts and a ``created_by_id`` (``user_id``
on party members) from id-based accounts. Data may have either populated
alone, so both are honoured.
"""

from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.sql.elements import ColumnElement

from tavern.core.exceptions import ResourceNotFoundError
from tavern.schemas.user import User

T = TypeVar("T")


@dataclass(frozen=True)
class OwnerRef:
    """Recorded owner of a resource."""

    created_by_id: Optional[str] = None
    owner_email: Optional[str] = None

    @classmethod
    def of(cls, model: Any) -> "OwnerRef":
        """Build the reference from an ORM row.

        Party members store the id under ``user_id``; everything else uses
        ``created_by_id``.
        """
        created_by_id = getattr(model, "created_by_id", None)
        if created_by_id is None:
            created_by_id = getattr(model, "user_id", None)
        return cls(
            created_by_id=created_by_id,
            owner_email=getattr(model, "owner_email", None),
        )

    @property
    def is_recorded(self) -> bool:
        return bool(self.created_by_id or self.owner_email)

    def allows(self, user_id: Optional[str], email: Optional[str]) -> bool:
        """Decide whether the acting identity may mutate the resource.

        Resolution order: id match, then case-insensitive email match, then
        no owner recorded (legacy rows are treated as publicly owned).
        """
        if self.created_by_id and self.created_by_id == user_id:
            return True
        if self.owner_email and email:
            if normalize_email(self.owner_email) == normalize_email(email):
                return True
        return not self.is_recorded


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_owner(model: Any, user: Optional[User]) -> bool:
    if user is None:
        return False
    return OwnerRef.of(model).allows(user.user_id, user.email)


def ensure_owner(
    model: Optional[T],
    user: Optional[User],
    not_found: Type[ResourceNotFoundError],
    resource_id: str,
) -> T:
    """Return ``model`` if the user may mutate it.

    Raises:
        ResourceNotFoundError: The given subclass, both when the row is
            missing and when it belongs to someone else.
    """
    if model is None or not is_owner(model, user):
        raise not_found(resource_id)
    return model


def owned_by(entity: Any, user: User) -> ColumnElement:
    """SQL filter selecting rows recorded as owned by ``user``."""
    clauses = [entity.created_by_id == user.user_id]
    if user.email:
        clauses.append(
            func.lower(func.trim(entity.owner_email)) == normalize_email(user.email)
        )
    return or_(*clauses)
