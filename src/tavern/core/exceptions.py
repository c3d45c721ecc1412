"""Custom exception classes for the Tavern campaign service.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class TavernError(Exception):
    """Base exception for all Tavern errors."""

    pass


class ResourceNotFoundError(TavernError):
    """Raised when a resource is absent or not visible to the caller.

    Ownership failures raise the same error as absence so that the existence
    of other users' resources is never disclosed.
    """

    resource = "Resource"

    def __init__(self, resource_id: str):
        """Initialize the exception.

        Args:
            resource_id: The ID of the resource that was not found.
        """
        self.resource_id = resource_id
        super().__init__(f"{self.resource} '{resource_id}' not found")


class CampaignNotFoundError(ResourceNotFoundError):
    """Raised when a requested campaign cannot be found."""

    resource = "Campaign"


class CharacterNotFoundError(ResourceNotFoundError):
    """Raised when a requested character cannot be found."""

    resource = "Character"


class SessionNotFoundError(ResourceNotFoundError):
    """Raised when a requested session log cannot be found."""

    resource = "Session"


class InviteNotFoundError(ResourceNotFoundError):
    """Raised when a requested campaign invite cannot be found."""

    resource = "Invite"


class PartyMemberNotFoundError(ResourceNotFoundError):
    """Raised when a character is not seated in the campaign's party."""

    resource = "Party member"


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a requested user cannot be found."""

    resource = "User"


class DowntimeNotFoundError(ResourceNotFoundError):
    """Raised when a requested downtime activity cannot be found."""

    resource = "Downtime activity"


class NpcNotFoundError(ResourceNotFoundError):
    """Raised when a requested NPC cannot be found."""

    resource = "NPC"


class QuestNotFoundError(ResourceNotFoundError):
    """Raised when a requested quest cannot be found."""

    resource = "Quest"


class InvalidInviteError(TavernError):
    """Raised when an invite token does not currently grant join rights.

    The message never says whether the token was unknown, revoked, expired
    or exhausted.
    """

    def __init__(self):
        super().__init__("This invitation is no longer valid.")


class ValidationError(TavernError):
    """Raised when data validation fails."""

    pass


class ConflictError(TavernError):
    """Raised when a write conflicts with existing state."""

    pass


class ChainError(TavernError):
    """Raised when a configured chain mint fails."""

    pass
