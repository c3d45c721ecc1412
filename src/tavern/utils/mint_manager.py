"""Records the results of passport and badge mints."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from tavern.core.exceptions import UserNotFoundError, ValidationError
from tavern.models.badge import BadgeModel
from tavern.models.character import CharacterModel
from tavern.models.user import UserModel
from tavern.schemas.chain import MintResult
from tavern.utils.chain_service import ChainMinter

logger = logging.getLogger(__name__)


class MintManager:
    """Mints through a ChainMinter and stores what came back."""

    def __init__(self, db: Session, minter: ChainMinter):
        self.db = db
        self.minter = minter

    def mint_passport(
        self, character: CharacterModel, to: Optional[str], token_uri: str
    ) -> MintResult:
        """Mint a passport for an owned character.

        Args:
            character: Character already checked by the ownership guard.
            to: Recipient wallet address.
            token_uri: Metadata URI for the token.

        Raises:
            ValidationError: If there is no recipient wallet.
        """
        if not to:
            raise ValidationError("No wallet address to mint to. Link a wallet first.")
        result = self.minter.mint_character(to, token_uri)
        character.passport_token_id = result.token_id
        character.passport_tx_hash = result.tx_hash
        character.passport_simulated = result.simulated
        self.db.commit()
        logger.info(
            "Recorded passport for character %s (simulated=%s)",
            character.id,
            result.simulated,
        )
        return result

    def mint_badge(self, user_id: str, token_uri: str) -> BadgeModel:
        """Mint a badge to a user's linked wallet and record it.

        Raises:
            UserNotFoundError: If the user does not exist.
            ValidationError: If the user has no wallet linked.
        """
        user = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not user:
            raise UserNotFoundError(user_id)
        if not user.wallet_address:
            raise ValidationError("User has no wallet connected")

        result = self.minter.mint_badge(user.wallet_address, token_uri)
        badge = BadgeModel(
            user_id=user.user_id,
            token_id=result.token_id,
            chain_id=self.minter.chain_id,
            contract_address=self.minter.badge_contract_address,
            metadata_uri=token_uri,
            tx_hash=result.tx_hash,
            simulated=result.simulated,
        )
        self.db.add(badge)
        self.db.commit()
        self.db.refresh(badge)
        logger.info("Recorded badge %s for user %s (simulated=%s)", badge.id, user_id, result.simulated)
        return badge
