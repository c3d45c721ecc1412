"""Chain minting service for character passports and badges.

When the RPC URL, minter key or contract address is not configured, mints
are simulated: a placeholder result is returned and nothing is sent. Callers
store the ``simulated`` flag and must not treat such results as on-chain
state.
"""

import logging
from typing import Any, Dict, List, Optional

from tavern.config import (
    CHAIN_ID,
    MINT_GAS_LIMIT,
    TAVERN_BADGE_MINT_ADDRESS,
    TAVERN_CHARACTER_MINT_ADDRESS,
    TAVERN_MINT_PRIVATE_KEY,
    TAVERN_RPC_URL,
)
from tavern.core.exceptions import ChainError, ValidationError
from tavern.schemas.chain import MintResult

logger = logging.getLogger(__name__)

SIMULATED_CHARACTER_TX = "0xSIMULATED_CHARACTER_MINT"
SIMULATED_BADGE_TX = "0xSIMULATED_BADGE_MINT"


def _mint_abi(fn_name: str) -> List[Dict[str, Any]]:
    return [
        {
            "name": fn_name,
            "type": "function",
            "stateMutability": "nonpayable",
            "inputs": [
                {"name": "to", "type": "address"},
                {"name": "uri", "type": "string"},
            ],
            "outputs": [{"name": "", "type": "uint256"}],
        }
    ]


CHARACTER_ABI = _mint_abi("mintTo")
BADGE_ABI = _mint_abi("mintBadge")


def token_id_from_receipt(receipt: Any) -> str:
    """Read the minted token id from the first log's Transfer topic.

    ERC-721 Transfer logs carry the token id as topic 3. Falls back to "0"
    when the receipt has no such topic.
    """
    logs = receipt.get("logs") or []
    if not logs:
        return "0"
    topics = logs[0].get("topics") or []
    if len(topics) < 4:
        return "0"
    return str(int.from_bytes(bytes(topics[3]), "big"))


class ChainMinter:
    """Mints passports and badges, or simulates when unconfigured."""

    def __init__(
        self,
        rpc_url: str = TAVERN_RPC_URL,
        private_key: str = TAVERN_MINT_PRIVATE_KEY,
        character_address: str = TAVERN_CHARACTER_MINT_ADDRESS,
        badge_address: str = TAVERN_BADGE_MINT_ADDRESS,
        chain_id: int = CHAIN_ID,
    ):
        self.rpc_url = rpc_url
        self.private_key = private_key
        self.character_address = character_address
        self.badge_address = badge_address
        self.chain_id = chain_id

    def has_character_config(self) -> bool:
        return bool(self.rpc_url and self.private_key and self.character_address)

    def has_badge_config(self) -> bool:
        return bool(self.rpc_url and self.private_key and self.badge_address)

    @property
    def badge_contract_address(self) -> Optional[str]:
        return self.badge_address or None

    def mint_character(self, to: str, token_uri: str) -> MintResult:
        if not self.has_character_config():
            logger.info("Chain not configured, simulating character mint to %s", to)
            return MintResult(simulated=True, tx_hash=SIMULATED_CHARACTER_TX, token_id="0")
        return self._mint(self.character_address, CHARACTER_ABI, "mintTo", to, token_uri)

    def mint_badge(self, to: str, token_uri: str) -> MintResult:
        if not self.has_badge_config():
            logger.info("Chain not configured, simulating badge mint to %s", to)
            return MintResult(simulated=True, tx_hash=SIMULATED_BADGE_TX, token_id="0")
        return self._mint(self.badge_address, BADGE_ABI, "mintBadge", to, token_uri)

    def _mint(
        self,
        contract_address: str,
        abi: List[Dict[str, Any]],
        fn_name: str,
        to: str,
        token_uri: str,
    ) -> MintResult:
        from web3 import Web3

        if not Web3.is_address(to):
            raise ValidationError(f"Invalid recipient address: {to}")

        try:
            w3 = Web3(Web3.HTTPProvider(self.rpc_url))
            account = w3.eth.account.from_key(self.private_key)
            contract = w3.eth.contract(
                address=Web3.to_checksum_address(contract_address),
                abi=abi,
            )
            fn = getattr(contract.functions, fn_name)(
                Web3.to_checksum_address(to), token_uri
            )
            tx = fn.build_transaction({
                "from": account.address,
                "nonce": w3.eth.get_transaction_count(account.address, "pending"),
                "chainId": self.chain_id,
                "gas": MINT_GAS_LIMIT,
                "gasPrice": w3.eth.gas_price,
            })
            signed = account.sign_transaction(tx)
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
            receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
        except Exception as e:
            logger.error("%s to %s failed: %s", fn_name, to, e)
            raise ChainError(f"{fn_name} failed: {e}") from e

        result = MintResult(
            simulated=False,
            tx_hash=Web3.to_hex(tx_hash),
            token_id=token_id_from_receipt(receipt),
        )
        logger.info("%s to %s sent: tx=%s token=%s", fn_name, to, result.tx_hash, result.token_id)
        return result
