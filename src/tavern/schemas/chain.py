"""Schemas for the chain minting side-feature."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MintResult(BaseModel):
    simulated: bool = Field(
        description="True when no chain is configured; the result is a placeholder."
    )
    tx_hash: str
    token_id: str


class MintPassportRequest(BaseModel):
    token_uri: str = Field(min_length=1)
    to: Optional[str] = Field(
        default=None,
        description="Recipient wallet; defaults to the caller's wallet.",
    )


class MintPassportResponse(BaseModel):
    character_id: str
    result: MintResult


class MintBadgeRequest(BaseModel):
    token_uri: str = Field(min_length=1)
    target_user_id: Optional[str] = None


class BadgeInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    token_id: str
    chain_id: int
    contract_address: Optional[str] = None
    metadata_uri: str
    tx_hash: str
    simulated: bool
    created_at: datetime
