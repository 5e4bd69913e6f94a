"""
Pydantic schemas for service inputs and outputs.

Separate from the entity schemas: these are what callers send and what
operations hand back, not what gets persisted. Payload fields carry only
type and range constraints; emptiness and zero checks live in rules.py
so they surface as InvalidPayload with a readable message.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .schemas import U32, U64, Transfer, TransferBid


class PlayerPayload(BaseModel):
    """Fields supplied when creating or updating a player."""

    name: str = ""
    position: str = ""
    current_club: str = ""
    market_value: U64 = 0
    contract_until: U64 = 0
    age: U32 = 0
    nationality: str = ""


class TransferPayload(BaseModel):
    """A completed transfer to record directly, without a bid."""

    player_id: U64
    from_club: str = ""
    to_club: str = ""
    transfer_fee: U64 = 0
    transfer_date: U64 = 0
    contract_duration: U64 = 0


class TransferBidPayload(BaseModel):
    """An offer to place against a player."""

    player_id: U64
    from_club: str = ""
    to_club: str = ""
    bid_amount: U64 = 0


class OperationResult(BaseModel):
    """Success signal for operations that produce no new entity."""

    message: str


class PlayerDeletion(OperationResult):
    """Outcome of delete_player, listing everything the cascade removed."""

    player_id: int
    removed_transfer_ids: list[int] = Field(default_factory=list)
    removed_bid_ids: list[int] = Field(default_factory=list)


class BidDecision(OperationResult):
    """Outcome of accepting or rejecting a bid."""

    bid: TransferBid
    transfer: Optional[Transfer] = Field(
        default=None, description="Transfer materialised by an accepted bid"
    )
