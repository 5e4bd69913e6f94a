"""
Pydantic schemas for persisted registry entities.

Design decisions:
- One id space: Player, Transfer and TransferBid ids all come from the
  shared allocator, so an id is unique across the whole registry.
- int for money: fees and bids are whole amounts, never fractional.
- Timestamps are integer nanoseconds since the epoch.
- player_id is a soft reference: the store does not enforce it, the
  service checks it before use and removes dependants on delete.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field

from .config import U32_MAX, U64_MAX

U64 = Annotated[int, Field(ge=0, le=U64_MAX)]
U32 = Annotated[int, Field(ge=0, le=U32_MAX)]


class TransferStatus(str, Enum):
    """Player availability. available is initial; transferred is never left."""

    AVAILABLE = "available"
    TRANSFERRED = "transferred"


class BidStatus(str, Enum):
    """Bid lifecycle. pending is initial; accepted and rejected are terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Player(BaseModel):
    """A football player registered with the registry."""

    id: U64 = Field(..., description="Allocator-assigned id")
    name: str = Field(..., description="Full player name")
    position: str = Field(..., description="Primary playing position")
    current_club: str = Field(..., description="Club currently holding the registration")
    market_value: U64 = Field(..., description="Market value in whole currency units")
    transfer_status: TransferStatus = Field(default=TransferStatus.AVAILABLE)
    contract_until: U64 = Field(default=0, description="Contract end timestamp")
    age: U32 = Field(default=0)
    nationality: str = Field(default="")
    created_at: U64 = Field(..., description="Creation timestamp")


class Transfer(BaseModel):
    """A completed move of a player between two clubs. Immutable once stored."""

    id: U64
    player_id: U64 = Field(..., description="Id of the transferred player")
    from_club: str = Field(..., description="Selling club")
    to_club: str = Field(..., description="Buying club")
    transfer_fee: U64 = Field(..., description="Fee paid, always > 0")
    transfer_date: U64 = Field(..., description="Timestamp the move took effect")
    contract_duration: U64 = Field(..., description="Length of the new contract")
    created_at: U64


class TransferBid(BaseModel):
    """An offer from one club to acquire a player."""

    id: U64
    player_id: U64 = Field(..., description="Id of the player the bid targets")
    from_club: str = Field(..., description="Club currently holding the player")
    to_club: str = Field(..., description="Bidding club")
    bid_amount: U64 = Field(..., description="Offered fee, always > 0")
    bid_status: BidStatus = Field(default=BidStatus.PENDING)
    created_at: U64
