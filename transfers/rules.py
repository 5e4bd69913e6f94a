"""
Validation rules and state transition guards.

Every check here is pure: it inspects a payload or an entity and raises,
it never touches a store. The service runs all checks for an operation
before its first mutation.

Payload rule 1 (player):    name, position, current_club non-empty; market_value > 0 on create.
Payload rule 2 (transfer):  transfer_fee > 0, contract_duration > 0, contract end fits 64 bits.
Payload rule 3 (bid):       bid_amount > 0.
Transfer rule 1 (clubs):    from_club and to_club must differ.
Transfer rule 2 (holder):   player must be available and registered at from_club.
Bid rule 1 (pending):       only pending bids can be accepted or rejected.
Bid rule 2 (contract):      remaining contract length on acceptance, clamped or rejected when expired.
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .config import U64_MAX, ContractUnderflowPolicy
from .errors import (
    BID_NOT_PENDING,
    CONTRACT_EXPIRED,
    PLAYER_UNAVAILABLE,
    SAME_CLUB_TRANSFER,
    DomainError,
    InvalidPayload,
)
from .models import PlayerPayload, TransferBidPayload, TransferPayload
from .schemas import BidStatus, Player, TransferBid, TransferStatus

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def coerce_payload(payload, model: type[PayloadT]) -> PayloadT:
    """Accept either a payload model or a plain dict; bad dicts become InvalidPayload."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "payload" for err in e.errors())
        raise InvalidPayload(f"Malformed {model.__name__}: check {fields}.") from e


def check_player_payload(payload: PlayerPayload, require_market_value: bool = True) -> None:
    """
    Payload rule 1.

    update_player passes require_market_value=False: only the text fields
    are mandatory when replacing an existing player's data.
    """
    if not payload.name or not payload.position or not payload.current_club:
        raise InvalidPayload("Ensure 'name', 'position', and 'current_club' are provided.")
    if require_market_value and payload.market_value == 0:
        raise InvalidPayload("Ensure 'market_value' is greater than 0.")


def check_transfer_payload(payload: TransferPayload) -> None:
    """Payload rule 2 and transfer rule 1."""
    if payload.transfer_fee == 0 or payload.contract_duration == 0:
        raise InvalidPayload("Ensure 'transfer_fee' and 'contract_duration' are provided.")
    if payload.transfer_date + payload.contract_duration > U64_MAX:
        raise InvalidPayload("'transfer_date' + 'contract_duration' overflows the contract end date.")
    if payload.from_club == payload.to_club:
        raise DomainError("Player cannot be transferred to the same club.", SAME_CLUB_TRANSFER)


def check_bid_payload(payload: TransferBidPayload) -> None:
    """Payload rule 3."""
    if payload.bid_amount == 0:
        raise InvalidPayload("Bid amount must be greater than 0.")


def check_player_transferable(player: Player, from_club: str) -> None:
    """Transfer rule 2."""
    if player.transfer_status != TransferStatus.AVAILABLE:
        raise DomainError(
            f"Player {player.id} has already been transferred.", PLAYER_UNAVAILABLE
        )
    if player.current_club != from_club:
        raise DomainError(
            f"Player {player.id} is not a member of '{from_club}'.", PLAYER_UNAVAILABLE
        )


def check_bid_pending(bid: TransferBid, action: str) -> None:
    """Bid rule 1. action is 'accepted' or 'rejected', used in the message."""
    if bid.bid_status != BidStatus.PENDING:
        raise DomainError(
            f"Only pending bids can be {action}; bid {bid.id} is {bid.bid_status.value}.",
            BID_NOT_PENDING,
        )


def remaining_contract(
    contract_until: int,
    now: int,
    policy: ContractUnderflowPolicy,
) -> int:
    """
    Bid rule 2: contract time left at `now`.

    An already expired contract yields 0 under "clamp" and a
    CONTRACT_EXPIRED DomainError under "reject".
    """
    if contract_until >= now:
        return contract_until - now
    if policy == "reject":
        raise DomainError(
            "Player's contract has already expired; the bid cannot be accepted.",
            CONTRACT_EXPIRED,
        )
    return 0
