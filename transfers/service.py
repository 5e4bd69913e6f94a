"""
Transfer registry domain service.

Orchestrates every operation on players, transfers and bids:
  1. Coerce and validate the payload (rules.py)
  2. Resolve referenced entities, raising NotFound for missing ids
  3. Run the state guards (rules.py)
  4. Allocate ids and encode every new record, then apply the writes

Steps 1-3 never mutate anything, so a rejected operation leaves the
stores untouched. Each public method holds one re-entrant lock for its
whole duration, reads included, so no caller can observe another
operation half-applied.
"""

import functools
import logging
import threading
import time
from typing import Callable, Optional

from .config import ServiceSettings
from .errors import NotFound
from .models import (
    BidDecision,
    PlayerDeletion,
    PlayerPayload,
    TransferBidPayload,
    TransferPayload,
)
from .rules import (
    check_bid_pending,
    check_bid_payload,
    check_player_payload,
    check_player_transferable,
    check_transfer_payload,
    coerce_payload,
    remaining_contract,
)
from .schemas import BidStatus, Player, Transfer, TransferBid, TransferStatus
from .state import TransferState, open_state

logger = logging.getLogger(__name__)


def _serialized(method):
    """Run the wrapped service method under the service lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class TransferService:
    """
    Single entry point for all registry operations.

    Args:
        state: Allocator and stores to operate on
        settings: Empty-result and contract-underflow policies
        clock: Returns the current time as integer nanoseconds
    """

    def __init__(
        self,
        state: TransferState,
        settings: Optional[ServiceSettings] = None,
        clock: Callable[[], int] = time.time_ns,
    ):
        self.state = state
        self.settings = settings or ServiceSettings()
        self._clock = clock
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: ServiceSettings, clock: Callable[[], int] = time.time_ns) -> "TransferService":
        """Open state as configured by settings and build a service on it."""
        state = open_state(settings.data_dir, max_record_size=settings.max_record_size)
        return cls(state, settings=settings, clock=clock)

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    @_serialized
    def create_player(self, payload) -> Player:
        payload = coerce_payload(payload, PlayerPayload)
        check_player_payload(payload)

        player_id = self.state.allocator.next_id()
        player = Player(
            id=player_id,
            name=payload.name,
            position=payload.position,
            current_club=payload.current_club,
            market_value=payload.market_value,
            transfer_status=TransferStatus.AVAILABLE,
            contract_until=payload.contract_until,
            age=payload.age,
            nationality=payload.nationality,
            created_at=self._clock(),
        )
        self.state.players.insert(player_id, player)
        logger.info("[Players] Created player %d (%s, %s)", player_id, player.name, player.current_club)
        return player

    @_serialized
    def update_player(self, player_id: int, payload) -> Player:
        """Replace a player's editable fields. id, created_at and transfer_status are kept."""
        payload = coerce_payload(payload, PlayerPayload)
        check_player_payload(payload, require_market_value=False)

        player = self._require_player(player_id)
        updated = player.model_copy(
            update={
                "name": payload.name,
                "position": payload.position,
                "current_club": payload.current_club,
                "market_value": payload.market_value,
                "contract_until": payload.contract_until,
                "age": payload.age,
                "nationality": payload.nationality,
            }
        )
        self.state.players.insert(player_id, updated)
        logger.info("[Players] Updated player %d", player_id)
        return updated

    @_serialized
    def delete_player(self, player_id: int) -> PlayerDeletion:
        """
        Remove a player and every transfer and bid that references it.

        The cascade is total: dependants are collected from a full scan of
        both stores, then removed one by one under the same lock.
        """
        self._require_player(player_id)

        self.state.players.remove(player_id)
        transfer_ids = [tid for tid, t in self.state.transfers.scan() if t.player_id == player_id]
        bid_ids = [bid_id for bid_id, b in self.state.bids.scan() if b.player_id == player_id]
        for tid in transfer_ids:
            self.state.transfers.remove(tid)
        for bid_id in bid_ids:
            self.state.bids.remove(bid_id)

        logger.info(
            "[Players] Deleted player %d with %d transfers and %d bids",
            player_id, len(transfer_ids), len(bid_ids),
        )
        return PlayerDeletion(
            message="Player and related transfers and bids deleted.",
            player_id=player_id,
            removed_transfer_ids=transfer_ids,
            removed_bid_ids=bid_ids,
        )

    @_serialized
    def get_players(self) -> list[Player]:
        players = [p for _, p in self.state.players.scan()]
        return self._non_empty(players, "No players found")

    @_serialized
    def get_player_by_id(self, player_id: int) -> Player:
        return self._require_player(player_id)

    @_serialized
    def get_players_by_club(self, club_name: str) -> list[Player]:
        players = [p for _, p in self.state.players.scan() if p.current_club == club_name]
        return self._non_empty(players, f"No players found for club '{club_name}'")

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    @_serialized
    def create_transfer(self, payload) -> Transfer:
        """
        Record a completed transfer and move the player to the buying club.

        The player must be available and currently registered at from_club.
        Their new contract runs until transfer_date + contract_duration.
        """
        payload = coerce_payload(payload, TransferPayload)
        check_transfer_payload(payload)
        player = self._require_player(payload.player_id)
        check_player_transferable(player, payload.from_club)

        transfer_id = self.state.allocator.next_id()
        transfer = Transfer(
            id=transfer_id,
            player_id=payload.player_id,
            from_club=payload.from_club,
            to_club=payload.to_club,
            transfer_fee=payload.transfer_fee,
            transfer_date=payload.transfer_date,
            contract_duration=payload.contract_duration,
            created_at=self._clock(),
        )
        moved = self._moved_player(
            player,
            to_club=payload.to_club,
            contract_until=payload.transfer_date + payload.contract_duration,
        )
        self.state.transfers.check(transfer)
        self.state.players.check(moved)

        self.state.transfers.insert(transfer_id, transfer)
        self.state.players.insert(player.id, moved)
        logger.info(
            "[Transfers] Player %d moved %s -> %s (transfer %d)",
            player.id, transfer.from_club, transfer.to_club, transfer_id,
        )
        return transfer

    @_serialized
    def get_transfers(self) -> list[Transfer]:
        transfers = [t for _, t in self.state.transfers.scan()]
        return self._non_empty(transfers, "No transfers found")

    @_serialized
    def get_transfer_by_id(self, transfer_id: int) -> Transfer:
        transfer = self.state.transfers.get(transfer_id)
        if transfer is None:
            raise NotFound(f"Transfer {transfer_id} not found")
        return transfer

    @_serialized
    def get_transfers_by_player(self, player_id: int) -> list[Transfer]:
        transfers = [t for _, t in self.state.transfers.scan() if t.player_id == player_id]
        return self._non_empty(transfers, f"No transfers found for player {player_id}")

    # ------------------------------------------------------------------
    # Bids
    # ------------------------------------------------------------------

    @_serialized
    def create_transfer_bid(self, payload) -> TransferBid:
        """
        Place a pending bid on an existing player.

        Availability is not checked here, so a player can collect several
        pending bids; the state guards run when a bid is accepted.
        """
        payload = coerce_payload(payload, TransferBidPayload)
        check_bid_payload(payload)
        self._require_player(payload.player_id)

        bid_id = self.state.allocator.next_id()
        bid = TransferBid(
            id=bid_id,
            player_id=payload.player_id,
            from_club=payload.from_club,
            to_club=payload.to_club,
            bid_amount=payload.bid_amount,
            bid_status=BidStatus.PENDING,
            created_at=self._clock(),
        )
        self.state.bids.insert(bid_id, bid)
        logger.info(
            "[Bids] %s bid %d for player %d (bid %d)",
            bid.to_club, bid.bid_amount, bid.player_id, bid_id,
        )
        return bid

    @_serialized
    def accept_transfer_bid(self, bid_id: int) -> BidDecision:
        """
        Accept a pending bid: mark it accepted, record the transfer, move the player.

        The transfer is dated now, carries the bid amount as its fee and
        keeps the player's remaining contract length. Other pending bids on
        the same player are left as they are.
        """
        bid = self._require_bid(bid_id)
        check_bid_pending(bid, "accepted")
        player = self._require_player(bid.player_id)

        now = self._clock()
        contract_duration = remaining_contract(
            player.contract_until, now, self.settings.contract_underflow
        )

        # The id is reserved before any write; a failed allocation leaves every store untouched
        transfer_id = self.state.allocator.next_id()
        accepted = bid.model_copy(update={"bid_status": BidStatus.ACCEPTED})
        transfer = Transfer(
            id=transfer_id,
            player_id=bid.player_id,
            from_club=bid.from_club,
            to_club=bid.to_club,
            transfer_fee=bid.bid_amount,
            transfer_date=now,
            contract_duration=contract_duration,
            created_at=now,
        )
        moved = self._moved_player(player, to_club=bid.to_club, contract_until=now + contract_duration)

        # Encode all three records first so a size breach aborts before the first write
        self.state.bids.check(accepted)
        self.state.transfers.check(transfer)
        self.state.players.check(moved)

        self.state.bids.insert(bid_id, accepted)
        self.state.transfers.insert(transfer_id, transfer)
        self.state.players.insert(player.id, moved)

        logger.info(
            "[Bids] Accepted bid %d: player %d moved to %s (transfer %d)",
            bid_id, player.id, bid.to_club, transfer_id,
        )
        stale = [
            other_id for other_id, other in self.state.bids.scan()
            if other.player_id == player.id and other.bid_status == BidStatus.PENDING
        ]
        if stale:
            logger.warning(
                "[Bids] Player %d is transferred but still has pending bids %s",
                player.id, stale,
            )

        return BidDecision(
            message="Transfer bid accepted and player transferred.",
            bid=accepted,
            transfer=transfer,
        )

    @_serialized
    def reject_transfer_bid(self, bid_id: int) -> BidDecision:
        bid = self._require_bid(bid_id)
        check_bid_pending(bid, "rejected")

        rejected = bid.model_copy(update={"bid_status": BidStatus.REJECTED})
        self.state.bids.insert(bid_id, rejected)
        logger.info("[Bids] Rejected bid %d", bid_id)
        return BidDecision(message="Transfer bid rejected.", bid=rejected)

    @_serialized
    def get_transfer_bids(self) -> list[TransferBid]:
        bids = [b for _, b in self.state.bids.scan()]
        return self._non_empty(bids, "No transfer bids found")

    @_serialized
    def get_transfer_bid_by_id(self, bid_id: int) -> TransferBid:
        return self._require_bid(bid_id)

    @_serialized
    def get_bids_by_player(self, player_id: int) -> list[TransferBid]:
        bids = [b for _, b in self.state.bids.scan() if b.player_id == player_id]
        return self._non_empty(bids, f"No transfer bids found for player {player_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_player(self, player_id: int) -> Player:
        player = self.state.players.get(player_id)
        if player is None:
            raise NotFound(f"Player {player_id} not found")
        return player

    def _require_bid(self, bid_id: int) -> TransferBid:
        bid = self.state.bids.get(bid_id)
        if bid is None:
            raise NotFound(f"Transfer bid {bid_id} not found")
        return bid

    def _moved_player(self, player: Player, to_club: str, contract_until: int) -> Player:
        return player.model_copy(
            update={
                "transfer_status": TransferStatus.TRANSFERRED,
                "current_club": to_club,
                "contract_until": contract_until,
            }
        )

    def _non_empty(self, items: list, message: str) -> list:
        """Apply the empty-result policy to a list query."""
        if not items and self.settings.strict_empty_results:
            raise NotFound(message)
        return items
