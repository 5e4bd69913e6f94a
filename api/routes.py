"""
API route definitions.

Endpoints map one-to-one onto TransferService operations. Errors are
raised by the service and turned into JSON envelopes by the handlers
registered in server.py.

  GET    /health                   - liveness check
  POST   /players                  - create_player
  GET    /players                  - get_players
  GET    /players/{id}             - get_player_by_id
  PUT    /players/{id}             - update_player
  DELETE /players/{id}             - delete_player (cascades)
  GET    /players/{id}/transfers   - get_transfers_by_player
  GET    /players/{id}/bids        - get_bids_by_player
  GET    /clubs/{club}/players     - get_players_by_club
  POST   /transfers                - create_transfer
  GET    /transfers                - get_transfers
  GET    /transfers/{id}           - get_transfer_by_id
  POST   /bids                     - create_transfer_bid
  GET    /bids                     - get_transfer_bids
  GET    /bids/{id}                - get_transfer_bid_by_id
  POST   /bids/{id}/accept         - accept_transfer_bid
  POST   /bids/{id}/reject         - reject_transfer_bid
"""

from fastapi import APIRouter, Depends, Request, status

from transfers.models import (
    BidDecision,
    PlayerDeletion,
    PlayerPayload,
    TransferBidPayload,
    TransferPayload,
)
from transfers.schemas import Player, Transfer, TransferBid
from transfers.service import TransferService

router = APIRouter()


def get_service(request: Request) -> TransferService:
    return request.app.state.service


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@router.get("/health")
def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Players
# ---------------------------------------------------------------------------

@router.post("/players", response_model=Player, status_code=status.HTTP_201_CREATED)
def create_player(payload: PlayerPayload, service: TransferService = Depends(get_service)):
    return service.create_player(payload)


@router.get("/players", response_model=list[Player])
def get_players(service: TransferService = Depends(get_service)):
    return service.get_players()


@router.get("/players/{player_id}", response_model=Player)
def get_player(player_id: int, service: TransferService = Depends(get_service)):
    return service.get_player_by_id(player_id)


@router.put("/players/{player_id}", response_model=Player)
def update_player(
    player_id: int,
    payload: PlayerPayload,
    service: TransferService = Depends(get_service),
):
    return service.update_player(player_id, payload)


@router.delete("/players/{player_id}", response_model=PlayerDeletion)
def delete_player(player_id: int, service: TransferService = Depends(get_service)):
    return service.delete_player(player_id)


@router.get("/players/{player_id}/transfers", response_model=list[Transfer])
def get_player_transfers(player_id: int, service: TransferService = Depends(get_service)):
    return service.get_transfers_by_player(player_id)


@router.get("/players/{player_id}/bids", response_model=list[TransferBid])
def get_player_bids(player_id: int, service: TransferService = Depends(get_service)):
    return service.get_bids_by_player(player_id)


@router.get("/clubs/{club_name}/players", response_model=list[Player])
def get_club_players(club_name: str, service: TransferService = Depends(get_service)):
    return service.get_players_by_club(club_name)


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------

@router.post("/transfers", response_model=Transfer, status_code=status.HTTP_201_CREATED)
def create_transfer(payload: TransferPayload, service: TransferService = Depends(get_service)):
    return service.create_transfer(payload)


@router.get("/transfers", response_model=list[Transfer])
def get_transfers(service: TransferService = Depends(get_service)):
    return service.get_transfers()


@router.get("/transfers/{transfer_id}", response_model=Transfer)
def get_transfer(transfer_id: int, service: TransferService = Depends(get_service)):
    return service.get_transfer_by_id(transfer_id)


# ---------------------------------------------------------------------------
# Bids
# ---------------------------------------------------------------------------

@router.post("/bids", response_model=TransferBid, status_code=status.HTTP_201_CREATED)
def create_bid(payload: TransferBidPayload, service: TransferService = Depends(get_service)):
    return service.create_transfer_bid(payload)


@router.get("/bids", response_model=list[TransferBid])
def get_bids(service: TransferService = Depends(get_service)):
    return service.get_transfer_bids()


@router.get("/bids/{bid_id}", response_model=TransferBid)
def get_bid(bid_id: int, service: TransferService = Depends(get_service)):
    return service.get_transfer_bid_by_id(bid_id)


@router.post("/bids/{bid_id}/accept", response_model=BidDecision)
def accept_bid(bid_id: int, service: TransferService = Depends(get_service)):
    return service.accept_transfer_bid(bid_id)


@router.post("/bids/{bid_id}/reject", response_model=BidDecision)
def reject_bid(bid_id: int, service: TransferService = Depends(get_service)):
    return service.reject_transfer_bid(bid_id)
