"""
Application state: the id allocator plus the three entity stores.

Built once by open_state() and handed to the service; nothing here is
module-global.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .allocator import IdAllocator
from .backends import FileCounter, JsonFileBackend, MemoryBackend, MemoryCounter
from .config import (
    COUNTER_FILE,
    MAX_RECORD_SIZE,
    PLAYERS_FILE,
    TRANSFER_BIDS_FILE,
    TRANSFERS_FILE,
)
from .schemas import Player, Transfer, TransferBid
from .store import EntityStore

logger = logging.getLogger(__name__)


@dataclass
class TransferState:
    allocator: IdAllocator
    players: EntityStore[Player]
    transfers: EntityStore[Transfer]
    bids: EntityStore[TransferBid]


def open_state(
    data_dir: Optional[Path] = None,
    max_record_size: int = MAX_RECORD_SIZE,
) -> TransferState:
    """
    Create the registry state.

    Args:
        data_dir: Directory for the JSON files; None keeps state in memory
        max_record_size: Encoded size bound applied to every store

    Returns:
        TransferState with allocator and stores wired to the chosen medium
    """
    if data_dir is None:
        counter = MemoryCounter()
        backends = (MemoryBackend(), MemoryBackend(), MemoryBackend())
        logger.info("[State] Using in-memory storage")
    else:
        data_dir = Path(data_dir)
        counter = FileCounter(data_dir / COUNTER_FILE)
        backends = (
            JsonFileBackend(data_dir / PLAYERS_FILE),
            JsonFileBackend(data_dir / TRANSFERS_FILE),
            JsonFileBackend(data_dir / TRANSFER_BIDS_FILE),
        )
        logger.info("[State] Using file storage at %s", data_dir)

    players_backend, transfers_backend, bids_backend = backends
    return TransferState(
        allocator=IdAllocator(counter),
        players=EntityStore(Player, players_backend, max_record_size, name="players"),
        transfers=EntityStore(Transfer, transfers_backend, max_record_size, name="transfers"),
        bids=EntityStore(TransferBid, bids_backend, max_record_size, name="transfer_bids"),
    )
