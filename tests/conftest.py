"""Shared fixtures: a steppable clock and services over fresh state."""

import pytest

from transfers.config import ServiceSettings
from transfers.state import open_state
from transfers.service import TransferService

START_TIME = 1_700_000_000_000_000_000  # ns
YEAR = 365 * 24 * 3600 * 1_000_000_000


class FakeClock:
    """Deterministic clock returning integer nanoseconds."""

    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, delta: int) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(clock) -> TransferService:
    return TransferService(open_state(), settings=ServiceSettings(), clock=clock)


@pytest.fixture
def lenient_service(clock) -> TransferService:
    settings = ServiceSettings(strict_empty_results=False)
    return TransferService(open_state(), settings=settings, clock=clock)


@pytest.fixture
def file_service(tmp_path, clock) -> TransferService:
    settings = ServiceSettings(data_dir=tmp_path)
    return TransferService.from_settings(settings, clock=clock)


def player_payload(**overrides) -> dict:
    payload = {
        "name": "Pedri",
        "position": "Central Midfield",
        "current_club": "FC Barcelona",
        "market_value": 1000,
        "contract_until": START_TIME + 3 * YEAR,
        "age": 22,
        "nationality": "Spain",
    }
    payload.update(overrides)
    return payload


def bid_payload(player_id: int, **overrides) -> dict:
    payload = {
        "player_id": player_id,
        "from_club": "FC Barcelona",
        "to_club": "Arsenal",
        "bid_amount": 500,
    }
    payload.update(overrides)
    return payload


def transfer_payload(player_id: int, **overrides) -> dict:
    payload = {
        "player_id": player_id,
        "from_club": "FC Barcelona",
        "to_club": "Real Madrid",
        "transfer_fee": 800,
        "transfer_date": START_TIME,
        "contract_duration": 4 * YEAR,
    }
    payload.update(overrides)
    return payload
