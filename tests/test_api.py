"""HTTP surface: routing onto the service and the JSON error envelope."""

import pytest
from fastapi.testclient import TestClient

from api.server import create_app
from transfers.config import ServiceSettings
from transfers.errors import StorageFault
from transfers.service import TransferService
from transfers.state import open_state

from conftest import bid_payload, player_payload, transfer_payload


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(create_app(service))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_player_crud(client):
    created = client.post("/players", json=player_payload())
    assert created.status_code == 201
    player = created.json()
    assert player["transfer_status"] == "available"

    assert client.get(f"/players/{player['id']}").json() == player
    assert [p["id"] for p in client.get("/players").json()] == [player["id"]]
    assert len(client.get("/clubs/FC Barcelona/players").json()) == 1

    updated = client.put(f"/players/{player['id']}", json=player_payload(age=23))
    assert updated.json()["age"] == 23

    deleted = client.delete(f"/players/{player['id']}")
    assert deleted.status_code == 200
    assert deleted.json()["player_id"] == player["id"]
    assert client.get(f"/players/{player['id']}").status_code == 404


def test_bid_flow(client):
    player = client.post("/players", json=player_payload(market_value=1000)).json()
    bid = client.post("/bids", json=bid_payload(player["id"], bid_amount=500)).json()
    assert bid["bid_status"] == "pending"

    accepted = client.post(f"/bids/{bid['id']}/accept")
    assert accepted.status_code == 200
    assert accepted.json()["transfer"]["transfer_fee"] == 500

    again = client.post(f"/bids/{bid['id']}/reject")
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "BID_NOT_PENDING"

    assert client.get(f"/players/{player['id']}").json()["current_club"] == "Arsenal"
    assert len(client.get(f"/players/{player['id']}/transfers").json()) == 1
    assert len(client.get(f"/players/{player['id']}/bids").json()) == 1
    assert client.get(f"/bids/{bid['id']}").json()["bid_status"] == "accepted"


def test_create_transfer_route(client):
    player = client.post("/players", json=player_payload()).json()
    response = client.post("/transfers", json=transfer_payload(player["id"]))
    assert response.status_code == 201
    transfer = response.json()
    assert client.get(f"/transfers/{transfer['id']}").json() == transfer
    assert len(client.get("/transfers").json()) == 1


def test_invalid_payload_envelope(client):
    response = client.post("/players", json=player_payload(name=""))
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_PAYLOAD"
    assert error["category"] == "validation"


def test_request_validation_envelope(client):
    response = client.post("/bids", json={"bid_amount": 10})
    assert response.status_code == 400
    assert "player_id" in response.json()["error"]["message"]


def test_empty_list_is_404(client):
    response = client.get("/players")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_empty_list_lenient(clock):
    service = TransferService(
        open_state(), settings=ServiceSettings(strict_empty_results=False), clock=clock
    )
    client = TestClient(create_app(service))
    assert client.get("/bids").json() == []


def test_storage_fault_hides_details(clock):
    service = TransferService(open_state(max_record_size=32), clock=clock)
    client = TestClient(create_app(service), raise_server_exceptions=False)

    response = client.post("/players", json=player_payload())
    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "RECORD_TOO_LARGE"
    assert error["severity"] == "critical"
    assert "limit" not in error["message"]


def test_storage_fault_is_raised_by_service(clock):
    service = TransferService(open_state(max_record_size=32), clock=clock)
    with pytest.raises(StorageFault):
        service.create_player(player_payload())
