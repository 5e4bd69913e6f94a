"""Player operations: create, update, delete with cascade, and reads."""

import pytest

from transfers.config import ServiceSettings
from transfers.errors import InvalidPayload, NotFound
from transfers.models import PlayerPayload
from transfers.schemas import TransferStatus
from transfers.service import TransferService

from conftest import START_TIME, bid_payload, player_payload, transfer_payload


def test_create_player_sets_defaults(service):
    player = service.create_player(player_payload())
    assert player.id == 1
    assert player.transfer_status == TransferStatus.AVAILABLE
    assert player.created_at == START_TIME
    assert service.get_player_by_id(1) == player


def test_create_player_accepts_model_payload(service):
    player = service.create_player(PlayerPayload(**player_payload(name="Lamine Yamal")))
    assert player.name == "Lamine Yamal"


def test_player_ids_strictly_increase(service):
    ids = [service.create_player(player_payload(name=f"Player {i}")).id for i in range(10)]
    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_ids_are_shared_across_entity_kinds(service):
    player = service.create_player(player_payload())
    bid = service.create_transfer_bid(bid_payload(player.id))
    second = service.create_player(player_payload(name="Gavi"))
    assert (player.id, bid.id, second.id) == (1, 2, 3)


@pytest.mark.parametrize("field", ["name", "position", "current_club"])
def test_create_player_requires_text_fields(service, field):
    with pytest.raises(InvalidPayload):
        service.create_player(player_payload(**{field: ""}))


def test_create_player_requires_market_value(service):
    with pytest.raises(InvalidPayload):
        service.create_player(player_payload(market_value=0))
    assert service.state.allocator.last_id == 0


def test_create_player_rejects_malformed_dict(service):
    with pytest.raises(InvalidPayload, match="market_value"):
        service.create_player(player_payload(market_value=-5))


def test_update_player_replaces_fields_but_keeps_status(service):
    player = service.create_player(player_payload())
    service.create_transfer(transfer_payload(player.id))

    updated = service.update_player(
        player.id,
        player_payload(name="Pedro Gonzalez", current_club="Real Madrid", market_value=0, age=23),
    )
    assert updated.name == "Pedro Gonzalez"
    assert updated.age == 23
    assert updated.market_value == 0
    assert updated.transfer_status == TransferStatus.TRANSFERRED
    assert updated.created_at == player.created_at
    assert service.get_player_by_id(player.id) == updated


def test_update_player_validates_before_lookup(service):
    with pytest.raises(InvalidPayload):
        service.update_player(99, player_payload(name=""))
    with pytest.raises(NotFound):
        service.update_player(99, player_payload())


def test_delete_player_cascades_only_related_records(service):
    target = service.create_player(player_payload())
    other = service.create_player(player_payload(name="Gavi"))

    target_bids = [service.create_transfer_bid(bid_payload(target.id)).id for _ in range(2)]
    target_transfer = service.create_transfer(transfer_payload(target.id))
    other_bid = service.create_transfer_bid(bid_payload(other.id))
    other_transfer = service.create_transfer(transfer_payload(other.id))

    result = service.delete_player(target.id)
    assert result.removed_bid_ids == target_bids
    assert result.removed_transfer_ids == [target_transfer.id]

    with pytest.raises(NotFound):
        service.get_player_by_id(target.id)
    with pytest.raises(NotFound):
        service.get_transfer_by_id(target_transfer.id)
    for bid_id in target_bids:
        with pytest.raises(NotFound):
            service.get_transfer_bid_by_id(bid_id)

    assert service.get_player_by_id(other.id) == service.get_players()[0]
    assert service.get_transfer_bid_by_id(other_bid.id).player_id == other.id
    assert service.get_transfer_by_id(other_transfer.id).player_id == other.id


def test_delete_missing_player(service):
    with pytest.raises(NotFound):
        service.delete_player(1)


def test_get_players_empty_is_not_found(service):
    with pytest.raises(NotFound):
        service.get_players()


def test_get_players_empty_lenient(lenient_service):
    assert lenient_service.get_players() == []
    assert lenient_service.get_players_by_club("Arsenal") == []


def test_get_players_by_club(service):
    service.create_player(player_payload(name="Pedri"))
    service.create_player(player_payload(name="Saka", current_club="Arsenal"))
    service.create_player(player_payload(name="Gavi"))

    names = [p.name for p in service.get_players_by_club("FC Barcelona")]
    assert names == ["Pedri", "Gavi"]
    with pytest.raises(NotFound):
        service.get_players_by_club("Chelsea")


def test_file_backed_players_survive_restart(file_service, clock):
    created = file_service.create_player(player_payload())
    data_dir = file_service.settings.data_dir

    reopened = TransferService.from_settings(ServiceSettings(data_dir=data_dir), clock=clock)
    assert reopened.get_player_by_id(created.id) == created
    assert reopened.create_player(player_payload(name="Gavi")).id == created.id + 1
