import httpx
import pytest

from core.data_helpers import (
    count_records,
    delete_data,
    insert_data,
    load_data,
    record_exists,
    update_data,
)
from core.remote_client import RemoteError


def test_load_data_returns_rows(make_client):
    client, _ = make_client(lambda r: httpx.Response(200, json=[{"id": 1}]))
    assert load_data(client.table("players").select("id")) == [{"id": 1}]


def test_load_data_empty_body_is_empty_list(make_client):
    client, _ = make_client(lambda r: httpx.Response(200))
    assert load_data(client.table("players")) == []


def test_load_data_prefixes_error_message(make_client, caplog):
    client, _ = make_client(lambda r: httpx.Response(400, json={"message": "bad column", "code": "42703"}))
    with caplog.at_level("ERROR"), pytest.raises(RemoteError) as info:
        load_data(client.table("players"), "Error loading players")
    assert info.value.message == "Error loading players: bad column"
    assert info.value.code == "42703"
    assert "Error loading players" in caplog.text


def test_mutations_report_success(make_client):
    client, rec = make_client(lambda r: httpx.Response(201, json=[{}]))
    assert insert_data(client, "players", {"name": "A"}, "Player created").message == "Player created"
    assert update_data(client, "players", 5, {"name": "B"}).success
    assert rec.last.url.params["id"] == "eq.5"
    assert delete_data(client, "players", 5).message == "Data deleted"
    assert [r.method for r in rec.requests] == ["POST", "PATCH", "DELETE"]


def test_mutation_failure_carries_error(make_client):
    client, _ = make_client(lambda r: httpx.Response(409, json={"message": "dup", "code": "23505"}))
    result = insert_data(client, "players", {"name": "A"})
    assert not result.success
    assert result.error.code == "23505"
    assert result.message is None


def test_count_and_exists(make_client):
    client, rec = make_client(lambda r: httpx.Response(200, headers={"Content-Range": "*/3"}))
    assert count_records(client, "players", {"team_id": 1, "active": True}) == 3
    assert rec.last.url.params["active"] == "eq.true"
    assert record_exists(client, "players", {"team_id": 1})


def test_count_failure_is_zero(make_client):
    client, _ = make_client(lambda r: httpx.Response(500))
    assert count_records(client, "players") == 0
    assert not record_exists(client, "players", {"id": 1})
