import httpx
import pytest

from core.remote_client import RemoteError
from gui.repositories.protocols import RosterSource, TeamListingSource
from gui.services.team_data_service import TeamDataService, planner_player_id


def test_load_roster_maps_rows_to_players(make_client):
    rows = [
        {"id": 3, "name": "Ana", "number": 7},
        {"id": 4, "name": "Bea", "number": None},
        {"id": 5, "name": None, "number": "12"},
    ]
    client, rec = make_client(lambda r: httpx.Response(200, json=rows))
    players = TeamDataService(client).load_roster("12")
    assert [p.id for p in players] == ["player-3", "player-4", "player-5"]
    assert [p.number for p in players] == ["7", None, "12"]
    assert players[2].name == ""
    assert not any(p.is_temporary for p in players)
    params = dict(rec.last.url.params.multi_items())
    assert params["select"] == "id,name,number"
    assert params["team_id"] == "eq.12"
    assert params["active"] == "eq.true"


def test_load_roster_without_team_skips_request(make_client):
    client, rec = make_client(lambda r: httpx.Response(200, json=[]))
    assert TeamDataService(client).load_roster("") == []
    assert rec.requests == []


def test_load_roster_failure_raises(make_client):
    client, _ = make_client(lambda r: httpx.Response(500, json={"message": "boom"}))
    with pytest.raises(RemoteError, match="Error loading players: boom"):
        TeamDataService(client).load_roster("12")


def test_list_user_teams_skips_missing_joins(make_client):
    rows = [
        {"team_id": 1, "teams": {"id": 1, "name": "U12"}},
        {"team_id": 2, "teams": None},
    ]
    client, rec = make_client(lambda r: httpx.Response(200, json=rows))
    teams = TeamDataService(client).list_user_teams("u-1")
    assert [(t.team_id, t.name) for t in teams] == [("1", "U12")]
    assert rec.last.url.params["user_id"] == "eq.u-1"


def test_service_satisfies_source_protocols(make_client):
    client, _ = make_client(lambda r: httpx.Response(200, json=[]))
    svc = TeamDataService(client)
    assert isinstance(svc, RosterSource)
    assert isinstance(svc, TeamListingSource)
    assert planner_player_id(9) == "player-9"
