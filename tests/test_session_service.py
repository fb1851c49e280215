import httpx
import pytest

from gui.services.session_service import (
    MissingTeamIdError,
    SessionRequiredError,
    SessionService,
    get_url_param,
    require_team_id,
)


def _auth_backend(valid_token="tok-1"):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/auth/v1/user":
            if request.headers.get("authorization") == f"Bearer {valid_token}":
                return httpx.Response(200, json={"id": "u-1", "email": "coach@example.com"})
            return httpx.Response(401, json={"msg": "invalid JWT"})
        if path == "/auth/v1/token":
            return httpx.Response(
                200,
                json={"access_token": valid_token, "user": {"id": "u-1", "email": "coach@example.com"}},
            )
        if path == "/auth/v1/logout":
            return httpx.Response(204)
        return httpx.Response(404)

    return handler


def test_no_token_means_no_session(make_client):
    client, rec = make_client(_auth_backend())
    svc = SessionService(client)
    assert svc.get_session() is None
    assert svc.check_auth() is False
    assert rec.requests == []


def test_valid_token_resolves_user_once(make_client):
    client, rec = make_client(_auth_backend())
    svc = SessionService(client, access_token="tok-1")
    session = svc.get_session()
    assert session.user.id == "u-1"
    assert svc.current_user().email == "coach@example.com"
    assert len(rec.requests) == 1


def test_rejected_token_is_no_session(make_client):
    client, _ = make_client(_auth_backend())
    svc = SessionService(client, access_token="expired")
    assert svc.get_session() is None
    with pytest.raises(SessionRequiredError) as info:
        svc.require_session()
    assert info.value.redirect_url == "/pages/index.html"


def test_server_error_propagates_but_check_auth_is_false(make_client):
    client, _ = make_client(lambda r: httpx.Response(503, json={"message": "down"}))
    svc = SessionService(client, access_token="tok-1")
    assert svc.check_auth() is False


def test_get_session_with_retry_polls(make_client):
    client, rec = make_client(_auth_backend())
    sleeps = []
    svc = SessionService(client, access_token="expired", sleep=sleeps.append)
    assert svc.get_session_with_retry(max_retries=3, delay=0.1) is None
    assert sleeps == [0.1, 0.1, 0.1]
    assert len(rec.requests) == 4


def test_sign_in_then_sign_out(make_client):
    client, rec = make_client(_auth_backend())
    svc = SessionService(client)
    session = svc.sign_in_with_password("coach@example.com", "secret")
    assert session.user.id == "u-1"
    assert rec.last.url.params["grant_type"] == "password"
    assert rec.last_json() == {"email": "coach@example.com", "password": "secret"}
    assert client.access_token == "tok-1"
    assert svc.sign_out() == "/pages/index.html"
    assert rec.last.url.path == "/auth/v1/logout"
    assert svc.get_session() is None
    assert client.access_token is None


def test_sign_out_clears_state_even_on_failure(make_client):
    client, _ = make_client(lambda r: httpx.Response(500))
    svc = SessionService(client, access_token="tok-1")
    svc.sign_out()
    assert client.access_token is None
    assert svc.get_session() is None


def test_url_params():
    url = "https://app.example.com/pages/planner.html?team_id=12&x=1"
    assert get_url_param(url, "team_id") == "12"
    assert get_url_param(url, "missing") is None
    assert get_url_param(None, "team_id") is None
    assert require_team_id(url) == "12"
    with pytest.raises(MissingTeamIdError) as info:
        require_team_id("https://app.example.com/pages/planner.html")
    assert info.value.redirect_url == "/pages/teams.html"
