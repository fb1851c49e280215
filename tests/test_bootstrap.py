import logging

import httpx

from gui.app.bootstrap import create_application
from gui.services.event_bus import GUIEvent


def _backend(request):
    if request.url.path == "/auth/v1/user":
        return httpx.Response(200, json={"id": "u-1"})
    if request.url.path == "/rest/v1/players":
        return httpx.Response(200, json=[{"id": 1, "name": "Ana", "number": 7}])
    if request.url.path == "/rest/v1/team_staff":
        return httpx.Response(200, json=[{"team_id": 3, "teams": {"id": 3, "name": "U12"}}])
    return httpx.Response(404)


def _ctx(**kw):
    return create_application(
        headless=True,
        base_url="http://backend.test",
        api_key="anon",
        transport=httpx.MockTransport(_backend),
        **kw,
    )


def test_create_application_headless_wiring():
    ctx = _ctx(access_token="tok")
    try:
        assert ctx.headless is True
        assert ctx.qt_app is None
        assert ctx.viewmodel.planner is ctx.planner
        assert ctx.metadata["base_url"] == "http://backend.test"
        assert [e.name for e in ctx.timing.events] == ["remote_services", "planner"]
        assert ctx.duration_s >= 0
    finally:
        ctx.shutdown()


def test_signed_in_user_loads_team_roster_through_context():
    ctx = _ctx(access_token="tok")
    try:
        user = ctx.session.current_user()
        ctx.viewmodel.initialize("3", user)
        assert [p.id for p in ctx.planner.get_roster()] == ["player-1"]
        assert ctx.viewmodel.handle_drop(0, "player-1").value == "success"
    finally:
        ctx.shutdown()


def test_logging_service_attached_and_publishing():
    ctx = _ctx(access_token=None)
    seen = []
    ctx.bus.subscribe(GUIEvent.LOG_RECORD_ADDED, lambda e: seen.append(e.payload["message"]))
    try:
        assert ctx.logging_service.attached
        logging.getLogger("bootstrap-test").warning("hello")
        assert "hello" in seen
    finally:
        ctx.shutdown()
    assert not ctx.logging_service.attached


def test_without_token_the_planner_runs_as_guest():
    ctx = _ctx(access_token="", attach_logging=False)
    try:
        assert ctx.session.current_user() is None
        ctx.viewmodel.initialize(None, None)
        assert ctx.planner.team_id == "guest"
    finally:
        ctx.shutdown()
