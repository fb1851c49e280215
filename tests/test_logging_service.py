import io
import logging

import httpx
import pytest

from gui.app.bootstrap import create_application
from gui.services.event_bus import EventBus, GUIEvent
from gui.services.logging_service import LoggingService, configure_logging


@pytest.fixture()
def root_level():
    root = logging.getLogger()
    saved = root.level
    yield root
    root.setLevel(saved)


@pytest.fixture()
def setup_logging(root_level):
    bus = EventBus()
    svc = LoggingService(bus, capacity=5)
    svc.attach_root(logging.DEBUG)
    yield svc, bus
    svc.detach_root()


def test_logging_capture_and_retrieve(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("planning").info("Assigned %s", "player-1")
    assert any(e.message == "Assigned player-1" for e in svc.recent())


def test_logging_capacity_eviction(setup_logging):
    svc, _ = setup_logging
    for i in range(10):
        logging.getLogger("cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5
    assert recents[0].message == "M5"
    assert [e.message for e in svc.recent(limit=2)] == ["M8", "M9"]


def test_logging_filtering(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("core.remote_client").warning("Retrying GET /rest/v1/players")
    logging.getLogger("gui.viewmodels").info("Drop on quarter 1")
    warnings = svc.filter(level="WARNING")
    assert warnings and all(e.level == "WARNING" for e in warnings)
    remote = svc.filter(name_contains="remote")
    assert remote and all("remote" in e.name for e in remote)
    svc.clear()
    assert svc.recent() == []


def test_logging_event_emission(setup_logging):
    _, bus = setup_logging
    payloads = []
    bus.subscribe(GUIEvent.LOG_RECORD_ADDED, lambda evt: payloads.append(evt.payload))
    logging.getLogger("evt").warning("Something happened")
    assert payloads and payloads[-1]["level"] == "WARNING"
    assert payloads[-1]["name"] == "evt"


def test_attach_is_idempotent():
    svc = LoggingService()
    svc.attach_root()
    svc.attach_root()
    try:
        logging.getLogger("once").error("one record")
        assert len(svc.filter(name_contains="once")) == 1
    finally:
        svc.detach_root()
    assert not svc.attached


def test_configure_logging_accepts_names(root_level):
    handler = configure_logging("debug", stream=io.StringIO())
    try:
        assert handler.level == logging.DEBUG
        assert root_level.level == logging.DEBUG
        assert configure_logging("not-a-level") is handler
        assert handler.level == logging.INFO
        assert root_level.handlers.count(handler) == 1
    finally:
        root_level.removeHandler(handler)


def test_attach_root_keeps_configured_level(root_level):
    root_level.setLevel(logging.WARNING)
    svc = LoggingService()
    svc.attach_root()
    try:
        assert root_level.level == logging.WARNING
    finally:
        svc.detach_root()


def test_info_level_survives_application_startup(root_level):
    out = io.StringIO()
    handler = configure_logging("INFO", stream=out)
    ctx = create_application(
        headless=True,
        base_url="http://backend.test",
        api_key="anon",
        transport=httpx.MockTransport(lambda r: httpx.Response(404)),
    )
    try:
        log = logging.getLogger("planning.startup")
        assert not log.isEnabledFor(logging.DEBUG)
        log.debug("drop details")
        log.info("planner ready")
        assert "drop details" not in out.getvalue()
        assert "planner ready" in out.getvalue()
        assert not any(e.message == "drop details" for e in ctx.logging_service.recent())
    finally:
        ctx.shutdown()
        root_level.removeHandler(handler)
