"""Application bootstrap for the lineup planner.

Responsibilities:
 - Optional headless bootstrap (tests, CLI) that never touches PyQt6
 - Attaching the in-memory logging service to the root logger
 - Wiring remote client, session, permission and team data services
 - Building the planner and its view model around a shared EventBus
 - Returning a single context object with references to all of the above

PyQt6 is imported inside ``create_application`` only when a QApplication
is requested, so importing this module stays cheap.
"""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from config import settings
from core.remote_client import RemoteStoreClient
from gui.services.error_surface import ErrorSurface
from gui.services.event_bus import EventBus
from gui.services.logging_service import LoggingService
from gui.services.permission_cache import PermissionCache
from gui.services.permissions import PermissionService
from gui.services.session_service import SessionService
from gui.services.team_data_service import TeamDataService
from gui.viewmodels.lineup_planner_viewmodel import LineupPlannerViewModel
from planning.lineup_planner import LineupPlanner
from .timing import TimingLogger

__all__ = ["AppContext", "create_application"]

_log = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Container with references created during bootstrap.

    Attributes
    ----------
    qt_app: The QApplication instance (None when headless)
    headless: Whether headless bootstrap was used
    bus: Event bus shared by the services, the view model and the view
    client: Remote store client (close via ``shutdown``)
    viewmodel: Planner view model, ready for ``initialize``
    duration_s: Total elapsed seconds for bootstrap
    """

    qt_app: Optional[Any]
    headless: bool
    bus: EventBus
    logging_service: LoggingService
    client: RemoteStoreClient
    session: SessionService
    permissions: PermissionService
    team_data: TeamDataService
    errors: ErrorSurface
    planner: LineupPlanner
    viewmodel: LineupPlannerViewModel
    timing: TimingLogger
    duration_s: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    def shutdown(self) -> None:
        self.logging_service.detach_root()
        self.client.close()


def _create_qapplication() -> Any:  # pragma: no cover - requires a display / offscreen
    from PyQt6.QtWidgets import QApplication

    return QApplication.instance() or QApplication(sys.argv[:1])


def create_application(
    *,
    headless: bool = False,
    base_url: str | None = None,
    api_key: str | None = None,
    access_token: str | None = None,
    transport: httpx.BaseTransport | None = None,
    attach_logging: bool = True,
    log_level: int | None = None,
) -> AppContext:
    """Create and wire the planner application context.

    Parameters
    ----------
    headless: Skip QApplication creation (tests / CLI).
    base_url, api_key, access_token: Override ``config.settings`` values.
    transport: httpx transport, e.g. ``httpx.MockTransport`` in tests.
    attach_logging: Attach the ring-buffer log handler to the root logger.
    log_level: Lower the root logger to this level when attaching; by default
        the level set by ``configure_logging`` is kept.
    """
    started = time.perf_counter()
    timing = TimingLogger()

    qt_app = None
    if not headless:
        with timing.measure("create_qapplication"):
            qt_app = _create_qapplication()

    bus = EventBus()
    logging_service = LoggingService(bus)
    if attach_logging:
        logging_service.attach_root(log_level)

    token = access_token if access_token is not None else settings.ACCESS_TOKEN
    with timing.measure("remote_services"):
        client = RemoteStoreClient(base_url, api_key=api_key, transport=transport)
        session = SessionService(client, access_token=token)
        permissions = PermissionService(client, session, PermissionCache(), bus=bus)
        team_data = TeamDataService(client)

    with timing.measure("planner"):
        errors = ErrorSurface(bus)
        planner = LineupPlanner()
        viewmodel = LineupPlannerViewModel(
            planner,
            roster_source=team_data,
            team_source=team_data,
            bus=bus,
            errors=errors,
        )
    timing.stop()

    ctx = AppContext(
        qt_app=qt_app,
        headless=headless,
        bus=bus,
        logging_service=logging_service,
        client=client,
        session=session,
        permissions=permissions,
        team_data=team_data,
        errors=errors,
        planner=planner,
        viewmodel=viewmodel,
        timing=timing,
        duration_s=time.perf_counter() - started,
        metadata={"base_url": client.base_url},
    )
    _log.debug("Bootstrap finished in %.3fs: %s", ctx.duration_s, timing.as_dict())
    return ctx
