"""Dedicated launcher module for `python -m gui` or external callers.

Delegates wiring to the bootstrap (`create_application`), resolves the
session and the team id from the URL context, then shows the planner
window. ``--url`` takes a page URL (``...?team_id=12``); ``--team-id``
sets the team directly.
"""

from __future__ import annotations

import argparse
import logging
import sys

from config import settings
from gui.app.bootstrap import create_application
from gui.services.logging_service import configure_logging
from gui.services.session_service import get_url_param

_log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lineup-planner-gui")
    p.add_argument("--url", default=None, help="Page URL carrying the team_id query parameter")
    p.add_argument("--team-id", default=None, help="Pre-select this team")
    p.add_argument("--token", default=None, help="User access token")
    p.add_argument("--log-level", default="INFO")
    return p


def resolve_team_id(args: argparse.Namespace) -> str | None:
    return args.team_id or get_url_param(args.url, settings.TEAM_ID_PARAM)


def main(argv: list[str] | None = None) -> int:  # pragma: no cover - runtime
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    ctx = create_application(access_token=args.token)
    from gui.views.lineup_planner_view import LineupPlannerView

    user = ctx.session.current_user() if ctx.session.check_auth() else None
    ctx.viewmodel.initialize(resolve_team_id(args), user)
    view = LineupPlannerView(ctx.viewmodel, ctx.bus)
    view.setWindowTitle("Lineup Planner")
    view.resize(960, 640)
    view.show()
    _log.info("Planner started in %.3fs", ctx.duration_s)
    try:
        return ctx.qt_app.exec()
    finally:
        view.close_subscriptions()
        ctx.shutdown()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
