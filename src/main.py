"""CLI entry point for the lineup planner's backend data.

Prints JSON so the output can be piped into other tools:
 - teams:  teams the signed-in user is staff of
 - roster: planner-ready roster of one team (ordered by jersey number)
 - stats:  attendance summary of one team for a period
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from typing import Any

from config import settings
from core.remote_client import RemoteError, RemoteStoreClient
from gui.services.attendance_stats_service import PERIODS, AttendanceStatsService
from gui.services.logging_service import configure_logging
from gui.services.session_service import SessionRequiredError, SessionService
from gui.services.team_data_service import TeamDataService
from planning.lineup_planner import sort_players_by_number


def _client(args: argparse.Namespace) -> RemoteStoreClient:
    return RemoteStoreClient(args.url, api_key=args.key)


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def cmd_teams(args: argparse.Namespace) -> None:
    with _client(args) as client:
        session = SessionService(client, access_token=args.token or settings.ACCESS_TOKEN)
        user = session.require_session().user
        teams = TeamDataService(client).list_user_teams(user.id)
    _emit([{"team_id": t.team_id, "name": t.name} for t in teams])


def cmd_roster(args: argparse.Namespace) -> None:
    with _client(args) as client:
        client.set_access_token(args.token or settings.ACCESS_TOKEN)
        players = TeamDataService(client).load_roster(args.team)
    _emit([{"id": p.id, "name": p.name, "number": p.number} for p in sort_players_by_number(players)])


def cmd_stats(args: argparse.Namespace) -> None:
    start = date.fromisoformat(args.start) if args.start else None
    end = date.fromisoformat(args.end) if args.end else None
    with _client(args) as client:
        client.set_access_token(args.token or settings.ACCESS_TOKEN)
        overall, per_player = AttendanceStatsService(client).summarize(
            args.team, args.period, start=start, end=end
        )
    _emit(
        {
            "period": args.period,
            "total": overall.total,
            "present": overall.present,
            "absent": overall.absent,
            "late": overall.late,
            "excused": overall.excused,
            "rate": overall.rate,
            "players": [
                {
                    "name": entry.player.name,
                    "number": entry.player.number,
                    "total": entry.counts.total,
                    "rate": entry.counts.rate,
                    "band": entry.band,
                }
                for entry in per_player
            ],
        }
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lineup-planner")
    p.add_argument("--url", default=None, help="Backend base URL (defaults to settings)")
    p.add_argument("--key", default=None, help="Backend API key")
    p.add_argument("--token", default=None, help="User access token")
    p.add_argument("--log-level", default="WARNING")
    sub = p.add_subparsers(dest="command", required=True)

    teams = sub.add_parser("teams", help="List the signed-in user's teams")
    teams.set_defaults(func=cmd_teams)

    roster = sub.add_parser("roster", help="Print a team's roster")
    roster.add_argument("--team", required=True, help="Team ID")
    roster.set_defaults(func=cmd_roster)

    stats = sub.add_parser("stats", help="Attendance statistics for a team")
    stats.add_argument("--team", required=True, help="Team ID")
    stats.add_argument("--period", choices=PERIODS, default="season")
    stats.add_argument("--start", required=False, help="Custom period start (YYYY-MM-DD)")
    stats.add_argument("--end", required=False, help="Custom period end (YYYY-MM-DD)")
    stats.set_defaults(func=cmd_stats)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        args.func(args)
    except SessionRequiredError as e:
        print(f"Not signed in (see {e.redirect_url})", file=sys.stderr)
        return 2
    except (RemoteError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
