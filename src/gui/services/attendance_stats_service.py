"""AttendanceStatsService

Aggregates attendance rows for the statistics page:
 - filter_by_period(records, period, today, start, end)
 - global_stats(records): status counts + attendance rate
 - player_stats(players, records): per-player counts + rate, best first

Attendance rate = (present + late) / (total - excused) * 100, rounded to
one decimal, 0.0 when there are no effective sessions. Pure functions over
already-loaded rows; ``load`` fetches them through ``TeamTableService``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from core.remote_client import RemoteStoreClient
from gui.models import AttendanceRecord, PlayerRecord
from .team_records_service import ATTENDANCE, PlayerRecordsService, TeamTableService

__all__ = [
    "PERIODS",
    "AttendanceCounts",
    "PlayerAttendance",
    "AttendanceStatsService",
    "filter_by_period",
    "global_stats",
    "player_stats",
]

PERIODS = ("week", "month", "season", "custom")


@dataclass
class AttendanceCounts:
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    total: int = 0

    def add(self, status: str) -> None:
        self.total += 1
        if status == "PRESENT":
            self.present += 1
        elif status == "ABSENT":
            self.absent += 1
        elif status == "LATE":
            self.late += 1
        elif status == "EXCUSED":
            self.excused += 1

    @property
    def rate(self) -> float:
        effective = self.total - self.excused
        if effective <= 0:
            return 0.0
        return round((self.present + self.late) / effective * 100, 1)


@dataclass
class PlayerAttendance:
    player: PlayerRecord
    counts: AttendanceCounts

    @property
    def band(self) -> str:
        if self.counts.rate >= 80:
            return "high"
        if self.counts.rate >= 60:
            return "medium"
        return "low"


def _period_bounds(
    period: str, today: date, start: Optional[date], end: Optional[date]
) -> Optional[Tuple[date, date]]:
    if period == "week":
        return today - timedelta(days=7), today
    if period == "month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    if period == "custom":
        if start is None or end is None:
            raise ValueError("custom period needs both start and end dates")
        if start > end:
            raise ValueError("start date must not be after end date")
        return start, end
    return None  # season / unknown: everything


def filter_by_period(
    records: Iterable[AttendanceRecord],
    period: str,
    *,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[AttendanceRecord]:
    bounds = _period_bounds(period, today or date.today(), start, end)
    if bounds is None:
        return list(records)
    low, high = bounds
    return [r for r in records if low <= date.fromisoformat(r.iso_date) <= high]


def global_stats(records: Iterable[AttendanceRecord]) -> AttendanceCounts:
    counts = AttendanceCounts()
    for record in records:
        counts.add(record.status)
    return counts


def player_stats(
    players: Sequence[PlayerRecord], records: Iterable[AttendanceRecord]
) -> List[PlayerAttendance]:
    """Per-player counts, highest attendance rate first (number order on ties)."""
    ordered = sorted(players, key=lambda p: p.number if p.number is not None else 999)
    by_id = {p.id: PlayerAttendance(player=p, counts=AttendanceCounts()) for p in ordered}
    for record in records:
        entry = by_id.get(record.player_id)
        if entry is not None:
            entry.counts.add(record.status)
    return sorted(by_id.values(), key=lambda e: e.counts.rate, reverse=True)


class AttendanceStatsService:
    def __init__(self, client: RemoteStoreClient) -> None:
        self._attendance = TeamTableService(client, ATTENDANCE)
        self._players = PlayerRecordsService(client)

    def load(self, team_id: str) -> Tuple[List[PlayerRecord], List[AttendanceRecord]]:
        players = self._players.list_players(team_id)
        rows = self._attendance.list_for_team(team_id)
        return players, [AttendanceRecord.from_row(r) for r in rows]

    def summarize(
        self,
        team_id: str,
        period: str = "week",
        *,
        today: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Tuple[AttendanceCounts, List[PlayerAttendance]]:
        players, records = self.load(team_id)
        filtered = filter_by_period(records, period, today=today, start=start, end=end)
        return global_stats(filtered), player_stats(players, filtered)
