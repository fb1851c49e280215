from datetime import date

import httpx
import pytest

from gui.models import AttendanceRecord, PlayerRecord
from gui.services.attendance_stats_service import (
    AttendanceCounts,
    AttendanceStatsService,
    filter_by_period,
    global_stats,
    player_stats,
)

TODAY = date(2024, 3, 15)


def _rec(pid, day, status):
    return AttendanceRecord(player_id=pid, iso_date=day, status=status)


RECORDS = [
    _rec("1", "2024-03-14", "PRESENT"),
    _rec("1", "2024-03-10", "LATE"),
    _rec("1", "2024-03-01", "ABSENT"),
    _rec("2", "2024-03-14", "EXCUSED"),
    _rec("2", "2024-02-20", "PRESENT"),
    _rec("3", "2024-01-05", "ABSENT"),
]


def test_rate_formula():
    c = AttendanceCounts()
    for s in ["PRESENT", "LATE", "ABSENT", "EXCUSED"]:
        c.add(s)
    assert c.total == 4
    assert c.rate == 66.7
    assert AttendanceCounts().rate == 0.0
    only_excused = AttendanceCounts()
    only_excused.add("EXCUSED")
    assert only_excused.rate == 0.0


def test_filter_week_and_month():
    week = filter_by_period(RECORDS, "week", today=TODAY)
    assert {r.iso_date for r in week} == {"2024-03-14", "2024-03-10"}
    month = filter_by_period(RECORDS, "month", today=TODAY)
    assert len(month) == 4
    assert len(filter_by_period(RECORDS, "season", today=TODAY)) == 6


def test_filter_custom_period():
    picked = filter_by_period(
        RECORDS, "custom", start=date(2024, 2, 1), end=date(2024, 2, 29)
    )
    assert picked == [RECORDS[4]]
    with pytest.raises(ValueError):
        filter_by_period(RECORDS, "custom", start=date(2024, 2, 1))
    with pytest.raises(ValueError):
        filter_by_period(RECORDS, "custom", start=date(2024, 3, 1), end=date(2024, 2, 1))


def test_global_stats():
    counts = global_stats(RECORDS)
    assert (counts.present, counts.late, counts.absent, counts.excused) == (2, 1, 2, 1)
    assert counts.rate == 60.0


def test_player_stats_sorted_by_rate_then_number():
    players = [
        PlayerRecord(id="3", team_id="t", name="C", number=None),
        PlayerRecord(id="1", team_id="t", name="A", number=10),
        PlayerRecord(id="2", team_id="t", name="B", number=4),
        PlayerRecord(id="4", team_id="t", name="D", number=2),
    ]
    stats = player_stats(players, RECORDS)
    assert [s.player.id for s in stats] == ["2", "1", "4", "3"]
    assert stats[0].counts.rate == 100.0
    assert stats[0].band == "high"
    assert stats[1].counts.rate == 66.7
    assert stats[1].band == "medium"
    assert stats[-1].band == "low"


def test_summarize_loads_players_and_attendance(make_client):
    def handler(request):
        if request.url.path == "/rest/v1/players":
            return httpx.Response(200, json=[{"id": 1, "team_id": 5, "name": "A", "number": 4}])
        return httpx.Response(
            200,
            json=[
                {"player_id": 1, "date": "2024-03-14T00:00:00", "status": "present"},
                {"player_id": 1, "date": "2024-03-13", "status": "absent"},
            ],
        )

    client, rec = make_client(handler)
    overall, per_player = AttendanceStatsService(client).summarize("5", "week", today=TODAY)
    assert overall.total == 2
    assert overall.rate == 50.0
    assert per_player[0].counts.present == 1
    assert {r.url.path for r in rec.requests} == {"/rest/v1/players", "/rest/v1/attendance"}
