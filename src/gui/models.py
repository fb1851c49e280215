"""GUI-facing lightweight models and adapters."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class TeamEntry:
    team_id: str
    name: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TeamEntry":
        return cls(team_id=str(row["id"]), name=row.get("name") or "")


@dataclass(frozen=True)
class PlayerRecord:
    """A persisted ``players`` row as edited on the players page."""

    id: str
    team_id: str
    name: str
    number: Optional[int] = None
    position: Optional[str] = None
    birthdate: Optional[str] = None  # YYYY-MM-DD
    notes: Optional[str] = None
    active: bool = True

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PlayerRecord":
        number = row.get("number")
        return cls(
            id=str(row["id"]),
            team_id=str(row.get("team_id") or ""),
            name=row.get("name") or "",
            number=int(number) if number is not None else None,
            position=row.get("position"),
            birthdate=row.get("birthdate"),
            notes=row.get("notes"),
            active=bool(row.get("active", True)),
        )


@dataclass(frozen=True)
class AttendanceRecord:
    player_id: str
    iso_date: str  # YYYY-MM-DD
    status: str  # PRESENT|ABSENT|LATE|EXCUSED|PENDING

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AttendanceRecord":
        return cls(
            player_id=str(row["player_id"]),
            iso_date=str(row["date"])[:10],
            status=str(row.get("status") or "PENDING").upper(),
        )


__all__ = ["TeamEntry", "PlayerRecord", "AttendanceRecord"]
