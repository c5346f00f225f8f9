"""
Dashboard matrix of users x events.

Works on the JSON shapes returned by ``GET /events`` and ``GET /users`` so the
server-rendered pages and the client stores build the same grid.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

EQUIPMENT_TYPES = ("ball", "pump", "overboots")
EQUIPMENT_LABELS = {"ball": "Ball", "pump": "Pump", "overboots": "Overboots"}
EQUIPMENT_ICONS = {"ball": "⚽", "pump": "🔧", "overboots": "👟"}
MAX_ADDITIONAL_PLAYERS = 3


@dataclass
class GridCell:
    event: dict
    attendance: Optional[dict]
    editable: bool

    @property
    def status(self) -> Optional[str]:
        return self.attendance.get("status") if self.attendance else None

    @property
    def additional_players(self) -> int:
        if not self.attendance or self.status != "confirmed":
            return 0
        return self.attendance.get("additional_players") or 0

    @property
    def equipment_types(self) -> List[str]:
        if not self.attendance:
            return []
        return [item["type"] for item in self.attendance.get("equipment") or []]

    @property
    def comment(self) -> Optional[str]:
        return self.attendance.get("comment") if self.attendance else None


@dataclass
class GridRow:
    user: dict
    cells: List[GridCell] = field(default_factory=list)


def find_attendance(event: dict, user_id: str) -> Optional[dict]:
    for attendance in event.get("attendances") or []:
        if attendance.get("user_id") == user_id:
            return attendance
    return None


def build_grid(events: List[dict], users: List[dict], viewer_id: Optional[str]) -> List[GridRow]:
    """
    One row per active user, one cell per event. Inactive users are hidden
    from the grid even though their attendance rows remain on the events.
    Only the viewer's own cells are editable.
    """
    rows = []
    for user in users:
        if not user.get("is_active", True):
            continue
        row = GridRow(user=user)
        for event in events:
            row.cells.append(
                GridCell(
                    event=event,
                    attendance=find_attendance(event, user["id"]),
                    editable=user["id"] == viewer_id,
                )
            )
        rows.append(row)
    return rows


def attendance_form_defaults(event: dict, user_id: str) -> Dict[str, object]:
    """Pre-populates the attendance form from an existing submission, if any."""
    attendance = find_attendance(event, user_id)
    if attendance is None:
        return {
            "exists": False,
            "status": "confirmed",
            "additional_players": 0,
            "comment": "",
            "equipment": [],
        }
    return {
        "exists": True,
        "status": attendance.get("status", "confirmed"),
        "additional_players": attendance.get("additional_players") or 0,
        "comment": attendance.get("comment") or "",
        "equipment": [item["type"] for item in attendance.get("equipment") or []],
    }
