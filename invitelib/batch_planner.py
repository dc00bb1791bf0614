# invitelib/batch_planner.py
"""
Batch update planner.

Turns "set J/K on row R" decisions into grid-addressed writes, and renders
those writes as Sheets API `updateCells` requests. Everything here is pure:
bounds come from the row position and the column constants only, no store
calls.

Ranges are zero-based and half-open, like the API's GridRange.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from invitelib.sheet_contract import ROW_WIDTH, STATUS_COL, STATUS_TS_COL


@dataclass(frozen=True)
class CellRegionWrite:
    row_start: int
    row_end: int
    col_start: int
    col_end: int
    values: Tuple[Tuple[Any, ...], ...]  # row-major

    def __post_init__(self):
        if self.row_end <= self.row_start or self.col_end <= self.col_start:
            raise ValueError(f"Empty region: rows [{self.row_start},{self.row_end}) cols [{self.col_start},{self.col_end})")
        if len(self.values) != self.row_end - self.row_start:
            raise ValueError("values must have one entry per row in the region")
        width = self.col_end - self.col_start
        for r in self.values:
            if len(r) != width:
                raise ValueError(f"row of {len(r)} values does not fit {width} columns")

    def to_a1(self, sheet_name: str) -> str:
        """Human-readable A1 range, used in logs."""
        return (
            f"'{sheet_name}'!{col_letter(self.col_start + 1)}{self.row_start + 1}:"
            f"{col_letter(self.col_end)}{self.row_end}"
        )


def col_letter(n: int) -> str:
    s = ""
    while n > 0:
        n, r = divmod(n - 1, 26)
        s = chr(65 + r) + s
    return s


def row_rewrite(position: int, fields: Sequence[Any]) -> CellRegionWrite:
    """Overwrite A..K of one row. fields must already be padded to 11."""
    return CellRegionWrite(
        row_start=position,
        row_end=position + 1,
        col_start=0,
        col_end=ROW_WIDTH,
        values=(tuple(fields[:ROW_WIDTH]),),
    )


def status_write(position: int, status: str, timestamp: str) -> CellRegionWrite:
    """Overwrite J..K of one row only."""
    return CellRegionWrite(
        row_start=position,
        row_end=position + 1,
        col_start=STATUS_COL,
        col_end=STATUS_TS_COL + 1,
        values=((status, timestamp),),
    )


def _cell(value: Any) -> Dict[str, Any]:
    return {"userEnteredValue": {"stringValue": "" if value is None else str(value)}}


def to_request(write: CellRegionWrite, sheet_id: int) -> Dict[str, Any]:
    return {
        "updateCells": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": write.row_start,
                "endRowIndex": write.row_end,
                "startColumnIndex": write.col_start,
                "endColumnIndex": write.col_end,
            },
            "rows": [{"values": [_cell(v) for v in row]} for row in write.values],
            "fields": "userEnteredValue",
        }
    }


def build_batch_body(writes: Sequence[CellRegionWrite], sheet_id: int) -> Dict[str, List[Dict[str, Any]]]:
    return {"requests": [to_request(w, sheet_id) for w in writes]}
