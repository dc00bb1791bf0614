# invitelib/sheet_contract.py
"""
Positional contract for the invite requests tab.

The sheet is written by a form, so there are no headers we can trust. Columns
are fixed:

  A..C  passenger (timestamp, name, role)
  D     email (dedup key)
  E..I  passenger (company, experience, reasons, source, ...)
  J     status flag ("" = new)
  K     status timestamp

Rows come back from the API sparse: trailing empty cells are simply missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple


EMAIL_COL = 3
STATUS_COL = 9
STATUS_TS_COL = 10

# Width of a fully written row (A..K)
ROW_WIDTH = STATUS_TS_COL + 1

MIN_IDENTITY_FIELDS = EMAIL_COL + 1

STATUS_DUPLICATE = "Duplicate"

# A1 column spans used for reads
LISTING_SPAN = "A:J"
FULL_SPAN = "A:K"


def field(row: Sequence[Any], idx: int) -> Any:
    """Cell value at idx, "" when the row stops short or the cell is null."""
    if idx >= len(row):
        return ""
    v = row[idx]
    return "" if v is None else v


def pad_row(row: Sequence[Any], width: int = ROW_WIDTH) -> List[Any]:
    """
    Copy of row padded with "" up to width.

    Fields past width are kept as-is; callers only ever write the first
    `width` of them.
    """
    out = list(row)
    if len(out) < width:
        out.extend([""] * (width - len(out)))
    return out


def has_identity(row: Sequence[Any]) -> bool:
    return len(row) >= MIN_IDENTITY_FIELDS


def is_unprocessed(row: Sequence[Any]) -> bool:
    # Single definition of "new", shared by the listing and the counter
    return len(row) <= STATUS_COL or field(row, STATUS_COL) == ""


@dataclass(frozen=True)
class InviteRow:
    """
    One request row pinned to its position in the snapshot.

    Position is the only row identity the sheet has.
    """

    position: int
    fields: Tuple[Any, ...]

    @classmethod
    def from_values(cls, position: int, row: Sequence[Any]) -> "InviteRow":
        return cls(position=position, fields=tuple(row))

    @property
    def email(self) -> Any:
        return field(self.fields, EMAIL_COL)

    @property
    def status(self) -> Any:
        return field(self.fields, STATUS_COL)

    @property
    def status_timestamp(self) -> Any:
        return field(self.fields, STATUS_TS_COL)

    @property
    def has_identity(self) -> bool:
        return has_identity(self.fields)

    @property
    def is_unprocessed(self) -> bool:
        return is_unprocessed(self.fields)

    def with_status(self, status: str, timestamp: str) -> List[Any]:
        """Full A..K field list with J/K replaced, everything else untouched."""
        out = pad_row(self.fields)[:ROW_WIDTH]
        out[STATUS_COL] = status
        out[STATUS_TS_COL] = timestamp
        return out


def iter_rows(table: Sequence[Sequence[Any]]):
    for position, row in enumerate(table):
        yield InviteRow.from_values(position, row)
