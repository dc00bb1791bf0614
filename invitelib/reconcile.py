# invitelib/reconcile.py
"""
Row reconciliation engine.

Pure functions over one fetched snapshot (a list of sparse rows). Nothing here
talks to the network or keeps state between calls: the service fetches, calls
in here, and ships whatever writes come back in a single batch.

Rules:
- Rows shorter than 4 fields have no email and are skipped for anything
  keyed on email.
- Email matching is exact. "Test@Example.com" and " test@example.com " are
  different keys from "test@example.com".
- mark_duplicates treats the FIRST occurrence of an email as canonical.
- apply_status resolves an email to its LAST occurrence.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence

from invitelib.batch_planner import CellRegionWrite, row_rewrite, status_write
from invitelib.sheet_contract import STATUS_DUPLICATE, InviteRow, is_unprocessed, iter_rows

log = logging.getLogger(__name__)

Table = Sequence[Sequence[Any]]


def _keyed_rows(table: Table) -> Iterable[InviteRow]:
    for row in iter_rows(table):
        if not row.has_identity:
            continue
        if not isinstance(row.email, str):
            continue
        yield row


def unprocessed_rows(table: Table) -> List[List[Any]]:
    """Rows whose status flag is empty or missing, in sheet order."""
    return [list(r) for r in table if is_unprocessed(r)]


def count_new(table: Table) -> int:
    return sum(1 for r in table if is_unprocessed(r))


def mark_duplicates(table: Table, timestamp: str) -> List[CellRegionWrite]:
    """
    Stage a Duplicate marking for every repeat of an email.

    For a repeat of a key first seen at row p, the row is marked when row p
    was still new in this snapshot, or when the repeat itself is still new.
    Decisions always read the snapshot as fetched, never writes staged earlier
    in the same pass.

    Rows already flagged Duplicate are left alone, so running twice over the
    same data stages nothing the second time.
    """
    first_seen: Dict[str, InviteRow] = {}
    writes: List[CellRegionWrite] = []

    for row in _keyed_rows(table):
        first = first_seen.get(row.email)
        if first is None:
            first_seen[row.email] = row
            continue

        if row.status == STATUS_DUPLICATE:
            continue

        if first.is_unprocessed or row.is_unprocessed:
            log.debug("row %d duplicates row %d (%s)", row.position + 1, first.position + 1, row.email)
            writes.append(row_rewrite(row.position, row.with_status(STATUS_DUPLICATE, timestamp)))

    return writes


def apply_status(table: Table, keys: Sequence[str], status: str, timestamp: str) -> List[CellRegionWrite]:
    """
    Stage J/K writes for each email in keys.

    Unknown emails are skipped without error. If an email appears on several
    rows only the last one is updated.
    """
    position_by_email: Dict[str, int] = {}
    for row in _keyed_rows(table):
        position_by_email[row.email] = row.position

    writes: List[CellRegionWrite] = []
    staged = set()
    for key in keys:
        if key in staged:
            continue
        staged.add(key)
        position = position_by_email.get(key)
        if position is None:
            log.debug("email not in sheet, skipping: %s", key)
            continue
        writes.append(status_write(position, status, timestamp))

    return writes
