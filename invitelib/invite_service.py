# invitelib/invite_service.py
"""
InviteSheetService - the four operations the API and the batch jobs call.

Each operation fetches its own snapshot, decides in memory, and issues at
most one batchUpdate. There is no locking and no version check against the
sheet: if two passes race, whichever batchUpdate lands last wins on the cells
they share, and a Duplicate marking computed from a stale snapshot can be
silently overwritten. That is accepted; only one reconciliation pass is
expected to run at a time.

Timestamps are always passed in by the caller.
"""

from __future__ import annotations

import logging
from typing import Any, List, Sequence

from invitelib import reconcile
from invitelib.sheet_contract import FULL_SPAN, LISTING_SPAN
from invitelib.sheets import SheetStore

log = logging.getLogger(__name__)


class InviteSheetService:
    def __init__(self, store: SheetStore, sheet_name: str):
        self.store = store
        self.sheet_name = sheet_name

    def get_sheet_data(self) -> List[List[Any]]:
        """Outstanding requests: every row whose status (column J) is empty."""
        table = self.store.fetch_range(self.sheet_name, LISTING_SPAN)
        return reconcile.unprocessed_rows(table)

    def get_new_invites(self) -> int:
        table = self.store.fetch_range(self.sheet_name, LISTING_SPAN)
        return reconcile.count_new(table)

    def update_invite_status(self, emails: Sequence[str], status: str, timestamp: str) -> None:
        table = self.store.fetch_range(self.sheet_name, FULL_SPAN)
        writes = reconcile.apply_status(table, emails, status, timestamp)
        if not writes:
            log.info("no matching rows for %d email(s), nothing to update", len(emails))
            return

        sheet_id = self.store.resolve_sheet_id(self.sheet_name)
        self.store.apply_batch(sheet_id, writes)
        log.info("set status=%s on %d row(s)", status, len(writes))

    def update_duplicate_requests(self, timestamp: str) -> int:
        """Mark repeat requests as Duplicate. Returns the number of rows marked."""
        # Resolve first so a bad tab name fails before any read or write
        sheet_id = self.store.resolve_sheet_id(self.sheet_name)
        table = self.store.fetch_range(self.sheet_name, FULL_SPAN)
        writes = reconcile.mark_duplicates(table, timestamp)
        if not writes:
            log.info("no duplicate requests in %d rows", len(table))
            return 0

        for w in writes:
            log.debug("duplicate: %s", w.to_a1(self.sheet_name))
        self.store.apply_batch(sheet_id, writes)
        log.info("marked %d duplicate request(s)", len(writes))
        return len(writes)
