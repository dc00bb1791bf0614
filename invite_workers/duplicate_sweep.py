#!/usr/bin/env python3
"""
Duplicate Sweep - marks repeat Slack invite requests as Duplicate.

What it does:
- Reads the whole requests tab (A:K)
- The first request for an email is the canonical one
- Later requests for the same email get J="Duplicate", K=<run timestamp>
  when either they or the first request are still new
- One batchUpdate per run, nothing written when there are no duplicates

Env:
  GOOGLE_CREDENTIALS_JSON or GOOGLE_CREDENTIALS_FILE
  GOOGLE_SPREADSHEET_ID, GOOGLE_SHEET_NAME
  LOG_LEVEL (default info)
"""

from __future__ import annotations

import datetime as dt

from invitelib.config import load_config, require_valid
from invitelib.errors import InviteSheetError
from invitelib.invite_service import InviteSheetService
from invitelib.logs import setup_logging
from invitelib.sheets import GoogleSheetsStore

log = setup_logging("duplicate-sweep")


def now_rfc3339() -> str:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def run(service: InviteSheetService, timestamp: str) -> int:
    marked = service.update_duplicate_requests(timestamp)
    log.info("Duplicate sweep done: %d row(s) marked", marked)
    return marked


def main() -> int:
    try:
        cfg = require_valid(load_config())
        service = InviteSheetService(GoogleSheetsStore.from_config(cfg), cfg.sheet_name)
        run(service, now_rfc3339())
    except InviteSheetError as e:
        log.error("Duplicate sweep failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
