#!/usr/bin/env python3
"""
Prints the outstanding (status-less) invite rows as JSON.

Env:
  GOOGLE_CREDENTIALS_JSON or GOOGLE_CREDENTIALS_FILE
  GOOGLE_SPREADSHEET_ID, GOOGLE_SHEET_NAME
"""

from __future__ import annotations

import json
import sys

from invitelib.config import load_config, require_valid
from invitelib.errors import InviteSheetError
from invitelib.invite_service import InviteSheetService
from invitelib.logs import setup_logging
from invitelib.sheets import GoogleSheetsStore

log = setup_logging("dump-sheet")


def main() -> int:
    try:
        cfg = require_valid(load_config())
        data = InviteSheetService(GoogleSheetsStore.from_config(cfg), cfg.sheet_name).get_sheet_data()
    except InviteSheetError as e:
        log.error("Failed to get sheet data: %s", e)
        return 1

    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
