#!/usr/bin/env python3
"""
New Invites Alert - tells the admins when requests are waiting.

What it does:
- Counts rows in the requests tab whose status (column J) is empty
- If there are any, sends an Apprise notification with the count
- If the sheet can't be read, sends a failure notification instead

Env:
  GOOGLE_CREDENTIALS_JSON or GOOGLE_CREDENTIALS_FILE
  GOOGLE_SPREADSHEET_ID, GOOGLE_SHEET_NAME
  APPRISE_URL, APPRISE_TAG (optional), EMAIL_TEMPLATE_PATH (optional)
"""

from __future__ import annotations

from invitelib.config import load_config, require_valid
from invitelib.errors import InviteSheetError, NotificationError, StoreUnavailable
from invitelib.invite_service import InviteSheetService
from invitelib.logs import setup_logging
from invitelib.notifier import AppriseNotifier
from invitelib.sheets import GoogleSheetsStore

log = setup_logging("new-invites-alert")


def run(service: InviteSheetService, notifier: AppriseNotifier) -> int:
    try:
        count = service.get_new_invites()
    except StoreUnavailable as e:
        # The store error is what gets surfaced; a failed alert is only logged
        try:
            notifier.send("Invite check failed", f"Could not read the invite requests sheet: {e}")
        except NotificationError as ne:
            log.error("Failure notification not sent: %s", ne)
        raise e

    if count == 0:
        log.info("No new invite requests")
        return 0

    noun = "request" if count == 1 else "requests"
    notifier.send(
        f"{count} new Slack invite {noun}",
        f"There are {count} new Slack invite {noun} waiting for review.",
    )
    log.info("Alerted admins about %d new invite %s", count, noun)
    return count


def main() -> int:
    try:
        cfg = require_valid(load_config(), need_notifier=True)
        service = InviteSheetService(GoogleSheetsStore.from_config(cfg), cfg.sheet_name)
        notifier = AppriseNotifier(cfg.apprise_url, cfg.apprise_tag, cfg.email_template_path, cfg.timeout_seconds)
        run(service, notifier)
    except InviteSheetError as e:
        log.error("New invites alert failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
