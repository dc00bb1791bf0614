# invitelib/errors.py
"""
Error kinds surfaced by the invite sheet layer.

Rows that are too short to carry an email are NOT errors. The engine skips
them silently.
"""

from __future__ import annotations


class InviteSheetError(RuntimeError):
    """Base class for everything raised by invitelib."""


class StoreUnavailable(InviteSheetError):
    """Transport, auth or quota failure talking to Google Sheets."""


class SheetNotFound(InviteSheetError):
    def __init__(self, sheet_name: str):
        super().__init__(f"sheet with name '{sheet_name}' not found")
        self.sheet_name = sheet_name


class ConfigError(InviteSheetError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class NotificationError(InviteSheetError):
    """Apprise did not accept the notification."""
