#!/usr/bin/env python3
"""
Invite Sheet Reconciler - Google Sheets store client

The reconciliation engine only needs three things from the sheet:
- read every row of a column span
- turn a tab name into its numeric sheetId (for grid-addressed writes)
- push a list of updateCells requests in ONE batchUpdate call

SheetStore is that contract. GoogleSheetsStore is the gspread-backed
implementation; tests use an in-memory fake.

Failure model:
- Any transport / auth / quota error becomes StoreUnavailable
- A missing tab becomes SheetNotFound
- No retries here. Callers decide.

Environment variables used (see invitelib.config):
- GOOGLE_CREDENTIALS_JSON (preferred) OR GOOGLE_CREDENTIALS_FILE
- GOOGLE_SPREADSHEET_ID
- SHEETS_TIMEOUT_SECONDS (default 30)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, List, Optional, Protocol, Sequence

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound

from invitelib.batch_planner import CellRegionWrite, build_batch_body
from invitelib.config import InviteConfig
from invitelib.errors import SheetNotFound, StoreUnavailable

log = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# gspread / google-auth / requests failures that all mean "the store is not reachable right now"
_TRANSPORT_ERRORS = (APIError, SpreadsheetNotFound, GoogleAuthError, requests.exceptions.RequestException)


# =============================================================================
# CONTRACT
# =============================================================================

class SheetStore(Protocol):
    def fetch_range(self, sheet_name: str, column_span: str) -> List[List[Any]]:
        ...

    def resolve_sheet_id(self, sheet_name: str) -> int:
        ...

    def apply_batch(self, sheet_id: int, writes: Sequence[CellRegionWrite]) -> None:
        ...


# =============================================================================
# AUTHENTICATION & CLIENT
# =============================================================================

def load_credentials(cfg: InviteConfig):
    """
    Service account credentials from inline JSON (CI / containers) or a file
    (local dev).

    Unusable credentials are an auth failure: StoreUnavailable.
    """
    if cfg.credentials_json:
        try:
            info = json.loads(cfg.credentials_json)
        except json.JSONDecodeError as e:
            raise StoreUnavailable(f"Invalid GOOGLE_CREDENTIALS_JSON format: {e}") from e
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        except (ValueError, KeyError, TypeError, GoogleAuthError) as e:
            raise StoreUnavailable(f"Invalid service account info in GOOGLE_CREDENTIALS_JSON: {e}") from e

    if not cfg.credentials_file or not os.path.exists(cfg.credentials_file):
        raise StoreUnavailable(
            f"Service account file not found: {cfg.credentials_file or '(unset)'}\n"
            f"Set GOOGLE_CREDENTIALS_JSON or GOOGLE_CREDENTIALS_FILE"
        )
    try:
        return service_account.Credentials.from_service_account_file(cfg.credentials_file, scopes=SCOPES)
    except (OSError, ValueError, KeyError, TypeError, GoogleAuthError) as e:
        raise StoreUnavailable(f"Invalid service account file {cfg.credentials_file}: {e}") from e


def get_gspread_client(cfg: InviteConfig) -> gspread.Client:
    gc = gspread.authorize(load_credentials(cfg))
    gc.set_timeout(cfg.timeout_seconds)
    return gc


# =============================================================================
# GSPREAD STORE
# =============================================================================

def a1_range(sheet_name: str, column_span: str) -> str:
    # Quote the tab name so spaces / punctuation survive
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{column_span}"


class GoogleSheetsStore:
    """
    SheetStore over one spreadsheet.

    The spreadsheet handle is opened lazily on first use, so constructing a
    store never touches the network.
    """

    def __init__(self, client: gspread.Client, spreadsheet_id: str):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @classmethod
    def from_config(cls, cfg: InviteConfig) -> "GoogleSheetsStore":
        return cls(get_gspread_client(cfg), cfg.spreadsheet_id)

    def _sh(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            try:
                self._spreadsheet = self.client.open_by_key(self.spreadsheet_id)
            except _TRANSPORT_ERRORS as e:
                raise StoreUnavailable(f"failed to open spreadsheet {self.spreadsheet_id}: {e}") from e
        return self._spreadsheet

    def fetch_range(self, sheet_name: str, column_span: str) -> List[List[Any]]:
        rng = a1_range(sheet_name, column_span)
        sh = self._sh()
        try:
            resp = sh.values_get(rng)
        except _TRANSPORT_ERRORS as e:
            raise StoreUnavailable(f"failed to retrieve sheet data: {e}") from e

        values = resp.get("values") or []
        log.debug("fetched %d rows from %s", len(values), rng)
        return values

    def resolve_sheet_id(self, sheet_name: str) -> int:
        sh = self._sh()
        try:
            ws = sh.worksheet(sheet_name)
        except WorksheetNotFound as e:
            raise SheetNotFound(sheet_name) from e
        except _TRANSPORT_ERRORS as e:
            raise StoreUnavailable(f"failed to get spreadsheet metadata: {e}") from e
        return ws.id

    def apply_batch(self, sheet_id: int, writes: Sequence[CellRegionWrite]) -> None:
        if not writes:
            return
        sh = self._sh()
        try:
            sh.batch_update(build_batch_body(writes, sheet_id))
        except _TRANSPORT_ERRORS as e:
            raise StoreUnavailable(f"failed to apply {len(writes)} cell updates: {e}") from e
        log.info("applied %d cell region writes to sheetId=%s", len(writes), sheet_id)
