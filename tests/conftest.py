"""
Shared fixtures: an in-memory SheetStore that behaves like the sheet.
"""

import pytest

from invitelib.errors import SheetNotFound, StoreUnavailable

TS = "2024-02-14 12:00:00"


def req(email, status="", ts=""):
    """A full A..K request row with passenger columns 1..9."""
    return ["1", "2", "3", email, "5", "6", "7", "8", "9", status, ts]


class FakeSheetStore:
    def __init__(self, rows=None, sheets=None, fail=None):
        self.rows = [list(r) for r in (rows or [])]
        self.sheets = sheets if sheets is not None else {"Sheet1": 0}
        # "fetch", "resolve" or "apply" -> raise StoreUnavailable on that call
        self.fail = set(fail or ())
        self.calls = []
        self.batches = []

    def fetch_range(self, sheet_name, column_span):
        self.calls.append(("fetch", sheet_name, column_span))
        if "fetch" in self.fail:
            raise StoreUnavailable("failed to retrieve sheet data: mock error")
        last = 10 if column_span.endswith("K") else 9
        return [list(r[: last + 1]) for r in self.rows]

    def resolve_sheet_id(self, sheet_name):
        self.calls.append(("resolve", sheet_name))
        if "resolve" in self.fail:
            raise StoreUnavailable("failed to get spreadsheet metadata: mock error")
        if sheet_name not in self.sheets:
            raise SheetNotFound(sheet_name)
        return self.sheets[sheet_name]

    def apply_batch(self, sheet_id, writes):
        self.calls.append(("apply", sheet_id, len(writes)))
        if "apply" in self.fail:
            raise StoreUnavailable("failed to update rows: mock error")
        self.batches.append(list(writes))
        for w in writes:
            for r_off, values in enumerate(w.values):
                row = self.rows[w.row_start + r_off]
                while len(row) < w.col_end:
                    row.append("")
                for c_off, v in enumerate(values):
                    row[w.col_start + c_off] = v

    def call_kinds(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def store_factory():
    return FakeSheetStore
