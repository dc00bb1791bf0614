import pytest
from conftest import TS, FakeSheetStore, req

from invitelib.errors import SheetNotFound, StoreUnavailable
from invitelib.invite_service import InviteSheetService
from invitelib.reconcile import mark_duplicates


def _svc(store, sheet="Sheet1"):
    return InviteSheetService(store, sheet)


class TestGetSheetData:
    def test_returns_only_unprocessed_rows(self):
        store = FakeSheetStore([req("a@example.com"), req("b@example.com", "sent"), ["A1", "B1"]])
        data = _svc(store).get_sheet_data()
        assert data == [req("a@example.com")[:10], ["A1", "B1"]]
        assert store.calls == [("fetch", "Sheet1", "A:J")]

    def test_store_error_propagates(self):
        with pytest.raises(StoreUnavailable):
            _svc(FakeSheetStore(fail={"fetch"})).get_sheet_data()


class TestGetNewInvites:
    def test_count(self):
        store = FakeSheetStore([req("a@example.com"), req("b@example.com", "sent"), req("c@example.com")])
        assert _svc(store).get_new_invites() == 2
        assert store.call_kinds() == ["fetch"]


class TestUpdateInviteStatus:
    def test_writes_one_batch(self):
        store = FakeSheetStore([req("a@example.com"), req("x@example.com")])
        _svc(store).update_invite_status(["x@example.com", "ghost@example.com"], "sent", TS)

        assert store.call_kinds() == ["fetch", "resolve", "apply"]
        assert len(store.batches) == 1
        assert store.rows[1] == req("x@example.com", "sent", TS)
        assert store.rows[0] == req("a@example.com")

    def test_no_match_means_no_write(self):
        store = FakeSheetStore([req("a@example.com")])
        _svc(store).update_invite_status(["ghost@example.com"], "sent", TS)
        assert store.call_kinds() == ["fetch"]

    def test_empty_email_list(self):
        store = FakeSheetStore([req("a@example.com")])
        _svc(store).update_invite_status([], "sent", TS)
        assert store.batches == []

    def test_unknown_sheet_fails_before_write(self):
        store = FakeSheetStore([req("x@example.com")], sheets={"Other": 3})
        with pytest.raises(SheetNotFound):
            _svc(store).update_invite_status(["x@example.com"], "sent", TS)
        assert store.batches == []

    def test_apply_failure_propagates(self):
        store = FakeSheetStore([req("x@example.com")], fail={"apply"})
        with pytest.raises(StoreUnavailable):
            _svc(store).update_invite_status(["x@example.com"], "sent", TS)


class TestUpdateDuplicateRequests:
    def test_marks_and_applies_once(self):
        store = FakeSheetStore([req("a@example.com")] * 3, sheets={"Sheet1": 17})
        marked = _svc(store).update_duplicate_requests(TS)

        assert marked == 2
        assert store.calls[-1] == ("apply", 17, 2)
        assert store.rows == [
            req("a@example.com"),
            req("a@example.com", "Duplicate", TS),
            req("a@example.com", "Duplicate", TS),
        ]

    def test_reads_full_span(self):
        store = FakeSheetStore([req("a@example.com")])
        _svc(store).update_duplicate_requests(TS)
        assert ("fetch", "Sheet1", "A:K") in store.calls

    def test_no_duplicates_no_network_write(self):
        store = FakeSheetStore([req("a@example.com"), req("b@example.com")])
        assert _svc(store).update_duplicate_requests(TS) == 0
        assert "apply" not in store.call_kinds()

    def test_sheet_not_found_before_any_write(self):
        store = FakeSheetStore([req("a@example.com")] * 2, sheets={})
        with pytest.raises(SheetNotFound):
            _svc(store).update_duplicate_requests(TS)
        assert store.call_kinds() == ["resolve"]

    def test_fetch_failure(self):
        with pytest.raises(StoreUnavailable):
            _svc(FakeSheetStore(fail={"fetch"})).update_duplicate_requests(TS)

    def test_rerun_is_noop(self):
        store = FakeSheetStore([req("a@example.com")] * 2)
        svc = _svc(store)
        svc.update_duplicate_requests(TS)
        assert svc.update_duplicate_requests("later") == 0
        assert len(store.batches) == 1

    def test_stale_snapshot_last_write_wins(self):
        # Two passes computed from the same snapshot: the later batch wins on shared cells
        store = FakeSheetStore([req("a@example.com")] * 2)
        svc = _svc(store)
        snapshot = store.fetch_range("Sheet1", "A:K")

        store.apply_batch(0, mark_duplicates(snapshot, "pass-1"))
        store.apply_batch(0, mark_duplicates(snapshot, "pass-2"))

        assert store.rows[1][9:] == ["Duplicate", "pass-2"]
        assert svc.update_duplicate_requests("pass-3") == 0
