import pytest

from invitelib.batch_planner import (
    CellRegionWrite,
    build_batch_body,
    col_letter,
    row_rewrite,
    status_write,
    to_request,
)


class TestCellRegionWrite:
    def test_rejects_mismatched_width(self):
        with pytest.raises(ValueError):
            CellRegionWrite(0, 1, 9, 11, (("only-one",),))

    def test_rejects_empty_region(self):
        with pytest.raises(ValueError):
            CellRegionWrite(3, 3, 0, 1, ())

    def test_a1(self):
        assert status_write(1, "sent", "T").to_a1("Sheet1") == "'Sheet1'!J2:K2"
        assert row_rewrite(0, [""] * 11).to_a1("Sheet1") == "'Sheet1'!A1:K1"


class TestBuilders:
    def test_status_write_bounds(self):
        w = status_write(7, "sent", "T")
        assert (w.row_start, w.row_end, w.col_start, w.col_end) == (7, 8, 9, 11)
        assert w.values == (("sent", "T"),)

    def test_row_rewrite_bounds(self):
        fields = [str(i) for i in range(11)]
        w = row_rewrite(2, fields)
        assert (w.row_start, w.row_end, w.col_start, w.col_end) == (2, 3, 0, 11)
        assert w.values == (tuple(fields),)

    def test_col_letter(self):
        assert col_letter(1) == "A"
        assert col_letter(11) == "K"
        assert col_letter(27) == "AA"


class TestRequests:
    def test_update_cells_request(self):
        req = to_request(status_write(1, "sent", "T"), sheet_id=42)
        uc = req["updateCells"]
        assert uc["range"] == {
            "sheetId": 42,
            "startRowIndex": 1,
            "endRowIndex": 2,
            "startColumnIndex": 9,
            "endColumnIndex": 11,
        }
        assert uc["fields"] == "userEnteredValue"
        assert uc["rows"] == [{"values": [
            {"userEnteredValue": {"stringValue": "sent"}},
            {"userEnteredValue": {"stringValue": "T"}},
        ]}]

    def test_values_are_written_as_strings(self):
        fields = [1, None, "x"] + [""] * 8
        req = to_request(row_rewrite(0, fields), sheet_id=0)
        cells = req["updateCells"]["rows"][0]["values"]
        assert cells[0] == {"userEnteredValue": {"stringValue": "1"}}
        assert cells[1] == {"userEnteredValue": {"stringValue": ""}}

    def test_batch_body(self):
        body = build_batch_body([status_write(0, "a", "t"), status_write(3, "b", "t")], sheet_id=5)
        assert [r["updateCells"]["range"]["startRowIndex"] for r in body["requests"]] == [0, 3]
