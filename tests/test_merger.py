"""
End-to-end tests for MergerFacade.run_merge.
"""

import pytest

from sheetmerge.config import MergeConfig, MergePaths
from sheetmerge.formatter import DEFAULT_SHEET_TITLE
from sheetmerge.merger import MergerFacade


@pytest.fixture
def workspace(temp_dir, make_workbook):
    """The a/b/mapping/conf layout with the Alice/NYC example."""
    make_workbook("a.xlsx", {"Sheet1": [["id", "name"], ["1", "Alice"]]})
    make_workbook("b.xlsx", {"Sheet1": [["id", "city"], ["2", "NYC"]]})
    make_workbook("mapping.xlsx", {
        "Notes": [["nothing", "here"]],
        "Lookup": [["id", "name", "age"], ["1", "Alicia", "30"]],
    })
    make_workbook("conf.xlsx", {"Sheet1": [["Lookup", "id"]]})
    return MergePaths.from_directory(str(temp_dir))


class TestRunMerge:

    def test_merges_enriches_and_writes(self, workspace, read_rows):
        result = MergerFacade.run_merge(workspace)

        assert result.written
        assert result.config == MergeConfig(sheet_name="Lookup", key_column="id")
        assert list(result.columns) == ["id", "name", "city", "age"]
        assert read_rows(workspace.output, DEFAULT_SHEET_TITLE) == [
            ["id", "name", "city", "age"],
            ["1", "Alicia", "", "30"],
            ["2", "", "NYC", ""],
        ]

    def test_to_frame(self, workspace):
        frame = MergerFacade.run_merge(workspace).to_frame()
        assert list(frame.columns) == ["id", "name", "city", "age"]
        assert frame.loc[0, "name"] == "Alicia"
        assert frame.loc[1, "city"] == "NYC"

    def test_no_key_column_still_merges(self, workspace, make_workbook):
        make_workbook("conf.xlsx", {"Sheet1": [["Lookup"]]})
        result = MergerFacade.run_merge(workspace)

        assert result.written
        assert [r.as_dict() for r in result.rows] == [
            {"id": "1", "name": "Alice", "city": "", "age": ""},
            {"id": "2", "name": "", "city": "NYC", "age": ""},
        ]

    def test_empty_inputs(self, temp_dir, make_workbook, stored_rows):
        for name in ("a.xlsx", "b.xlsx", "mapping.xlsx"):
            make_workbook(name, {"Sheet1": []})
        make_workbook("conf.xlsx", {"Sheet1": [["Sheet1", "id"]]})
        paths = MergePaths.from_directory(str(temp_dir))

        result = MergerFacade.run_merge(paths)
        assert result.written
        assert list(result.columns) == []
        assert result.rows == []
        assert stored_rows(paths.output) == []

    def test_write_failure_is_reported_not_raised(self, workspace, temp_dir):
        paths = MergePaths(
            source_a=workspace.source_a,
            source_b=workspace.source_b,
            mapping=workspace.mapping,
            config=workspace.config,
            output=str(temp_dir / "no_such_dir" / "merge.xlsx"),
        )
        result = MergerFacade.run_merge(paths)

        assert not result.written
        assert len(result.rows) == 2
        assert result.rows[0]["name"] == "Alicia"

    def test_missing_source_raises(self, workspace, temp_dir):
        (temp_dir / "b.xlsx").unlink()
        with pytest.raises(FileNotFoundError):
            MergerFacade.run_merge(workspace)

    def test_illegal_character_keeps_previous_output(self, workspace, temp_dir, monkeypatch):
        from sheetmerge import merger
        from sheetmerge.merge_service import Table

        real_read_table = merger.read_table

        def read_with_control_char(path, sheet_name=None):
            if path == workspace.source_a:
                return Table(header=("id", "name"), records=({"id": "1", "name": "bad\x01"},))
            return real_read_table(path, sheet_name)

        monkeypatch.setattr(merger, "read_table", read_with_control_char)
        (temp_dir / "merge.xlsx").write_bytes(b"previous output")

        result = MergerFacade.run_merge(workspace)

        assert not result.written
        assert len(result.rows) == 2
        assert (temp_dir / "merge.xlsx").read_bytes() == b"previous output"
