"""Tests for CSV export."""

import io

from histquery.attrib import Count, Select, project
from histquery.export import to_csv_string, write_csv
from histquery.objects import ProjectId


class TestCells:
    def test_missing_values_are_empty_cells(self):
        assert to_csv_string([(1, None, "x")]) == "1,,x\r\n"

    def test_floats_are_trimmed(self):
        assert to_csv_string([(0.5, 2.0, 1 / 3)]) == "0.5,2,0.3333\r\n"

    def test_nested_lists_are_joined(self):
        assert to_csv_string([(1, [2, 3])]) == "1,2;3\r\n"

    def test_ids_print_as_numbers(self):
        assert to_csv_string([(ProjectId(7), "u")]) == "7,u\r\n"

    def test_single_values_become_one_column_rows(self):
        assert to_csv_string([1, 2], header=["n"]) == "n\r\n1\r\n2\r\n"


class TestWriteCsv:
    def test_header_and_rows_to_stream(self):
        out = io.StringIO()
        count = write_csv([(1, "a"), (2, "b")], out, header=["id", "name"])
        assert count == 2
        assert out.getvalue().splitlines() == ["id,name", "1,a", "2,b"]

    def test_grouped_rows_prepend_the_key(self):
        rows = [("rust", [(1, 10), (3, 20)]), ("python", [(2, 300)])]
        text = to_csv_string(rows, header=["language", "id", "stars"], grouped=True)
        assert text.splitlines() == ["language,id,stars", "rust,1,10", "rust,3,20", "python,2,300"]

    def test_writes_file(self, tmp_path):
        path = tmp_path / "out.csv"
        assert write_csv([(1,)], path, header=["id"]) == 1
        assert path.read_text(encoding="utf-8").splitlines() == ["id", "1"]

    def test_query_results(self, database):
        rows = database.projects().map_into(Select(project.Id(), project.Stars(), Count(project.Commits())))
        lines = to_csv_string(rows, header=["id", "stars", "commits"]).splitlines()
        assert lines == ["id,stars,commits", "1,10,5", "2,300,50", "3,20,500", "4,,0"]
