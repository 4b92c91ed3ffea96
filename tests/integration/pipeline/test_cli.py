"""
Tests for the protsim command line tool.
"""

import json
import pytest

from protsim.cli import build_parser, main, resolve_selection
from protsim.results import SelectionPolicy

pytestmark = pytest.mark.integration


FIRST = """graph [
  node [ id 1 sse_type "H" ]
  node [ id 2 sse_type "E" ]
  node [ id 3 sse_type "E" ]
  edge [ source 1 target 2 spatial "p" ]
  edge [ source 2 target 3 spatial "a" ]
]
"""

SECOND = """graph [
  node [ id 10 sse_type "E" ]
  node [ id 11 sse_type "E" ]
  node [ id 12 sse_type "H" ]
  edge [ source 10 target 11 spatial "a" ]
  edge [ source 11 target 12 spatial "p" ]
]
"""


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Isolated working and home directories holding two GML files."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    (tmp_path / "first.gml").write_text(FIRST)
    (tmp_path / "second.gml").write_text(SECOND)
    return tmp_path


def json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class TestSelectionFlags:

    def test_default_is_all(self):
        args = build_parser().parse_args(["a.gml", "b.gml"])
        assert resolve_selection(args) == (SelectionPolicy.ALL, 0)

    def test_largest(self):
        args = build_parser().parse_args(["a.gml", "b.gml", "-l"])
        assert resolve_selection(args) == (SelectionPolicy.LARGEST, 0)

    def test_min_size(self):
        args = build_parser().parse_args(["a.gml", "b.gml", "-s", "8"])
        assert resolve_selection(args) == (SelectionPolicy.MIN_SIZE, 8)

    def test_min_size_without_value(self, caplog):
        args = build_parser().parse_args(["a.gml", "b.gml", "-s"])
        assert resolve_selection(args) == (SelectionPolicy.MIN_SIZE, 0)
        assert "assuming 0" in caplog.text

    def test_unknown_selector_falls_back(self, caplog):
        args = build_parser().parse_args(["a.gml", "b.gml", "--select", "biggest"])
        assert resolve_selection(args) == (SelectionPolicy.ALL, 0)
        assert "Unknown output parameter" in caplog.text

    def test_conflicting_flags_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.gml", "b.gml", "-a", "-l"])


class TestMain:

    def test_prints_records(self, workspace, capsys):
        assert main(["first.gml", "second.gml", "--quiet"]) == 0
        records = json_lines(capsys.readouterr().out)
        assert records == [{"first": [1, 2, 3], "second": [10, 11, 12]}]

    def test_filter_writes_mapping_files(self, workspace, capsys):
        out_dir = workspace / "out"
        assert main(["first.gml", "second.gml", "-f", "--quiet", "--output-path", str(out_dir)]) == 0
        assert (out_dir / "results_0_first.txt").read_text() == "1=A0\n2=A1\n3=A2\n"
        assert (out_dir / "results_0_second.txt").read_text() == "10=B0\n11=B1\n12=B2\n"

    def test_no_mapping_files(self, workspace):
        assert main(["first.gml", "second.gml", "-f", "--quiet", "--no-mapping-files"]) == 0
        assert not list(workspace.glob("results_*.txt"))

    def test_settings_file_changes_rule(self, workspace, capsys):
        (workspace / "protsim.cfg").write_text("edge_attributes = colour\n")
        assert main(["first.gml", "second.gml", "--quiet"]) == 0
        assert json_lines(capsys.readouterr().out) == []

    def test_verbose_output(self, workspace, capsys):
        assert main(["first.gml", "second.gml", "-l"]) == 0
        out = capsys.readouterr().out
        assert "Product graph: 2 vertices" in out
        assert "1 mappings" in out

    def test_filter_summary_printed_once(self, workspace, capsys):
        assert main(["first.gml", "second.gml", "-f", "--no-mapping-files"]) == 0
        captured = capsys.readouterr()
        assert captured.out.count("possible vertex mappings") == 1
        assert "possible vertex mappings" not in captured.err

    def test_timeout_reports_partial_result(self, workspace, capsys):
        assert main(["first.gml", "second.gml", "--timeout", "1e-6"]) == 0
        out = capsys.readouterr().out
        assert "results are partial" in out
        assert json_lines(out) == []

    def test_missing_file(self, workspace, capsys):
        assert main(["missing.gml", "second.gml", "--quiet"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_workers(self, workspace, capsys):
        assert main(["first.gml", "second.gml", "--quiet", "--workers", "0"]) == 1
