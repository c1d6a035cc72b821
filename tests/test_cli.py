"""Tests for the stage-graph command line."""

import io
import json

from stage_graph.cli import main, parse_args


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.input_path == "-"
        assert args.output_path == ""
        assert args.format == "plain"
        assert args.suppress_root is None

    def test_suppress_root_flags(self):
        assert parse_args(["--suppress-root"]).suppress_root is True
        assert parse_args(["--no-suppress-root"]).suppress_root is False


class TestMain:
    def test_reads_file_and_writes_json(self, tmp_path, monkeypatch, ingest_document, capsys):
        monkeypatch.chdir(tmp_path)
        source = tmp_path / "pipeline.yaml"
        source.write_text(ingest_document, encoding="utf-8")
        target = tmp_path / "out" / "graph.json"

        assert main(["--input-path", str(source), "--output-path", str(target)]) == 0

        graph = json.loads(target.read_text(encoding="utf-8"))
        assert len(graph["nodes"]) == 4
        assert len(graph["edges"]) == 5
        assert "nodes=4" in capsys.readouterr().err

    def test_reads_stdin_and_prints(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO("root:\n  runs:\n    - name: A\n    - name: B\n"))

        assert main(["--suppress-root", "--format", "reactflow"]) == 0

        graph = json.loads(capsys.readouterr().out)
        assert [node["data"]["label"] for node in graph["nodes"]] == ["A", "B"]
        assert graph["edges"] == []

    def test_report_format(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO("a: [\n"))

        assert main(["--format", "report"]) == 0

        artifact = json.loads(capsys.readouterr().out)
        assert artifact["nodes"] == []
        assert artifact["meta"]["load_report"]["status"] == "parse_error"

    def test_missing_input_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main(["--input-path", str(tmp_path / "missing.yaml")]) == 2
        assert "not found" in capsys.readouterr().err
