"""
Tests for the command line interface.
"""

import json
from click.testing import CliRunner

from process_lens import __version__
from process_lens.main import cli


class TestCli:
    """Tests for the generate and analyze commands."""

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_generate(self, tmp_path):
        """Test writing a synthetic event log."""
        output = tmp_path / "events.json"
        result = CliRunner().invoke(cli, ["--seed", "5", "generate", "--cases", "25",
                                          "--output", str(output)])
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["metadata"]["case_count"] == 25
        assert data["events"]

    def test_generate_then_analyze(self, tmp_path):
        """Test the full generate and analyze round trip."""
        runner = CliRunner()
        events = tmp_path / "events.json"
        out_dir = tmp_path / "out"

        result = runner.invoke(cli, ["generate", "-n", "60", "-o", str(events)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["analyze", "-i", str(events), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "Ideal path:" in result.output

        for name in ("process_model.json", "conformance.json", "actors.json", "summary.json"):
            assert (out_dir / name).exists()

        conformance = json.loads((out_dir / "conformance.json").read_text())
        assert len(conformance) == 60
        summary = json.loads((out_dir / "summary.json").read_text())
        assert summary["conformance"]["total_cases"] == 60

    def test_analyze_reports_errors(self, tmp_path):
        """Test that library errors exit non-zero with a message."""
        events = tmp_path / "empty.json"
        events.write_text(json.dumps([]))

        result = CliRunner().invoke(cli, ["analyze", "-i", str(events),
                                          "-o", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_analyze_reports_malformed_json(self, tmp_path):
        """Test that an unparseable input file exits non-zero with a message."""
        events = tmp_path / "broken.json"
        events.write_text("not json at all")

        result = CliRunner().invoke(cli, ["analyze", "-i", str(events),
                                          "-o", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_analyze_reports_unreadable_input(self, tmp_path):
        """Test that an input path that cannot be read exits non-zero with a message."""
        result = CliRunner().invoke(cli, ["analyze", "-i", str(tmp_path),
                                          "-o", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Error:" in result.output
