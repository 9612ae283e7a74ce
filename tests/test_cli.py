"""Tests for the command-line interface."""

import json
from pathlib import Path

from typer.testing import CliRunner

from ai_redline.cli import app

runner = CliRunner()

TRACKED = (
    '<p>The <span class="suggestion-deletion">cat</span>'
    '<span class="suggestion-insertion">dog</span> sat.</p>'
)


def write_doc(tmp_path: Path, content: str = TRACKED) -> Path:
    """Write an HTML document for a test and return its path."""
    path = tmp_path / "doc.html"
    path.write_text(content, encoding="utf-8")
    return path


class TestCLIVersion:
    """Tests for version flag."""

    def test_version_flag(self):
        """Test --version shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_version_short_flag(self):
        """Test -v shows version."""
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestCLIHelp:
    """Tests for help output."""

    def test_main_help(self):
        """Test main --help shows commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("diff", "list", "accept", "reject", "accept-all", "edit", "export"):
            assert command in result.output


class TestCLIDiff:
    """Tests for diff command."""

    def test_diff_prints_markup(self, tmp_path):
        """Test diff writes suggestion markup to stdout."""
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        old.write_text("The cat sat.", encoding="utf-8")
        new.write_text("The dog sat.", encoding="utf-8")

        result = runner.invoke(app, ["diff", str(old), str(new)])
        assert result.exit_code == 0
        assert '<span class="suggestion-deletion">cat</span>' in result.output
        assert '<span class="suggestion-insertion">dog</span>' in result.output

    def test_diff_output_file_and_stats(self, tmp_path):
        """Test diff --output writes a file and --stats reports counts."""
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        out = tmp_path / "diff.html"
        old.write_text("The cat sat.", encoding="utf-8")
        new.write_text("The dog sat.", encoding="utf-8")

        result = runner.invoke(app, ["diff", str(old), str(new), "-o", str(out), "--stats"])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").startswith("The <span")
        assert "1 insertion, 1 deletion" in result.output

    def test_diff_missing_file(self, tmp_path):
        """Test diff fails cleanly for a missing file."""
        result = runner.invoke(app, ["diff", str(tmp_path / "a"), str(tmp_path / "b")])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCLIReview:
    """Tests for list, accept and reject commands."""

    def test_list(self, tmp_path):
        """Test list shows each pending suggestion."""
        result = runner.invoke(app, ["list", str(write_doc(tmp_path))])
        assert result.exit_code == 0
        assert "Review (2)" in result.output
        assert "deletion-4" in result.output
        assert "insertion-7" in result.output

    def test_list_clean_document(self, tmp_path):
        """Test list on a document without suggestions."""
        result = runner.invoke(app, ["list", str(write_doc(tmp_path, "<p>Clean.</p>"))])
        assert result.exit_code == 0
        assert "No pending changes." in result.output

    def test_accept_by_id_to_output(self, tmp_path):
        """Test accept writes the result to --output and leaves the input alone."""
        doc_path = write_doc(tmp_path)
        out = tmp_path / "out.html"

        result = runner.invoke(app, ["accept", str(doc_path), "--id", "insertion-7", "-o", str(out)])
        assert result.exit_code == 0
        assert "Accepted 1 insertions, 1 deletions" in result.output
        assert out.read_text(encoding="utf-8") == "<p>The dog sat.</p>"
        assert doc_path.read_text(encoding="utf-8") == TRACKED

    def test_reject_in_place(self, tmp_path):
        """Test reject overwrites the input without --output."""
        doc_path = write_doc(tmp_path)
        result = runner.invoke(app, ["reject", str(doc_path), "-i", "deletion-4"])
        assert result.exit_code == 0
        assert doc_path.read_text(encoding="utf-8") == "<p>The cat sat.</p>"

    def test_unknown_id(self, tmp_path):
        """Test an unknown id lists the ids that exist."""
        result = runner.invoke(app, ["accept", str(write_doc(tmp_path)), "--id", "insertion-1"])
        assert result.exit_code == 1
        assert "not found" in result.output
        assert "deletion-4" in result.output

    def test_accept_all(self, tmp_path):
        """Test accept-all resolves every suggestion."""
        doc_path = write_doc(tmp_path)
        result = runner.invoke(app, ["accept-all", str(doc_path)])
        assert result.exit_code == 0
        assert doc_path.read_text(encoding="utf-8") == "<p>The dog sat.</p>"

    def test_reject_all(self, tmp_path):
        """Test reject-all restores the original."""
        doc_path = write_doc(tmp_path)
        result = runner.invoke(app, ["reject-all", str(doc_path)])
        assert result.exit_code == 0
        assert "Rejected 1 insertions, 1 deletions" in result.output
        assert doc_path.read_text(encoding="utf-8") == "<p>The cat sat.</p>"


class TestCLIExport:
    """Tests for export command."""

    def test_export_json(self, tmp_path):
        """Test export prints a JSON report by default."""
        result = runner.invoke(app, ["export", str(write_doc(tmp_path))])
        assert result.exit_code == 0
        assert json.loads(result.output)["total"] == 2

    def test_export_markdown_to_file(self, tmp_path):
        """Test export --format markdown --output."""
        out = tmp_path / "report.md"
        result = runner.invoke(
            app, ["export", str(write_doc(tmp_path)), "-f", "markdown", "-o", str(out)]
        )
        assert result.exit_code == 0
        assert "{++dog++}" in out.read_text(encoding="utf-8")

    def test_export_unknown_format(self, tmp_path):
        """Test export rejects unsupported formats."""
        result = runner.invoke(app, ["export", str(write_doc(tmp_path)), "-f", "xml"])
        assert result.exit_code == 1
        assert "Unsupported format: xml" in result.output


class TestCLIEdit:
    """Tests for edit command (no requests are sent)."""

    def test_edit_without_api_key(self, tmp_path, monkeypatch):
        """Test edit reports the missing key variable."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        doc_path = write_doc(tmp_path, "<p>Text.</p>")
        result = runner.invoke(app, ["edit", str(doc_path), "-i", "Improve it"])
        assert result.exit_code == 1
        assert "OPENAI_API_KEY" in result.output
        assert doc_path.read_text(encoding="utf-8") == "<p>Text.</p>"

    def test_edit_with_invalid_config(self, tmp_path):
        """Test edit rejects a config file with unknown keys."""
        config = tmp_path / "editor.yaml"
        config.write_text("modle: gpt-4o\n", encoding="utf-8")
        doc_path = write_doc(tmp_path, "<p>Text.</p>")
        result = runner.invoke(app, ["edit", str(doc_path), "-i", "x", "-c", str(config)])
        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.output
