"""Tests for the command line harness."""

import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cartography.__main__ import main


class TestQueries:
    """top and path commands."""

    def test_top(self, two_domains, capsys):
        """top prints the strongest related tags."""
        code = main(["--datasets", str(two_domains), "top", "stackoverflow", "python", "-n", "1"])
        out = capsys.readouterr().out
        assert code == 0
        assert "1. django (400)" in out
        assert "linux" not in out

    def test_top_unknown_tag(self, two_domains, capsys):
        """An unknown tag is reported, not an error."""
        code = main(["--datasets", str(two_domains), "top", "unix", "cobol"])
        assert code == 0
        assert "No related tags" in capsys.readouterr().out

    def test_top_unknown_domain(self, two_domains, capsys):
        """An unknown domain is reported."""
        main(["--datasets", str(two_domains), "top", "serverfault", "linux"])
        assert "Unknown domain: serverfault" in capsys.readouterr().out

    def test_path(self, two_domains, capsys):
        """path prints the route and its cost."""
        code = main(["--datasets", str(two_domains), "path", "unix", "bash", "python"])
        out = capsys.readouterr().out
        assert code == 0
        assert "bash -> linux -> python" in out
        assert "Cost: 53 (2 hops)" in out

    def test_no_path(self, two_domains, capsys):
        """A missing path is reported with exit code 0."""
        code = main(["--datasets", str(two_domains), "path", "unix", "bash", "django"])
        assert code == 0
        assert "No path found" in capsys.readouterr().out


class TestModelCommands:
    """summary and export commands."""

    def test_summary(self, two_domains, capsys):
        """summary prints galaxy, planet and connection counts."""
        main(["--datasets", str(two_domains), "summary"])
        out = capsys.readouterr().out
        assert "Galaxies: 2" in out
        assert "Planets: 4" in out
        assert "Connections: 2" in out

    def test_summary_per_domain(self, two_domains, capsys):
        """--dedup-scope changes the connection count."""
        main(["--datasets", str(two_domains), "--dedup-scope", "per_domain", "summary"])
        out = capsys.readouterr().out
        assert "Connections: 4" in out
        assert "Dedup scope: per_domain" in out

    def test_export(self, two_domains, tmp_path):
        """export writes the merged model as JSON."""
        output = tmp_path / "universe.json"
        assert main(["--datasets", str(two_domains), "export", str(output)]) == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["galaxies"] == ["stackoverflow", "unix"]

    def test_export_unwritable_path(self, two_domains, tmp_path, capsys):
        """An output path that cannot be opened exits with 1 and a message."""
        output = tmp_path / "missing_dir" / "universe.json"
        assert main(["--datasets", str(two_domains), "export", str(output)]) == 1
        out = capsys.readouterr().out
        assert "export failed" in out
        assert "universe.json" in out


class TestLoadFailures:
    """Load errors exit non-zero unless skipped."""

    def test_bad_file_fails(self, two_domains, capsys):
        """A malformed dataset exits with 1 and names the file."""
        (two_domains / "broken.json").write_text("{")
        assert main(["--datasets", str(two_domains), "summary"]) == 1
        assert "broken.json" in capsys.readouterr().out

    def test_bad_file_skipped(self, two_domains, capsys):
        """--skip-malformed loads the remaining datasets."""
        (two_domains / "broken.json").write_text("{")
        assert main(["--datasets", str(two_domains), "--skip-malformed", "summary"]) == 0
        assert "Galaxies: 2" in capsys.readouterr().out

    def test_missing_directory(self, tmp_path, capsys):
        """A missing datasets directory exits with 1."""
        assert main(["--datasets", str(tmp_path / "nope"), "summary"]) == 1
        assert "Failed to load datasets" in capsys.readouterr().out
