"""
Tests for tagpolicy.cli module.

Tests the command handlers via main() including:
- Exit codes
- Printed results
- Error reporting
"""

from __future__ import annotations

import pytest

from tagpolicy.cli import EXIT_ERROR, EXIT_NO_UPDATE, EXIT_OK, main


def run_cli(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestDecide:
    """Tests for 'tagpolicy decide'."""

    def test_no_update_code_differs_from_usage_error(self, capsys):
        """Test that a mistyped command is not read as "no update"."""
        usage_code = run_cli(["decide", "minor", "1.2.3"])
        assert usage_code == 2
        assert EXIT_NO_UPDATE not in (usage_code, EXIT_OK, EXIT_ERROR)

    def test_update_allowed(self, capsys):
        """Test exit code and output for an allowed update."""
        assert run_cli(["decide", "minor", "1.2.3", "1.5.0"]) == EXIT_OK
        assert "1.2.3 -> 1.5.0 (minor): update" in capsys.readouterr().out

    def test_update_rejected(self, capsys):
        """Test exit code and output for a rejected update."""
        assert run_cli(["decide", "minor", "1.2.3", "2.0.0"]) == EXIT_NO_UPDATE
        assert "no update" in capsys.readouterr().out

    def test_invalid_version(self, capsys):
        """Test that parse errors are reported."""
        assert run_cli(["decide", "all", "1.0.x", "1.0.1"]) == EXIT_ERROR
        assert "failed to parse current version" in capsys.readouterr().out

    def test_unknown_policy(self, capsys):
        """Test that unknown policies are reported."""
        assert run_cli(["decide", "sometimes", "1.0.0", "1.0.1"]) == EXIT_ERROR
        assert "unknown policy" in capsys.readouterr().out

    def test_verbose_logs_decision(self, capsys):
        """Test that --verbose shows the policy reasoning."""
        run_cli(["decide", "patch", "1.2.3", "1.3.0", "--verbose"])
        assert "[POLICY]" in capsys.readouterr().out


class TestTagCommands:
    """Tests for 'tagpolicy newest' and 'tagpolicy lowest'."""

    def test_newest(self, capsys):
        """Test printing the newest tag."""
        assert run_cli(["newest", "1.2.3", "1.2.4", "bad", "1.3.0"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "1.3.0"

    def test_newest_none(self, capsys):
        """Test that nothing is printed when no tag is newer."""
        assert run_cli(["newest", "2.0.0", "1.0.0"]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_newest_debug_shows_skipped(self, capsys):
        """Test that --debug reports skipped tags."""
        run_cli(["newest", "1.0.0", "bad", "1.0.1", "--debug"])
        assert "skipping tag 'bad'" in capsys.readouterr().out

    def test_newest_match_pre_release(self, capsys):
        """Test the channel matching flag."""
        run_cli(["newest", "1.0.0", "1.1.0-rc.1", "1.0.1", "--match-pre-release"])
        assert capsys.readouterr().out.strip() == "1.0.1"

    def test_lowest(self, capsys):
        """Test printing the lowest stable tag."""
        assert run_cli(["lowest", "5.0.0", "v1.0.0", "3.0.0"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "1.0.0"


class TestParse:
    """Tests for 'tagpolicy parse'."""

    def test_pipeline_version(self, capsys):
        """Test parsing a pipeline version."""
        assert run_cli(["parse", "21.0-1571107855-1410-599b8254c7bb"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Grammar:      pipeline" in out
        assert "Patch:        1571107855" in out
        assert "Pre-release:  1410-599b8254c7bb" in out

    def test_image_reference(self, capsys):
        """Test parsing an image reference."""
        assert run_cli(["parse", "--image", "karolis/webhook-demo:v1.4.5"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Repository:   karolis/webhook-demo" in out
        assert "Canonical:    1.4.5" in out

    def test_missing_tag(self, capsys):
        """Test that a missing tag is an error."""
        assert run_cli(["parse", "--image", "karolis/webhook-demo"]) == EXIT_ERROR
        assert "version tag is missing" in capsys.readouterr().out


class TestCheck:
    """Tests for 'tagpolicy check'."""

    def test_check_watch_file(self, capsys, create_yaml_file, sample_watch_data):
        """Test the results table for a watch file."""
        path = create_yaml_file("watch.yaml", sample_watch_data)

        assert run_cli(["check", str(path)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "[1/3] Checking karolis/webhook-demo:1.4.5..." in out
        assert "[UPDATE] registry.example.com/api:20.1-9638" in out
        assert "1 of 3 image(s) can be updated" in out

    def test_check_missing_file(self, capsys, tmp_test_dir):
        """Test that a missing watch file is an error."""
        assert run_cli(["check", str(tmp_test_dir / "nope.yaml")]) == EXIT_ERROR
        assert "file not found" in capsys.readouterr().out
