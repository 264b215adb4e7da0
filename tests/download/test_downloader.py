"""Unit tests for the gytmdl job runner with mocked subprocess."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from gytmdl_web.download import JobOutcome, build_command, run_job


class TestBuildCommand:
    """Tests for build_command()."""

    def test_default_command(self) -> None:
        cmd = build_command("https://music.youtube.com/watch?v=a", Path("Music"))
        assert cmd == [
            "gytmdl",
            "--output-path",
            "Music",
            "https://music.youtube.com/watch?v=a",
        ]

    def test_custom_executable(self) -> None:
        cmd = build_command("link", Path("/srv/music"), command="/opt/bin/gytmdl")
        assert cmd[0] == "/opt/bin/gytmdl"
        assert cmd[-1] == "link"


class TestRunJob:
    """Tests for run_job()."""

    @patch("gytmdl_web.download.downloader.subprocess.run")
    def test_success(self, mock_run: MagicMock, temp_dir: Path) -> None:
        """Test a zero exit status yields a successful outcome."""
        mock_run.return_value = MagicMock(returncode=0, stdout="Done (1 track)")

        outcome = run_job("link", temp_dir)

        assert outcome == JobOutcome(link="link", success=True, output="Done (1 track)")
        args, kwargs = mock_run.call_args
        assert args[0] == ["gytmdl", "--output-path", str(temp_dir), "link"]
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["check"] is False

    @patch("gytmdl_web.download.downloader.subprocess.run")
    def test_non_zero_exit(self, mock_run: MagicMock, temp_dir: Path) -> None:
        """Test a failing process keeps its output and exit status."""
        mock_run.return_value = MagicMock(returncode=2, stdout="ERROR: bad link")

        outcome = run_job("link", temp_dir)

        assert outcome.success is False
        assert outcome.error == "exit status 2"
        assert outcome.output == "ERROR: bad link"

    @patch("gytmdl_web.download.downloader.subprocess.run")
    def test_none_stdout(self, mock_run: MagicMock, temp_dir: Path) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout=None)

        assert run_job("link", temp_dir).output == ""

    @patch("gytmdl_web.download.downloader.subprocess.run")
    def test_executable_missing(self, mock_run: MagicMock, temp_dir: Path) -> None:
        """Test a missing gytmdl binary is reported, not raised."""
        mock_run.side_effect = FileNotFoundError("gytmdl")

        outcome = run_job("link", temp_dir)

        assert outcome.success is False
        assert outcome.error is not None
        assert "gytmdl not found" in outcome.error

    @patch("gytmdl_web.download.downloader.subprocess.run")
    def test_subprocess_error(self, mock_run: MagicMock, temp_dir: Path) -> None:
        mock_run.side_effect = subprocess.SubprocessError("pipe broke")

        outcome = run_job("link", temp_dir)

        assert outcome.success is False
        assert outcome.error == "pipe broke"
