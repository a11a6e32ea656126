"""Unit tests for CLI argument parsing and integration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from folder_convert.cli import _report_outcome, app, resolve_targets, run_conversion
from folder_convert.convert import ConversionOutcome, ConversionPolicy
from folder_convert.core import ConversionError, MediaKind, Task, ToolNotFoundError
from folder_convert.scan import scan_directory

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def tools_installed() -> Generator[MagicMock, None, None]:
    """Pretend ffmpeg and magick are on PATH."""
    with patch("folder_convert.cli.check_tool", return_value=True) as mock_check:
        yield mock_check


def _commands(mock_run: MagicMock) -> list[list[str]]:
    return [call.args[0] for call in mock_run.call_args_list]


class TestCLIArgumentParsing:
    """Tests for CLI argument parsing."""

    def test_help_flag(self, runner: CliRunner) -> None:
        """Test --help flag shows the options."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--audio-format" in result.output
        assert "--image-format" in result.output
        assert "--workers" in result.output
        assert "--recursive" in result.output

    def test_version_flag(self, runner: CliRunner) -> None:
        """Test --version flag shows version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_audio_format(self, runner: CliRunner, media_dir: Path) -> None:
        """Test an unknown audio format is rejected."""
        result = runner.invoke(app, [str(media_dir), "-a", "xyz"])
        assert result.exit_code == 2

    def test_image_format_not_valid_for_audio(
        self, runner: CliRunner, media_dir: Path
    ) -> None:
        """Test audio format must come from the audio table."""
        result = runner.invoke(app, [str(media_dir), "--audio-format", "png"])
        assert result.exit_code == 2

    def test_workers_must_be_positive(self, runner: CliRunner, media_dir: Path) -> None:
        """Test --workers rejects zero."""
        result = runner.invoke(app, [str(media_dir), "-w", "0"])
        assert result.exit_code == 2

    def test_workers_passed_through(self, runner: CliRunner, media_dir: Path) -> None:
        """Test --workers sets the worker count."""
        with patch("folder_convert.cli.run_conversion", return_value=0) as mock_run:
            result = runner.invoke(app, [str(media_dir), "-a", "mp3", "-w", "3"])
        assert result.exit_code == 0
        assert mock_run.call_args.kwargs["worker_count"] == 3

    def test_default_workers_is_cpu_count(
        self, runner: CliRunner, media_dir: Path
    ) -> None:
        """Test the worker count defaults to the CPU count."""
        with (
            patch("folder_convert.cli.run_conversion", return_value=0) as mock_run,
            patch("folder_convert.cli.default_worker_count", return_value=5),
        ):
            runner.invoke(app, [str(media_dir), "-a", "mp3"])
        assert mock_run.call_args.kwargs["worker_count"] == 5

    def test_policy_from_environment(self, runner: CliRunner, media_dir: Path) -> None:
        """Test policy flags can come from environment variables."""
        env = {
            "FOLDER_CONVERT_DELETE_SOURCE": "1",
            "FOLDER_CONVERT_SAVE_INTO_SUBFOLDER": "true",
        }
        with patch("folder_convert.cli.run_conversion", return_value=0) as mock_run:
            runner.invoke(app, [str(media_dir), "-a", "mp3"], env=env)
        assert mock_run.call_args.kwargs["policy"] == ConversionPolicy(
            delete_source=True, save_into_subfolder=True
        )


class TestCLIRun:
    """End-to-end runs with mocked external programs."""

    def test_missing_directory(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test a missing directory aborts before any conversion."""
        with patch("subprocess.run") as mock_run:
            result = runner.invoke(app, [str(temp_dir / "nope"), "-a", "mp3"])
        assert result.exit_code == 1
        assert "Cannot read directory" in result.output
        mock_run.assert_not_called()

    def test_no_media_files(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test a folder without media exits cleanly."""
        (temp_dir / "notes.txt").touch()
        result = runner.invoke(app, [str(temp_dir)])
        assert result.exit_code == 0
        assert "No audio or image files found" in result.output

    def test_converts_audio_and_images(
        self,
        runner: CliRunner,
        media_dir: Path,
        tools_installed: MagicMock,
        mock_subprocess_success: MagicMock,
    ) -> None:
        """Test a.wav and b.png are converted with the right programs."""
        with patch("subprocess.run", return_value=mock_subprocess_success) as mock_run:
            result = runner.invoke(app, [str(media_dir), "-a", "mp3", "-i", ".JPG"])

        assert result.exit_code == 0
        assert "Subdirectories found" in result.output
        assert "Converted 2 of 2" in result.output
        commands = _commands(mock_run)
        audio = str(media_dir / "a.wav"), str(media_dir / "a.mp3")
        image = str(media_dir / "b.png"), str(media_dir / "b.jpg")
        assert ["ffmpeg", "-y", "-i", *audio] in commands
        assert ["magick", *image] in commands

    def test_kind_without_format_is_skipped(
        self,
        runner: CliRunner,
        media_dir: Path,
        tools_installed: MagicMock,
        mock_subprocess_success: MagicMock,
    ) -> None:
        """Test images are skipped with a warning when no image format is given."""
        with patch("subprocess.run", return_value=mock_subprocess_success) as mock_run:
            result = runner.invoke(app, [str(media_dir), "-a", "ogg"])

        assert result.exit_code == 0
        assert "--image-format" in result.output
        assert [cmd[0] for cmd in _commands(mock_run)] == ["ffmpeg"]

    def test_same_format_is_not_converted(
        self, runner: CliRunner, temp_dir: Path, tools_installed: MagicMock
    ) -> None:
        """Test a.mp3 with target mp3 is never dispatched."""
        (temp_dir / "a.mp3").touch()
        with patch("subprocess.run") as mock_run:
            result = runner.invoke(app, [str(temp_dir), "-a", "mp3"])

        assert result.exit_code == 0
        assert "Nothing to convert" in result.output
        mock_run.assert_not_called()

    def test_missing_tool(self, runner: CliRunner, media_dir: Path) -> None:
        """Test a missing external program exits with code 2."""
        with (
            patch("folder_convert.cli.check_tool", return_value=False),
            patch("subprocess.run") as mock_run,
        ):
            result = runner.invoke(app, [str(media_dir), "-a", "mp3"])

        assert result.exit_code == 2
        assert "ffmpeg not found" in result.output
        mock_run.assert_not_called()

    def test_failure_sets_exit_code(
        self,
        runner: CliRunner,
        media_dir: Path,
        tools_installed: MagicMock,
        mock_subprocess_failure: MagicMock,
    ) -> None:
        """Test a failed conversion is reported and exits with code 1."""
        with patch("subprocess.run", return_value=mock_subprocess_failure):
            result = runner.invoke(app, [str(media_dir), "-a", "mp3"])

        assert result.exit_code == 1
        assert "1 failed" in result.output
        assert (media_dir / "a.wav").exists()

    def test_delete_source_and_subfolder(
        self,
        runner: CliRunner,
        media_dir: Path,
        tools_installed: MagicMock,
        mock_subprocess_success: MagicMock,
    ) -> None:
        """Test policy flags move outputs and remove converted sources."""
        with patch("subprocess.run", return_value=mock_subprocess_success) as mock_run:
            result = runner.invoke(
                app,
                [str(media_dir), "-i", "webp", "--delete-source", "--into-subfolder"],
            )

        assert result.exit_code == 0
        assert (media_dir / "converted").is_dir()
        assert not (media_dir / "b.png").exists()
        assert (media_dir / "a.wav").exists()
        assert _commands(mock_run) == [
            [
                "magick",
                str(media_dir / "b.png"),
                str(media_dir / "converted" / "b.webp"),
            ]
        ]

    def test_recursive(
        self,
        runner: CliRunner,
        media_dir: Path,
        tools_installed: MagicMock,
        mock_subprocess_success: MagicMock,
    ) -> None:
        """Test --recursive converts files in subdirectories."""
        (media_dir / "d" / "e.flac").touch()
        with patch("subprocess.run", return_value=mock_subprocess_success) as mock_run:
            result = runner.invoke(app, [str(media_dir), "-a", "mp3", "-r"])

        assert result.exit_code == 0
        assert "Subdirectories found" not in result.output
        sources = [cmd[3] for cmd in _commands(mock_run)]
        assert sorted(sources) == sorted(
            [str(media_dir / "a.wav"), str(media_dir / "d" / "e.flac")]
        )


class TestResolveTargets:
    """Tests for resolve_targets() function."""

    def test_only_found_kinds(self, temp_dir: Path) -> None:
        """Test kinds absent from the scan are left out."""
        (temp_dir / "a.wav").touch()
        scan = scan_directory(temp_dir)
        assert resolve_targets(scan, ".mp3", ".jpg") == {MediaKind.AUDIO: ".mp3"}


class TestRunConversion:
    """Tests for run_conversion() function."""

    def test_only_noops(self) -> None:
        """Test a list of no-op tasks converts nothing."""
        tasks = [Task(Path("a.mp3"), MediaKind.AUDIO, ".mp3")]
        with patch("folder_convert.cli.Dispatcher") as mock_dispatcher:
            assert run_conversion(tasks, ConversionPolicy(), worker_count=2) == 0
        mock_dispatcher.assert_not_called()


class TestReportOutcome:
    """Tests for the per-task result line."""

    def test_missing_program_names_source(self) -> None:
        """Test a missing-program failure line names the file it was for."""
        task = Task(Path("music/a.wav"), MediaKind.AUDIO, ".mp3")
        outcome = ConversionOutcome.failed(task, ToolNotFoundError("ffmpeg"))

        with patch("folder_convert.cli.print_error") as mock_error:
            _report_outcome(outcome)

        line = mock_error.call_args.args[0]
        assert line.startswith("music/a.wav: ")
        assert "ffmpeg not found" in line

    def test_unexpected_error_names_source(self) -> None:
        """Test an unexpected exception line names the file it was for."""
        task = Task(Path("b.png"), MediaKind.IMAGE, ".jpg")
        outcome = ConversionOutcome.failed(task, RuntimeError("boom"))

        with patch("folder_convert.cli.print_error") as mock_error:
            _report_outcome(outcome)

        assert mock_error.call_args.args[0] == "b.png: Unexpected error: boom"

    def test_path_not_repeated(self) -> None:
        """Test messages that already carry the path are printed as is."""
        task = Task(Path("a.wav"), MediaKind.AUDIO, ".mp3")
        outcome = ConversionOutcome.failed(task, ConversionError("a.wav", "bad"))

        with patch("folder_convert.cli.print_error") as mock_error:
            _report_outcome(outcome)

        assert mock_error.call_args.args[0] == "Conversion failed for a.wav: bad"
