"""External program wrapper for single file conversion."""

from __future__ import annotations

import logging
import shutil
import subprocess  # nosec B404
from dataclasses import dataclass
from pathlib import Path

from folder_convert.core import (
    ConversionError,
    DeletionError,
    OutputFolderError,
    Task,
    ToolNotFoundError,
    build_command,
    format_error,
)

logger = logging.getLogger(__name__)

# Folder created next to the source when saving into a subfolder
CONVERTED_DIR_NAME = "converted"


@dataclass(frozen=True)
class ConversionPolicy:
    """Per-run policy applied to every converted file.

    Attributes:
        delete_source: Remove the source file after a successful conversion.
        save_into_subfolder: Write outputs into a "converted" subfolder.
    """

    delete_source: bool = False
    save_into_subfolder: bool = False


@dataclass(frozen=True)
class ConversionOutcome:
    """Result of converting one task.

    Attributes:
        task: The task that was converted.
        success: Whether the conversion succeeded.
        output_path: Path to the converted file if successful.
        error: The error that made the conversion fail.
    """

    task: Task
    success: bool
    output_path: Path | None = None
    error: Exception | None = None

    @classmethod
    def succeeded(cls, task: Task, output_path: Path) -> ConversionOutcome:
        return cls(task=task, success=True, output_path=output_path)

    @classmethod
    def failed(cls, task: Task, error: Exception) -> ConversionOutcome:
        return cls(task=task, success=False, error=error)

    @property
    def reason(self) -> str:
        """Human-readable failure reason, empty on success."""
        if self.error is None:
            return ""
        return format_error(self.error)


def check_tool(program: str) -> bool:
    """Check if an external program is available on PATH.

    Returns:
        True if the program is available, False otherwise.
    """
    return shutil.which(program) is not None


def resolve_output_path(task: Task, policy: ConversionPolicy) -> Path:
    """Compute where the converted file is written.

    The source extension is replaced with the target format. With
    save_into_subfolder the file goes into a "converted" folder beside
    the source.
    """
    output_path = task.path.with_suffix(task.target_format)
    if policy.save_into_subfolder:
        output_path = output_path.parent / CONVERTED_DIR_NAME / output_path.name
    return output_path


def run_tool(cmd: list[str], input_path: Path) -> None:
    """Run a conversion command and wait for it to exit.

    Raises:
        ToolNotFoundError: If the program cannot be found.
        ConversionError: If the program fails to start or exits non-zero.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(  # nosec B603
            cmd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise ToolNotFoundError(cmd[0]) from e
    except (subprocess.SubprocessError, OSError) as e:
        raise ConversionError(str(input_path), str(e)) from e

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise ConversionError(
            str(input_path),
            stderr or f"{cmd[0]} exited with code {result.returncode}",
        )


def _delete_source(path: Path) -> None:
    """Remove a converted source file; failures are only logged."""
    try:
        path.unlink()
    except OSError as e:
        logger.warning("%s", DeletionError(str(path), str(e)))


def convert_task(task: Task, policy: ConversionPolicy) -> ConversionOutcome:
    """Convert one file with the external tool for its media kind.

    Never raises: every failure is reported through the returned outcome
    and leaves the source file untouched.

    Args:
        task: The file to convert.
        policy: Output location and source deletion policy.

    Returns:
        ConversionOutcome describing success or the failure cause.
    """
    output_path = resolve_output_path(task, policy)

    if policy.save_into_subfolder:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = OutputFolderError(str(output_path.parent), str(e))
            logger.debug("%s", error)
            return ConversionOutcome.failed(task, error)

    cmd = build_command(task.media_kind, task.path, output_path)

    try:
        run_tool(cmd, task.path)
    except (ConversionError, ToolNotFoundError) as e:
        logger.debug("%s", e)
        return ConversionOutcome.failed(task, e)

    if policy.delete_source:
        _delete_source(task.path)

    return ConversionOutcome.succeeded(task, output_path)
