"""CLI implementation for folder-convert."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler
from rich.markup import escape

from folder_convert import __version__
from folder_convert.batch import Dispatcher, default_worker_count
from folder_convert.convert import ConversionOutcome, ConversionPolicy, check_tool
from folder_convert.core import (
    AUDIO_EXTENSIONS,
    IMAGE_EXTENSIONS,
    MEDIA_TOOLS,
    MediaKind,
    ScanError,
    Task,
    ToolNotFoundError,
    filter_noops,
    format_error,
    normalize_format,
)
from folder_convert.scan import ScanResult, build_tasks, scan_directory
from folder_convert.ui import (
    console,
    create_batch_progress,
    print_error,
    print_info,
    print_success,
    print_warning,
)

# Upper bound for --workers
MAX_WORKERS = 64

# Environment variables backing the policy flags
ENV_DELETE_SOURCE = "FOLDER_CONVERT_DELETE_SOURCE"
ENV_SAVE_INTO_SUBFOLDER = "FOLDER_CONVERT_SAVE_INTO_SUBFOLDER"

# Create Typer app
app = typer.Typer(
    name="folder-convert",
    help="Convert every audio and image file in a folder to another format.",
    add_completion=False,
)


def _validate_format(value: str | None, extensions: tuple[str, ...]) -> str | None:
    """Normalize a target format and check it against an extension table.

    Raises:
        typer.BadParameter: If the format is empty or not supported.
    """
    if value is None:
        return None
    try:
        normalized = normalize_format(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    if normalized not in extensions:
        valid = ", ".join(ext.lstrip(".") for ext in extensions)
        raise typer.BadParameter(f"Invalid format '{value}'. Valid formats: {valid}")
    return normalized


def validate_audio_format(value: str | None) -> str | None:
    """Validate and normalize the audio target format."""
    return _validate_format(value, AUDIO_EXTENSIONS)


def validate_image_format(value: str | None) -> str | None:
    """Validate and normalize the image target format."""
    return _validate_format(value, IMAGE_EXTENSIONS)


def configure_logging(verbose: bool) -> None:
    """Send log records through Rich, at DEBUG level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(threadName)s %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def resolve_targets(
    scan: ScanResult,
    audio_format: str | None,
    image_format: str | None,
) -> dict[MediaKind, str]:
    """Map each media kind found by the scan to its target format.

    Kinds found without a target format are reported and left out.

    Args:
        scan: Result of the directory scan.
        audio_format: Target format for audio files, if any.
        image_format: Target format for image files, if any.

    Returns:
        Target format per media kind to convert.
    """
    requested = {MediaKind.AUDIO: audio_format, MediaKind.IMAGE: image_format}
    options = {MediaKind.AUDIO: "--audio-format", MediaKind.IMAGE: "--image-format"}
    targets: dict[MediaKind, str] = {}

    for kind in MediaKind:
        count = scan.count(kind)
        if count == 0:
            continue
        target = requested.get(kind)
        if target is None:
            print_warning(
                f"Found {count} {kind.value} file(s) but no {options[kind]} "
                "given; skipping them"
            )
            continue
        targets[kind] = target

    return targets


def _missing_tools(kinds: set[MediaKind]) -> list[str]:
    """Programs needed for the given media kinds that are not installed."""
    programs = sorted({MEDIA_TOOLS[kind].program for kind in kinds})
    return [program for program in programs if not check_tool(program)]


def _report_outcome(outcome: ConversionOutcome) -> None:
    """Print one line for a finished task.

    Failure lines always name the source file, also for errors such as a
    missing program whose message carries no path.
    """
    if outcome.success:
        message = f"Converted: {outcome.task.path} → {outcome.output_path}"
        print_success(escape(message))
        return

    source = str(outcome.task.path)
    reason = outcome.reason
    if source not in reason:
        reason = f"{source}: {reason}"
    print_error(escape(reason))


def run_conversion(
    tasks: list[Task],
    policy: ConversionPolicy,
    worker_count: int,
) -> int:
    """Convert tasks in parallel and print a summary.

    Args:
        tasks: Tasks in scan order, possibly including no-ops.
        policy: Output and deletion policy.
        worker_count: Number of concurrent workers.

    Returns:
        Exit code (0 = all success, 1 = some failures, 2 = missing tool).
    """
    pending = filter_noops(tasks)
    skipped = len(tasks) - len(pending)
    if skipped > 0:
        print_info(f"Skipped {skipped} file(s) already in the target format")

    if not pending:
        print_info("Nothing to convert")
        return 0

    missing = _missing_tools({task.media_kind for task in pending})
    if missing:
        for program in missing:
            print_error(format_error(ToolNotFoundError(program)))
        return 2

    print_info(f"Converting {len(pending)} file(s) with {worker_count} worker(s)...")

    with create_batch_progress() as progress:
        progress_id = progress.add_task("Converting...", total=len(pending))

        def on_outcome(outcome: ConversionOutcome) -> None:
            _report_outcome(outcome)
            progress.advance(progress_id)

        dispatcher = Dispatcher(policy=policy, on_outcome=on_outcome)
        summary = dispatcher.execute(pending, worker_count)

    summary_line = (
        f"\nConverted {summary.succeeded} of {summary.submitted} file(s) "
        f"in {summary.elapsed_seconds:.1f}s"
    )
    if summary.failed > 0:
        summary_line += f", {summary.failed} failed"
    print_info(summary_line)

    return 0 if summary.all_succeeded else 1


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print(f"folder-convert version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    directory: Annotated[
        Path,
        typer.Argument(
            help="Directory containing the files to convert.",
        ),
    ] = Path(),
    audio_format: Annotated[
        str | None,
        typer.Option(
            "--audio-format",
            "-a",
            help="Target format for audio files, e.g. mp3, flac, opus.",
            callback=validate_audio_format,
        ),
    ] = None,
    image_format: Annotated[
        str | None,
        typer.Option(
            "--image-format",
            "-i",
            help="Target format for image files, e.g. jpg, png, webp.",
            callback=validate_image_format,
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-w",
            help="Number of parallel conversions (default: one per CPU).",
            min=1,
            max=MAX_WORKERS,
        ),
    ] = None,
    delete_source: Annotated[
        bool,
        typer.Option(
            "--delete-source",
            help="Delete each source file after it was converted.",
            envvar=ENV_DELETE_SOURCE,
        ),
    ] = False,
    into_subfolder: Annotated[
        bool,
        typer.Option(
            "--into-subfolder",
            help="Save converted files into a 'converted' subfolder.",
            envvar=ENV_SAVE_INTO_SUBFOLDER,
        ),
    ] = False,
    recursive: Annotated[
        bool,
        typer.Option(
            "--recursive",
            "-r",
            help="Also convert files in subdirectories.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Show debug logging.",
        ),
    ] = False,
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Convert audio and image files found in DIRECTORY."""
    configure_logging(verbose)

    try:
        scan = scan_directory(directory, recursive=recursive)
    except ScanError as e:
        print_error(format_error(e))
        raise typer.Exit(code=1) from e

    if not scan.files:
        print_info("No audio or image files found")
        raise typer.Exit(code=0)

    if scan.has_folders and not recursive:
        print_info("Subdirectories found; use --recursive to convert them too")

    targets = resolve_targets(scan, audio_format, image_format)
    tasks = build_tasks(scan, targets)

    policy = ConversionPolicy(
        delete_source=delete_source,
        save_into_subfolder=into_subfolder,
    )
    exit_code = run_conversion(
        tasks=tasks,
        policy=policy,
        worker_count=workers or default_worker_count(),
    )

    raise typer.Exit(code=exit_code)


if __name__ == "__main__":
    app()
