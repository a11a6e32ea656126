"""Media kinds, extension tables and external tool commands."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

AUDIO_EXTENSIONS: tuple[str, ...] = (
    ".mp3",
    ".wav",
    ".flac",
    ".ogg",
    ".aac",
    ".m4a",
    ".wma",
    ".aiff",
    ".au",
    ".opus",
)

IMAGE_EXTENSIONS: tuple[str, ...] = (
    # Common raster and vector formats
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".ico",
    ".gif",
    ".bmp",
    ".tiff",
    ".tif",
    ".svg",
    ".heic",
    ".heif",
    ".avif",
    ".jfif",
    ".apng",
    ".psd",
    ".exr",
    ".tga",
    ".pdf",
    ".eps",
    ".djvu",
    # Camera raw
    ".raw",
    ".cr2",
    ".nef",
    ".arw",
    ".dng",
    ".rw2",
    ".orf",
    ".sr2",
    # Netpbm and X11 bitmaps
    ".pbm",
    ".pgm",
    ".ppm",
    ".pnm",
    ".xpm",
    ".xbm",
)


class MediaKind(Enum):
    """Classification of a file that decides which tool converts it."""

    AUDIO = "audio"
    IMAGE = "image"


@dataclass(frozen=True)
class MediaTool:
    """External program used for one media kind.

    Attributes:
        program: Executable name looked up on PATH.
        extensions: File extensions this tool accepts and produces.
        input_args: Arguments placed before the source path.
    """

    program: str
    extensions: tuple[str, ...]
    input_args: tuple[str, ...] = ()

    def command(self, source: Path, output: Path) -> list[str]:
        """Build the command line converting source into output."""
        return [self.program, *self.input_args, str(source), str(output)]


MEDIA_TOOLS: dict[MediaKind, MediaTool] = {
    MediaKind.AUDIO: MediaTool(
        program="ffmpeg",
        extensions=AUDIO_EXTENSIONS,
        input_args=("-y", "-i"),
    ),
    MediaKind.IMAGE: MediaTool(program="magick", extensions=IMAGE_EXTENSIONS),
}


def classify(path: Path) -> MediaKind | None:
    """Return the media kind of a file by its extension, or None if unknown."""
    suffix = path.suffix.lower()
    for kind, tool in MEDIA_TOOLS.items():
        if suffix in tool.extensions:
            return kind
    return None


def normalize_format(value: str) -> str:
    """Normalize a target format to a lowercase extension with a leading dot.

    Args:
        value: Format as typed by the user, e.g. "mp3", ".MP3".

    Returns:
        Normalized extension, e.g. ".mp3".

    Raises:
        ValueError: If the value is empty.
    """
    normalized = value.strip().lower()
    if not normalized or normalized == ".":
        raise ValueError("Format must not be empty")
    if not normalized.startswith("."):
        normalized = f".{normalized}"
    return normalized


def build_command(kind: MediaKind, source: Path, output: Path) -> list[str]:
    """Build the external tool command for a media kind."""
    return MEDIA_TOOLS[kind].command(source, output)
