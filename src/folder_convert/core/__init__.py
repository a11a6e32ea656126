"""Core utilities - errors and media format tables."""

from folder_convert.core.errors import (
    ConversionError,
    DeletionError,
    OutputFolderError,
    ScanError,
    ToolNotFoundError,
    format_error,
)
from folder_convert.core.formats import (
    AUDIO_EXTENSIONS,
    IMAGE_EXTENSIONS,
    MEDIA_TOOLS,
    MediaKind,
    MediaTool,
    build_command,
    classify,
    normalize_format,
)
from folder_convert.core.task import Task, filter_noops

__all__ = [
    "AUDIO_EXTENSIONS",
    "IMAGE_EXTENSIONS",
    "MEDIA_TOOLS",
    "ConversionError",
    "DeletionError",
    "MediaKind",
    "MediaTool",
    "OutputFolderError",
    "ScanError",
    "Task",
    "ToolNotFoundError",
    "build_command",
    "classify",
    "filter_noops",
    "format_error",
    "normalize_format",
]
