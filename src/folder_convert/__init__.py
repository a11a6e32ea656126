"""Batch converter for the audio and image files in a folder."""

from folder_convert.core import ConversionError, ScanError, ToolNotFoundError

__version__ = "0.1.0"
__metadata__ = {
    "name": "folder-convert",
    "version": __version__,
    "license": "MIT",
    "python": ">=3.12",
}
__all__ = [
    "ConversionError",
    "ScanError",
    "ToolNotFoundError",
    "__metadata__",
    "__version__",
]
