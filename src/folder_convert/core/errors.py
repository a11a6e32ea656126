"""Custom exceptions and error formatting for folder-convert."""

from __future__ import annotations


class ScanError(Exception):
    """Raised when the source directory cannot be scanned."""

    def __init__(self, path: str, message: str) -> None:
        """Initialize ScanError.

        Args:
            path: The directory that could not be scanned.
            message: Description of the error.
        """
        self.path = path
        self.message = message
        super().__init__(f"Cannot scan {path}: {message}")


class OutputFolderError(Exception):
    """Raised when the output subfolder for a task cannot be created."""

    def __init__(self, path: str, message: str) -> None:
        """Initialize OutputFolderError.

        Args:
            path: The folder that could not be created.
            message: Description of the error.
        """
        self.path = path
        self.message = message
        super().__init__(f"Cannot create folder {path}: {message}")


class ConversionError(Exception):
    """Raised when an external conversion program fails."""

    def __init__(self, input_path: str, message: str) -> None:
        """Initialize ConversionError.

        Args:
            input_path: Path to the input file that failed to convert.
            message: Description of the error.
        """
        self.input_path = input_path
        self.message = message
        super().__init__(f"Failed to convert {input_path}: {message}")


class DeletionError(Exception):
    """Raised when a source file cannot be removed after conversion."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"Failed to delete {path}: {message}")


class ToolNotFoundError(Exception):
    """Raised when an external conversion program is not installed."""

    def __init__(self, program: str) -> None:
        """Initialize ToolNotFoundError.

        Args:
            program: Name of the missing executable.
        """
        self.program = program
        super().__init__(
            f"{program} not found. Install it and make sure it is on your PATH."
        )


def format_error(error: Exception) -> str:
    """Format error for user display with actionable suggestion.

    Args:
        error: The exception to format.

    Returns:
        Human-readable error message with suggestion.
    """
    if isinstance(error, ScanError):
        return f"Cannot read directory {error.path}: {error.message}. Check the path."

    if isinstance(error, OutputFolderError):
        return (
            f"Cannot create output folder {error.path}: {error.message}. "
            "Check permissions."
        )

    if isinstance(error, ConversionError):
        return f"Conversion failed for {error.input_path}: {error.message}"

    if isinstance(error, DeletionError):
        return f"Could not delete source {error.path}: {error.message}"

    if isinstance(error, ToolNotFoundError):
        return str(error)

    if isinstance(error, FileNotFoundError):
        return f"File not found: {error}. Check that the path exists."

    if isinstance(error, PermissionError):
        return f"Permission denied: {error}. Check file permissions."

    if isinstance(error, OSError):
        if "No space left" in str(error):
            return "Insufficient disk space. Free up space and retry."
        return f"System error: {error}"

    return f"Unexpected error: {error}"
