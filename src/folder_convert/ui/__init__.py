"""UI feature - Rich progress display and console output."""

from folder_convert.ui.progress import (
    console,
    create_batch_progress,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_batch_progress",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
