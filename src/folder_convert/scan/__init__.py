"""Scan feature - finds convertible files in a directory."""

from folder_convert.scan.scanner import (
    ScannedFile,
    ScanResult,
    build_tasks,
    scan_directory,
)

__all__ = [
    "ScanResult",
    "ScannedFile",
    "build_tasks",
    "scan_directory",
]
