"""Convert feature - handles external program invocation for one file."""

from folder_convert.convert.invoker import (
    CONVERTED_DIR_NAME,
    ConversionOutcome,
    ConversionPolicy,
    check_tool,
    convert_task,
    resolve_output_path,
    run_tool,
)

__all__ = [
    "CONVERTED_DIR_NAME",
    "ConversionOutcome",
    "ConversionPolicy",
    "check_tool",
    "convert_task",
    "resolve_output_path",
    "run_tool",
]
