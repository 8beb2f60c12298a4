"""Fatal-error reporting: table layout, reporters, options, disposal."""

from .disposal import FATAL_MESSAGE, Disposer, configure, dispose, prepare
from .options import (
    ReportOption,
    ReportOptions,
    Terminator,
    apply_options,
    default_options,
    exit_with_status,
    raise_error,
    reset_options,
    set_default_options,
    terminate_with,
    using_reporter,
    with_defaults,
)
from .reporter import DEFAULT_REPORTER, Reporter, TableReporter, new_default_reporter, no_width, terminal_width
from .table import (
    ELLIPSIS,
    MIN_MESSAGE_WIDTH,
    PASSTHROUGH_GLYPH,
    Row,
    Styles,
    Table,
    build_rows,
    build_table,
    display_width,
)

__all__ = [
    # Table
    "Row", "Table", "Styles", "build_rows", "build_table", "display_width",
    "PASSTHROUGH_GLYPH", "ELLIPSIS", "MIN_MESSAGE_WIDTH",
    # Reporters
    "Reporter", "TableReporter", "DEFAULT_REPORTER", "new_default_reporter", "terminal_width", "no_width",
    # Options
    "ReportOptions", "ReportOption", "Terminator", "apply_options", "with_defaults",
    "default_options", "set_default_options", "reset_options",
    "exit_with_status", "raise_error", "terminate_with", "using_reporter",
    # Disposal
    "FATAL_MESSAGE", "Disposer", "dispose", "prepare", "configure",
]
