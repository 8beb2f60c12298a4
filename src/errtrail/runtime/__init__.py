"""Runtime - Reporting and observability.

Contains: fatal-error reporting (table layout, reporters, disposal), logging.
"""

from __future__ import annotations

__all__ = [
    # Report
    "Row", "Table", "Styles", "build_table",
    "Reporter", "TableReporter", "DEFAULT_REPORTER", "new_default_reporter", "terminal_width",
    "ReportOptions", "ReportOption", "exit_with_status", "raise_error", "terminate_with", "using_reporter",
    "Disposer", "dispose", "prepare", "configure", "reset_options",
    # Observability
    "BoundLogger", "configure_logging", "get_logger", "log_context",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("Row", "Table", "Styles", "build_table",
                "Reporter", "TableReporter", "DEFAULT_REPORTER", "new_default_reporter", "terminal_width",
                "ReportOptions", "ReportOption", "exit_with_status", "raise_error", "terminate_with", "using_reporter",
                "Disposer", "dispose", "prepare", "configure", "reset_options"):
        from . import report
        return getattr(report, name)

    if name in ("BoundLogger", "configure_logging", "get_logger", "log_context"):
        from . import observability
        return getattr(observability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
