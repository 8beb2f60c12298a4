"""Foundation - Core building blocks for errtrail.

Contains: chained errors, frame capture, formatters, config.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "ErrtrailError", "ChainInvariantError", "FrameCaptureError", "ReportError",
    "Frame", "FrameSource", "StackFrameSource", "SerialFrameSource",
    "ChainedError", "Chainer", "Unwrappable",
    "new", "newf", "chain", "chain_with", "chain_withf",
    "unwrap", "iter_chain", "root_cause", "is_error", "as_error", "chain_depth", "flatten",
    "path_base", "path_last_n_segments", "omit_package", "qualified_function", "bare_function",
    # Config
    "ErrtrailSettings", "get_settings", "clear_settings_cache", "ReportSettings", "LoggingSettings",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ErrtrailError", "ChainInvariantError", "FrameCaptureError", "ReportError",
                "Frame", "FrameSource", "StackFrameSource", "SerialFrameSource",
                "ChainedError", "Chainer", "Unwrappable",
                "new", "newf", "chain", "chain_with", "chain_withf",
                "unwrap", "iter_chain", "root_cause", "is_error", "as_error", "chain_depth", "flatten",
                "path_base", "path_last_n_segments", "omit_package", "qualified_function", "bare_function"):
        from . import errors
        return getattr(errors, name)

    if name in ("ErrtrailSettings", "get_settings", "clear_settings_cache", "ReportSettings", "LoggingSettings"):
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
