"""errtrail - Call-site provenance for errors, and readable fatal reports.

Chain an error every time you hand it up the stack. Each link records where
it passed through, and optionally what that site was doing. When the error
turns out to be fatal, ``dispose`` prints the whole trail as an aligned table
and ends the process.

Quick Start:
    >>> from errtrail import chain, chain_with, dispose, new
    >>>
    >>> def read_config(path: str) -> Exception | None:
    ...     try:
    ...         open(path).close()
    ...     except OSError as e:
    ...         return chain_with(e, f"reading {path}")
    ...     return None
    >>>
    >>> def start() -> Exception | None:
    ...     return chain(read_config("/etc/app.toml"))
    >>>
    >>> if err := start():
    ...     dispose(err)  # doctest: +SKIP

    which prints, newest link first:

    main.<module>      app/main.py:21    fatal error
    main.start         app/main.py:18    ↓
    main.read_config   app/main.py:14    reading /etc/app.toml
                                         [Errno 2] No such file or directory: '/etc/app.toml'

Interop with generic queries:
    >>> err = chain(chain(KeyError("user")))
    >>> is_error(err, KeyError)
    True
    >>> root_cause(err)
    KeyError('user')

Flat messages for log lines:
    >>> str(flatten(err))  # doctest: +SKIP
    '<module>(errtrail/__init__.py:1) → <module>(errtrail/__init__.py:1) → user'
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    ChainedError,
    Chainer,
    ChainInvariantError,
    ErrtrailError,
    Frame,
    FrameCaptureError,
    FrameSource,
    ReportError,
    SerialFrameSource,
    StackFrameSource,
    Unwrappable,
    as_error,
    chain,
    chain_depth,
    chain_with,
    chain_withf,
    flatten,
    is_error,
    iter_chain,
    new,
    newf,
    root_cause,
    unwrap,
)

# Formatters
from .foundation.errors import (
    bare_function,
    omit_package,
    path_base,
    path_last_n_segments,
    qualified_function,
)

# Config
from .foundation.config import ErrtrailSettings, clear_settings_cache, get_settings

# Reporting
from .runtime.report import (
    DEFAULT_REPORTER,
    FATAL_MESSAGE,
    Disposer,
    ReportOption,
    ReportOptions,
    Styles,
    TableReporter,
    build_table,
    configure,
    dispose,
    exit_with_status,
    new_default_reporter,
    prepare,
    raise_error,
    reset_options,
    terminate_with,
    using_reporter,
)

# Logging
from .runtime.observability import configure_logging, get_logger

__all__ = [
    "__version__",
    # Errors
    "ErrtrailError", "ChainInvariantError", "FrameCaptureError", "ReportError",
    "Frame", "FrameSource", "StackFrameSource", "SerialFrameSource",
    "ChainedError", "Chainer", "Unwrappable",
    "new", "newf", "chain", "chain_with", "chain_withf",
    "unwrap", "iter_chain", "root_cause", "is_error", "as_error", "chain_depth", "flatten",
    # Formatters
    "path_base", "path_last_n_segments", "omit_package", "qualified_function", "bare_function",
    # Config
    "ErrtrailSettings", "get_settings", "clear_settings_cache",
    # Reporting
    "Styles", "TableReporter", "DEFAULT_REPORTER", "new_default_reporter", "build_table",
    "ReportOptions", "ReportOption", "exit_with_status", "raise_error", "terminate_with", "using_reporter",
    "FATAL_MESSAGE", "Disposer", "dispose", "prepare", "configure", "reset_options",
    # Logging
    "configure_logging", "get_logger",
]
