"""Chained error handling for errtrail.

- Frame/FrameSource: caller-site capture for each chain link
- ChainedError/Chainer: chain links and their constructors
- unwrap/iter_chain/root_cause/is_error/as_error: generic queries over unwrap
- flatten: collapse a chain into a single descriptive message
- Path and function formatters shared by flatten and the reporter
"""

from .chain import (
    FLATTEN_SEPARATOR,
    ChainedError,
    Chainer,
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
from .errors import ChainInvariantError, ErrtrailError, FrameCaptureError, ReportError
from .formatters import (
    FUNCTION_STYLES,
    UNKNOWN_PATH_TEXT,
    FuncFormatter,
    PathFormatter,
    bare_function,
    omit_package,
    path_base,
    path_last_n_segments,
    qualified_function,
)
from .frame import DEFAULT_FRAME_SOURCE, Frame, FrameSource, SerialFrameSource, StackFrameSource

__all__ = [
    # Exceptions
    "ErrtrailError", "ChainInvariantError", "FrameCaptureError", "ReportError",
    # Frames
    "Frame", "FrameSource", "StackFrameSource", "SerialFrameSource", "DEFAULT_FRAME_SOURCE",
    # Chain
    "ChainedError", "Chainer", "Unwrappable", "FLATTEN_SEPARATOR",
    "new", "newf", "chain", "chain_with", "chain_withf",
    "unwrap", "iter_chain", "root_cause", "is_error", "as_error", "chain_depth", "flatten",
    # Formatters
    "PathFormatter", "FuncFormatter", "UNKNOWN_PATH_TEXT", "FUNCTION_STYLES",
    "path_base", "path_last_n_segments", "omit_package", "qualified_function", "bare_function",
]
