"""Formatters that shorten frame fields for display.

Path formatters turn an absolute source path into something that fits a
table column; function formatters pick how much of the qualified name to show.
Both are plain callables so reporters can take any ``str -> str`` or
``Frame -> str`` function.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Callable, TypeAlias

if TYPE_CHECKING:
    from .frame import Frame

PathFormatter: TypeAlias = Callable[[str], str]
FuncFormatter: TypeAlias = Callable[["Frame"], str]

UNKNOWN_PATH_TEXT = "??"

# Separators recognized in frame file paths on this platform
_SEPARATORS = tuple(dict.fromkeys(s for s in ("/", os.sep, os.altsep) if s))


def path_base(path: str) -> str:
    """Final path component, ``??`` when the path is unknown."""
    if not path:
        return UNKNOWN_PATH_TEXT
    return os.path.basename(path)


def path_last_n_segments(n: int) -> PathFormatter:
    """Build a formatter keeping only the last ``n`` segments of a path.

    Example:
        >>> path_last_n_segments(2)("/srv/app/pkg/loader.py")
        'pkg/loader.py'
        >>> path_last_n_segments(2)("loader.py")
        'loader.py'
    """
    def fmt(path: str) -> str:
        if not path:
            return UNKNOWN_PATH_TEXT
        prefix = path
        for _ in range(n):
            idx = max(prefix.rfind(sep) for sep in _SEPARATORS)
            if idx == -1:
                break
            prefix = prefix[:idx]
        if len(prefix) == len(path):
            return path
        return path[len(prefix) + 1:]
    return fmt


def omit_package(frame: Frame) -> str:
    """Function name prefixed by the last component of its module.

    ``app.io.loader`` + ``Loader.load`` gives ``loader.Loader.load``.
    """
    if not frame.module:
        return frame.function
    return f"{frame.module.rpartition('.')[2]}.{frame.function}"


def qualified_function(frame: Frame) -> str:
    return frame.qualified_name


def bare_function(frame: Frame) -> str:
    return frame.function


FUNCTION_STYLES: dict[str, FuncFormatter] = {
    "short": omit_package,
    "qualified": qualified_function,
    "bare": bare_function,
}
