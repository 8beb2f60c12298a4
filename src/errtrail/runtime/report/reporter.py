"""Reporters: render a chained error to a diagnostic stream.

A reporter is any callable ``(stream, err) -> None`` that raises when the
stream cannot be written. TableReporter is the built-in one: it lays the
chain out with ``build_table``, fits the message column to the terminal
when writing to one, and colors the columns when colors are enabled.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, TextIO, TypeAlias

from errtrail.foundation.errors import (
    FUNCTION_STYLES,
    FuncFormatter,
    PathFormatter,
    omit_package,
    path_last_n_segments,
)

from .table import MIN_MESSAGE_WIDTH, Styles, Table, build_table

if TYPE_CHECKING:
    from errtrail.foundation.config import ReportSettings

Reporter: TypeAlias = Callable[[TextIO, BaseException], None]
WidthProbe: TypeAlias = Callable[[TextIO], "int | None"]


def _is_tty(stream: TextIO) -> bool:
    return getattr(stream, "isatty", lambda: False)()


def terminal_width(stream: TextIO) -> int | None:
    """Column count of the terminal behind ``stream``; None when it is not a terminal."""
    if not _is_tty(stream):
        return None
    try:
        return os.get_terminal_size(stream.fileno()).columns
    except (OSError, ValueError, AttributeError):
        return None


def no_width(stream: TextIO) -> int | None:
    """Width probe that never clips."""
    return None


@dataclass(slots=True)
class TableReporter:
    """Aligned table reporter.

    Args: path_formatter (last 2 segments), func_formatter (module + function),
    colors (None = if the stream is a tty), compress (True), min_message_width (10),
    width_probe (terminal size of the stream)

    Example:
        >>> import io
        >>> from errtrail import chain
        >>> out = io.StringIO()
        >>> TableReporter(colors=False)(out, chain(ValueError("bad port")))
        >>> out.getvalue()  # doctest: +SKIP
        '<module> app/main.py:3 bad port\\n'
    """

    path_formatter: PathFormatter = field(default_factory=lambda: path_last_n_segments(2))
    func_formatter: FuncFormatter = omit_package
    colors: bool | None = None
    compress: bool = True
    min_message_width: int = MIN_MESSAGE_WIDTH
    width_probe: WidthProbe = terminal_width

    @classmethod
    def from_settings(cls, settings: ReportSettings | None = None) -> TableReporter:
        if settings is None:
            from errtrail.foundation.config import get_settings
            settings = get_settings().report
        return cls(
            path_formatter=path_last_n_segments(settings.path_segments),
            func_formatter=FUNCTION_STYLES[settings.function_style],
            colors=settings.colors,
            compress=settings.compress,
            min_message_width=settings.min_message_width,
        )

    def table(self, stream: TextIO, err: BaseException) -> Table:
        return build_table(
            err,
            path_formatter=self.path_formatter,
            func_formatter=self.func_formatter,
            compress=self.compress,
            width=self.width_probe(stream),
            min_message_width=self.min_message_width,
        )

    def styles(self, stream: TextIO) -> Styles:
        colors = _is_tty(stream) if self.colors is None else self.colors
        return Styles.ansi() if colors else Styles.plain()

    def __call__(self, stream: TextIO, err: BaseException) -> None:
        self.table(stream, err).render(stream, self.styles(stream))
        stream.flush()


def new_default_reporter(
    path_formatter: PathFormatter,
    func_formatter: FuncFormatter = omit_package,
) -> TableReporter:
    """Table reporter with the given formatters and default everything else."""
    return TableReporter(path_formatter=path_formatter, func_formatter=func_formatter)


DEFAULT_REPORTER: Reporter = new_default_reporter(path_last_n_segments(2), omit_package)
