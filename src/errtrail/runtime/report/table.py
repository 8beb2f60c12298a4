"""Table layout for rendering an error chain.

One row per link, newest first, in three left-aligned columns:

    loader.Loader.load   app/loader.py:42   ↓
    loader.read_config   app/loader.py:17   reading config
                                            [Errno 2] No such file or directory

Passthrough links show a ``↓`` placeholder instead of a blank message.
Layout and styling are separate: the algorithm pads and clips plain text and
hands each cell to an injected styling callable.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, TextIO

from errtrail.foundation.errors import ChainedError, FuncFormatter, PathFormatter, iter_chain

if TYPE_CHECKING:
    from collections.abc import Iterable

PASSTHROUGH_GLYPH = "↓"
ELLIPSIS = "..."
MIN_MESSAGE_WIDTH = 10
COLUMN_GAP = " "

Style = Callable[[str], str]


def _identity(s: str) -> str:
    return s


def display_width(s: str) -> int:
    """Terminal columns taken by ``s``. East Asian wide and fullwidth characters take two."""
    return sum(2 if unicodedata.east_asian_width(c) in "WF" else 1 for c in s)


def _truncate(s: str, width: int) -> str:
    """Cut ``s`` so that it plus the ellipsis fits in ``width`` columns."""
    budget, used = max(width - len(ELLIPSIS), 0), 0
    for i, c in enumerate(s):
        used += display_width(c)
        if used > budget:
            return s[:i] + ELLIPSIS
    return s


@dataclass(frozen=True, slots=True)
class Styles:
    """Per-column styling hooks. Each receives unpadded cell text."""

    function: Style = _identity
    path: Style = _identity
    line: Style = _identity
    message: Style = _identity

    @classmethod
    def plain(cls) -> Styles:
        return cls()

    @classmethod
    def ansi(cls) -> Styles:
        """Cyan functions, green paths, yellow line numbers, plain messages."""
        return cls(function=_paint(_ANSI["cyan"]), path=_paint(_ANSI["green"]), line=_paint(_ANSI["yellow"]))


_ANSI = {"reset": "\033[0m", "green": "\033[32m", "yellow": "\033[33m", "cyan": "\033[36m"}


def _paint(code: str) -> Style:
    def style(s: str) -> str:
        return f"{code}{s}{_ANSI['reset']}" if s else s
    return style


@dataclass(slots=True)
class Row:
    """One chain link, already reduced to display text."""

    function: str = ""
    path: str = ""
    line: str = ""
    message: str = ""
    framed: bool = False
    passthrough: bool = False

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}" if self.framed else ""

    @property
    def widths(self) -> tuple[int, int, int]:
        return display_width(self.function), display_width(self.location), display_width(self.message)


@dataclass(slots=True)
class Table:
    """Rows plus per-column widths (function, path:line, message)."""

    rows: list[Row] = field(default_factory=list)
    widths: list[int] = field(default_factory=lambda: [0, 0, 0])

    def measure(self) -> None:
        """Recompute column widths as the maximum over all rows."""
        self.widths = [0, 0, 0]
        for row in self.rows:
            self.widths = [max(a, b) for a, b in zip(self.widths, row.widths)]

    def compress(self) -> bool:
        """Fold a trailing foreign error into the passthrough link right before it.

        Only that exact adjacency qualifies: the last row has no frame and the
        row before it is a chain link with no message. Returns whether it applied.
        """
        if len(self.rows) < 2:
            return False
        prev, last = self.rows[-2], self.rows[-1]
        if last.framed or not (prev.framed and prev.passthrough):
            return False
        prev.message, prev.passthrough = last.message, False
        self.rows.pop()
        return True

    def clip(self, width: int, min_message_width: int = MIN_MESSAGE_WIDTH) -> None:
        """Narrow the message column to fit ``width`` terminal columns.

        Leaves the column alone when the room left over is not above
        ``min_message_width``; an overlong line beats an unreadable one.
        """
        room = width - self.widths[0] - self.widths[1] - 2 * len(COLUMN_GAP)
        if room > min_message_width:
            self.widths[2] = min(self.widths[2], room)

    def format_row(self, row: Row, styles: Styles) -> str:
        fw, lw, mw = self.widths
        message = row.message
        if display_width(message) > mw:
            message = _truncate(message, mw)
        if not row.framed:
            return f"{' ' * fw}{COLUMN_GAP}{' ' * lw}{COLUMN_GAP}{styles.message(message)}"
        return (
            f"{styles.function(row.function)}{' ' * (fw - display_width(row.function))}{COLUMN_GAP}"
            f"{styles.path(row.path)}:{styles.line(row.line)}{' ' * (lw - display_width(row.location))}{COLUMN_GAP}"
            f"{styles.message(message)}"
        )

    def lines(self, styles: Styles | None = None) -> Iterable[str]:
        styles = styles or Styles.plain()
        return (self.format_row(row, styles) for row in self.rows)

    def render(self, stream: TextIO, styles: Styles | None = None) -> None:
        """Write one line per row. The first failed write propagates; earlier lines stay written."""
        for line in self.lines(styles):
            stream.write(f"{line}\n")


def build_rows(
    err: BaseException | None,
    path_formatter: PathFormatter,
    func_formatter: FuncFormatter,
) -> list[Row]:
    rows: list[Row] = []
    for e in iter_chain(err):
        if isinstance(e, ChainedError):
            f = e.frame
            rows.append(Row(
                function=func_formatter(f),
                path=path_formatter(f.file),
                line=str(f.line),
                message=e.message or PASSTHROUGH_GLYPH,
                framed=True,
                passthrough=e.is_passthrough,
            ))
        else:
            rows.append(Row(message=str(e)))
    return rows


def build_table(
    err: BaseException | None,
    *,
    path_formatter: PathFormatter,
    func_formatter: FuncFormatter,
    compress: bool = True,
    width: int | None = None,
    min_message_width: int = MIN_MESSAGE_WIDTH,
) -> Table:
    """Lay out ``err`` as a table.

    Args:
        err: Newest error of the chain
        path_formatter: Shortens frame file paths
        func_formatter: Picks the displayed function name from a frame
        compress: Fold a trailing foreign error into a passthrough row
        width: Terminal width to fit the message column into; None disables clipping
        min_message_width: Floor below which the message column is never clipped
    """
    table = Table(rows=build_rows(err, path_formatter, func_formatter))
    if compress:
        table.compress()
    table.measure()
    if width is not None:
        table.clip(width, min_message_width)
    return table
