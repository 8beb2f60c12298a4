"""Disposal of unrecoverable errors: report the chain, then terminate.

``dispose`` is the one integration point for top-level handlers. It adds a
final fatal link at the caller's location, renders the whole chain to the
diagnostic stream with the configured reporter, and only then calls the
configured terminator (exit status 1 unless configured otherwise).

Quick Start:
    >>> from errtrail import chain, dispose
    >>> def main() -> None:
    ...     if err := run():
    ...         dispose(err)                      # report + exit(1)

Scoped configuration (does not touch the process default):
    >>> guard = prepare(raise_error())  # doctest: +SKIP
    >>> guard.dispose(err)                        # report + raise  # doctest: +SKIP

One-time global configuration, in main:
    >>> configure(exit_with_status(70))           # doctest: +SKIP
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from errtrail.foundation.errors import ChainedError, Chainer, ReportError, chain_depth
from errtrail.runtime.observability import get_logger

from .options import ReportOption, ReportOptions, apply_options, default_options, set_default_options, with_defaults

if TYPE_CHECKING:
    from errtrail.foundation.errors import FrameSource

FATAL_MESSAGE = "fatal error"

_log = get_logger("errtrail.report")
_chainer = Chainer()


def _report_and_terminate(err: ChainedError, opts: ReportOptions, stream: TextIO | None) -> None:
    _log.debug("reporting fatal error", depth=chain_depth(err))
    try:
        opts.reporter(stream or sys.stderr, err)
    except Exception as e:
        _log.exception("reporter failed", error=e)
        raise ReportError(f"unable to report fatal error: {e}") from e
    _log.debug("fatal error reported, terminating")
    opts.terminator(err)


@dataclass(frozen=True, slots=True)
class Disposer:
    """Disposal with its own options, independent of the process default.

    Args:
        options: Reporter and terminator to use
        stream: Diagnostic stream (None = sys.stderr at disposal time)
        frames: Frame source for the fatal link (None = live stack)
    """

    options: ReportOptions
    stream: TextIO | None = None
    frames: FrameSource | None = None

    def dispose(self, err: BaseException | None) -> None:
        """Report ``err`` and terminate according to this disposer's options."""
        wrapped = Chainer(self.frames).link(err, Exception(FATAL_MESSAGE))
        _report_and_terminate(wrapped, self.options, self.stream)


def prepare(
    *opts: ReportOption,
    stream: TextIO | None = None,
    frames: FrameSource | None = None,
) -> Disposer:
    """Disposer for one area of code: the current default with ``opts`` applied."""
    return Disposer(options=with_defaults(opts), stream=stream, frames=frames)


def configure(*opts: ReportOption) -> None:
    """Change the process-wide default. Intended for one-time setup in main.

    Not safe to race against concurrent ``dispose`` calls; use ``prepare``
    for per-component behavior.
    """
    set_default_options(apply_options(default_options(), *opts))


def dispose(err: BaseException | None, *opts: ReportOption) -> None:
    """Report ``err`` to stderr, then terminate (exit status 1 by default).

    The reporter always runs to completion before the terminator. A reporter
    failure raises ReportError and the terminator is not called.
    """
    wrapped = _chainer.link(err, Exception(FATAL_MESSAGE))
    _report_and_terminate(wrapped, with_defaults(opts), None)
