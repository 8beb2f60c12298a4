"""Report options: which reporter runs and how the process ends afterwards.

Options are functional: each ReportOption takes a ReportOptions and returns
an updated copy, so option lists compose left to right without mutating the
value they start from.

    >>> opts = apply_options(default_options(), exit_with_status(3), using_reporter(my_reporter))  # doctest: +SKIP
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, NoReturn, TypeAlias

from pydantic import ValidationError

from errtrail.runtime.observability import get_logger

from .reporter import Reporter, TableReporter

if TYPE_CHECKING:
    from collections.abc import Iterable

Terminator: TypeAlias = Callable[[BaseException], None]

_log = get_logger("errtrail.report")


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Reporter and terminator used when disposing of a fatal error."""

    reporter: Reporter
    terminator: Terminator

    @classmethod
    def from_settings(cls) -> ReportOptions:
        """Table reporter and exit status taken from the environment settings."""
        from errtrail.foundation.config import get_settings
        return cls(reporter=TableReporter.from_settings(), terminator=_exit(get_settings().exit_status))


ReportOption: TypeAlias = Callable[[ReportOptions], ReportOptions]


def apply_options(opts: ReportOptions, *options: ReportOption) -> ReportOptions:
    for option in options:
        opts = option(opts)
    return opts


# ─────────────────────────────────────────────────────────────────────────────
# Terminators
# ─────────────────────────────────────────────────────────────────────────────


def _exit(status: int) -> Terminator:
    def terminate(err: BaseException) -> NoReturn:
        sys.exit(status)
    return terminate


def _reraise(err: BaseException) -> NoReturn:
    raise err


def exit_with_status(status: int) -> ReportOption:
    """Terminate by exiting the process with ``status``."""
    return lambda o: replace(o, terminator=_exit(status))


def raise_error() -> ReportOption:
    """Terminate by raising the reported (chained) error instead of exiting."""
    return lambda o: replace(o, terminator=_reraise)


def terminate_with(callback: Terminator) -> ReportOption:
    """Hand the reported error to ``callback``; the process ends only if it says so."""
    return lambda o: replace(o, terminator=callback)


def using_reporter(reporter: Reporter) -> ReportOption:
    """Render with ``reporter`` instead of the table reporter."""
    return lambda o: replace(o, reporter=reporter)


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide default
# ─────────────────────────────────────────────────────────────────────────────


_defaults: ReportOptions | None = None


def default_options() -> ReportOptions:
    """Process-wide default options, built from settings on first use.

    Invalid settings fall back to the table reporter and exit status 1, with
    a warning logged.
    """
    global _defaults
    if _defaults is None:
        try:
            _defaults = ReportOptions.from_settings()
        except ValidationError as e:
            _log.warning("invalid settings, reporting with defaults", error=e)
            _defaults = ReportOptions(reporter=TableReporter(), terminator=_exit(1))
    return _defaults


def set_default_options(opts: ReportOptions) -> None:
    global _defaults
    _defaults = opts


def reset_options() -> None:
    """Drop the process-wide default (useful for testing)."""
    global _defaults
    _defaults = None


def with_defaults(options: Iterable[ReportOption]) -> ReportOptions:
    """Default options with ``options`` applied on top; the default itself is untouched."""
    return apply_options(default_options(), *options)
