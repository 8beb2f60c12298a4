"""Exception taxonomy for errtrail itself.

Errors the library raises on its own behalf, as opposed to the chained
errors it builds for callers:
- ErrtrailError: base for everything below
- ChainInvariantError: programming-contract violations (fatal, never recovered)
- FrameCaptureError: the interpreter could not supply a caller frame
- ReportError: the diagnostic stream broke while reporting a fatal error
"""

from __future__ import annotations


class ErrtrailError(Exception):
    """Base exception for errors raised by errtrail."""

    __slots__ = ()


class ChainInvariantError(ErrtrailError, RuntimeError):
    """A chain was built or walked in a way correct construction never allows.

    Not a runtime condition: seeing one means a bug in the caller or the library.
    """

    __slots__ = ()


class FrameCaptureError(ChainInvariantError):
    """Caller frame could not be resolved at chain-construction time."""

    __slots__ = ()


class ReportError(ErrtrailError):
    """Rendering a fatal error to the diagnostic stream failed.

    The original stream failure is available as ``__cause__``.
    """

    __slots__ = ()
