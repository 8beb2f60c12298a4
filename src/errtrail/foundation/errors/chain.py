"""Chained errors: provenance links from the deepest failure to the top handler.

Every time an error is handed up the stack it can be chained, recording the
call site it passed through and optionally a message describing what that
site was doing. The result is a singly linked list of ChainedError nodes
ending in either a ``new()`` terminus or any foreign exception.

Interoperability is unwrap-based: generic queries (``is_error``, ``as_error``,
``root_cause``) walk any error exposing ``unwrap()``, and fall back to the
explicit ``__cause__`` of ordinary exceptions. ChainedError is not special-cased
by them; it simply unwraps to its next link.

Example:
    >>> from errtrail import chain, chain_with, new
    >>> def load() -> ChainedError:
    ...     return new("config missing")
    >>> err = chain_with(chain(load()), "startup failed")
    >>> str(err)
    'startup failed'
    >>> str(root_cause(err))
    'config missing'
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from .errors import ChainInvariantError
from .formatters import PathFormatter, path_last_n_segments
from .frame import DEFAULT_FRAME_SOURCE, Frame, FrameSource

if TYPE_CHECKING:
    from collections.abc import Iterator

E = TypeVar("E", bound=BaseException)

FLATTEN_SEPARATOR = " → "


@runtime_checkable
class Unwrappable(Protocol):
    """Capability contract: an error that can hand back the error it wraps."""

    def unwrap(self) -> BaseException | None: ...


class ChainedError(Exception):
    """One link in a causal chain of errors.

    Attributes:
        frame: Call site that created this link
        current: Descriptive error for this link, None for a passthrough link
        next: Wrapped (older) error, None at a terminus
    """

    __slots__ = ("frame", "current", "next")

    def __init__(
        self,
        frame: Frame,
        current: BaseException | None = None,
        next: BaseException | None = None,  # noqa: A002 - link terminology
    ) -> None:
        super().__init__(frame, current, next)
        self.frame = frame
        self.current = current
        self.next = next
        if next is not None:
            self.__cause__ = next

    @property
    def message(self) -> str:
        """Message given when this link was created; empty for passthrough links."""
        return str(self.current) if self.current is not None else ""

    @property
    def is_passthrough(self) -> bool:
        """True when the link adds no message, including an empty annotation."""
        return not self.message

    def unwrap(self) -> BaseException | None:
        return self.next

    def root_cause(self) -> BaseException:
        """Oldest error in the chain starting at this link."""
        return root_cause(self)  # type: ignore[return-value]

    def __str__(self) -> str:
        for err in iter_chain(self):
            if isinstance(err, ChainedError):
                if m := err.message:
                    return m
            else:
                return str(err)
        raise ChainInvariantError("error chain holds no message")

    def __repr__(self) -> str:
        return f"ChainedError(frame={self.frame!r}, current={self.current!r}, next={self.next!r})"


# ═════════════════════════════════════════════════════════════════════════════
# Construction
# ═════════════════════════════════════════════════════════════════════════════


class Chainer:
    """Chain constructors bound to a frame source.

    The module-level ``new``/``chain``/... functions use a Chainer over the live
    stack. Tests build their own with a deterministic source:

        >>> from errtrail.foundation.errors.frame import SerialFrameSource
        >>> c = Chainer(SerialFrameSource())
        >>> c.chain(c.new("egad")).frame.file
        'file-2'
    """

    __slots__ = ("frames",)

    def __init__(self, frames: FrameSource | None = None) -> None:
        self.frames = frames or DEFAULT_FRAME_SOURCE

    def new(self, message: str) -> ChainedError:
        """Terminus link carrying ``message``. Equivalent of ``Exception(message)`` with provenance."""
        return ChainedError(self.frames.capture(), Exception(message))

    def newf(self, format: str, *args: object) -> ChainedError:  # noqa: A002
        """``new`` with a %-style formatted message."""
        return ChainedError(self.frames.capture(), Exception(_sprintf(format, args)))

    def chain(self, err: BaseException | None) -> ChainedError | None:
        """Record that ``err`` passed through the caller. None stays None."""
        if err is None:
            return None
        return ChainedError(self.frames.capture(), None, err)

    def chain_with(self, err: BaseException | None, message: str) -> ChainedError | None:
        """Like ``chain`` but annotates the link with ``message``."""
        if err is None:
            return None
        return ChainedError(self.frames.capture(), Exception(message), err)

    def chain_withf(self, err: BaseException | None, format: str, *args: object) -> ChainedError | None:  # noqa: A002
        if err is None:
            return None
        return ChainedError(self.frames.capture(), Exception(_sprintf(format, args)), err)

    def link(
        self,
        err: BaseException | None,
        current: BaseException | None,
        *,
        skip: int = 0,
    ) -> ChainedError:
        """Build a link attributed to whoever called the caller of ``link``.

        For library wrappers around the constructors; ``skip`` moves the
        attribution further up the stack. Unlike the other constructors a
        None ``err`` still yields a terminus, so a wrapper always produces a
        reportable error.
        """
        return ChainedError(self.frames.capture(skip + 1), current, err)

    def __repr__(self) -> str:
        return f"Chainer(frames={self.frames!r})"


def _sprintf(format: str, args: tuple[object, ...]) -> str:  # noqa: A002
    return format % args if args else format


_default_chainer = Chainer()

new = _default_chainer.new
newf = _default_chainer.newf
chain = _default_chainer.chain
chain_with = _default_chainer.chain_with
chain_withf = _default_chainer.chain_withf


# ═════════════════════════════════════════════════════════════════════════════
# Traversal & Queries
# ═════════════════════════════════════════════════════════════════════════════


def unwrap(err: BaseException | None) -> BaseException | None:
    """Single-step unwrap over the capability contract.

    Errors with an ``unwrap()`` method answer for themselves; any other
    exception unwraps to its explicit ``__cause__`` (``raise X from Y``).
    """
    if err is None:
        return None
    if isinstance(err, Unwrappable):
        return err.unwrap()
    return err.__cause__


def iter_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` then each successive unwrap result, newest first.

    Each call starts a fresh walk. A foreign ``__cause__`` loop ends the walk
    at the first repeated error.
    """
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = unwrap(err)


def root_cause(err: BaseException | None) -> BaseException | None:
    """Oldest error in the chain: a ``new()`` terminus or a foreign leaf."""
    last = None
    for last in iter_chain(err):
        pass
    return last


def is_error(err: BaseException | None, target: BaseException | type[BaseException]) -> bool:
    """Whether ``target`` appears anywhere in the chain.

    ``target`` may be an error instance (matched by identity or equality)
    or an exception class (matched by isinstance).
    """
    if isinstance(target, type):
        return any(isinstance(e, target) for e in iter_chain(err))
    return any(e is target or e == target for e in iter_chain(err))


def as_error(err: BaseException | None, cls: type[E]) -> E | None:
    """First error in the chain that is an instance of ``cls``, or None."""
    for e in iter_chain(err):
        if isinstance(e, cls):
            return e
    return None


def chain_depth(err: BaseException | None) -> int:
    """Number of links, counting a foreign leaf."""
    return sum(1 for _ in iter_chain(err))


def flatten(err: BaseException | None, path_formatter: PathFormatter | None = None) -> Exception | None:
    """Collapse the chain into one plain exception whose message carries every link.

    Useful where only ``str(err)`` survives, e.g. a flat log line. Chain links
    render as ``function(path:line) message``; foreign errors as their text.

    Example:
        >>> str(flatten(chain(ValueError("bad port"))))  # doctest: +SKIP
        '<module>(tests/test_chain.py:3) → bad port'
    """
    if err is None:
        return None
    fmt = path_formatter or _FLATTEN_PATHS
    parts: list[str] = []
    for e in iter_chain(err):
        if isinstance(e, ChainedError):
            f = e.frame
            part = f"{f.function}({fmt(f.file)}:{f.line})"
            if m := e.message:
                part += f" {m}"
            parts.append(part)
        else:
            parts.append(str(e))
    return Exception(FLATTEN_SEPARATOR.join(parts))


_FLATTEN_PATHS = path_last_n_segments(2)
