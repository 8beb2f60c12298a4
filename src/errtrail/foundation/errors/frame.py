"""Caller-site capture for chain links.

A Frame records where an error passed through: the enclosing function, the
source file and the line. Frames are captured by a FrameSource, which tests
replace with a deterministic source instead of patching globals.
"""

from __future__ import annotations

import inspect
from typing import Annotated, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .errors import FrameCaptureError


class Frame(BaseModel):
    """Source location of one chain link. Immutable once captured."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", revalidate_instances="never",
        json_schema_extra={"title": "Frame", "examples": [{"function": "Loader.load", "file": "/srv/app/loader.py", "line": 42}]},
    )

    function: str = ""
    file: str = ""
    line: Annotated[int, Field(ge=0)] = 0
    module: str = Field(default="", repr=False)

    @classmethod
    def unknown(cls) -> Frame:
        """Frame for links with no location (foreign errors, failed lookups)."""
        return _UNKNOWN

    @property
    def is_known(self) -> bool:
        return bool(self.file) and self.line > 0

    @property
    def qualified_name(self) -> str:
        """Module-qualified function name, e.g. ``app.loader.Loader.load``."""
        return f"{self.module}.{self.function}" if self.module else self.function

    def __str__(self) -> str:
        return f"{self.function}({self.file}:{self.line})"


_UNKNOWN = Frame.model_construct(function="", file="", line=0, module="")


@runtime_checkable
class FrameSource(Protocol):
    """Anything that can resolve the caller of a chain-construction entry point."""

    def capture(self, skip: int = 0) -> Frame:
        """Return the frame of whoever called the function that called capture.

        Args:
            skip: Extra stack levels to skip for wrappers around the entry point
        """
        ...


class StackFrameSource:
    """Resolves frames from the live interpreter stack."""

    __slots__ = ()

    def capture(self, skip: int = 0) -> Frame:
        # 0 = capture, 1 = entry point, 2 = its caller
        frame = inspect.currentframe()
        for _ in range(2 + skip):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            raise FrameCaptureError(f"unable to resolve caller frame (skip={skip})")
        try:
            code = frame.f_code
            return Frame.model_construct(
                function=code.co_qualname,
                file=code.co_filename,
                line=frame.f_lineno or 0,
                module=frame.f_globals.get("__name__", ""),
            )
        finally:
            del frame

    def __repr__(self) -> str:
        return "StackFrameSource()"


class SerialFrameSource:
    """Deterministic source yielding file-1:1, file-2:2, ... in capture order.

    Example:
        >>> frames = SerialFrameSource()
        >>> first = frames.capture()
        >>> first.file, first.line
        ('file-1', 1)
    """

    __slots__ = ("_count", "_function")

    def __init__(self, function: str = "") -> None:
        self._count = 0
        self._function = function

    def capture(self, skip: int = 0) -> Frame:
        self._count += 1
        return Frame.model_construct(
            function=self._function or f"func_{self._count}",
            file=f"file-{self._count}",
            line=self._count,
            module="",
        )

    @property
    def count(self) -> int:
        """Number of frames handed out so far."""
        return self._count


DEFAULT_FRAME_SOURCE: FrameSource = StackFrameSource()
