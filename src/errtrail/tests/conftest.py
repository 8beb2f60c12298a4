"""Shared fixtures: isolate every test from process-wide defaults."""

from __future__ import annotations

import io

import pytest

from errtrail.foundation.config import clear_settings_cache
from errtrail.runtime.observability import configure_logging
from errtrail.runtime.report import reset_options

_ENV_KEYS = (
    "ERRTRAIL_EXIT_STATUS",
    "ERRTRAIL_REPORT_COLORS",
    "ERRTRAIL_REPORT_COMPRESS",
    "ERRTRAIL_REPORT_PATH_SEGMENTS",
    "ERRTRAIL_REPORT_MIN_MESSAGE_WIDTH",
    "ERRTRAIL_REPORT_FUNCTION_STYLE",
    "ERRTRAIL_LOG_LEVEL",
    "ERRTRAIL_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch: pytest.MonkeyPatch) -> object:
    """Reset settings, report defaults and logging around each test."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    reset_options()
    configure_logging(format="none")
    yield
    clear_settings_cache()
    reset_options()
    configure_logging(format="none")


class TtyStream(io.StringIO):
    """In-memory stream that claims to be a terminal."""

    def isatty(self) -> bool:
        return True


class BrokenStream(io.StringIO):
    """Stream whose writes start failing after ``fail_after`` successful ones."""

    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.writes = 0

    def write(self, s: str) -> int:
        if self.writes >= self.fail_after:
            raise OSError("broken pipe")
        self.writes += 1
        return super().write(s)


@pytest.fixture
def tty() -> TtyStream:
    return TtyStream()


@pytest.fixture
def broken_stream() -> type[BrokenStream]:
    """Factory: ``broken_stream(fail_after=n)``."""
    return BrokenStream
