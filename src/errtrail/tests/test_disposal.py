"""Tests for disposal: report, then terminate, with scoped and global options."""

from __future__ import annotations

import inspect
import io

import pytest

from errtrail import (
    FATAL_MESSAGE,
    ChainedError,
    ReportError,
    SerialFrameSource,
    chain,
    configure,
    dispose,
    exit_with_status,
    prepare,
    raise_error,
    terminate_with,
    using_reporter,
)
from errtrail.foundation.config import clear_settings_cache
from errtrail.runtime.observability import configure_logging, reset_logging
from errtrail.runtime.report import default_options, reset_options


def _lineno() -> int:
    return inspect.currentframe().f_back.f_lineno  # type: ignore[union-attr]


# ═════════════════════════════════════════════════════════════════════════════
# Default Behavior
# ═════════════════════════════════════════════════════════════════════════════


def test_dispose_reports_to_stderr_then_terminates(capsys: pytest.CaptureFixture[str]) -> None:
    calls: list[BaseException] = []
    leaf = ValueError("boom")
    dispose(chain(leaf), terminate_with(calls.append))

    lines = capsys.readouterr().err.splitlines()
    assert lines[0].endswith(FATAL_MESSAGE)
    assert lines[-1].endswith("boom")
    assert len(calls) == 1
    (fatal,) = calls
    assert isinstance(fatal, ChainedError)
    assert fatal.message == FATAL_MESSAGE
    assert fatal.root_cause() is leaf


def test_fatal_link_points_at_caller() -> None:
    calls: list[BaseException] = []
    _, line = dispose(ValueError("boom"), terminate_with(calls.append)), _lineno()
    fatal = calls[0]
    assert isinstance(fatal, ChainedError)
    assert fatal.frame.function == "test_fatal_link_points_at_caller"
    assert fatal.frame.line == line


def test_default_exits_with_status_one(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        dispose(chain(ValueError("boom")))
    assert excinfo.value.code == 1
    assert "boom" in capsys.readouterr().err


def test_exit_with_status() -> None:
    with pytest.raises(SystemExit) as excinfo:
        dispose(ValueError("boom"), exit_with_status(3))
    assert excinfo.value.code == 3


def test_raise_error_reraises_chain() -> None:
    leaf = ValueError("boom")
    err = chain(leaf)
    with pytest.raises(ChainedError) as excinfo:
        dispose(err, raise_error())
    assert excinfo.value.next is err
    assert str(excinfo.value) == FATAL_MESSAGE


def test_dispose_none_still_reports(capsys: pytest.CaptureFixture[str]) -> None:
    calls: list[BaseException] = []
    dispose(None, terminate_with(calls.append))
    assert len(capsys.readouterr().err.splitlines()) == 1
    assert calls[0].next is None  # type: ignore[attr-defined]


# ═════════════════════════════════════════════════════════════════════════════
# Reporter / Terminator Ordering
# ═════════════════════════════════════════════════════════════════════════════


def test_reporter_runs_before_terminator() -> None:
    events: list[str] = []

    def reporter(stream: object, err: BaseException) -> None:
        events.append("report")

    dispose(ValueError("boom"), using_reporter(reporter), terminate_with(lambda e: events.append("terminate")))
    assert events == ["report", "terminate"]


def test_reporter_failure_is_fatal() -> None:
    terminated: list[BaseException] = []

    def reporter(stream: object, err: BaseException) -> None:
        raise OSError("stderr closed")

    with pytest.raises(ReportError) as excinfo:
        dispose(ValueError("boom"), using_reporter(reporter), terminate_with(terminated.append))
    assert isinstance(excinfo.value.__cause__, OSError)
    assert terminated == []


def test_broken_stream_surfaces_as_report_error(broken_stream: type) -> None:
    terminated: list[BaseException] = []
    guard = prepare(terminate_with(terminated.append), stream=broken_stream(fail_after=0))
    with pytest.raises(ReportError, match="broken pipe"):
        guard.dispose(chain(ValueError("boom")))
    assert terminated == []


# ═════════════════════════════════════════════════════════════════════════════
# Scoped vs Global Configuration
# ═════════════════════════════════════════════════════════════════════════════


def test_prepare_is_scoped() -> None:
    out = io.StringIO()
    guard = prepare(raise_error(), stream=out)
    with pytest.raises(ChainedError):
        guard.dispose(chain(ValueError("boom")))
    assert out.getvalue().splitlines()[-1].endswith("boom")

    with pytest.raises(SystemExit):
        dispose(ValueError("boom"), using_reporter(lambda s, e: None))


def test_prepare_with_frame_source() -> None:
    calls: list[BaseException] = []
    guard = prepare(terminate_with(calls.append), stream=io.StringIO(), frames=SerialFrameSource())
    guard.dispose(ValueError("boom"))
    assert calls[0].frame.file == "file-1"  # type: ignore[attr-defined]


def test_configure_changes_global_default() -> None:
    calls: list[BaseException] = []
    configure(terminate_with(calls.append), using_reporter(lambda s, e: None))
    dispose(ValueError("boom"))
    assert len(calls) == 1

    reset_options()
    with pytest.raises(SystemExit):
        dispose(ValueError("boom"), using_reporter(lambda s, e: None))


def test_configure_keeps_unset_fields() -> None:
    original = default_options()
    configure(exit_with_status(5))
    assert default_options().reporter is original.reporter
    assert default_options().terminator is not original.terminator


def test_exit_status_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ERRTRAIL_EXIT_STATUS", "9")
    clear_settings_cache()
    reset_options()
    with pytest.raises(SystemExit) as excinfo:
        dispose(ValueError("boom"), using_reporter(lambda s, e: None))
    assert excinfo.value.code == 9


def test_invalid_exit_status_falls_back_to_one(monkeypatch: pytest.MonkeyPatch,
                                               capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("ERRTRAIL_EXIT_STATUS", "300")
    clear_settings_cache()
    reset_options()
    with pytest.raises(SystemExit) as excinfo:
        dispose(ValueError("boom"))
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.splitlines()[-1].endswith("boom")


# ═════════════════════════════════════════════════════════════════════════════
# Logging
# ═════════════════════════════════════════════════════════════════════════════


def test_debug_logging_from_environment(monkeypatch: pytest.MonkeyPatch,
                                        capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("ERRTRAIL_LOG_LEVEL", "debug")
    clear_settings_cache()
    reset_logging()
    dispose(ValueError("boom"), using_reporter(lambda s, e: None), terminate_with(lambda e: None))
    err = capsys.readouterr().err
    assert "reporting fatal error" in err
    assert "depth=2" in err


def test_debug_logging_off_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    reset_logging()
    dispose(ValueError("boom"), using_reporter(lambda s, e: None), terminate_with(lambda e: None))
    assert capsys.readouterr().err == ""


def test_reporter_failure_logs_traceback() -> None:
    out = io.StringIO()
    configure_logging(format="console", level="ERROR", output=out, colors=False)

    def reporter(stream: object, err: BaseException) -> None:
        raise OSError("stderr closed")

    with pytest.raises(ReportError):
        dispose(ValueError("boom"), using_reporter(reporter))
    logged = out.getvalue()
    assert "[error] reporter failed" in logged
    assert 'error="stderr closed"' in logged
    assert "Traceback" in logged
