import io

import pytest

from rust_project.kernel.timing import (
    NullTimingReporter,
    RecordingTimingReporter,
    StderrTimingReporter,
    timed,
)


def test_stderr_reporter_format():
    stream = io.StringIO()
    StderrTimingReporter(stream).report("loading", 12.7)
    assert stream.getvalue() == "Done loading: 12ms\n"


def test_stderr_reporter_defaults_to_stderr(capsys):
    StderrTimingReporter().report("loading", 3)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "Done loading: 3ms\n"


def test_timed_reports_once():
    reporter = RecordingTimingReporter()
    with timed(reporter, "phase"):
        pass
    assert reporter.phases == ["phase"]


def test_timed_skips_report_on_error():
    reporter = RecordingTimingReporter()
    with pytest.raises(RuntimeError):
        with timed(reporter, "phase"):
            raise RuntimeError("boom")
    assert reporter.records == []


def test_timed_without_reporter():
    with timed(None, "phase"):
        pass
    NullTimingReporter().report("phase", 1.0)
