import io
import sys
from unittest.mock import Mock

import pytest

from brokenlinks.errors import ReportSinkError
from brokenlinks.extract import ReferenceKind
from brokenlinks.report import FailureKind, FailureRecord, ReportWriter, open_report

HEADER_LINE = '"Error","Type","Source URL","Destination URL"\n'


def test_header_written_on_open():
    stream = io.StringIO()
    ReportWriter(stream)
    assert stream.getvalue() == HEADER_LINE


def test_rows_are_fully_quoted():
    stream = io.StringIO()
    report = ReportWriter(stream)
    report.write(FailureRecord('404 Not Found', FailureKind.BROKEN_LINK, "http://example.org/", 'http://example.org/a"b'))
    assert stream.getvalue() == (
        HEADER_LINE + '"404 Not Found","Broken Link","http://example.org/","http://example.org/a""b"\n'
    )
    assert report.records_written == 1


def test_failure_kind_for_reference():
    assert FailureKind.for_reference(ReferenceKind.LINK) is FailureKind.BROKEN_LINK
    assert FailureKind.for_reference(ReferenceKind.IMAGE) is FailureKind.BROKEN_IMAGE
    assert FailureKind.BROKEN_IMAGE.value == "Broken image"


def test_open_report_file(tmp_path):
    path = tmp_path / "nested" / "report.csv"
    with open_report(str(path)) as report:
        report.write(FailureRecord("500 Internal Server Error", FailureKind.BROKEN_IMAGE, "http://a/", "http://a/x.png"))
    assert report.closed
    assert path.read_text(encoding="utf-8") == (
        HEADER_LINE + '"500 Internal Server Error","Broken image","http://a/","http://a/x.png"\n'
    )


def test_open_report_defaults_to_stdout(capsys):
    for target in (None, "-"):
        report = open_report(target)
        report.close()
    assert capsys.readouterr().out == HEADER_LINE * 2
    assert not sys.stdout.closed


def test_open_report_failure_is_sink_error(tmp_path):
    with pytest.raises(ReportSinkError):
        open_report(str(tmp_path))


def test_close_is_idempotent_and_write_after_close_fails():
    stream = io.StringIO()
    report = ReportWriter(stream, owns_stream=True)
    report.close()
    report.close()
    assert stream.closed
    with pytest.raises(ReportSinkError):
        report.write(FailureRecord("x", FailureKind.BROKEN_LINK, "a", "b"))


def test_close_error_is_sink_error():
    stream = Mock()
    stream.close.side_effect = OSError("disk full")
    report = ReportWriter(stream, name="out.csv", owns_stream=True)
    with pytest.raises(ReportSinkError, match="out.csv"):
        report.close()
