"""
CSV report of broken links and images.
"""
from __future__ import annotations

import csv
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, TextIO

from brokenlinks.errors import ReportSinkError
from brokenlinks.extract import ReferenceKind

HEADER = ("Error", "Type", "Source URL", "Destination URL")


class FailureKind(str, Enum):
    BROKEN_LINK = "Broken Link"
    BROKEN_IMAGE = "Broken image"

    @classmethod
    def for_reference(cls, kind: ReferenceKind) -> "FailureKind":
        return cls.BROKEN_IMAGE if kind is ReferenceKind.IMAGE else cls.BROKEN_LINK


@dataclass(slots=True, frozen=True)
class FailureRecord:
    """One report row: a reference whose existence check failed."""
    status: str
    kind: FailureKind
    source_url: str
    destination_url: str

    def as_row(self) -> tuple[str, str, str, str]:
        return self.status, self.kind.value, self.source_url, self.destination_url


class ReportWriter:
    """
    Serial CSV writer with every field quoted.

    The header row is written on construction. Each record is flushed before
    write() returns. close() flushes and, unless the stream is stdout, closes it.
    """

    def __init__(self, stream: TextIO, name: str = "<stream>", owns_stream: bool = False) -> None:
        self.name = name
        self.records_written = 0
        self._stream = stream
        self._owns_stream = owns_stream
        self._closed = False
        self._writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator="\n")
        self._write_row(HEADER)

    def _write_row(self, row) -> None:
        try:
            self._writer.writerow(row)
            self._stream.flush()
        except OSError as e:
            raise ReportSinkError(f"{self.name}: {e}") from e

    def write(self, record: FailureRecord) -> None:
        if self._closed:
            raise ReportSinkError(f"{self.name}: report already closed")
        self._write_row(record.as_row())
        self.records_written += 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._stream.flush()
            if self._owns_stream:
                self._stream.close()
        except OSError as e:
            raise ReportSinkError(f"Could not close output file {self.name}: {e}") from e

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "ReportWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_report(path: Optional[str] = None) -> ReportWriter:
    """Open a report on the given file path, or on stdout for None / '-'."""
    if path is None or path == "-":
        return ReportWriter(sys.stdout, name="<stdout>")

    output_path = Path(path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        stream = output_path.open("w", encoding="utf-8", newline="")
    except OSError as e:
        raise ReportSinkError(f"{output_path}: {e}") from e
    return ReportWriter(stream, name=str(output_path), owns_stream=True)
