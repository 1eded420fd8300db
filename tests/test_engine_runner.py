from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from ptail.config.schema import TailConfig
from ptail.engine.runner import format_header, tail_files
from ptail.engine.source import FileTarget
from ptail.selector.model import FromEnd, FromStart
from ptail.util.errors import (
    FileOpenError,
    OutputError,
    SourceError,
    TailIOError,
    UnseekableSourceError,
)


def _write(path: Path, data: bytes) -> str:
    path.write_bytes(data)
    return str(path)


def test_single_file_has_no_header(tmp_path: Path) -> None:
    one = _write(tmp_path / "one.txt", b"a\nb\n")
    sink = io.BytesIO()
    errors = tail_files(TailConfig(files=[one]), sink)
    assert errors == []
    assert sink.getvalue() == b"a\nb\n"


def test_two_files_get_headers_with_one_blank_line_between(tmp_path: Path) -> None:
    one = _write(tmp_path / "file1", b"1\n")
    two = _write(tmp_path / "file2", b"2\n")
    sink = io.BytesIO()
    tail_files(TailConfig(files=[one, two]), sink)
    assert sink.getvalue() == (f"==> {one} <==\n1\n\n==> {two} <==\n2\n").encode()


def test_quiet_suppresses_headers(tmp_path: Path) -> None:
    one = _write(tmp_path / "file1", b"1\n")
    two = _write(tmp_path / "file2", b"2\n")
    sink = io.BytesIO()
    tail_files(TailConfig(files=[one, two], quiet=True), sink)
    assert sink.getvalue() == b"1\n2\n"


def test_byte_mode_takes_priority(tmp_path: Path) -> None:
    one = _write(tmp_path / "one.txt", b"abc\ndef\n")
    sink = io.BytesIO()
    tail_files(TailConfig(files=[one], lines=FromEnd(-10), bytes=FromEnd(-3)), sink)
    assert sink.getvalue() == b"ef\n"


def test_unreadable_file_is_reported_once_and_batch_continues(tmp_path: Path) -> None:
    one = _write(tmp_path / "one.txt", b"1\n")
    missing = str(tmp_path / "missing.txt")
    three = _write(tmp_path / "three.txt", b"3\n")
    sink = io.BytesIO()
    reported: list[SourceError] = []

    errors = tail_files(
        TailConfig(files=[one, missing, three]), sink, on_error=reported.append
    )

    assert errors == reported
    assert len(errors) == 1
    assert isinstance(errors[0], FileOpenError)
    assert errors[0].name == missing
    assert str(errors[0]).startswith(f"{missing}: ")
    assert sink.getvalue() == (f"==> {one} <==\n1\n\n==> {three} <==\n3\n").encode()


def test_directory_target_is_an_open_failure(tmp_path: Path) -> None:
    directory = tmp_path / "logs"
    directory.mkdir()
    errors = tail_files(TailConfig(files=[str(directory)]), io.BytesIO())
    assert len(errors) == 1
    assert isinstance(errors[0], FileOpenError)


def test_first_file_failing_keeps_blank_line_before_second_header(tmp_path: Path) -> None:
    missing = str(tmp_path / "missing.txt")
    two = _write(tmp_path / "two.txt", b"2\n")
    sink = io.BytesIO()
    tail_files(TailConfig(files=[missing, two]), sink)
    assert sink.getvalue() == f"\n==> {two} <==\n2\n".encode()


def test_read_failure_is_reported_and_batch_continues(tmp_path: Path) -> None:
    class BrokenStream(io.BytesIO):
        def read(self, size: int | None = -1) -> bytes:
            raise OSError(5, "Input/output error")

    good = _write(tmp_path / "good.txt", b"ok\n")
    targets = [
        FileTarget(name="broken", opener=lambda: BrokenStream(b"data\n")),
        FileTarget(name=good, opener=lambda: Path(good).open("rb")),
    ]
    sink = io.BytesIO()
    errors = tail_files(TailConfig(files=[], quiet=True), sink, targets=targets)

    assert len(errors) == 1
    assert isinstance(errors[0], TailIOError)
    assert errors[0].detail == "Input/output error"
    assert sink.getvalue() == b"ok\n"


def test_unseekable_source_is_reported(tmp_path: Path) -> None:
    read_fd, write_fd = os.pipe()
    os.write(write_fd, b"a\n")
    os.close(write_fd)
    targets = [FileTarget(name="pipe", opener=lambda: os.fdopen(read_fd, "rb"))]
    errors = tail_files(TailConfig(files=[], lines=FromStart(1)), io.BytesIO(), targets=targets)
    assert len(errors) == 1
    assert isinstance(errors[0], UnseekableSourceError)
    assert errors[0].name == "pipe"


def test_format_header() -> None:
    assert format_header("a.txt", first=True) == b"==> a.txt <==\n"
    assert format_header("b.txt", first=False) == b"\n==> b.txt <==\n"


class _ClosedReaderSink(io.BytesIO):
    def __init__(self, fail_after: int) -> None:
        super().__init__()
        self.fail_after = fail_after

    def write(self, data: bytes) -> int:  # type: ignore[override]
        if self.tell() + len(data) > self.fail_after:
            raise BrokenPipeError(32, "Broken pipe")
        return super().write(data)


def test_sink_failure_is_not_blamed_on_the_input(tmp_path: Path) -> None:
    big = _write(tmp_path / "big.log", b"".join(b"line %d\n" % i for i in range(1000)))
    reported: list[SourceError] = []

    with pytest.raises(OutputError) as excinfo:
        tail_files(
            TailConfig(files=[big, big], lines=FromStart(1)),
            _ClosedReaderSink(fail_after=100),
            on_error=reported.append,
        )

    assert excinfo.value.broken_pipe is True
    assert reported == []


def test_sink_failure_on_header_raises_output_error(tmp_path: Path) -> None:
    one = _write(tmp_path / "one.txt", b"1\n")
    two = _write(tmp_path / "two.txt", b"2\n")
    with pytest.raises(OutputError) as excinfo:
        tail_files(TailConfig(files=[one, two]), _ClosedReaderSink(fail_after=0))
    assert excinfo.value.broken_pipe is True


def test_non_pipe_sink_failure_keeps_os_detail(tmp_path: Path) -> None:
    class FullDisk(io.BytesIO):
        def write(self, data: bytes) -> int:  # type: ignore[override]
            raise OSError(28, "No space left on device")

    one = _write(tmp_path / "one.txt", b"1\n")
    with pytest.raises(OutputError) as excinfo:
        tail_files(TailConfig(files=[one]), FullDisk())
    assert excinfo.value.broken_pipe is False
    assert excinfo.value.detail == "No space left on device"
