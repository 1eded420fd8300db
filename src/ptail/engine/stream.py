from __future__ import annotations

import io
import shutil
from typing import BinaryIO, Literal

from ptail.engine.offset import CHUNK_SIZE, count_totals, start_offset
from ptail.selector.model import Selection

TailMode = Literal["lines", "bytes"]


class NotSeekableError(OSError):
    """Raised when a stream cannot be rewound between the two passes."""


def _ensure_seekable(stream: BinaryIO) -> None:
    try:
        seekable = stream.seekable()
    except ValueError as exc:
        raise NotSeekableError("stream is closed") from exc
    if not seekable:
        raise NotSeekableError("cannot seek in input; tail needs a seekable source")


def emit_lines(stream: BinaryIO, start: int, sink: BinaryIO) -> None:
    """Copy lines from 0-based index ``start`` onward, terminators untouched."""
    stream.seek(0)
    for index, line in enumerate(stream):
        if index >= start:
            sink.write(line)
            shutil.copyfileobj(stream, sink, CHUNK_SIZE)
            return


def emit_bytes(stream: BinaryIO, start: int, sink: BinaryIO) -> None:
    """Copy bytes from raw offset ``start`` to end of stream."""
    stream.seek(start, io.SEEK_SET)
    shutil.copyfileobj(stream, sink, CHUNK_SIZE)


def tail_stream(stream: BinaryIO, mode: TailMode, selection: Selection, sink: BinaryIO) -> None:
    """Count, compute the start offset, then stream the selected units to ``sink``."""
    _ensure_seekable(stream)
    stream.seek(0)
    totals = count_totals(stream)
    if mode == "bytes":
        start = start_offset(selection, totals.bytes)
        if start is not None:
            emit_bytes(stream, start, sink)
        return
    start = start_offset(selection, totals.lines)
    if start is not None:
        emit_lines(stream, start, sink)
