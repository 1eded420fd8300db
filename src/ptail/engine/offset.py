"""Totals counting and start-offset computation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from ptail.selector.model import FromEnd, FromFirstNew, FromStart, Selection

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class Totals:
    lines: int
    bytes: int


def count_totals(stream: BinaryIO) -> Totals:
    """Count lines and bytes from the current position to end of stream."""
    lines = 0
    size = 0
    last = b""
    while True:
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        lines += chunk.count(b"\n")
        size += len(chunk)
        last = chunk[-1:]
    if size and last != b"\n":
        lines += 1
    return Totals(lines=lines, bytes=size)


def start_offset(selection: Selection, total: int) -> int | None:
    """Return the 0-based index of the first unit to emit, or None for no output."""
    if isinstance(selection, FromStart):
        if selection.n > total or selection.n < 1:
            return None
        return selection.n - 1
    if isinstance(selection, FromEnd):
        wanted = abs(selection.n)
        if wanted == 0:
            return None
        if wanted <= total:
            return total - wanted
        return 0
    if isinstance(selection, FromFirstNew):
        return None if total == 0 else 0
    raise TypeError(f"unsupported selection: {selection!r}")
