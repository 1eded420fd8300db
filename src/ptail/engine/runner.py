"""Run the tail engine over a batch of file targets."""

from __future__ import annotations

from collections.abc import Callable
from typing import BinaryIO

from ptail.config.schema import TailConfig
from ptail.engine.source import FileTarget, resolve_targets
from ptail.engine.stream import NotSeekableError, tail_stream
from ptail.util.errors import (
    FileOpenError,
    OutputError,
    SourceError,
    TailIOError,
    UnseekableSourceError,
)


def _os_detail(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc)


def _output_error(exc: OSError) -> OutputError:
    return OutputError(_os_detail(exc), broken_pipe=isinstance(exc, BrokenPipeError))


class _OutputSink:
    """Write-through wrapper telling output failures apart from input failures."""

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink

    def write(self, data: bytes) -> int:
        try:
            return self._sink.write(data)
        except OSError as exc:
            raise _output_error(exc) from exc

    def flush(self) -> None:
        try:
            self._sink.flush()
        except OSError as exc:
            raise _output_error(exc) from exc


def format_header(name: str, *, first: bool) -> bytes:
    prefix = "" if first else "\n"
    return f"{prefix}==> {name} <==\n".encode("utf-8", errors="surrogateescape")


def tail_files(
    config: TailConfig,
    sink: BinaryIO,
    targets: list[FileTarget] | None = None,
    on_error: Callable[[SourceError], None] | None = None,
) -> list[SourceError]:
    """
    Tail each target in order, writing to ``sink``.

    Failures are per file: they are passed to ``on_error`` as they happen,
    collected, and returned once every target has been tried. A failure to
    write to ``sink`` stops the run with ``OutputError``. The sink is flushed
    before returning.
    """
    if targets is None:
        targets = resolve_targets(config.files)
    out = _OutputSink(sink)
    show_headers = len(targets) > 1 and not config.quiet
    errors: list[SourceError] = []

    def _fail(error: SourceError) -> None:
        errors.append(error)
        if on_error is not None:
            on_error(error)

    for index, target in enumerate(targets):
        try:
            stream = target.open()
        except OSError as exc:
            _fail(FileOpenError(target.name, _os_detail(exc)))
            continue

        with stream:
            if show_headers:
                out.write(format_header(target.name, first=index == 0))
            try:
                tail_stream(stream, config.mode, config.selection, out)  # type: ignore[arg-type]
            except NotSeekableError as exc:
                _fail(UnseekableSourceError(target.name, str(exc)))
            except OSError as exc:
                _fail(TailIOError(target.name, _os_detail(exc)))
    out.flush()
    return errors
