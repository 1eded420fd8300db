from __future__ import annotations

from dataclasses import dataclass, field

from ptail.engine.stream import TailMode
from ptail.selector.model import FromEnd, Selection

DEFAULT_LINES = "10"


@dataclass(slots=True)
class TailConfig:
    files: list[str] = field(default_factory=list)
    lines: Selection = field(default_factory=lambda: FromEnd(-10))
    bytes: Selection | None = None
    quiet: bool = False

    @property
    def mode(self) -> TailMode:
        return "bytes" if self.bytes is not None else "lines"

    @property
    def selection(self) -> Selection:
        return self.bytes if self.bytes is not None else self.lines


@dataclass(slots=True)
class TailDefaults:
    """Count texts and flags read from a defaults file."""

    lines: str | None = None
    bytes: str | None = None
    quiet: bool | None = None
