from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

STDIN_NAME = "standard input"


@dataclass(frozen=True, slots=True)
class FileTarget:
    name: str
    opener: Callable[[], BinaryIO]

    def open(self) -> BinaryIO:
        return self.opener()


def path_target(path: str) -> FileTarget:
    """Target reading ``path``; opening is deferred so failures stay per file."""
    return FileTarget(name=path, opener=lambda: Path(path).open("rb"))


def _open_stdin() -> BinaryIO:
    # Duplicate fd 0 so closing the handle leaves the process's stdin intact.
    return os.fdopen(os.dup(sys.stdin.fileno()), "rb")


def stdin_target() -> FileTarget:
    return FileTarget(name=STDIN_NAME, opener=_open_stdin)


def resolve_targets(files: list[str]) -> list[FileTarget]:
    """Map command-line names to targets, with ``-`` meaning standard input."""
    return [stdin_target() if name == "-" else path_target(name) for name in files]
