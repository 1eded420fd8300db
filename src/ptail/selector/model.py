from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FromEnd:
    """Last ``abs(n)`` units; ``n`` is zero or negative once parsed."""

    n: int


@dataclass(frozen=True, slots=True)
class FromStart:
    """Units starting at 1-based position ``n``."""

    n: int


@dataclass(frozen=True, slots=True)
class FromFirstNew:
    """The ``+0`` form: everything, unless the stream is empty."""


Selection = FromEnd | FromStart | FromFirstNew
