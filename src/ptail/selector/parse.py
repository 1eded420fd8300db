"""Parse count arguments such as ``10``, ``-10``, ``+10`` and ``+0``."""

from __future__ import annotations

import re

from ptail.selector.model import FromEnd, FromFirstNew, FromStart, Selection
from ptail.util.errors import InvalidSelectorError

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

_BARE_PATTERN = re.compile(r"[0-9]+")
_SIGNED_PATTERN = re.compile(r"[+-][0-9]+")
_PLUS_ZERO_PATTERN = re.compile(r"\+0")


def parse_selection(text: str) -> Selection:
    """
    Turn count text into a selection.

    A bare number counts from the end, so ``"3"`` becomes ``FromEnd(-3)``.
    An explicit ``-`` keeps its value, an explicit ``+`` counts from the start
    and ``+0`` selects everything in a non-empty stream.
    """
    if _BARE_PATTERN.fullmatch(text) is not None:
        value = int(text)
        if value > I64_MAX:
            raise InvalidSelectorError(text)
        return FromEnd(-value)

    if _SIGNED_PATTERN.fullmatch(text) is None:
        raise InvalidSelectorError(text)

    value = int(text)
    if value < I64_MIN or value > I64_MAX:
        raise InvalidSelectorError(text)
    if text.startswith("-"):
        return FromEnd(value)
    if _PLUS_ZERO_PATTERN.fullmatch(text) is not None:
        return FromFirstNew()
    return FromStart(value)
