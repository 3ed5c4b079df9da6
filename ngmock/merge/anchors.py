"""Anchor-based splicing of generated deltas into existing text."""

from __future__ import annotations

import re
from typing import Pattern, Union

from ..errors import AnchorNotFound
from .markers import mask_comments

AnchorPattern = Union[str, Pattern[str]]


def insert_at_anchor(text: str, anchor: AnchorPattern, delta: str) -> str:
    """Splice ``delta`` at the end of the first match of ``anchor``.

    Matches inside comments are ignored. A zero-width lookahead anchor inserts
    before the matched construct. Raises :class:`AnchorNotFound` when the
    anchor does not occur.
    """
    pattern = re.compile(anchor, re.MULTILINE) if isinstance(anchor, str) else anchor
    match = pattern.search(mask_comments(text))
    if match is None:
        raise AnchorNotFound(pattern.pattern)
    position = match.end()
    return f"{text[:position]}{delta}{text[position:]}"


__all__ = ["AnchorPattern", "insert_at_anchor"]
