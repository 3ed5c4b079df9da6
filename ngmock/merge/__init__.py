"""Existing-content inspection and anchor-based merging."""

from .anchors import insert_at_anchor
from .markers import ContentInspector, ExistingMock

__all__ = ["ContentInspector", "ExistingMock", "insert_at_anchor"]
