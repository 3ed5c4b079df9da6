"""Source class parsers."""

from __future__ import annotations

from .base import ClassParser
from .tree_sitter import TypeScriptClassParser

__all__ = ["ClassParser", "TypeScriptClassParser"]
