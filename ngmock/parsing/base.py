"""Base class for source class parsers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from ..models import ClassDeclaration


class ClassParser(ABC):
    """Contract for parsers that expose the class declarations of a source file."""

    @abstractmethod
    def parse(self, path: Path) -> List[ClassDeclaration]:
        """Return top-level class declarations of ``path`` in declaration order."""
