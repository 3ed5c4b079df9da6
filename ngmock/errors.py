"""Exception types raised by the synthesis and merge engine."""

from __future__ import annotations

from typing import Sequence


class NgMockError(RuntimeError):
    """Base class for recoverable per-class or per-file failures."""


class UnclassifiableSource(NgMockError):
    """Raised when a mock path carries none of the supported kind suffixes."""

    def __init__(self, class_name: str, target_path: str) -> None:
        super().__init__(
            f"Cannot classify {class_name} ({target_path}). Expected a file named "
            "*.component.ts, *.directive.ts, *.pipe.ts or *.service.ts."
        )
        self.class_name = class_name
        self.target_path = target_path


class AnchorNotFound(NgMockError):
    """Raised when a merge anchor cannot be located in existing text."""

    def __init__(self, anchor: str) -> None:
        super().__init__(f"Anchor not found: {anchor}")
        self.anchor = anchor


class CyclicInheritance(NgMockError):
    """Raised when a service extends chain loops back on itself."""

    def __init__(self, chain: Sequence[str]) -> None:
        super().__init__("Cyclic inheritance: " + " -> ".join(chain))
        self.chain = list(chain)


__all__ = ["AnchorNotFound", "CyclicInheritance", "NgMockError", "UnclassifiableSource"]
