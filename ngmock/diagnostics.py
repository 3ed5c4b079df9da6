"""Diagnostics sink shared by the generator, resolver and barrel maintainer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .logging import get_logger, shorten_path


class Severity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def level(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Diagnostic:
    """A single recorded condition, e.g. a missing selector or a skipped write."""

    severity: Severity
    code: str
    message: str
    path: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "path": self.path,
        }


class Diagnostics:
    """Collects diagnostics for one run and mirrors them to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or get_logger("diagnostics")
        self._records: List[Diagnostic] = []

    def report(
        self,
        severity: Severity,
        code: str,
        message: str,
        *,
        path: Path | str | None = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            severity=severity,
            code=code,
            message=message,
            path=str(path) if path is not None else None,
        )
        self._records.append(diagnostic)
        if path is not None:
            self._logger.log(severity.level, "%s (%s)", message, shorten_path(path))
        else:
            self._logger.log(severity.level, "%s", message)
        return diagnostic

    def debug(self, code: str, message: str, *, path: Path | str | None = None) -> Diagnostic:
        return self.report(Severity.DEBUG, code, message, path=path)

    def info(self, code: str, message: str, *, path: Path | str | None = None) -> Diagnostic:
        return self.report(Severity.INFO, code, message, path=path)

    def warning(self, code: str, message: str, *, path: Path | str | None = None) -> Diagnostic:
        return self.report(Severity.WARNING, code, message, path=path)

    def error(self, code: str, message: str, *, path: Path | str | None = None) -> Diagnostic:
        return self.report(Severity.ERROR, code, message, path=path)

    @property
    def records(self) -> List[Diagnostic]:
        return list(self._records)

    def codes(self) -> List[str]:
        return [record.code for record in self._records]

    def with_code(self, code: str) -> List[Diagnostic]:
        return [record for record in self._records if record.code == code]


__all__ = ["Diagnostic", "Diagnostics", "Severity"]
