"""Configuration loading for ngmock (.ngmock.yml) and per-run options."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".ngmock.yml"
DEFAULT_SRC_DIR = "src"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class NgMockConfig:
    """Represents the settings defined in .ngmock.yml."""

    root: Path
    src_dir: Optional[str] = None
    exclude_paths: List[str] = field(default_factory=list)
    force: bool = False
    skip_aggregators: bool = False
    refresh_aggregators: bool = False
    log_file: Optional[Path] = None


@dataclass
class RunOptions:
    """Effective options for one generation run."""

    app_dir: Optional[Path] = None
    src_dir: str = DEFAULT_SRC_DIR
    force: bool = False
    skip_aggregators: bool = False
    refresh_aggregators: bool = False
    verbose: bool = False
    exclude_paths: List[str] = field(default_factory=list)

    @property
    def whole_application_mode(self) -> bool:
        return self.app_dir is not None

    @property
    def source_root(self) -> Optional[Path]:
        if self.app_dir is None:
            return None
        return Path(self.app_dir) / self.src_dir

    @classmethod
    def from_sources(
        cls,
        config: Optional[NgMockConfig] = None,
        *,
        app_dir: Optional[Path | str] = None,
        src_dir: Optional[str] = None,
        force: bool = False,
        skip_aggregators: bool = False,
        refresh_aggregators: bool = False,
        verbose: bool = False,
        exclude_paths: Sequence[str] = (),
    ) -> "RunOptions":
        """Merge command-line values over configuration file values."""
        config_src = config.src_dir if config else None
        config_excludes = list(config.exclude_paths) if config else []
        return cls(
            app_dir=Path(app_dir).expanduser() if app_dir else None,
            src_dir=src_dir or config_src or DEFAULT_SRC_DIR,
            force=force or bool(config and config.force),
            skip_aggregators=skip_aggregators or bool(config and config.skip_aggregators),
            refresh_aggregators=refresh_aggregators
            or bool(config and config.refresh_aggregators),
            verbose=verbose,
            exclude_paths=config_excludes + list(exclude_paths),
        )


def load_config(config_path: Path) -> NgMockConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return NgMockConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    aggregators = _as_dict(data.get("aggregators"))
    log_file = _as_str(data.get("log_file"))

    return NgMockConfig(
        root=root,
        src_dir=_as_str(data.get("src_dir")),
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        force=_as_bool(data.get("force")) or False,
        skip_aggregators=_as_bool(aggregators.get("skip")) or False,
        refresh_aggregators=_as_bool(aggregators.get("refresh")) or False,
        log_file=root / log_file if log_file else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "NgMockConfig", "RunOptions", "load_config"]
