"""Configuration for the array-block domain.

Settings are read from ``arrayblock.toml`` / ``.arrayblock.toml`` (top-level
keys) or from the ``[tool.arrayblock]`` table of ``pyproject.toml``.
"""
from __future__ import annotations

import logging
import sys
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from arrayblock.errors import ConfigError, ErrorCodes

CONFIG_FILES = [
    "arrayblock.toml",
    ".arrayblock.toml",
    "pyproject.toml",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainConfig:
    """Tunables consumed by the interval domain."""
    widening_thresholds: tuple[int, ...] = (0,)
    widening_delay: int = 0
    verbosity: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "widening_thresholds": list(self.widening_thresholds),
            "widening_delay": self.widening_delay,
            "verbosity": self.verbosity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DomainConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"unknown configuration keys: {', '.join(unknown)}",
                code=ErrorCodes.UNKNOWN_CONFIG_KEY,
            )
        kwargs: dict[str, Any] = {}
        if "widening_thresholds" in data:
            thresholds = data["widening_thresholds"]
            if not isinstance(thresholds, (list, tuple)) or not all(
                _is_int(t) for t in thresholds
            ):
                raise ConfigError("widening_thresholds must be a list of integers")
            kwargs["widening_thresholds"] = tuple(sorted(thresholds))
        for key in ("widening_delay", "verbosity"):
            if key in data:
                value = data[key]
                if not _is_int(value) or value < 0:
                    raise ConfigError(f"{key} must be a non-negative integer")
                kwargs[key] = value
        return cls(**kwargs)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


_current = DomainConfig()


def get_config() -> DomainConfig:
    """Return the process-wide default configuration."""
    return _current


def set_config(config: DomainConfig) -> DomainConfig:
    """Install *config* as the default and return the previous one."""
    global _current
    previous = _current
    _current = config
    return previous


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Search *start* and its parents for a configuration file."""
    directory = (start or Path.cwd()).resolve()
    for candidate in (directory, *directory.parents):
        for name in CONFIG_FILES:
            path = candidate / name
            if path.is_file():
                if name == "pyproject.toml" and not _has_tool_table(path):
                    continue
                return path
    return None


def _has_tool_table(path: Path) -> bool:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        _log.debug("Skipping unparsable %s: %s", path, exc)
        return False
    return "arrayblock" in data.get("tool", {})


def load_config(path: Optional[Path] = None) -> DomainConfig:
    """Load configuration from *path*, or from the nearest config file.

    Returns the defaults when no file is found.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            _log.debug("No configuration file found; using defaults")
            return DomainConfig()
    path = Path(path)
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}", cause=exc) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}", cause=exc) from exc
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("arrayblock", {})
    _log.info("Loaded configuration from %s", path)
    return DomainConfig.from_dict(data)


def configure_logging(verbosity: Optional[int] = None) -> None:
    """Set up the ``arrayblock`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.  Defaults to the
        ``verbosity`` of the active configuration.
    """
    if verbosity is None:
        verbosity = get_config().verbosity
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("arrayblock")
    root.setLevel(level)
    root.addHandler(handler)


__all__ = [
    "CONFIG_FILES",
    "DomainConfig",
    "get_config",
    "set_config",
    "find_config_file",
    "load_config",
    "configure_logging",
]
