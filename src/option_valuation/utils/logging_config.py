"""Logging configuration for scripts that drive the valuation library.

- Library modules never call basicConfig; they just do `logger = getLogger(__name__)`.
- Every contained pricing failure (engine error, Greek fallback, implied
  volatility miss, degraded result) is logged at DEBUG under the
  `option_valuation` logger tree. `diagnostics=True` surfaces them without
  lowering the level of everything else.
- Scripts call `setup_logging(...)` once.

The console handler injects `record.shortname` (last dotted component of the
logger name), usable as `%(shortname)s` in console formats.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

LIBRARY_LOGGER = "option_valuation"


class _AddShortNameFilter(logging.Filter):
    """Inject `record.shortname` without mutating `record.name`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.shortname = record.name.split(".")[-1]
        return True


class _ColorFormatter(logging.Formatter):
    """Color only the level name; meant for console handlers."""

    _RESET = "\033[0m"
    _LEVEL_COLOR: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self._LEVEL_COLOR.get(record.levelno)
        if not color:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{color}{original}{self._RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def coerce_level(level: int | str) -> int:
    """Coerce a logging level given as int or string into an int."""
    if isinstance(level, int):
        return level

    s = str(level).strip().upper()
    if not s:
        raise ValueError("Empty logging level")
    if s.isdigit():
        return int(s)

    value = logging.getLevelName(s)
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return value


def setup_logging(
    level: int | str = "INFO",
    *,
    fmt_console: str = "%(asctime)s %(levelname)s %(name)s - %(message)s",
    fmt_file: str = "%(asctime)s %(levelname)s %(name)s - %(message)s",
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    log_file: str | Path | None = None,
    module_levels: Mapping[str, int | str] | None = None,
    colored: bool = False,
    diagnostics: bool = False,
) -> None:
    """Configure root logging (call once from scripts).

    Parameters
    - level: Root log level (int or string).
    - fmt_console / fmt_file: Console and file formats.
    - log_file: If provided, also write logs to this file (uncolored).
    - module_levels: Optional per-logger overrides.
    - colored: Colorize console level names (ANSI).
    - diagnostics: Show DEBUG records from the valuation library, where
      degraded-to-zero prices and Greek fallbacks are reported.

    Uses `force=True` so reruns don't duplicate handlers.
    """
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.addFilter(_AddShortNameFilter())
    formatter_cls = _ColorFormatter if colored else logging.Formatter
    console.setFormatter(formatter_cls(fmt=fmt_console, datefmt=datefmt))
    handlers.append(console)

    if log_file is not None:
        p = Path(log_file)
        p.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(p, encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt=fmt_file, datefmt=datefmt))
        handlers.append(fh)

    root_level = coerce_level(level)
    if diagnostics:
        # Root must let DEBUG records through to the handlers.
        logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
        for handler in handlers:
            handler.addFilter(_LibraryDebugFilter(root_level))
        logging.getLogger(LIBRARY_LOGGER).setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=root_level, handlers=handlers, force=True)
        logging.getLogger(LIBRARY_LOGGER).setLevel(logging.NOTSET)

    if module_levels:
        for name, lvl in module_levels.items():
            logging.getLogger(name).setLevel(coerce_level(lvl))


class _LibraryDebugFilter(logging.Filter):
    """Pass library records at any level, everything else from `min_level`."""

    def __init__(self, min_level: int) -> None:
        super().__init__()
        self.min_level = min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == LIBRARY_LOGGER or record.name.startswith(LIBRARY_LOGGER + "."):
            return True
        return record.levelno >= self.min_level
