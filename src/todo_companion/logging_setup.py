# src/todo_companion/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "todo_companion"
LOG_FILE_NAME = "todo.log"

# Per-call cache and storage decisions. Their DEBUG records go to the log file only.
STORAGE_LOGGERS: tuple[str, ...] = (
    "todo_companion.tasks.repository",
    "todo_companion.tasks.local_source",
    "todo_companion.tasks.remote_source",
)

_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"


def _is_app_record(name: str) -> bool:
    return name == APP_LOGGER or name.startswith(APP_LOGGER + ".")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable.

    App records pass, except DEBUG chatter from the storage layer (cache hits,
    write-throughs) which would interleave with command replies. Anything not
    from the app (asyncio, py.warnings) is shown only at ERROR+.
    """

    def __init__(self, quiet_debug: tuple[str, ...] = STORAGE_LOGGERS) -> None:
        super().__init__()
        self._quiet_debug = quiet_debug

    def filter(self, record: logging.LogRecord) -> bool:
        if not _is_app_record(record.name):
            return record.levelno >= logging.ERROR
        if record.levelno <= logging.DEBUG and record.name.startswith(self._quiet_debug):
            return False
        return True


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(str(path), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/todo",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to a filtered stderr console and a full log file in log_dir.

    Replaces any handlers already on the root logger, so call it once at
    startup. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(min(console_level, file_level))
    root.addHandler(_console_handler(console_level))
    root.addHandler(_file_handler(log_file, file_level))

    # warnings.warn(...) arrives as 'py.warnings'; the console filter hides it below ERROR.
    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    return log_file
