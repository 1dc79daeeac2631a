"""Logging setup for applications embedding the kernel.

The kernel only emits records through module loggers and tags them with the
query kind (``curve_pair``, ``curve_line``, ``roots``, ``closest``) via
``log_context``. Applications call ``setup_logging`` once to get a console
and/or file handler whose formatter prints those context fields.

Public API:
    setup_logging(log_level="DEBUG", log_file="clip.log", json=True)
    push_context(glyph="a")        # fields for all following records
    pop_context(["glyph"])
    log_context(query="closest")   # scoped fields (context manager)

Format examples:
    Human: 2025-10-28T13:45:12.345Z | DEBUG    | query=curve_pair | Splitting ...
    JSON: {"t":"2025-10-28T13:45:12.345+00:00","lvl":"DEBUG","name":"...","query":"curve_pair","msg":"..."}

Context uses contextvars, so concurrent queries in threads or tasks keep
their own fields. setup_logging() replaces the handlers it installed
before instead of stacking new ones.
"""

import contextvars
import json
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


_context_var: contextvars.ContextVar = contextvars.ContextVar('clip_log_context', default={})

_installed_handlers: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """One line per record: timestamp, level, context fields, message.

    Parameters
    ----------
    fmt_mode : str
        "human" for ``|``-separated text, "json" for one JSON object per line
    """

    def __init__(self, fmt_mode: str = "human"):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown format mode: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        fields = get_context()

        if self.fmt_mode == "json":
            entry = {'t': ts.isoformat(), 'lvl': record.levelname, 'name': record.name}
            entry.update(fields)
            entry['msg'] = record.getMessage()
            if record.exc_info:
                entry['exc'] = self.formatException(record.exc_info)
            return json.dumps(entry, default=str)

        stamp = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'
        parts = [stamp, f"{record.levelname:8s}"]
        if fields:
            parts.append(' '.join(f"{k}={v}" for k, v in fields.items()))
        parts.append(record.getMessage())
        line = ' | '.join(parts)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    to_stderr: bool = True,
    context: Optional[Dict[str, Any]] = None
) -> List[logging.Handler]:
    """Configure the root logger.

    Parameters
    ----------
    log_level : str
        "DEBUG" shows splits and fallbacks, "WARNING" only truncated queries
    log_file : str, optional
        Also write to this file (parent directories are created)
    json : bool
        JSON lines in the file instead of human-readable text
    to_stderr : bool
        Human-readable console output on stderr
    context : dict, optional
        Fields pushed for all following records

    Returns
    -------
    List[logging.Handler]
        Handlers now installed by this function
    """
    root = logging.getLogger()
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    root.setLevel(getattr(logging, log_level.upper()))

    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human"))
        _installed_handlers.append(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding='utf-8')
        file_handler.setFormatter(ContextFormatter("json" if json else "human"))
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root.addHandler(handler)

    if context:
        push_context(**context)
    return list(_installed_handlers)


def get_logger(name: str) -> logging.Logger:
    """Get logger by name (typically __name__)."""
    return logging.getLogger(name)


def push_context(**kwargs) -> None:
    """Add fields to all subsequent records of this context."""
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove the given fields; all of them when keys is None."""
    if keys is None:
        _context_var.set({})
        return
    _context_var.set({k: v for k, v in _context_var.get().items() if k not in keys})


def get_context() -> Dict[str, Any]:
    """Copy of the current fields."""
    return dict(_context_var.get())


@contextmanager
def log_context(**kwargs) -> Iterator[None]:
    """Add fields inside the block, restoring the previous ones on exit."""
    token = _context_var.set({**_context_var.get(), **kwargs})
    try:
        yield
    finally:
        _context_var.reset(token)
