"""
Retro Arcade Logging

Two kinds of output, both keyed by module name:

Console lines:
    get_logger(module) returns a cached logger that prints
    ``[module] LEVEL: message``. Each module's threshold comes from the
    environment or configure_logging().

Structured records:
    emit_record(module, record) hands a JSON-serialisable dict to the sink
    registered for that module, or drops it when there is none. The session
    controller emits a ``session`` record for every lifecycle event; the
    launcher decides whether they reach disk by opening record_sinks() around
    a run.

Usage:
    from retro_arcade.logging import get_logger, record_sinks

    log = get_logger('session')
    log.debug("Stepping %d ticks", steps)

    with record_sinks('session', run_name='snake', game_id='snake'):
        controller.run(host)

Configuration:
    Environment variables:
        ARCADE_LOG_LEVEL=DEBUG             # Global default level
        ARCADE_LOG_SESSION=DEBUG           # Module-specific level
        ARCADE_LOG_DIR=/tmp/arcade-logs    # Directory for record files
        ARCADE_LOGGING_SESSION_ENABLED=1   # Write session records to disk

    Or programmatically:
        from retro_arcade.logging import configure_logging
        configure_logging(level='DEBUG', modules={'clock': 'TRACE'})
"""

import json
import os
import sys
import time
import traceback
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""
    TRACE = 5      # Even more verbose than DEBUG
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100      # Disable logging


_LEVEL_NAMES = {
    'TRACE': LogLevel.TRACE,
    'DEBUG': LogLevel.DEBUG,
    'INFO': LogLevel.INFO,
    'WARNING': LogLevel.WARNING,
    'WARN': LogLevel.WARNING,
    'ERROR': LogLevel.ERROR,
    'CRITICAL': LogLevel.CRITICAL,
    'OFF': LogLevel.OFF,
}

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},
    'log_dir': None,         # None = ARCADE_LOG_DIR or the platform data dir
    'records': {},           # module -> write records to disk
}


def _level_from_string(level_str: str) -> LogLevel:
    return _LEVEL_NAMES.get(level_str.strip().upper(), LogLevel.INFO)


# =============================================================================
# Directories
# =============================================================================

def get_data_dir() -> Path:
    """Get the per-user data directory for the arcade.

    Returns:
        - macOS: ~/Library/Application Support/RetroArcade
        - Windows: %APPDATA%/RetroArcade
        - Linux: $XDG_DATA_HOME/retro_arcade (default ~/.local/share/retro_arcade)
    """
    if sys.platform == 'darwin':
        return Path.home() / 'Library' / 'Application Support' / 'RetroArcade'
    if sys.platform == 'win32':
        return Path(os.environ.get('APPDATA', str(Path.home()))) / 'RetroArcade'
    xdg_data = os.environ.get('XDG_DATA_HOME', str(Path.home() / '.local' / 'share'))
    return Path(xdg_data) / 'retro_arcade'


def get_log_dir() -> Path:
    """Directory for record files: configured, ARCADE_LOG_DIR, or data dir/logs."""
    if _config['log_dir']:
        return Path(_config['log_dir']).expanduser()
    env_dir = os.environ.get('ARCADE_LOG_DIR')
    if env_dir:
        return Path(env_dir).expanduser()
    return get_data_dir() / 'logs'


# =============================================================================
# Structured records
# =============================================================================

class RecordSink(ABC):
    """Destination for one module's structured records."""

    @abstractmethod
    def emit(self, module: str, record: Dict[str, Any]) -> None:
        """
        Accept one record.

        Args:
            module: Module the record belongs to (e.g. 'session')
            record: JSON-serialisable record
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the sink. No records arrive after this."""
        pass


class JsonlRecordSink(RecordSink):
    """
    Appends records to a JSON Lines file.

    The file opens with a header carrying the run's metadata and closes with
    a footer counting the records in between. Every record is stamped with
    ``t``, seconds since the sink was opened, so a run's events can be
    lined up without comparing wall clocks.

    Args:
        path: File to append to (parent directories are created)
        metadata: Extra header fields (game id, engine version, ...)
    """

    def __init__(self, path: Path, metadata: Optional[Dict[str, Any]] = None):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, 'a')
        self._opened = time.monotonic()
        self.count = 0
        self._write({
            'type': 'header',
            'started': time.strftime("%Y-%m-%dT%H:%M:%S"),
            **(metadata or {}),
        })

    def _write(self, record: Dict[str, Any]) -> None:
        self._file.write(json.dumps(record) + "\n")

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        t = round(time.monotonic() - self._opened, 4)
        self._write({'t': t, 'module': module, **record})
        self.count += 1

    def close(self) -> None:
        if self._file.closed:
            return
        self._write({
            'type': 'footer',
            'ended': time.strftime("%Y-%m-%dT%H:%M:%S"),
            'records': self.count,
        })
        self._file.close()


_sinks: Dict[str, RecordSink] = {}


def register_sink(module: str, sink: RecordSink) -> None:
    """Route ``module``'s records to ``sink``, replacing any previous sink."""
    _sinks[module] = sink


def unregister_sink(module: str) -> None:
    """Stop routing ``module``'s records and close its sink."""
    sink = _sinks.pop(module, None)
    if sink is not None:
        sink.close()


def emit_record(module: str, record: Dict[str, Any]) -> bool:
    """
    Send a structured record to the module's sink.

    Returns:
        True if a sink took the record, False if it was dropped
    """
    sink = _sinks.get(module)
    if sink is None:
        return False
    sink.emit(module, record)
    return True


def records_enabled(module: str) -> bool:
    """Whether ARCADE_LOGGING_<MODULE>_ENABLED (or configuration) turns records on."""
    return bool(_config['records'].get(module.lower(), False))


@contextmanager
def record_sinks(*modules: str, run_name: Optional[str] = None,
                 **metadata) -> Iterator[Dict[str, RecordSink]]:
    """
    Write records for the enabled ``modules`` to disk for the duration of a block.

    Each enabled module gets ``<log dir>/<run_name>_<module>.jsonl``. Modules
    that are not enabled keep dropping their records. Sinks are closed and
    unregistered on exit, including when the block raises.

    Args:
        *modules: Module names to capture
        run_name: File name prefix (default: a timestamp)
        **metadata: Header fields written at the top of every file

    Yields:
        The sinks opened, by module
    """
    run_name = run_name or time.strftime("%Y%m%d_%H%M%S")
    opened: Dict[str, RecordSink] = {}
    try:
        for module in modules:
            if not records_enabled(module):
                continue
            path = get_log_dir() / f"{run_name}_{module}.jsonl"
            sink = JsonlRecordSink(path, metadata={'module': module, **metadata})
            register_sink(module, sink)
            opened[module] = sink
        yield opened
    finally:
        for module in opened:
            unregister_sink(module)


# =============================================================================
# Configuration
# =============================================================================

def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    log_dir: Optional[str] = None,
    records: Optional[Dict[str, bool]] = None,
) -> None:
    """
    Configure the logging system.

    Args:
        level: Default log level for all modules
        modules: Dict of module_name -> level for per-module configuration
        log_dir: Directory for record files
        records: Dict of module_name -> whether record_sinks() writes it
    """
    _config['default_level'] = _level_from_string(level)

    for mod, mod_level in (modules or {}).items():
        _config['module_levels'][mod.lower()] = _level_from_string(mod_level)

    for mod, enabled in (records or {}).items():
        _config['records'][mod.lower()] = enabled

    if log_dir is not None:
        _config['log_dir'] = log_dir


def disable_logging() -> None:
    """Silence every console logger."""
    _config['default_level'] = LogLevel.OFF
    _config['module_levels'].clear()


def _load_env_config(environ=os.environ) -> None:
    """Read ARCADE_LOG_* levels and ARCADE_LOGGING_<MODULE>_ENABLED switches."""
    for key, value in environ.items():
        if key == 'ARCADE_LOG_LEVEL':
            _config['default_level'] = _level_from_string(value)
        elif key == 'ARCADE_LOG_DIR':
            _config['log_dir'] = value
        elif key.startswith('ARCADE_LOG_'):
            _config['module_levels'][key[len('ARCADE_LOG_'):].lower()] = _level_from_string(value)
        elif key.startswith('ARCADE_LOGGING_') and key.endswith('_ENABLED'):
            module = key[len('ARCADE_LOGGING_'):-len('_ENABLED')].lower()
            _config['records'][module] = value.strip().lower() in ('1', 'true', 'yes', 'on')


_load_env_config()


# =============================================================================
# Console loggers
# =============================================================================

class ArcadeLogger:
    """Console logger for one module, with a TRACE level below DEBUG."""

    def __init__(self, module: str):
        self.module = module
        self._module_key = module.lower()

    @property
    def level(self) -> LogLevel:
        """Effective threshold for this module."""
        return _config['module_levels'].get(self._module_key, _config['default_level'])

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, level_name: str, msg: str, *args) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {level_name}: {msg}")

    def trace(self, msg: str, *args) -> None:
        self._log(LogLevel.TRACE, 'TRACE', msg, *args)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, 'DEBUG', msg, *args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, 'INFO', msg, *args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, 'WARN', msg, *args)

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, 'ERROR', msg, *args)

    def exception(self, msg: str, *args) -> None:
        """Log at ERROR level followed by the traceback being handled."""
        self._log(LogLevel.ERROR, 'ERROR', msg, *args)
        exc = sys.exc_info()[1]
        if exc is None:
            return
        for chunk in traceback.format_exception(type(exc), exc, exc.__traceback__):
            for line in chunk.rstrip('\n').split('\n'):
                self._log(LogLevel.ERROR, 'TRACE', line)


@lru_cache(maxsize=64)
def get_logger(module: str) -> ArcadeLogger:
    """
    Get the logger for a module.

    Loggers are cached, so every call with the same name returns the same
    instance.

    Args:
        module: Module name (e.g., 'session', 'controller', 'snake')
    """
    return ArcadeLogger(module)
