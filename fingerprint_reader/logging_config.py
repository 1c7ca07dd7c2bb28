"""
Logging configuration for fingerprint_reader.

Library modules only ever call logging.getLogger(__name__); handlers are
installed by applications (and by fprintctl) through setup_logging().

Usage:
    from fingerprint_reader.logging_config import setup_logging, get_logger

    setup_logging(verbose=True)
    logger = get_logger('fingerprint_reader.cli')
    logger.verbose("Waiting for finger")
"""

import json
import logging
import os
import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


# =============================================================================
# LOGGING LEVELS
# =============================================================================

TRACE = 5       # Call arguments, replies and raw signal payloads
VERBOSE = 15    # Bus calls, subscriptions and dropped payloads

logging.addLevelName(TRACE, 'TRACE')
logging.addLevelName(VERBOSE, 'VERBOSE')

PACKAGE_LOGGER = 'fingerprint_reader'


# =============================================================================
# CONFIGURATION STATE
# =============================================================================

@dataclass
class LoggingState:
    """Thread-safe logging configuration state."""
    verbose: bool = False
    trace: bool = False
    log_file: Optional[str] = None
    console_enabled: bool = True
    json_format: bool = False
    initialized: bool = False
    _lock: threading.RLock = field(default_factory=threading.RLock)


_state = LoggingState()


# =============================================================================
# FORMATTER
# =============================================================================

class FprintFormatter(logging.Formatter):
    """Formatter with optional colour and JSON output."""

    COLORS = {
        'TRACE': '\033[90m',      # Gray
        'DEBUG': '\033[36m',      # Cyan
        'VERBOSE': '\033[94m',    # Light blue
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33;1m',  # Bold yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[31;1m', # Bold red
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True, json_format: bool = False, stream=None):
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()
        self.json_format = json_format
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        if self.json_format:
            return self._format_json(record)
        return self._format_text(record)

    def _format_text(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        level_name = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level_name, '')
            level_str = f"{color}{level_name:8}{self.COLORS['RESET']}"
        else:
            level_str = f"{level_name:8}"

        component = f"[{self._extract_component(record.name)}]"
        line = f"{timestamp} {level_str} {component:12} {record.getMessage()}"

        if hasattr(record, 'extra_data') and record.extra_data:
            extra_items = [f"{k}={v}" for k, v in record.extra_data.items()]
            line += f" | {', '.join(extra_items)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line

    def _format_json(self, record: logging.LogRecord) -> str:
        data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'component': self._extract_component(record.name),
            'message': record.getMessage(),
        }
        if hasattr(record, 'extra_data') and record.extra_data:
            data['extra'] = record.extra_data
        if record.exc_info:
            data['exception'] = self.formatException(record.exc_info)
        return json.dumps(data)

    @staticmethod
    def _extract_component(logger_name: str) -> str:
        """fingerprint_reader.device -> device"""
        parts = logger_name.split('.')
        if len(parts) >= 2 and parts[0] == PACKAGE_LOGGER:
            return parts[-1]
        return parts[0] or 'root'


# =============================================================================
# LOGGER CLASS
# =============================================================================

class FprintLogger(logging.Logger):
    """Logger with TRACE and VERBOSE helpers."""

    def trace(self, msg: str, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    def verbose(self, msg: str, *args, **kwargs):
        if self.isEnabledFor(VERBOSE):
            self._log(VERBOSE, msg, args, **kwargs)


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(
    verbose: bool = False,
    trace: bool = False,
    log_file: Optional[str] = None,
    console: bool = True,
    json_format: bool = False,
    stream=None,
) -> None:
    """
    Install handlers on the package logger.

    Args:
        verbose: Enable VERBOSE level
        trace: Enable TRACE level (implies verbose)
        log_file: Optional file path for log output
        console: Log to stderr
        json_format: One JSON object per line
        stream: Console stream override (defaults to stderr)
    """
    with _state._lock:
        _state.verbose = verbose or trace
        _state.trace = trace
        _state.log_file = log_file
        _state.console_enabled = console
        _state.json_format = json_format

        if trace:
            base_level = TRACE
        elif verbose:
            base_level = VERBOSE
        else:
            base_level = logging.INFO

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(base_level)

        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)
            handler.close()

        if console:
            console_stream = stream if stream is not None else sys.stderr
            console_handler = logging.StreamHandler(console_stream)
            console_handler.setLevel(base_level)
            console_handler.setFormatter(FprintFormatter(
                use_colors=True,
                json_format=json_format,
                stream=console_stream,
            ))
            package_logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(base_level)
            file_handler.setFormatter(FprintFormatter(
                use_colors=False,
                json_format=json_format,
            ))
            package_logger.addHandler(file_handler)

        _state.initialized = True


def get_logger(name: str) -> FprintLogger:
    """
    Get a logger supporting trace() and verbose().

    The logger class is only swapped for the duration of the lookup so that
    applications embedding the library keep their own default. A logger
    that already exists under `name` is returned unchanged.
    """
    with _state._lock:
        previous = logging.getLoggerClass()
        logging.setLoggerClass(FprintLogger)
        try:
            return logging.getLogger(name)
        finally:
            logging.setLoggerClass(previous)


def set_verbose(enabled: bool) -> None:
    """Toggle verbose mode at runtime."""
    with _state._lock:
        _state.verbose = enabled
        level = VERBOSE if enabled else logging.INFO

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(level)
        for handler in package_logger.handlers:
            handler.setLevel(level)


def is_verbose() -> bool:
    return _state.verbose


def get_logging_state() -> Dict[str, Any]:
    """Get current logging configuration state."""
    with _state._lock:
        return {
            'verbose': _state.verbose,
            'trace': _state.trace,
            'log_file': _state.log_file,
            'console_enabled': _state.console_enabled,
            'json_format': _state.json_format,
            'initialized': _state.initialized,
        }


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def configure_from_environment(verbose: bool = False) -> None:
    """
    Configure logging from FPRINT_VERBOSE, FPRINT_TRACE, FPRINT_LOG_FILE
    and FPRINT_LOG_JSON. An explicit verbose=True wins over the environment.
    """
    setup_logging(
        verbose=verbose or _env_flag('FPRINT_VERBOSE'),
        trace=_env_flag('FPRINT_TRACE'),
        log_file=os.environ.get('FPRINT_LOG_FILE') or None,
        json_format=_env_flag('FPRINT_LOG_JSON'),
    )


__all__ = [
    'TRACE',
    'VERBOSE',
    'FprintFormatter',
    'FprintLogger',
    'setup_logging',
    'configure_from_environment',
    'get_logger',
    'set_verbose',
    'is_verbose',
    'get_logging_state',
]
