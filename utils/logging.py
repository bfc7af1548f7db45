"""
Centralized logging configuration for Local Lore.

This module provides a unified logging system for the backend,
with structured JSON log files, session-based organization, and contextual logging.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

# Configure base logging directory - make absolute to ensure consistency
PROJECT_ROOT = Path(os.path.dirname(os.path.abspath(__file__))).parent
LOGS_DIR = Path(os.getenv("LOG_DIR", str(PROJECT_ROOT / "logs")))

class JsonFormatter(logging.Formatter):
    """Formatter that outputs JSON strings after formatting the log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as JSON."""
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        # Add location information for debugging
        if record.levelno <= logging.DEBUG:
            log_entry["location"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Add any context data attached to the record
        if hasattr(record, 'context') and record.context:
            log_entry.update(record.context)

        return json.dumps(log_entry, default=str)

class SimpleConsoleFormatter(logging.Formatter):
    """Compact formatter for console output; context data is left to the file logs."""

    def __init__(self, fmt=None, datefmt=None, style='%'):
        super().__init__(fmt, datefmt, style)
        self.default_fmt = '[%(asctime)s] %(levelname)s - %(name)s: %(message)s'

    def format(self, record: logging.LogRecord) -> str:
        self._style._fmt = self.default_fmt
        formatted = super().format(record)

        if record.exc_info and not record.exc_text:
            formatted += f"\nException: {self.formatException(record.exc_info)}"

        return formatted

class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that adds context to log records."""

    def process(self, msg, kwargs):
        """Merge the adapter context into the record's ``context`` extra."""
        kwargs.setdefault('extra', {}).setdefault('context', {})

        if self.extra:
            for key, value in self.extra.items():
                kwargs['extra']['context'].setdefault(key, value)

        return msg, kwargs

class SessionLogger:
    """
    Manages logging for a session or run of the application.

    A session is a logical unit of execution, such as the API server,
    a test run, or a data import script.
    """

    _current_session: Optional[str] = None
    _session_log_file: Optional[str] = None

    @classmethod
    def start_session(cls, session_name: Optional[str] = None) -> str:
        """
        Start a new logging session. Ensures only one file handler is active.
        Logs are saved in logs/YYYYMMDD/session_name_[timestamp].log

        Args:
            session_name: Name for the session, typically the script or test name.
                          Falls back to the running script name.

        Returns:
            The session ID (the log file name without .log).
        """
        now = datetime.now()
        timestamp = now.strftime("%Y%m%d_%H%M%S")
        date_str = now.strftime("%Y%m%d")

        if not session_name:
            if 'pytest' in sys.modules:
                session_name = "pytest"
            else:
                session_name = Path(sys.argv[0]).stem if sys.argv and sys.argv[0] else "local_lore"

        session_id = f"{session_name}_{timestamp}"

        date_dir = LOGS_DIR / date_str
        date_dir.mkdir(parents=True, exist_ok=True)
        log_file = date_dir / f"{session_id}.log"

        cls._session_log_file = str(log_file)
        cls._current_session = session_id

        cls._configure_root_logger(log_file)

        logging.info(f"Started logging session: {session_id} -> {log_file}",
                     extra={"context": {"session_id": session_id}})

        return session_id

    @classmethod
    def _configure_root_logger(cls, log_file: Path):
        """Configure the root logger handlers for the current session."""
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)

        # Replace only the handlers installed by a previous session
        for handler in root_logger.handlers[:]:
            if getattr(handler, "_session_handler", False):
                handler.close()
                root_logger.removeHandler(handler)

        console_level_name = os.environ.get('LOG_LEVEL_CONSOLE', 'WARNING').upper()
        console_level = getattr(logging, console_level_name, logging.WARNING)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(SimpleConsoleFormatter())
        console_handler.setLevel(console_level)
        console_handler._session_handler = True
        root_logger.addHandler(console_handler)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JsonFormatter())
        file_handler.setLevel(logging.INFO)
        file_handler._session_handler = True
        root_logger.addHandler(file_handler)

    @classmethod
    def get_logger(cls, name: str, context: Dict[str, Any] = None) -> logging.LoggerAdapter:
        """
        Get a logger with session context.

        Args:
            name: Logger name (typically __name__)
            context: Additional context data to include in all log records

        Returns:
            A logger adapter with context
        """
        if not cls._current_session:
            cls.start_session()

        context_data = dict(context or {})
        context_data["session_id"] = cls._current_session

        logger = logging.getLogger(name)
        logger.propagate = True
        return ContextualLogger(logger, context_data)

    @classmethod
    def get_session_log_file(cls) -> Optional[str]:
        """Get the path to the current session log file."""
        return cls._session_log_file

    @classmethod
    def get_current_session(cls) -> Optional[str]:
        """Get the current session ID."""
        return cls._current_session

def get_logger(name: str, context: Dict[str, Any] = None) -> logging.LoggerAdapter:
    """
    Get a logger with session context.

    Args:
        name: Logger name (typically __name__)
        context: Additional context data to include in all log records
    """
    return SessionLogger.get_logger(name, context)
