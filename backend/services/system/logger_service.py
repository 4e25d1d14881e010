"""
Centralized Logging Service for the ZeKompanion user backend

This module provides a unified logging interface with:
- Structured JSON output
- File rotation (prevents disk fill)
- Colored console output during development
- Contextual logging with extra fields (user_uuid, artifact, size, ...)


Usage:
    from backend.services.system.logger_service import get_logger

    logger = get_logger(__name__)
    logger.info("Badge rendered", extra={"user_uuid": "abc123"})
    logger.error("Cache write failed", extra={"error": str(e)}, exc_info=True)
"""

import logging
import json
import sys
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional
from pathlib import Path


# Attributes every LogRecord carries; anything else came in through extra={}
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'extra_fields', 'taskName',
])


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    One object per line so log shippers can ingest the file directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        def _infer_feature(logger_name: str) -> str:
            parts = logger_name.split('.') if logger_name else []
            for anchor in ('features', 'services'):
                if anchor in parts:
                    idx = parts.index(anchor)
                    if idx + 1 < len(parts):
                        return parts[idx + 1]
            return parts[0] if parts else 'unknown'

        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'component': 'zekompanion-backend',
            'feature': _infer_feature(record.name),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable colored formatter for console output.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        colored_level = f"{level_color}{record.levelname:8s}{self.COLORS['RESET']}"
        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')

        message = record.getMessage()
        extra_parts = [f"{key}={value}" for key, value in _extra_fields(record).items()]
        if extra_parts:
            message += f" | {' '.join(extra_parts)}"

        # Format: [2024-11-16 10:30:45] INFO     [backend.features.users...] Badge rendered
        log_line = f"[{timestamp}] {colored_level} [{record.name}] {message}"

        if record.exc_info:
            log_line += '\n' + self.formatException(record.exc_info)

        return log_line


class LoggerService:
    """
    Logger service singleton.
    Configures the root logger exactly once per process.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LoggerService, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._initialize_logging()
            LoggerService._initialized = True

    def _initialize_logging(self):
        """Set up logging configuration"""
        default_dir = Path(__file__).resolve().parents[2] / 'logs'
        log_dir = Path(os.getenv('LOG_DIR', str(default_dir))).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)

        log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
        log_level = getattr(logging, log_level_str, logging.INFO)

        environment = os.getenv('ENVIRONMENT', 'development').lower()

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers.clear()

        # 1. JSON File Handler (log aggregation)
        json_handler = RotatingFileHandler(
            log_dir / 'zekompanion.json.log',
            maxBytes=20 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        json_handler.setLevel(log_level)
        json_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(json_handler)

        # 2. Human-readable File Handler
        text_handler = RotatingFileHandler(
            log_dir / 'zekompanion.log',
            maxBytes=20 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        text_handler.setLevel(log_level)
        text_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(text_handler)

        # 3. Console Handler (development only)
        if environment == 'development':
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(ConsoleFormatter())
            root_logger.addHandler(console_handler)

        logging.getLogger('werkzeug').setLevel(logging.ERROR)
        logging.getLogger('PIL').setLevel(logging.WARNING)

        logging.getLogger(__name__).info(
            "Logging initialized",
            extra={
                'environment': environment,
                'log_level': log_level_str,
                'log_dir': str(log_dir),
            }
        )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Configured logger instance
    """
    LoggerService()
    return logging.getLogger(name)


def log_user_operation(logger: logging.Logger, operation: str,
                       identifier: str, authorized: bool, **kwargs):
    """
    Helper to log user operations with consistent format.

    `identifier` must be the caller-facing identifier, never the canonical
    UUID of a record resolved for an unauthorized caller.
    """
    logger.info(
        f"User {operation}",
        extra={
            'operation': operation,
            'identifier': identifier,
            'authorized': authorized,
            'resource_type': 'user',
            **kwargs
        }
    )


def log_error(logger: logging.Logger, error: Exception, context: Optional[Dict[str, Any]] = None):
    """
    Helper to log errors with full context and traceback.

    Args:
        logger: Logger instance
        error: Exception object
        context: Optional context dictionary
    """
    logger.error(
        f"Error: {str(error)}",
        extra={
            'error_type': type(error).__name__,
            'error_message': str(error),
            **(context or {})
        },
        exc_info=True
    )
