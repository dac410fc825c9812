"""
Logging Configuration for the DevConnector API.

This module provides a centralized logging setup for the API and the client
package. It produces color-coded, human-readable logs in development and
structured JSON logs everywhere else, and stamps every record emitted while a
request is being handled with that request's correlation ID.

Key Components:
- `CorrelationFilter`: Copies the correlation ID of the current context onto
  each log record.
- `StructuredFormatter`: Outputs log records as one JSON object per line,
  including any `extra` fields passed by the caller.
- `ColoredConsoleFormatter`: Adds color to log levels for a development console.
- `get_logging_config`: Builds the `dictConfig` dictionary for an environment.
- `setup_logging`: Initializes logging for the whole application.
- `log_function_call`: Decorator that logs entry, exit and execution time of
  sync or async functions, and logs failures with their traceback.

Architectural Design:
- Environment-Aware Configuration: Format and level come from the
  `ENVIRONMENT` and `LOG_LEVEL` settings.
- Context-Aware Logging: The correlation ID lives in a `ContextVar`, so it
  follows the asynchronous context of each request.
"""

import asyncio
import functools
import json
import logging
import logging.config
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.exceptions import ConnectorAPIException

# Context variable for request correlation ID
correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
    "correlation_id",
}


class CorrelationFilter(logging.Filter):
    """Filter that adds correlation ID to log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        corr_id = correlation_id.get()
        if corr_id:
            record.correlation_id = corr_id
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs structured JSON logs"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        corr_id = getattr(record, "correlation_id", None) or correlation_id.get()
        if corr_id:
            log_entry["correlation_id"] = corr_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        return json.dumps(log_entry, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        corr_id = getattr(record, "correlation_id", None)
        corr_part = f" [{corr_id}]" if corr_id else ""

        formatted = f"{color}[{timestamp}] {record.levelname:8} {record.name}{corr_part}: {record.getMessage()}{self.RESET}"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def get_logging_config(
    environment: str = "development", log_level: str = "INFO"
) -> Dict[str, Any]:
    """Get logging configuration for an environment"""
    environment = environment.lower()
    log_level = log_level.upper()

    def app_logger() -> Dict[str, Any]:
        return {"level": log_level, "handlers": ["console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "correlation": {"()": CorrelationFilter},
        },
        "formatters": {
            "structured": {"()": StructuredFormatter},
            "colored_console": {"()": ColoredConsoleFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "colored_console"
                if environment == "development"
                else "structured",
                "filters": ["correlation"],
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "api": app_logger(),
            "services": app_logger(),
            "core": app_logger(),
            "client": app_logger(),
            "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {"level": log_level, "handlers": ["console"]},
    }


def setup_logging(environment: str = "development", log_level: str = "INFO"):
    """Initialize logging configuration"""
    logging.config.dictConfig(get_logging_config(environment, log_level))

    logger = logging.getLogger("core.logging")
    logger.info(f"Logging initialized for {environment} environment")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name"""
    return logging.getLogger(name)


def set_correlation_id(corr_id: str):
    """Set correlation ID for the current context"""
    correlation_id.set(corr_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID from the current context"""
    return correlation_id.get()


def log_function_call(logger: logging.Logger):
    """Decorator to log function calls with execution time"""

    def decorator(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            logger.debug(f"Calling {func.__name__}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_failure(logger, func, start_time, e)
                raise
            _log_success(logger, func, start_time)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            logger.debug(f"Calling {func.__name__}")
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_failure(logger, func, start_time, e)
                raise
            _log_success(logger, func, start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def _log_success(logger: logging.Logger, func, start_time: float):
    logger.debug(
        f"Completed {func.__name__}",
        extra={
            "execution_time_ms": round((time.time() - start_time) * 1000, 2),
            "success": True,
        },
    )


def _log_failure(logger: logging.Logger, func, start_time: float, error: Exception):
    # Domain errors are expected outcomes
    extra = {
        "execution_time_ms": round((time.time() - start_time) * 1000, 2),
        "success": False,
        "error_type": type(error).__name__,
    }
    if isinstance(error, ConnectorAPIException):
        logger.debug(f"Failed {func.__name__}: {error}", extra=extra)
    else:
        logger.error(f"Failed {func.__name__}: {error}", extra=extra, exc_info=True)
