"""
Logging configuration for the access control engine.

This module provides centralized logging configuration with support for
structured logging, different log levels, and text or JSON output.
"""

import logging
import logging.config
import sys
from typing import Any, Dict, Hashable, Optional


def get_logging_config(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None
) -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Optional log file path

    Returns:
        Logging configuration dictionary
    """
    formatters = {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(module)s %(lineno)d %(message)s"
        }
    }

    formatter_name = "json" if log_format == "json" else "detailed"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": formatter_name,
            "stream": sys.stdout
        }
    }

    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": formatter_name,
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf8"
        }

    loggers = {
        "roleacl": {
            "level": log_level,
            "handlers": list(handlers.keys()),
            "propagate": False
        }
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": loggers
    }


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None
) -> None:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Optional log file path
    """
    config = get_logging_config(
        log_level=log_level,
        log_format=log_format,
        log_file=log_file
    )

    logging.config.dictConfig(config)


def setup_logging_from_config(config) -> None:
    """Setup logging from a loaded AclConfig."""
    setup_logging(
        log_level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class StructuredLogger:
    """
    Structured logger for consistent log message formatting.

    Access decisions and graph mutations are logged with consistent
    field names so they can be filtered in JSON output.
    """

    def __init__(self, name: str):
        """Initialize structured logger.

        Args:
            name: Logger name
        """
        self.logger = get_logger(name)

    def log_decision(
        self,
        role: Hashable,
        privilege: str,
        granted: bool,
        decision: str,
        **kwargs
    ):
        """Log the outcome of an access check.

        Args:
            role: Role the check was made for
            privilege: Privilege that was checked
            granted: Final boolean answer
            decision: Tri-state resolution result before collapsing
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "access_decision",
            "role": str(role),
            "privilege": privilege,
            "granted": granted,
            "decision": decision,
        }
        log_data.update(kwargs)

        self.logger.debug("Access decision", extra=log_data)

    def log_mutation(self, action: str, role: Hashable, **kwargs):
        """Log a change to the role graph or a privilege store.

        Args:
            action: Mutation name (add_role, allow, deny, ...)
            role: Role that was changed
            **kwargs: Additional fields to log
        """
        log_data = {
            "event": "acl_mutation",
            "action": action,
            "role": str(role),
        }
        log_data.update(kwargs)

        self.logger.info(f"ACL {action}: {role}", extra=log_data)

    def info(self, message: str, **kwargs):
        """Log info message with structured data."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with structured data."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with structured data."""
        self.logger.error(message, extra=kwargs)

    def debug(self, message: str, **kwargs):
        """Log debug message with structured data."""
        self.logger.debug(message, extra=kwargs)
