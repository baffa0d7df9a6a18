import logging
import logging.config
import structlog
import time
import uuid
from typing import Optional
import sys

# Chatty third-party loggers pinned to WARNING regardless of the app level
QUIET_LOGGERS = ("urllib3", "werkzeug")


def configure_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure structured logging for the scheduler.

    Console output always goes to stdout; when log_file is given, records
    are also written as JSON to a rotating file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path. If None, logs to stdout only.
    """
    log_level = (log_level or "INFO").upper()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True)
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = ["console"]
    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "scheduler": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
            "json": {
                "()": "structlog.stdlib.ProcessorFormatter",
                "processor": structlog.processors.JSONRenderer()
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "scheduler",
                "stream": sys.stdout
            }
        },
        "root": {
            "level": log_level,
            "handlers": handlers,
        },
        "loggers": {
            name: {"level": "WARNING"} for name in QUIET_LOGGERS
        }
    }

    if log_file:
        log_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "json",
            "filename": log_file,
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3
        }
        handlers.append("file")

    logging.config.dictConfig(log_config)

    logger = structlog.get_logger("jobscheduler")
    logger.info("Logging configured", level=log_level, file=log_file)

    return logger


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class OperationContext:
    """
    Wrap a long-running scheduler operation (an optimizer round trip, a
    preview export) in start/finish log lines.

    While the block runs, operation_id is bound into the structlog
    context, so every record logged inside carries it.
    """

    def __init__(self, operation_type: str, operation_id: Optional[str] = None):
        self.operation_type = operation_type
        self.operation_id = operation_id or uuid.uuid4().hex[:8]
        self.logger = get_logger("jobscheduler.operations")
        self._started = None
        self._bound = None

    def __enter__(self):
        self._bound = structlog.contextvars.bind_contextvars(
            operation_type=self.operation_type,
            operation_id=self.operation_id,
        )
        self._started = time.monotonic()
        self.logger.debug("Operation started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = round(time.monotonic() - self._started, 3)
        try:
            if exc_type is None:
                self.logger.info("Operation completed", duration_seconds=elapsed)
            else:
                self.logger.error(
                    "Operation failed",
                    duration_seconds=elapsed,
                    error_type=exc_type.__name__,
                    error_message=str(exc_val)
                )
        finally:
            structlog.contextvars.reset_contextvars(**self._bound)
        return False
