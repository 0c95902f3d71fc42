"""
Logging configuration for the NoteStream backend.

Everything under the ``notestream`` logger goes to the console and to
rotating JSON files in ``settings.log_dir``; errors are also copied to
``error.log``. Fields passed with ``extra=`` end up in the JSON ``extra``
object.
"""
import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from ..config import get_settings

# LogRecord attributes that are not "extra" fields
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra:
            log_entry['extra'] = extra

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter for local development (``DEBUG=true``)."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # copy, the file handlers format the same record
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def build_logging_config(log_dir: Path) -> dict:
    """dictConfig for the console plus rotating files under log_dir."""
    settings = get_settings()
    level = settings.log_level.upper()
    if level not in logging.getLevelNamesMapping():
        level = 'INFO'

    def rotating(filename: str, min_level: str) -> dict:
        return {
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': str(log_dir / filename),
            'maxBytes': 10_000_000,
            'backupCount': 5,
            'formatter': 'json',
            'level': min_level,
        }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {'()': JSONFormatter},
            'colored': {
                '()': ColoredFormatter,
                'format': '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
                'datefmt': '%H:%M:%S',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'colored' if settings.debug else 'json',
                'stream': sys.stdout,
                'level': level,
            },
            'file': rotating('notestream.log', 'DEBUG'),
            'error_file': rotating('error.log', 'ERROR'),
        },
        'loggers': {
            'notestream': {
                'handlers': ['console', 'file', 'error_file'],
                'level': 'DEBUG',
                'propagate': False,
            },
            'strawberry': {'level': 'WARNING'},
            'sqlalchemy': {'level': 'WARNING'},
        },
        'root': {'handlers': ['console', 'file'], 'level': 'INFO'},
    }


def setup_logging() -> None:
    settings = get_settings()

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_dir))

    get_logger('logging').info("Logging system initialized", extra={
        'log_level': settings.log_level,
        'environment': settings.environment,
    })


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the notestream namespace."""
    return logging.getLogger(f"notestream.{name}")


class LoggingMiddleware:
    """ASGI middleware logging one line per HTTP request with its duration."""

    def __init__(self, app, logger_name: str = "http"):
        self.app = app
        self.logger = get_logger(logger_name)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        request = {
            'request_id': uuid.uuid4().hex[:12],
            'method': scope['method'],
            'path': scope['path'],
            'client_ip': scope['client'][0] if scope.get('client') else 'unknown',
        }

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                self.logger.info(
                    f"{scope['method']} {scope['path']} {message.get('status', 0)}",
                    extra={**request, 'status_code': message.get('status', 0), 'duration_ms': elapsed_ms()},
                )
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            self.logger.error(
                f"{scope['method']} {scope['path']} failed",
                extra={**request, 'duration_ms': elapsed_ms(), 'exception_type': type(exc).__name__},
            )
            raise
