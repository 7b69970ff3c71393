"""Logging configuration utilities."""

import logging
import logging.config
import json
import os
from datetime import datetime

from src.core.config import settings

# Extra fields yang ikut ditulis ke JSON log jika di-pass via `extra=`
CONTEXT_FIELDS = ("kelas_id", "pengajuan_id", "user_id", "status")


class JSONFormatter(logging.Formatter):
    """JSON formatter untuk structured logging."""

    def __init__(self, service_name):
        super().__init__()
        self.service_name = service_name

    def format(self, record):
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry['exc_info'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def _console_only_logging(reason: str) -> None:
    print(f"{reason}. Falling back to console-only logging")
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def _log_directory_writable(log_directory: str) -> bool:
    try:
        os.makedirs(log_directory, exist_ok=True)
        probe = os.path.join(log_directory, '.write_probe')
        with open(probe, 'w') as f:
            f.write('ok')
        os.remove(probe)
        return True
    except (OSError, PermissionError):
        return False


def setup_logging():
    """Setup application logging: console + rotating JSON file."""
    log_directory = os.path.abspath(settings.LOG_DIRECTORY)
    if not _log_directory_writable(log_directory):
        _console_only_logging(f"Log directory {log_directory} is not writable")
        return

    log_file_path = os.path.join(log_directory, f'{settings.SERVICE_NAME}.log')
    level = 'DEBUG' if settings.DEBUG else 'INFO'

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {
                '()': 'src.utils.logging.JSONFormatter',
                'service_name': settings.SERVICE_NAME,
            },
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': 'simple',
                'stream': 'ext://sys.stdout',
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'INFO',
                'formatter': 'json',
                'filename': log_file_path,
                'maxBytes': settings.LOG_MAX_BYTES,
                'backupCount': settings.LOG_BACKUP_COUNT,
                'encoding': 'utf-8',
            },
        },
        'loggers': {
            '': {  # Root logger
                'level': level,
                'handlers': ['console', 'file'],
                'propagate': False,
            },
            'uvicorn.access': {
                'level': 'INFO',
                'handlers': ['console'],
                'propagate': False,
            },
            'sqlalchemy.engine': {
                'level': 'INFO' if settings.SQL_ECHO else 'WARNING',
                'handlers': ['console'],
                'propagate': False,
            },
        },
    }

    try:
        logging.config.dictConfig(LOGGING_CONFIG)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        _console_only_logging(f"Error setting up logging configuration: {e}")
