"""
Structured logging for the API process and the Celery worker.

Both processes log to stdout. JSON output is meant for production log
shippers; every record carries the emitting service so API and worker logs
can share one index. Values passed through `extra=` (e.g. application_id)
become top-level JSON fields.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

API_SERVICE = "recruiting-api"
WORKER_SERVICE = "recruiting-worker"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = {
    "urllib3": logging.WARNING,
    "boto3": logging.WARNING,
    "botocore": logging.WARNING,
    "s3transfer": logging.WARNING,
    "httpx": logging.WARNING,
    "multipart": logging.WARNING,
    "celery": logging.INFO,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service, level and source location to every record."""

    def __init__(self, *args, service: str = API_SERVICE, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace('+00:00', 'Z')
        log_record['service'] = self.service
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        if record.levelno >= logging.WARNING:
            log_record['location'] = f"{record.module}.{record.funcName}:{record.lineno}"


def setup_logging(log_level: str = "INFO", json_logs: bool = True, service: str = API_SERVICE) -> None:
    """
    Replace the root handlers with a single stdout handler.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ...)
        json_logs: JSON output (production) or a readable line format (development)
        service: Name stamped on every JSON record
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s', service=service)
    else:
        formatter = logging.Formatter(
            f'%(asctime)s - {service} - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
