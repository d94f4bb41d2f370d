"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Logging format:
{
    "timestamp": "2026-10-16T12:00:00.000Z",
    "level": "INFO",
    "logger": "slugshortener.services.registration",
    "message": "Registered short link.",
    "event": "SHORT_LINK_CREATED",
    "slug": "promo",
    "caller": "203.0.113.7",
    "ttl": 86400,
    "custom": false
}

Audit fields, always emitted right after `message` when present:
    event       – Stable event name (e.g. SHORT_LINK_CREATED, QUOTA_EXCEEDED, SLUG_COLLISION).
    slug        – Short link slug the record is about.
    caller      – Caller network address charged against the link generation quota.

Other `extra` fields follow in the order they were passed:
    ttl, custom                 – Lifetime in seconds and whether the slug was caller-chosen.
    attempt, attempts, id_space – Random slug generation progress.
    retry_after, reason         – Quota refusals and fail-open decisions.
    lambdaName, build, age      – AppConfig loading and caching.
    agentUrl                    – Local AppConfig agent endpoint under SAM.
"""


import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from slugshortener.utils.constants import LOG_LEVEL_ENV


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras and exception tracebacks"""

    AUDIT_FIELDS = ('event', 'slug', 'caller')

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for key in self.AUDIT_FIELDS:
            if key in record.__dict__:
                log[key] = record.__dict__[key]

        # Attach remaining `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and key not in log:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
