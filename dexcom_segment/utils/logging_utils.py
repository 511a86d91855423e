"""
Logging utilities for redacting tokens from logs and emitting JSON records.

Example:
    from dexcom_segment.utils.logging_utils import redact_sensitive_data
    safe = redact_sensitive_data({'Authorization': 'Bearer abc', 'startDate': '2024-06-01T12:00:00'})
    # safe == {'Authorization': '***REDACTED***', 'startDate': '2024-06-01T12:00:00'}
"""

import json
import logging
from datetime import datetime, timezone

SENSITIVE_KEYS = {
    'authorization', 'token', 'secret', 'access_token', 'refresh_token',
    'client_secret', 'password', 'api_key',
}

REDACTED = '***REDACTED***'

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def redact_sensitive_data(obj):
    """
    Recursively redacts sensitive fields in dicts/lists.
    Keys are matched case-insensitively against SENSITIVE_KEYS.
    """
    if isinstance(obj, dict):
        return {
            k: (REDACTED if str(k).lower() in SENSITIVE_KEYS else redact_sensitive_data(v))
            for k, v in obj.items()
        }
    elif isinstance(obj, list):
        return [redact_sensitive_data(i) for i in obj]
    else:
        return obj


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON with standard fields plus any ``extra`` fields.
    """
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in log_record:
                log_record[key] = redact_sensitive_data(value)
        return json.dumps(log_record, default=str)


def setup_json_logging(level=logging.INFO, output='stderr', file_path=None):
    """
    Set up structured JSON logging.
    Args:
        level: Logging level (default: INFO)
        output: 'stderr' or 'file'
        file_path: Path to log file if output is 'file'
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    if output == 'file' and file_path:
        handler = logging.FileHandler(file_path)
    else:
        # stdout belongs to the prompt output
        handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    return logger
