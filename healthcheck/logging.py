import contextvars
import json
import logging
import re
from datetime import datetime, timezone

from healthcheck.settings import get_settings

check_name_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    'check_name',
    default=None
)

_SENSITIVE_PATTERNS = [
    # Passwords, keys and tokens in key=value or key: value form
    (r'(["\']?(?:api[_-]?)?(?:key|token|secret|password|passwd|pwd)["\']?\s*[:=]\s*["\']?)([^"\'\s,}]+)(["\']?)',
     r'\1***REDACTED***\3'),
    # MongoDB URLs with credentials
    (r'(mongodb(?:\+srv)?://[^:/@\s]+:)([^@\s]+)(@)', r'\1***MONGODB_REDACTED***\3'),
    (r'(mongo://[^:/@\s]+:)([^@\s]+)(@)', r'\1***MONGODB_REDACTED***\3'),
    # Generic URLs with credentials
    (r'(https?://[^:/@\s]+:)([^@\s]+)(@)', r'\1***URL_CREDS_REDACTED***\3'),
]


class CheckContextFilter(logging.Filter):
    """Stamps records with the name of the health check currently running."""

    def filter(self, record: logging.LogRecord) -> bool:
        check_name = check_name_context.get()
        if check_name:
            record.check_name = check_name
        return True


class JSONFormatter(logging.Formatter):
    def _sanitize_sensitive_data(self, data: str) -> str:
        """Mask credentials that may appear in connection targets or driver errors."""
        for pattern, replacement in _SENSITIVE_PATTERNS:
            data = re.sub(pattern, replacement, data, flags=re.IGNORECASE)
        return data

    def format(self, record: logging.LogRecord) -> str:
        message = self._sanitize_sensitive_data(record.getMessage())

        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }

        if hasattr(record, 'check_name'):
            log_data['check_name'] = record.check_name

        if record.exc_info:
            exc_text = self.formatException(record.exc_info)
            log_data['exc_info'] = self._sanitize_sensitive_data(exc_text)

        if record.stack_info:
            stack_text = self.formatStack(record.stack_info)
            log_data['stack_info'] = self._sanitize_sensitive_data(stack_text)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logger(level: str | None = None) -> logging.Logger:
    logger = logging.getLogger("healthcheck")
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(JSONFormatter())
    console_handler.addFilter(CheckContextFilter())

    logger.addHandler(console_handler)

    log_level_name = (level or get_settings().LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, log_level_name, logging.INFO))

    return logger


logger = setup_logger()
