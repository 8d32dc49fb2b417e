"""
Security event logging

Security events go to a dedicated "security" logger, one JSON object per
line, so they can be shipped separately from application logs.
"""

import json
import logging
import re
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

security_logger = logging.getLogger("security")

SUSPICIOUS_REQUEST = "SUSPICIOUS_REQUEST"
UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
PRIVILEGE_ESCALATION_ATTEMPT = "PRIVILEGE_ESCALATION_ATTEMPT"

SUSPICIOUS_PATTERNS = [
    # SQL injection
    re.compile(r"('|%27)\s*(or|and)\s+\S", re.IGNORECASE),
    re.compile(r"('|%27)\s*(;|--|#|%23)"),
    re.compile(r"\bunion\b.+\bselect\b", re.IGNORECASE),
    re.compile(r";\s*(drop|delete|insert|update|alter|truncate)\s", re.IGNORECASE),
    # Script injection
    re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE),
    # Path traversal
    re.compile(r"\.\.[/\\]"),
    # Command injection
    re.compile(
        r"(;|&&|\|\|?)\s*(cat|ls|rm|curl|wget|sh|bash|nc|python|perl|chmod)\b", re.IGNORECASE
    ),
    re.compile(r"`[^`]*`"),
    re.compile(r"\$\([^)]*\)"),
]

_enabled = True


class SecurityEventFormatter(logging.Formatter):
    """Render the record message as-is; the message already is a JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def configure_security_logging(enabled: bool = True, log_file: Optional[str] = None) -> None:
    global _enabled
    _enabled = enabled
    security_logger.setLevel(logging.INFO)

    if log_file and not any(
        isinstance(handler, RotatingFileHandler) for handler in security_logger.handlers
    ):
        handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        handler.setFormatter(SecurityEventFormatter())
        security_logger.addHandler(handler)


def log_security_event(event: str, **details: Any) -> None:
    if not _enabled:
        return
    entry = {"timestamp": datetime.utcnow().isoformat() + "Z", "event": event}
    entry.update(details)
    security_logger.warning(json.dumps(entry, default=str))


def is_suspicious(*values: str) -> bool:
    """True when any value matches an injection or traversal pattern"""
    for value in values:
        if value and any(pattern.search(value) for pattern in SUSPICIOUS_PATTERNS):
            return True
    return False
