"""Redacting, size-bounded structured request logging."""

from json_secure_logger.models import InvocationContext
from json_secure_logger.redaction import REDACTION_RULES, redact, serialize, truncate_tokens
from json_secure_logger.services import RequestLogger, get_request_logger

__all__ = [
    "REDACTION_RULES",
    "InvocationContext",
    "RequestLogger",
    "get_request_logger",
    "redact",
    "serialize",
    "truncate_tokens",
]
