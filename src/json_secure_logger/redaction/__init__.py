"""Redaction rules and the redacting serializer.

- REDACTION_RULES: ordered field-name/value-pattern rules
- serialize / redact: cycle-safe tree walk applying the rules
- truncate_tokens: global JWT signature removal on serialized text
"""

from json_secure_logger.redaction.rules import (
    AUTHORIZATION_PLACEHOLDER,
    HTML_PLACEHOLDER,
    IDENTITY_PLACEHOLDER,
    NOISY_HEADERS,
    OMIT,
    REDACTION_RULES,
    SECRET_PLACEHOLDER,
    RedactionRule,
    apply_rules,
    is_truthy,
)
from json_secure_logger.redaction.serializer import (
    CIRCULAR_PLACEHOLDER,
    redact,
    serialize,
    utf16_length,
    utf16_slice,
)
from json_secure_logger.redaction.tokens import JWT_PATTERN, contains_jwt, truncate_tokens

__all__ = [
    "AUTHORIZATION_PLACEHOLDER",
    "CIRCULAR_PLACEHOLDER",
    "HTML_PLACEHOLDER",
    "IDENTITY_PLACEHOLDER",
    "JWT_PATTERN",
    "NOISY_HEADERS",
    "OMIT",
    "REDACTION_RULES",
    "SECRET_PLACEHOLDER",
    "RedactionRule",
    "apply_rules",
    "contains_jwt",
    "is_truthy",
    "redact",
    "serialize",
    "truncate_tokens",
    "utf16_length",
    "utf16_slice",
]
