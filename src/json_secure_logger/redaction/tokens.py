"""JWT-shape detection and signature truncation.

Only the shape of a token is checked, never its validity. Header and
payload segments are kept because they are useful when debugging; the
signature is replaced with ``<sig>``.
"""

import re

JWT_PATTERN = re.compile(
    r"(eyJ[a-zA-Z0-9_-]{5,}\.eyJ[a-zA-Z0-9_-]{5,})\.[a-zA-Z0-9_-]*",
    re.IGNORECASE,
)
SIGNATURE_PLACEHOLDER = "<sig>"


def contains_jwt(text: str) -> bool:
    """Return True if ``text`` embeds a JWT-shaped token anywhere."""
    return JWT_PATTERN.search(text) is not None


def truncate_tokens(text: str) -> str:
    """Drop the signature segment of every JWT-shaped token in ``text``.

    Args:
        text: Serialized log payload.

    Returns:
        The same text with each ``header.payload.signature`` rewritten to
        ``header.payload.<sig>``.
    """
    return JWT_PATTERN.sub(rf"\1.{SIGNATURE_PLACEHOLDER}", text)
