"""Field-name and value-pattern redaction rules.

Each rule is a predicate on ``(key, value)`` paired with a transform. The
serializer evaluates ``REDACTION_RULES`` in order at every key/value pair
and applies the first rule that matches; whatever the transform returns is
then walked in turn, so nested structures are still subject to every rule.

``key`` is ``None`` for the root value and the stringified index for array
items.
"""

import json
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from json_secure_logger.redaction.tokens import contains_jwt


class _Omit:
    """Marker returned by a transform to drop the field from the output."""

    def __repr__(self) -> str:
        return "OMIT"


OMIT = _Omit()

AUTHORIZATION_PLACEHOLDER = "{AUTHORIZATION}"
SECRET_PLACEHOLDER = "{SECRET}"
IDENTITY_PLACEHOLDER = "{-}"
HTML_PLACEHOLDER = "<HTML DOCUMENT></HTML>"

NOISY_HEADERS = frozenset(
    {
        "accept-language",
        "content-length",
        "content-type",
        "x-forwarded-for",
        "x-forwarded-port",
        "x-forwarded-proto",
        "accept",
        "accept-encoding",
    }
)

_AUTHORIZATION_KEY = re.compile(r"authorization(?!result)", re.IGNORECASE)
_BEARER_VALUE = re.compile(r"^bearer", re.IGNORECASE)
_SECRET_KEY = re.compile(r"secret|signature", re.IGNORECASE)

Predicate = Callable[[str | None, Any], bool]
Transform = Callable[[str | None, Any], Any]


@dataclass(frozen=True)
class RedactionRule:
    """One ordered entry of the redaction table.

    Attributes:
        name: Short identifier for the rule.
        matches: Predicate deciding whether the rule applies.
        transform: Produces the replacement value, or ``OMIT``.
    """

    name: str
    matches: Predicate
    transform: Transform

    def apply(self, key: str | None, value: Any) -> Any:
        return self.transform(key, value)


def is_truthy(value: Any) -> bool:
    """Loose truthiness: only None, False, zero, NaN and "" are falsy.

    Containers count as truthy even when empty.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    return True


def _replace_with(placeholder: str) -> Transform:
    return lambda key, value: placeholder


# Rule 1: JSON-encoded request/response bodies
def _is_string_body(key: str | None, value: Any) -> bool:
    return key == "body" and isinstance(value, str)


def _parse_body(key: str | None, value: str) -> Any:
    try:
        return json.loads(value)
    except (ValueError, RecursionError):
        return value


# Rule 2: authorization values that are not JWTs
def _is_opaque_authorization(key: str | None, value: Any) -> bool:
    if not isinstance(value, str) or not value or not key:
        return False
    if not (_AUTHORIZATION_KEY.search(key) or _BEARER_VALUE.search(value)):
        return False
    return not contains_jwt(value)


# Rule 3
def _is_secret(key: str | None, value: Any) -> bool:
    return bool(key) and _SECRET_KEY.search(key) is not None and is_truthy(value)


# Rule 4: Cognito identity blocks
def _is_cognito_identity(key: str | None, value: Any) -> bool:
    return (
        bool(key)
        and "identity" in key
        and isinstance(value, Mapping)
        and "cognitoIdentityPoolId" in value
    )


# Rule 5
def _is_header_map(key: str | None, value: Any) -> bool:
    return key == "headers" and isinstance(value, Mapping)


def _drop_noisy_headers(key: str | None, value: Mapping) -> dict:
    return {
        name: header
        for name, header in value.items()
        if str(name).lower() not in NOISY_HEADERS
    }


# Rule 6
def _is_multi_value_headers(key: str | None, value: Any) -> bool:
    return key == "multiValueHeaders"


# Rule 7
def _is_html_document(key: str | None, value: Any) -> bool:
    return isinstance(value, str) and value.startswith("<!DOCTYPE html>")


REDACTION_RULES: tuple[RedactionRule, ...] = (
    RedactionRule("parse_body", _is_string_body, _parse_body),
    RedactionRule(
        "authorization", _is_opaque_authorization, _replace_with(AUTHORIZATION_PLACEHOLDER)
    ),
    RedactionRule("secret", _is_secret, _replace_with(SECRET_PLACEHOLDER)),
    RedactionRule("cognito_identity", _is_cognito_identity, _replace_with(IDENTITY_PLACEHOLDER)),
    RedactionRule("headers", _is_header_map, _drop_noisy_headers),
    RedactionRule("multi_value_headers", _is_multi_value_headers, lambda key, value: OMIT),
    RedactionRule("html_document", _is_html_document, _replace_with(HTML_PLACEHOLDER)),
)


def apply_rules(
    key: str | None,
    value: Any,
    rules: tuple[RedactionRule, ...] = REDACTION_RULES,
) -> Any:
    """Apply the first matching rule to one key/value pair.

    Returns the value unchanged when no rule matches.
    """
    for rule in rules:
        if rule.matches(key, value):
            return rule.apply(key, value)
    return value
