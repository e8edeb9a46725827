"""Cycle-safe redacting JSON serializer.

``redact`` walks a value tree depth-first, applying the redaction rules at
every key/value pair before descending. The walk keeps its own stack of
open containers, so nesting depth is bounded by memory rather than by the
interpreter's recursion limit. ``serialize`` renders the redacted tree as
JSON text. Neither raises on odd input: values JSON has no type for are
rendered in a printable form instead.
"""

import json
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from json_secure_logger.redaction.rules import OMIT, REDACTION_RULES, RedactionRule, apply_rules

CIRCULAR_PLACEHOLDER = "[Circular]"


@dataclass
class _Frame:
    """A container whose children are still being walked."""

    marker: int
    result: dict[str, Any] | list[Any]
    children: Iterator[tuple[str, Any]]

    def add(self, key: str, value: Any) -> None:
        if isinstance(self.result, dict):
            if value is not OMIT:
                self.result[key] = value
        else:
            self.result.append(None if value is OMIT else value)


class _RedactingWalker:
    """Depth-first traversal with an ancestor set keyed by ``id()``.

    A container's id is on the ancestor set exactly while its frame is on
    the stack.
    """

    def __init__(self, rules: tuple[RedactionRule, ...]):
        self.rules = rules
        self._ancestors: set[int] = set()

    def walk(self, value: Any) -> Any:
        root = apply_rules(None, value, self.rules)
        if root is OMIT:
            return OMIT
        result, frame = self._open(root)
        if frame is None:
            return result

        stack = [frame]
        try:
            while stack:
                frame = stack[-1]
                entry = next(frame.children, None)
                if entry is None:
                    stack.pop()
                    self._ancestors.discard(frame.marker)
                    continue

                key, child = entry
                child = apply_rules(key, child, self.rules)
                if child is OMIT:
                    frame.add(key, OMIT)
                    continue
                converted, child_frame = self._open(child)
                frame.add(key, converted)
                if child_frame is not None:
                    stack.append(child_frame)
        finally:
            for open_frame in stack:
                self._ancestors.discard(open_frame.marker)
        return result

    def _open(self, value: Any) -> tuple[Any, _Frame | None]:
        """Convert a scalar, or start a frame for a container."""
        if isinstance(value, Mapping):
            children = ((_to_json_key(key), child) for key, child in value.items())
            result: dict[str, Any] | list[Any] = {}
        elif isinstance(value, (list, tuple, set, frozenset)):
            children = ((str(index), child) for index, child in enumerate(value))
            result = []
        else:
            return _to_json_scalar(value), None

        marker = id(value)
        if marker in self._ancestors:
            return CIRCULAR_PLACEHOLDER, None
        self._ancestors.add(marker)
        return result, _Frame(marker, result, children)


def _to_json_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, bool):
        return json.dumps(key)
    return str(key)


def _to_json_scalar(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        # NaN and Infinity have no JSON representation
        return value if math.isfinite(value) else None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def redact(value: Any, rules: tuple[RedactionRule, ...] = REDACTION_RULES) -> Any:
    """Return a redacted, JSON-native copy of ``value``.

    Args:
        value: Arbitrary value tree (mappings, sequences, scalars).
        rules: Ordered redaction rules; the default table unless overridden.

    Returns:
        A new tree built from dicts, lists and JSON scalars. An omitted root
        becomes ``None``.
    """
    result = _RedactingWalker(rules).walk(value)
    return None if result is OMIT else result


def serialize(
    value: Any,
    indent: int | None = None,
    rules: tuple[RedactionRule, ...] = REDACTION_RULES,
) -> str:
    """Redact ``value`` and render it as JSON text.

    Args:
        value: Arbitrary value tree.
        indent: Pretty-print indentation; compact output when None.
        rules: Ordered redaction rules.

    Returns:
        JSON text. Compact output uses no whitespace between tokens.
    """
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        redact(value, rules), indent=indent, separators=separators, ensure_ascii=False
    )


def _utf16_units(char: str) -> int:
    # Astral characters take a surrogate pair; lone surrogates count as one unit
    return 2 if ord(char) > 0xFFFF else 1


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units, the unit log sinks bill by."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


def utf16_slice(text: str, limit: int) -> str:
    """First ``limit`` UTF-16 code units of ``text``.

    An astral character split by the limit is dropped rather than left half.
    """
    units = 0
    for index, char in enumerate(text):
        units += _utf16_units(char)
        if units > limit:
            return text[:index]
    return text
