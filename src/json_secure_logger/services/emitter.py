"""Bounded emitter: redacts, serializes and size-checks log events."""

from collections.abc import Callable, Mapping
from datetime import datetime
from functools import lru_cache
from typing import Any

import structlog

from json_secure_logger.config import Settings, get_settings
from json_secure_logger.core.runtime import (
    generate_invocation_id,
    runtime_identifier,
    stdout_sink,
    utc_now,
)
from json_secure_logger.models import InvocationContext
from json_secure_logger.redaction import (
    is_truthy,
    serialize,
    truncate_tokens,
    utf16_length,
    utf16_slice,
)

logger = structlog.get_logger(__name__)

DEFAULT_LEVEL = "INFO"
DEBUG_LEVEL = "DEBUG"
OVERSIZE_TITLE = "Payload too large"
OVERSIZE_LEVEL = "ERROR"
UNSERIALIZABLE_TITLE = "Payload could not be serialized"

Sink = Callable[[str], None]


class RequestLogger:
    """Structured request logger with redaction and a hard size limit.

    One ``InvocationContext`` is live per instance and ``start_invocation``
    replaces it wholesale. Overlapping invocations need their own
    instances, or must pass their context explicitly to ``log`` and
    ``track_point``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        sink: Sink | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or get_settings()
        self.sink = sink or stdout_sink
        self.id_factory = id_factory or generate_invocation_id
        self.clock = clock or utc_now
        self.log_debug = self.settings.log_debug
        self.context = InvocationContext()

    @property
    def invocation_id(self) -> str | None:
        return self.context.invocation_id

    def start_invocation(self, metadata: Mapping[str, Any] | None = None) -> InvocationContext:
        """Begin a new invocation, discarding the previous context."""
        self.context = InvocationContext.start(self.id_factory(), self.clock(), metadata)
        logger.debug("invocation_started", invocation_id=self.context.invocation_id)
        return self.context

    def track_point(self, label: str, context: InvocationContext | None = None) -> int:
        """Record the milliseconds elapsed since the invocation started.

        Raises:
            InvocationNotStartedError: If no invocation has been started.
        """
        return (context or self.context).track(label, self.clock())

    def log(
        self,
        message: str | Mapping[str, Any] | None,
        context: InvocationContext | None = None,
    ) -> None:
        """Emit one redacted, size-bounded log line to the sink.

        Empty or unsupported messages are reported on the diagnostic
        channel and never reach the sink. Nothing is raised to the caller.
        """
        event = self._normalize(message)
        if event is None:
            return
        if event["level"] == DEBUG_LEVEL and not self.log_debug:
            return

        context = context or self.context
        event["invocationId"] = context.invocation_id
        payload = {
            "message": event,
            "metadata": {self.settings.runtime_key: runtime_identifier(), **context.as_metadata()},
        }

        indent = self.settings.indent or None
        try:
            output = self._render(event, payload, context, indent)
        except (RecursionError, ValueError, MemoryError) as e:
            logger.error(
                "serialization_failed",
                invocation_id=context.invocation_id,
                error=f"{type(e).__name__}: {e}",
            )
            output = serialize(self._unserializable(event, context, e), indent=indent)

        try:
            self.sink(output)
        except Exception as e:
            logger.error("sink_failed", invocation_id=context.invocation_id, error=str(e))

    def _render(
        self,
        event: dict[str, Any],
        payload: dict[str, Any],
        context: InvocationContext,
        indent: int | None,
    ) -> str:
        output = truncate_tokens(serialize(payload, indent=indent))
        length = utf16_length(output)
        if length >= self.settings.max_payload_length:
            logger.warning(
                "payload_too_large",
                invocation_id=context.invocation_id,
                length=length,
                limit=self.settings.max_payload_length,
            )
            output = serialize(self._summarize(event, payload, context), indent=indent)
        return output

    def _normalize(self, message: Any) -> dict[str, Any] | None:
        if message is None or (isinstance(message, str) and message == ""):
            logger.error("empty_message", reason="Empty message string.")
            return None
        if isinstance(message, str):
            event: dict[str, Any] = {"title": message}
        elif isinstance(message, Mapping):
            if not message:
                logger.error("empty_message", reason="Empty message object.")
                return None
            event = {str(key): value for key, value in message.items()}
        else:
            logger.error("unsupported_message", message_type=type(message).__name__)
            return None

        if not is_truthy(event.get("level")):
            event["level"] = DEFAULT_LEVEL
        return event

    def _summarize(
        self,
        event: dict[str, Any],
        payload: dict[str, Any],
        context: InvocationContext,
    ) -> dict[str, Any]:
        original_info: dict[str, Any] = {"level": event["level"]}
        if "title" in event:
            original_info["title"] = event["title"]
        original_info["fields"] = list(event)

        truncated = utf16_slice(
            truncate_tokens(serialize(payload)), self.settings.truncated_payload_length
        )
        return {
            "invocationId": context.invocation_id,
            "message": {
                "title": OVERSIZE_TITLE,
                "level": OVERSIZE_LEVEL,
                "originalInfo": original_info,
                "truncatedPayload": truncated,
            },
        }

    def _unserializable(
        self,
        event: dict[str, Any],
        context: InvocationContext,
        error: BaseException,
    ) -> dict[str, Any]:
        # Only shallow, string-typed values so this cannot fail the same way
        original_info: dict[str, Any] = {"level": str(event["level"])}
        if isinstance(event.get("title"), str):
            original_info["title"] = event["title"]
        original_info["fields"] = list(event)
        return {
            "invocationId": context.invocation_id,
            "message": {
                "title": UNSERIALIZABLE_TITLE,
                "level": OVERSIZE_LEVEL,
                "originalInfo": original_info,
                "error": type(error).__name__,
            },
        }


@lru_cache
def get_request_logger() -> RequestLogger:
    """Process-wide logger built from the cached settings."""
    return RequestLogger()
