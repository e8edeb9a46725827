"""Invocation context: correlation id and elapsed-time tracking points."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from json_secure_logger.core.runtime import isoformat_utc
from json_secure_logger.exceptions import InvalidMetadataError, InvocationNotStartedError

START_LABEL = "Start"
TRACKING_KEY = "tracking"


@dataclass
class InvocationContext:
    """State for one logical unit of work.

    Attributes:
        invocation_id: Opaque id shared by every log line of the invocation.
        start_time: When the invocation started; None until started.
        tracking: Ordered ``{label: value}`` points, first one ``{"Start": iso}``.
        fields: Caller-supplied metadata merged into every payload.
    """

    invocation_id: str | None = None
    start_time: datetime | None = None
    tracking: list[dict[str, Any]] = field(default_factory=list)
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def start(
        cls,
        invocation_id: str,
        start_time: datetime,
        metadata: Mapping[str, Any] | None = None,
    ) -> "InvocationContext":
        """Create a fresh context.

        A ``tracking`` entry in ``metadata`` replaces the default tracking
        list instead of being merged with it.

        Raises:
            InvalidMetadataError: If metadata is not a mapping, or its
                ``tracking`` entry is not a sequence.
        """
        if metadata is None:
            metadata = {}
        if not isinstance(metadata, Mapping):
            raise InvalidMetadataError(
                f"Invocation metadata must be a mapping, got {type(metadata).__name__}"
            )

        fields = {str(key): value for key, value in metadata.items()}
        tracking: list[dict[str, Any]] = [{START_LABEL: isoformat_utc(start_time)}]
        if TRACKING_KEY in fields:
            supplied = fields.pop(TRACKING_KEY)
            if isinstance(supplied, (str, bytes)) or not isinstance(supplied, Sequence):
                raise InvalidMetadataError(
                    "Invocation metadata 'tracking' must be a list", field=TRACKING_KEY
                )
            tracking = list(supplied)

        return cls(
            invocation_id=invocation_id,
            start_time=start_time,
            tracking=tracking,
            fields=fields,
        )

    @property
    def started(self) -> bool:
        return self.start_time is not None

    def track(self, label: str, now: datetime) -> int:
        """Append ``{label: elapsed_ms}`` and return the elapsed milliseconds."""
        if self.start_time is None:
            raise InvocationNotStartedError()
        elapsed = (now - self.start_time) // timedelta(milliseconds=1)
        self.tracking.append({label: elapsed})
        return elapsed

    def as_metadata(self) -> dict[str, Any]:
        return {TRACKING_KEY: self.tracking, **self.fields}
