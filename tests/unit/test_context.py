"""Tests for the invocation context model."""

from datetime import datetime, timedelta, timezone

import pytest

from json_secure_logger.core import isoformat_utc
from json_secure_logger.exceptions import InvalidMetadataError, InvocationNotStartedError
from json_secure_logger.models import InvocationContext

STARTED_AT = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


class TestStart:
    """Test InvocationContext.start()."""

    def test_defaults(self) -> None:
        context = InvocationContext.start("abc", STARTED_AT)

        assert context.invocation_id == "abc"
        assert context.start_time == STARTED_AT
        assert context.tracking == [{"Start": "2024-05-01T12:00:00.123Z"}]
        assert context.fields == {}
        assert context.started

    def test_metadata_fields(self) -> None:
        context = InvocationContext.start("abc", STARTED_AT, {"user": "a", "route": "/x"})
        assert context.as_metadata() == {
            "tracking": [{"Start": "2024-05-01T12:00:00.123Z"}],
            "user": "a",
            "route": "/x",
        }

    def test_supplied_tracking_replaces_default(self) -> None:
        context = InvocationContext.start("abc", STARTED_AT, {"tracking": [{"queued": 3}]})
        assert context.tracking == [{"queued": 3}]
        assert list(context.as_metadata()) == ["tracking"]

    def test_supplied_tracking_is_copied(self) -> None:
        supplied = [{"queued": 3}]
        context = InvocationContext.start("abc", STARTED_AT, {"tracking": supplied})
        context.track("next", STARTED_AT)
        assert supplied == [{"queued": 3}]

    @pytest.mark.parametrize("tracking", ["not-a-list", 3, {"a": 1}])
    def test_invalid_tracking(self, tracking) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            InvocationContext.start("abc", STARTED_AT, {"tracking": tracking})
        assert exc_info.value.field == "tracking"

    def test_non_mapping_metadata(self) -> None:
        with pytest.raises(InvalidMetadataError, match="mapping"):
            InvocationContext.start("abc", STARTED_AT, ["user", "a"])  # type: ignore[arg-type]


class TestTrack:
    """Test tracking points."""

    def test_points_keep_call_order(self) -> None:
        context = InvocationContext.start("abc", STARTED_AT)
        context.track("b", STARTED_AT + timedelta(milliseconds=20))
        context.track("a", STARTED_AT + timedelta(milliseconds=10))

        assert context.tracking[1:] == [{"b": 20}, {"a": 10}]

    def test_elapsed_is_whole_milliseconds(self) -> None:
        context = InvocationContext.start("abc", STARTED_AT)
        assert context.track("x", STARTED_AT + timedelta(microseconds=1999)) == 1

    def test_not_started(self) -> None:
        context = InvocationContext()
        assert not context.started
        with pytest.raises(InvocationNotStartedError):
            context.track("x", STARTED_AT)


class TestIsoFormat:
    """Test the Start timestamp format."""

    def test_utc_with_z_suffix(self) -> None:
        assert isoformat_utc(datetime(2024, 1, 1, tzinfo=timezone.utc)) == (
            "2024-01-01T00:00:00.000Z"
        )

    def test_other_offsets_are_converted(self) -> None:
        moment = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert isoformat_utc(moment) == "2024-01-01T00:00:00.000Z"

    def test_naive_is_treated_as_utc(self) -> None:
        assert isoformat_utc(datetime(2024, 1, 1, 8, 30)) == "2024-01-01T08:30:00.000Z"
