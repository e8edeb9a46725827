"""Default collaborators for the emitter: ids, clock, runtime version, sink."""

import platform
import secrets
import sys
from datetime import datetime, timezone

# 16 random bytes -> 22 URL-safe characters
INVOCATION_ID_BYTES = 16


def generate_invocation_id() -> str:
    """Return a short, URL-safe, collision-resistant identifier."""
    return secrets.token_urlsafe(INVOCATION_ID_BYTES)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Naive datetimes are taken to already be in UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def runtime_identifier() -> str:
    """Version string of the running interpreter, e.g. ``CPython 3.12.4``."""
    return f"{platform.python_implementation()} {platform.python_version()}"


def stdout_sink(line: str) -> None:
    """Write one line to stdout.

    Lone surrogates cannot be encoded; they are written as ``\\uXXXX``
    escapes, which keeps a JSON line valid.
    """
    line = line.encode("utf-8", errors="backslashreplace").decode("utf-8")
    sys.stdout.write(line + "\n")
    sys.stdout.flush()
