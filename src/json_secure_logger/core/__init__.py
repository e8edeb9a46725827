from json_secure_logger.core.logging import configure_logging
from json_secure_logger.core.runtime import (
    generate_invocation_id,
    isoformat_utc,
    runtime_identifier,
    stdout_sink,
    utc_now,
)

__all__ = [
    "configure_logging",
    "generate_invocation_id",
    "isoformat_utc",
    "runtime_identifier",
    "stdout_sink",
    "utc_now",
]
