"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
import structlog

from json_secure_logger.config import Settings, get_settings

ACCESS_TOKEN_HEADER = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
ACCESS_TOKEN_PAYLOAD = "eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkphbmUifQ"
ACCESS_TOKEN_SIGNATURE = "SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"


class FakeClock:
    """Deterministic clock advanced explicitly by tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += timedelta(milliseconds=milliseconds)


class SequentialIds:
    """Id factory returning inv-1, inv-2, ..."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"inv-{self.count}"


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch):
    """Keep env-driven settings and structlog config from leaking between tests."""
    for name in (
        "SECURE_LOGGER_MAX_PAYLOAD_LENGTH",
        "SECURE_LOGGER_TRUNCATED_PAYLOAD_LENGTH",
        "SECURE_LOGGER_INDENT",
        "SECURE_LOGGER_LOG_DEBUG",
        "SECURE_LOGGER_RUNTIME_KEY",
        "SECURE_LOGGER_LOG_FORMAT",
        "SECURE_LOGGER_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def sink() -> list[str]:
    """Collects every line handed to the sink."""
    return []


@pytest.fixture
def request_logger(settings, sink, ids, clock):
    from json_secure_logger.services import RequestLogger

    return RequestLogger(settings, sink=sink.append, id_factory=ids, clock=clock)


@pytest.fixture
def token_parts() -> tuple[str, str, str]:
    """Header, payload and signature segments of a JWT-shaped token."""
    return ACCESS_TOKEN_HEADER, ACCESS_TOKEN_PAYLOAD, ACCESS_TOKEN_SIGNATURE


@pytest.fixture
def access_token(token_parts) -> str:
    """A JWT-shaped access token."""
    return ".".join(token_parts)


@pytest.fixture
def api_gateway_event(access_token):
    """An API Gateway proxy request as delivered to a Lambda handler."""
    return {
        "resource": "/orders",
        "httpMethod": "POST",
        "headers": {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
            "Host": "api.example.com",
            "X-Forwarded-For": "203.0.113.7",
            "X-Forwarded-Port": "443",
            "X-Forwarded-Proto": "https",
        },
        "multiValueHeaders": {"Accept": ["application/json"]},
        "queryStringParameters": {"token": access_token},
        "requestContext": {
            "identity": {
                "cognitoIdentityPoolId": "us-east-1:pool",
                "sourceIp": "203.0.113.7",
            },
        },
        "body": '{"item": "book", "quantity": 2, "clientSecret": "s3cr3t"}',
    }
