"""Command-line interface for json-secure-logger."""

import json
import sys
from typing import TextIO

import click
import structlog

from json_secure_logger.config import Settings, get_settings
from json_secure_logger.core import configure_logging
from json_secure_logger.exceptions import JsonSecureLoggerError
from json_secure_logger.redaction import serialize, truncate_tokens
from json_secure_logger.services import RequestLogger

logger = structlog.get_logger(__name__)


def _load_settings() -> Settings:
    try:
        return get_settings()
    except JsonSecureLoggerError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)


def _parse_meta(values: tuple[str, ...]) -> dict[str, str]:
    metadata = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--meta")
        metadata[key] = value
    return metadata


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug diagnostics")
@click.option("--json-logs/--no-json-logs", default=False, help="JSON diagnostic format")
@click.pass_context
def main(ctx: click.Context, debug: bool, json_logs: bool) -> None:
    """json-secure-logger - redacting, size-bounded structured logging."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["json_logs"] = json_logs
    configure_logging(json_format=json_logs, debug=debug)


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option("--indent", type=click.IntRange(0, 8), default=None, help="Pretty-print indent")
def redact(source: TextIO, indent: int | None) -> None:
    """Redact a JSON document read from SOURCE (default: stdin)."""
    try:
        document = json.load(source)
    except ValueError as e:
        click.echo(f"Invalid JSON input: {e}", err=True)
        sys.exit(1)

    if indent is None:
        indent = _load_settings().indent
    click.echo(truncate_tokens(serialize(document, indent=indent or None)))


@main.command()
@click.argument("message")
@click.option("--level", default=None, help="Level stamped on the message")
@click.option("--json", "as_json", is_flag=True, help="Parse MESSAGE as a JSON object")
@click.option("--meta", multiple=True, help="Invocation metadata as key=value")
@click.option("--track", multiple=True, help="Record a tracking point before logging")
def emit(
    message: str,
    level: str | None,
    as_json: bool,
    meta: tuple[str, ...],
    track: tuple[str, ...],
) -> None:
    """Log MESSAGE through the bounded emitter to stdout."""
    event: str | dict
    if as_json:
        try:
            event = json.loads(message)
        except ValueError as e:
            click.echo(f"Invalid JSON message: {e}", err=True)
            sys.exit(1)
        if not isinstance(event, dict):
            click.echo("JSON message must be an object.", err=True)
            sys.exit(1)
    else:
        event = message

    if level:
        event = {"title": event} if isinstance(event, str) else event
        event["level"] = level

    settings = _load_settings()
    try:
        request_logger = RequestLogger(settings, sink=click.echo)
        request_logger.start_invocation(_parse_meta(meta))
        for label in track:
            request_logger.track_point(label)
    except JsonSecureLoggerError as e:
        logger.error("emit_failed", error=e.message)
        sys.exit(1)

    request_logger.log(event)


if __name__ == "__main__":
    main()
