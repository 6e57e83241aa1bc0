"""Command-line interface for message-sender."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click

from message_sender.core.config import ConfigurationError, YamlSettingsSource
from message_sender.core.errors import MessageSenderError
from message_sender.core.runtime import Runtime, build_runtime
from message_sender.plugins import describe_config_fields
from message_sender.storage import LoggingAuditLog, YamlSenderConfigStore
from message_sender.types import EventClient, EventMessage
from message_sender.utils.logging import configure_logging
from message_sender.utils.sanitization import sanitize_url

DEFAULT_SETTINGS_PATH = Path("config/message-sender.yaml")
DEFAULT_STORE_PATH = Path("config/senders")


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str,
) -> str:
    """Normalize the log level to uppercase.

    Raises:
        click.BadParameter: If the level is unknown
    """
    normalized_value = value.upper().strip()
    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
    if normalized_value not in valid_levels:
        raise click.BadParameter(
            f'Invalid log level "{value}". Valid options: {", ".join(sorted(valid_levels))}'
        )
    return normalized_value


def parse_client(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: tuple[str, ...],
) -> tuple[EventClient, ...]:
    """Parse ``NAME:UUID`` client options; the name part may be empty."""
    clients: list[EventClient] = []
    for raw in value:
        name, separator, uuid = raw.rpartition(":")
        if not separator or not uuid:
            raise click.BadParameter(f'Client must be given as NAME:UUID, got "{raw}"')
        clients.append(EventClient(name=name, uuid=uuid))
    return tuple(clients)


try:
    __version__ = version("message-sender")
except PackageNotFoundError:
    __version__ = "unknown"


@click.group()
@click.option(
    "--settings",
    "-s",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_SETTINGS_PATH,
    show_default=True,
    help="Notification settings file (YAML)",
)
@click.option(
    "--store",
    type=click.Path(path_type=Path, file_okay=False),
    default=DEFAULT_STORE_PATH,
    show_default=True,
    help="Directory holding provider configuration rows",
)
@click.option(
    "--log-level",
    "-l",
    type=str,
    default="INFO",
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR)",
)
@click.version_option(version=__version__, prog_name="message-sender")
@click.pass_context
def cli(ctx: click.Context, settings: Path, store: Path, log_level: str) -> None:
    """message-sender - deliver notifications through the configured provider.

    Examples:

        # List provider kinds and their configuration fields
        message-sender providers

        # Write default provider configuration rows
        message-sender bootstrap

        # Send a text message
        message-sender send-text "Disk usage above 90%" --title "Storage"
    """
    configure_logging(log_level=log_level)
    ctx.obj = build_runtime(
        YamlSettingsSource(settings),
        YamlSenderConfigStore(store),
        audit_log=LoggingAuditLog(),
    )


@cli.command()
@click.pass_obj
def providers(runtime: Runtime) -> None:
    """List known provider kinds and their configuration fields."""
    for identifier in runtime.factory.identifiers():
        metadata = runtime.factory.get_metadata(identifier)
        if metadata is None:
            continue
        click.echo(f"{identifier} ({metadata.name} {metadata.version})")
        if metadata.description:
            click.echo(f"  {metadata.description}")
        for field in describe_config_fields(metadata.config_model):
            required = "required" if field.required else f"default: {field.default or '-'}"
            click.echo(f"  - {field.name}: {field.type} ({required})")


@cli.command()
@click.pass_obj
def bootstrap(runtime: Runtime) -> None:
    """Write default configuration rows for every provider kind."""
    before = {record.name for record in runtime.store.list()}
    runtime.bootstrap.run()
    created = sorted({record.name for record in runtime.store.list()} - before)
    click.echo(f"Created {len(created)} configuration rows" + (f": {', '.join(created)}" if created else ""))


@cli.command("send-text")
@click.argument("message")
@click.option("--title", "-t", default="", help="Message title")
@click.pass_obj
def send_text(runtime: Runtime, message: str, title: str) -> None:
    """Send MESSAGE through the configured provider."""
    runtime.initialize()
    _run(runtime.dispatcher.send_text(message, title))
    click.echo("Message dispatched")


@cli.command("send-event")
@click.option("--event", "-e", "event_name", required=True, help="Event name")
@click.option("--message", "-m", default="", help="Event message")
@click.option("--emoji", default="", help="Emoji prefix")
@click.option(
    "--client",
    "clients",
    multiple=True,
    callback=parse_client,
    help="Affected client as NAME:UUID (repeatable)",
)
@click.pass_obj
def send_event(
    runtime: Runtime,
    event_name: str,
    message: str,
    emoji: str,
    clients: tuple[EventClient, ...],
) -> None:
    """Send a structured event through the configured provider."""
    event = EventMessage(
        event=event_name,
        message=message,
        emoji=emoji,
        time=datetime.now(UTC),
        clients=clients,
    )
    runtime.initialize()
    _run(runtime.dispatcher.send_event(event))
    click.echo("Event dispatched")


def _run(coro: Coroutine[object, object, None]) -> None:
    try:
        asyncio.run(coro)
    except ConfigurationError as exc:
        raise click.ClickException(f"Configuration error:\n{exc}") from exc
    except MessageSenderError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:
        raise click.ClickException(f"Delivery failed: {sanitize_url(str(exc))}") from exc


def main() -> None:
    """Console script entry point."""
    cli()
