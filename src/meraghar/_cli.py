"""Command-line front end (Typer-based).

The CLI is a thin presentation layer over
:class:`~meraghar._controller.DeviceController`: it loads settings,
hands host and port to the controller on every call, and renders
outcomes.  It never writes device state itself.

Commands::

    meraghar toggle [--assume-on] [--json]
    meraghar status [--json]
    meraghar shell
    meraghar config show
    meraghar config set [--host H] [--port P] [--timeout S]
                        [--auto-connect on|off] [--notifications on|off]

Global options (before the command): ``--version``, ``--env-file``,
``--config``, ``--log-level``, ``--log-format``, ``--dry-run``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, get_args

import typer
from pydantic import ValidationError

from meraghar import __version__
from meraghar._clock import ClockPort
from meraghar._controller import DeviceController
from meraghar._device import DeviceSnapshot
from meraghar._errors import SettingsStoreError
from meraghar._http import HttpPort, HttpxClient, NullHttpClient
from meraghar._logging import configure_logging
from meraghar._outcomes import (
    Busy,
    ConfigurationError,
    NetworkError,
    Outcome,
    Reachable,
    Success,
    UnexpectedStatus,
    Unreachable,
)
from meraghar._settings import DeviceSettings, LoggingSettings, Settings
from meraghar._store import DEFAULT_STORE_PATH, SettingsStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_DEVICE_ERROR = 2
EXIT_RUNTIME_ERROR = 3

# ---------------------------------------------------------------------------
# Allowed values (extracted from LoggingSettings Literal types)
# ---------------------------------------------------------------------------

_VALID_LOG_LEVELS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["level"].annotation,
)
_VALID_LOG_FORMATS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["format"].annotation,
)

SERVICE_NAME = "meraghar"


class Switch(StrEnum):
    """On/off value for boolean settings on the command line."""

    ON = "on"
    OFF = "off"


@dataclass
class _CliState:
    """Per-invocation objects shared by all commands via ``ctx.obj``."""

    settings: Settings
    store: SettingsStore
    http: HttpPort
    clock: ClockPort | None

    def device_settings(self) -> DeviceSettings:
        """Load the effective device settings, exiting on a corrupt store."""
        try:
            return self.store.load(self.settings.device)
        except SettingsStoreError as exc:
            typer.echo(f"Configuration error: {exc}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def describe(outcome: Outcome, *, name: str = "Device") -> str:
    """Return a one-line human description of *outcome*."""
    match outcome:
        case Success(is_on=is_on):
            return f"{name} is now {'ON' if is_on else 'OFF'}"
        case Busy():
            return f"{name} is busy: a command is already in flight"
        case ConfigurationError(detail=detail):
            return f"Configuration error: {detail}"
        case NetworkError(detail=detail):
            return f"Network error: {detail}"
        case UnexpectedStatus(code=code):
            return f"Unexpected status: HTTP {code}"
        case Reachable(status_code=code, latency_s=latency):
            return f"{name} is reachable (HTTP {code}, {latency * 1000:.0f} ms)"
        case Unreachable(detail=detail):
            return f"{name} is unreachable: {detail}"
    return repr(outcome)


def exit_code_for(outcome: Outcome) -> int:
    """Map an outcome to the process exit code."""
    if outcome.ok:
        return EXIT_OK
    if isinstance(outcome, ConfigurationError):
        return EXIT_CONFIG_ERROR
    return EXIT_DEVICE_ERROR


def _render(outcome: Outcome, *, name: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(outcome.to_dict()))
    else:
        typer.echo(describe(outcome, name=name))


def _run[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro* to completion, mapping crashes to ``EXIT_RUNTIME_ERROR``."""
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        raise typer.Exit(EXIT_RUNTIME_ERROR) from None
    except Exception as exc:
        logger.error("Runtime error: %s", exc)
        raise typer.Exit(EXIT_RUNTIME_ERROR) from exc


# ---------------------------------------------------------------------------
# Interactive session
# ---------------------------------------------------------------------------

_SHELL_HELP = "Commands: t = toggle, s = status, h = help, q = quit"


async def run_shell(
    state: _CliState,
    *,
    read_line: Callable[[], str] | None = None,
) -> None:
    """Drive one controller from line-based input until ``q`` or EOF.

    Toggles run as background tasks, so a second ``t`` typed before the
    device answers is reported as busy.  Settings are reloaded before
    every command.
    """
    reader = read_line if read_line is not None else sys.stdin.readline
    device_settings = state.device_settings()
    controller = DeviceController.from_settings(
        device_settings,
        http=state.http,
        clock=state.clock,
    )
    name = device_settings.name

    def show_state(snapshot: DeviceSnapshot) -> None:
        if state.device_settings().notifications_enabled:
            typer.echo(f"[{snapshot.name}] {snapshot.label}")

    def show_outcome(outcome: Outcome) -> None:
        typer.echo(describe(outcome, name=name))

    controller.on_change(show_state)
    controller.on_outcome(show_outcome)

    typer.echo(f"{name}: {controller.snapshot.label}")
    typer.echo(_SHELL_HELP)
    if device_settings.auto_connect:
        await controller.query_status(device_settings.host, device_settings.port)

    tasks: set[asyncio.Task[Any]] = set()
    try:
        while True:
            line = await asyncio.to_thread(reader)
            if not line:
                break
            command = line.strip().lower()
            if not command:
                continue
            current = state.device_settings()
            if command in {"q", "quit", "exit"}:
                break
            if command in {"t", "toggle"}:
                task = asyncio.create_task(controller.toggle(current.host, current.port))
            elif command in {"s", "status"}:
                task = asyncio.create_task(
                    controller.query_status(current.host, current.port),
                )
            elif command in {"h", "help", "?"}:
                typer.echo(_SHELL_HELP)
                continue
            else:
                typer.echo(f"Unknown command {command!r}. {_SHELL_HELP}")
                continue
            tasks.add(task)
            task.add_done_callback(tasks.discard)
    finally:
        if tasks:
            await asyncio.gather(*tasks)


# ---------------------------------------------------------------------------
# CLI construction
# ---------------------------------------------------------------------------


def build_cli(
    *,
    http: HttpPort | None = None,
    clock: ClockPort | None = None,
) -> typer.Typer:
    """Construct the Typer application.

    Args:
        http: Override the HTTP adapter (tests pass a
            ``MockHttpClient``).  When ``None``, ``--dry-run`` selects
            :class:`NullHttpClient`, otherwise :class:`HttpxClient`.
        clock: Override the latency clock.

    Returns:
        A configured :class:`typer.Typer` ready to invoke.
    """
    cli = typer.Typer(
        help=f"{SERVICE_NAME} v{__version__} — toggle a networked appliance over HTTP",
    )
    config_cli = typer.Typer(help="Show or change the saved device settings.")
    cli.add_typer(config_cli, name="config")

    # -- global options -----------------------------------------------------

    @cli.callback(invoke_without_command=True)
    def main(
        ctx: typer.Context,
        version_flag: Annotated[
            bool | None,
            typer.Option(
                "--version",
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = None,
        dry_run: Annotated[
            bool,
            typer.Option("--dry-run", help="Do not contact the device."),
        ] = False,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Override log level."),
        ] = None,
        log_format: Annotated[
            str | None,
            typer.Option("--log-format", help="Override log format."),
        ] = None,
        env_file: Annotated[
            str,
            typer.Option("--env-file", help="Path to .env file."),
        ] = ".env",
        config_path: Annotated[
            str,
            typer.Option("--config", help="Path to the saved settings file."),
        ] = DEFAULT_STORE_PATH,
    ) -> None:
        if version_flag:
            typer.echo(f"{SERVICE_NAME} v{__version__}")
            raise typer.Exit()

        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit()

        if log_level is not None and log_level.upper() not in _VALID_LOG_LEVELS:
            raise typer.BadParameter(
                f"Invalid log level '{log_level}'. "
                f"Choose from: {', '.join(_VALID_LOG_LEVELS)}",
                param_hint="'--log-level'",
            )

        if log_format is not None and log_format.lower() not in _VALID_LOG_FORMATS:
            raise typer.BadParameter(
                f"Invalid log format '{log_format}'. "
                f"Choose from: {', '.join(_VALID_LOG_FORMATS)}",
                param_hint="'--log-format'",
            )

        try:
            settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
        except ValidationError as exc:
            typer.echo(f"Configuration error: {exc}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc

        if log_level is not None:
            settings.logging = settings.logging.model_copy(
                update={"level": log_level.upper()},
            )
        if log_format is not None:
            settings.logging = settings.logging.model_copy(
                update={"format": log_format.lower()},
            )
        configure_logging(settings.logging, service=SERVICE_NAME, version=__version__)

        if http is not None:
            adapter: HttpPort = http
        elif dry_run:
            adapter = NullHttpClient()
        else:
            adapter = HttpxClient()

        ctx.obj = _CliState(
            settings=settings,
            store=SettingsStore(Path(config_path)),
            http=adapter,
            clock=clock,
        )

    # -- device commands ----------------------------------------------------

    @cli.command()
    def toggle(
        ctx: typer.Context,
        assume_on: Annotated[
            bool,
            typer.Option("--assume-on", help="Treat the device as currently on."),
        ] = False,
        as_json: Annotated[
            bool,
            typer.Option("--json", help="Print the outcome as JSON."),
        ] = False,
    ) -> None:
        """Switch the device to the opposite of its assumed state."""
        state: _CliState = ctx.obj
        device_settings = state.device_settings()
        controller = DeviceController.from_settings(
            device_settings,
            http=state.http,
            clock=state.clock,
            is_on=assume_on,
        )
        outcome = _run(controller.toggle(device_settings.host, device_settings.port))
        _render(outcome, name=device_settings.name, as_json=as_json)
        raise typer.Exit(exit_code_for(outcome))

    @cli.command()
    def status(
        ctx: typer.Context,
        as_json: Annotated[
            bool,
            typer.Option("--json", help="Print the outcome as JSON."),
        ] = False,
    ) -> None:
        """Test the connection to the device's status endpoint."""
        state: _CliState = ctx.obj
        device_settings = state.device_settings()
        controller = DeviceController.from_settings(
            device_settings,
            http=state.http,
            clock=state.clock,
        )
        outcome = _run(
            controller.query_status(device_settings.host, device_settings.port),
        )
        _render(outcome, name=device_settings.name, as_json=as_json)
        raise typer.Exit(exit_code_for(outcome))

    @cli.command()
    def shell(ctx: typer.Context) -> None:
        """Start an interactive session (t = toggle, s = status, q = quit)."""
        state: _CliState = ctx.obj
        _run(run_shell(state))

    # -- config commands ----------------------------------------------------

    @config_cli.command("show")
    def config_show(ctx: typer.Context) -> None:
        """Print the effective device settings as JSON."""
        state: _CliState = ctx.obj
        device_settings = state.device_settings()
        typer.echo(json.dumps(device_settings.model_dump(mode="json"), indent=2))

    @config_cli.command("set")
    def config_set(
        ctx: typer.Context,
        host: Annotated[
            str | None,
            typer.Option("--host", help="Device hostname or IP address."),
        ] = None,
        port: Annotated[
            str | None,
            typer.Option("--port", help="Device HTTP port."),
        ] = None,
        timeout: Annotated[
            float | None,
            typer.Option("--timeout", help="Request timeout in seconds."),
        ] = None,
        auto_connect: Annotated[
            Switch | None,
            typer.Option("--auto-connect", help="Probe status when a shell starts."),
        ] = None,
        notifications: Annotated[
            Switch | None,
            typer.Option("--notifications", help="Print state changes in the shell."),
        ] = None,
    ) -> None:
        """Change and save device settings."""
        state: _CliState = ctx.obj
        try:
            updated = state.store.update(
                state.settings.device,
                host=host,
                port=port,
                timeout=timeout,
                auto_connect=None if auto_connect is None else auto_connect is Switch.ON,
                notifications_enabled=(
                    None if notifications is None else notifications is Switch.ON
                ),
            )
        except SettingsStoreError as exc:
            typer.echo(f"Configuration error: {exc}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc
        except OSError as exc:
            typer.echo(f"Cannot save settings: {exc}", err=True)
            raise typer.Exit(EXIT_RUNTIME_ERROR) from exc
        typer.echo(f"Saved settings to {state.store.path}")
        typer.echo(json.dumps(updated.model_dump(mode="json"), indent=2))

    return cli


def main() -> None:
    """Console-script entry point."""
    build_cli()(prog_name=SERVICE_NAME)
