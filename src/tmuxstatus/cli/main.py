"""Main CLI application."""

import sys
from typing import Optional

import click
from rich.console import Console

from tmuxstatus import __version__
from tmuxstatus.core.config import Settings, in_daemon_mode
from tmuxstatus.core.duration import DurationError, parse_duration
from tmuxstatus.daemon.daemon import TimerDaemon, setup_logging
from tmuxstatus.daemon.ipc import IPCError, send_control
from tmuxstatus.daemon.platform import spawn_background
from tmuxstatus.daemon.state import PIDFileManager

error_console = Console(stderr=True)


def get_settings(ctx: click.Context) -> Settings:
    """Settings resolved by the command group."""
    return ctx.obj["settings"]  # type: ignore[no-any-return]


def read_daemon_pid(settings: Settings) -> int:
    """Read the daemon PID from the marker file, exiting 1 if there is none."""
    pid = PIDFileManager(settings.pid_file).read()
    if pid is None:
        error_console.print("[yellow]No timer is running[/yellow]")
        sys.exit(1)
    return pid


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """tmuxstatus - countdown timer in the tmux status line."""
    ctx.ensure_object(dict)
    ctx.obj["settings"] = Settings.from_env()

    if ctx.invoked_subcommand is None:
        sys.exit(1)


@cli.command()
@click.argument("duration", required=False)
@click.pass_context
def start(ctx: click.Context, duration: Optional[str]) -> None:
    """Start a countdown of DURATION (default 45m), e.g. 25m or 1h30m."""
    settings = get_settings(ctx)
    markers = PIDFileManager(settings.pid_file)

    # Already running: refuse quietly
    if markers.exists():
        sys.exit(1)

    duration_text = duration or settings.default_duration
    try:
        length = parse_duration(duration_text)
    except DurationError as e:
        error_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if not in_daemon_mode():
        try:
            spawn_background(duration_text)
        except OSError as e:
            error_console.print(f"[red]Error: failed to start timer in background: {e}[/red]")
            sys.exit(1)
        return

    setup_logging(settings)
    timer = TimerDaemon(length, settings=settings, markers=markers)
    sys.exit(timer.run())


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop the running timer and clear the status line."""
    settings = get_settings(ctx)
    pid = read_daemon_pid(settings)

    try:
        send_control(pid, "stop")
    except IPCError as e:
        # Stale marker from a daemon that died without cleaning up
        error_console.print(f"[yellow]Removing stale marker for PID {pid}: {e}[/yellow]")

    PIDFileManager(settings.pid_file).remove()


@cli.command()
@click.pass_context
def pause(ctx: click.Context) -> None:
    """Pause the running timer."""
    _relay(get_settings(ctx), "pause")


@cli.command()
@click.pass_context
def resume(ctx: click.Context) -> None:
    """Resume a paused timer."""
    _relay(get_settings(ctx), "resume")


def _relay(settings: Settings, command: str) -> None:
    pid = read_daemon_pid(settings)
    try:
        send_control(pid, command)
    except IPCError as e:
        error_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
