"""Command-line interface for manage-ghar."""

import logging
import subprocess
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import GharConfig, create_sample_config, default_config_paths, load_config
from .core.state import LOG_FILE, PID_FILE
from .core.supervisor import Outcome, RunnerSupervisor
from .error_handling import ConfigurationError, GharError, handle_error

console = Console()

# Exit code for operational failures (missing runner, bad command, signal)
EXIT_SUPERVISOR_ERROR = 2

VERBOSITY_LEVELS = {
    -1: logging.WARNING,
    0: logging.INFO,
    1: logging.DEBUG,
}


def setup_logging(*, verbosity: int = 0) -> None:
    """Set up logging configuration.

    ``verbosity`` is -1 for quiet, 0 for normal and 1 for debug output.
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.INFO)

    # Show path only at DEBUG level
    show_path = level == logging.DEBUG
    handlers: list[logging.Handler] = [
        RichHandler(console=console, rich_tracebacks=True, show_path=show_path),
    ]

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )


def _supervisor(ctx: click.Context, runner_path: Path) -> RunnerSupervisor:
    return RunnerSupervisor(
        ctx.obj["config"],
        runner_path,
        state_path=ctx.obj["state_path"],
    )


def _fail(error: Exception) -> None:
    handle_error(error)
    sys.exit(EXIT_SUPERVISOR_ERROR)


runner_path_argument = click.argument(
    "runner_path",
    type=click.Path(file_okay=False, path_type=Path),
)

timeout_option = click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait for the runner to exit before SIGKILL (default: send SIGTERM and return)",
)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors")
@click.option(
    "--state-path",
    "-s",
    type=click.Path(file_okay=False, path_type=Path),
    help="State directory holding the PID and log files (default: 'state' in the runner directory)",
)
@click.option(
    "--command",
    "-c",
    help="Command to execute instead of running the runner directly",
)
@click.option(
    "--force/--no-force",
    "-f",
    default=None,
    help="Force start even if the runner is running (overrides the config file)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
    state_path: Path | None,
    command: str | None,
    force: bool | None,
) -> None:
    """Manage a GitHub Actions runner like a SysV init script."""
    verbosity = 1 if verbose else -1 if quiet else 0
    setup_logging(verbosity=verbosity)

    try:
        loaded_config = load_config(config_path)
    except (OSError, ValueError, ValidationError) as e:
        config_error = ConfigurationError(
            f"Failed to load configuration: {e}",
            config_path=config_path,
        )
        config_error.display_to_user()
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = loaded_config
    ctx.obj["state_path"] = state_path
    ctx.obj["command"] = command or loaded_config.command
    ctx.obj["force"] = loaded_config.force if force is None else force


@cli.command()
@runner_path_argument
@click.pass_context
def start(ctx: click.Context, runner_path: Path) -> None:
    """Start the runner; it is not started twice unless forced."""
    supervisor = _supervisor(ctx, runner_path)

    try:
        result = supervisor.start(ctx.obj["command"], force=ctx.obj["force"])
    except (GharError, OSError) as e:
        _fail(e)
        return

    if result.outcome is Outcome.ALREADY_RUNNING:
        console.print(f"[yellow]The runner is already running (PID {result.pid})[/yellow]")
    else:
        console.print(f"[green]Runner started (PID {result.pid})[/green]")


@cli.command()
@runner_path_argument
@timeout_option
@click.pass_context
def stop(ctx: click.Context, runner_path: Path, timeout: float | None) -> None:
    """Stop the runner."""
    supervisor = _supervisor(ctx, runner_path)

    try:
        result = supervisor.stop(timeout=timeout)
    except (GharError, OSError) as e:
        _fail(e)
        return

    if result.outcome is Outcome.ALREADY_STOPPED:
        console.print("[yellow]Runner already stopped[/yellow]")
    else:
        console.print(f"[green]Runner stopped (PID {result.pid})[/green]")


@cli.command()
@runner_path_argument
@timeout_option
@click.pass_context
def restart(ctx: click.Context, runner_path: Path, timeout: float | None) -> None:
    """Stop and start the runner."""
    supervisor = _supervisor(ctx, runner_path)

    try:
        result = supervisor.restart(
            ctx.obj["command"],
            force=ctx.obj["force"],
            timeout=timeout,
        )
    except (GharError, OSError) as e:
        _fail(e)
        return

    if result.outcome is Outcome.ALREADY_RUNNING:
        console.print(f"[yellow]The runner is already running (PID {result.pid})[/yellow]")
    else:
        console.print(f"[green]Runner restarted (PID {result.pid})[/green]")


@cli.command()
@runner_path_argument
@click.pass_context
def status(ctx: click.Context, runner_path: Path) -> None:
    """Tell if the runner is running."""
    result = _supervisor(ctx, runner_path).status()

    if result.is_running:
        console.print(f"🟢 Runner: [green]Running (PID {result.pid})[/green]")
    else:
        console.print("🔴 Runner: [red]Stopped[/red]")


@cli.command()
@runner_path_argument
@click.option("--follow", "-F", is_flag=True, help="Follow log output")
@click.option("--lines", "-n", type=int, default=10, help="Number of lines to show")
@click.pass_context
def logs(ctx: click.Context, runner_path: Path, follow: bool, lines: int) -> None:
    """Show the runner log."""
    supervisor = _supervisor(ctx, runner_path)
    log_file = supervisor.state_path / LOG_FILE

    if not log_file.exists():
        console.print("[yellow]No log file found[/yellow]")
        console.print(f"Expected location: {log_file}")
        sys.exit(1)

    if follow:
        cmd = ["tail", "-f", str(log_file)]
    else:
        cmd = ["tail", "-n", str(lines), str(log_file)]

    try:
        with subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            bufsize=1,
        ) as proc:
            try:
                for line in proc.stdout:
                    console.print(line.rstrip(), markup=False, highlight=False)
            except KeyboardInterrupt:
                proc.terminate()
                sys.exit(0)

        if proc.returncode != 0:
            console.print("[red]Error running tail command[/red]")
            sys.exit(1)

    except FileNotFoundError:
        console.print("[red]tail command not found - install coreutils[/red]")
        sys.exit(1)


@cli.group("config")
def config_cmd() -> None:
    """Configuration management commands."""


@config_cmd.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    config: GharConfig = ctx.obj["config"]

    table = Table()
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("State Path", str(config.state_path or f"<runner>/{config.state_dirname}"))
    table.add_row("PID File", PID_FILE)
    table.add_row("Log File", LOG_FILE)
    table.add_row("Command", config.command or config.default_command)
    table.add_row("Force", str(config.force))
    table.add_row("Restart Delay", f"{config.restart_delay}s")
    table.add_row(
        "Stop Timeout",
        f"{config.stop_timeout}s" if config.stop_timeout else "Do not wait",
    )

    console.print(table)


@config_cmd.command("init")
@click.option(
    "--path",
    "-p",
    type=click.Path(path_type=Path),
    default=default_config_paths()[0],
    help="Path for the configuration file",
)
def config_init(path: Path) -> None:
    """Create a sample configuration file."""
    try:
        create_sample_config(path)
        console.print(f"[green]Created sample configuration at {path}[/green]")
    except OSError as e:
        console.print(f"[red]Error creating configuration: {e}[/red]")
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
