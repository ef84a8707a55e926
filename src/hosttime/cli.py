# src/hosttime/cli.py
"""hosttime Command Line Interface.

Runs the timer primitives on the asyncio host, mainly to observe their
timing behavior (missed-tick policies, timeout races) from a shell.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError

from hosttime import __version__
from hosttime.contracts.enums import MissedTickBehavior
from hosttime.contracts.time import TimePoint
from hosttime.core.clock import Clock
from hosttime.core.config import HosttimeSettings, load_settings
from hosttime.core.logging import configure_logging, get_logger
from hosttime.engine.interval import interval
from hosttime.engine.sleep import sleep
from hosttime.engine.timeout import timeout

__all__ = ["app"]

logger = get_logger(__name__)

app = typer.Typer(
    name="hosttime",
    help="hosttime: host-driven sleeps, intervals and timeouts.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"hosttime version {__version__}")
        raise typer.Exit()


def _load_settings_or_exit(settings_file: Path | None) -> HosttimeSettings:
    if settings_file is None:
        return HosttimeSettings()
    try:
        return load_settings(settings_file)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.secho(f"Configuration errors in {settings_file}:", fg=typer.colors.RED, err=True)
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


def _settings(ctx: typer.Context) -> HosttimeSettings:
    settings: HosttimeSettings = ctx.obj
    return settings


def _offset(tick: TimePoint, origin: TimePoint) -> str:
    return f"+{(tick - origin).total_seconds():.3f}s"


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    settings_file: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """hosttime: host-driven sleeps, intervals and timeouts."""
    settings = _load_settings_or_exit(settings_file)
    configure_logging(
        json_output=settings.logging.json_output,
        level=settings.logging.level,
        timer_events=settings.logging.timer_events,
    )
    ctx.obj = settings


@app.command("sleep")
def sleep_command(
    ctx: typer.Context,
    seconds: float = typer.Argument(..., min=0.0, help="How long to sleep."),
) -> None:
    """Sleep on the host timer and report the measured duration."""
    clock = Clock.from_settings(_settings(ctx).timer)

    async def run() -> TimePoint:
        start = clock.now()
        await sleep(seconds, clock=clock)
        return start

    start = asyncio.run(run())
    typer.echo(f"slept {_offset(clock.now(), start)}")


@app.command("interval")
def interval_command(
    ctx: typer.Context,
    period: float = typer.Argument(..., min=0.0, help="Seconds between ticks."),
    count: int = typer.Option(3, "--count", "-n", min=1, help="Number of ticks to print."),
    behavior: MissedTickBehavior | None = typer.Option(
        None,
        "--behavior",
        "-b",
        case_sensitive=False,
        help="Missed-tick policy (default from settings).",
    ),
    work: float = typer.Option(0.0, "--work", "-w", min=0.0, help="Seconds of simulated work after each tick."),
) -> None:
    """Print the scheduled offset of each tick of an interval."""
    settings = _settings(ctx)
    clock = Clock.from_settings(settings.timer)
    missed_tick_behavior = behavior or settings.timer.default_missed_tick_behavior

    if period <= 0:
        typer.secho("Error: period must be positive", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    async def run() -> None:
        with interval(period, clock=clock, missed_tick_behavior=missed_tick_behavior) as ticks:
            origin: TimePoint | None = None
            for n in range(1, count + 1):
                scheduled = await ticks.tick()
                origin = origin or scheduled
                typer.echo(f"tick {n}: {_offset(scheduled, origin)}")
                if work > 0:
                    await sleep(work, clock=clock)

    logger.debug("Starting interval", period=period, count=count, missed_tick_behavior=missed_tick_behavior.value)
    asyncio.run(run())


@app.command("timeout")
def timeout_command(
    ctx: typer.Context,
    deadline: float = typer.Argument(..., min=0.0, help="Seconds before the deadline fires."),
    work: float = typer.Option(..., "--work", "-w", min=0.0, help="Seconds the simulated operation takes."),
) -> None:
    """Race a simulated operation against a deadline.

    Exits with code 1 when the deadline fires first.
    """
    clock = Clock.from_settings(_settings(ctx).timer)

    async def run() -> bool:
        result = await timeout(deadline, sleep(work, clock=clock), clock=clock)
        return result.is_elapsed

    if asyncio.run(run()):
        typer.echo("elapsed")
        raise typer.Exit(1)
    typer.echo("completed")


if __name__ == "__main__":
    app()
