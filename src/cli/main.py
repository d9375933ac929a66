"""Command line entry point for the stepseries diagnostics tool."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

import click
import structlog

from stepseries.logging import DEFAULT_LEVEL, LOG_LEVELS, configure_logging
from stepseries.output.utils import format_value
from stepseries.series import (
    SeriesError,
    TimeSeries,
    new_time_series_of_data,
    new_time_series_of_length,
    new_time_series_of_time_range,
    parse_transform,
)
from stepseries.series.transforms import available_transforms

STEP_HELP = "Spacing between samples, e.g. 30s, 15m, 1h30m, 1d. May also be set via STEPSERIES_STEP."
START_HELP = "ISO-8601 timestamp of the first sample. Defaults to now (UTC). Naive values are read as UTC."
END_HELP = "ISO-8601 timestamp of the last sample (inclusive) when filling a range."

LOG_FORMAT_CHOICES = ("console", "json")
LOG_LEVEL_CHOICES = tuple(LOG_LEVELS)
OUTPUT_FORMAT_CHOICES = ("csv", "json")

_DURATION_UNITS = {
    "d": timedelta(days=1),
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
    "ms": timedelta(milliseconds=1),
    "us": timedelta(microseconds=1),
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|us|d|h|m|s)")

logger = structlog.get_logger(__name__)


def _parse_step(value: str) -> timedelta:
    """Convert compact durations such as ``1h30m`` or ``250ms`` into a timedelta."""
    text = value.strip().lower()
    sign = 1
    if text.startswith("-"):
        sign, text = -1, text[1:]
    if not text or _DURATION_PART.sub("", text):
        raise ValueError(f"Invalid duration '{value}'. Expected e.g. 30s, 15m, 1h30m.")
    total = timedelta()
    for amount, unit in _DURATION_PART.findall(text):
        total += _DURATION_UNITS[unit] * float(amount)
    return total * sign


def _parse_timestamp(value: str | None) -> datetime | None:
    """Parse ISO-8601 timestamps, leaving ``None`` for "unspecified".

    Timestamps without an offset are read as UTC, the same zone as the
    default start.
    """
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp '{value}'. Expected ISO-8601.") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _step_callback(ctx: click.Context, param: click.Parameter, value: str) -> timedelta:
    try:
        return _parse_step(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def _timestamp_callback(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> datetime | None:
    try:
        return _parse_timestamp(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def series_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options every command needs to describe a series."""
    decorators = [
        click.option("--key", default="series", show_default=True, help="Label of the series."),
        click.option("--start", callback=_timestamp_callback, help=START_HELP),
        click.option("--end", callback=_timestamp_callback, help=END_HELP),
        click.option(
            "--step",
            envvar="STEPSERIES_STEP",
            default="1m",
            show_default=True,
            callback=_step_callback,
            help=STEP_HELP,
        ),
        click.option("--length", type=int, help="Number of filler slots to create."),
        click.option(
            "--filler",
            type=float,
            help="Value for every slot when building by --length or --end. Defaults to NaN.",
        ),
        click.argument("values", nargs=-1, type=float),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _build_series(
    *,
    key: str,
    start: datetime | None,
    end: datetime | None,
    step: timedelta,
    length: int | None,
    filler: float | None,
    values: Sequence[float],
) -> TimeSeries:
    """Pick the constructor that matches the supplied options."""
    if values and (length is not None or filler is not None or end is not None):
        raise click.UsageError("VALUES cannot be combined with --end, --length or --filler.")
    if length is not None and end is not None:
        raise click.UsageError("--length cannot be combined with --end.")
    fill = float("nan") if filler is None else filler
    build_log = logger.bind(scope="series-build", key=key)
    try:
        if values:
            series = new_time_series_of_data(key, start, step, values)
        elif length is not None:
            series = new_time_series_of_length(key, start, step, length, fill)
        elif end is not None:
            series = new_time_series_of_time_range(key, start, end, step, fill)
        else:
            raise click.UsageError("Provide VALUES, --length or --end to describe the series.")
    except SeriesError as exc:
        build_log.warning("series.build_failed", reason=str(exc))
        raise click.ClickException(str(exc)) from exc
    build_log.debug("series.built", length=len(series), step=str(series.step))
    return series


def _row(when: datetime, value: float) -> dict[str, object]:
    return {"timestamp": when.isoformat(), "value": format_value(value)}


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="STEPSERIES_LOG_LEVEL",
    default=DEFAULT_LEVEL,
    show_default=True,
    help="Verbosity for structured logs (written to stderr).",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES, case_sensitive=False),
    envvar="STEPSERIES_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
def cli(log_level: str, log_format: str) -> None:
    """Build fixed-step series from the command line and inspect them."""
    configure_logging(level=log_level, json_output=log_format.lower() == "json")
    logger.bind(command_group="stepseries").debug(
        "cli.initialized",
        log_level=log_level.lower(),
        log_format=log_format.lower(),
    )


@cli.command("render")
@series_options
def render(**options: Any) -> None:
    """Print the textual rendering of a series."""
    cmd_log = logger.bind(command="render")
    cmd_log.info("command.start")
    series = _build_series(**options)
    click.echo(str(series))
    cmd_log.info("command.completed", length=len(series))


@cli.command("transform")
@click.option(
    "--apply",
    "specs",
    multiple=True,
    required=True,
    help="Transform to apply, e.g. abs, scale:2, clip:0,10. Repeat to chain in order.",
)
@series_options
def transform(specs: tuple[str, ...], **options: Any) -> None:
    """Apply one or more named transforms and print the derived series."""
    cmd_log = logger.bind(command="transform")
    cmd_log.info("command.start", transforms=list(specs))
    try:
        transforms = [parse_transform(spec) for spec in specs]
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--apply") from exc
    series = _build_series(**options)
    for item in transforms:
        series = series.transform(item)
    click.echo(str(series))
    cmd_log.info("command.completed", key=series.key)


@cli.command("transforms")
def list_transforms() -> None:
    """List the transform names accepted by --apply."""
    for name in available_transforms():
        click.echo(name)


@cli.command("iterate")
@click.option(
    "--last",
    "last_only",
    is_flag=True,
    default=False,
    help="Only report the final sample.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMAT_CHOICES, case_sensitive=False),
    default="csv",
    show_default=True,
    help="Emit timestamp,value rows or a JSON list.",
)
@series_options
def iterate(last_only: bool, output_format: str, **options: Any) -> None:
    """Walk the series with a cursor, one step at a time."""
    cmd_log = logger.bind(command="iterate", last_only=last_only)
    cmd_log.info("command.start")
    series = _build_series(**options)
    cursor = series.time_value_iterator()

    rows: list[dict[str, object]] = []
    if last_only:
        when, value, found = cursor.last()
        if found:
            rows.append(_row(when, value))
    else:
        when, value, found = cursor.next()
        while found:
            rows.append(_row(when, value))
            when, value, found = cursor.next()

    if output_format.lower() == "json":
        click.echo(json.dumps(rows, indent=2))
    else:
        click.echo("timestamp,value")
        for row in rows:
            click.echo(f"{row['timestamp']},{row['value']}")
    cmd_log.info("command.completed", rows=len(rows))


if __name__ == "__main__":
    cli()
