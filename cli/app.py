from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_devices, render_snapshot


class RangeChoice(str, Enum):
    day = "day"
    week = "week"
    month = "month"


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the streetlight monitoring service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _range_value(time_range: Optional[RangeChoice]) -> Optional[str]:
    return time_range.value if time_range is not None else None


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        "-k",
        help="Key for the mock device API (defaults to DASHBOARD_API_KEY env).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, api_key=api_key, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("snapshot")
def snapshot_command(
    ctx: typer.Context,
    time_range: Optional[RangeChoice] = typer.Option(
        None, "--range", "-r", help="Time range to display."
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh/--no-refresh",
        help="Run a fetch cycle instead of reading the latest snapshot.",
    ),
) -> None:
    """Show the latest dashboard snapshot."""
    state = _get_state(ctx)
    selected = _range_value(time_range)
    if refresh:
        payload = state.client.refresh(selected)
    else:
        payload = state.client.get_snapshot(selected)
    render_snapshot(payload)


@app.command("devices")
def devices_command(ctx: typer.Context) -> None:
    """List devices from the mock device API."""
    state = _get_state(ctx)
    render_devices(state.client.get_devices())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    time_range: Optional[RangeChoice] = typer.Option(
        None, "--range", "-r", help="Time range to display."
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between refreshes (defaults to CLI_REFRESH_INTERVAL or 20).",
    ),
    count: int = typer.Option(
        0,
        "--count",
        "-n",
        min=0,
        help="Stop after this many refreshes; 0 runs until interrupted.",
    ),
) -> None:
    """Refresh periodically and print each snapshot."""
    state = _get_state(ctx)
    period = interval if interval is not None else state.config.refresh_interval
    typer.echo(f"Refreshing every {period}s from {state.config.base_url} ...")
    for payload in state.client.watch(_range_value(time_range), interval=period, count=count):
        typer.echo()
        render_snapshot(payload)
