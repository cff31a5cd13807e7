from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_devices(devices: List[Dict[str, Any]]) -> None:
    echo_heading("Devices")
    if not devices:
        typer.echo("No devices reported.")
        return
    for device in devices:
        typer.echo(
            f"  - {device.get('id')} ({device.get('location')}): {device.get('status')}, "
            f"bulb={device.get('currentBulbLabel')}, "
            f"current={device.get('currentMilliamps')} mA, "
            f"health={device.get('health')}%, "
            f"switches={device.get('totalSwitches')}, "
            f"last_switched={device.get('lastSwitched')}"
        )


def render_snapshot(payload: Dict[str, Any]) -> None:
    echo_heading("Dashboard Snapshot")
    echo_key_values(
        [
            ("request_id", payload.get("requestId")),
            ("time_range", payload.get("timeRange")),
            ("source", payload.get("source")),
            ("generated_at", payload.get("generatedAt")),
        ]
    )
    notice = payload.get("notice")
    if notice:
        typer.secho(f"notice: {notice}", fg=typer.colors.YELLOW)

    stats = payload.get("stats") or {}
    fleet_size = stats.get("fleetSize")
    typer.echo()
    echo_heading("Fleet")
    echo_key_values(
        [
            ("active", f"{stats.get('activeCount')}/{fleet_size}"),
            ("primary_active", f"{stats.get('primaryActiveCount')}/{fleet_size}"),
            ("secondary_active", f"{stats.get('secondaryActiveCount')}/{fleet_size}"),
            ("failures", stats.get("failureCount")),
        ]
    )

    typer.echo()
    render_devices(payload.get("devices") or [])

    charts = payload.get("charts") or []
    typer.echo()
    echo_heading("Charts")
    if not charts:
        typer.echo("No chart data available.")
    for chart in charts:
        points = chart.get("points") or []
        tally = Counter(point.get("status") for point in points)
        breakdown = ", ".join(f"{status}={count}" for status, count in sorted(tally.items()))
        typer.echo(f"  - {chart.get('title')}: {len(points)} points ({breakdown or 'empty'})")
