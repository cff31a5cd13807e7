"""Per-device aggregation of classified readings."""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from app.schemas import DeviceStatus, DeviceSummary
from models.records import FeedSample
from services.classifier import is_active
from services.errors import EmptyDataError

LOCATIONS = ("Main St & 5th Ave", "Park Rd & Elm St")
BULB_LABELS = ("Primary 1", "Secondary 1", "Primary 2", "Secondary 2")

# Displayed switch counter wraps at this value.
SWITCH_COUNTER_CAP = 10
SWITCH_LOOKBACK = timedelta(days=3)
HEALTH_FLOOR = 70
HEALTH_CEILING = 99


@dataclass(frozen=True, slots=True)
class DeviceIdentity:
    """Static identity of a streetlight and the bulb pair it reports on."""

    id: str
    location: str
    pair: int

    @property
    def primary_channel(self) -> int:
        return 2 * self.pair - 1

    @property
    def secondary_channel(self) -> int:
        return 2 * self.pair

    @property
    def current_channel(self) -> int:
        return 4 + self.pair


def build_fleet(size: int = 2) -> tuple[DeviceIdentity, ...]:
    if not 1 <= size <= len(LOCATIONS):
        raise ValueError(f"Fleet size must be between 1 and {len(LOCATIONS)}, got {size}.")
    return tuple(
        DeviceIdentity(id=f"SL-{1000 + index}", location=LOCATIONS[index], pair=index + 1)
        for index in range(size)
    )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DeviceAggregator:
    """Builds a DeviceSummary from a device's full sample history.

    Everything except ``health`` and the ``last_switched`` timestamp is a pure
    function of the samples. Those two have no backing telemetry and are drawn
    from the injected random source.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.rng = rng or random.Random()
        self.clock = clock

    def summarize(
        self,
        identity: DeviceIdentity,
        samples: Sequence[FeedSample],
        active: bool = True,
    ) -> DeviceSummary:
        if not samples:
            raise EmptyDataError(f"No samples to summarize for device {identity.id}.")

        latest = samples[-1]
        primary_on = is_active(latest.value(identity.primary_channel))
        secondary_on = is_active(latest.value(identity.secondary_channel))
        flags = (
            primary_on and identity.pair == 1,
            secondary_on and identity.pair == 1,
            primary_on and identity.pair == 2,
            secondary_on and identity.pair == 2,
        )

        label = "None"
        if active:
            lit = [name for name, flag in zip(BULB_LABELS, flags) if flag]
            label = ", ".join(lit) or "None"

        switches = sum(
            1 for sample in samples if is_active(sample.value(identity.secondary_channel))
        )

        return DeviceSummary(
            id=identity.id,
            location=identity.location,
            status=DeviceStatus.active if active else DeviceStatus.inactive,
            primary_bulb_1=flags[0],
            secondary_bulb_1=flags[1],
            primary_bulb_2=flags[2],
            secondary_bulb_2=flags[3],
            current_bulb_label=label,
            last_switched=self._last_switched(primary_on, secondary_on),
            current_milliamps=latest.value(identity.current_channel) if active else 0.0,
            health=self.rng.randint(HEALTH_FLOOR, HEALTH_CEILING) if active else 0,
            total_switches=switches % SWITCH_COUNTER_CAP,
        )

    def summarize_fleet(
        self, fleet: Sequence[DeviceIdentity], samples: Sequence[FeedSample]
    ) -> list[DeviceSummary]:
        return [self.summarize(identity, samples) for identity in fleet]

    def _last_switched(self, primary_on: bool, secondary_on: bool) -> datetime | str:
        # Approximation: the feed has no switch-time channel.
        if secondary_on:
            return self.clock() - self.rng.random() * SWITCH_LOOKBACK
        if primary_on:
            return "Never"
        return "N/A"
