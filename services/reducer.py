"""Fleet-level counts folded from device summaries and raw history."""

from __future__ import annotations

from typing import Iterable, Sequence

from app.schemas import DeviceStatus, DeviceSummary, FleetStats
from models.records import FeedSample
from services.aggregator import DeviceIdentity
from services.classifier import is_failed


class FleetStatsReducer:
    """Pure reducer; recomputes every count from scratch on each call."""

    def reduce(
        self,
        summaries: Sequence[DeviceSummary],
        samples: Iterable[FeedSample],
        fleet: Sequence[DeviceIdentity],
    ) -> FleetStats:
        return FleetStats(
            fleet_size=len(fleet),
            active_count=sum(
                1 for device in summaries if device.status is DeviceStatus.active
            ),
            primary_active_count=sum(
                1 for device in summaries if device.primary_bulb_1 or device.primary_bulb_2
            ),
            secondary_active_count=sum(
                1
                for device in summaries
                if device.secondary_bulb_1 or device.secondary_bulb_2
            ),
            failure_count=self.count_failures(samples, fleet),
        )

    @staticmethod
    def count_failures(
        samples: Iterable[FeedSample], fleet: Sequence[DeviceIdentity]
    ) -> int:
        """Count (sample, pair) combinations where both bulbs are dark.

        A pair counts only on samples that report both of its bulbs.
        """
        return sum(
            1
            for sample in samples
            for identity in fleet
            if sample.reports(identity.primary_channel)
            and sample.reports(identity.secondary_channel)
            and is_failed(sample.value(identity.primary_channel))
            and is_failed(sample.value(identity.secondary_channel))
        )

    @staticmethod
    def failures_in_sample(sample: FeedSample, fleet: Sequence[DeviceIdentity]) -> int:
        return FleetStatsReducer.count_failures([sample], fleet)
