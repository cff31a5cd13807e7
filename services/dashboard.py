"""Fetch-cycle orchestration for the dashboard."""

from __future__ import annotations

import itertools
import logging
import random
from datetime import datetime
from functools import lru_cache
from threading import Event, Lock, Thread
from typing import Callable, Optional, Sequence

from app.schemas import (
    ActivityPoint,
    ActivityResponse,
    DashboardSnapshot,
    DataSource,
    TimeRange,
)
from models.records import FeedSample, PairSeries
from services.aggregator import DeviceAggregator, DeviceIdentity, build_fleet, utc_now
from services.charts import build_charts, pair_series_from_channels
from services.classifier import classify_pair
from services.errors import EmptyDataError, TransportError
from services.feed_client import FeedClient
from services.parser import FeedParser
from services.reducer import FleetStatsReducer
from services.windower import SeriesWindower, format_label, point_count, window_samples
from settings import get_settings

logger = logging.getLogger(__name__)

CHART_PAIRS = (1, 2)


class DashboardService:
    """Runs fetch cycles and keeps the most recent snapshot.

    Every cycle gets a monotonically increasing request id. A finished cycle
    is published only if no newer cycle was started in the meantime, so a
    slow response never overwrites fresher state.
    """

    def __init__(
        self,
        feed_client: FeedClient,
        parser: FeedParser,
        aggregator: DeviceAggregator,
        reducer: FleetStatsReducer,
        windower: SeriesWindower,
        fleet: Sequence[DeviceIdentity],
        feed_results: int = 50,
        default_time_range: TimeRange = TimeRange.day,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.feed_client = feed_client
        self.parser = parser
        self.aggregator = aggregator
        self.reducer = reducer
        self.windower = windower
        self.fleet = tuple(fleet)
        self.feed_results = feed_results
        self.clock = clock
        self._time_range = TimeRange(default_time_range)
        self._sequence = itertools.count(1)
        self._latest_issued = 0
        self._snapshot: Optional[DashboardSnapshot] = None
        self._lock = Lock()
        self._stop = Event()
        self._refresh_thread: Optional[Thread] = None

    @property
    def time_range(self) -> TimeRange:
        with self._lock:
            return self._time_range

    def latest(self) -> Optional[DashboardSnapshot]:
        with self._lock:
            return self._snapshot

    def current(self, time_range: Optional[TimeRange] = None) -> DashboardSnapshot:
        """Return the latest snapshot, refreshing if none exists or the range changed."""
        snapshot = self.latest()
        if snapshot is None:
            return self.refresh(time_range)
        if time_range is not None and snapshot.time_range is not TimeRange(time_range):
            return self.refresh(time_range)
        return snapshot

    def refresh(self, time_range: Optional[TimeRange] = None) -> DashboardSnapshot:
        """Run one full fetch cycle and publish it unless it went stale."""
        selected = TimeRange(time_range) if time_range is not None else self.time_range
        request_id = self._issue_request_id(selected)
        snapshot = self.build_snapshot(request_id, selected)
        return self._publish(snapshot)

    def build_snapshot(self, request_id: int, time_range: TimeRange) -> DashboardSnapshot:
        try:
            samples, pairs = self._load_feed(time_range)
        except (TransportError, EmptyDataError) as exc:
            logger.warning(
                "Falling back to synthetic telemetry",
                extra={
                    "request_id": request_id,
                    "time_range": time_range.value,
                    "reason": str(exc),
                },
            )
            window = self.windower.synthesize(time_range, pairs=CHART_PAIRS)
            return self._assemble(
                request_id,
                time_range,
                DataSource.synthetic,
                window.samples,
                window.pairs,
                notice=f"Error fetching data from feed: {exc}",
            )

        logger.info(
            "Built snapshot from feed",
            extra={
                "request_id": request_id,
                "time_range": time_range.value,
                "sample_count": len(samples),
                "window_count": min(len(samples), point_count(time_range)),
            },
        )
        return self._assemble(request_id, time_range, DataSource.feed, samples, pairs)

    def build_synthetic_snapshot(self, time_range: TimeRange) -> DashboardSnapshot:
        """Build a fully synthetic snapshot without publishing it."""
        window = self.windower.synthesize(TimeRange(time_range), pairs=CHART_PAIRS)
        return self._assemble(
            0, window.time_range, DataSource.synthetic, window.samples, window.pairs
        )

    def build_activity(self, time_range: TimeRange) -> ActivityResponse:
        window = self.windower.synthesize(TimeRange(time_range), pairs=CHART_PAIRS)
        devices = self.aggregator.summarize_fleet(self.fleet, window.samples)
        points = tuple(
            ActivityPoint(
                timestamp=sample.timestamp,
                label=format_label(sample.timestamp, window.time_range),
                failures=self.reducer.failures_in_sample(sample, self.fleet),
                backups_active=sum(
                    1
                    for identity in self.fleet
                    if classify_pair(
                        sample.value(identity.primary_channel),
                        sample.value(identity.secondary_channel),
                    ).backup_active
                ),
            )
            for sample in window.samples
        )
        return ActivityResponse(
            time_range=window.time_range,
            stats=self.reducer.reduce(devices, window.samples, self.fleet),
            points=points,
        )

    def start_auto_refresh(self, interval_seconds: float) -> None:
        if self._refresh_thread is not None:
            return
        self._stop.clear()
        self._refresh_thread = Thread(
            target=self._auto_refresh_loop,
            args=(interval_seconds,),
            name="dashboard-auto-refresh",
            daemon=True,
        )
        self._refresh_thread.start()

    def shutdown(self) -> None:
        """Stop the refresh loop and release the HTTP client."""
        self._stop.set()
        thread = self._refresh_thread
        if thread is not None:
            thread.join(timeout=5.0)
            self._refresh_thread = None
        self.feed_client.close()

    def _auto_refresh_loop(self, interval_seconds: float) -> None:
        while not self._stop.wait(interval_seconds):
            logger.info("Auto-refreshing data", extra={"time_range": self.time_range.value})
            try:
                self.refresh()
            except Exception:  # pragma: no cover - keep the loop alive
                logger.exception("Auto-refresh cycle failed")

    def _load_feed(
        self, time_range: TimeRange
    ) -> tuple[list[FeedSample], tuple[PairSeries, ...]]:
        """Full parsed history plus pair series cut to the range window."""
        payload = self.feed_client.fetch_feed(results=self.feed_results)
        samples = self.parser.parse_feed(payload)
        channels = self.parser.to_channel_series(
            list(window_samples(samples, time_range))
        )
        return samples, pair_series_from_channels(channels, CHART_PAIRS)

    def _assemble(
        self,
        request_id: int,
        time_range: TimeRange,
        source: DataSource,
        samples: Sequence[FeedSample],
        pairs: Sequence[PairSeries],
        notice: Optional[str] = None,
    ) -> DashboardSnapshot:
        devices = self.aggregator.summarize_fleet(self.fleet, samples)
        return DashboardSnapshot(
            request_id=request_id,
            time_range=time_range,
            source=source,
            generated_at=self.clock(),
            devices=tuple(devices),
            stats=self.reducer.reduce(devices, samples, self.fleet),
            charts=build_charts(pairs, time_range),
            notice=notice,
        )

    def _issue_request_id(self, time_range: TimeRange) -> int:
        with self._lock:
            self._latest_issued = next(self._sequence)
            self._time_range = time_range
            return self._latest_issued

    def _publish(self, snapshot: DashboardSnapshot) -> DashboardSnapshot:
        with self._lock:
            if snapshot.request_id != self._latest_issued:
                logger.info(
                    "Discarding stale snapshot",
                    extra={"request_id": snapshot.request_id},
                )
                return self._snapshot or snapshot
            self._snapshot = snapshot
            return snapshot


@lru_cache
def build_default_dashboard() -> DashboardService:
    """Factory that wires the dashboard from environment settings."""
    settings = get_settings()
    rng = random.Random(settings.synthetic_seed)
    feed_client = FeedClient(
        base_url=settings.feed_base_url,
        channel_id=settings.feed_channel_id,
        api_key=settings.feed_api_key,
        timeout=settings.feed_timeout,
    )
    return DashboardService(
        feed_client=feed_client,
        parser=FeedParser(),
        aggregator=DeviceAggregator(rng=rng),
        reducer=FleetStatsReducer(),
        windower=SeriesWindower(rng=rng),
        fleet=build_fleet(settings.fleet_size),
        feed_results=settings.feed_results,
        default_time_range=TimeRange(settings.default_time_range),
    )
