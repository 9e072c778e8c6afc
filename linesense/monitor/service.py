"""Grid Monitor Service - polls readings and maintains the classified grid state."""

import asyncio
import logging
import signal
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from linesense.alerts.alert_log import AlertLog
from linesense.analysis.classifier import Classification, classify
from linesense.analysis.risk import assess_risk
from linesense.collector.readers import ReadingSource, RemoteFeedReader, SyntheticReader
from linesense.shared.exceptions import FeedUnavailable, MalformedReading
from linesense.shared.models import Alert, Reading, RiskAssessment
from linesense.topology.graph import Topology, TopologySnapshot, load_topology
from linesense.topology.propagator import TopologyStatusPropagator

from .config import MonitorConfig
from .publisher import StatePublisher

logger = logging.getLogger(__name__)

StateListener = Callable[["GridState"], None]


@dataclass(frozen=True)
class GridState:
    """Everything the presentation layer may read, as of one completed tick."""
    tick: int
    source: str  # "feed", "synthetic", "manual" or "none" before the first tick
    reading: Optional[Reading]
    classification: Optional[Classification]
    risk: Optional[RiskAssessment]
    alerts: Tuple[Alert, ...]
    new_alerts: Tuple[Alert, ...]
    topology: TopologySnapshot
    updated_at: Optional[datetime] = None


class GridMonitorService:
    """Single-writer pipeline: read -> classify -> score -> alert -> propagate.

    Only the tick writes. Each completed tick publishes a new frozen
    ``GridState`` in one assignment, so the read-only views always describe
    a whole tick and never a partial one.
    """

    def __init__(
        self,
        config: MonitorConfig,
        source: Optional[ReadingSource] = None,
        fallback: Optional[SyntheticReader] = None,
        topology: Optional[Topology] = None,
        alert_log: Optional[AlertLog] = None,
    ):
        self.config = config
        self.fallback = fallback or SyntheticReader(seed=config.random_seed)
        self.source = source or self._build_source(config, self.fallback)
        self.topology = topology or load_topology(config.topology_path)
        self.propagator = TopologyStatusPropagator(self.topology, config.locality_policy())
        self.alert_log = alert_log or AlertLog(capacity=config.alert_capacity)

        self._listeners: List[StateListener] = []
        self._state = GridState(
            tick=0,
            source="none",
            reading=None,
            classification=None,
            risk=None,
            alerts=(),
            new_alerts=(),
            topology=self.propagator.snapshot(),
        )

        self._tick_in_progress = False
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

        # Counters
        self.feed_failures = 0
        self.rejected_readings = 0
        self.skipped_ticks = 0

    @staticmethod
    def _build_source(config: MonitorConfig, fallback: SyntheticReader) -> ReadingSource:
        if config.feed.url:
            return RemoteFeedReader(config.feed.url, timeout=config.feed.timeout)
        return fallback

    # ── Read-only views ──────────────────────────────────────────────────────

    def state(self) -> GridState:
        return self._state

    def latest_classification(self) -> Optional[Classification]:
        return self._state.classification

    def latest_risk(self) -> Optional[RiskAssessment]:
        return self._state.risk

    def alert_snapshot(self) -> Tuple[Alert, ...]:
        """Alerts, newest first, at most ``alert_capacity`` of them."""
        return self._state.alerts

    def topology_snapshot(self) -> TopologySnapshot:
        return self._state.topology

    def add_listener(self, listener: StateListener) -> None:
        """Call ``listener`` with the new state after every completed tick."""
        self._listeners.append(listener)

    # ── Pipeline ─────────────────────────────────────────────────────────────

    def process(self, reading: Reading, source: str = "manual") -> GridState:
        """Run one reading through the pipeline and publish the resulting state.

        Raises:
            MalformedReading: If the reading is out of domain. Nothing is
                changed in that case.
        """
        reading.validate()

        classification = classify(reading)
        risk = assess_risk(reading)
        new_alerts = self.alert_log.ingest(reading)
        topology = self.propagator.propagate(reading)

        state = GridState(
            tick=self._state.tick + 1,
            source=source,
            reading=reading,
            classification=classification,
            risk=risk,
            alerts=self.alert_log.snapshot(),
            new_alerts=new_alerts,
            topology=topology,
            updated_at=datetime.now(timezone.utc),
        )
        self._state = state
        return state

    async def _acquire_reading(self) -> Tuple[Reading, str]:
        if self.source is self.fallback:
            return self.fallback.generate(), "synthetic"
        try:
            return await self.source.get_reading(), "feed"
        except FeedUnavailable as e:
            self.feed_failures += 1
            logger.warning(f"Feed unavailable ({e}); using synthetic reading for this tick")
            return self.fallback.generate(), "synthetic"

    def _notify(self, state: GridState) -> None:
        for listener in self._listeners:
            try:
                listener(state)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}")

    async def tick(self) -> Optional[GridState]:
        """Run one pipeline pass.

        Returns None without doing anything if another tick is still running,
        and None if the reading was rejected.
        """
        if self._tick_in_progress:
            self.skipped_ticks += 1
            logger.warning("Previous tick still in progress, skipping")
            return None

        self._tick_in_progress = True
        try:
            reading, source = await self._acquire_reading()
            try:
                state = self.process(reading, source)
            except MalformedReading as e:
                self.rejected_readings += 1
                logger.warning(f"Rejected {source} reading: {e}")
                return None

            c = state.classification
            logger.info(
                f"Tick {state.tick} ({source}): {reading.voltage:.1f}V {reading.current:.1f}A "
                f"{reading.vibration:.2f}g -> {c.combined.label}, "
                f"risk={state.risk.line_break_probability:.2f}, alerts={len(state.new_alerts)}"
            )
            self._notify(state)
            return state
        finally:
            self._tick_in_progress = False

    # ── Scheduling ───────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_loop(self) -> None:
        """Tick every ``poll_interval`` seconds until stopped.

        A tick that overruns the period makes the loop skip the missed
        slots rather than run them back to back.
        """
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        interval = self.config.poll_interval
        loop = asyncio.get_running_loop()
        logger.info(f"Starting grid monitor (interval={interval}s, source={type(self.source).__name__})")

        next_tick = loop.time()
        while not self._stop_event.is_set():
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Error in monitoring tick: {e}")

            next_tick += interval
            now = loop.time()
            if now > next_tick:
                missed = int((now - next_tick) // interval) + 1
                self.skipped_ticks += missed
                logger.warning(f"Tick overran the {interval}s period, skipping {missed} tick(s)")
                next_tick += missed * interval

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=next_tick - now)
            except asyncio.TimeoutError:
                pass

        logger.info("Grid monitor loop stopped")

    async def start(self) -> None:
        """Schedule the polling loop on the running event loop."""
        if self.running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run_loop())

    def request_stop(self) -> None:
        """Stop scheduling new ticks. Safe to call from the event loop only."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def stop(self) -> None:
        """Stop the loop, let an in-flight tick finish, release the sources."""
        self.request_stop()
        if self._task is not None:
            await self._task
            self._task = None
        await self.source.close()
        if self.fallback is not self.source:
            await self.fallback.close()

    async def wait_stopped(self) -> None:
        if self._task is not None:
            await asyncio.shield(self._task)


def _install_signal_handlers(service: GridMonitorService, loop: asyncio.AbstractEventLoop) -> None:
    """Set up signal handlers for graceful shutdown."""
    def signal_handler(signum, frame):
        signame = signal.Signals(signum).name
        logger.info(f"Received {signame}, shutting down...")
        loop.call_soon_threadsafe(service.request_stop)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


async def serve(service: GridMonitorService, publisher: Optional[StatePublisher] = None) -> None:
    """Run the service until a shutdown signal arrives."""
    _install_signal_handlers(service, asyncio.get_running_loop())

    if publisher is not None:
        if publisher.connect():
            service.add_listener(publisher.publish)
        else:
            logger.error("MQTT publishing disabled: broker unreachable")

    await service.start()
    logger.info("Grid monitor is running. Press Ctrl+C to stop.")
    try:
        await service.wait_stopped()
    finally:
        logger.info("Shutting down grid monitor...")
        await service.stop()
        if publisher is not None:
            publisher.disconnect()
        logger.info("Grid monitor stopped.")


def run_monitor(config: MonitorConfig, listener: Optional[StateListener] = None) -> None:
    """Build the service from ``config`` and run it (blocking)."""
    service = GridMonitorService(config)
    if listener is not None:
        service.add_listener(listener)

    publisher = None
    if config.mqtt_enabled:
        publisher = StatePublisher(config.mqtt, config.mqtt_topic)

    try:
        asyncio.run(serve(service, publisher))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
