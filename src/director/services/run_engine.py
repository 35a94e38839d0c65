"""Run engine - simulated execution of an automation's step pipeline."""

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from src.director.core.config import Settings, get_settings
from src.director.core.exceptions import StepFailedError
from src.director.core.logging import (
    bind_automation_context,
    get_logger,
    unbind_automation_context,
)
from src.director.models import (
    Automation,
    AutomationRunLog,
    AutomationStatus,
    Performance,
    RunLogMessage,
    RunMessageKind,
    RunStatus,
    Step,
)
from src.director.models.base import utc_now
from src.director.repositories import AutomationStore
from src.director.services.scheduler import compute_next_run
from src.director.services.state_machine import ensure_transition
from src.director.services.step_simulator import DescriptiveStepSimulator, StepSimulator

logger = get_logger(__name__)

# Smallest gap between two messages of one run
MESSAGE_TICK = timedelta(seconds=1)


def grow_performance(performance: Performance, steps: Sequence[Step], channels: int) -> Performance:
    """Apply one run's simulated growth to cumulative performance.

    Deterministic for the same inputs. Views, watch time and engagements never
    decrease; conversion rate is re-derived and stays within [0, 1].
    """
    reach = 250 * max(channels, 1) + 150 * len(steps)
    views_gain = reach + performance.views // 20
    views = performance.views + views_gain
    watch_time = performance.watch_time_minutes + views_gain * 2 // 5
    engagements = performance.engagements + views_gain // 12
    conversion_rate = round(min(1.0, engagements / views / 4), 4) if views else 0.0
    return Performance(
        views=views,
        watch_time_minutes=watch_time,
        engagements=engagements,
        conversion_rate=conversion_rate,
    )


class _Timeline:
    """Simulated clock for message timestamps; every stamp is strictly later."""

    def __init__(self, start: datetime):
        self.cursor = start
        self._last: datetime | None = None

    def stamp(self, at: datetime) -> datetime:
        if self._last is not None and at <= self._last:
            at = self._last + MESSAGE_TICK
        self._last = at
        return at

    def advance(self, minutes: float) -> None:
        elapsed = max(timedelta(minutes=minutes), MESSAGE_TICK)
        self.cursor = max(self.cursor + elapsed, (self._last or self.cursor) + MESSAGE_TICK)


class RunEngine:
    """Executes one automation run and records its log.

    At most one run per automation is in flight: the ``running`` status is
    claimed under the automation's store lock and a second request is
    rejected with ``ConflictError``. Step simulation happens outside the lock;
    the outcome is merged onto whatever the store holds when the run ends so
    concurrent lifecycle updates are kept.
    """

    def __init__(
        self,
        store: AutomationStore,
        simulator: StepSimulator | None = None,
        clock: Callable[[], datetime] = utc_now,
        settings: Settings | None = None,
    ):
        self.store = store
        self.simulator = simulator or DescriptiveStepSimulator()
        self.clock = clock
        self.settings = settings or get_settings()

    @property
    def custom_interval(self) -> timedelta:
        return timedelta(days=self.settings.custom_cadence_days)

    async def run(self, automation_id: str) -> AutomationRunLog:
        """Run an automation's steps in order and return the new run log.

        Step failures do not raise; they produce a ``failed`` log and move the
        automation to ``error``. A cancelled run is recorded the same way
        before the cancellation propagates.

        Raises:
            NotFoundError: If the automation does not exist.
            ConflictError: If the automation is already running.
        """
        bind_automation_context(automation_id)
        try:
            automation, started_at = await self._claim(automation_id)
            logger.info("Run started", steps=len(automation.steps))

            messages: list[RunLogMessage] = []
            try:
                status = await self._execute(automation, started_at, messages)
            except asyncio.CancelledError:
                log = await self._record(automation, RunStatus.FAILED, started_at, messages)
                logger.warning("Run cancelled", run_id=log.id)
                raise

            log = await self._record(automation, status, started_at, messages)
            logger.info("Run finished", run_id=log.id, status=log.status.value)
            return log
        finally:
            unbind_automation_context()

    async def _record(
        self,
        snapshot: Automation,
        status: RunStatus,
        started_at: datetime,
        messages: list[RunLogMessage],
    ) -> AutomationRunLog:
        log = AutomationRunLog(
            automation_id=snapshot.id,
            status=status,
            started_at=started_at,
            finished_at=self.clock(),
            messages=tuple(messages),
        )
        await self._finish(snapshot, log)
        return log

    async def _claim(self, automation_id: str) -> tuple[Automation, datetime]:
        async with self.store.lock(automation_id):
            automation = self.store.get(automation_id)
            automation.status = ensure_transition(automation.status, AutomationStatus.RUNNING)
            started_at = self.clock()
            self.store.put(automation)
        return automation, started_at

    async def _execute(
        self, automation: Automation, started_at: datetime, messages: list[RunLogMessage]
    ) -> RunStatus:
        """Simulate every step, appending to ``messages`` as events arrive."""
        timeline = _Timeline(started_at)
        current_step_id = ""

        try:
            async with asyncio.timeout(self.settings.run_timeout_seconds):
                for step in automation.steps:
                    current_step_id = step.id
                    events = await self.simulator.simulate(automation, step)
                    at = timeline.cursor
                    for event in events:
                        messages.append(
                            RunLogMessage(
                                step_id=step.id,
                                timestamp=timeline.stamp(at),
                                message=event.message,
                                kind=event.kind,
                            )
                        )
                        at += MESSAGE_TICK
                    timeline.advance(step.duration_minutes)
        except StepFailedError as exc:
            logger.warning("Step failed", step_id=exc.step_id, reason=exc.reason)
            messages.append(self._failure(timeline, exc.step_id, f"Step failed: {exc.reason}"))
            return RunStatus.FAILED
        except asyncio.CancelledError:
            messages.append(self._failure(timeline, current_step_id, "Run cancelled"))
            raise
        except TimeoutError:
            logger.warning("Run timed out", timeout=self.settings.run_timeout_seconds)
            messages.append(
                self._failure(
                    timeline,
                    current_step_id,
                    f"Run exceeded {self.settings.run_timeout_seconds}s and was aborted",
                )
            )
            return RunStatus.FAILED
        except Exception as exc:
            logger.exception("Step simulation crashed", step_id=current_step_id)
            messages.append(self._failure(timeline, current_step_id, f"Step crashed: {exc}"))
            return RunStatus.FAILED

        return RunStatus.COMPLETED

    @staticmethod
    def _failure(timeline: _Timeline, step_id: str, message: str) -> RunLogMessage:
        return RunLogMessage(
            step_id=step_id,
            timestamp=timeline.stamp(timeline.cursor),
            message=message,
            kind=RunMessageKind.FAILURE,
        )

    async def _finish(self, snapshot: Automation, log: AutomationRunLog) -> None:
        async with self.store.lock(log.automation_id):
            self.store.add_run_log(log)

            if not self.store.exists(log.automation_id):
                logger.warning("Automation deleted during run, log kept", run_id=log.id)
                return

            automation = self.store.get(log.automation_id)
            if log.status == RunStatus.COMPLETED:
                automation.status = ensure_transition(
                    automation.status, AutomationStatus.SCHEDULED
                )
                automation.performance = grow_performance(
                    automation.performance,
                    snapshot.steps,
                    channels=1 + len(automation.cross_post),
                )
                automation.last_run_at = log.started_at
            else:
                automation.status = ensure_transition(automation.status, AutomationStatus.ERROR)

            automation.schedule.next_run = compute_next_run(
                automation.schedule.frequency,
                log.started_at,
                self.custom_interval,
            )
            self.store.put(automation)
