"""Automation lifecycle service."""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError

from src.director.core.config import Settings, get_settings
from src.director.core.exceptions import AutomationValidationError
from src.director.core.logging import get_logger
from src.director.models import (
    Automation,
    AutomationRunLog,
    AutomationStatus,
    Frequency,
)
from src.director.models.base import utc_now
from src.director.repositories import AutomationStore
from src.director.schemas import AutomationCreate, AutomationUpdate
from src.director.services.insights import DashboardTotals, dashboard_totals
from src.director.services.scheduler import compute_next_run
from src.director.services.state_machine import ensure_override_allowed
from src.director.services.step_catalog import build_steps, default_steps

logger = get_logger(__name__)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'automation'}: {error['msg']}"
        for error in exc.errors()
    )


class AutomationService:
    """Create, read, update and delete automations; read run logs.

    Every mutation of one automation runs under the store's per-automation
    lock, so it is linearizable with respect to an in-flight run. Invalid
    input raises ``AutomationValidationError`` before anything is written.
    """

    def __init__(
        self,
        store: AutomationStore,
        clock: Callable[[], datetime] = utc_now,
        settings: Settings | None = None,
    ):
        self.store = store
        self.clock = clock
        self.settings = settings or get_settings()

    def _next_run(self, frequency: Frequency, from_: datetime) -> datetime:
        return compute_next_run(
            frequency, from_, timedelta(days=self.settings.custom_cadence_days)
        )

    async def create(self, data: AutomationCreate) -> Automation:
        """Create an automation in ``idle`` status.

        Supplied steps are completed from the step catalog; without steps the
        default pipeline is used. ``nextRun`` is one cadence after creation.
        """
        now = self.clock()

        try:
            if data.steps is None:
                steps = default_steps()
            else:
                steps = build_steps(step.model_dump(exclude_unset=True) for step in data.steps)
            automation = Automation(
                id=self.store.new_id(),
                name=data.name,
                persona=data.persona,
                target_audience=data.target_audience,
                primary_platform=data.primary_platform,
                cross_post=data.cross_post,
                status=AutomationStatus.IDLE,
                schedule={
                    "frequency": data.frequency,
                    "next_run": self._next_run(data.frequency, now),
                    "cadence_description": data.cadence_description,
                    "distribution_channels": [data.primary_platform, *data.cross_post],
                },
                steps=steps,
                created_at=now,
            )
        except ValidationError as e:
            raise AutomationValidationError(_validation_message(e)) from e

        async with self.store.lock(automation.id):
            self.store.put(automation)

        logger.info(
            "Automation created",
            automation_id=automation.id,
            primary_platform=automation.primary_platform.value,
            steps=len(automation.steps),
        )
        return automation

    def get(self, automation_id: str) -> Automation:
        """Get an automation by id. Raises ``NotFoundError`` if absent."""
        return self.store.get(automation_id)

    def list_automations(self) -> list[Automation]:
        """All automations in creation order."""
        return self.store.list_all()

    async def update(self, automation_id: str, data: AutomationUpdate) -> Automation:
        """Apply a partial update.

        Top-level fields are replaced when provided. ``steps`` replaces the
        whole list; ``schedule`` and ``performance`` merge field by field.
        Changing the frequency without a ``nextRun`` reschedules from now.
        Changing the platforms without explicit distribution channels resets
        them to the primary platform followed by the cross-post targets.

        Raises:
            NotFoundError: If the automation does not exist.
            AutomationValidationError: If the merged automation is invalid.
            ConflictError: If the status is overridden during a run.
        """
        provided = data.model_dump(exclude_unset=True)

        async with self.store.lock(automation_id):
            current = self.store.get(automation_id)
            merged = self._merge(current, provided)

            try:
                updated = Automation.model_validate(merged)
            except ValidationError as e:
                raise AutomationValidationError(_validation_message(e)) from e

            self.store.put(updated)

        logger.info("Automation updated", automation_id=automation_id, fields=sorted(provided))
        return updated

    def _merge(self, current: Automation, provided: dict[str, Any]) -> dict[str, Any]:
        provided = dict(provided)
        merged = current.model_dump()

        status = provided.pop("status", None)
        if status is not None:
            merged["status"] = ensure_override_allowed(current.status, AutomationStatus(status))

        schedule = provided.pop("schedule", None)
        explicit_channels = bool(schedule) and schedule.get("distribution_channels") is not None
        if schedule:
            # cadenceDescription may be cleared; the other schedule fields may not
            for key in ("frequency", "next_run", "distribution_channels"):
                if schedule.get(key) is None:
                    schedule.pop(key, None)
            frequency = schedule.get("frequency")
            if (
                frequency is not None
                and frequency != current.schedule.frequency
                and "next_run" not in schedule
            ):
                schedule["next_run"] = self._next_run(Frequency(frequency), self.clock())
            merged["schedule"].update(schedule)

        performance = provided.pop("performance", None)
        if performance:
            merged["performance"].update(
                {key: value for key, value in performance.items() if value is not None}
            )

        steps = provided.pop("steps", None)
        if steps is not None:
            try:
                merged["steps"] = [
                    step.model_dump() for step in build_steps(steps, current.steps)
                ]
            except ValidationError as e:
                raise AutomationValidationError(_validation_message(e)) from e

        merged.update({key: value for key, value in provided.items() if value is not None})

        platforms_changed = any(
            provided.get(key) is not None for key in ("primary_platform", "cross_post")
        )
        if platforms_changed and not explicit_channels:
            merged["schedule"]["distribution_channels"] = [
                merged["primary_platform"],
                *merged["cross_post"],
            ]
        return merged

    async def delete(self, automation_id: str) -> None:
        """Delete an automation; its run logs stay queryable.

        Raises:
            NotFoundError: If the automation does not exist.
        """
        async with self.store.lock(automation_id):
            self.store.delete(automation_id)
        logger.info("Automation deleted", automation_id=automation_id)

    def list_run_logs(self, automation_id: str | None = None) -> list[AutomationRunLog]:
        """Run logs, most recent first, optionally filtered by automation."""
        return self.store.list_run_logs(automation_id)

    def dashboard(self) -> tuple[list[Automation], DashboardTotals]:
        automations = self.store.list_all()
        return automations, dashboard_totals(automations)
