"""Automation entity and the value objects it owns."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from src.director.models.base import CamelModel, generate_id
from src.director.models.enums import (
    AutomationStatus,
    Frequency,
    Platform,
    StepType,
)


# Longest simulated stage: one week
MAX_STEP_DURATION_MINUTES = 7 * 24 * 60


class Step(CamelModel):
    """One ordered stage of an automation's pipeline.

    ``configuration`` is opaque to the core and passed through verbatim.
    """

    id: str = Field(default_factory=generate_id)
    type: StepType
    title: str
    description: str = ""
    requires_human_review: bool = False
    duration_minutes: float = Field(default=0, ge=0, le=MAX_STEP_DURATION_MINUTES)
    tools: list[str] = Field(default_factory=list)
    configuration: dict[str, Any] = Field(default_factory=dict)


class Schedule(CamelModel):
    frequency: Frequency
    next_run: datetime
    cadence_description: str | None = None
    distribution_channels: list[Platform] = Field(default_factory=list)


class Performance(CamelModel):
    """Cumulative telemetry. Counters only grow during normal operation."""

    views: int = Field(default=0, ge=0)
    watch_time_minutes: int = Field(default=0, ge=0)
    engagements: int = Field(default=0, ge=0)
    conversion_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class Automation(CamelModel):
    """A persona-driven content pipeline."""

    id: str
    name: str
    persona: str
    target_audience: str
    primary_platform: Platform
    cross_post: list[Platform] = Field(default_factory=list)
    status: AutomationStatus = AutomationStatus.IDLE
    schedule: Schedule
    performance: Performance = Field(default_factory=Performance)
    steps: list[Step] = Field(default_factory=list)
    created_at: datetime
    last_run_at: datetime | None = None

    @model_validator(mode="after")
    def check_invariants(self) -> "Automation":
        # Duplicates collapse to their first occurrence
        self.cross_post = list(dict.fromkeys(self.cross_post))
        self.schedule.distribution_channels = list(
            dict.fromkeys(self.schedule.distribution_channels)
        )
        if self.primary_platform in self.cross_post:
            raise ValueError(
                f"crossPost must not contain the primary platform "
                f"'{self.primary_platform.value}'"
            )
        if self.schedule.next_run < self.created_at:
            raise ValueError("schedule.nextRun cannot be earlier than createdAt")
        step_ids = [step.id for step in self.steps]
        if len(step_ids) != len(set(step_ids)):
            raise ValueError("Step ids must be unique within an automation")
        return self
