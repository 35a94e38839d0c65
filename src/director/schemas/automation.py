"""Automation schemas for API request/response."""

from datetime import UTC, datetime
from typing import Any, Self

from pydantic import ConfigDict, Field, computed_field, field_validator, model_validator

from src.director.models import (
    Automation,
    AutomationStatus,
    Frequency,
    Platform,
    StepType,
)
from src.director.models.automation import MAX_STEP_DURATION_MINUTES
from src.director.models.base import CamelModel
from src.director.services.insights import automation_velocity, health_score


class StepInput(CamelModel):
    """A step as supplied by a client. Omitted fields come from the step catalog."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    id: str | None = None
    type: StepType | None = None
    title: str | None = None
    description: str | None = None
    requires_human_review: bool | None = None
    duration_minutes: float | None = Field(default=None, ge=0, le=MAX_STEP_DURATION_MINUTES)
    tools: list[str] | None = None
    configuration: dict[str, Any] | None = None


class AutomationCreate(CamelModel):
    """Schema for creating an automation."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=3, max_length=200)
    persona: str = Field(min_length=10, max_length=2000)
    target_audience: str = Field(min_length=5, max_length=2000)
    primary_platform: Platform
    cross_post: list[Platform] = Field(default_factory=list)
    frequency: Frequency
    cadence_description: str | None = Field(default=None, max_length=500)
    steps: list[StepInput] | None = None

    @model_validator(mode="after")
    def validate_cross_post(self) -> Self:
        if self.primary_platform in self.cross_post:
            raise ValueError("crossPost must not include the primary platform")
        return self


class ScheduleUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    frequency: Frequency | None = None
    next_run: datetime | None = None
    cadence_description: str | None = Field(default=None, max_length=500)
    distribution_channels: list[Platform] | None = None

    @field_validator("next_run")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class PerformanceUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    views: int | None = Field(default=None, ge=0)
    watch_time_minutes: int | None = Field(default=None, ge=0)
    engagements: int | None = Field(default=None, ge=0)
    conversion_rate: float | None = Field(default=None, ge=0.0, le=1.0)


class AutomationUpdate(CamelModel):
    """Schema for a partial update. Only fields the client sends are applied."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=200)
    persona: str | None = Field(default=None, min_length=1, max_length=2000)
    target_audience: str | None = Field(default=None, min_length=1, max_length=2000)
    primary_platform: Platform | None = None
    cross_post: list[Platform] | None = None
    status: AutomationStatus | None = None
    schedule: ScheduleUpdate | None = None
    performance: PerformanceUpdate | None = None
    steps: list[StepInput] | None = None


class AutomationRead(Automation):
    """Automation as returned to the dashboard, with read-only derived metrics."""

    @computed_field(alias="healthScore")  # type: ignore[prop-decorator]
    @property
    def health_score(self) -> int:
        return health_score(self)

    @computed_field(alias="automationVelocity")  # type: ignore[prop-decorator]
    @property
    def automation_velocity(self) -> int:
        return automation_velocity(self)

    @classmethod
    def from_entity(cls, automation: Automation) -> Self:
        return cls.model_validate(automation.model_dump())
