"""Run log records. Frozen: a log never changes once the engine stores it."""

from datetime import datetime

from pydantic import ConfigDict, Field

from src.director.models.base import CamelModel, generate_id
from src.director.models.enums import RunMessageKind, RunStatus


class RunLogMessage(CamelModel):
    model_config = ConfigDict(frozen=True)

    step_id: str
    timestamp: datetime
    message: str
    kind: RunMessageKind = RunMessageKind.STEP


class AutomationRunLog(CamelModel):
    """One invocation of the run engine."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id)
    automation_id: str
    status: RunStatus
    started_at: datetime
    finished_at: datetime | None = None
    messages: tuple[RunLogMessage, ...] = ()
