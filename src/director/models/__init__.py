"""Model exports.

Import from here: `from src.director.models import Automation, AutomationRunLog`
"""

from src.director.models.automation import Automation, Performance, Schedule, Step
from src.director.models.enums import (
    AutomationStatus,
    Frequency,
    Platform,
    RunMessageKind,
    RunStatus,
    StepType,
)
from src.director.models.run_log import AutomationRunLog, RunLogMessage

__all__ = [
    # Enums
    "AutomationStatus",
    "Frequency",
    "Platform",
    "RunMessageKind",
    "RunStatus",
    "StepType",
    # Entities
    "Automation",
    "AutomationRunLog",
    "Performance",
    "RunLogMessage",
    "Schedule",
    "Step",
]
