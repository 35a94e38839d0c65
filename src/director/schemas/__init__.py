from src.director.schemas.automation import (
    AutomationCreate,
    AutomationRead,
    AutomationUpdate,
    PerformanceUpdate,
    ScheduleUpdate,
    StepInput,
)
from src.director.schemas.dashboard import AutomationInsight, DashboardSummary

__all__ = [
    # Automation
    "AutomationCreate",
    "AutomationRead",
    "AutomationUpdate",
    "PerformanceUpdate",
    "ScheduleUpdate",
    "StepInput",
    # Dashboard
    "AutomationInsight",
    "DashboardSummary",
]
