"""Dashboard summary schemas."""

from datetime import datetime

from src.director.models import AutomationStatus
from src.director.models.base import CamelModel


class AutomationInsight(CamelModel):
    id: str
    name: str
    status: AutomationStatus
    health_score: int
    automation_velocity: int
    next_run: datetime
    last_run_at: datetime | None


class DashboardSummary(CamelModel):
    """Aggregate telemetry across all automations."""

    automation_count: int
    total_views: int
    total_watch_time_minutes: int
    total_engagements: int
    average_health: int
    automations: list[AutomationInsight]
