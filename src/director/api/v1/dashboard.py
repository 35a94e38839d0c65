"""Dashboard endpoint - aggregate telemetry and per-automation health."""

from fastapi import APIRouter

from src.director.api.dependencies import AutomationServiceDep
from src.director.schemas import AutomationInsight, DashboardSummary
from src.director.services.insights import automation_velocity, health_score

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardSummary,
    summary="Dashboard summary",
    description="Totals across all automations plus derived health and velocity.",
)
async def get_dashboard(service: AutomationServiceDep) -> DashboardSummary:
    automations, totals = service.dashboard()
    return DashboardSummary(
        automation_count=totals.automation_count,
        total_views=totals.total_views,
        total_watch_time_minutes=totals.total_watch_time_minutes,
        total_engagements=totals.total_engagements,
        average_health=totals.average_health,
        automations=[
            AutomationInsight(
                id=automation.id,
                name=automation.name,
                status=automation.status,
                health_score=health_score(automation),
                automation_velocity=automation_velocity(automation),
                next_run=automation.schedule.next_run,
                last_run_at=automation.last_run_at,
            )
            for automation in automations
        ],
    )
