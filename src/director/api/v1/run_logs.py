"""Run log endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.director.api.dependencies import AutomationServiceDep
from src.director.models import AutomationRunLog

router = APIRouter(prefix="/run-logs", tags=["run-logs"])


@router.get(
    "",
    response_model=list[AutomationRunLog],
    summary="List run logs",
    description="Run logs, most recent first. Logs of deleted automations are included.",
)
async def list_run_logs(
    service: AutomationServiceDep,
    automation_id: Annotated[
        str | None, Query(alias="automationId", description="Only logs for this automation")
    ] = None,
) -> list[AutomationRunLog]:
    return service.list_run_logs(automation_id)
