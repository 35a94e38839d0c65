"""Automation endpoints - lifecycle CRUD and run triggering."""

from fastapi import APIRouter, status

from src.director.api.dependencies import AutomationServiceDep, RunEngineDep
from src.director.models import AutomationRunLog
from src.director.schemas import AutomationCreate, AutomationRead, AutomationUpdate

router = APIRouter(prefix="/automations", tags=["automations"])


@router.get(
    "",
    response_model=list[AutomationRead],
    summary="List automations",
    description="List all automations in creation order.",
)
async def list_automations(service: AutomationServiceDep) -> list[AutomationRead]:
    """List all automations."""
    return [AutomationRead.from_entity(a) for a in service.list_automations()]


@router.post(
    "",
    response_model=AutomationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create automation",
    description="Create an automation in idle status, scheduled one cadence from now.",
    responses={
        201: {"description": "Automation created"},
        400: {"description": "Invalid payload"},
    },
)
async def create_automation(
    request: AutomationCreate,
    service: AutomationServiceDep,
) -> AutomationRead:
    """Create a new automation."""
    automation = await service.create(request)
    return AutomationRead.from_entity(automation)


@router.get(
    "/{automation_id}",
    response_model=AutomationRead,
    summary="Get automation",
    responses={
        200: {"description": "Automation details"},
        404: {"description": "Automation not found"},
    },
)
async def get_automation(automation_id: str, service: AutomationServiceDep) -> AutomationRead:
    """Get an automation by ID."""
    return AutomationRead.from_entity(service.get(automation_id))


@router.api_route(
    "/{automation_id}",
    methods=["PATCH", "PUT"],
    response_model=AutomationRead,
    summary="Update automation",
    description=(
        "Partially update an automation. A provided steps array replaces the "
        "step list; schedule and performance merge field by field."
    ),
    responses={
        200: {"description": "Automation updated"},
        400: {"description": "Invalid payload"},
        404: {"description": "Automation not found"},
        409: {"description": "Status cannot be changed while running"},
    },
)
async def update_automation(
    automation_id: str,
    request: AutomationUpdate,
    service: AutomationServiceDep,
) -> AutomationRead:
    """Update an existing automation."""
    automation = await service.update(automation_id, request)
    return AutomationRead.from_entity(automation)


@router.delete(
    "/{automation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete automation",
    description="Delete an automation. Its run logs remain available.",
    responses={
        204: {"description": "Automation deleted"},
        404: {"description": "Automation not found"},
    },
)
async def delete_automation(automation_id: str, service: AutomationServiceDep) -> None:
    """Delete an automation."""
    await service.delete(automation_id)


@router.post(
    "/{automation_id}/run",
    response_model=AutomationRunLog,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Run automation",
    description=(
        "Simulate one run of the automation's steps. A failed pipeline still "
        "returns 202 with a failed run log."
    ),
    responses={
        202: {"description": "Run log"},
        404: {"description": "Automation not found"},
        409: {"description": "Automation is already running"},
    },
)
async def run_automation(automation_id: str, engine: RunEngineDep) -> AutomationRunLog:
    """Run an automation."""
    return await engine.run(automation_id)
